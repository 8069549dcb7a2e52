"""Shared pytest fixtures for Infinite Frontier tests."""

import base64
import io
import random
from typing import Callable

import httpx
import pytest
from PIL import Image

from frontier.chain.contract import InfiniteFrontierLedger
from frontier.core.config import FrontierConfig


@pytest.fixture
def tiny_png_base64() -> str:
    """1x1 PNG used wherever the image content does not matter."""
    return "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8z8DwHwAFBQIAX8jx0gAAAABJRU5ErkJggg=="


def make_photo_png(width: int = 256, height: int = 256, seed: int = 7) -> bytes:
    """Build a PNG with smooth gradients plus sensor-like noise.

    The mix of low-frequency colour and high-frequency noise behaves like
    photographic content: PNG compresses it poorly, JPEG well.
    """
    rng = random.Random(seed)
    pixels = bytearray()
    for y in range(height):
        for x in range(width):
            r = (x * 255) // max(width - 1, 1)
            g = (y * 255) // max(height - 1, 1)
            b = ((x + y) * 255) // max(width + height - 2, 1)
            pixels.extend(
                max(0, min(255, c + rng.randint(-24, 24))) for c in (r, g, b)
            )
    image = Image.frombytes("RGB", (width, height), bytes(pixels))
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def test_config() -> FrontierConfig:
    """Create a configuration isolated from the developer's .env file.

    Returns:
        FrontierConfig with test credentials and default endpoints
    """
    return FrontierConfig(
        _env_file=None,
        venice_api_key="test-venice-key",
        venice_api_base="https://api.venice.ai/api/v1",
        opensea_api_key=None,
        opensea_api_base="https://api.opensea.io/api/v2",
        opensea_testnet_api_base="https://testnets-api.opensea.io/api/v2",
        chain_id=84532,
        contract_address="0x1234567890123456789012345678901234567890",
        default_image_model="fluently-xl",
    )


@pytest.fixture
def photo_png_factory() -> Callable[..., bytes]:
    """Factory building photographic-style PNGs of any size."""
    return make_photo_png


@pytest.fixture
def photo_png() -> bytes:
    """A 256x256 photographic-style PNG."""
    return make_photo_png()


@pytest.fixture
def photo_png_base64(photo_png: bytes) -> str:
    """The 256x256 photographic-style PNG, base64 encoded."""
    return base64.b64encode(photo_png).decode("ascii")


@pytest.fixture
def mock_http() -> Callable:
    """Factory for AsyncClients backed by ``httpx.MockTransport``.

    The factory takes a handler ``(httpx.Request) -> httpx.Response`` and
    returns ``(client, requests)`` where ``requests`` records every request
    the client sent.
    """

    def factory(handler):
        requests: list[httpx.Request] = []

        def recording(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(recording))
        return client, requests

    return factory


@pytest.fixture
def accounts() -> dict[str, str]:
    """Addresses used as transaction senders."""
    return {
        "owner": "0x00000000000000000000000000000000000000a1",
        "user1": "0x00000000000000000000000000000000000000b2",
        "user2": "0x00000000000000000000000000000000000000c3",
    }


@pytest.fixture
def ledger(accounts: dict[str, str]) -> InfiniteFrontierLedger:
    """A fresh contract ledger with the deployment fees and a fixed clock."""
    return InfiniteFrontierLedger(
        accounts["owner"],
        generate_fee=30_000_000_000_000,
        mint_fee=300_000_000_000_000,
        clock=lambda: 1_700_000_000,
    )
