"""Integration tests for frontier.api.main: FastAPI REST API endpoints.

All tests use the FastAPI TestClient with an ``httpx.MockTransport`` standing
in for Venice and OpenSea, so no real network access occurs.  Tests cover
every endpoint:

- ``GET /api/config``: Public configuration.
- ``GET /api/health``: Venice availability.
- ``GET /api/models``: Image model listing.
- ``POST /api/generate``: Generate and normalize.
- ``POST /api/mint/prepare``: Mint call description.
- ``GET /api/opensea/bid``: Highest offer.
- ``GET /api/opensea/nft``: NFT details.
- ``GET /api/opensea/collections/{slug}/stats``: Collection stats.
"""

from __future__ import annotations

import base64
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from frontier.api.main import create_app

CONTRACT = "0x1234567890123456789012345678901234567890"


class FakeUpstream:
    """Routes outbound requests to canned Venice and OpenSea responses.

    Tests replace individual attributes to simulate failures.
    """

    def __init__(self, image_base64: str):
        self.requests: list[httpx.Request] = []
        self.generation = httpx.Response(200, json={"data": [{"b64_json": image_base64}], "seed": 11})
        self.models = httpx.Response(
            200, json={"data": [{"id": "fluently-xl", "type": "image"}, {"id": "llama", "type": "text"}]}
        )
        self.offers = httpx.Response(
            200,
            json={
                "orders": [
                    {"price": {"current": {"value": "500000000000000000", "decimals": 18, "currency": "WETH"}}}
                ]
            },
        )
        self.nft = httpx.Response(200, json={"nft": {"identifier": "1"}})
        self.stats = httpx.Response(200, json={"total": {"volume": 2.5}})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.endswith("/images/generations"):
            return self._reply(self.generation, request)
        if path.endswith("/models"):
            return self._reply(self.models, request)
        if path.endswith("/seaport/offers"):
            return self._reply(self.offers, request)
        if "/nfts/" in path:
            return self._reply(self.nft, request)
        if path.endswith("/stats"):
            return self._reply(self.stats, request)
        return httpx.Response(404)

    @staticmethod
    def _reply(response, request):
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def upstream(photo_png_base64: str) -> FakeUpstream:
    return FakeUpstream(photo_png_base64)


@pytest.fixture
def test_client(test_config, upstream, ledger):
    """TestClient over an app whose outbound HTTP hits ``upstream``."""
    app = create_app(test_config, transport=httpx.MockTransport(upstream), backend=ledger)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def keyless_client(test_config, upstream):
    """TestClient over an app with no Venice API key."""
    cfg = test_config.model_copy(update={"venice_api_key": None})
    with TestClient(create_app(cfg, transport=httpx.MockTransport(upstream))) as client:
        yield client


# ---------------------------------------------------------------------------
# Configuration and health.
# ---------------------------------------------------------------------------


class TestGetConfig:
    """Test GET /api/config: public configuration."""

    def test_config_fields(self, test_client):
        """Chain, contract, fees and image settings are exposed."""
        resp = test_client.get("/api/config")
        assert resp.status_code == 200
        data = resp.json()
        assert data["chain_id"] == 84532
        assert data["contract_address"] == CONTRACT
        assert data["mint_fee"] == "300000000000000"
        assert data["generate_fee"] == "30000000000000"
        assert data["default_model"] == "fluently-xl"
        assert data["onchain_image"] == {"size": 128, "format": "jpeg", "quality": 70}
        assert "version" in data

    def test_unknown_chain_has_null_contract(self, test_config, upstream):
        """An unknown deployment reports a null address."""
        cfg = test_config.model_copy(update={"contract_address": None, "chain_id": 1})
        with TestClient(create_app(cfg, transport=httpx.MockTransport(upstream))) as client:
            assert client.get("/api/config").json()["contract_address"] is None


class TestHealth:
    """Test GET /api/health."""

    def test_healthy(self, test_client):
        """Venice answering 2xx means healthy."""
        assert test_client.get("/api/health").json() == {"venice": True}

    def test_unhealthy(self, test_client, upstream):
        """Venice answering 401 means unhealthy."""
        upstream.models = httpx.Response(401)
        assert test_client.get("/api/health").json() == {"venice": False}

    def test_no_key(self, keyless_client, upstream):
        """Without a key no request is made."""
        assert keyless_client.get("/api/health").json() == {"venice": False}
        assert upstream.requests == []


class TestModels:
    """Test GET /api/models."""

    def test_lists_image_models(self, test_client):
        """Only image models are listed."""
        assert test_client.get("/api/models").json() == {"models": ["fluently-xl"]}

    def test_upstream_failure(self, test_client, upstream):
        """A Venice error status is passed through."""
        upstream.models = httpx.Response(503)
        resp = test_client.get("/api/models")
        assert resp.status_code == 503
        assert resp.json()["detail"] == "Failed to fetch models"

    def test_no_key(self, keyless_client):
        """Without a key the endpoint fails with 500."""
        assert keyless_client.get("/api/models").status_code == 500


# ---------------------------------------------------------------------------
# Generation and minting.
# ---------------------------------------------------------------------------


class TestGenerate:
    """Test POST /api/generate."""

    def test_generate_success(self, test_client, upstream, photo_png):
        """A valid prompt returns a 128x128 JPEG."""
        resp = test_client.post("/api/generate", json={"prompt": "A cosmic dragon flying through space"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["format"] == "jpeg"
        assert (data["width"], data["height"]) == (128, 128)
        assert base64.b64decode(data["image_base64"])[:2] == b"\xff\xd8"
        assert data["source_byte_length"] == len(photo_png)
        assert data["byte_length"] < data["source_byte_length"]
        assert data["seed"] == 11
        assert data["model"] == "fluently-xl"

        sent = json.loads(upstream.requests[0].content)
        assert sent["size"] == "256x256"
        assert sent["prompt"] == "A cosmic dragon flying through space"

    def test_model_override(self, test_client, upstream):
        """The requested model is forwarded."""
        resp = test_client.post("/api/generate", json={"prompt": "p", "model": "sd-xl"})
        assert resp.status_code == 200
        assert json.loads(upstream.requests[0].content)["model"] == "sd-xl"

    @pytest.mark.parametrize(
        "payload,detail",
        [
            ({}, "Prompt is required and must be a string"),
            ({"prompt": 5}, "Prompt is required and must be a string"),
            ({"prompt": "   "}, "Prompt cannot be empty"),
            ({"prompt": "a" * 1001}, "Prompt must be 1000 characters or less"),
        ],
    )
    def test_invalid_prompt(self, test_client, upstream, payload, detail):
        """Invalid prompts are rejected with 400 before any upstream call."""
        resp = test_client.post("/api/generate", json=payload)
        assert resp.status_code == 400
        assert resp.json()["detail"] == detail
        assert upstream.requests == []

    def test_no_key(self, keyless_client):
        """Without a key generation fails with 500."""
        resp = keyless_client.post("/api/generate", json={"prompt": "p"})
        assert resp.status_code == 500
        assert resp.json()["detail"] == "Image generation service not configured"

    def test_upstream_error_status(self, test_client, upstream):
        """Venice's status and message are passed through."""
        upstream.generation = httpx.Response(
            429, json={"error": {"message": "Rate limit exceeded", "code": "RATE_LIMIT"}}
        )
        resp = test_client.post("/api/generate", json={"prompt": "p"})
        assert resp.status_code == 429
        assert resp.json()["detail"] == "Rate limit exceeded"

    def test_no_image(self, test_client, upstream):
        """An empty result is a 500."""
        upstream.generation = httpx.Response(200, json={"data": []})
        resp = test_client.post("/api/generate", json={"prompt": "p"})
        assert resp.status_code == 500
        assert resp.json()["detail"] == "No image generated"

    def test_undecodable_image(self, test_client, upstream):
        """Image bytes Pillow cannot open are an upstream fault, not a 400."""
        garbage = base64.b64encode(b"<html>oops</html>").decode("ascii")
        upstream.generation = httpx.Response(200, json={"data": [{"b64_json": garbage}]})
        resp = test_client.post("/api/generate", json={"prompt": "p"})
        assert resp.status_code == 502
        assert resp.json()["detail"] == "Generated image could not be decoded"

    def test_non_json_body(self, test_client, upstream):
        """A 2xx gateway page instead of JSON is a 502."""
        upstream.generation = httpx.Response(200, text="<html>gateway</html>")
        resp = test_client.post("/api/generate", json={"prompt": "p"})
        assert resp.status_code == 502
        assert resp.json()["detail"] == "Invalid response from image generation service"

    def test_unreachable(self, test_client, upstream):
        """A transport failure is a 502."""
        upstream.generation = httpx.ConnectError("refused")
        resp = test_client.post("/api/generate", json={"prompt": "p"})
        assert resp.status_code == 502
        assert resp.json()["detail"] == "Failed to generate image"


class TestMintPrepare:
    """Test POST /api/mint/prepare."""

    def test_prepare(self, test_client, tiny_png_base64):
        """The payable call is described with the fee as a string."""
        resp = test_client.post(
            "/api/mint/prepare",
            json={"prompt": "A nebula", "image_base64": tiny_png_base64, "ai_model": "fluently-xl"},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["contract_address"] == CONTRACT
        assert data["chain_id"] == 84532
        assert data["function"] == "mint(string,string,string)"
        assert data["args"] == ["A nebula", tiny_png_base64, "fluently-xl"]
        assert data["value"] == "300000000000000"
        assert data["estimated_gas"] == len(tiny_png_base64) * 100

    def test_empty_image(self, test_client):
        """An empty image is a 400."""
        resp = test_client.post("/api/mint/prepare", json={"prompt": "p", "ai_model": "m"})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Image payload cannot be empty"

    def test_missing_ai_model(self, test_client):
        """ai_model is required by the schema."""
        resp = test_client.post("/api/mint/prepare", json={"prompt": "p", "image_base64": "AAAA"})
        assert resp.status_code == 422


# ---------------------------------------------------------------------------
# OpenSea read proxy.
# ---------------------------------------------------------------------------


class TestOpenSeaBid:
    """Test GET /api/opensea/bid."""

    def test_bid_with_price(self, test_client, upstream):
        """The best offer is returned with a formatted price."""
        resp = test_client.get("/api/opensea/bid", params={"contract": CONTRACT, "tokenId": "1"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["formatted_price"] == "0.500000 WETH"
        assert data["bid"]["price"]["current"]["currency"] == "WETH"
        assert upstream.requests[0].url.host == "api.opensea.io"

    def test_testnet_chain(self, test_client, upstream):
        """chain=base_sepolia uses the testnet host."""
        test_client.get(
            "/api/opensea/bid", params={"contract": CONTRACT, "tokenId": "1", "chain": "base_sepolia"}
        )
        assert upstream.requests[0].url.host == "testnets-api.opensea.io"

    def test_no_offers(self, test_client, upstream):
        """No orders gives null bid and price."""
        upstream.offers = httpx.Response(200, json={"orders": []})
        data = test_client.get("/api/opensea/bid", params={"contract": CONTRACT, "tokenId": "1"}).json()
        assert data == {"bid": None, "formatted_price": None}

    def test_missing_params(self, test_client):
        """contract and tokenId are required."""
        resp = test_client.get("/api/opensea/bid", params={"contract": CONTRACT})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Missing contract address or token ID"

    def test_unknown_chain(self, test_client):
        """Unsupported chains fail schema validation."""
        resp = test_client.get(
            "/api/opensea/bid", params={"contract": CONTRACT, "tokenId": "1", "chain": "ethereum"}
        )
        assert resp.status_code == 422

    def test_upstream_error_is_soft(self, test_client, upstream):
        """Marketplace failures return 200 with a null bid."""
        upstream.offers = httpx.Response(500)
        resp = test_client.get("/api/opensea/bid", params={"contract": CONTRACT, "tokenId": "1"})
        assert resp.status_code == 200
        assert resp.json() == {"error": "Failed to fetch bid", "bid": None, "formatted_price": None}

    def test_network_error_is_soft(self, test_client, upstream):
        """Transport failures are soft as well."""
        upstream.offers = httpx.ConnectError("down")
        resp = test_client.get("/api/opensea/bid", params={"contract": CONTRACT, "tokenId": "1"})
        assert resp.status_code == 200
        assert resp.json()["bid"] is None


class TestOpenSeaNft:
    """Test GET /api/opensea/nft."""

    def test_nft(self, test_client):
        """NFT details are unwrapped."""
        data = test_client.get("/api/opensea/nft", params={"contract": CONTRACT, "tokenId": "1"}).json()
        assert data == {"nft": {"identifier": "1"}}

    def test_not_found(self, test_client, upstream):
        """A 404 gives a null nft without an error."""
        upstream.nft = httpx.Response(404)
        data = test_client.get("/api/opensea/nft", params={"contract": CONTRACT, "tokenId": "1"}).json()
        assert data == {"nft": None}

    def test_error(self, test_client, upstream):
        """Failures are reported softly."""
        upstream.nft = httpx.Response(500)
        data = test_client.get("/api/opensea/nft", params={"contract": CONTRACT, "tokenId": "1"}).json()
        assert data["nft"] is None
        assert data["error"] == "Failed to fetch NFT details"

    def test_missing_params(self, test_client):
        """tokenId is required."""
        assert test_client.get("/api/opensea/nft", params={"contract": CONTRACT}).status_code == 400


class TestCollectionStats:
    """Test GET /api/opensea/collections/{slug}/stats."""

    def test_stats(self, test_client, upstream):
        """Stats are proxied from the mainnet host."""
        data = test_client.get("/api/opensea/collections/infinite-frontier/stats").json()
        assert data == {"stats": {"total": {"volume": 2.5}}}
        assert upstream.requests[0].url.path == "/api/v2/collections/infinite-frontier/stats"

    def test_error(self, test_client, upstream):
        """Failures are reported softly."""
        upstream.stats = httpx.Response(429)
        data = test_client.get("/api/opensea/collections/x/stats").json()
        assert data == {"error": "Failed to fetch collection stats", "stats": None}

    def test_unknown_collection(self, test_client, upstream):
        """A 404 gives null stats without an error."""
        upstream.stats = httpx.Response(404)
        data = test_client.get("/api/opensea/collections/no-such-slug/stats").json()
        assert data == {"stats": None}
