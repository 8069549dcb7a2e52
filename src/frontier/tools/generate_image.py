"""Generate a test image with Venice AI and save it to disk.

Runs the same generate -> normalize pipeline the API uses and writes both
the original Venice image and the normalized on-chain version, printing the
size reduction and a rough gas estimate.

Usage::

    frontier-generate "A cosmic dragon flying through nebula clouds"
    frontier-generate --output-dir out/ --model fluently-xl "A crystal in space"

Requires ``FRONTIER_VENICE_API_KEY`` in the environment or ``.env``.
"""

from __future__ import annotations

import argparse
import asyncio
import base64
import logging
import sys
from pathlib import Path

import httpx

from frontier.chain.submission import estimate_mint_gas
from frontier.core.config import FrontierConfig
from frontier.core.errors import ServiceError
from frontier.core.models import GenerationRequest
from frontier.core.validation import validate_prompt
from frontier.imaging.normalizer import decode_base64_image, normalize_image
from frontier.venice.client import VeniceClient

logger = logging.getLogger(__name__)

DEFAULT_PROMPT = "A cosmic dragon flying through nebula clouds, highly detailed, fantasy art"


def create_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate an image with Venice AI and normalize it for on-chain storage",
    )
    parser.add_argument("prompt", nargs="?", default=DEFAULT_PROMPT, help="Image prompt")
    parser.add_argument("--model", default=None, help="Venice model identifier")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("."),
        help="Directory for the original and normalized images",
    )
    parser.add_argument("--seed", type=int, default=None, help="Generation seed")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


async def run(
    args: argparse.Namespace,
    config: FrontierConfig,
    http_client: httpx.AsyncClient | None = None,
) -> int:
    """Generate, normalize and save.  Returns a process exit code."""
    if not config.venice_api_key:
        print("❌ FRONTIER_VENICE_API_KEY environment variable is required")
        return 1

    try:
        validate_prompt(args.prompt)
    except ServiceError as e:
        print(f"❌ {e.message}")
        return 1

    size = config.venice_min_size
    print("🎨 Generating image with Venice AI...")
    print(f"   Model: {args.model or config.default_image_model}")
    print(f'   Prompt: "{args.prompt}"')
    print(f"   Size: {size}x{size}\n")

    async with VeniceClient(config, http_client) as client:
        try:
            result = await client.generate_image(
                GenerationRequest(
                    prompt=args.prompt,
                    width=size,
                    height=size,
                    seed=args.seed,
                    model=args.model,
                ),
                config.venice_api_key,
            )
        except ServiceError as e:
            print(f"❌ Venice API error ({e.status}, {e.code}): {e.message}")
            return 1
        except httpx.TransportError as e:
            print(f"❌ Could not reach Venice: {e}")
            return 1

    first = result.first_image
    if first is None or not first.base64:
        print("❌ No image returned from API")
        return 1

    target = config.onchain_image_size
    try:
        original = decode_base64_image(first.base64)
        normalized = normalize_image(
            first.base64,
            target,
            target,
            config.onchain_image_format,
            quality=config.onchain_image_quality,
        )
    except ServiceError as e:
        print(f"❌ Could not decode the generated image: {e.message}")
        return 1

    args.output_dir.mkdir(parents=True, exist_ok=True)
    original_path = args.output_dir / "generated-image-original.png"
    normalized_path = args.output_dir / f"generated-image-onchain.{normalized.format}"
    original_path.write_bytes(original)
    normalized_path.write_bytes(base64.b64decode(normalized.base64))

    reduction = round((1 - len(normalized.base64) / len(first.base64)) * 100)
    print("✅ Image generated successfully!")
    print(f"   Model used: {result.model}")
    print(f"   Seed: {result.seed}")
    print(f"   Original: {len(original)} bytes -> {original_path}")
    print(f"   On-chain: {normalized.byte_length} bytes ({target}x{target} {normalized.format}) -> {normalized_path}")
    print(f"   Reduction: {reduction}%")
    print(f"   Estimated mint gas: ~{estimate_mint_gas(normalized.base64) / 1_000_000:.2f}M")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = create_argument_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(run(args, FrontierConfig()))


if __name__ == "__main__":
    sys.exit(main())
