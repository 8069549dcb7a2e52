"""Infinite Frontier FastAPI Application.

This module defines the application factory, all REST API routes, and the
``main()`` CLI function that launches the uvicorn server.

Architecture
------------
The application is stateless apart from one shared HTTP connection pool:

- **Configuration** is a :class:`~frontier.core.config.FrontierConfig`
  passed to :func:`create_app` (loaded from ``FRONTIER_*`` variables by
  default).
- **Image generation** goes through
  :class:`~frontier.venice.client.VeniceClient`, which validates the prompt,
  calls Venice once and normalizes the result for on-chain storage.
- **Minting** is signed by the user's wallet; the server only prepares the
  payable ``mint`` call via :class:`~frontier.chain.submission.MintSubmitter`.
- **Marketplace data** is proxied read-only through
  :class:`~frontier.opensea.client.OpenSeaClient`.

Endpoints
---------
========  =========================================  =================================
Method    Path                                       Purpose
========  =========================================  =================================
GET       ``/api/config``                            Chain, contract, fees, image size
GET       ``/api/health``                            Venice availability
GET       ``/api/models``                            Image-capable Venice models
POST      ``/api/generate``                          Generate and normalize an image
POST      ``/api/mint/prepare``                      Describe the payable mint call
GET       ``/api/opensea/bid``                       Highest offer on a token
GET       ``/api/opensea/nft``                       OpenSea view of a token
GET       ``/api/opensea/collections/{slug}/stats``  Collection statistics
========  =========================================  =================================

Usage
-----
CLI (installed entry point)::

    frontier

Direct invocation::

    python -m frontier.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from frontier import __version__
from frontier.api.models import GenerateRequest, GenerateResponse, MintPrepareRequest
from frontier.chain.submission import ContractBackend, MintSubmitter
from frontier.core.config import FrontierConfig
from frontier.core.errors import ErrorKind, ServiceError
from frontier.core.validation import validate_prompt
from frontier.opensea.client import ChainTag, OpenSeaClient, format_offer_price
from frontier.venice.client import VeniceClient

logger = logging.getLogger(__name__)


def _error_status(error: ServiceError) -> int:
    """HTTP status to report for a ServiceError."""
    if error.kind is ErrorKind.VALIDATION:
        return 400
    if error.status and 400 <= error.status <= 599:
        return error.status
    return 500


def create_app(
    app_config: FrontierConfig | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    backend: ContractBackend | None = None,
) -> FastAPI:
    """Build the FastAPI application around one configuration.

    Args:
        app_config: Configuration to use.  Defaults to a fresh
            ``FrontierConfig()`` loaded from the environment.
        transport: Optional httpx transport for outbound calls (tests pass
            an ``httpx.MockTransport``).
        backend: Optional contract backend for the mint submitter.

    Returns:
        The configured FastAPI application.
    """
    cfg = app_config or FrontierConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Open the shared HTTP client on startup and close it on shutdown."""
        http_client = httpx.AsyncClient(timeout=cfg.http_timeout, transport=transport)
        app.state.venice = VeniceClient(cfg, http_client)
        app.state.opensea = OpenSeaClient(cfg, http_client)
        app.state.submitter = MintSubmitter(cfg, backend)
        logger.info(f"Infinite Frontier API started (chain_id={cfg.chain_id})")

        yield

        await http_client.aclose()
        logger.info("HTTP client closed on shutdown.")

    app = FastAPI(
        title="Infinite Frontier",
        description="AI image generation and on-chain minting on Base.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = cfg

    # The frontend is served separately during development.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -----------------------------------------------------------------------
    # Configuration and health.
    # -----------------------------------------------------------------------

    @app.get("/api/config")
    async def get_config() -> dict:
        """Return the public configuration the frontend needs to mint.

        Fees are returned as decimal strings because wei amounts exceed the
        safe integer range of JavaScript numbers.
        """
        try:
            contract_address = cfg.resolve_contract_address()
        except ValueError:
            contract_address = None

        return {
            "version": __version__,
            "chain_id": cfg.chain_id,
            "contract_address": contract_address,
            "generate_fee": str(cfg.generate_fee_wei),
            "mint_fee": str(cfg.mint_fee_wei),
            "default_model": cfg.default_image_model,
            "onchain_image": {
                "size": cfg.onchain_image_size,
                "format": cfg.onchain_image_format,
                "quality": cfg.onchain_image_quality,
            },
        }

    @app.get("/api/health")
    async def health() -> dict:
        """Report whether the Venice API answers with the configured key."""
        if not cfg.venice_api_key:
            return {"venice": False}
        venice: VeniceClient = app.state.venice
        return {"venice": await venice.check_health(cfg.venice_api_key)}

    @app.get("/api/models")
    async def list_models() -> dict:
        """List image-capable Venice models.

        Raises:
            HTTPException: 500 if no API key is configured, or the Venice
                status when the models call fails.
        """
        if not cfg.venice_api_key:
            raise HTTPException(status_code=500, detail="Image generation service not configured")

        venice: VeniceClient = app.state.venice
        try:
            models = await venice.list_image_models(cfg.venice_api_key)
        except ServiceError as e:
            raise HTTPException(status_code=_error_status(e), detail=e.message) from e
        return {"models": models}

    # -----------------------------------------------------------------------
    # Generation and minting.
    # -----------------------------------------------------------------------

    @app.post("/api/generate", response_model=GenerateResponse)
    async def generate(req: GenerateRequest) -> GenerateResponse:
        """Generate an image and normalize it for on-chain storage.

        This endpoint:

        1. Validates the prompt (before any network call).
        2. Generates one image at Venice's minimum canvas.
        3. Resizes and re-encodes it to the on-chain size and format.

        Raises:
            HTTPException: 400 for an invalid prompt, 500 when no API key is
                configured, the Venice status for generation errors and 502
                when Venice cannot be reached.
        """
        try:
            validate_prompt(req.prompt)
        except ServiceError as e:
            logger.warning(f"Rejected prompt: {e.code}")
            raise HTTPException(status_code=400, detail=e.message) from e

        if not cfg.venice_api_key:
            logger.error("FRONTIER_VENICE_API_KEY not configured")
            raise HTTPException(status_code=500, detail="Image generation service not configured")

        venice: VeniceClient = app.state.venice
        try:
            result = await venice.generate_for_onchain(req.prompt, cfg.venice_api_key, model=req.model)
        except ServiceError as e:
            logger.warning(f"Image generation failed: {e!r}")
            raise HTTPException(status_code=_error_status(e), detail=e.message) from e
        except httpx.TransportError as e:
            logger.error(f"Image generation service unreachable: {e}", exc_info=True)
            raise HTTPException(status_code=502, detail="Failed to generate image") from e

        return GenerateResponse(
            image_base64=result.image.base64,
            format=result.image.format,
            byte_length=result.image.byte_length,
            width=result.image.width,
            height=result.image.height,
            source_byte_length=result.source_byte_length,
            prompt=result.prompt,
            model=result.model,
            seed=result.seed,
        )

    @app.post("/api/mint/prepare")
    async def prepare_mint(req: MintPrepareRequest) -> dict:
        """Describe the payable ``mint`` call for the wallet to sign.

        Raises:
            HTTPException: 400 for an invalid prompt or empty image, 500 if
                no contract address is known for the configured chain.
        """
        submitter: MintSubmitter = app.state.submitter
        try:
            call = submitter.build_mint_call(req.prompt, req.image_base64, req.ai_model)
        except ServiceError as e:
            raise HTTPException(status_code=400, detail=e.message) from e
        except ValueError as e:
            raise HTTPException(status_code=500, detail=str(e)) from e
        return call.to_dict()

    # -----------------------------------------------------------------------
    # OpenSea read proxy.
    #
    # Marketplace failures return 200 with a null payload.
    # -----------------------------------------------------------------------

    @app.get("/api/opensea/bid")
    async def get_bid(
        contract: str | None = None,
        token_id: str | None = Query(default=None, alias="tokenId"),
        chain: ChainTag = ChainTag.BASE,
    ) -> dict:
        """Return the highest offer on a token with a formatted price."""
        if not contract or not token_id:
            raise HTTPException(status_code=400, detail="Missing contract address or token ID")

        opensea: OpenSeaClient = app.state.opensea
        try:
            bid = await opensea.get_highest_offer(contract, token_id, chain)
        except ServiceError as e:
            logger.warning(f"OpenSea bid fetch error: {e!r}")
            return {"error": "Failed to fetch bid", "bid": None, "formatted_price": None}

        formatted = None
        if bid is not None:
            try:
                formatted = format_offer_price(bid)
            except (KeyError, TypeError, ValueError):
                logger.warning("OpenSea offer has no readable price")

        return {"bid": bid, "formatted_price": formatted}

    @app.get("/api/opensea/nft")
    async def get_nft(
        contract: str | None = None,
        token_id: str | None = Query(default=None, alias="tokenId"),
        chain: ChainTag = ChainTag.BASE,
    ) -> dict:
        """Return OpenSea's details for a token."""
        if not contract or not token_id:
            raise HTTPException(status_code=400, detail="Missing contract address or token ID")

        opensea: OpenSeaClient = app.state.opensea
        try:
            nft = await opensea.get_asset_details(contract, token_id, chain)
        except ServiceError as e:
            logger.warning(f"OpenSea NFT fetch error: {e!r}")
            return {"error": "Failed to fetch NFT details", "nft": None}
        return {"nft": nft}

    @app.get("/api/opensea/collections/{slug}/stats")
    async def get_stats(slug: str) -> dict:
        """Return OpenSea statistics for a collection."""
        opensea: OpenSeaClient = app.state.opensea
        try:
            stats = await opensea.get_collection_stats(slug)
        except ServiceError as e:
            logger.warning(f"OpenSea stats fetch error: {e!r}")
            return {"error": "Failed to fetch collection stats", "stats": None}
        return {"stats": stats}

    return app


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host, port and log level from ``FRONTIER_SERVER_HOST``,
    ``FRONTIER_SERVER_PORT`` and ``FRONTIER_LOG_LEVEL``.  Defaults to
    ``0.0.0.0:8000``.

    This function is registered as the ``frontier`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    cfg = FrontierConfig()
    logging.basicConfig(
        level=cfg.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    uvicorn.run(
        create_app(cfg),
        host=cfg.server_host,
        port=cfg.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
