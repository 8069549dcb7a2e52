"""OpenSea marketplace read proxy.

Stateless, read-only lookups against the OpenSea v2 API.  The rules are the
same for every call:

- HTTP 404 means "nothing found" and returns ``None``
- any other non-2xx status raises a ``marketplace`` :class:`ServiceError`
  carrying the HTTP status
- transport failures are wrapped into the same error with status 0
- nothing is retried

Chains
------
Two chain tags are supported, each with its own API host:

==================  ==========================================
``base``            ``https://api.opensea.io/api/v2``
``base_sepolia``    ``https://testnets-api.opensea.io/api/v2``
==================  ==========================================
"""

from __future__ import annotations

import logging
from enum import Enum

import httpx

from frontier.core.config import BASE_MAINNET_CHAIN_ID, FrontierConfig
from frontier.core.errors import ServiceError

logger = logging.getLogger(__name__)

PRICE_FRACTION_DIGITS = 6


class ChainTag(str, Enum):
    """OpenSea chain identifiers."""

    BASE = "base"
    BASE_SEPOLIA = "base_sepolia"


def chain_for_chain_id(chain_id: int) -> ChainTag:
    """Map a numeric chain id to its OpenSea chain tag.

    Base mainnet maps to ``base``; every other chain (Base Sepolia, local
    hardhat) is treated as the test network.
    """
    return ChainTag.BASE if chain_id == BASE_MAINNET_CHAIN_ID else ChainTag.BASE_SEPOLIA


def format_price(value: int | str, decimals: int, currency: str) -> str:
    """Render an integer amount with exactly six fractional digits.

    Uses integer arithmetic only, so large wei values never lose precision.
    Digits beyond the sixth are truncated, not rounded.

    Examples:
        >>> format_price(1000000000000000000, 18, "ETH")
        '1.000000 ETH'
        >>> format_price(300000000000000, 18, "ETH")
        '0.000300 ETH'
    """
    value = int(value)
    divisor = 10**decimals
    whole, fraction = divmod(value, divisor)

    fraction_str = str(fraction).zfill(decimals) if decimals > 0 else ""
    fraction_str = fraction_str[:PRICE_FRACTION_DIGITS].ljust(PRICE_FRACTION_DIGITS, "0")

    return f"{whole}.{fraction_str} {currency}"


def format_offer_price(order: dict) -> str:
    """Format the current price of an OpenSea order."""
    current = order["price"]["current"]
    return format_price(current["value"], int(current["decimals"]), current["currency"])


def asset_url(contract_address: str, token_id: str | int, chain: str = ChainTag.BASE) -> str:
    """Build the public OpenSea page URL for a token."""
    chain = ChainTag(chain)
    base = "https://testnets.opensea.io" if chain is ChainTag.BASE_SEPOLIA else "https://opensea.io"
    return f"{base}/assets/{chain.value}/{contract_address}/{token_id}"


class OpenSeaClient:
    """Read-only client for the OpenSea v2 API.

    Args:
        config: Application configuration (API bases and optional key).
        http_client: Optional shared ``httpx.AsyncClient``.
    """

    def __init__(self, config: FrontierConfig, http_client: httpx.AsyncClient | None = None):
        self.api_base = config.opensea_api_base.rstrip("/")
        self.testnet_api_base = config.opensea_testnet_api_base.rstrip("/")
        self.api_key = config.opensea_api_key
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=config.http_timeout)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def __aenter__(self) -> OpenSeaClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def api_base_for(self, chain: str) -> str:
        return self.testnet_api_base if ChainTag(chain) is ChainTag.BASE_SEPOLIA else self.api_base

    def _headers(self, api_key: str | None) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        key = api_key or self.api_key
        if key:
            headers["X-API-KEY"] = key
        return headers

    async def _get_json(
        self,
        url: str,
        what: str,
        *,
        params: dict | None = None,
        api_key: str | None = None,
    ) -> dict | None:
        """GET a JSON document; ``None`` on 404, ServiceError otherwise."""
        try:
            response = await self._http.get(url, params=params, headers=self._headers(api_key))
        except httpx.HTTPError as e:
            logger.warning(f"Network error fetching {what}: {e}")
            raise ServiceError.marketplace(f"Network error fetching {what}: {e}", 0) from e

        if response.status_code == 404:
            return None
        if not response.is_success:
            raise ServiceError.marketplace(
                f"Failed to fetch {what}: {response.reason_phrase}", response.status_code
            )

        try:
            return response.json()
        except ValueError as e:
            raise ServiceError.marketplace(
                f"Invalid JSON fetching {what}", response.status_code
            ) from e

    async def get_highest_offer(
        self,
        contract_address: str,
        token_id: str | int,
        chain: str = ChainTag.BASE,
        api_key: str | None = None,
    ) -> dict | None:
        """Return the single highest active offer on a token, or None."""
        chain = ChainTag(chain)
        url = f"{self.api_base_for(chain)}/orders/{chain.value}/seaport/offers"
        params = {
            "asset_contract_address": contract_address,
            "token_ids": str(token_id),
            "order_by": "eth_price",
            "order_direction": "desc",
            "limit": 1,
        }

        data = await self._get_json(url, "bids", params=params, api_key=api_key)
        if data is None:
            return None

        orders = data.get("orders") or []
        return orders[0] if orders else None

    async def get_asset_details(
        self,
        contract_address: str,
        token_id: str | int,
        chain: str = ChainTag.BASE,
        api_key: str | None = None,
    ) -> dict | None:
        """Return OpenSea's view of one NFT, or None if it is unknown."""
        chain = ChainTag(chain)
        url = f"{self.api_base_for(chain)}/chain/{chain.value}/contract/{contract_address}/nfts/{token_id}"

        data = await self._get_json(url, "NFT details", api_key=api_key)
        if data is None:
            return None
        return data.get("nft")

    async def get_collection_stats(self, collection_slug: str, api_key: str | None = None) -> dict | None:
        """Return collection statistics, or None for an unknown collection."""
        url = f"{self.api_base}/collections/{collection_slug}/stats"
        return await self._get_json(url, "collection stats", api_key=api_key)
