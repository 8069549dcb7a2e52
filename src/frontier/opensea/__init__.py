"""OpenSea marketplace read proxy."""

from frontier.opensea.client import (
    ChainTag,
    OpenSeaClient,
    asset_url,
    chain_for_chain_id,
    format_offer_price,
    format_price,
)

__all__ = [
    "ChainTag",
    "OpenSeaClient",
    "asset_url",
    "chain_for_chain_id",
    "format_offer_price",
    "format_price",
]
