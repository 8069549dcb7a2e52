"""Token metadata synthesis for Infinite Frontier tokens.

The contract builds its metadata JSON by string concatenation and escapes
only double quotes and backslashes in free-text fields.  These helpers
produce exactly the same document, so the ledger's ``token_uri`` matches
what marketplaces read from the chain.
"""

from __future__ import annotations

import base64
import json

COLLECTION_NAME = "Infinite Frontier"
TOKEN_URI_PREFIX = "data:application/json;base64,"
IMAGE_URI_PREFIX = "data:image/png;base64,"


def escape_json_string(value: str) -> str:
    """Escape ``"`` and ``\\`` for embedding in a JSON string literal."""
    out = []
    for char in value:
        if char == '"' or char == "\\":
            out.append("\\")
        out.append(char)
    return "".join(out)


def build_token_metadata(token_id: int, token) -> str:
    """Build the metadata JSON document for a token.

    Args:
        token_id: Token id used in the name.
        token: :class:`~frontier.chain.contract.TokenData` of the token.

    Returns:
        The JSON document as a string, with keys in contract order.
    """
    prompt = escape_json_string(token.prompt)
    ai_model = escape_json_string(token.ai_model)

    attributes = (
        f'{{"trait_type":"Prompt","value":"{prompt}"}},'
        f'{{"trait_type":"Generation","value":"{token.generation}"}},'
        f'{{"trait_type":"Type","value":"{token.nft_type}"}},'
        f'{{"trait_type":"AI Model","value":"{ai_model}"}},'
        f'{{"trait_type":"Minter","value":"{token.minter}"}},'
        f'{{"display_type":"date","trait_type":"Minted At","value":{token.minted_at}}}'
    )

    return (
        f'{{"name":"{COLLECTION_NAME} #{token_id}",'
        f'"description":"AI-generated NFT from the {COLLECTION_NAME} collection. '
        f'Generation: {token.generation}",'
        f'"image":"{IMAGE_URI_PREFIX}{token.image_base64}",'
        f'"attributes":[{attributes}]}}'
    )


def encode_token_uri(metadata_json: str) -> str:
    """Wrap a metadata document as a base64 JSON data URI."""
    encoded = base64.b64encode(metadata_json.encode("utf-8")).decode("ascii")
    return f"{TOKEN_URI_PREFIX}{encoded}"


def decode_token_uri(token_uri: str) -> dict:
    """Parse a base64 JSON data URI back into a metadata dict.

    Raises:
        ValueError: If the URI does not use the JSON data-URI prefix or the
            payload is not valid JSON.
    """
    if not token_uri.startswith(TOKEN_URI_PREFIX):
        raise ValueError("Token URI is not a base64 JSON data URI")
    payload = base64.b64decode(token_uri[len(TOKEN_URI_PREFIX) :])
    return json.loads(payload.decode("utf-8"))
