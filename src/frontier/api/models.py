"""Pydantic request and response models for the Infinite Frontier API.

These models define the JSON schema for the API endpoints.  FastAPI uses
them for request parsing, serialisation and OpenAPI documentation.

Models
------
GenerateRequest
    Payload for ``POST /api/generate``.
GenerateResponse
    Normalized on-chain image plus generation metadata.
MintPrepareRequest
    Payload for ``POST /api/mint/prepare``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class GenerateRequest(BaseModel):
    """Request body for the ``POST /api/generate`` endpoint.

    ``prompt`` accepts any JSON value; a missing or non-string prompt is
    reported by the prompt validator as a 400.

    Attributes:
        prompt: Natural-language description of the image.
        model: Optional Venice model identifier.  Defaults to the configured
            ``default_image_model``.
    """

    prompt: Any = Field(
        default=None,
        description="Prompt text (1-1000 characters after trimming).",
    )
    model: str | None = Field(
        default=None,
        description="Venice model identifier (e.g. 'fluently-xl').",
    )


class GenerateResponse(BaseModel):
    """Response body for ``POST /api/generate``.

    Attributes:
        image_base64: Normalized image, base64 encoded.
        format: Output format tag (``jpeg`` by default).
        byte_length: Size of the decoded normalized image in bytes.
        width: Normalized width in pixels.
        height: Normalized height in pixels.
        source_byte_length: Size of the image returned by Venice in bytes.
        prompt: The prompt that was sent.
        model: The model that produced the image.
        seed: The seed reported by Venice.
    """

    image_base64: str
    format: str
    byte_length: int
    width: int
    height: int
    source_byte_length: int
    prompt: str
    model: str
    seed: int


class MintPrepareRequest(BaseModel):
    """Request body for ``POST /api/mint/prepare``.

    Attributes:
        prompt: Prompt stored with the token.
        image_base64: Normalized image payload to store on-chain.
        ai_model: Model identifier stored with the token.
    """

    prompt: Any = Field(
        default=None,
        description="Prompt stored on-chain.",
    )
    image_base64: str = Field(
        default="",
        description="Base64 image payload stored on-chain.",
    )
    ai_model: str = Field(
        ...,
        description="Model identifier stored on-chain.",
    )
