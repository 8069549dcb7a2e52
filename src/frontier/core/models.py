"""Data models for the prompt-to-mint pipeline.

Every value here is produced once and passed forward, so all of them are
frozen dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class GenerationRequest:
    """Parameters for one call to the image-generation service.

    Only ``prompt`` is required.  The optional fields are forwarded to the
    remote API only when they are not ``None``.
    """

    prompt: str
    width: int | None = None
    height: int | None = None
    seed: int | None = None
    steps: int | None = None
    cfg_scale: float | None = None
    negative_prompt: str | None = None
    model: str | None = None


@dataclass(frozen=True)
class GeneratedImage:
    """One image returned by the generation service."""

    base64: str
    url: str | None = None


@dataclass(frozen=True)
class GenerationResult:
    """Payload of a successful generation call.

    ``images`` may legitimately be empty when the remote API returned no
    data; callers decide whether that is a failure.
    """

    images: tuple[GeneratedImage, ...]
    model: str
    seed: int

    @property
    def first_image(self) -> GeneratedImage | None:
        return self.images[0] if self.images else None


@dataclass(frozen=True)
class NormalizedImage:
    """Resized and re-encoded image ready for an on-chain payload.

    Attributes:
        base64: Base64 encoding of the output buffer.
        format: Output format tag (``png``, ``jpeg`` or ``webp``).
        byte_length: Exact size in bytes of the decoded output buffer.
        width: Output width in pixels.
        height: Output height in pixels.
    """

    base64: str
    format: str
    byte_length: int
    width: int
    height: int


@dataclass(frozen=True)
class OnchainImage:
    """Generation metadata together with the normalized first image."""

    prompt: str
    model: str
    seed: int
    source_byte_length: int
    image: NormalizedImage


@dataclass(frozen=True)
class MintCall:
    """A single payable ``mint`` call, ready to be signed by a wallet.

    ``value`` is the fee in wei.  ``estimated_gas`` is a rough figure based
    on the image payload size, useful for warning users before they sign.
    """

    contract_address: str
    chain_id: int
    prompt: str
    image_base64: str
    ai_model: str
    value: int
    estimated_gas: int
    function: str = field(default="mint(string,string,string)")

    @property
    def args(self) -> tuple[str, str, str]:
        return (self.prompt, self.image_base64, self.ai_model)

    def to_dict(self) -> dict:
        """Serialise for JSON; wei amounts become strings to keep precision."""
        return {
            "contract_address": self.contract_address,
            "chain_id": self.chain_id,
            "function": self.function,
            "args": list(self.args),
            "value": str(self.value),
            "estimated_gas": self.estimated_gas,
        }
