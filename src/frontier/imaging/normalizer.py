"""Deterministic resize and re-encode of generated images.

The contract stores the image payload inline, so every byte costs gas.
:func:`normalize_image` shrinks a base64 raster to a fixed small canvas and
re-encodes it, usually as a lossy JPEG, before it is submitted for minting.

Determinism
-----------
The transform uses a fixed resampling filter, fixed encoder options and no
metadata from the source, so identical inputs always produce byte-identical
output with a given Pillow build.  Different builds (different libjpeg or
libwebp versions) are allowed to produce different bytes.

Aspect ratio is not preserved: the pipeline always targets a square canvas,
and images smaller than the target are upscaled.

Usage Example
-------------
    from frontier.imaging.normalizer import normalize_image

    result = normalize_image(source_b64, 128, 128, "jpeg", quality=70)
    print(result.byte_length, result.base64[:16])
"""

from __future__ import annotations

import base64
import binascii
import io
import logging

from PIL import Image, UnidentifiedImageError

from frontier.core.errors import ServiceError
from frontier.core.models import NormalizedImage

logger = logging.getLogger(__name__)

# Format tag -> Pillow encoder name.
PILLOW_FORMATS: dict[str, str] = {
    "png": "PNG",
    "jpeg": "JPEG",
    "webp": "WEBP",
}
LOSSLESS_FORMATS = frozenset({"png"})
LOSSY_FORMATS = frozenset({"jpeg", "webp"})

DEFAULT_FORMAT = "png"
DEFAULT_QUALITY = 80

RESAMPLE_FILTER = Image.Resampling.LANCZOS


def decode_base64_image(source_b64: str) -> bytes:
    """Decode a base64 image payload, accepting an optional data-URI prefix.

    Raises:
        ServiceError: validation error ``INVALID_IMAGE`` if the payload is
            empty or not valid base64.
    """
    if not isinstance(source_b64, str) or not source_b64.strip():
        raise ServiceError.validation("Image payload cannot be empty", "INVALID_IMAGE")

    payload = source_b64.strip()
    if payload.startswith("data:") and "," in payload:
        payload = payload.split(",", 1)[1]

    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ServiceError.validation(f"Image payload is not valid base64: {e}", "INVALID_IMAGE") from e


def _prepare_mode(image: Image.Image, fmt: str) -> Image.Image:
    """Convert the image into a mode the target encoder accepts."""
    if fmt in LOSSY_FORMATS:
        return image if image.mode == "RGB" else image.convert("RGB")
    # Palette and exotic modes resize badly; PNG keeps alpha.
    if image.mode not in ("RGB", "RGBA", "L", "LA"):
        return image.convert("RGBA")
    return image


def _encode(image: Image.Image, fmt: str, quality: int) -> bytes:
    buffer = io.BytesIO()
    if fmt == "jpeg":
        image.save(buffer, format="JPEG", quality=quality, optimize=False, progressive=False)
    elif fmt == "webp":
        image.save(buffer, format="WEBP", quality=quality, method=4)
    else:
        image.save(buffer, format="PNG")
    return buffer.getvalue()


def normalize_image(
    source_b64: str,
    width: int,
    height: int,
    fmt: str = DEFAULT_FORMAT,
    quality: int | None = None,
) -> NormalizedImage:
    """Resize a base64 image to exactly ``width`` x ``height`` and re-encode it.

    Args:
        source_b64: Base64 source image (any format Pillow can open).
        width: Output width in pixels.
        height: Output height in pixels.
        fmt: Output format: ``"png"`` (lossless, default), ``"jpeg"`` or
            ``"webp"``.
        quality: Encoder quality for lossy formats (1-100).  Defaults to 80;
            ignored for PNG.

    Returns:
        NormalizedImage with the base64 output, its format tag and the exact
        byte length of the decoded output buffer.

    Raises:
        ValueError: If the format is unknown, a dimension is not positive or
            the quality is out of range.
        ServiceError: validation error ``INVALID_IMAGE`` if the source cannot
            be decoded as an image.
    """
    fmt = fmt.lower()
    if fmt == "jpg":
        fmt = "jpeg"
    if fmt not in PILLOW_FORMATS:
        raise ValueError(f"Unsupported image format: {fmt}. Expected one of {sorted(PILLOW_FORMATS)}")
    if width <= 0 or height <= 0:
        raise ValueError(f"Target dimensions must be positive, got {width}x{height}")

    if quality is None:
        quality = DEFAULT_QUALITY
    if not 1 <= quality <= 100:
        raise ValueError(f"Quality must be 1-100, got {quality}")

    raw = decode_base64_image(source_b64)

    try:
        with Image.open(io.BytesIO(raw)) as source:
            source.load()
            source_size = source.size
            prepared = _prepare_mode(source, fmt)
            resized = prepared.resize((width, height), resample=RESAMPLE_FILTER)
    except (UnidentifiedImageError, OSError) as e:
        raise ServiceError.validation(f"Could not decode image: {e}", "INVALID_IMAGE") from e

    output = _encode(resized, fmt, quality)

    logger.debug(
        f"Normalized image {source_size[0]}x{source_size[1]} ({len(raw)} bytes) -> "
        f"{width}x{height} {fmt} ({len(output)} bytes)"
    )

    return NormalizedImage(
        base64=base64.b64encode(output).decode("ascii"),
        format=fmt,
        byte_length=len(output),
        width=width,
        height=height,
    )
