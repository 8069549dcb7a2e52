"""Image normalization for on-chain storage."""

from frontier.imaging.normalizer import normalize_image

__all__ = ["normalize_image"]
