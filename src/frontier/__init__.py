"""Infinite Frontier - AI image generation and on-chain minting on Base."""

__version__ = "0.1.0"

from frontier.core.config import FrontierConfig
from frontier.core.errors import ErrorKind, ServiceError

__all__ = [
    "ErrorKind",
    "FrontierConfig",
    "ServiceError",
]
