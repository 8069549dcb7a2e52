"""Core building blocks shared by every Infinite Frontier component.

- **FrontierConfig**: Configuration management using Pydantic Settings
- **ServiceError**: Tagged error shared by the generation, marketplace and
  validation paths
- **validate_prompt**: Prompt checks run before any network call
- **models**: Frozen dataclasses passed between pipeline stages

Pipeline Overview
-----------------
One user action runs three strictly sequential steps:

1. ``validate_prompt`` rejects malformed input locally.
2. ``VeniceClient.generate_image`` makes exactly one remote call.
3. ``normalize_image`` shrinks the result to the on-chain canvas.

The normalized payload is then handed to ``MintSubmitter`` which describes
the payable ``mint`` call for the user's wallet.
"""

from frontier.core.config import FrontierConfig
from frontier.core.errors import ErrorKind, ServiceError
from frontier.core.models import (
    GeneratedImage,
    GenerationRequest,
    GenerationResult,
    MintCall,
    NormalizedImage,
    OnchainImage,
)
from frontier.core.validation import validate_prompt

__all__ = [
    "ErrorKind",
    "FrontierConfig",
    "GeneratedImage",
    "GenerationRequest",
    "GenerationResult",
    "MintCall",
    "NormalizedImage",
    "OnchainImage",
    "ServiceError",
    "validate_prompt",
]
