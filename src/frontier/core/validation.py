"""Validation utilities for user-supplied pipeline inputs."""

import logging

from .errors import ServiceError

logger = logging.getLogger(__name__)

MAX_PROMPT_LENGTH = 1000


def validate_prompt(prompt) -> bool:
    """Validate a prompt before any network call is made.

    The length limit applies to the trimmed prompt, so leading and trailing
    whitespace never counts against it.

    Args:
        prompt: Candidate prompt value (any type)

    Returns:
        True if the prompt is valid

    Raises:
        ServiceError: validation error with code ``NOT_A_STRING``,
            ``EMPTY_PROMPT`` or ``TOO_LONG``
    """
    if prompt is None or not isinstance(prompt, str):
        raise ServiceError.validation("Prompt is required and must be a string", "NOT_A_STRING")

    trimmed = prompt.strip()

    if len(trimmed) == 0:
        raise ServiceError.validation("Prompt cannot be empty", "EMPTY_PROMPT")

    if len(trimmed) > MAX_PROMPT_LENGTH:
        raise ServiceError.validation(
            f"Prompt must be {MAX_PROMPT_LENGTH} characters or less", "TOO_LONG"
        )

    return True


def validate_image_payload(image_base64) -> bool:
    """Check that an image payload is a non-empty string.

    Raises:
        ServiceError: validation error with code ``EMPTY_IMAGE``
    """
    if not isinstance(image_base64, str) or not image_base64.strip():
        raise ServiceError.validation("Image payload cannot be empty", "EMPTY_IMAGE")
    return True
