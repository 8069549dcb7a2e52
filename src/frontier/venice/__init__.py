"""Venice AI image generation client."""

from frontier.venice.client import VeniceClient, is_image_model

__all__ = ["VeniceClient", "is_image_model"]
