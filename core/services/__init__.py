"""Service implementations for the marketing video generator."""

from core.services.image_codec import encode_image, encode_upload
from core.services.mock_client import MockGenerationClient
from core.services.playback import build_playback_url
from core.services.veo_client import VeoGenerationClient

__all__ = [
    # Generation
    "VeoGenerationClient",
    "MockGenerationClient",
    # Images
    "encode_image",
    "encode_upload",
    # Playback
    "build_playback_url",
]
