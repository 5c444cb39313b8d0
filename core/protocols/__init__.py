"""Protocol interfaces for the marketing video services."""

from core.protocols.generation_client import IGenerationClient
from core.protocols.progress import ProgressSink

__all__ = [
    "IGenerationClient",
    "ProgressSink",
]
