"""Core domain logic for the marketing video generator."""

from core.exceptions import (
    GenerationClientError,
    GenerationFailedError,
    MarketingVideoError,
    PollTimeoutError,
    RunInProgressError,
)
from core.models import (
    DoneOperation,
    GeneratedVideo,
    GenerationProgress,
    GenerationStatus,
    JobStatus,
    OperationHandle,
    PendingOperation,
    UploadedImage,
    VideoJob,
)

__all__ = [
    # Models
    "GenerationStatus",
    "GenerationProgress",
    "JobStatus",
    "UploadedImage",
    "GeneratedVideo",
    "PendingOperation",
    "DoneOperation",
    "OperationHandle",
    "VideoJob",
    # Exceptions
    "MarketingVideoError",
    "GenerationFailedError",
    "GenerationClientError",
    "PollTimeoutError",
    "RunInProgressError",
]
