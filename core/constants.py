"""Constants for service limits and progress messages.

This module centralizes the hardcoded values and message templates used by
the assembly loop so that tests and callers reference one source.
"""

import math
from typing import Final

# Service-imposed cap on reference images embedded in the initial request
MAX_REFERENCE_IMAGES: Final[int] = 3

# Defaults for config.settings.Settings
DEFAULT_TARGET_DURATION_SECONDS: Final[float] = 60.0
DEFAULT_ESTIMATED_EXTENSION_SECONDS: Final[float] = 7.0
DEFAULT_POLL_INTERVAL_SECONDS: Final[float] = 10.0

# Query parameter carrying the credential on playback URLs
PLAYBACK_KEY_PARAM: Final[str] = "key"


class ProgressMessages:
    """Message templates for progress snapshots."""

    READY: Final[str] = "Ready to generate video"
    INITIAL: Final[str] = "Initiating video generation (segment {segment}/{total})..."
    EXTENDING: Final[str] = (
        "Extending video (segment {segment}/{total}). Current duration: {duration:.1f}s"
    )
    COMPLETE: Final[str] = "Video generation complete! Total duration: {duration:.1f}s"
    FAILED: Final[str] = "Video generation failed: {cause}"


class FailureMessages:
    """Causes raised when the service returns no usable video."""

    INITIAL: Final[str] = "Initial video generation failed or returned no result."
    EXTENSION: Final[str] = "Video extension for segment {segment} failed or returned no result."


def compute_max_segments(target_duration_seconds: float, estimated_extension_seconds: float) -> int:
    """Return the segment budget needed to reach the target at the estimated rate.

    Args:
        target_duration_seconds: Accumulated duration to reach.
        estimated_extension_seconds: Expected seconds per segment.

    Returns:
        ``ceil(target / estimated)``, e.g. 9 for 60s at 7s per segment.
    """
    return math.ceil(target_duration_seconds / estimated_extension_seconds)
