"""Domain exceptions for the marketing video generator."""


class MarketingVideoError(Exception):
    """Base exception for all marketing video errors."""

    def __init__(self, message: str, *, context: dict | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


class GenerationFailedError(MarketingVideoError):
    """Raised when a generation or extension returns no usable video."""

    def __init__(self, message: str, *, segment: int | None = None):
        super().__init__(message, context={"segment": segment})
        self.segment = segment


class GenerationClientError(MarketingVideoError):
    """Raised when a call to the generation service fails."""

    def __init__(self, message: str, *, operation: str | None = None):
        super().__init__(message, context={"operation": operation})
        self.operation = operation


class PollTimeoutError(MarketingVideoError):
    """Raised when an operation is still pending after the poll budget."""

    def __init__(self, message: str, *, attempts: int = 0):
        super().__init__(message, context={"attempts": attempts})
        self.attempts = attempts


class RunInProgressError(MarketingVideoError):
    """Raised when a run is requested while another holds the run lease."""
