"""Pydantic models for the marketing video domain."""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from core.constants import ProgressMessages


class GenerationStatus(str, Enum):
    """Progress states reported during a generation run."""

    IDLE = "idle"
    GENERATING_INITIAL = "generating_initial"
    EXTENDING = "extending"
    COMPLETE = "complete"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (GenerationStatus.COMPLETE, GenerationStatus.ERROR)


class JobStatus(str, Enum):
    """Status of a video generation job."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class UploadedImage(BaseModel):
    """A screenshot selected for the video, with its inline encoding.

    An empty ``base64_payload`` means the file could not be read; such
    images are treated as unavailable.
    """

    model_config = ConfigDict(frozen=True)

    filename: str | None = Field(None, description="Original file name, if known")
    raw_bytes: bytes = Field(default=b"", repr=False, exclude=True, description="Image content")
    base64_payload: str = Field(default="", repr=False, description="Base64 content, no data-URI prefix")
    mime_type: str = Field(..., description="MIME type declared by the source")

    @property
    def is_available(self) -> bool:
        return bool(self.base64_payload)


class GenerationProgress(BaseModel):
    """Snapshot emitted to the progress sink at every state transition."""

    status: GenerationStatus = Field(GenerationStatus.IDLE, description="Current run state")
    message: str = Field(ProgressMessages.READY, description="Human-readable progress message")
    current_segment: int = Field(0, ge=0, description="Segments completed so far")
    total_segments: int = Field(0, ge=0, description="Segment budget for the run")

    @model_validator(mode="after")
    def check_consistency(self) -> "GenerationProgress":
        """Validate segment bounds and error messages.

        Raises:
            ValueError: If the snapshot is internally inconsistent.
        """
        if self.total_segments and self.current_segment > self.total_segments:
            raise ValueError(
                f"current_segment ({self.current_segment}) exceeds "
                f"total_segments ({self.total_segments})"
            )
        if self.status == GenerationStatus.ERROR and not self.message.strip():
            raise ValueError("Error progress requires a message")
        return self


class GeneratedVideo(BaseModel):
    """A video produced by one generation or extension call.

    ``raw`` keeps the service-native video object so it can be passed back
    as continuation context.
    """

    uri: str = Field(..., description="Service URI of the video")
    duration_seconds: float | None = Field(None, ge=0.0, description="Reported duration, if any")
    raw: Any = Field(default=None, exclude=True, repr=False)


class PendingOperation(BaseModel):
    """A generation operation that has not finished yet."""

    done: Literal[False] = False
    name: str = Field(..., description="Service operation name")
    raw: Any = Field(default=None, exclude=True, repr=False)


class DoneOperation(BaseModel):
    """A finished generation operation and its result."""

    done: Literal[True] = True
    name: str = Field(..., description="Service operation name")
    videos: list[GeneratedVideo] = Field(default_factory=list, description="Generated videos")
    error: str | None = Field(None, description="Error reported by the service")
    raw: Any = Field(default=None, exclude=True, repr=False)

    @property
    def first_video(self) -> GeneratedVideo | None:
        """Return the first generated video if it carries a URI."""
        if self.videos and self.videos[0].uri:
            return self.videos[0]
        return None


OperationHandle = Annotated[
    Union[PendingOperation, DoneOperation],
    Field(discriminator="done"),
]


class VideoJob(BaseModel):
    """Represents a marketing video generation job."""

    job_id: str = Field(..., description="Unique job identifier")
    prompt: str = Field(..., description="User directions for the video")
    image_count: int = Field(..., ge=0, description="Number of screenshots supplied")
    status: JobStatus = Field(JobStatus.PENDING, description="Current job status")
    progress: GenerationProgress = Field(
        default_factory=GenerationProgress,
        description="Latest progress snapshot",
    )
    video_url: str | None = Field(None, description="Playable URL of the final video")
    error_message: str | None = Field(None, description="Error message if failed")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
