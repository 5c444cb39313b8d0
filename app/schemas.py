"""Pydantic schemas for API requests and responses."""

from datetime import datetime

from pydantic import BaseModel, Field

from core.models import GenerationProgress, JobStatus, VideoJob


class GenerateResponse(BaseModel):
    """Response from video generation endpoint."""

    job_id: str = Field(..., description="Unique identifier for the job")
    status: JobStatus = Field(..., description="Current job status")
    message: str = Field(..., description="Human-readable status message")
    image_count: int = Field(..., description="Number of screenshots accepted")


class StatusResponse(BaseModel):
    """Response from job status endpoint."""

    job_id: str = Field(..., description="Unique identifier for the job")
    status: JobStatus = Field(..., description="Current job status")
    progress: GenerationProgress = Field(..., description="Latest progress snapshot")
    image_count: int = Field(..., description="Number of screenshots supplied")
    video_url: str | None = Field(None, description="Playable URL of the completed video")
    error_message: str | None = Field(None, description="Error message if failed")
    created_at: datetime = Field(..., description="Job creation time (UTC)")

    @classmethod
    def from_job(cls, job: VideoJob) -> "StatusResponse":
        return cls(
            job_id=job.job_id,
            status=job.status,
            progress=job.progress,
            image_count=job.image_count,
            video_url=job.video_url,
            error_message=job.error_message,
            created_at=job.created_at,
        )


class VideoResponse(BaseModel):
    """Response carrying the playable video URL."""

    job_id: str = Field(..., description="Unique identifier for the job")
    video_url: str = Field(..., description="Playable URL of the final video")


class HealthResponse(BaseModel):
    """Response from health check endpoint."""

    status: str = Field(..., description="Service health status")
    version: str = Field(..., description="API version")
    profile: str = Field(..., description="Current execution profile")


class JobListResponse(BaseModel):
    """Response listing all jobs."""

    jobs: list[StatusResponse] = Field(..., description="List of all jobs")
    total: int = Field(..., description="Total number of jobs")
