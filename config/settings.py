"""Pydantic Settings configuration for the marketing video generator."""

from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.constants import (
    DEFAULT_ESTIMATED_EXTENSION_SECONDS,
    DEFAULT_POLL_INTERVAL_SECONDS,
    DEFAULT_TARGET_DURATION_SECONDS,
    MAX_REFERENCE_IMAGES,
)


class ExecutionProfile(str, Enum):
    """Execution profile for the generation client."""

    DEBUG = "debug"
    LIVE = "live"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Execution
    execution_profile: ExecutionProfile = Field(
        default=ExecutionProfile.DEBUG,
        description="Execution profile (debug uses the mock client, live calls Veo)",
    )

    # Generation service
    gemini_api_key: str = Field(default="", description="Gemini API key for the Veo service")
    veo_model: str = Field(
        default="veo-3.1-generate-preview",
        description="Veo model supporting reference images and video extension",
    )
    video_resolution: str = Field(
        default="720p",
        description="Output resolution (extensions require 720p)",
    )
    video_aspect_ratio: str = Field(
        default="16:9",
        description="Output aspect ratio (extensions must match the previous segment)",
    )
    number_of_videos: int = Field(default=1, ge=1, le=1, description="Videos per request")
    max_reference_images: int = Field(
        default=MAX_REFERENCE_IMAGES,
        ge=1,
        le=3,
        description="Maximum reference images embedded in the initial request",
    )

    # Assembly loop
    target_duration_seconds: float = Field(
        default=DEFAULT_TARGET_DURATION_SECONDS,
        gt=0.0,
        le=600.0,
        description="Accumulated duration at which extension stops",
    )
    estimated_extension_seconds: float = Field(
        default=DEFAULT_ESTIMATED_EXTENSION_SECONDS,
        gt=0.0,
        le=60.0,
        description="Duration added per extension when the service omits it",
    )
    poll_interval_seconds: float = Field(
        default=DEFAULT_POLL_INTERVAL_SECONDS,
        ge=0.0,
        le=300.0,
        description="Wait between operation status polls",
    )
    poll_max_attempts: int | None = Field(
        default=None,
        ge=1,
        description="Maximum polls per operation (None = wait indefinitely)",
    )

    # Playback
    append_key_to_url: bool = Field(
        default=True,
        description="Append the API key to the returned video URL for direct playback",
    )

    # Mock client
    mock_segment_seconds: float = Field(
        default=8.0,
        gt=0.0,
        le=60.0,
        description="Duration reported by the mock client for each segment",
    )
    mock_polls_until_done: int = Field(
        default=1,
        ge=0,
        le=100,
        description="Number of polls before a mock operation completes",
    )

    # Uploads
    max_uploaded_images: int = Field(
        default=10,
        ge=1,
        le=50,
        description="Maximum screenshots accepted per request",
    )

    # Security
    api_key_enabled: bool = Field(
        default=False,
        description="Enable API key authentication",
    )
    api_key: str = Field(
        default="",
        description="API key for authentication (required if api_key_enabled=True)",
    )
    rate_limit_per_minute: int = Field(
        default=10,
        ge=1,
        le=1000,
        description="Maximum requests per minute per client",
    )
    max_prompt_length: int = Field(
        default=5_000,
        ge=10,
        le=100_000,
        description="Maximum prompt length in characters",
    )
    cors_origins: list[str] = Field(
        default_factory=list,
        description="Allowed CORS origins (empty = no CORS)",
    )
