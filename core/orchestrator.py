"""Assembly orchestrator for one-minute marketing videos."""

import asyncio
import logging
import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING, Awaitable, Callable, Sequence

from config.prompt_loader import build_extension_prompt, build_initial_prompt
from core.constants import (
    FailureMessages,
    MAX_REFERENCE_IMAGES,
    ProgressMessages,
    compute_max_segments,
)
from core.exceptions import (
    GenerationFailedError,
    MarketingVideoError,
    PollTimeoutError,
    RunInProgressError,
)
from core.models import (
    GeneratedVideo,
    GenerationProgress,
    GenerationStatus,
    JobStatus,
    OperationHandle,
    UploadedImage,
    VideoJob,
)
from core.services.playback import build_playback_url

if TYPE_CHECKING:
    from config.settings import Settings
    from core.protocols.generation_client import IGenerationClient
    from core.protocols.progress import ProgressSink

logger = logging.getLogger(__name__)


@dataclass
class RunContext:
    """Mutable state owned by a single generation run."""

    total_segments: int
    image_count: int
    accumulated_duration: float = 0.0
    segment_count: int = 0
    current_video: GeneratedVideo | None = None
    last_status: GenerationStatus = GenerationStatus.IDLE


class VideoAssemblyOrchestrator:
    """Builds a marketing video from screenshots by generating and extending clips.

    A run generates one segment seeded with reference images, then extends
    it segment by segment until the accumulated duration reaches the target
    or the segment budget runs out:
    1. generating_initial: first segment with up to 3 reference images
    2. extending: repeated continuation of the previous segment
    3. complete / error: terminal states

    Only one run may hold the run lease at a time. The orchestrator also
    keeps an in-memory registry of jobs for the HTTP layer.
    """

    def __init__(
        self,
        *,
        settings: "Settings",
        client: "IGenerationClient",
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize the orchestrator.

        Args:
            settings: Application settings.
            client: Generation service used for every segment.
            sleep: Coroutine used to wait between polls.
        """
        self._settings = settings
        self._client = client
        self._sleep = sleep
        self._lease = asyncio.Lock()
        self._jobs: dict[str, VideoJob] = {}
        self._job_images: dict[str, list[UploadedImage]] = {}
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def max_segments(self) -> int:
        return compute_max_segments(
            self._settings.target_duration_seconds,
            self._settings.estimated_extension_seconds,
        )

    @property
    def is_running(self) -> bool:
        return self._lease.locked()

    async def generate(
        self,
        images: Sequence[UploadedImage],
        prompt: str,
        on_progress: "ProgressSink",
    ) -> str | None:
        """Generate a marketing video and return its playable URL.

        Failures inside the run are reported through ``on_progress`` as an
        ``error`` snapshot and yield ``None``; they are not raised.

        Args:
            images: Selected screenshots, in order. Must not be empty.
            prompt: User directions. Must not be blank.
            on_progress: Callback receiving each progress snapshot.

        Returns:
            The final video URL, or None if the run failed.

        Raises:
            RunInProgressError: If another run holds the lease.
        """
        if self._lease.locked():
            raise RunInProgressError("A video generation run is already in progress")

        async with self._lease:
            ctx = RunContext(total_segments=self.max_segments, image_count=len(images))
            return await self._run(ctx, images, prompt, on_progress)

    async def _run(
        self,
        ctx: RunContext,
        images: Sequence[UploadedImage],
        prompt: str,
        on_progress: "ProgressSink",
    ) -> str | None:
        settings = self._settings
        try:
            self._emit(
                ctx,
                on_progress,
                GenerationStatus.GENERATING_INITIAL,
                ProgressMessages.INITIAL.format(
                    segment=ctx.segment_count + 1, total=ctx.total_segments
                ),
            )

            max_refs = min(settings.max_reference_images, MAX_REFERENCE_IMAGES)
            handle = await self._client.start_generation(
                prompt=build_initial_prompt(ctx.image_count, prompt),
                reference_images=list(images[:max_refs]),
                resolution=settings.video_resolution,
                aspect_ratio=settings.video_aspect_ratio,
            )
            handle = await self._wait_for(handle, label="initial video")

            video = handle.first_video
            if video is None:
                self._log_service_error(handle)
                raise GenerationFailedError(FailureMessages.INITIAL, segment=1)

            ctx.current_video = video
            ctx.accumulated_duration = video.duration_seconds or 0.0
            ctx.segment_count += 1
            self._logger.info(
                "Initial video generated. Duration: %.1fs", ctx.accumulated_duration
            )

            while (
                ctx.accumulated_duration < settings.target_duration_seconds
                and ctx.segment_count < ctx.total_segments
            ):
                await self._extend(ctx, prompt, on_progress)

            self._emit(
                ctx,
                on_progress,
                GenerationStatus.COMPLETE,
                ProgressMessages.COMPLETE.format(duration=ctx.accumulated_duration),
            )

            if settings.append_key_to_url:
                return build_playback_url(ctx.current_video.uri, settings.gemini_api_key)
            return ctx.current_video.uri

        except Exception as e:
            self._logger.exception("Video generation failed at segment %d", ctx.segment_count)
            cause = e.message if isinstance(e, MarketingVideoError) else str(e)
            self._emit(
                ctx,
                on_progress,
                GenerationStatus.ERROR,
                ProgressMessages.FAILED.format(cause=cause or type(e).__name__),
            )
            return None

    async def _extend(self, ctx: RunContext, prompt: str, on_progress: "ProgressSink") -> None:
        """Generate the next segment as a continuation of the current video.

        Args:
            ctx: The run context, updated in place.
            prompt: Original user directions.
            on_progress: Progress callback.

        Raises:
            GenerationFailedError: If the extension returns no video.
        """
        settings = self._settings
        segment = ctx.segment_count + 1

        self._emit(
            ctx,
            on_progress,
            GenerationStatus.EXTENDING,
            ProgressMessages.EXTENDING.format(
                segment=segment,
                total=ctx.total_segments,
                duration=ctx.accumulated_duration,
            ),
        )

        handle = await self._client.start_extension(
            prompt=build_extension_prompt(ctx.image_count, prompt),
            previous_video=ctx.current_video,
            resolution=settings.video_resolution,
            aspect_ratio=settings.video_aspect_ratio,
        )
        handle = await self._wait_for(handle, label=f"extension segment {segment}")

        video = handle.first_video
        if video is None:
            self._log_service_error(handle)
            raise GenerationFailedError(
                FailureMessages.EXTENSION.format(segment=segment),
                segment=segment,
            )

        ctx.current_video = video
        if video.duration_seconds:
            ctx.accumulated_duration = video.duration_seconds
        else:
            ctx.accumulated_duration += settings.estimated_extension_seconds
        ctx.segment_count += 1
        self._logger.info(
            "Segment %d generated. Total duration: %.1fs",
            ctx.segment_count,
            ctx.accumulated_duration,
        )

    async def _wait_for(self, handle: OperationHandle, *, label: str) -> OperationHandle:
        """Poll an operation at the configured interval until it is done.

        Raises:
            PollTimeoutError: If ``poll_max_attempts`` is set and exceeded.
        """
        max_attempts = self._settings.poll_max_attempts
        attempts = 0
        while not handle.done:
            if max_attempts is not None and attempts >= max_attempts:
                raise PollTimeoutError(
                    f"Timed out waiting for {label} after {attempts} polls",
                    attempts=attempts,
                )
            await self._sleep(self._settings.poll_interval_seconds)
            handle = await self._client.poll_operation(handle)
            attempts += 1
            self._logger.debug("Polling %s (attempt %d): done=%s", label, attempts, handle.done)
        return handle

    def _emit(
        self,
        ctx: RunContext,
        on_progress: "ProgressSink",
        status: GenerationStatus,
        message: str,
    ) -> None:
        if ctx.last_status.is_terminal:
            self._logger.debug("Ignoring %s after terminal status %s", status.value, ctx.last_status.value)
            return
        progress = GenerationProgress(
            status=status,
            message=message,
            current_segment=ctx.segment_count,
            total_segments=ctx.total_segments,
        )
        ctx.last_status = status
        on_progress(progress)

    def _log_service_error(self, handle: OperationHandle) -> None:
        error = getattr(handle, "error", None)
        if error:
            self._logger.warning("Operation %s reported: %s", handle.name, error)

    def create_job(self, images: Sequence[UploadedImage], prompt: str) -> VideoJob:
        """Create a new video generation job.

        Args:
            images: Screenshots for the video. Must not be empty.
            prompt: User directions. Must not be blank.

        Returns:
            A new VideoJob with pending status.

        Raises:
            ValueError: If images are empty or the prompt is blank.
        """
        if not images:
            raise ValueError("At least one image is required")
        if not prompt.strip():
            raise ValueError("A video prompt is required")

        job_id = str(uuid.uuid4())
        job = VideoJob(job_id=job_id, prompt=prompt, image_count=len(images))
        self._jobs[job_id] = job
        self._job_images[job_id] = list(images)
        self._logger.info("Created job %s with %d images", job_id, len(images))
        return job

    def get_job(self, job_id: str) -> VideoJob | None:
        """Get a job by ID, or None if unknown."""
        return self._jobs.get(job_id)

    def list_jobs(self) -> list[VideoJob]:
        """List all jobs."""
        return list(self._jobs.values())

    async def execute(self, job_id: str) -> VideoJob:
        """Run generation for a job and record the outcome on it.

        Args:
            job_id: The job ID to execute.

        Returns:
            The updated VideoJob.

        Raises:
            KeyError: If job_id is not found.
        """
        job = self._jobs.get(job_id)
        if not job:
            raise KeyError(f"Job not found: {job_id}")

        def record(progress: GenerationProgress) -> None:
            job.progress = progress

        job.status = JobStatus.PROCESSING
        self._logger.info("Starting generation for job %s", job_id)

        try:
            url = await self.generate(self._job_images[job_id], job.prompt, record)
        except RunInProgressError as e:
            job.status = JobStatus.FAILED
            job.error_message = e.message
            raise
        finally:
            self._job_images.pop(job_id, None)

        if url:
            job.status = JobStatus.COMPLETED
            job.video_url = url
            self._logger.info("Job %s completed", job_id)
        else:
            job.status = JobStatus.FAILED
            job.error_message = job.progress.message
            self._logger.warning("Job %s failed: %s", job_id, job.error_message)
        return job
