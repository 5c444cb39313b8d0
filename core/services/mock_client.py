"""Mock generation client for the DEBUG profile."""

import logging
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Sequence

from core.exceptions import GenerationClientError
from core.models import (
    DoneOperation,
    GeneratedVideo,
    OperationHandle,
    PendingOperation,
    UploadedImage,
)

if TYPE_CHECKING:
    from config.settings import Settings

logger = logging.getLogger(__name__)


@dataclass
class MockCall:
    """A recorded call to the mock client."""

    method: str
    prompt: str
    resolution: str
    aspect_ratio: str
    reference_images: list[UploadedImage] = field(default_factory=list)
    previous_video: GeneratedVideo | None = None


class MockGenerationClient:
    """Mock video service for DEBUG mode.

    Operations finish after a fixed number of polls and report a fixed
    duration per segment, so the assembly loop can run without network
    access. Every start call is recorded in ``calls``.
    """

    def __init__(
        self,
        settings: "Settings",
        *,
        segment_seconds: float | None = None,
        polls_until_done: int | None = None,
    ):
        """Initialize the mock client.

        Args:
            settings: Application settings.
            segment_seconds: Duration added per segment (defaults to settings).
            polls_until_done: Polls before an operation completes (defaults to settings).
        """
        self._segment_seconds = (
            segment_seconds if segment_seconds is not None else settings.mock_segment_seconds
        )
        self._polls_until_done = (
            polls_until_done if polls_until_done is not None else settings.mock_polls_until_done
        )
        self._pending: dict[str, int] = {}
        self._results: dict[str, float] = {}
        self.calls: list[MockCall] = []

    async def start_generation(
        self,
        *,
        prompt: str,
        reference_images: Sequence[UploadedImage],
        resolution: str,
        aspect_ratio: str,
    ) -> OperationHandle:
        self.calls.append(
            MockCall(
                method="start_generation",
                prompt=prompt,
                resolution=resolution,
                aspect_ratio=aspect_ratio,
                reference_images=list(reference_images),
            )
        )
        return self._start(self._segment_seconds)

    async def start_extension(
        self,
        *,
        prompt: str,
        previous_video: GeneratedVideo,
        resolution: str,
        aspect_ratio: str,
    ) -> OperationHandle:
        self.calls.append(
            MockCall(
                method="start_extension",
                prompt=prompt,
                resolution=resolution,
                aspect_ratio=aspect_ratio,
                previous_video=previous_video,
            )
        )
        previous = previous_video.duration_seconds or 0.0
        return self._start(previous + self._segment_seconds)

    async def poll_operation(self, handle: OperationHandle) -> OperationHandle:
        if handle.done:
            return handle

        if handle.name not in self._pending:
            raise GenerationClientError(
                f"Unknown mock operation: {handle.name}",
                operation=handle.name,
            )

        self._pending[handle.name] -= 1
        logger.debug("Mock operation %s: %d polls left", handle.name, self._pending[handle.name])
        if self._pending[handle.name] > 0:
            return handle
        del self._pending[handle.name]
        return self._finish(handle.name)

    def _start(self, total_duration: float) -> OperationHandle:
        name = f"operations/mock-{uuid.uuid4().hex[:12]}"
        self._results[name] = total_duration
        logger.info("Started mock operation %s (%.1fs)", name, total_duration)
        if self._polls_until_done <= 0:
            return self._finish(name)
        self._pending[name] = self._polls_until_done
        return PendingOperation(name=name)

    def _finish(self, name: str) -> DoneOperation:
        duration = self._results.pop(name)
        raw: dict[str, Any] = {"name": name, "duration_seconds": duration}
        video = GeneratedVideo(
            uri=f"mock://veo/{name.rsplit('/', 1)[-1]}",
            duration_seconds=duration,
            raw=raw,
        )
        return DoneOperation(name=name, videos=[video])
