"""Pytest configuration and shared fixtures."""

import pytest

from config.settings import ExecutionProfile, Settings
from core.models import (
    DoneOperation,
    GeneratedVideo,
    GenerationProgress,
    PendingOperation,
    UploadedImage,
)
from core.services.image_codec import encode_image

# Smallest valid PNG header; content is never decoded locally
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


@pytest.fixture
def test_settings() -> Settings:
    """Provide test settings with the debug profile and no poll delay."""
    return Settings(
        execution_profile=ExecutionProfile.DEBUG,
        gemini_api_key="test_key",
        poll_interval_seconds=0.0,
        mock_polls_until_done=1,
        mock_segment_seconds=8.0,
    )


@pytest.fixture
def sample_images() -> list[UploadedImage]:
    """Provide five encoded screenshots."""
    return [
        encode_image(PNG_BYTES + bytes([i]), "image/png", filename=f"screen_{i}.png")
        for i in range(5)
    ]


@pytest.fixture
def progress_log() -> list[GenerationProgress]:
    """Collect progress snapshots emitted during a run."""
    return []


class ScriptedClient:
    """Generation client that replays scripted results.

    Each entry in ``results`` is the list of videos returned by the next
    operation (initial first, then extensions). ``pending_polls`` sets how
    many polls each operation stays pending.
    """

    def __init__(self, results: list[list[GeneratedVideo]], *, pending_polls: int = 0):
        self._results = list(results)
        self._pending_polls = pending_polls
        self._remaining: dict[str, int] = {}
        self._done: dict[str, DoneOperation] = {}
        self.generation_calls: list[dict] = []
        self.extension_calls: list[dict] = []
        self.poll_count = 0

    @staticmethod
    def video(uri: str, duration: float | None) -> GeneratedVideo:
        """Build a generated video for scripted results."""
        return GeneratedVideo(uri=uri, duration_seconds=duration)

    def _next(self) -> PendingOperation | DoneOperation:
        name = f"operations/{len(self.generation_calls) + len(self.extension_calls)}"
        done = DoneOperation(name=name, videos=self._results.pop(0))
        if self._pending_polls == 0:
            return done
        self._remaining[name] = self._pending_polls
        self._done[name] = done
        return PendingOperation(name=name)

    async def start_generation(self, *, prompt, reference_images, resolution, aspect_ratio):
        self.generation_calls.append(
            {
                "prompt": prompt,
                "reference_images": list(reference_images),
                "resolution": resolution,
                "aspect_ratio": aspect_ratio,
            }
        )
        return self._next()

    async def start_extension(self, *, prompt, previous_video, resolution, aspect_ratio):
        self.extension_calls.append(
            {
                "prompt": prompt,
                "previous_video": previous_video,
                "resolution": resolution,
                "aspect_ratio": aspect_ratio,
            }
        )
        return self._next()

    async def poll_operation(self, handle):
        self.poll_count += 1
        if handle.done:
            return handle
        self._remaining[handle.name] -= 1
        if self._remaining[handle.name] > 0:
            return handle
        return self._done.pop(handle.name)


@pytest.fixture
def scripted_client_factory():
    """Provide the ScriptedClient class for building scripted services."""
    return ScriptedClient
