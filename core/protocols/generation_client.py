"""Protocol for the generative video service."""

from typing import Protocol, Sequence

from core.models import GeneratedVideo, OperationHandle, UploadedImage


class IGenerationClient(Protocol):
    """Interface for services that create and extend video clips."""

    async def start_generation(
        self,
        *,
        prompt: str,
        reference_images: Sequence[UploadedImage],
        resolution: str,
        aspect_ratio: str,
    ) -> OperationHandle:
        """Start generating the first segment.

        Args:
            prompt: Augmented prompt for the segment.
            reference_images: Images grounding the output (at most 3).
            resolution: Output resolution, e.g. "720p".
            aspect_ratio: Output aspect ratio, e.g. "16:9".

        Returns:
            Handle for the started operation.

        Raises:
            GenerationClientError: If the service call fails.
        """
        ...

    async def start_extension(
        self,
        *,
        prompt: str,
        previous_video: GeneratedVideo,
        resolution: str,
        aspect_ratio: str,
    ) -> OperationHandle:
        """Start a segment that continues ``previous_video``.

        Resolution and aspect ratio must match the previous segment.

        Raises:
            GenerationClientError: If the service call fails.
        """
        ...

    async def poll_operation(self, handle: OperationHandle) -> OperationHandle:
        """Refresh the status of an operation.

        Once a handle is done it stays done.

        Raises:
            GenerationClientError: If the service call fails.
        """
        ...
