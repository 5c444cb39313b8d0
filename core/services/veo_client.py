"""Veo generation client built on the google-genai SDK."""

import base64
import logging
from typing import TYPE_CHECKING, Any, Sequence

from google import genai
from google.genai import types

from core.constants import MAX_REFERENCE_IMAGES
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


def _to_reference_image(image: UploadedImage) -> types.VideoGenerationReferenceImage:
    # Images may arrive already encoded, with only the payload set
    data = image.raw_bytes or base64.b64decode(image.base64_payload)
    return types.VideoGenerationReferenceImage(
        image=types.Image(image_bytes=data, mime_type=image.mime_type),
        reference_type=types.VideoGenerationReferenceType.ASSET,
    )


def _to_handle(operation: Any) -> OperationHandle:
    """Translate an SDK operation into an OperationHandle.

    Args:
        operation: A ``GenerateVideosOperation`` returned by the SDK.

    Returns:
        A PendingOperation while running, otherwise a DoneOperation.
    """
    name = getattr(operation, "name", None) or ""
    if not getattr(operation, "done", False):
        return PendingOperation(name=name, raw=operation)

    error = getattr(operation, "error", None)
    response = getattr(operation, "response", None)
    videos: list[GeneratedVideo] = []
    for generated in getattr(response, "generated_videos", None) or []:
        video = getattr(generated, "video", None)
        uri = getattr(video, "uri", None)
        if not uri:
            continue
        videos.append(
            GeneratedVideo(
                uri=uri,
                duration_seconds=getattr(video, "duration_seconds", None),
                raw=video,
            )
        )

    return DoneOperation(
        name=name,
        videos=videos,
        error=str(error) if error else None,
        raw=operation,
    )


class VeoGenerationClient:
    """Generation client for Google's Veo models.

    The API key is read once at construction; it cannot be rotated for the
    lifetime of the client.
    """

    def __init__(self, settings: "Settings", *, client: Any = None):
        """Initialize the Veo client.

        Args:
            settings: Application settings with the Gemini API key.
            client: Optional preconfigured ``genai.Client``.

        Raises:
            GenerationClientError: If no API key is configured.
        """
        if client is None and not settings.gemini_api_key:
            raise GenerationClientError("Gemini API key not configured")

        self._client = client or genai.Client(api_key=settings.gemini_api_key)
        self._model = settings.veo_model
        self._number_of_videos = settings.number_of_videos
        self._logger = logging.getLogger(self.__class__.__name__)

    async def start_generation(
        self,
        *,
        prompt: str,
        reference_images: Sequence[UploadedImage],
        resolution: str,
        aspect_ratio: str,
    ) -> OperationHandle:
        """Start the initial segment with reference images.

        Raises:
            GenerationClientError: If the API call fails.
        """
        references = [_to_reference_image(img) for img in reference_images[:MAX_REFERENCE_IMAGES]]
        config = types.GenerateVideosConfig(
            number_of_videos=self._number_of_videos,
            resolution=resolution,
            aspect_ratio=aspect_ratio,
            reference_images=references,
        )
        self._logger.info(
            "Requesting initial video from %s with %d reference images",
            self._model,
            len(references),
        )
        try:
            operation = await self._client.aio.models.generate_videos(
                model=self._model,
                prompt=prompt,
                config=config,
            )
        except Exception as e:
            raise GenerationClientError(
                f"Veo generation request failed: {e}",
                operation="generate",
            ) from e
        return _to_handle(operation)

    async def start_extension(
        self,
        *,
        prompt: str,
        previous_video: GeneratedVideo,
        resolution: str,
        aspect_ratio: str,
    ) -> OperationHandle:
        """Start a segment continuing ``previous_video``.

        Raises:
            GenerationClientError: If the API call fails.
        """
        video = previous_video.raw
        if not isinstance(video, types.Video):
            video = types.Video(uri=previous_video.uri)

        config = types.GenerateVideosConfig(
            number_of_videos=self._number_of_videos,
            resolution=resolution,
            aspect_ratio=aspect_ratio,
        )
        self._logger.info("Requesting extension of %s", previous_video.uri)
        try:
            operation = await self._client.aio.models.generate_videos(
                model=self._model,
                prompt=prompt,
                video=video,
                config=config,
            )
        except Exception as e:
            raise GenerationClientError(
                f"Veo extension request failed: {e}",
                operation="extend",
            ) from e
        return _to_handle(operation)

    async def poll_operation(self, handle: OperationHandle) -> OperationHandle:
        """Refresh an operation's status.

        Raises:
            GenerationClientError: If the handle has no SDK operation or the call fails.
        """
        if handle.done:
            return handle
        if handle.raw is None:
            raise GenerationClientError(
                "Operation handle has no service operation to poll",
                operation=handle.name,
            )

        try:
            operation = await self._client.aio.operations.get(handle.raw)
        except Exception as e:
            raise GenerationClientError(
                f"Polling operation {handle.name} failed: {e}",
                operation=handle.name,
            ) from e
        return _to_handle(operation)
