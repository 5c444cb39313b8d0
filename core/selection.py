"""Ordered, capped selection of uploaded screenshots."""

import logging
from typing import Callable, Iterable

from core.models import UploadedImage

logger = logging.getLogger(__name__)

SelectionListener = Callable[[tuple[UploadedImage, ...]], None]


class ImageSelection:
    """Holds the screenshots chosen for the next run.

    The selection keeps insertion order and never grows beyond
    ``max_images``; extra images in an ``add`` call are dropped. Listeners
    are notified with the new selection after every change.
    """

    def __init__(self, *, max_images: int = 10):
        if max_images < 1:
            raise ValueError("max_images must be at least 1")
        self.max_images = max_images
        self._images: list[UploadedImage] = []
        self._listeners: list[SelectionListener] = []

    @property
    def images(self) -> tuple[UploadedImage, ...]:
        return tuple(self._images)

    @property
    def remaining_slots(self) -> int:
        return self.max_images - len(self._images)

    def __len__(self) -> int:
        return len(self._images)

    def subscribe(self, listener: SelectionListener) -> None:
        """Register a callback for selection changes."""
        self._listeners.append(listener)

    def add(self, images: Iterable[UploadedImage]) -> list[UploadedImage]:
        """Append images up to the remaining capacity.

        Args:
            images: Images to add, in order.

        Returns:
            The images actually retained.
        """
        incoming = list(images)
        accepted = incoming[: self.remaining_slots]
        if len(accepted) < len(incoming):
            logger.info(
                "Selection full: kept %d of %d new images (max %d)",
                len(accepted),
                len(incoming),
                self.max_images,
            )
        if accepted:
            self._images.extend(accepted)
            self._notify()
        return accepted

    def remove(self, index: int) -> UploadedImage:
        """Remove and return the image at ``index``.

        Raises:
            IndexError: If the index is out of range.
        """
        if not 0 <= index < len(self._images):
            raise IndexError(f"No image at index {index}")
        removed = self._images.pop(index)
        self._notify()
        return removed

    def clear(self) -> None:
        """Drop every selected image."""
        self._images.clear()
        self._notify()

    def _notify(self) -> None:
        snapshot = self.images
        for listener in self._listeners:
            listener(snapshot)
