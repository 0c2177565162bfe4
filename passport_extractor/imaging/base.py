from abc import ABC, abstractmethod
from typing import Any

from passport_extractor.imaging.models import DecodedImage


class BaseImageCodec(ABC):
    """Contract for image codec adapters."""

    @abstractmethod
    def decode(self, data: bytes) -> DecodedImage:
        """Decode raw image bytes.

        Raises:
            ImageDecodeError: if the bytes are not a readable image.
        """

    @abstractmethod
    def auto_orient(self, image: Any) -> Any:
        """Apply the rotation stored in the image metadata."""

    @abstractmethod
    def size(self, image: Any) -> tuple[int, int]:
        """Return (width, height) of a decoded image."""

    @abstractmethod
    def resize(self, image: Any, max_width: int, max_height: int) -> Any:
        """Fit the image inside the box, preserving aspect ratio, never enlarging."""

    @abstractmethod
    def encode_jpeg(self, image: Any, quality: int, progressive: bool = True) -> bytes:
        """Encode the image as JPEG."""
