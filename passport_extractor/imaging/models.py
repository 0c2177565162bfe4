import base64
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ImageOptions:
    """Bounding box and JPEG quality used when encoding an image."""

    max_width: int = 1200
    max_height: int = 1200
    quality: int = 80


# Presets observed at the different call sites.
DOCUMENT = ImageOptions(max_width=1200, max_height=1200, quality=80)
PREVIEW = ImageOptions(max_width=800, max_height=800, quality=75)
THUMBNAIL = ImageOptions(max_width=300, max_height=300, quality=60)


@dataclass(frozen=True)
class DecodedImage:
    """Decoded image handle as returned by the codec."""

    image: Any
    width: int
    height: int
    format: str


@dataclass(frozen=True)
class NormalizedImage:
    """Bounded, re-oriented, JPEG-compressed image."""

    data: bytes
    width: int
    height: int
    source_format: str
    source_width: int
    source_height: int
    digest: str = ""
    format: str = "jpeg"

    @property
    def size_bytes(self) -> int:
        return len(self.data)

    def base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def data_url(self) -> str:
        return f"data:image/jpeg;base64,{self.base64()}"

    def metadata(self) -> "ImageMetadata":
        return ImageMetadata(
            width=self.source_width,
            height=self.source_height,
            format=self.source_format,
            size=self.size_bytes,
        )


@dataclass(frozen=True)
class ImageMetadata:
    """Source dimensions and format plus the processed byte size."""

    width: int
    height: int
    format: str
    size: int
