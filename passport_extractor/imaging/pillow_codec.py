import io
from typing import Any

from PIL import Image, ImageOps, UnidentifiedImageError

from passport_extractor.imaging.base import BaseImageCodec
from passport_extractor.imaging.exceptions import ImageDecodeError
from passport_extractor.imaging.models import DecodedImage

_MAX_INPUT_PIXELS = 25_000_000


class PillowImageCodec(BaseImageCodec):
    """Image codec built on Pillow."""

    def __init__(self, max_input_pixels: int = _MAX_INPUT_PIXELS) -> None:
        self._max_input_pixels = max_input_pixels

    def decode(self, data: bytes) -> DecodedImage:
        try:
            image = Image.open(io.BytesIO(data))
            if image.width * image.height > self._max_input_pixels:
                raise ImageDecodeError(
                    f"Image has too many pixels: {image.width}x{image.height}"
                )
            image.load()
        except ImageDecodeError:
            raise
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
            raise ImageDecodeError(f"Unable to decode image: {exc}") from exc
        image_format = (image.format or "").lower()
        return DecodedImage(
            image=image,
            width=image.width,
            height=image.height,
            format=image_format,
        )

    def auto_orient(self, image: Any) -> Any:
        return ImageOps.exif_transpose(image)

    def size(self, image: Any) -> tuple[int, int]:
        return image.width, image.height

    def resize(self, image: Any, max_width: int, max_height: int) -> Any:
        resized = image.copy()
        resized.thumbnail((max_width, max_height), Image.Resampling.LANCZOS)
        return resized

    def encode_jpeg(self, image: Any, quality: int, progressive: bool = True) -> bytes:
        if image.mode not in ("RGB", "L"):
            image = image.convert("RGB")
        buf = io.BytesIO()
        image.save(
            buf,
            format="JPEG",
            quality=quality,
            progressive=progressive,
            optimize=True,
        )
        return buf.getvalue()
