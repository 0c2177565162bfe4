"""Image normalization: orient, bound, compress, cache."""

import asyncio
import hashlib
from typing import Any

from passport_extractor.imaging.base import BaseImageCodec
from passport_extractor.imaging.cache import ImageCache
from passport_extractor.imaging.exceptions import ImageDimensionError
from passport_extractor.imaging.models import DOCUMENT, THUMBNAIL, ImageOptions, NormalizedImage
from passport_extractor.logging.logger import Log

CacheKey = tuple[str, ImageOptions]


class ImageNormalizer:
    """Turns raw image bytes into a bounded-size, re-oriented JPEG."""

    def __init__(
        self,
        *,
        codec: BaseImageCodec,
        cache: ImageCache[CacheKey, NormalizedImage] | None = None,
        options: ImageOptions = DOCUMENT,
        dimension_ceiling: int = 5000,
    ) -> None:
        self._codec = codec
        self._cache: ImageCache[CacheKey, NormalizedImage] = (
            cache if cache is not None else ImageCache()
        )
        self._options = options
        self._dimension_ceiling = dimension_ceiling

    @property
    def options(self) -> ImageOptions:
        return self._options

    async def normalize(
        self,
        data: bytes | bytearray,
        options: ImageOptions | None = None,
    ) -> NormalizedImage:
        """Normalize image bytes, serving repeated inputs from the cache.

        A bytearray input is zeroed once consumed.

        Raises:
            ImageDecodeError: if the bytes cannot be decoded.
            ImageDimensionError: if dimensions are missing or over the ceiling.
        """
        opts = options or self._options
        try:
            digest = hashlib.md5(data, usedforsecurity=False).hexdigest()
            key = (digest, opts)
            cached = self._cache.get(key)
            if cached is not None:
                Log.debug(f"Image cache hit for {digest}")
                return cached

            image = await asyncio.to_thread(self._process, bytes(data), digest, opts)
            self._cache.put(key, image)
            Log.debug(
                f"Normalized image {digest}: {image.source_width}x{image.source_height} "
                f"-> {image.width}x{image.height}, {image.size_bytes} bytes"
            )
            return image
        finally:
            if isinstance(data, bytearray):
                data[:] = bytes(len(data))

    async def thumbnail(
        self,
        image: NormalizedImage,
        options: ImageOptions = THUMBNAIL,
    ) -> bytes:
        """Derive a small JPEG from an already normalized image (not cached)."""
        return await asyncio.to_thread(self._thumbnail, image.data, options)

    def _process(self, data: bytes, digest: str, opts: ImageOptions) -> NormalizedImage:
        decoded = self._codec.decode(data)
        oriented = self._codec.auto_orient(decoded.image)
        width, height = self._codec.size(oriented)
        self._check_dimensions(width, height)
        encoded, out_width, out_height = self._encode(oriented, opts)
        return NormalizedImage(
            data=encoded,
            width=out_width,
            height=out_height,
            source_format=decoded.format,
            source_width=width,
            source_height=height,
            digest=digest,
        )

    def _thumbnail(self, data: bytes, opts: ImageOptions) -> bytes:
        decoded = self._codec.decode(data)
        encoded, _, _ = self._encode(decoded.image, opts)
        return encoded

    def _encode(self, image: Any, opts: ImageOptions) -> tuple[bytes, int, int]:
        resized = self._codec.resize(image, opts.max_width, opts.max_height)
        width, height = self._codec.size(resized)
        return self._codec.encode_jpeg(resized, opts.quality, progressive=True), width, height

    def _check_dimensions(self, width: int | None, height: int | None) -> None:
        if not width or not height or width <= 0 or height <= 0:
            raise ImageDimensionError("Invalid image dimensions: missing width or height")
        if width > self._dimension_ceiling or height > self._dimension_ceiling:
            raise ImageDimensionError(
                f"Invalid image dimensions: {width}x{height} exceeds "
                f"{self._dimension_ceiling}px limit"
            )
