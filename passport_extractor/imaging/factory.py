from passport_extractor.config.settings import Settings
from passport_extractor.imaging.cache import ImageCache
from passport_extractor.imaging.models import ImageOptions
from passport_extractor.imaging.normalizer import ImageNormalizer
from passport_extractor.imaging.pillow_codec import PillowImageCodec


class ImageNormalizerFactory:
    """Creates an image normalizer from settings."""

    @classmethod
    def create(cls, settings: Settings) -> ImageNormalizer:
        options = ImageOptions(
            max_width=settings.image_max_width,
            max_height=settings.image_max_height,
            quality=settings.image_jpeg_quality,
        )
        return ImageNormalizer(
            codec=PillowImageCodec(),
            cache=ImageCache(settings.image_cache_capacity),
            options=options,
            dimension_ceiling=settings.image_dimension_ceiling,
        )
