class ImageProcessingError(Exception):
    """Raised when an image cannot be normalized."""


class ImageDecodeError(ImageProcessingError):
    """Raised when image bytes cannot be decoded."""


class ImageDimensionError(ImageProcessingError):
    """Raised when image dimensions are missing or exceed the hard ceiling."""
