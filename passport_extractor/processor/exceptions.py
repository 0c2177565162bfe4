class ProcessorError(Exception):
    """Base exception for all processor-related errors."""


class InputError(ProcessorError):
    """Raised when an upload is rejected before processing."""


class UnsupportedMediaTypeError(InputError):
    """Raised when the upload's media type is not accepted for the operation."""


class EmptyUploadError(InputError):
    """Raised when the upload contains no bytes."""


class UploadTooLargeError(InputError):
    """Raised when the upload exceeds its size limit."""


class BatchLimitError(InputError):
    """Raised when a batch has more items than allowed."""


class ProcessedImageTooLargeError(InputError):
    """Raised when an image is still over the size limit after compression."""


class NoPassportDataError(InputError):
    """Raised when a PDF page holds no candidate passport text."""
