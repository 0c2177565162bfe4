from dataclasses import dataclass

from passport_extractor.extraction.models import ExtractionResult
from passport_extractor.imaging.models import ImageMetadata
from passport_extractor.validation.models import ValidationResult


@dataclass(frozen=True)
class RawUpload:
    """An uploaded file as received: bytes plus declared media type.

    A bytearray buffer is zeroed by the image normalizer once consumed.
    """

    data: bytes | bytearray
    media_type: str
    filename: str = ""

    @property
    def size_bytes(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class PassportRecord:
    """Extraction and validation outcome for one photo, page or text section."""

    key: int
    extraction: ExtractionResult
    validation: ValidationResult
    filename: str = ""
    page_number: int | None = None
    section: int | None = None
    thumbnail: bytes | None = None
    metadata: ImageMetadata | None = None
    source_text: str = ""
    extraction_error: str = ""
