from abc import ABC, abstractmethod

from passport_extractor.extraction.models import ExtractionOutcome
from passport_extractor.imaging.models import NormalizedImage


class BaseExtractor(ABC):
    """Contract for all passport extractors."""

    @abstractmethod
    async def extract(self, source: NormalizedImage | str) -> ExtractionOutcome:
        """Extract passport fields from a normalized image or a text segment.

        Args:
            source: Normalized page/photo image, or text reconstructed from a PDF.

        Returns:
            ExtractionOutcome carrying either the result or the classified error.
            Provider and response-format failures never raise.
        """
