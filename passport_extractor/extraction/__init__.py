from passport_extractor.extraction.base import BaseExtractor
from passport_extractor.extraction.extractor import Extractor
from passport_extractor.extraction.factory import ExtractorFactory
from passport_extractor.extraction.models import ExtractionOutcome, ExtractionResult
from passport_extractor.extraction.quality import QualityChecker

__all__ = [
    "BaseExtractor",
    "ExtractionOutcome",
    "ExtractionResult",
    "Extractor",
    "ExtractorFactory",
    "QualityChecker",
]
