from passport_extractor.validation.models import ValidationResult, ValidatorConfig
from passport_extractor.validation.validator import validate

__all__ = ["ValidationResult", "ValidatorConfig", "validate"]
