from dataclasses import dataclass, field

from passport_extractor.extraction.models import REQUIRED_FIELDS, ExtractionProfile


@dataclass(frozen=True)
class ValidatorConfig:
    """Thresholds for the passport validator."""

    required_fields: tuple[str, ...] = REQUIRED_FIELDS
    min_passport_length: int = 7
    max_passport_length: int = 9
    confidence_threshold: float = 0.6
    mrz_line_length: int = 44
    allow_short_mrz: bool = False
    min_year: int = 1900

    @classmethod
    def from_profile(
        cls,
        profile: ExtractionProfile,
        *,
        confidence_threshold: float = 0.6,
        allow_short_mrz: bool = False,
    ) -> "ValidatorConfig":
        return cls(
            required_fields=profile.required_fields,
            confidence_threshold=confidence_threshold,
            mrz_line_length=profile.mrz_line_length,
            allow_short_mrz=allow_short_mrz,
        )


@dataclass
class ValidationResult:
    """Findings for one extraction.

    Remarks invalidate the record; warnings only lower ``quality_score``.
    Both are formatted as ``"<field>: <message>"`` and grouped per field
    in ``details``.
    """

    is_valid: bool = True
    remarks: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    details: dict[str, list[str]] = field(default_factory=dict)
    quality_score: int = 100

    def to_dict(self) -> dict[str, object]:
        return {
            "isValid": self.is_valid,
            "remarks": list(self.remarks),
            "warnings": list(self.warnings),
            "details": {name: list(messages) for name, messages in self.details.items()},
            "qualityScore": self.quality_score,
        }
