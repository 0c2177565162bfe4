from dataclasses import dataclass, field

from passport_extractor.extraction.exceptions import ExtractionError

# Tunable: used when the model returns no per-field confidence at all.
DEFAULT_OVERALL_CONFIDENCE = 0.5

# Attribute name -> serialized key.
IDENTITY_FIELDS: dict[str, str] = {
    "full_name": "fullName",
    "date_of_birth": "dateOfBirth",
    "passport_number": "passportNumber",
    "nationality": "nationality",
    "date_of_issue": "dateOfIssue",
    "date_of_expiry": "dateOfExpiry",
    "place_of_birth": "placeOfBirth",
    "issuing_authority": "issuingAuthority",
    "gender": "gender",
}

SCORED_FIELDS: tuple[str, ...] = (
    "fullName",
    "dateOfBirth",
    "passportNumber",
    "nationality",
    "dateOfIssue",
    "dateOfExpiry",
    "placeOfBirth",
    "issuingAuthority",
    "mrz",
)

REQUIRED_FIELDS: tuple[str, ...] = (
    "fullName",
    "dateOfBirth",
    "passportNumber",
    "nationality",
    "dateOfIssue",
    "dateOfExpiry",
)


@dataclass(frozen=True)
class MrzLines:
    """The two machine readable zone lines."""

    line1: str = ""
    line2: str = ""


@dataclass(frozen=True)
class ExtractionResult:
    """Canonical passport extraction output. Identity fields are bare strings."""

    full_name: str = ""
    date_of_birth: str = ""
    passport_number: str = ""
    nationality: str = ""
    date_of_issue: str = ""
    date_of_expiry: str = ""
    place_of_birth: str = ""
    issuing_authority: str = ""
    gender: str = ""
    mrz: MrzLines | None = None
    confidence_scores: dict[str, float] = field(default_factory=dict)
    overall_confidence: float = 0.0
    extraction_notes: list[str] = field(default_factory=list)

    @classmethod
    def empty(
        cls,
        note: str,
        scored_fields: tuple[str, ...] = SCORED_FIELDS,
    ) -> "ExtractionResult":
        """Well-typed result for a failed extraction."""
        return cls(
            mrz=MrzLines(),
            confidence_scores={name: 0.0 for name in scored_fields},
            overall_confidence=0.0,
            extraction_notes=[note],
        )

    def field_value(self, key: str) -> str:
        """Return an identity field by its serialized key (e.g. ``dateOfBirth``)."""
        for attr, name in IDENTITY_FIELDS.items():
            if name == key:
                return str(getattr(self, attr))
        raise KeyError(key)

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            name: getattr(self, attr) for attr, name in IDENTITY_FIELDS.items()
        }
        data["mrz"] = (
            {"line1": self.mrz.line1, "line2": self.mrz.line2} if self.mrz else None
        )
        data["confidence_scores"] = dict(self.confidence_scores)
        data["overall_confidence"] = self.overall_confidence
        data["extraction_notes"] = list(self.extraction_notes)
        return data


@dataclass(frozen=True)
class ExtractionOutcome:
    """Either an extraction result or the error that prevented one."""

    result: ExtractionResult | None = None
    error: ExtractionError | None = None

    @property
    def ok(self) -> bool:
        return self.result is not None

    @property
    def note(self) -> str:
        return self.error.note() if self.error is not None else ""

    def to_result(self, scored_fields: tuple[str, ...] = SCORED_FIELDS) -> ExtractionResult:
        """Return the result, or the empty result carrying the failure note."""
        if self.result is not None:
            return self.result
        return ExtractionResult.empty(self.note or "Extraction failed", scored_fields)


@dataclass(frozen=True)
class ExtractionProfile:
    """Single configuration record shared by the prompt and the validator."""

    system_prompt: str
    fields: tuple[str, ...] = tuple(IDENTITY_FIELDS.values())
    scored_fields: tuple[str, ...] = SCORED_FIELDS
    required_fields: tuple[str, ...] = REQUIRED_FIELDS
    date_format: str = "YYYY-MM-DD"
    mrz_line_length: int = 44


@dataclass(frozen=True)
class QualityReport:
    """Suitability of a photo for extraction."""

    is_valid: bool
    issues: list[str] = field(default_factory=list)
