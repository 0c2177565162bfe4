"""Rule-based checks of extracted passport data.

Findings are returned as data, never raised. Each rule deducts a fixed
penalty from a quality score that starts at 100.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from passport_extractor.extraction.models import IDENTITY_FIELDS, ExtractionResult
from passport_extractor.validation.countries import COUNTRY_CODES
from passport_extractor.validation.models import ValidationResult, ValidatorConfig

_MAX_QUALITY = 100
_SHORT_MRZ_LENGTH = 36
_LOW_CONFIDENCE_WEIGHT = 25

_PENALTY_REQUIRED = 15
_PENALTY_PASSPORT_NUMBER = 15
_PENALTY_DATE_FORMAT = 15
_PENALTY_FUTURE_DATE = 20
_PENALTY_MIN_YEAR = 10
_PENALTY_EXPIRED = 10
_PENALTY_DATE_ORDER = 20
_PENALTY_COUNTRY = 15
_PENALTY_MRZ = 20
_PENALTY_CONFIDENCE = 10
_PENALTY_NAME_CHARS = 10
_PENALTY_NAME_SEPARATOR = 5
_PENALTY_GENDER = 5

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_MACHINE_CHARS_RE = re.compile(r"^[A-Z0-9<]+$")
_NAME_PUNCTUATION = frozenset(" -'.")
_GENDERS = frozenset({"M", "F", "X"})


@dataclass
class _Findings:
    remarks: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    details: dict[str, list[str]] = field(default_factory=dict)
    penalty: float = 0.0

    def remark(self, name: str, message: str, penalty: float) -> None:
        self.remarks.append(f"{name}: {message}")
        self._record(name, message, penalty)

    def warn(self, name: str, message: str, penalty: float) -> None:
        self.warnings.append(f"{name}: {message}")
        self._record(name, message, penalty)

    def _record(self, name: str, message: str, penalty: float) -> None:
        self.details.setdefault(name, []).append(message)
        self.penalty += penalty

    def build(self) -> ValidationResult:
        score = max(0, min(_MAX_QUALITY, round(_MAX_QUALITY - self.penalty)))
        return ValidationResult(
            is_valid=not self.remarks,
            remarks=self.remarks,
            warnings=self.warnings,
            details=self.details,
            quality_score=score,
        )


def validate(
    data: ExtractionResult | Mapping[str, Any],
    config: ValidatorConfig | None = None,
    today: date | None = None,
) -> ValidationResult:
    """Validate extracted passport data.

    Args:
        data: An ExtractionResult, or a raw mapping whose fields are bare
              strings or ``{"value": ...}`` objects.
        config: Thresholds; defaults to ValidatorConfig().
        today: Reference date for future/expiry checks; defaults to today.
    """
    config = config or ValidatorConfig()
    today = today or date.today()
    values, mrz, scores = _flatten(data)
    findings = _Findings()

    for name in config.required_fields:
        if not values.get(name, ""):
            findings.remark(name, "Required field missing", _PENALTY_REQUIRED)

    _check_passport_number(values.get("passportNumber", ""), config, findings)
    _check_dates(values, config, today, findings)
    _check_nationality(values.get("nationality", ""), findings)
    _check_mrz(mrz, config, findings)
    _check_confidence(scores, config, findings)
    _check_full_name(values.get("fullName", ""), findings)
    _check_gender(values.get("gender", ""), findings)
    return findings.build()


def _flatten(
    data: ExtractionResult | Mapping[str, Any],
) -> tuple[dict[str, str], tuple[str, str] | None, dict[str, Any]]:
    if isinstance(data, ExtractionResult):
        values = {key: data.field_value(key) for key in IDENTITY_FIELDS.values()}
        mrz = (data.mrz.line1, data.mrz.line2) if data.mrz else None
        return values, mrz, dict(data.confidence_scores)

    values = {key: _text(data.get(key)) for key in IDENTITY_FIELDS.values()}
    raw_mrz = data.get("mrz")
    mrz = None
    if isinstance(raw_mrz, Mapping):
        mrz = (_text(raw_mrz.get("line1")), _text(raw_mrz.get("line2")))
    raw_scores = data.get("confidence_scores")
    scores = dict(raw_scores) if isinstance(raw_scores, Mapping) else {}
    return values, mrz, scores


def _text(raw: Any) -> str:
    if isinstance(raw, Mapping):
        raw = raw.get("value")
    if raw is None:
        return ""
    return str(raw).strip()


def _check_passport_number(number: str, config: ValidatorConfig, findings: _Findings) -> None:
    if not number:
        return
    if not config.min_passport_length <= len(number) <= config.max_passport_length:
        findings.remark(
            "passportNumber",
            f"Invalid length ({len(number)} characters)",
            _PENALTY_PASSPORT_NUMBER,
        )
    if not _MACHINE_CHARS_RE.match(number):
        findings.remark("passportNumber", "Contains invalid characters", _PENALTY_PASSPORT_NUMBER)


def _parse_date(name: str, raw: str, findings: _Findings) -> date | None:
    if not raw:
        return None
    if not _DATE_RE.match(raw):
        findings.remark(name, "Invalid date format", _PENALTY_DATE_FORMAT)
        return None
    try:
        return datetime.strptime(raw, "%Y-%m-%d").date()
    except ValueError:
        findings.remark(name, "Invalid date format", _PENALTY_DATE_FORMAT)
        return None


def _check_dates(
    values: dict[str, str],
    config: ValidatorConfig,
    today: date,
    findings: _Findings,
) -> None:
    dob = _parse_date("dateOfBirth", values.get("dateOfBirth", ""), findings)
    doi = _parse_date("dateOfIssue", values.get("dateOfIssue", ""), findings)
    doe = _parse_date("dateOfExpiry", values.get("dateOfExpiry", ""), findings)

    for name, value in (("dateOfBirth", dob), ("dateOfIssue", doi)):
        if value is None:
            continue
        if value > today:
            findings.remark(name, "Cannot be in the future", _PENALTY_FUTURE_DATE)
        if value.year < config.min_year:
            findings.remark(
                name, f"Year cannot be before {config.min_year}", _PENALTY_MIN_YEAR
            )

    if doe is not None and doe < today:
        findings.warn("dateOfExpiry", "Document has expired", _PENALTY_EXPIRED)

    if dob and doi and dob > doi:
        findings.remark("dateOfBirth", "Cannot be after issue date", _PENALTY_DATE_ORDER)
    if doi and doe and doi > doe:
        findings.remark("dateOfIssue", "Cannot be after expiration date", _PENALTY_DATE_ORDER)


def _check_nationality(nationality: str, findings: _Findings) -> None:
    if nationality and nationality.upper() not in COUNTRY_CODES:
        findings.remark("nationality", "Invalid country code", _PENALTY_COUNTRY)


def _check_mrz(
    mrz: tuple[str, str] | None,
    config: ValidatorConfig,
    findings: _Findings,
) -> None:
    if mrz is None or not any(mrz):
        return
    if not all(mrz):
        findings.remark("mrz", "Incomplete MRZ: both lines are required", _PENALTY_MRZ)
        return
    lengths = {config.mrz_line_length}
    if config.allow_short_mrz:
        lengths.add(_SHORT_MRZ_LENGTH)
    for number, line in enumerate(mrz, start=1):
        if len(line) not in lengths or not _MACHINE_CHARS_RE.match(line):
            findings.remark(f"mrz.line{number}", "Invalid MRZ format", _PENALTY_MRZ)


def _check_confidence(
    scores: dict[str, Any],
    config: ValidatorConfig,
    findings: _Findings,
) -> None:
    threshold = config.confidence_threshold
    for name, score in scores.items():
        # NaN fails the range comparison too.
        if (
            isinstance(score, bool)
            or not isinstance(score, (int, float))
            or not 0 <= score <= 1
        ):
            findings.remark(
                f"confidence_scores.{name}", "Invalid confidence score", _PENALTY_CONFIDENCE
            )
            continue
        if threshold > 0 and score < threshold:
            findings.remark(
                name,
                f"Low confidence ({score:.2f})",
                _LOW_CONFIDENCE_WEIGHT * (threshold - score) / threshold,
            )


def _check_full_name(full_name: str, findings: _Findings) -> None:
    if not full_name:
        return
    if not all(ch.isalpha() or ch in _NAME_PUNCTUATION for ch in full_name):
        findings.remark("fullName", "Contains invalid characters", _PENALTY_NAME_CHARS)
    if not any(ch.isspace() for ch in full_name):
        findings.warn("fullName", "Missing surname/given name separator", _PENALTY_NAME_SEPARATOR)


def _check_gender(gender: str, findings: _Findings) -> None:
    if gender and gender.upper() not in _GENDERS:
        findings.warn("gender", "Must be M, F or X", _PENALTY_GENDER)
