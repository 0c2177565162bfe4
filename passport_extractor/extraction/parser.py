"""Builds an ExtractionResult from the parsed model response."""

import json
import math
from typing import Any

from passport_extractor.extraction.exceptions import ExtractionFormatError
from passport_extractor.extraction.models import (
    DEFAULT_OVERALL_CONFIDENCE,
    IDENTITY_FIELDS,
    ExtractionResult,
    MrzLines,
)


def parse_json(raw: str) -> dict[str, Any]:
    """Parse the model's text response, tolerating markdown code fences.

    Raises:
        ExtractionFormatError: if the text is not a JSON object.
    """
    cleaned = raw.strip()
    if cleaned.startswith("```"):
        lines = cleaned.splitlines()
        if lines and lines[0].startswith("```"):
            lines = lines[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        cleaned = "\n".join(lines)

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ExtractionFormatError(f"Invalid JSON response: {exc}") from exc

    if not isinstance(parsed, dict):
        raise ExtractionFormatError("JSON response must be an object")
    return parsed


def overall_confidence(
    scores: dict[str, float],
    default: float = DEFAULT_OVERALL_CONFIDENCE,
) -> float:
    """Mean of the usable scores rounded to 2 places, else ``default``.

    Scores outside [0, 1] stay in the result for the validator to flag but are
    left out of the mean.
    """
    usable = [score for score in scores.values() if 0 <= score <= 1]
    if not usable:
        return default
    return round(sum(usable) / len(usable), 2)


def build_result(
    data: dict[str, Any],
    *,
    default_confidence: float = DEFAULT_OVERALL_CONFIDENCE,
) -> ExtractionResult:
    """Build the canonical result from a response object.

    Accepts fields at the top level or under ``data``, as bare strings or as
    ``{"value": ..., "confidence": ...}`` objects.

    Raises:
        ExtractionFormatError: if a field has an unusable type.
    """
    payload = data.get("data") if isinstance(data.get("data"), dict) else data
    notes = _build_notes(data.get("extraction_notes", payload.get("extraction_notes")))
    scores = _build_scores(
        data.get("confidence_scores", payload.get("confidence_scores")),
        notes,
    )

    values: dict[str, str] = {}
    for attr, key in IDENTITY_FIELDS.items():
        value, confidence = _unwrap(payload.get(key), key)
        values[attr] = value
        if confidence is not None and key not in scores:
            scores[key] = confidence

    return ExtractionResult(
        **values,
        mrz=_build_mrz(payload.get("mrz"), notes),
        confidence_scores=scores,
        overall_confidence=overall_confidence(scores, default_confidence),
        extraction_notes=notes,
    )


def _unwrap(raw: Any, key: str) -> tuple[str, float | None]:
    if raw is None:
        return "", None
    if isinstance(raw, str):
        return raw.strip(), None
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return str(raw), None
    if isinstance(raw, dict):
        value, _ = _unwrap(raw.get("value"), key)
        return value, _as_score(raw.get("confidence"))
    raise ExtractionFormatError(
        f"'{key}' must be a string or an object with 'value', got {type(raw).__name__}"
    )


def _as_score(raw: Any) -> float | None:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return None
    try:
        score = float(raw)
    except OverflowError:
        return None
    if not math.isfinite(score):
        return None
    return score


def _build_scores(raw: Any, notes: list[str]) -> dict[str, float]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ExtractionFormatError("'confidence_scores' must be an object")
    scores: dict[str, float] = {}
    for name, value in raw.items():
        score = _as_score(value)
        if score is None:
            notes.append(f"Ignored unusable confidence score for {name}")
            continue
        scores[str(name)] = score
    return scores


def _build_mrz(raw: Any, notes: list[str]) -> MrzLines | None:
    """Read the MRZ as an object, a pair or a two-line string.

    Any other shape drops the MRZ with a note and keeps the remaining fields.
    """
    if raw is None:
        return None
    if isinstance(raw, str):
        raw = [line for line in raw.splitlines() if line.strip()] or ["", ""]
    if isinstance(raw, dict):
        lines = [raw.get("line1"), raw.get("line2")]
    elif isinstance(raw, list) and len(raw) == 2:
        lines = list(raw)
    else:
        notes.append("Ignored MRZ: expected two lines")
        return None
    if not all(line is None or isinstance(line, str) for line in lines):
        notes.append("Ignored MRZ: lines must be strings")
        return None
    mrz = MrzLines(line1=(lines[0] or "").strip(), line2=(lines[1] or "").strip())
    if not mrz.line1 and not mrz.line2:
        return None
    return mrz


def _build_notes(raw: Any) -> list[str]:
    if raw is None:
        return []
    if isinstance(raw, str):
        return [raw] if raw else []
    if not isinstance(raw, list):
        raise ExtractionFormatError("'extraction_notes' must be a list of strings")
    return [str(note) for note in raw if note]
