"""Page text reconstruction and passport section segmentation."""

import re
from collections.abc import Iterable

from passport_extractor.pdf.models import TextRun

MIN_LINE_TOLERANCE = 2.0
LINE_TOLERANCE_RATIO = 0.5
DEFAULT_SECTION_MIN_LENGTH = 40

_FIELD_LABELS: dict[str, str] = {
    "passport_number": r"passport\s*(?:no\b\.?|number|#)",
    "surname": r"surname",
    "given_names": r"given\s*names?",
    "nationality": r"nationality",
    "date_of_birth": r"date\s*of\s*birth",
    "date_of_issue": r"date\s*of\s*issue",
    "date_of_expiry": r"date\s*of\s*expiry",
    "place_of_birth": r"place\s*of\s*birth",
    "authority": r"authority",
}

_LABEL_RE = re.compile(
    "|".join(rf"(?P<{name}>\b{pattern})" for name, pattern in _FIELD_LABELS.items()),
    re.IGNORECASE,
)


def line_tolerance(run: TextRun) -> float:
    """Vertical distance within which a run still belongs to the current line.

    Grows with the font size so large headings with jittery baselines stay
    on one line.
    """
    size = run.font_size or run.height
    return max(MIN_LINE_TOLERANCE, size * LINE_TOLERANCE_RATIO)


def group_runs_into_lines(runs: Iterable[TextRun]) -> list[str]:
    """Group positioned runs into text lines, ordered top-down then left-to-right."""
    ordered = sorted((r for r in runs if r.text.strip()), key=lambda r: (r.y, r.x))
    lines: list[list[TextRun]] = []
    line_y = 0.0
    for run in ordered:
        if lines and abs(run.y - line_y) <= line_tolerance(run):
            lines[-1].append(run)
        else:
            lines.append([run])
            line_y = run.y
    return [
        " ".join(r.text.strip() for r in sorted(line, key=lambda r: r.x))
        for line in lines
    ]


def find_labels(text: str) -> list[str]:
    """Return the recognized field labels in order of appearance."""
    return [m.lastgroup for m in _LABEL_RE.finditer(text) if m.lastgroup]


def has_label(text: str) -> bool:
    return _LABEL_RE.search(text) is not None


def segment_sections(
    text: str,
    min_length: int = DEFAULT_SECTION_MIN_LENGTH,
) -> list[str]:
    """Split page text into one candidate section per passport.

    A field label that repeats within the current section starts a new
    section at the beginning of its line. Sections shorter than
    ``min_length`` or without any recognized label are dropped as noise.
    """
    sections: list[list[str]] = [[]]
    seen: set[str] = set()
    for line in text.splitlines():
        labels = find_labels(line)
        if sections[-1] and any(label in seen for label in labels):
            sections.append([])
            seen = set()
        seen.update(labels)
        sections[-1].append(line)

    candidates = ["\n".join(lines).strip() for lines in sections]
    return [c for c in candidates if len(c) >= min_length and has_label(c)]
