import json
from pathlib import Path

from passport_extractor.extraction.exceptions import ExtractionError
from passport_extractor.extraction.models import (
    IDENTITY_FIELDS,
    REQUIRED_FIELDS,
    SCORED_FIELDS,
    ExtractionProfile,
)

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_prompt_template(path: Path | None = None) -> str:
    """Load the extraction prompt template from a file.

    Args:
        path: Path to the prompt template file.
              Defaults to the bundled extraction_prompt.txt.

    Returns:
        The raw template string with placeholders.

    Raises:
        ExtractionError: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "extraction_prompt.txt"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ExtractionError(f"Failed to load prompt template: {exc}") from exc


def load_quality_prompt(path: Path | None = None) -> str:
    """Load the photo quality prompt. Defaults to the bundled quality_prompt.txt."""
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "quality_prompt.txt"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ExtractionError(f"Failed to load quality prompt: {exc}") from exc


def response_format(
    fields: tuple[str, ...] = tuple(IDENTITY_FIELDS.values()),
    scored_fields: tuple[str, ...] = SCORED_FIELDS,
) -> str:
    """JSON skeleton of the expected model response."""
    skeleton: dict[str, object] = {name: "" for name in fields}
    skeleton["mrz"] = {"line1": "", "line2": ""}
    skeleton["confidence_scores"] = {name: 0.0 for name in scored_fields}
    skeleton["extraction_notes"] = []
    return json.dumps(skeleton, indent=2)


def load_profile(
    path: Path | None = None,
    *,
    date_format: str = "YYYY-MM-DD",
    mrz_line_length: int = 44,
    required_fields: tuple[str, ...] = REQUIRED_FIELDS,
) -> ExtractionProfile:
    """Build the extraction profile from the prompt template.

    Raises:
        ExtractionError: if the template cannot be read or has unknown placeholders.
    """
    template = load_prompt_template(path)
    fields = tuple(IDENTITY_FIELDS.values())
    try:
        system_prompt = template.format(
            date_format=date_format,
            mrz_line_length=mrz_line_length,
            fields=", ".join(fields),
            response_format=response_format(fields, SCORED_FIELDS),
        )
    except (KeyError, IndexError) as exc:
        raise ExtractionError(f"Invalid prompt template placeholder: {exc}") from exc
    return ExtractionProfile(
        system_prompt=system_prompt,
        fields=fields,
        scored_fields=SCORED_FIELDS,
        required_fields=required_fields,
        date_format=date_format,
        mrz_line_length=mrz_line_length,
    )
