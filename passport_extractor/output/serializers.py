"""JSON payloads and CSV rows for processing results."""

import base64
import csv
import io
from collections.abc import Iterable
from typing import Any

from passport_extractor.batch.models import BatchSummary
from passport_extractor.extraction.models import QualityReport
from passport_extractor.processor.models import PassportRecord

MAX_ERROR_DETAIL_LENGTH = 100

CSV_COLUMNS: tuple[str, ...] = (
    "Page/Index",
    "Full Name",
    "Passport Number",
    "Date of Birth",
    "Date of Issue",
    "Date of Expiry",
    "Nationality",
    "Place of Birth",
    "Issuing Authority",
    "MRZ Line 1",
    "MRZ Line 2",
    "Confidence Score",
)


def record_to_dict(record: PassportRecord) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "key": record.key,
        "filename": record.filename,
        "data": record.extraction.to_dict(),
        "validation": record.validation.to_dict(),
    }
    if record.page_number is not None:
        payload["pageNumber"] = record.page_number
    if record.section is not None:
        payload["section"] = record.section
    if record.source_text:
        payload["sourceText"] = record.source_text
    if record.metadata is not None:
        payload["metadata"] = {
            "dimensions": {
                "width": record.metadata.width,
                "height": record.metadata.height,
            },
            "format": record.metadata.format,
            "size": record.metadata.size,
        }
    if record.thumbnail is not None:
        encoded = base64.b64encode(record.thumbnail).decode("ascii")
        payload["thumbnail"] = f"data:image/jpeg;base64,{encoded}"
    if record.extraction_error:
        payload["extractionError"] = record.extraction_error
    return payload


def summary_records(summary: BatchSummary[Any]) -> list[PassportRecord]:
    """Flatten successful items into records, in key order.

    PDF batches carry a list of records per page, image batches one record
    per item.
    """
    records: list[PassportRecord] = []
    for item in summary.results:
        if isinstance(item.value, PassportRecord):
            records.append(item.value)
        else:
            records.extend(item.value)
    return records


def summary_to_dict(summary: BatchSummary[Any]) -> dict[str, Any]:
    """Batch payload; ``results`` and ``errors`` are always present."""
    return {
        "batchId": summary.batch_id,
        "totalItems": summary.total_items,
        "successCount": summary.success_count,
        "errorCount": summary.error_count,
        "chunkCount": summary.chunk_count,
        "elapsedSeconds": summary.elapsed_seconds,
        "results": [record_to_dict(record) for record in summary_records(summary)],
        "errors": [
            {"key": error.key, "name": error.name, "message": _truncate(error.message)}
            for error in summary.errors
        ],
    }


def quality_to_dict(report: QualityReport) -> dict[str, Any]:
    return {"isValid": report.is_valid, "issues": list(report.issues)}


def records_to_csv(records: Iterable[PassportRecord]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for record in records:
        writer.writerow(_csv_row(record))
    return buffer.getvalue()


def summary_to_csv(summary: BatchSummary[Any]) -> str:
    return records_to_csv(summary_records(summary))


def error_payload(exc: BaseException, error: str = "Processing failed") -> dict[str, str]:
    """Client-facing error body with the detail cut to a bounded length."""
    return {"error": error, "details": _truncate(str(exc) or type(exc).__name__)}


def _csv_row(record: PassportRecord) -> list[str]:
    result = record.extraction
    mrz = result.mrz
    return [
        str(record.key),
        result.full_name,
        result.passport_number,
        result.date_of_birth,
        result.date_of_issue,
        result.date_of_expiry,
        result.nationality,
        result.place_of_birth,
        result.issuing_authority,
        mrz.line1 if mrz else "",
        mrz.line2 if mrz else "",
        f"{result.overall_confidence:.2f}",
    ]


def _truncate(message: str) -> str:
    return message[:MAX_ERROR_DETAIL_LENGTH]
