import argparse
import asyncio
import json
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from passport_extractor.config.exceptions import ConfigurationError
from passport_extractor.config.settings import Settings
from passport_extractor.imaging.exceptions import ImageProcessingError
from passport_extractor.logging.logger import Log
from passport_extractor.output.serializers import (
    error_payload,
    quality_to_dict,
    record_to_dict,
    records_to_csv,
    summary_to_csv,
    summary_to_dict,
)
from passport_extractor.pdf.exceptions import PdfError
from passport_extractor.processor.exceptions import InputError
from passport_extractor.processor.file_loader import FileLoader
from passport_extractor.processor.processor import PassportProcessor, build_processor

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INPUT_ERROR = 2
EXIT_CONFIGURATION_ERROR = 3


def parse_arguments(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="passport-extractor",
        description="Extract and validate passport data from photos and PDF files.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    image = commands.add_parser("image", help="Extract passport data from photos")
    image.add_argument("files", nargs="+", type=Path, help="JPEG, PNG or WebP files")
    image.add_argument("--format", choices=("json", "csv"), default="json")

    pdf = commands.add_parser("pdf", help="Extract passport data from every page of a PDF")
    pdf.add_argument("file", type=Path, help="PDF file")
    pdf.add_argument("--format", choices=("json", "csv"), default="json")
    pdf.add_argument(
        "--mode",
        choices=("visual", "text"),
        help="Override PDF_EXTRACTION_MODE",
    )

    quality = commands.add_parser("quality", help="Check whether a photo is fit for extraction")
    quality.add_argument("file", type=Path, help="JPEG, PNG or WebP file")

    return parser.parse_args(argv)


async def run_command(args: argparse.Namespace, processor: PassportProcessor) -> str:
    """Run the selected command and return the rendered output."""
    loader = FileLoader()
    if args.command == "quality":
        report = await processor.check_quality(loader.load(args.file))
        return _render_json(quality_to_dict(report))

    if args.command == "pdf":
        summary = await processor.process_pdf(loader.load(args.file))
        if args.format == "csv":
            return summary_to_csv(summary)
        return _render_json(summary_to_dict(summary))

    uploads = [loader.load(path) for path in args.files]
    if len(uploads) == 1:
        record = await processor.process_image(uploads[0])
        if args.format == "csv":
            return records_to_csv([record])
        return _render_json(record_to_dict(record))

    summary = await processor.process_images(uploads)
    if args.format == "csv":
        return summary_to_csv(summary)
    return _render_json(summary_to_dict(summary))


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point: load settings -> build processor -> run one command."""
    args = parse_arguments(argv)
    try:
        settings = Settings()
        Log.configure(settings.log_level)
        if getattr(args, "mode", None):
            settings = settings.model_copy(update={"pdf_extraction_mode": args.mode})
        processor = build_processor(settings)
    except (ConfigurationError, ValidationError) as exc:
        _report(exc, "Configuration error")
        return EXIT_CONFIGURATION_ERROR

    try:
        output = asyncio.run(run_command(args, processor))
    except (InputError, PdfError, ImageProcessingError, FileNotFoundError) as exc:
        _report(exc, "Invalid input")
        return EXIT_INPUT_ERROR
    except Exception as exc:
        Log.exception("Processing failed", command=args.command)
        _report(exc, "Processing failed")
        return EXIT_FAILURE

    sys.stdout.write(output)
    if not output.endswith("\n"):
        sys.stdout.write("\n")
    return EXIT_OK


def _render_json(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


def _report(exc: BaseException, error: str) -> None:
    sys.stderr.write(_render_json(error_payload(exc, error)) + "\n")


if __name__ == "__main__":
    sys.exit(main())
