from collections.abc import Sequence

from passport_extractor.batch.models import BatchSummary
from passport_extractor.batch.orchestrator import run_batch
from passport_extractor.config.exceptions import ConfigurationError
from passport_extractor.config.settings import Settings
from passport_extractor.extraction.base import BaseExtractor
from passport_extractor.extraction.factory import ExtractorFactory
from passport_extractor.extraction.models import SCORED_FIELDS, QualityReport
from passport_extractor.extraction.quality import QualityChecker
from passport_extractor.imaging.factory import ImageNormalizerFactory
from passport_extractor.imaging.models import PREVIEW, ImageMetadata, NormalizedImage
from passport_extractor.imaging.normalizer import ImageNormalizer
from passport_extractor.logging.logger import Log
from passport_extractor.pdf.factory import PdfReaderFactory
from passport_extractor.pdf.layout import has_label
from passport_extractor.pdf.models import PageResult
from passport_extractor.pdf.rasterizer import DocumentRasterizer
from passport_extractor.processor.exceptions import (
    BatchLimitError,
    EmptyUploadError,
    NoPassportDataError,
    ProcessedImageTooLargeError,
    UnsupportedMediaTypeError,
    UploadTooLargeError,
)
from passport_extractor.processor.models import PassportRecord, RawUpload
from passport_extractor.validation.models import ValidatorConfig
from passport_extractor.validation.validator import validate

IMAGE_MEDIA_TYPES = frozenset({"image/jpeg", "image/png", "image/webp"})
PDF_MEDIA_TYPE = "application/pdf"
PDF_EXTRACTION_MODES = ("visual", "text")

_MIB = 1024 * 1024


def _megabytes(size: int) -> str:
    return f"{size / _MIB:.1f} MB"


class PassportProcessor:
    """Runs uploads through normalization, extraction and validation.

    Pipeline: intake checks -> normalize/rasterize -> extract -> validate.
    """

    def __init__(
        self,
        *,
        normalizer: ImageNormalizer,
        rasterizer: DocumentRasterizer,
        extractor: BaseExtractor,
        quality_checker: QualityChecker,
        validator_config: ValidatorConfig | None = None,
        scored_fields: tuple[str, ...] = SCORED_FIELDS,
        max_image_upload_bytes: int = 10 * _MIB,
        max_pdf_upload_bytes: int = 50 * _MIB,
        max_processed_image_bytes: int = 2 * _MIB,
        image_batch_concurrency: int = 5,
        max_batch_items: int = 50,
        pdf_extraction_mode: str = "visual",
    ) -> None:
        if pdf_extraction_mode not in PDF_EXTRACTION_MODES:
            raise ConfigurationError(
                f"Unknown PDF extraction mode '{pdf_extraction_mode}'. "
                f"Choose from: {list(PDF_EXTRACTION_MODES)}"
            )
        self._normalizer = normalizer
        self._rasterizer = rasterizer
        self._extractor = extractor
        self._quality_checker = quality_checker
        self._validator_config = validator_config or ValidatorConfig()
        self._scored_fields = scored_fields
        self._max_image_upload_bytes = max_image_upload_bytes
        self._max_pdf_upload_bytes = max_pdf_upload_bytes
        self._max_processed_image_bytes = max_processed_image_bytes
        self._image_batch_concurrency = image_batch_concurrency
        self._max_batch_items = max_batch_items
        self._pdf_extraction_mode = pdf_extraction_mode

    async def process_image(self, upload: RawUpload, key: int = 0) -> PassportRecord:
        """Extract and validate passport data from one photo.

        Raises:
            InputError: if the upload is rejected.
            ImageProcessingError: if the image cannot be decoded or is too large.
        """
        self._check_upload(upload, IMAGE_MEDIA_TYPES, self._max_image_upload_bytes)
        image = await self._normalizer.normalize(upload.data)
        self._check_processed_size(image)
        thumbnail = await self._normalizer.thumbnail(image)
        Log.info(f"Extracting passport data from image {upload.filename or key}")
        return await self._extract_record(
            image,
            key=key,
            filename=upload.filename,
            thumbnail=thumbnail,
            metadata=image.metadata(),
        )

    async def process_images(self, uploads: Sequence[RawUpload]) -> BatchSummary[PassportRecord]:
        """Process many photos with bounded concurrency; failures are kept per item.

        Raises:
            EmptyUploadError: if no uploads are given.
            BatchLimitError: if there are more uploads than allowed.
        """
        if not uploads:
            raise EmptyUploadError("No files uploaded")
        if len(uploads) > self._max_batch_items:
            raise BatchLimitError(
                f"Too many files: {len(uploads)} (max {self._max_batch_items})"
            )
        indexed = list(enumerate(uploads))

        async def run(item: tuple[int, RawUpload]) -> PassportRecord:
            index, upload = item
            return await self.process_image(upload, key=index)

        return await run_batch(
            indexed,
            run,
            self._image_batch_concurrency,
            name=lambda item: item[1].filename,
        )

    async def process_pdf(self, upload: RawUpload) -> BatchSummary[list[PassportRecord]]:
        """Extract passports from every page of a PDF.

        Results are keyed by page number; a failing page does not stop the others.

        Raises:
            InputError: if the upload is rejected.
            DocumentParseError: if the PDF cannot be opened.
        """
        self._check_upload(upload, {PDF_MEDIA_TYPE}, self._max_pdf_upload_bytes)
        visual = self._pdf_extraction_mode == "visual"

        async def handle(page: PageResult) -> list[PassportRecord]:
            if visual:
                return [await self._extract_page_image(page, upload.filename)]
            return await self._extract_page_text(page, upload.filename)

        document = await self._rasterizer.process_document(
            bytes(upload.data), handle, rasterize=visual
        )
        Log.info(
            f"PDF {upload.filename or '<upload>'}: {document.summary.success_count} of "
            f"{document.page_count} pages extracted"
        )
        return document.summary

    async def check_quality(self, upload: RawUpload) -> QualityReport:
        """Ask the extraction service whether a photo is fit for extraction."""
        self._check_upload(upload, IMAGE_MEDIA_TYPES, self._max_image_upload_bytes)
        preview = await self._normalizer.normalize(upload.data, PREVIEW)
        report = await self._quality_checker.check(preview)
        Log.info(f"Quality check: valid={report.is_valid}, {len(report.issues)} issues")
        return report

    async def _extract_page_image(self, page: PageResult, filename: str) -> PassportRecord:
        if page.image is None:
            raise NoPassportDataError(f"Page {page.page_number} was not rasterized")
        self._check_processed_size(page.image)
        return await self._extract_record(
            page.image,
            key=page.page_number,
            filename=filename,
            page_number=page.page_number,
        )

    async def _extract_page_text(self, page: PageResult, filename: str) -> list[PassportRecord]:
        candidates = list(page.sections)
        if not candidates and has_label(page.text):
            candidates = [page.text]
        if not candidates:
            raise NoPassportDataError(f"No passport data found on page {page.page_number}")

        records = []
        for number, section in enumerate(candidates, start=1):
            records.append(
                await self._extract_record(
                    section,
                    key=page.page_number,
                    filename=filename,
                    page_number=page.page_number,
                    section=number,
                    source_text=section,
                )
            )
        return records

    async def _extract_record(
        self,
        source: NormalizedImage | str,
        *,
        key: int,
        filename: str = "",
        page_number: int | None = None,
        section: int | None = None,
        thumbnail: bytes | None = None,
        metadata: ImageMetadata | None = None,
        source_text: str = "",
    ) -> PassportRecord:
        outcome = await self._extractor.extract(source)
        result = outcome.to_result(self._scored_fields)
        validation = validate(result, self._validator_config)
        if not validation.is_valid:
            Log.info(
                f"Record {key} has {len(validation.remarks)} validation remarks "
                f"(quality {validation.quality_score})"
            )
        return PassportRecord(
            key=key,
            extraction=result,
            validation=validation,
            filename=filename,
            page_number=page_number,
            section=section,
            thumbnail=thumbnail,
            metadata=metadata,
            source_text=source_text,
            extraction_error=outcome.note,
        )

    def _check_upload(
        self,
        upload: RawUpload,
        media_types: set[str] | frozenset[str],
        max_bytes: int,
    ) -> None:
        if upload.media_type not in media_types:
            raise UnsupportedMediaTypeError(
                f"Unsupported file type '{upload.media_type}'. "
                f"Allowed: {', '.join(sorted(media_types))}"
            )
        if not upload.data:
            raise EmptyUploadError(f"Uploaded file is empty: {upload.filename or '<upload>'}")
        if upload.size_bytes > max_bytes:
            raise UploadTooLargeError(
                f"File too large: {_megabytes(upload.size_bytes)} "
                f"(max {_megabytes(max_bytes)})"
            )

    def _check_processed_size(self, image: NormalizedImage) -> None:
        if image.size_bytes > self._max_processed_image_bytes:
            raise ProcessedImageTooLargeError("Image too large after processing")


def build_processor(settings: Settings) -> PassportProcessor:
    """Build a PassportProcessor with all required adapters."""
    normalizer = ImageNormalizerFactory.create(settings)
    rasterizer = DocumentRasterizer(
        reader=PdfReaderFactory.create(settings),
        normalizer=normalizer,
        dpi=settings.pdf_render_dpi,
        page_concurrency=settings.pdf_page_concurrency,
        inter_batch_delay=settings.pdf_inter_batch_delay_seconds,
        section_min_length=settings.pdf_section_min_length,
    )
    extractor = ExtractorFactory.create(settings)
    validator_config = ValidatorConfig.from_profile(
        extractor.profile,
        confidence_threshold=settings.validation_confidence_threshold,
        allow_short_mrz=settings.validation_allow_short_mrz,
    )
    return PassportProcessor(
        normalizer=normalizer,
        rasterizer=rasterizer,
        extractor=extractor,
        quality_checker=ExtractorFactory.create_quality_checker(settings),
        validator_config=validator_config,
        scored_fields=extractor.profile.scored_fields,
        max_image_upload_bytes=settings.max_image_upload_bytes,
        max_pdf_upload_bytes=settings.max_pdf_upload_bytes,
        max_processed_image_bytes=settings.max_processed_image_bytes,
        image_batch_concurrency=settings.image_batch_concurrency,
        max_batch_items=settings.max_batch_items,
        pdf_extraction_mode=settings.pdf_extraction_mode.lower(),
    )
