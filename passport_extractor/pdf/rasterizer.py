"""PDF page text extraction, rasterization and per-page dispatch."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from passport_extractor.batch.orchestrator import run_batch
from passport_extractor.imaging.normalizer import ImageNormalizer
from passport_extractor.logging.logger import Log
from passport_extractor.pdf.base import BasePdfDocument, BasePdfReader
from passport_extractor.pdf.exceptions import PdfPageError
from passport_extractor.pdf.layout import (
    DEFAULT_SECTION_MIN_LENGTH,
    group_runs_into_lines,
    segment_sections,
)
from passport_extractor.pdf.models import DocumentResult, PageResult, PageStatus

PageHandler = Callable[[PageResult], Awaitable[Any]]


class DocumentRasterizer:
    """Runs every page of a PDF through text extraction, rasterization and a handler.

    Pages are processed in sequential chunks of ``page_concurrency``. Access
    to the opened document is serialized; handlers of one chunk run
    concurrently. A failing page is recorded and does not stop the others.
    """

    def __init__(
        self,
        *,
        reader: BasePdfReader,
        normalizer: ImageNormalizer,
        dpi: int = 200,
        page_concurrency: int = 3,
        inter_batch_delay: float = 0.0,
        section_min_length: int = DEFAULT_SECTION_MIN_LENGTH,
    ) -> None:
        self._reader = reader
        self._normalizer = normalizer
        self._dpi = dpi
        self._page_concurrency = page_concurrency
        self._inter_batch_delay = inter_batch_delay
        self._section_min_length = section_min_length

    async def process_document(
        self,
        pdf_bytes: bytes,
        handler: PageHandler | None = None,
        *,
        rasterize: bool = True,
    ) -> DocumentResult:
        """Process all pages of a PDF.

        Args:
            pdf_bytes: Raw PDF file content.
            handler: Coroutine called with each prepared page; its return
                     value becomes the page's batch result. Without a handler
                     the PageResult itself is the result.
            rasterize: Render each page to a normalized image before dispatch.

        Raises:
            DocumentParseError: if the PDF cannot be opened. No page is
                processed in that case.
        """
        document = await asyncio.to_thread(self._reader.open, pdf_bytes)
        lock = asyncio.Lock()
        try:
            pages = [PageResult(page_number=n) for n in range(1, document.page_count + 1)]
            Log.info(f"PDF document loaded with {len(pages)} pages")

            async def run_page(page: PageResult) -> Any:
                return await self._process_page(document, lock, page, handler, rasterize)

            summary = await run_batch(
                pages,
                run_page,
                self._page_concurrency,
                key=lambda _index, page: page.page_number,
                inter_chunk_delay=self._inter_batch_delay,
            )
        finally:
            document.close()
        return DocumentResult(page_count=len(pages), pages=pages, summary=summary)

    async def _process_page(
        self,
        document: BasePdfDocument,
        lock: asyncio.Lock,
        page: PageResult,
        handler: PageHandler | None,
        rasterize: bool,
    ) -> Any:
        try:
            await self._extract_text(document, lock, page, required=not rasterize)
            if rasterize:
                async with lock:
                    png = await asyncio.to_thread(document.render_page, page.page_number, self._dpi)
                page.image = await self._normalizer.normalize(png)
                page.status = PageStatus.RASTERIZED

            page.status = PageStatus.DISPATCHED
            Log.info("Dispatching page", page=page.page_number)
            result = await handler(page) if handler is not None else page
            page.status = PageStatus.SUCCEEDED
            return result
        except Exception as exc:
            page.status = PageStatus.FAILED
            page.error = str(exc)
            raise

    async def _extract_text(
        self,
        document: BasePdfDocument,
        lock: asyncio.Lock,
        page: PageResult,
        *,
        required: bool,
    ) -> None:
        try:
            async with lock:
                runs = await asyncio.to_thread(document.page_runs, page.page_number)
        except PdfPageError as exc:
            if required:
                raise
            # The rendered image is still usable without the text layer.
            Log.warning(f"Text extraction failed: {exc}", page=page.page_number)
            runs = []
        page.lines = group_runs_into_lines(runs)
        page.sections = segment_sections(page.text, self._section_min_length)
        page.status = PageStatus.TEXT_EXTRACTED
