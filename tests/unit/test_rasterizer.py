"""Tests for DocumentRasterizer page processing."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from passport_extractor.imaging.normalizer import ImageNormalizer
from passport_extractor.imaging.pillow_codec import PillowImageCodec
from passport_extractor.pdf.exceptions import DocumentParseError, PdfPageError
from passport_extractor.pdf.models import PageResult, PageStatus
from passport_extractor.pdf.pdfplumber_adapter import PdfPlumberAdapter
from passport_extractor.pdf.rasterizer import DocumentRasterizer


def _make_rasterizer(**kwargs: object) -> DocumentRasterizer:
    defaults: dict[str, object] = {
        "reader": PdfPlumberAdapter(),
        "normalizer": ImageNormalizer(codec=PillowImageCodec()),
        "dpi": 72,
    }
    defaults.update(kwargs)
    return DocumentRasterizer(**defaults)  # type: ignore[arg-type]


class TestDocumentLevel:
    @pytest.mark.asyncio
    async def test_corrupt_pdf_raises_single_parse_error(self) -> None:
        handler = AsyncMock()
        with pytest.raises(DocumentParseError):
            await _make_rasterizer().process_document(b"%PDF-1.4 garbage", handler)
        handler.assert_not_called()

    @pytest.mark.asyncio
    async def test_closes_document(self) -> None:
        document = MagicMock()
        document.page_count = 1
        document.page_runs.return_value = []
        reader = MagicMock()
        reader.open.return_value = document
        await _make_rasterizer(reader=reader).process_document(b"pdf", rasterize=False)
        document.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_zero_page_document(self) -> None:
        document = MagicMock()
        document.page_count = 0
        reader = MagicMock()
        reader.open.return_value = document
        result = await _make_rasterizer(reader=reader).process_document(b"pdf")
        assert result.page_count == 0
        assert result.summary.results == []


class TestTextExtraction:
    @pytest.mark.asyncio
    async def test_extracts_lines_and_sections(self, passport_pdf_bytes: bytes) -> None:
        result = await _make_rasterizer().process_document(passport_pdf_bytes, rasterize=False)
        page = result.pages[0]
        assert page.status == PageStatus.SUCCEEDED
        assert page.lines[0] == "Passport No. X1234567"
        assert len(page.sections) == 2
        assert page.image is None

    @pytest.mark.asyncio
    async def test_without_handler_page_is_the_result(self, sample_pdf_bytes: bytes) -> None:
        result = await _make_rasterizer().process_document(sample_pdf_bytes, rasterize=False)
        [item] = result.summary.results
        assert item.key == 1
        assert isinstance(item.value, PageResult)
        assert item.value.text == "Hello PDF World"

    @pytest.mark.asyncio
    async def test_text_failure_fails_page_in_text_mode(self) -> None:
        document = MagicMock()
        document.page_count = 1
        document.page_runs.side_effect = PdfPageError("broken page")
        reader = MagicMock()
        reader.open.return_value = document
        result = await _make_rasterizer(reader=reader).process_document(b"pdf", rasterize=False)
        assert result.pages[0].status == PageStatus.FAILED
        assert result.summary.errors[0].message == "broken page"


class TestRasterization:
    @pytest.mark.asyncio
    async def test_rasterizes_and_normalizes_pages(self, multi_page_pdf_bytes: bytes) -> None:
        result = await _make_rasterizer().process_document(multi_page_pdf_bytes)
        assert [p.status for p in result.pages] == [PageStatus.SUCCEEDED] * 2
        for page in result.pages:
            assert page.image is not None
            assert page.image.data.startswith(b"\xff\xd8")
            assert max(page.image.width, page.image.height) <= 1200

    @pytest.mark.asyncio
    async def test_text_failure_is_tolerated_when_rasterizing(self) -> None:
        document = MagicMock()
        document.page_count = 1
        document.page_runs.side_effect = PdfPageError("no text layer")
        reader = MagicMock()
        reader.open.return_value = document
        normalizer = MagicMock()
        normalizer.normalize = AsyncMock(return_value=MagicMock())
        result = await _make_rasterizer(reader=reader, normalizer=normalizer).process_document(
            b"pdf"
        )
        assert result.pages[0].status == PageStatus.SUCCEEDED
        assert result.pages[0].lines == []
        normalizer.normalize.assert_awaited_once()


class TestBoundedPages:
    @pytest.mark.asyncio
    async def test_twelve_pages_in_four_chunks(self, twelve_page_pdf_bytes: bytes) -> None:
        rasterizer = _make_rasterizer(page_concurrency=3)
        result = await rasterizer.process_document(twelve_page_pdf_bytes, rasterize=False)
        assert result.page_count == 12
        assert result.summary.chunk_count == 4

    @pytest.mark.asyncio
    async def test_failing_page_is_keyed_and_does_not_block_later_pages(
        self, twelve_page_pdf_bytes: bytes
    ) -> None:
        async def handler(page: PageResult) -> int:
            if page.page_number == 7:
                raise RuntimeError("extraction failed on page 7")
            return page.page_number

        rasterizer = _make_rasterizer(page_concurrency=3)
        result = await rasterizer.process_document(
            twelve_page_pdf_bytes, handler, rasterize=False
        )
        summary = result.summary
        assert [e.key for e in summary.errors] == [7]
        assert [item.key for item in summary.results] == [1, 2, 3, 4, 5, 6, 8, 9, 10, 11, 12]
        assert result.pages[6].status == PageStatus.FAILED
        assert result.pages[6].error == "extraction failed on page 7"
        assert all(p.status == PageStatus.SUCCEEDED for p in result.pages[7:])
