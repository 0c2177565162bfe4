import io

import pdfplumber

from passport_extractor.pdf.base import BasePdfDocument, BasePdfReader
from passport_extractor.pdf.exceptions import DocumentParseError, PdfPageError
from passport_extractor.pdf.models import TextRun


class PdfPlumberDocument(BasePdfDocument):
    """Document opened with pdfplumber."""

    def __init__(self, pdf: pdfplumber.PDF) -> None:
        self._pdf = pdf
        self._page_count = len(pdf.pages)

    @property
    def page_count(self) -> int:
        return self._page_count

    def page_runs(self, page_number: int) -> list[TextRun]:
        try:
            page = self._pdf.pages[page_number - 1]
            words = page.extract_words(extra_attrs=["size"])
        except Exception as exc:
            raise PdfPageError(f"pdfplumber failed to read page {page_number}: {exc}") from exc
        return [
            TextRun(
                text=word["text"],
                x=float(word["x0"]),
                y=float(word["top"]),
                width=float(word["x1"]) - float(word["x0"]),
                height=float(word["bottom"]) - float(word["top"]),
                font_size=float(word.get("size") or 0.0),
            )
            for word in words
        ]

    def render_page(self, page_number: int, dpi: int) -> bytes:
        try:
            page = self._pdf.pages[page_number - 1]
            rendered = page.to_image(resolution=dpi).original
            buf = io.BytesIO()
            rendered.save(buf, format="PNG")
        except Exception as exc:
            raise PdfPageError(f"pdfplumber failed to render page {page_number}: {exc}") from exc
        return buf.getvalue()

    def close(self) -> None:
        self._pdf.close()


class PdfPlumberAdapter(BasePdfReader):
    """Reads PDFs using pdfplumber."""

    def open(self, pdf_bytes: bytes) -> BasePdfDocument:
        try:
            pdf = pdfplumber.open(io.BytesIO(pdf_bytes))
        except Exception as exc:
            raise DocumentParseError(f"pdfplumber could not open document: {exc}") from exc
        try:
            return PdfPlumberDocument(pdf)
        except Exception as exc:
            pdf.close()
            raise DocumentParseError(f"pdfplumber could not read pages: {exc}") from exc
