import pymupdf

from passport_extractor.pdf.base import BasePdfDocument, BasePdfReader
from passport_extractor.pdf.exceptions import DocumentParseError, PdfPageError
from passport_extractor.pdf.models import TextRun


class PyMuPdfDocument(BasePdfDocument):
    """Document opened with PyMuPDF."""

    def __init__(self, doc: pymupdf.Document) -> None:
        self._doc = doc

    @property
    def page_count(self) -> int:
        return int(self._doc.page_count)

    def page_runs(self, page_number: int) -> list[TextRun]:
        try:
            page = self._doc[page_number - 1]
            content = page.get_text("dict")
        except Exception as exc:
            raise PdfPageError(f"pymupdf failed to read page {page_number}: {exc}") from exc
        runs: list[TextRun] = []
        for block in content.get("blocks", []):
            for line in block.get("lines", []):
                for span in line.get("spans", []):
                    text = span.get("text", "").strip()
                    if not text:
                        continue
                    x0, y0, x1, y1 = span["bbox"]
                    runs.append(
                        TextRun(
                            text=text,
                            x=float(x0),
                            y=float(y0),
                            width=float(x1 - x0),
                            height=float(y1 - y0),
                            font_size=float(span.get("size") or 0.0),
                        )
                    )
        return runs

    def render_page(self, page_number: int, dpi: int) -> bytes:
        try:
            page = self._doc[page_number - 1]
            return bytes(page.get_pixmap(dpi=dpi).tobytes("png"))
        except Exception as exc:
            raise PdfPageError(f"pymupdf failed to render page {page_number}: {exc}") from exc

    def close(self) -> None:
        self._doc.close()


class PyMuPdfAdapter(BasePdfReader):
    """Reads PDFs using PyMuPDF."""

    def open(self, pdf_bytes: bytes) -> BasePdfDocument:
        try:
            doc = pymupdf.open(stream=pdf_bytes, filetype="pdf")  # type: ignore[no-untyped-call]
        except Exception as exc:
            raise DocumentParseError(f"pymupdf could not open document: {exc}") from exc
        return PyMuPdfDocument(doc)
