from abc import ABC, abstractmethod
from types import TracebackType

from passport_extractor.pdf.models import TextRun


class BasePdfDocument(ABC):
    """An opened PDF document. Not safe for concurrent access."""

    @property
    @abstractmethod
    def page_count(self) -> int:
        """Number of pages."""

    @abstractmethod
    def page_runs(self, page_number: int) -> list[TextRun]:
        """Return positioned text runs of a 1-based page.

        Raises:
            PdfPageError: if the page cannot be read.
        """

    @abstractmethod
    def render_page(self, page_number: int, dpi: int) -> bytes:
        """Rasterize a 1-based page to PNG bytes.

        Raises:
            PdfPageError: if the page cannot be rendered.
        """

    @abstractmethod
    def close(self) -> None:
        """Release the underlying document."""

    def __enter__(self) -> "BasePdfDocument":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class BasePdfReader(ABC):
    """Contract for all PDF reader adapters."""

    @abstractmethod
    def open(self, pdf_bytes: bytes) -> BasePdfDocument:
        """Open PDF bytes.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            An opened document with a known page count.

        Raises:
            DocumentParseError: if the PDF structure is invalid.
        """
