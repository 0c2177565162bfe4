class PdfError(Exception):
    """Base exception for PDF handling."""


class DocumentParseError(PdfError):
    """Raised when the PDF structure cannot be parsed."""


class PdfPageError(PdfError):
    """Raised when a single page cannot be read or rendered."""
