from typing import ClassVar


class ExtractionError(Exception):
    """Raised when passport data extraction fails."""

    category: ClassVar[str] = "Extraction failed"

    def note(self) -> str:
        """Operator-facing note: classification followed by the detail."""
        detail = str(self)
        return f"{self.category}: {detail}" if detail else self.category


class ExtractionFormatError(ExtractionError):
    """Raised when the AI response is not the expected JSON shape."""

    category: ClassVar[str] = "Invalid response format"


class ExtractionNetworkError(ExtractionError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""

    category: ClassVar[str] = "Extraction service error"


class ExtractionRateLimitError(ExtractionNetworkError):
    """Raised when the AI provider rejects the call with HTTP 429."""

    category: ClassVar[str] = "Service busy, retry later"


class ExtractionTimeoutError(ExtractionNetworkError):
    """Raised when the AI provider call times out."""

    category: ClassVar[str] = "Processing timeout"


class ExtractionAuthenticationError(ExtractionNetworkError):
    """Raised when the AI provider rejects the credentials."""

    category: ClassVar[str] = "Authentication error"
