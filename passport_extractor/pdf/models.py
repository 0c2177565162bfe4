from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from passport_extractor.batch.models import BatchSummary
from passport_extractor.imaging.models import NormalizedImage


@dataclass(frozen=True)
class TextRun:
    """A positioned run of text on a page (PDF points, origin top-left)."""

    text: str
    x: float
    y: float
    width: float
    height: float
    font_size: float = 0.0


class PageStatus(str, Enum):
    PENDING = "pending"
    TEXT_EXTRACTED = "text_extracted"
    RASTERIZED = "rasterized"
    DISPATCHED = "dispatched"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class PageResult:
    """Per-page state as the page moves through the rasterizer."""

    page_number: int
    status: PageStatus = PageStatus.PENDING
    lines: list[str] = field(default_factory=list)
    sections: list[str] = field(default_factory=list)
    image: NormalizedImage | None = None
    error: str = ""

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


@dataclass(frozen=True)
class DocumentResult:
    """Pages of one processed document plus the batch summary of handler results."""

    page_count: int
    pages: list[PageResult]
    summary: BatchSummary[Any]
