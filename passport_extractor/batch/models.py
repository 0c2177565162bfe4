from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class BatchItem(Generic[T]):
    """Successful item, keyed by its original index or page number."""

    key: int
    value: T


@dataclass(frozen=True)
class BatchError:
    """Failed item, keyed by its original index or page number."""

    key: int
    message: str
    name: str = ""


@dataclass(frozen=True)
class BatchSummary(Generic[T]):
    """Aggregated outcome of one batch run."""

    batch_id: str
    total_items: int
    success_count: int
    error_count: int
    chunk_count: int
    elapsed_seconds: float
    results: list[BatchItem[T]] = field(default_factory=list)
    errors: list[BatchError] = field(default_factory=list)
