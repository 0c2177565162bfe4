"""Bounded-concurrency batch fan-out.

Items are split into chunks of ``concurrency``. Chunks run one after the
other; the items of a chunk run concurrently and the chunk is drained before
the next one starts. A failing item is recorded and never retried.
"""

import asyncio
import secrets
import time
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

from passport_extractor.batch.models import BatchError, BatchItem, BatchSummary
from passport_extractor.logging.logger import Log

ItemT = TypeVar("ItemT")
T = TypeVar("T")


def new_batch_id() -> str:
    return secrets.token_hex(8)


def chunked(items: Sequence[ItemT], size: int) -> list[list[tuple[int, ItemT]]]:
    """Tag items with their original index and split into chunks of ``size``."""
    if size < 1:
        raise ValueError(f"Chunk size must be positive, got {size}")
    indexed = list(enumerate(items))
    return [indexed[i : i + size] for i in range(0, len(indexed), size)]


async def run_batch(
    items: Sequence[ItemT],
    fn: Callable[[ItemT], Awaitable[T]],
    concurrency: int,
    *,
    key: Callable[[int, ItemT], int] | None = None,
    name: Callable[[ItemT], str] | None = None,
    inter_chunk_delay: float = 0.0,
    batch_id: str | None = None,
) -> BatchSummary[T]:
    """Run ``fn`` over ``items`` in sequential chunks of concurrent calls.

    Args:
        items: Inputs, processed in chunks of ``concurrency``.
        fn: Per-item coroutine function.
        concurrency: Chunk size.
        key: Maps (original index, item) to the key reported in results and
             errors. Defaults to the original index.
        name: Optional label for error entries (e.g. a filename).
        inter_chunk_delay: Seconds to sleep between chunks.
        batch_id: Identifier for the summary; generated when omitted.

    Returns:
        BatchSummary with results and errors in original item order.
    """
    chunks = chunked(items, concurrency)
    batch_id = batch_id or new_batch_id()
    key_fn = key or (lambda index, _item: index)
    started = time.perf_counter()

    outcomes: list[tuple[int, BatchItem[T] | BatchError]] = []
    for number, chunk in enumerate(chunks, start=1):
        if number > 1 and inter_chunk_delay > 0:
            await asyncio.sleep(inter_chunk_delay)
        Log.info(
            f"Chunk {number}/{len(chunks)}: items {chunk[0][0] + 1}-{chunk[-1][0] + 1} "
            f"of {len(items)}",
            batch_id=batch_id,
        )
        drained = await asyncio.gather(
            *(_run_item(index, item, fn, key_fn, name) for index, item in chunk)
        )
        outcomes.extend(drained)

    outcomes.sort(key=lambda pair: pair[0])
    results = [o for _, o in outcomes if isinstance(o, BatchItem)]
    errors = [o for _, o in outcomes if isinstance(o, BatchError)]
    elapsed = round(time.perf_counter() - started, 3)

    Log.info(
        f"Batch complete: {len(results)} succeeded, {len(errors)} failed",
        batch_id=batch_id,
        elapsed_seconds=elapsed,
    )
    return BatchSummary(
        batch_id=batch_id,
        total_items=len(items),
        success_count=len(results),
        error_count=len(errors),
        chunk_count=len(chunks),
        elapsed_seconds=elapsed,
        results=results,
        errors=errors,
    )


async def _run_item(
    index: int,
    item: ItemT,
    fn: Callable[[ItemT], Awaitable[T]],
    key_fn: Callable[[int, ItemT], int],
    name: Callable[[ItemT], str] | None,
) -> tuple[int, BatchItem[T] | BatchError]:
    item_key = key_fn(index, item)
    try:
        value = await fn(item)
    except Exception as exc:
        Log.error(f"Item failed: {exc}", key=item_key)
        return index, BatchError(
            key=item_key,
            message=str(exc) or type(exc).__name__,
            name=name(item) if name is not None else "",
        )
    return index, BatchItem(key=item_key, value=value)
