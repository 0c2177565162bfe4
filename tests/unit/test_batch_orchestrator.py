"""Tests for bounded-concurrency batch fan-out."""

import asyncio
import math

import pytest

from passport_extractor.batch.orchestrator import chunked, new_batch_id, run_batch


async def _double(value: int) -> int:
    await asyncio.sleep(0)
    return value * 2


class TestChunked:
    def test_splits_into_chunks_with_original_indices(self) -> None:
        chunks = chunked(["a", "b", "c", "d", "e"], 2)
        assert chunks == [[(0, "a"), (1, "b")], [(2, "c"), (3, "d")], [(4, "e")]]

    @pytest.mark.parametrize(("count", "size"), [(1, 1), (5, 5), (12, 3), (13, 5), (50, 5)])
    def test_chunk_count_is_ceiling(self, count: int, size: int) -> None:
        assert len(chunked(list(range(count)), size)) == math.ceil(count / size)

    def test_empty_input(self) -> None:
        assert chunked([], 3) == []

    def test_rejects_non_positive_size(self) -> None:
        with pytest.raises(ValueError, match="positive"):
            chunked([1, 2], 0)


class TestRunBatch:
    @pytest.mark.asyncio
    async def test_returns_results_in_original_order(self) -> None:
        summary = await run_batch(list(range(7)), _double, 3)
        assert [item.value for item in summary.results] == [0, 2, 4, 6, 8, 10, 12]
        assert [item.key for item in summary.results] == list(range(7))

    @pytest.mark.asyncio
    async def test_counts_chunks(self) -> None:
        summary = await run_batch(list(range(12)), _double, 3)
        assert summary.chunk_count == 4
        assert summary.total_items == 12

    @pytest.mark.asyncio
    async def test_failed_items_are_recorded_and_do_not_stop_batch(self) -> None:
        async def fail_on_odd(value: int) -> int:
            if value % 2:
                raise RuntimeError(f"odd {value}")
            return value

        summary = await run_batch(list(range(6)), fail_on_odd, 4)
        assert summary.success_count == 3
        assert summary.error_count == 3
        assert [e.key for e in summary.errors] == [1, 3, 5]
        assert summary.errors[0].message == "odd 1"
        assert summary.success_count + summary.error_count == summary.total_items

    @pytest.mark.asyncio
    async def test_error_message_falls_back_to_type_name(self) -> None:
        async def fail(_value: int) -> int:
            raise KeyError

        summary = await run_batch([1], fail, 1)
        assert summary.errors[0].message == "KeyError"

    @pytest.mark.asyncio
    async def test_chunks_never_overlap(self) -> None:
        in_flight = 0
        peak = 0

        async def track(value: int) -> int:
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return value

        await run_batch(list(range(10)), track, 3)
        assert peak == 3

    @pytest.mark.asyncio
    async def test_custom_key_and_name(self) -> None:
        async def fail(_value: str) -> str:
            raise ValueError("bad")

        summary = await run_batch(
            ["a.jpg", "b.jpg"],
            fail,
            2,
            key=lambda index, _item: index + 1,
            name=lambda item: item,
        )
        assert [(e.key, e.name) for e in summary.errors] == [(1, "a.jpg"), (2, "b.jpg")]

    @pytest.mark.asyncio
    async def test_empty_batch(self) -> None:
        summary = await run_batch([], _double, 3)
        assert summary.total_items == 0
        assert summary.chunk_count == 0
        assert summary.results == []
        assert summary.errors == []

    @pytest.mark.asyncio
    async def test_uses_given_batch_id(self) -> None:
        summary = await run_batch([1], _double, 1, batch_id="batch-1")
        assert summary.batch_id == "batch-1"
        assert summary.elapsed_seconds >= 0

    @pytest.mark.asyncio
    async def test_rejects_non_positive_concurrency(self) -> None:
        with pytest.raises(ValueError):
            await run_batch([1], _double, 0)


def test_new_batch_id_is_unique() -> None:
    assert new_batch_id() != new_batch_id()
