import logging

from passport_extractor.logging.logger import ContextFormatter


def _record(message: str, context: dict[str, object] | None = None) -> logging.LogRecord:
    record = logging.LogRecord(
        name="passport_extractor",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=None,
        exc_info=None,
    )
    if context is not None:
        record.context = context
    return record


class TestContextFormatter:
    def test_appends_context_pairs(self) -> None:
        formatter = ContextFormatter("%(message)s")
        line = formatter.format(_record("Page dispatched", {"page": 7, "batch_id": "abc"}))
        assert line == "Page dispatched | page=7 batch_id=abc"

    def test_leaves_plain_message_without_context(self) -> None:
        formatter = ContextFormatter("%(message)s")
        assert formatter.format(_record("Loaded", {})) == "Loaded"
        assert formatter.format(_record("Loaded")) == "Loaded"

    def test_keeps_level_and_prefix(self) -> None:
        formatter = ContextFormatter("[%(levelname)s] %(message)s")
        assert formatter.format(_record("Done", {"key": 3})) == "[INFO] Done | key=3"
