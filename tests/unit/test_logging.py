"""Unit tests for sqlraw logging helpers."""

import logging
from collections.abc import Generator

import pytest

from sqlraw.utils.logging import (
    CorrelationIDFilter,
    StructuredFormatter,
    correlation_context,
    get_correlation_id,
    get_logger,
    log_with_context,
    set_correlation_id,
)
from sqlraw.utils.serializers import from_json


class ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@pytest.fixture
def captured() -> Generator[ListHandler, None, None]:
    root = logging.getLogger("sqlraw")
    handler = ListHandler()
    previous_level = root.level
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)
    yield handler
    root.removeHandler(handler)
    root.setLevel(previous_level)


def test_get_logger_namespace() -> None:
    assert get_logger().name == "sqlraw"
    assert get_logger("executor").name == "sqlraw.executor"
    assert get_logger("sqlraw.loader").name == "sqlraw.loader"

    logger = get_logger("executor")
    get_logger("executor")
    assert sum(isinstance(f, CorrelationIDFilter) for f in logger.filters) == 1


def test_correlation_context() -> None:
    assert get_correlation_id() is None
    with correlation_context("req-1") as correlation_id:
        assert correlation_id == "req-1"
        assert get_correlation_id() == "req-1"
        with correlation_context() as inner:
            assert len(inner) == 32
            assert get_correlation_id() == inner
        assert get_correlation_id() == "req-1"
    assert get_correlation_id() is None

    set_correlation_id("manual")
    assert get_correlation_id() == "manual"
    set_correlation_id(None)


def test_correlation_filter_stamps_records() -> None:
    record = logging.LogRecord("sqlraw.executor", logging.INFO, __file__, 10, "executor.execute", None, None)
    CorrelationIDFilter().filter(record)
    assert record.correlation_id == "-"  # type: ignore[attr-defined]
    with correlation_context("req-2"):
        CorrelationIDFilter().filter(record)
    assert record.correlation_id == "req-2"  # type: ignore[attr-defined]


def test_structured_formatter() -> None:
    record = logging.LogRecord("sqlraw.executor", logging.INFO, __file__, 10, "executor.execute", None, None)
    record.extra_fields = {"row_count": 2, "sql": "SELECT ?"}
    with correlation_context("abc"):
        payload = from_json(StructuredFormatter().format(record))
    assert payload["message"] == "executor.execute"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "sqlraw.executor"
    assert payload["row_count"] == 2
    assert payload["sql"] == "SELECT ?"
    assert payload["correlation_id"] == "abc"


def test_log_with_context(captured: ListHandler) -> None:
    logger = get_logger("tests")
    log_with_context(logger, logging.DEBUG, "something.happened", answer=42)
    assert len(captured.records) == 1
    record = captured.records[0]
    assert record.getMessage() == "something.happened"
    assert record.extra_fields == {"answer": 42}  # type: ignore[attr-defined]
    assert record.funcName == "test_log_with_context"


def test_log_with_context_skips_disabled_levels(captured: ListHandler) -> None:
    logging.getLogger("sqlraw").setLevel(logging.WARNING)
    log_with_context(get_logger("tests"), logging.DEBUG, "ignored")
    assert captured.records == []


async def test_executor_logs_statements(captured: ListHandler, aiosqlite_executor) -> None:
    await aiosqlite_executor.execute("SELECT ? AS answer", [42])
    records = [r for r in captured.records if r.getMessage() == "executor.execute"]
    assert len(records) == 1
    fields = records[0].extra_fields  # type: ignore[attr-defined]
    assert fields["sql"] == "SELECT ? AS answer"
    assert fields["parameter_count"] == 1
    assert fields["row_count"] == 1
    assert fields["duration_ms"] >= 0
