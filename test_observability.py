"""
Observability Tests

Validates the structured logging stack:
1. Correlation context is set and restored per request
2. JSON and human-readable formatters carry correlation IDs and extra fields
3. Correlated loggers are cached and pass exception info through
"""

import asyncio
import json
import logging

import pytest

from core.observability.logging import (
    CorrelationContext,
    HumanReadableFormatter,
    StructuredFormatter,
    get_correlation_context,
    get_logger,
    with_correlation,
)


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def captured():
    handler = _ListHandler()
    target = logging.getLogger("connectors.test_capture")
    target.addHandler(handler)
    target.setLevel(logging.DEBUG)
    yield handler
    target.removeHandler(handler)


def _record(msg="Test message"):
    return logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname="test.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )


def test_observability_imports():
    """Verify the observability package exports the logging API."""
    from core.observability import configure_logging, get_logger, CorrelationContext, with_correlation
    assert configure_logging is not None
    assert get_logger is not None
    assert CorrelationContext is not None
    assert with_correlation is not None


class TestCorrelationContext:
    """Test correlation IDs across a request."""

    def test_to_dict_drops_unset_fields(self):
        ctx = CorrelationContext(request_id="req-1", operation="list_orders")
        assert ctx.to_dict() == {"request_id": "req-1", "operation": "list_orders"}

    def test_merge_keeps_existing_values(self):
        ctx = CorrelationContext(request_id="req-1").merge(sales_order_id="0000000001", operation=None)
        assert ctx.request_id == "req-1"
        assert ctx.sales_order_id == "0000000001"
        assert ctx.operation is None

    def test_with_correlation_restores_previous(self):
        before = get_correlation_context()

        with with_correlation(request_id="outer"):
            with with_correlation(client_mode="demo"):
                inner = get_correlation_context()
                assert inner.request_id == "outer"
                assert inner.client_mode == "demo"
            assert get_correlation_context().client_mode is None

        assert get_correlation_context() == before

    def test_context_isolated_per_task(self):
        async def tagged(request_id):
            with with_correlation(request_id=request_id):
                await asyncio.sleep(0)
                return get_correlation_context().request_id

        async def run():
            return await asyncio.gather(tagged("a"), tagged("b"))

        assert asyncio.run(run()) == ["a", "b"]


class TestFormatters:

    def test_structured_formatter_json_output(self):
        formatter = StructuredFormatter()

        with with_correlation(request_id="req-42", operation="test_connection"):
            record = _record("Upstream returned 200")
            record.extra_fields = {"status": 200}
            data = json.loads(formatter.format(record))

        assert data["message"] == "Upstream returned 200"
        assert data["level"] == "INFO"
        assert data["request_id"] == "req-42"
        assert data["operation"] == "test_connection"
        assert data["status"] == 200
        assert data["timestamp"].endswith("Z")

    def test_human_readable_formatter(self):
        formatter = HumanReadableFormatter()

        with with_correlation(request_id="0123456789abcdef", operation="list_orders", client_mode="demo"):
            record = _record("Returning sample orders")
            record.extra_fields = {"count": 3}
            line = formatter.format(record)

        assert "[01234567/list_orders/demo]" in line
        assert line.endswith("Returning sample orders count=3")

    def test_human_readable_without_context(self):
        line = HumanReadableFormatter().format(_record())
        assert "[-]: Test message" in line


class TestCorrelatedLogger:

    def test_loggers_are_cached(self):
        assert get_logger("connectors.test_capture") is get_logger("connectors.test_capture")
        assert get_logger("connectors.test_capture").name == "connectors.test_capture"

    def test_extra_fields_attached(self, captured):
        get_logger("connectors.test_capture").info("Fetched %d orders", 3, extra_fields={"mode": "authenticated"})

        record = captured.records[-1]
        assert record.getMessage() == "Fetched 3 orders"
        assert record.extra_fields == {"mode": "authenticated"}

    def test_exception_info_included(self, captured):
        logger = get_logger("connectors.test_capture")
        try:
            raise RuntimeError("SAP unreachable")
        except RuntimeError:
            logger.exception("Connection test error")

        record = captured.records[-1]
        assert record.levelno == logging.ERROR
        assert record.exc_info[0] is RuntimeError

        data = json.loads(StructuredFormatter().format(record))
        assert "SAP unreachable" in data["exception"]

    def test_level_filtering(self, captured):
        logger = get_logger("connectors.test_capture")
        logger.setLevel(logging.WARNING)
        try:
            logger.info("dropped")
            logger.warning("kept")
        finally:
            logger.setLevel(logging.DEBUG)

        assert [r.getMessage() for r in captured.records] == ["kept"]
