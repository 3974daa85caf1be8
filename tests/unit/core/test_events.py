"""
Tests for DeliveryEvents and DeliveryReportingMixin.
"""

import logging

import pytest

from fanout_logger.core.events import DeliveryEvents, DeliveryReportingMixin
from fanout_logger.core.exceptions import DeliveryError


class TestDeliveryEvents:
    """Tests for DeliveryEvents."""

    def test_emit_without_subscribers(self):
        """Absence of a subscriber is not an error."""
        DeliveryEvents().emit("warn", RuntimeError("x"))

    def test_subscribe_and_emit(self):
        events = DeliveryEvents()
        received = []
        events.on("logged", received.append)

        events.emit("logged", {"message": "hi"})

        assert received == [{"message": "hi"}]

    def test_on_returns_listener(self):
        events = DeliveryEvents()

        def listener(error):
            pass

        assert events.on("warn", listener) is listener
        assert events.listeners("warn") == [listener]

    def test_off(self):
        events = DeliveryEvents()
        received = []
        events.on("warn", received.append)
        events.off("warn", received.append)

        events.emit("warn", RuntimeError("x"))

        assert received == []

    def test_unknown_event_rejected(self):
        with pytest.raises(ValueError, match="Unknown event"):
            DeliveryEvents().on("delivered", print)

    def test_failing_listener_does_not_stop_others(self, caplog):
        events = DeliveryEvents()
        received = []

        def broken(payload):
            raise RuntimeError("listener bug")

        events.on("logged", broken)
        events.on("logged", received.append)

        with caplog.at_level(logging.ERROR, logger="fanout_logger.core.events"):
            events.emit("logged", "payload")

        assert received == ["payload"]
        assert "Delivery listener" in caplog.text


class _RecordingHandler(DeliveryReportingMixin, logging.Handler):
    def __init__(self, fail=False):
        super().__init__()
        self.events = DeliveryEvents()
        self.fail = fail

    def _write(self, record):
        try:
            if self.fail:
                raise OSError("disk full")
        except Exception:
            self.handleError(record)

    def emit(self, record):
        self.emit_reported(record, self._write)


class TestDeliveryReportingMixin:
    """Tests for DeliveryReportingMixin."""

    def _record(self):
        record = logging.LogRecord("test", logging.INFO, "test.py", 1, "hello", (), None)
        record.payload = {"message": "hello"}
        return record

    def test_success_publishes_logged_payload(self):
        handler = _RecordingHandler()
        logged = []
        handler.events.on("logged", logged.append)

        handler.handle(self._record())

        assert logged == [{"message": "hello"}]

    def test_failure_publishes_warn(self):
        handler = _RecordingHandler(fail=True)
        logged, warned = [], []
        handler.events.on("logged", logged.append)
        handler.events.on("warn", warned.append)

        handler.handle(self._record())

        assert logged == []
        assert len(warned) == 1
        assert isinstance(warned[0], OSError)

    def test_handle_error_outside_except_block(self):
        handler = _RecordingHandler()
        warned = []
        handler.events.on("warn", warned.append)

        handler.handleError(self._record())

        assert isinstance(warned[0], DeliveryError)
