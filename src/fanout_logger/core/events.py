"""
Delivery notifications.

Structured sinks run in background listener threads, so a facade call never
learns how delivery went. Outcomes are published here instead:

- ``logged``: delivery succeeded, payload = the structured record (dict)
- ``warn``: delivery failed, payload = the exception
"""

import logging
import sys
import threading
from typing import Any, Callable, Dict, List, Optional

from .exceptions import DeliveryError

logger = logging.getLogger(__name__)

LOGGED = "logged"
WARN = "warn"

Listener = Callable[[Any], None]


class DeliveryEvents:
    """
    Minimal publish/subscribe hub for delivery outcomes.

    Each delivery attempt publishes at most one event. Publishing with no
    subscribers is a no-op. A failing subscriber is reported through the
    library logger and does not affect other subscribers.

    Example:
        >>> events = DeliveryEvents()
        >>> failures = []
        >>> events.on("warn", failures.append)
        >>> events.emit("warn", RuntimeError("boom"))
        >>> failures
        [RuntimeError('boom')]
    """

    EVENTS = (LOGGED, WARN)

    def __init__(self):
        self._listeners: Dict[str, List[Listener]] = {name: [] for name in self.EVENTS}
        self._lock = threading.Lock()

    def _check(self, event: str) -> None:
        if event not in self._listeners:
            raise ValueError(
                f"Unknown event: {event}. Available: {', '.join(self.EVENTS)}"
            )

    def on(self, event: str, listener: Listener) -> Listener:
        """Subscribe. Returns the listener."""
        self._check(event)
        with self._lock:
            self._listeners[event].append(listener)
        return listener

    def off(self, event: str, listener: Listener) -> None:
        self._check(event)
        with self._lock:
            if listener in self._listeners[event]:
                self._listeners[event].remove(listener)

    def listeners(self, event: str) -> List[Listener]:
        self._check(event)
        with self._lock:
            return list(self._listeners[event])

    def emit(self, event: str, payload: Any) -> None:
        for listener in self.listeners(event):
            try:
                listener(payload)
            except Exception:
                logger.exception("Delivery listener for %r failed", event)


class DeliveryReportingMixin:
    """
    Publishes handler outcomes to :class:`DeliveryEvents`.

    Mix into a ``logging.Handler`` subclass (before the handler class in the
    bases). Errors routed through ``handleError`` become ``warn`` events
    instead of stderr tracebacks.
    """

    events: DeliveryEvents
    _delivery_error: Optional[BaseException] = None

    def publish_logged(self, record: logging.LogRecord) -> None:
        payload = getattr(record, "payload", None)
        self.events.emit(LOGGED, payload if payload is not None else record.getMessage())

    def publish_warn(self, error: BaseException) -> None:
        self.events.emit(WARN, error)

    def emit_reported(self, record: logging.LogRecord, emit: Callable[[logging.LogRecord], None]) -> None:
        """Run ``emit`` and publish ``logged`` unless it went through handleError."""
        self._delivery_error = None
        emit(record)
        if self._delivery_error is None:
            self.publish_logged(record)

    def handleError(self, record: logging.LogRecord) -> None:
        error = sys.exc_info()[1]
        if error is None:
            error = DeliveryError(f"{self.__class__.__name__} failed to emit record")
        self._delivery_error = error
        self.publish_warn(error)
