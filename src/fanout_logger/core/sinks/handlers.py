"""
Sink handlers for console, rotating file and HTTP output.

Structured sinks are wrapped in :class:`QueuedSink` so that the caller only
enqueues; formatting and delivery happen on the sink's own listener thread.
"""

import logging
import queue
import sys
from logging.handlers import QueueHandler, QueueListener, TimedRotatingFileHandler
from pathlib import Path
from typing import List, Optional

from ..config import FileSinkConfig, HttpSinkConfig
from ..events import DeliveryEvents, DeliveryReportingMixin
from .http import HttpHandler

logger = logging.getLogger(__name__)


def create_console_handler(
    level: int,
    formatter: logging.Formatter,
    filters: Optional[List[logging.Filter]] = None
) -> logging.StreamHandler:
    """
    Create console (stdout) handler.

    Args:
        level: Log level (e.g. logging.INFO)
        formatter: Formatter instance
        filters: List of filters to add

    Returns:
        StreamHandler configured for console

    Example:
        >>> from .formatters import ConsoleFormatter
        >>> handler = create_console_handler(logging.DEBUG, ConsoleFormatter())
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(formatter)

    if filters:
        for f in filters:
            handler.addFilter(f)

    return handler


class RotatingFileSink(DeliveryReportingMixin, TimedRotatingFileHandler):
    """
    Time-rotated JSON lines file.

    Rotation itself is TimedRotatingFileHandler's job; this class only adds
    delivery events.
    """

    def __init__(self, config: FileSinkConfig, events: Optional[DeliveryEvents] = None):
        # Create directory if it doesn't exist
        log_dir = Path(config.dirname)
        log_dir.mkdir(parents=True, exist_ok=True)

        super().__init__(
            filename=str(log_dir / config.filename),
            when=config.when,
            interval=config.interval,
            backupCount=config.backup_count,
            encoding=config.encoding,
        )
        self.events = events if events is not None else DeliveryEvents()

    def emit(self, record: logging.LogRecord) -> None:
        self.emit_reported(record, super().emit)


def create_file_handler(
    config: FileSinkConfig,
    formatter: logging.Formatter,
    events: Optional[DeliveryEvents] = None,
) -> RotatingFileSink:
    """
    Create time-rotating file handler.

    File rotation (when="midnight"):
        app.log             <- current
        app.log.2024-01-14  <- previous day
        app.log.2024-01-13  <- older

    Example:
        >>> from .formatters import StructuredFormatter
        >>> handler = create_file_handler(
        ...     FileSinkConfig(filename="app.log", dirname="/var/log/app"),
        ...     StructuredFormatter(),
        ... )
    """
    handler = RotatingFileSink(config, events)
    handler.setFormatter(formatter)
    return handler


def create_http_handler(
    config: HttpSinkConfig,
    formatter: logging.Formatter,
    events: Optional[DeliveryEvents] = None,
) -> HttpHandler:
    """
    Create HTTP handler.

    Example:
        >>> from .formatters import StructuredFormatter
        >>> handler = create_http_handler(
        ...     HttpSinkConfig(url="https://logs.example.com/ingest"),
        ...     StructuredFormatter(),
        ... )
    """
    handler = HttpHandler(config, events)
    handler.setFormatter(formatter)
    return handler


class QueuedSink:
    """
    Fire-and-forget wrapper around one structured handler.

    Each sink gets its own queue and listener thread, so a slow HTTP
    endpoint never delays the file sink (and vice versa).

    Example:
        >>> sink = QueuedSink(create_http_handler(config, StructuredFormatter()))
        >>> sink.start()
        >>> structured_logger.addHandler(sink.queue_handler)
        >>> ...
        >>> sink.stop()  # drains the queue
    """

    def __init__(self, handler: logging.Handler):
        self.handler = handler
        self.queue: "queue.SimpleQueue[logging.LogRecord]" = queue.SimpleQueue()
        self.queue_handler = QueueHandler(self.queue)
        self.listener = QueueListener(self.queue, handler)
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            return
        self.listener.start()
        self._running = True

    def stop(self) -> None:
        """Process everything queued so far, then stop the listener thread."""
        if not self._running:
            return
        self.listener.stop()
        self._running = False

    def flush(self) -> None:
        """Block until every record enqueued so far has been delivered."""
        if not self._running:
            return
        self.stop()
        self.handler.flush()
        self.start()

    def close(self) -> None:
        self.stop()
        self.queue_handler.close()
        self.handler.close()
        logger.debug("Closed %s", self.handler.__class__.__name__)
