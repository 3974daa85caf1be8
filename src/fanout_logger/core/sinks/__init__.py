"""
Sinks for fanout-logger.

Console (synchronous text), rotating file and HTTP (queued JSON).
"""

from .formatters import (
    StructuredFormatter,
    ConsoleFormatter,
    ColoredConsoleFormatter,
    format_payload,
    order_fields,
    get_formatter,
)
from .handlers import (
    QueuedSink,
    RotatingFileSink,
    create_console_handler,
    create_file_handler,
    create_http_handler,
)
from .http import Endpoint, HttpHandler, HttpSink, parse_endpoint

__all__ = [
    # Formatters
    "StructuredFormatter",
    "ConsoleFormatter",
    "ColoredConsoleFormatter",
    "format_payload",
    "order_fields",
    "get_formatter",
    # Handlers
    "QueuedSink",
    "RotatingFileSink",
    "create_console_handler",
    "create_file_handler",
    "create_http_handler",
    # HTTP
    "Endpoint",
    "HttpHandler",
    "HttpSink",
    "parse_endpoint",
]
