"""
Log formatters for console and structured sinks.

Structured sinks (file, HTTP) get one JSON object per record; the console
gets a short human-readable line with only the message and context name.
"""

import json
import logging
import time
import traceback
from typing import Any, Callable, Dict, Iterable, Optional

from ..levels import parse_severity, to_backend_level

Transform = Callable[[Dict[str, Any]], Any]


def _exception_text(exc: BaseException) -> str:
    return str(exc) or exc.__class__.__name__


def _exception_stack(exc: BaseException) -> str:
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)).rstrip()


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseException):
        return _exception_text(value)
    if isinstance(value, (set, frozenset)):
        return list(value)
    return str(value)


def order_fields(data: Dict[str, Any], allowlist: Iterable[str]) -> Dict[str, Any]:
    """
    Put allowlisted fields first (in allowlist order), then the rest.

    Example:
        >>> order_fields({"b": 2, "message": "hi", "level": "info"}, ["level", "message"])
        {'level': 'info', 'message': 'hi', 'b': 2}
    """
    allowed = list(allowlist)
    ordered = {key: data[key] for key in allowed if key in data}
    for key, value in data.items():
        if key not in ordered:
            ordered[key] = value
    return ordered


def format_payload(
    payload: Dict[str, Any],
    allowlist: Iterable[str],
    transform: Optional[Transform] = None,
) -> str:
    """
    Serialize a structured record to one JSON line.

    Steps:
    1. stamp ``timestamp`` (epoch millis, at format time)
    2. map level to the backend name (``log`` -> ``info``)
    3. unwrap an exception ``message`` into text + ``trace``
    4. order fields by allowlist
    5. apply ``transform`` (may add, drop or rename anything)

    Example:
        >>> format_payload({"level": "log", "message": "hi"}, ["level", "message"])
        '{"level": "info", "message": "hi", "timestamp": 1700000000000}'
    """
    data = dict(payload)
    data["timestamp"] = int(time.time() * 1000)

    if "level" in data:
        data["level"] = to_backend_level(data["level"])

    message = data.get("message")
    if isinstance(message, BaseException):
        data["message"] = _exception_text(message)
        data.setdefault("trace", [_exception_stack(message)])

    ordered = order_fields(data, allowlist)
    if transform is not None:
        ordered = transform(ordered)

    return json.dumps(ordered, default=_json_default, ensure_ascii=False)


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured sinks.

    Reads the ``payload`` dict attached to the record by the Logger facade.
    Records without a payload (plain stdlib logging calls) are converted
    from the record itself.

    Example output:
        {"timestamp": 1700000000000, "level": "error", "context": "Billing",
         "message": "boom", "trace": ["Traceback ..."], "requestId": "r1"}
    """

    def __init__(self, log_entries: Iterable[str] = (), transform: Optional[Transform] = None):
        super().__init__()
        self.log_entries = tuple(log_entries)
        self.transform = transform

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        payload = getattr(record, "payload", None)
        if payload is None:
            payload = self._payload_from_record(record)
        return format_payload(payload, self.log_entries, self.transform)

    def _payload_from_record(self, record: logging.LogRecord) -> Dict[str, Any]:
        severity = parse_severity(getattr(record, "severity", None) or record.levelname)
        payload: Dict[str, Any] = {
            "level": severity.value if severity else record.levelname.lower(),
            "message": record.getMessage(),
            "context": record.name,
        }
        if record.exc_info:
            payload["trace"] = [self.formatException(record.exc_info)]
        return payload


class ConsoleFormatter(logging.Formatter):
    """
    Plain text formatter for the developer console.

    Format: [timestamp] [LEVEL] [context] message

    Example output:
        [2024-01-15 10:30:45] [LOG] [UsersService] User created
    """

    def __init__(self):
        """Initialize console formatter."""
        super().__init__(
            fmt='[%(asctime)s] [%(label)s] %(context_part)s%(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    def label(self, record: logging.LogRecord) -> str:
        severity = getattr(record, "severity", None)
        return str(getattr(severity, "value", severity) or record.levelname).upper()

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as text."""
        record.label = self.label(record)
        context = getattr(record, "context", None)
        record.context_part = f"[{context}] " if context else ""
        return super().format(record)


class ColoredConsoleFormatter(ConsoleFormatter):
    """
    Colored console formatter.

    Uses ANSI color codes to colorize severities:
    - ERROR: Red
    - WARN: Yellow
    - LOG: Green
    - DEBUG: Magenta
    - VERBOSE: Cyan
    """

    # ANSI color codes
    COLORS = {
        'ERROR': '\033[31m',      # Red
        'WARN': '\033[33m',       # Yellow
        'LOG': '\033[32m',        # Green
        'DEBUG': '\033[35m',      # Magenta
        'VERBOSE': '\033[36m',    # Cyan
        'RESET': '\033[0m'        # Reset
    }

    def label(self, record: logging.LogRecord) -> str:
        label = super().label(record)
        color = self.COLORS.get(label)
        if color is None:
            return label
        return f"{color}{label}{self.COLORS['RESET']}"


def get_formatter(format_type: str) -> logging.Formatter:
    """
    Get console formatter by type.

    Args:
        format_type: Format type (text, colored)

    Returns:
        Formatter instance

    Raises:
        ValueError: If format_type is unknown

    Example:
        >>> formatter = get_formatter("colored")
    """
    formatters = {
        "text": ConsoleFormatter,
        "colored": ColoredConsoleFormatter,
    }

    formatter_class = formatters.get(format_type.lower())
    if not formatter_class:
        raise ValueError(
            f"Unknown format type: {format_type}. "
            f"Available: {', '.join(formatters.keys())}"
        )

    return formatter_class()
