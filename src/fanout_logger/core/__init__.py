"""Core components of fanout-logger."""

from .config import AuthConfig, FileSinkConfig, HttpSinkConfig, LoggerOptions
from .context import (
    ContextResolver,
    RequestContext,
    clear_current_request,
    filter_empty,
    get_current_request,
    set_current_request,
)
from .events import DeliveryEvents
from .exceptions import (
    ConfigValidationError,
    DeliveryError,
    FanoutLoggerException,
    HTTPStatusError,
    TransportError,
)
from .levels import LevelFilter, Severity, from_backend_level, to_backend_level
from .logger import Logger, ScopedLogger
from .messages import FailureMessage, PlainMessage, resolve_message

__all__ = [
    # Config
    "AuthConfig",
    "FileSinkConfig",
    "HttpSinkConfig",
    "LoggerOptions",
    # Context
    "ContextResolver",
    "RequestContext",
    "clear_current_request",
    "filter_empty",
    "get_current_request",
    "set_current_request",
    # Events
    "DeliveryEvents",
    # Exceptions
    "ConfigValidationError",
    "DeliveryError",
    "FanoutLoggerException",
    "HTTPStatusError",
    "TransportError",
    # Levels
    "LevelFilter",
    "Severity",
    "from_backend_level",
    "to_backend_level",
    # Logger
    "Logger",
    "ScopedLogger",
    # Messages
    "FailureMessage",
    "PlainMessage",
    "resolve_message",
]
