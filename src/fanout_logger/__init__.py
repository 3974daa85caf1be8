"""fanout-logger - logging facade with console, rotating file and HTTP sinks."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .core.logger import Logger, ScopedLogger
from .core.config import AuthConfig, FileSinkConfig, HttpSinkConfig, LoggerOptions
from .core.context import (
    ContextResolver,
    RequestContext,
    set_current_request,
    get_current_request,
    clear_current_request,
)
from .core.events import DeliveryEvents
from .core.exceptions import (
    FanoutLoggerException,
    DeliveryError,
    TransportError,
    HTTPStatusError,
    ConfigValidationError,
)
from .core.levels import Severity, LevelFilter
from .core.env_config import load_from_env, ConfigFileLoader

# Set up logging - add NullHandler to prevent "No handler found" warnings
# Users can configure library diagnostics via logging.getLogger('fanout_logger')
logging.getLogger('fanout_logger').addHandler(logging.NullHandler())

# Version info - read from package metadata (single source of truth in pyproject.toml)
try:
    __version__ = version("fanout-logger")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__all__ = [
    "Logger",
    "ScopedLogger",
    "AuthConfig",
    "FileSinkConfig",
    "HttpSinkConfig",
    "LoggerOptions",
    "ContextResolver",
    "RequestContext",
    "set_current_request",
    "get_current_request",
    "clear_current_request",
    "DeliveryEvents",
    "FanoutLoggerException",
    "DeliveryError",
    "TransportError",
    "HTTPStatusError",
    "ConfigValidationError",
    "Severity",
    "LevelFilter",
    "load_from_env",
    "ConfigFileLoader",
    "__version__",
]
