"""
Logger facade.

One call fans out to the console (synchronous, human-readable) and to every
configured structured sink (file, HTTP; queued, JSON).
"""

import copy
import logging
from typing import Any, Dict, List, Optional, Union

from .config import LoggerOptions
from .context import (
    CallContext,
    ContextResolver,
    get_current_request,
    merge_layers,
    normalize_context,
)
from .events import DeliveryEvents
from .levels import VERBOSE, LevelFilter, Severity, parse_severity
from .messages import FailureMessage, resolve_message
from .sinks.formatters import StructuredFormatter, get_formatter
from .sinks.handlers import (
    QueuedSink,
    create_console_handler,
    create_file_handler,
    create_http_handler,
)

logger = logging.getLogger(__name__)


class Logger:
    """
    Logging facade with console, rotating file and HTTP sinks.

    Features:
    - Five severities (error, warn, log, debug, verbose) with a threshold
    - Context merged from static config, request and call
    - Console output always on (within threshold)
    - File / HTTP sinks are fire-and-forget; outcomes via ``events``

    Example:
        >>> options = LoggerOptions.create(
        ...     url="https://logs.example.com/ingest",
        ...     auth={"bearer": "token"},
        ...     level="debug",
        ... )
        >>> logger = Logger(options)
        >>> logger.events.on("warn", lambda err: print("delivery failed:", err))
        >>> logger.log("User created", {"context": "UsersService", "userId": 42})
        >>> logger.close()
    """

    def __init__(
        self,
        options: Optional[LoggerOptions] = None,
        context: CallContext = None,
        name: str = "fanout_logger",
    ):
        """
        Initialize logger.

        Args:
            options: Logger options (defaults: console only, threshold verbose)
            context: Base context added to every record of this instance
            name: Name used for the underlying stdlib loggers
        """
        self.options = options or LoggerOptions()
        self.name = name
        self.context = normalize_context(context)
        self.events = DeliveryEvents()

        self._filter = LevelFilter(self.options.level)
        self._resolver = ContextResolver(self.options.context)
        self._closed = False
        self._owner = True

        # Standalone stdlib loggers (not registered in logging's global manager)
        self._console = logging.Logger(f"{name}.console")
        self._console.propagate = False
        if self.options.console:
            self._console.addHandler(
                create_console_handler(VERBOSE, get_formatter(self.options.console_format))
            )

        self._structured = logging.Logger(f"{name}.structured")
        self._structured.propagate = False
        self._sinks: List[QueuedSink] = []

        if self.options.file is not None:
            formatter = StructuredFormatter(self.options.log_entries)
            self._sinks.append(
                QueuedSink(create_file_handler(self.options.file, formatter, self.events))
            )

        if self.options.http is not None:
            formatter = StructuredFormatter(self.options.log_entries, self.options.http.payload)
            self._sinks.append(
                QueuedSink(create_http_handler(self.options.http, formatter, self.events))
            )

        for sink in self._sinks:
            sink.start()
            self._structured.addHandler(sink.queue_handler)

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # LEVEL
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    @property
    def level(self) -> Severity:
        return self._filter.threshold

    def set_level(self, level: Union[str, Severity, None]) -> None:
        """Change threshold. Unknown names are ignored."""
        self._filter.set_threshold(level)

    def is_enabled(self, severity: Union[str, Severity]) -> bool:
        return self._filter.permits(severity)

    @property
    def sinks(self) -> List[logging.Handler]:
        """Structured sink handlers (file, HTTP)."""
        return [sink.handler for sink in self._sinks]

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # CONTEXT
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def get_context(self, context: CallContext = None, request: Any = None) -> Dict[str, Any]:
        """
        Resolve context for a call.

        Falls back to the request stored with ``set_current_request`` when
        no request is passed.
        """
        if request is None:
            request = get_current_request()
        return self._resolver.resolve(context, request)

    def child(self, context: CallContext) -> "Logger":
        """
        Logger with extra base context.

        Shares sinks, events and threshold with the parent; closing the
        child does not close the parent's sinks.

        Example:
            >>> billing = logger.child({"context": "Billing", "tenant": "acme"})
            >>> billing.log("Invoice sent")
        """
        clone = copy.copy(self)
        clone.context = merge_layers(self.context, normalize_context(context))
        clone._owner = False
        return clone

    def scoped(self, request: Any = None, owner: Any = None) -> "ScopedLogger":
        """Request-scoped view of this logger."""
        return ScopedLogger(self, request=request, owner=owner)

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # EMISSION
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def all(
        self,
        level: Union[str, Severity],
        message: Any,
        context: CallContext = None,
        trace: Optional[str] = None,
        request: Any = None,
    ) -> None:
        """
        Emit one record at ``level``.

        Below threshold: returns before any context resolution or sink work.
        """
        severity = parse_severity(level)
        if severity is None or not self._filter.permits(severity):
            return

        resolved = self.get_context(
            merge_layers(self.context, normalize_context(context)),
            request,
        )
        resolved_message = resolve_message(message)

        # No handler means console disabled; logging would fall back to stderr
        if self._console.handlers:
            self._console.log(
                severity.stdlib_level,
                resolved_message.text,
                extra={"severity": severity, "context": resolved.get("context")},
            )

        if not self._sinks:
            return

        if isinstance(resolved_message, FailureMessage):
            payload = {
                "level": severity.value,
                "message": resolved_message.text,
                "trace": [trace or resolved_message.stack],
                **resolved,
            }
        else:
            payload = {
                "level": severity.value,
                "message": resolved_message.value,
                **resolved,
            }

        self._structured.log(
            severity.stdlib_level,
            resolved_message.text,
            extra={"payload": payload, "severity": severity},
        )

    def error(self, message: Any, trace: Optional[str] = None, context: CallContext = None,
              request: Any = None) -> None:
        """
        Log error message.

        Args:
            message: Message text, exception, or object with ``message``
            trace: Stack trace (defaults to the exception's own traceback)
            context: Context name or mapping of extra fields
            request: Request to derive ip/ua/method/url/query/body from

        Example:
            >>> try:
            ...     charge(card)
            ... except PaymentError as e:
            ...     logger.error(e, context={"orderId": "o-1"})
        """
        self.all(Severity.ERROR, message, context, trace, request)

    def warn(self, message: Any, context: CallContext = None, request: Any = None) -> None:
        """Log warning message."""
        self.all(Severity.WARN, message, context, request=request)

    def log(self, message: Any, context: CallContext = None, request: Any = None) -> None:
        """
        Log regular message.

        Example:
            >>> logger.log("Request completed", {"status": 200, "durationMs": 150})
        """
        self.all(Severity.LOG, message, context, request=request)

    def debug(self, message: Any, context: CallContext = None, request: Any = None) -> None:
        """Log debug message."""
        self.all(Severity.DEBUG, message, context, request=request)

    def verbose(self, message: Any, context: CallContext = None, request: Any = None) -> None:
        """Log verbose message."""
        self.all(Severity.VERBOSE, message, context, request=request)

    # stdlib-style aliases
    info = log
    warning = warn

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # LIFECYCLE
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def flush(self) -> None:
        """Block until queued records have been delivered by every sink."""
        for sink in self._sinks:
            sink.flush()
        for handler in self._console.handlers:
            handler.flush()

    def close(self) -> None:
        """
        Drain sinks and release resources.

        Idempotent. Child loggers do not own sinks, so closing them is a no-op.

        Example:
            >>> with Logger(options) as logger:
            ...     logger.log("Processing...")
            >>> # Automatically closed
        """
        if self._closed or not self._owner:
            return

        for sink in self._sinks:
            self._structured.removeHandler(sink.queue_handler)
            sink.close()
        # Shared with children: later calls from any of them skip structured output
        self._sinks.clear()

        # Console stays attached: later calls from this logger or its children still print
        for handler in self._console.handlers:
            handler.flush()

        self._closed = True
        logger.debug("Logger %r closed", self.name)

    def __enter__(self):
        """Context manager support."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Close logger on context exit."""
        self.close()
        return False


class ScopedLogger:
    """
    Request-scoped view of a :class:`Logger`.

    Every call carries the bound request; calls without a context name get
    the owner's class name.

    Example:
        >>> class UsersService:
        ...     def __init__(self, logger, request):
        ...         self.logger = logger.scoped(request=request, owner=self)
        ...
        ...     def create(self, user):
        ...         self.logger.log("User created", {"userId": user.id})
        ...         # context == "UsersService"
    """

    def __init__(self, logger: Logger, request: Any = None, owner: Any = None):
        self.logger = logger
        self.request = request
        self.owner = owner

    @property
    def owner_name(self) -> Optional[str]:
        owner = self.owner
        if owner is None:
            return None
        if isinstance(owner, str):
            return owner
        if isinstance(owner, type):
            return owner.__name__
        return type(owner).__name__

    def get_context(self, context: CallContext = None) -> Dict[str, Any]:
        return self.logger.get_context(self._call_context(context), self.request)

    def _call_context(self, context: CallContext) -> Dict[str, Any]:
        resolved = normalize_context(context)
        if not resolved.get("context") and self.owner_name:
            resolved["context"] = self.owner_name
        return resolved

    def error(self, message: Any, trace: Optional[str] = None, context: CallContext = None) -> None:
        self.logger.error(message, trace, self._call_context(context), request=self.request)

    def warn(self, message: Any, context: CallContext = None) -> None:
        self.logger.warn(message, self._call_context(context), request=self.request)

    def log(self, message: Any, context: CallContext = None) -> None:
        self.logger.log(message, self._call_context(context), request=self.request)

    def debug(self, message: Any, context: CallContext = None) -> None:
        self.logger.debug(message, self._call_context(context), request=self.request)

    def verbose(self, message: Any, context: CallContext = None) -> None:
        self.logger.verbose(message, self._call_context(context), request=self.request)

    info = log
    warning = warn
