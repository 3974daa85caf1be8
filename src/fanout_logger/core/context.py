"""Context resolution: static config < request-derived < call-supplied."""

import contextvars
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Union
from urllib.parse import parse_qs, urlsplit

StaticContext = Union[None, str, Mapping[str, Any], Callable[[Any], Optional[Mapping[str, Any]]]]
CallContext = Union[None, str, Mapping[str, Any]]


@dataclass(frozen=True)
class RequestContext:
    """Request fields attached to log records.

    Attributes:
        ip: Client IP address
        user_agent: User-Agent header
        method: HTTP method (GET, POST, etc.)
        url: Original path with query string
        query: Parsed query parameters
        body: Parsed request body

    Example:
        >>> req = RequestContext(ip="10.0.0.1", method="GET", url="/users?page=2")
        >>> req.to_fields()
        {'ip': '10.0.0.1', 'ua': None, 'method': 'GET', 'url': '/users?page=2', 'query': {}, 'body': None}
    """

    ip: Optional[str] = None
    user_agent: Optional[str] = None
    method: Optional[str] = None
    url: Optional[str] = None
    query: Dict[str, Any] = field(default_factory=dict)
    body: Any = None

    def to_fields(self) -> Dict[str, Any]:
        return {
            "ip": self.ip,
            "ua": self.user_agent,
            "method": self.method,
            "url": self.url,
            "query": self.query,
            "body": self.body,
        }

    @classmethod
    def from_environ(cls, environ: Mapping[str, Any], body: Any = None) -> "RequestContext":
        """Build from a WSGI environ."""
        forwarded = environ.get("HTTP_X_FORWARDED_FOR", "")
        ip = forwarded.split(",")[0].strip() if forwarded else environ.get("REMOTE_ADDR")

        path = environ.get("SCRIPT_NAME", "") + environ.get("PATH_INFO", "")
        query_string = environ.get("QUERY_STRING", "")
        url = f"{path}?{query_string}" if query_string else path

        return cls(
            ip=ip,
            user_agent=environ.get("HTTP_USER_AGENT"),
            method=environ.get("REQUEST_METHOD"),
            url=url or None,
            query=_parse_query(query_string),
            body=body,
        )

    @classmethod
    def from_prepared(cls, request: Any) -> "RequestContext":
        """Build from a ``requests.PreparedRequest``."""
        parts = urlsplit(request.url or "")
        url = parts.path + (f"?{parts.query}" if parts.query else "")
        body = request.body
        if isinstance(body, bytes):
            body = body.decode("utf-8", errors="replace")

        return cls(
            user_agent=request.headers.get("User-Agent") if request.headers else None,
            method=request.method,
            url=url or None,
            query=_parse_query(parts.query),
            body=body,
        )

    @classmethod
    def from_any(cls, request: Any) -> "RequestContext":
        """Duck-typed adapter for framework request objects."""
        if isinstance(request, RequestContext):
            return request
        if isinstance(request, Mapping) and "REQUEST_METHOD" in request:
            return cls.from_environ(request)

        headers = _lookup(request, "headers") or {}
        user_agent = _lookup(request, "user_agent", "ua")
        if user_agent is None and hasattr(headers, "get"):
            user_agent = headers.get("User-Agent") or headers.get("user-agent")

        query = _lookup(request, "query", "args")

        return cls(
            ip=_lookup(request, "ip", "remote_addr"),
            user_agent=str(user_agent) if user_agent is not None else None,
            method=_lookup(request, "method"),
            url=_lookup(request, "url", "path"),
            query=dict(query) if query else {},
            body=_request_body(request),
        )


def _lookup(source: Any, *names: str) -> Any:
    """First non-None value among keys (mappings) or attributes (objects)."""
    for name in names:
        if isinstance(source, Mapping):
            value = source.get(name)
        else:
            value = getattr(source, name, None)
        if value is not None:
            return value
    return None


def _request_body(source: Any) -> Any:
    """``body``, else the parsed JSON body (``json`` key/attribute or Flask's ``get_json``)."""
    body = _lookup(source, "body")
    if body is not None:
        return body
    if isinstance(source, Mapping):
        return source.get("json")

    get_json = getattr(source, "get_json", None)
    if callable(get_json):
        return get_json(silent=True)
    try:
        # Werkzeug's request.json raises on non-JSON bodies
        value = getattr(source, "json", None)
    except Exception:
        return None
    return None if callable(value) else value


def _parse_query(query_string: str) -> Dict[str, Any]:
    # Single values are unwrapped: ?a=1&b=2&b=3 -> {"a": "1", "b": ["2", "3"]}
    parsed = parse_qs(query_string, keep_blank_values=True)
    return {key: values[0] if len(values) == 1 else values for key, values in parsed.items()}


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# CURRENT REQUEST
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

_current_request: contextvars.ContextVar[Optional[Any]] = contextvars.ContextVar(
    "fanout_logger_current_request", default=None
)


def set_current_request(request: Any) -> contextvars.Token:
    """
    Set request for the current context (thread or asyncio task).

    Example:
        >>> set_current_request(RequestContext(method="GET", url="/health"))
        >>> logger.log("Health check")  # Will include method and url
    """
    return _current_request.set(request)


def get_current_request() -> Optional[Any]:
    return _current_request.get()


def clear_current_request() -> None:
    _current_request.set(None)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# RESOLVER
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def is_empty(value: Any) -> bool:
    """
    Emptiness rule for context values.

    Numbers (including 0) and booleans are never empty. None and empty
    strings/collections are.
    """
    if value is None:
        return True
    if isinstance(value, (bool, int, float, complex)):
        return False
    if isinstance(value, (str, bytes, list, tuple, set, frozenset, Mapping)):
        return len(value) == 0
    return False


def filter_empty(mapping: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Drop keys with empty values.

    Example:
        >>> filter_empty({"a": "", "b": 0, "c": []})
        {'b': 0}
    """
    return {key: value for key, value in mapping.items() if not is_empty(value)}


def normalize_context(context: CallContext) -> Dict[str, Any]:
    """A plain string is shorthand for ``{"context": <string>}``."""
    if context is None:
        return {}
    if isinstance(context, Mapping):
        return dict(context)
    return {"context": context}


def merge_layers(*layers: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Shallow, last-write-wins merge. Nested mappings are replaced, never merged."""
    merged: Dict[str, Any] = {}
    for layer in layers:
        if layer:
            merged.update(layer)
    return merged


class ContextResolver:
    """
    Merges context layers into one mapping.

    Precedence (lowest to highest):
    1. static context (string, mapping, or callable receiving the request)
    2. request-derived fields (ip, ua, method, url, query, body)
    3. call-supplied context

    Example:
        >>> resolver = ContextResolver({"service": "billing"})
        >>> resolver.resolve({"requestId": "r1"})
        {'service': 'billing', 'requestId': 'r1'}
    """

    def __init__(self, static_context: StaticContext = None):
        self.static_context = static_context

    def _base(self, request: Any) -> Dict[str, Any]:
        static = self.static_context
        if callable(static):
            # Callables get the raw request object, or an empty RequestContext
            return normalize_context(static(request if request is not None else RequestContext()))
        return normalize_context(static)

    def resolve(self, call_context: CallContext = None, request: Any = None) -> Dict[str, Any]:
        snapshot = RequestContext.from_any(request) if request is not None else None

        return filter_empty(
            merge_layers(
                self._base(request),
                snapshot.to_fields() if snapshot is not None else None,
                normalize_context(call_context),
            )
        )
