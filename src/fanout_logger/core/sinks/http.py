"""
HTTP sink: POSTs each formatted record to a configured endpoint.

One request per record, no session reuse, no retry. Outcomes are reported
through a callback (transport level) and, for the handler, through
``warn`` / ``logged`` events.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional
from urllib.parse import urlsplit

import requests

from ..config import HttpSinkConfig
from ..events import LOGGED, WARN, DeliveryEvents, DeliveryReportingMixin
from ..exceptions import HTTPStatusError, TransportError

logger = logging.getLogger(__name__)

CONTENT_TYPE = "application/json; charset=utf-8"

DEFAULT_PORTS = {"http": 80, "https": 443}

DeliveryCallback = Callable[[Optional[Exception], Optional[requests.Response]], None]


@dataclass(frozen=True)
class Endpoint:
    """Parsed sink URL."""
    secure: bool
    host: str
    port: int
    path: str

    @property
    def url(self) -> str:
        scheme = "https" if self.secure else "http"
        host = f"[{self.host}]" if ":" in self.host else self.host
        netloc = host if self.port == DEFAULT_PORTS[scheme] else f"{host}:{self.port}"
        return f"{scheme}://{netloc}{self.path}"


def parse_endpoint(url: str) -> Endpoint:
    """
    Parse sink URL once.

    Port defaults to the scheme's implicit port. Query string stays in path.

    Example:
        >>> parse_endpoint("https://logs.example.com/ingest?src=api")
        Endpoint(secure=True, host='logs.example.com', port=443, path='/ingest?src=api')
    """
    parts = urlsplit(url)
    secure = parts.scheme == "https"
    path = parts.path or "/"
    if parts.query:
        path += f"?{parts.query}"
    return Endpoint(
        secure=secure,
        host=parts.hostname or "",
        port=parts.port or DEFAULT_PORTS["https" if secure else "http"],
        path=path,
    )


class HttpSink:
    """
    Transport for one record per POST.

    Example:
        >>> sink = HttpSink(HttpSinkConfig(url="http://example.test/ingest"))
        >>> sink.deliver('{"message": "hi"}', lambda err, resp: print(err, resp))
    """

    def __init__(self, config: HttpSinkConfig):
        self.config = config
        self.endpoint = parse_endpoint(config.url)
        self.headers = self.build_headers()

    def build_headers(self) -> Dict[str, str]:
        """Content-Type, then configured headers, then Bearer auth."""
        headers = {"Content-Type": CONTENT_TYPE}
        headers.update(self.config.headers)

        auth = self.config.auth
        if auth and auth.bearer:
            headers["Authorization"] = f"Bearer {auth.bearer}"

        return headers

    @property
    def basic_auth(self):
        auth = self.config.auth
        return auth.basic if auth else None

    def deliver(self, body: str, callback: DeliveryCallback) -> None:
        """
        POST body and report through callback.

        - transport failure -> ``callback(TransportError, None)``
        - any HTTP response -> ``callback(None, response)`` (body fully read)

        Status policy is left to the caller. Never raises.
        """
        url = self.endpoint.url
        try:
            response = requests.post(
                url,
                data=body.encode("utf-8"),
                headers=self.headers,
                auth=self.basic_auth,
                timeout=self.config.timeout,
                verify=self.config.verify_ssl,
            )
            # Drain body so the connection is released
            response.content
        except Exception as e:
            # requests errors, and anything http.client raises (e.g. header encoding)
            callback(TransportError(str(e) or e.__class__.__name__, url=url, cause=e), None)
            return

        callback(None, response)


class HttpHandler(DeliveryReportingMixin, logging.Handler):
    """
    logging.Handler delivering formatted records through :class:`HttpSink`.

    Any status other than 200 is treated as a delivery error.

    Example:
        >>> handler = HttpHandler(HttpSinkConfig(url="https://logs.example.com"))
        >>> handler.events.on("warn", lambda err: print("delivery failed:", err))
    """

    def __init__(
        self,
        config: HttpSinkConfig,
        events: Optional[DeliveryEvents] = None,
        level: int = logging.NOTSET,
    ):
        super().__init__(level)
        self.sink = HttpSink(config)
        self.events = events if events is not None else DeliveryEvents()

    def emit(self, record: logging.LogRecord) -> None:
        def on_result(error: Optional[Exception], response: Optional[requests.Response]) -> None:
            if error is None and response is not None and response.status_code != 200:
                error = HTTPStatusError(response.status_code, url=self.sink.endpoint.url)

            if error is not None:
                logger.debug("HTTP sink delivery failed: %s", error)
                self.events.emit(WARN, error)
            else:
                payload = getattr(record, "payload", None)
                self.events.emit(LOGGED, payload if payload is not None else record.getMessage())

        try:
            body = self.format(record)
            self.sink.deliver(body, on_result)
        except Exception:
            self.handleError(record)
