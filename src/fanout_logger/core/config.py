"""
Система конфигурации для fanout-logger.

Все конфиги immutable (frozen dataclasses), чтобы их можно было безопасно
читать из фоновых потоков sink'ов.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union
from urllib.parse import urlsplit

from .context import StaticContext
from .levels import Severity, parse_severity

PayloadTransform = Callable[[Dict[str, Any]], Any]

DEFAULT_LOG_ENTRIES: Tuple[str, ...] = ("timestamp", "level", "context", "message", "trace")


def _freeze_dict(d: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    """
    Convert dict to immutable MappingProxyType.

    Example:
        >>> frozen = _freeze_dict({"X-API-Key": "secret"})
        >>> frozen["X-New"] = "value"  # Raises TypeError
    """
    if d is None:
        return MappingProxyType({})
    return MappingProxyType(dict(d))

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# AUTH CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class AuthConfig:
    """
    Учётные данные HTTP sink.

    Bearer имеет приоритет над Basic. Basic используется только если
    заданы и username, и password.

    Args:
        username: Имя пользователя для Basic аутентификации
        password: Пароль для Basic аутентификации
        bearer: Токен для Bearer аутентификации

    Examples:
        >>> AuthConfig(bearer="token-123")
        >>> AuthConfig(username="ingest", password="secret")
    """
    username: Optional[str] = None
    password: Optional[str] = None
    bearer: Optional[str] = None

    @property
    def basic(self) -> Optional[Tuple[str, str]]:
        """(username, password) для requests или None."""
        if self.bearer:
            return None
        if self.username and self.password:
            return (self.username, self.password)
        return None

    @classmethod
    def from_value(cls, value: Union["AuthConfig", Mapping[str, Any], None]) -> Optional["AuthConfig"]:
        if value is None or isinstance(value, AuthConfig):
            return value
        return cls(
            username=value.get("username"),
            password=value.get("password"),
            bearer=value.get("bearer"),
        )

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# SINK CONFIGS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class HttpSinkConfig:
    """
    Конфигурация HTTP sink.

    Args:
        url: Endpoint (http:// или https://)
        headers: Дополнительные заголовки
        auth: Учётные данные (Basic или Bearer)
        payload: Функция-трансформер записи перед сериализацией
        timeout: Таймаут запроса (сек); None = поведение requests по умолчанию
        verify_ssl: Проверять SSL сертификат

    Examples:
        >>> HttpSinkConfig(url="https://logs.example.com/ingest")
        >>> HttpSinkConfig(url="http://example.test/ingest", auth=AuthConfig(bearer="T"))
    """
    url: str = ""
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    auth: Optional[AuthConfig] = None
    payload: Optional[PayloadTransform] = None
    timeout: Optional[float] = None
    verify_ssl: bool = True

    def __post_init__(self):
        """Валидация."""
        if not self.url:
            raise ValueError("http sink requires url")
        if urlsplit(self.url).scheme not in ("http", "https"):
            raise ValueError(f"http sink url must be http:// or https://, got: {self.url}")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if isinstance(self.headers, dict):
            object.__setattr__(self, 'headers', _freeze_dict(self.headers))
        if isinstance(self.auth, Mapping):
            object.__setattr__(self, 'auth', AuthConfig.from_value(self.auth))


@dataclass(frozen=True)
class FileSinkConfig:
    """
    Конфигурация файлового sink.

    Ротация по времени через logging.handlers.TimedRotatingFileHandler.

    Args:
        filename: Имя файла лога
        dirname: Директория (создаётся при необходимости)
        when: Интервал ротации ('midnight', 'H', 'D', ...)
        interval: Множитель интервала
        backup_count: Сколько старых файлов хранить (0 = все)
        encoding: Кодировка файла

    Examples:
        >>> FileSinkConfig(filename="app.log", dirname="/var/log/app")
    """
    filename: str = ""
    dirname: str = ""
    when: str = "midnight"
    interval: int = 1
    backup_count: int = 14
    encoding: str = "utf-8"

    def __post_init__(self):
        """Валидация."""
        if not self.filename or not self.dirname:
            raise ValueError("file sink requires both filename and dirname")
        if self.interval <= 0:
            raise ValueError("interval must be positive")
        if self.backup_count < 0:
            raise ValueError("backup_count must be non-negative")

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# MAIN CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class LoggerOptions:
    """
    Главная конфигурация Logger.

    Args:
        level: Порог (error, warn, log, debug, verbose)
        context: Статический контекст: строка (имя источника), dict или
            callable, получающий request
        file: Файловый sink (None = отключён)
        http: HTTP sink (None = отключён)
        log_entries: Порядок известных полей в структурированной записи
        console: Писать в консоль
        console_format: Формат консоли ('text' или 'colored')

    Examples:
        >>> LoggerOptions(level=Severity.WARN)
        >>> LoggerOptions.create(url="http://example.test/ingest", auth={"bearer": "T"})
    """
    level: Severity = Severity.VERBOSE
    context: StaticContext = None
    file: Optional[FileSinkConfig] = None
    http: Optional[HttpSinkConfig] = None
    log_entries: Tuple[str, ...] = DEFAULT_LOG_ENTRIES
    console: bool = True
    console_format: str = "text"

    def __post_init__(self):
        """Normalize level and log_entries."""
        # Unknown level names fall back to verbose, same as set_level()
        severity = parse_severity(self.level) or Severity.VERBOSE
        object.__setattr__(self, 'level', severity)
        object.__setattr__(self, 'log_entries', tuple(self.log_entries))
        if self.console_format not in ("text", "colored"):
            raise ValueError(f"console_format must be 'text' or 'colored', got: {self.console_format}")

    @property
    def has_structured_sinks(self) -> bool:
        return self.file is not None or self.http is not None

    @classmethod
    def create(
        cls,
        url: Optional[str] = None,
        filename: Optional[str] = None,
        dirname: Optional[str] = None,
        level: Union[str, Severity, None] = None,
        context: StaticContext = None,
        headers: Optional[Dict[str, str]] = None,
        auth: Union[AuthConfig, Mapping[str, Any], None] = None,
        payload: Optional[PayloadTransform] = None,
        log_entries: Optional[Tuple[str, ...]] = None,
        timeout: Optional[float] = None,
        verify_ssl: bool = True,
        console: bool = True,
        console_format: str = "text",
        **file_kwargs
    ) -> "LoggerOptions":
        """
        Удобный конструктор из плоских опций.

        Args:
            url: Endpoint HTTP sink (включает HTTP sink)
            filename: Имя файла (вместе с dirname включает файловый sink)
            dirname: Директория логов
            level: Порог
            context: Статический контекст
            headers: Заголовки HTTP sink
            auth: AuthConfig или dict {username, password, bearer}
            payload: Трансформер записи HTTP sink
            log_entries: Порядок известных полей
            timeout: Таймаут HTTP sink
            verify_ssl: Проверять SSL сертификат HTTP sink
            console: Писать в консоль
            console_format: 'text' или 'colored'
            **file_kwargs: when, interval, backup_count, encoding для файла

        Examples:
            >>> LoggerOptions.create(filename="app.log", dirname="logs", level="warn")
            >>> LoggerOptions.create(url="https://logs.example.com", auth={"bearer": "T"})
        """
        http_cfg = None
        if url:
            http_cfg = HttpSinkConfig(
                url=url,
                headers=headers or {},
                auth=AuthConfig.from_value(auth),
                payload=payload,
                timeout=timeout,
                verify_ssl=verify_ssl,
            )

        file_cfg = None
        if filename and dirname:
            file_cfg = FileSinkConfig(filename=filename, dirname=dirname, **file_kwargs)

        return cls(
            level=parse_severity(level) or Severity.VERBOSE,
            context=context,
            file=file_cfg,
            http=http_cfg,
            log_entries=tuple(log_entries) if log_entries else DEFAULT_LOG_ENTRIES,
            console=console,
            console_format=console_format,
        )
