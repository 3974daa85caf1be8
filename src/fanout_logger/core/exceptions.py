"""
Иерархия исключений fanout-logger.

Классификация:
- DeliveryError - sink не смог доставить запись (никогда не пробрасывается в вызывающий код,
  публикуется через событие ``warn``)
- ConfigValidationError - невалидная конфигурация (выбрасывается при создании)
"""

from typing import Optional

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class FanoutLoggerException(Exception):
    """Базовое исключение fanout-logger."""

    def __init__(self, message: str, **kwargs):
        self.message = message
        super().__init__(message)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ОШИБКИ ДОСТАВКИ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class DeliveryError(FanoutLoggerException):
    """
    Sink не доставил запись.

    Запись теряется, приложение продолжает работу.
    """

class TransportError(DeliveryError):
    """
    Сетевая ошибка HTTP sink.

    Примеры:
    - Connection refused
    - DNS resolution failed
    - Timeout (если задан)

    Args:
        message: Сообщение об ошибке
        url: URL endpoint
        cause: Исходное исключение requests
    """

    def __init__(self, message: str, url: Optional[str] = None, cause: Optional[BaseException] = None):
        self.url = url
        self.cause = cause
        full_message = f"{message}"
        if url:
            full_message += f" (url: {url})"
        super().__init__(full_message)

class HTTPStatusError(DeliveryError):
    """
    Endpoint ответил статусом, отличным от 200.

    Args:
        status_code: HTTP статус код
        url: URL endpoint
    """

    def __init__(self, status_code: int, url: Optional[str] = None):
        self.status_code = status_code
        self.url = url
        super().__init__(f"Invalid HTTP Status Code: {status_code}")

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# КОНФИГУРАЦИЯ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ConfigValidationError(FanoutLoggerException, ValueError):
    """Raised when configuration file or environment is invalid."""
