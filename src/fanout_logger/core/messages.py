"""Message shapes, resolved once at the facade boundary."""

import traceback
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union


@dataclass(frozen=True)
class PlainMessage:
    """Any value that is not a failure (str, dict, number, ...)."""
    value: Any

    @property
    def text(self) -> str:
        return self.value if isinstance(self.value, str) else str(self.value)


@dataclass(frozen=True)
class FailureMessage:
    """An exception, or an object exposing a ``message`` field."""
    text: str
    stack: Optional[str] = None


Message = Union[PlainMessage, FailureMessage]


def format_stack(exc: BaseException) -> str:
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)).rstrip()


def resolve_message(message: Any) -> Message:
    """
    Classify a logged message.

    Example:
        >>> resolve_message("hello")
        PlainMessage(value='hello')
        >>> resolve_message({"message": "boom", "stack": "at x"})
        FailureMessage(text='boom', stack='at x')
    """
    if isinstance(message, FailureMessage) or isinstance(message, PlainMessage):
        return message

    if isinstance(message, BaseException):
        return FailureMessage(text=str(message) or message.__class__.__name__, stack=format_stack(message))

    if isinstance(message, Mapping):
        text = message.get("message")
        stack = message.get("stack")
    else:
        text = getattr(message, "message", None)
        stack = getattr(message, "stack", None)

    if text:
        return FailureMessage(text=str(text), stack=str(stack) if stack else None)

    return PlainMessage(message)
