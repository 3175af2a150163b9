from __future__ import annotations

from typing import Any

_UNSET = object()


class InterleaveError(Exception):
    """Base class for ndinterleave-specific exceptions."""


class InvalidArgumentError(InterleaveError, TypeError, ValueError):
    def __init__(self, message: str, *, value: Any = _UNSET):
        detail = _format_value(value)
        super().__init__(f"invalid argument. {message}{detail}")
        self.value = None if value is _UNSET else value


class BackendError(InterleaveError, RuntimeError):
    pass


def _format_value(value: Any) -> str:
    if value is _UNSET:
        return ""
    text = repr(value)
    if len(text) > 80:
        text = text[:77] + "..."
    return f" Value: `{text}`."
