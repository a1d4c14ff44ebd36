"""Request-scoped key/value pairs appended to every log record."""
from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import Iterator

_fields: contextvars.ContextVar[dict[str, object]] = contextvars.ContextVar(
    "log_context", default={}
)


class LogContext:
    def as_dict(self) -> dict[str, object]:
        return dict(_fields.get())

    def render(self) -> str:
        """Return ``"k=v k=v "`` for the bound fields, or an empty string."""

        fields = _fields.get()
        return "".join(f"{key}={value} " for key, value in fields.items())

    @contextmanager
    def scope(self, **values: object) -> Iterator[None]:
        """Bind ``values`` (``None`` skipped) until the block exits."""

        bound = {key: value for key, value in values.items() if value is not None}
        token = _fields.set({**_fields.get(), **bound})
        try:
            yield
        finally:
            _fields.reset(token)


log_context = LogContext()


class ContextFilter(logging.Filter):
    """Set ``record.context`` once; records replayed from a queue keep theirs."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "context"):
            record.context = log_context.render()
        return True
