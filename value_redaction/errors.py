"""Exception types raised by the redaction engine."""

from __future__ import annotations


class RedactionError(Exception):
    pass


class IntrospectionError(RedactionError, TypeError):
    """Raised when a value cannot be cloned for redaction.

    Typical causes are handles with no copyable state: locks, open files,
    sockets, generators. The underlying error is chained as ``__cause__``.
    """

    def __init__(self, value_type: type, reason: str) -> None:
        super().__init__(f"Cannot clone value of type {value_type.__qualname__!r} for redaction: {reason}")
        self.value_type = value_type


__all__ = ["RedactionError", "IntrospectionError"]
