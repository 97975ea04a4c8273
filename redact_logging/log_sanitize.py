"""
Sanitize arbitrary values so that secrets are never written to logs.

Logs may be persisted or shared, and the objects passed to a logger are often
request payloads, config objects or ORM rows whose shape the caller does not
control. This module puts the redaction engine in front of the logging system:

- sanitize_for_log(...) returns a redacted copy for explicit use
- RedactingFilter redacts log record arguments and extra= fields before any
  handler formats them
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional

from value_redaction.redact_policy import RedactMode
from value_redaction.redactor import REDACTED, redact


# Placeholder used in logs instead of real values.
REDACTED_PLACEHOLDER = REDACTED

# LogRecord attributes set by the logging module itself; never redacted.
STANDARD_RECORD_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
        "asctime",
    }
)


def _resolve_mode(
    allow_list: Optional[Iterable[str]],
    deny_list: Optional[Iterable[str]],
) -> tuple[RedactMode, Optional[Iterable[str]]]:
    if allow_list is not None and deny_list is not None:
        raise ValueError("Pass either allow_list or deny_list, not both.")
    if deny_list is not None:
        return "deny", deny_list
    return "allow", allow_list


def sanitize_for_log(
    obj: Any,
    *,
    allow_list: Optional[Iterable[str]] = None,
    deny_list: Optional[Iterable[str]] = None,
) -> Any:
    """
    Return a copy of obj safe for logging.

    Defaults to allow-list mode: with no lists at all, every non-empty string
    and byte value is replaced with REDACTED_PLACEHOLDER. Pass allow_list to
    keep specific fields/keys readable, or deny_list to redact only specific
    fields/keys. obj itself is never modified.
    """
    mode, names = _resolve_mode(allow_list, deny_list)
    return redact(obj, names, mode)


class RedactingFilter(logging.Filter):
    """
    logging.Filter that redacts record arguments and extra fields.

    - positional args (logger.info("%s", payload)) have no location name
    - a single mapping arg (logger.info("%(user)s", {...})) is keyed by its keys
    - extra={...} attributes use the attribute name as location name
    - a non-string msg (logger.info(payload)) has no location name

    The format string itself is left alone. Redaction is idempotent, so the
    filter can be attached to several handlers of the same record. Attach it
    to handlers rather than loggers so it also sees propagated records.

    Arguments that cannot be cloned (locks, open files) raise
    IntrospectionError out of the logging call.
    """

    def __init__(
        self,
        name: str = "",
        *,
        allow_list: Optional[Iterable[str]] = None,
        deny_list: Optional[Iterable[str]] = None,
    ) -> None:
        super().__init__(name)
        mode, names = _resolve_mode(allow_list, deny_list)
        self.mode: RedactMode = mode
        self.names: tuple[str, ...] = tuple(names or ())

    def _sanitize(self, obj: Any) -> Any:
        return redact(obj, self.names, self.mode)

    def filter(self, record: logging.LogRecord) -> bool:
        if not super().filter(record):
            return False

        if record.args:
            if isinstance(record.args, Mapping):
                record.args = self._sanitize(dict(record.args))
            else:
                record.args = self._sanitize(tuple(record.args))

        if not isinstance(record.msg, str):
            record.msg = self._sanitize(record.msg)

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in STANDARD_RECORD_ATTRS and not key.startswith("_")
        }
        if extra:
            for key, value in self._sanitize(extra).items():
                setattr(record, key, value)

        return True
