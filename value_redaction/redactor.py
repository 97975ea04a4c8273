"""
Redact text and raw-byte values anywhere inside an arbitrary Python value.

Use this before logging data whose shape you do not control. Every call:

1) deep-copies the value, so the caller's object is never modified
2) walks the copy once, visiting dicts, lists, tuples, sets, dataclasses,
   slotted objects, exceptions, namedtuples, UserString/UserList/UserDict and
   ChainMap wrappers, pandas DataFrame/Series/extension arrays and numpy
   text arrays
3) replaces non-empty str/PurePath values with "REDACTED" and non-empty
   bytes/bytearray/byte arrays with b"REDACTED", depending on the policy

Which values are replaced depends on the location name: the field or key a
value sits under. With an allow list every value is redacted unless its
location name is listed. With a deny list only values under listed names are
redacted. Names match case-insensitively. Numbers, booleans, enum members,
callables and other opaque values are never modified.

Prefer redact_with_allow_list in production code. If a new sensitive field
is added later and nobody updates the list, an allow list still redacts it.
A deny list would leak it.
"""

from __future__ import annotations

import array
import logging
from collections.abc import MutableSequence, MutableSet
from pathlib import PurePath
from typing import Any, Iterable, Optional, TypeVar

from value_redaction import tabular
from value_redaction.deep_copy import clone
from value_redaction.redact_policy import RedactMode, RedactPolicy
from value_redaction.value_shapes import (
    Shape,
    classify,
    holder_attribute,
    is_named_tuple,
    record_fields,
    set_record_field,
)


logger = logging.getLogger(__name__)

T = TypeVar("T")

REDACTED = "REDACTED"
REDACTED_BYTES = REDACTED.encode("ascii")


def redact_with_allow_list(value: T, allow_list: Optional[Iterable[str]]) -> T:
    """
    Return a redacted deep copy of value, redacting everything not allow-listed.

    Text and byte values are replaced unless the field or key they sit under
    is in allow_list. Values with no location name (a bare top-level string,
    elements of a list) are always replaced. Empty values are left as they
    are so that "no value" stays visible in logs.

    The allow list only exempts a location's own text/bytes. Nested
    structures under an allow-listed name are still walked, and their own
    fields and keys are checked against the same list.
    """
    return _redact_clone(value, RedactPolicy.from_names("allow", allow_list))


def redact_with_deny_list(value: T, deny_list: Optional[Iterable[str]]) -> T:
    """
    Return a redacted deep copy of value, redacting only deny-listed names.

    Text and byte values are replaced only when the field or key they sit
    under is in deny_list. Elements of a list, tuple, set or array take the
    name of the field or key holding it, so {"tokens": ["a", "b"]} with deny
    list ["tokens"] has both elements replaced. A bare top-level value has no
    location name and is kept. Empty values are never replaced.
    """
    return _redact_clone(value, RedactPolicy.from_names("deny", deny_list))


def redact(value: T, names: Optional[Iterable[str]], mode: RedactMode = "allow") -> T:
    """Dispatch to the allow- or deny-list variant by mode name."""
    return _redact_clone(value, RedactPolicy.from_names(mode, names))


def _redact_clone(value: T, policy: RedactPolicy) -> T:
    logger.debug(
        "redacting %s with %s list of %d name(s)",
        type(value).__qualname__,
        policy.mode,
        len(policy.names),
    )
    return _redact(clone(value), None, policy)


def _redact(value: Any, name: Optional[str], policy: RedactPolicy) -> Any:
    """
    Redact value in place where possible and return the result.

    Immutable nodes (str, bytes, tuple, frozenset, namedtuple) come back as
    new objects and the caller stores them where the old node was.
    """
    shape = classify(value)

    if shape is Shape.TEXT:
        if not _is_empty_text(value) and policy.should_redact(name):
            return _redacted_text(value)
        return value

    if shape is Shape.BYTES:
        if len(value) and policy.should_redact(name):
            return _redacted_bytes(value)
        return value

    if shape is Shape.SEQUENCE:
        return _redact_sequence(value, name, policy)

    if shape is Shape.MAPPING:
        for key in list(value.keys()):
            item = value[key]
            redacted = _redact(item, _key_name(key), policy)
            if redacted is not item:
                value[key] = redacted
        return value

    if shape is Shape.HOLDER:
        attribute = holder_attribute(value)
        payload = getattr(value, attribute)
        redacted = _redact(payload, name, policy)
        if redacted is not payload:
            setattr(value, attribute, redacted)
        return value

    if shape is Shape.TABLE:
        def redact_cell(cell: Any, cell_name: Optional[str]) -> Any:
            return _redact(cell, cell_name, policy)

        return tabular.redact_columnar(value, policy.element_name(name), redact_cell)

    if shape is Shape.RECORD:
        return _redact_record(value, policy)

    # ABSENT and OPAQUE
    return value


def _redact_sequence(value: Any, name: Optional[str], policy: RedactPolicy) -> Any:
    element = policy.element_name(name)
    if isinstance(value, MutableSequence):
        for index, item in enumerate(list(value)):
            redacted = _redact(item, element, policy)
            if redacted is not item:
                value[index] = redacted
        return value

    items = list(value)
    redacted_items = [_redact(item, element, policy) for item in items]

    # Set members may have been rewritten in place, so sets are always
    # rebuilt to rehash them.
    if isinstance(value, MutableSet):
        value.clear()
        for item in redacted_items:
            value.add(item)
        return value
    if isinstance(value, tuple) and all(new is old for new, old in zip(redacted_items, items)):
        return value
    return type(value)(redacted_items)


def _redact_record(value: Any, policy: RedactPolicy) -> Any:
    if is_named_tuple(value):
        items = list(value)
        redacted_items = [
            _redact(item, field, policy) for field, item in zip(type(value)._fields, items)
        ]
        if all(new is old for new, old in zip(redacted_items, items)):
            return value
        return type(value)._make(redacted_items)

    for attribute, field, item in record_fields(value):
        redacted = _redact(item, field, policy)
        if redacted is not item:
            set_record_field(value, attribute, redacted)
    return value


def _key_name(key: Any) -> str:
    if isinstance(key, str):
        return key
    if isinstance(key, (bytes, bytearray)):
        return bytes(key).decode("utf-8", errors="replace")
    return str(key)


def _is_empty_text(value: Any) -> bool:
    # str(PurePath("")) is ".", so paths are judged by their parts.
    if isinstance(value, PurePath):
        return not value.parts
    return not str(value)


def _redacted_text(value: Any) -> Any:
    if isinstance(value, str):
        return REDACTED
    return type(value)(REDACTED)


def _redacted_bytes(value: Any) -> Any:
    if isinstance(value, bytearray):
        value[:] = REDACTED_BYTES
        return value
    if isinstance(value, array.array):
        value[:] = array.array(value.typecode, REDACTED_BYTES)
        return value
    return REDACTED_BYTES
