"""
Runtime shape classification for arbitrary Python values.

The redaction engine never branches on concrete types itself. Every node is
first put into exactly one Shape bucket here, and the engine dispatches on the
bucket. Record-like objects are also read and written through this module, so
that knowledge of __dict__, __slots__ and name mangling stays in one place.
"""

from __future__ import annotations

import array
import enum
import numbers
import types
from collections import ChainMap, UserDict, UserList, UserString
from collections.abc import MutableMapping, MutableSequence, Set
from functools import lru_cache
from pathlib import PurePath
from typing import Any, Iterator

import numpy as np
import pandas as pd

from value_redaction.tabular import is_text_array


class Shape(enum.Enum):
    ABSENT = "absent"
    BYTES = "bytes"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    HOLDER = "holder"
    TABLE = "table"
    RECORD = "record"
    TEXT = "text"
    OPAQUE = "opaque"


BYTE_TYPECODES = frozenset({"b", "B"})

_OPAQUE_TYPES = (
    bool,
    numbers.Number,
    enum.Enum,
    range,
    type,
    types.ModuleType,
    pd.Index,
    np.ndarray,
    pd.api.extensions.ExtensionArray,
)

_HOLDER_TYPES = (UserString, UserList, UserDict, ChainMap)


def is_named_tuple(value: Any) -> bool:
    return isinstance(value, tuple) and hasattr(type(value), "_fields")


def is_byte_sequence(value: Any) -> bool:
    if isinstance(value, (bytes, bytearray)):
        return True
    return isinstance(value, array.array) and value.typecode in BYTE_TYPECODES


def classify(value: Any) -> Shape:
    """
    Return the Shape of value.

    Order matters: text-holding arrays are tables before other arrays are
    opaque, enum members that subclass str stay opaque, UserString and
    ChainMap are holders rather than a sequence or mapping, and namedtuples
    are records rather than plain tuples.
    """
    if value is None:
        return Shape.ABSENT
    if isinstance(value, (pd.DataFrame, pd.Series)) or is_text_array(value):
        return Shape.TABLE
    if isinstance(value, _OPAQUE_TYPES):
        return Shape.OPAQUE
    if isinstance(value, (str, PurePath)):
        return Shape.TEXT
    if is_byte_sequence(value):
        return Shape.BYTES
    if isinstance(value, _HOLDER_TYPES):
        return Shape.HOLDER
    if isinstance(value, MutableMapping):
        return Shape.MAPPING
    if is_named_tuple(value):
        return Shape.RECORD
    if isinstance(value, (MutableSequence, tuple, Set)):
        return Shape.SEQUENCE
    if callable(value):
        return Shape.OPAQUE
    if isinstance(getattr(value, "__dict__", None), dict) or slot_fields(type(value)):
        return Shape.RECORD
    return Shape.OPAQUE


def holder_attribute(value: Any) -> str:
    """Attribute holding the wrapped payload of a HOLDER value."""
    return "maps" if isinstance(value, ChainMap) else "data"


def _mangle(owner: type, name: str) -> str:
    stripped = owner.__name__.lstrip("_")
    if stripped and name.startswith("__") and not name.endswith("__"):
        return f"_{stripped}{name}"
    return name


def declared_name(cls: type, attribute: str) -> str:
    """
    Map a stored attribute name back to the name written in the class body.

    "_Account__token" set by a method of Account was declared as "__token".
    """
    if attribute.endswith("__"):
        return attribute
    for owner in cls.__mro__:
        prefix = "_" + owner.__name__.lstrip("_")
        if prefix != "_" and attribute.startswith(prefix + "__"):
            return attribute[len(prefix):]
    return attribute


@lru_cache(maxsize=None)
def slot_fields(cls: type) -> tuple[tuple[str, str], ...]:
    """(stored attribute, declared name) for every slot along the MRO."""
    fields: list[tuple[str, str]] = []
    seen: set[str] = set()
    for owner in cls.__mro__:
        slots = owner.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for slot in slots:
            if slot in ("__dict__", "__weakref__"):
                continue
            attribute = _mangle(owner, slot)
            if attribute in seen:
                continue
            seen.add(attribute)
            fields.append((attribute, slot))
    return tuple(fields)


def record_fields(value: Any) -> Iterator[tuple[str, str, Any]]:
    """
    Yield (stored attribute, declared name, field value) for a record.

    Covers instance __dict__ entries and populated slots, private and
    name-mangled attributes included. Unset slots are skipped. Exceptions
    also yield their args, which live in neither.
    """
    cls = type(value)
    seen: set[str] = set()

    instance_dict = getattr(value, "__dict__", None)
    if isinstance(instance_dict, dict):
        for attribute, item in list(instance_dict.items()):
            seen.add(attribute)
            yield attribute, declared_name(cls, attribute), item

    for attribute, declared in slot_fields(cls):
        if attribute in seen:
            continue
        try:
            item = object.__getattribute__(value, attribute)
        except AttributeError:
            continue
        seen.add(attribute)
        yield attribute, declared, item

    if isinstance(value, BaseException) and "args" not in seen:
        yield "args", "args", value.args


def set_record_field(value: Any, attribute: str, item: Any) -> None:
    # Bypasses frozen dataclasses and custom __setattr__; only ever called on clones.
    object.__setattr__(value, attribute, item)
