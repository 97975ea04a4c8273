"""
Deep-copy stage: every redaction call works on a private clone.

copy.deepcopy already walks dicts, lists, tuples, sets, dataclasses, slotted
objects and anything else that supports the copy/pickle protocols. Values that
cannot be copied (locks, open files, generators, ...) raise IntrospectionError
instead of being shared with the clone.
"""

from __future__ import annotations

import copy
import logging
import pickle
from typing import TypeVar

from value_redaction.errors import IntrospectionError


logger = logging.getLogger(__name__)

T = TypeVar("T")


def clone(value: T) -> T:
    """
    Return a deep copy of value that shares no mutable storage with it.

    Shared references inside value stay shared inside the clone.
    """
    try:
        return copy.deepcopy(value)
    except (TypeError, copy.Error, pickle.PicklingError) as exc:
        logger.debug("deep copy failed for %s", type(value).__qualname__)
        raise IntrospectionError(type(value), str(exc)) from exc
