"""
pandas and numpy support for the redaction engine.

A DataFrame is treated as a sequence of row records: each cell is evaluated
with its column label as the location name. A Series, a numpy array and a
pandas extension array are treated as plain sequences: their elements take
whatever element name the engine passes in.

Only object, string and bytes storage can hold text. Categorical data is
redacted through its categories. Numeric, boolean and datetime storage is
skipped without being touched.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import numpy as np
import pandas as pd

from value_redaction.deep_copy import clone


CellRedactor = Callable[[Any, Optional[str]], Any]

TEXT_ARRAY_KINDS = frozenset({"O", "U", "S"})


def column_name(label: Any) -> str:
    return label if isinstance(label, str) else str(label)


def _is_text_dtype(dtype: Any) -> bool:
    return pd.api.types.is_object_dtype(dtype) or pd.api.types.is_string_dtype(dtype)


def holds_text(dtype: Any) -> bool:
    if isinstance(dtype, pd.CategoricalDtype):
        return _is_text_dtype(dtype.categories.dtype)
    return _is_text_dtype(dtype)


def is_text_array(value: Any) -> bool:
    """True for numpy arrays and pandas extension arrays that can hold text."""
    if isinstance(value, np.ndarray):
        return value.dtype.kind in TEXT_ARRAY_KINDS
    if isinstance(value, pd.api.extensions.ExtensionArray):
        return holds_text(value.dtype)
    return False


def _redact_categorical(values: pd.Categorical, name: Optional[str], redact_cell: CellRedactor) -> pd.Categorical:
    categories = [redact_cell(clone(category), name) for category in values.categories]
    # Redaction can collapse several categories into one.
    merged = list(dict.fromkeys(categories))
    # Trailing -1 keeps missing values (code -1) missing.
    positions = np.array([merged.index(category) for category in categories] + [-1])
    return pd.Categorical.from_codes(positions[values.codes], categories=merged, ordered=values.ordered)


def _map_cells(series: pd.Series, name: Optional[str], redact_cell: CellRedactor) -> pd.Series:
    if isinstance(series.dtype, pd.CategoricalDtype):
        redacted = _redact_categorical(series.array, name, redact_cell)
        return pd.Series(redacted, index=series.index, name=series.name)
    # DataFrame.copy(deep=True) leaves Python objects in object columns shared
    # with the caller, so each cell gets its own clone before it is rewritten.
    mapped = series.map(lambda cell: redact_cell(clone(cell), name))
    return mapped.astype(series.dtype)


def redact_series(series: pd.Series, name: Optional[str], redact_cell: CellRedactor) -> pd.Series:
    if not holds_text(series.dtype):
        return series
    return _map_cells(series, name, redact_cell)


def redact_frame(frame: pd.DataFrame, redact_cell: CellRedactor) -> pd.DataFrame:
    """Rewrite the text-holding columns of frame in place and return it."""
    for position, label in enumerate(frame.columns):
        series = frame.iloc[:, position]
        if not holds_text(series.dtype):
            continue
        frame.isetitem(position, _map_cells(series, column_name(label), redact_cell))
    return frame


def redact_ndarray(values: np.ndarray, name: Optional[str], redact_cell: CellRedactor) -> np.ndarray:
    if values.dtype.kind == "O":
        # ndarray.__deepcopy__ already cloned object elements.
        for index in np.ndindex(values.shape):
            item = values[index]
            redacted = redact_cell(item, name)
            if redacted is not item:
                values[index] = redacted
        return values
    # Fixed-width str/bytes arrays are rebuilt so the sentinel is not truncated.
    redacted = [redact_cell(item, name) for item in values.ravel().tolist()]
    return np.array(redacted, dtype=values.dtype.kind).reshape(values.shape)


def redact_extension_array(values: Any, name: Optional[str], redact_cell: CellRedactor) -> Any:
    if isinstance(values, pd.Categorical):
        return _redact_categorical(values, name, redact_cell)
    return pd.array([redact_cell(clone(item), name) for item in values], dtype=values.dtype)


def redact_columnar(value: Any, name: Optional[str], redact_cell: CellRedactor) -> Any:
    """
    Redact a DataFrame, Series, numpy array or extension array.

    name is the element name for sequence-like values; DataFrame cells use
    their column label instead.
    """
    if isinstance(value, pd.DataFrame):
        return redact_frame(value, redact_cell)
    if isinstance(value, pd.Series):
        return redact_series(value, name, redact_cell)
    if isinstance(value, np.ndarray):
        return redact_ndarray(value, name, redact_cell)
    return redact_extension_array(value, name, redact_cell)
