"""
Constructors referenced by literal expressions, and evaluation of literal expressions.
"""
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ..api import AllTracker, is_list_like, to_tuple, validate_type
from ._calendar import Duration, from_serial_days, parse_duration

log = logging.getLogger(__name__)

__all__ = [
    "concat",
    "cell",
    "record_from",
    "instant_from",
    "duration_from",
    "table_from",
    "literal_namespace",
    "evaluate_literal",
]


#
# Ensure all symbols introduced below are included in __all__
#

__tracker = AllTracker(globals())


#
# Constructors
#


def concat(
    ndim: int,
    *slices: Any,
    shape: Optional[Tuple[int, ...]] = None,
    dtype: Any = None,
) -> Any:
    """
    Stack arrays with ``ndim - 1`` dimensions along a new last axis.

    Slices of type :class:`.Duration` are stacked to a :class:`.Duration` with the
    display format of the first slice; all other slices are stacked to a NumPy array.

    :param ndim: the number of dimensions of the stacked array
    :param slices: the slices to stack
    :param shape: the shape of the resulting array; required if and only if no
        slices are given
    :param dtype: the dtype of the resulting array if no slices are given
        (default: ``float64``)
    :return: the stacked array
    """
    if not slices:
        if shape is None:
            raise ValueError("arg shape is required when no slices are given")
        shape = to_tuple(shape, element_type=int, arg_name="shape")
        if len(shape) != ndim:
            raise ValueError(f"arg shape={shape} must have {ndim} dimensions")
        return np.zeros(shape, dtype=dtype)
    elif shape is not None or dtype is not None:
        raise ValueError("args shape and dtype are not supported when slices are given")

    arrays = [s.values if isinstance(s, Duration) else np.asarray(s) for s in slices]
    for array in arrays:
        if array.ndim != ndim - 1:
            raise ValueError(
                f"slices must have {ndim - 1} dimensions but got {array.ndim}"
            )

    stacked = np.stack(arrays, axis=ndim - 1)

    if all(isinstance(s, Duration) for s in slices):
        return Duration(stacked, format=slices[0].format)
    else:
        return stacked


def cell(elements: Any, shape: Optional[Tuple[int, ...]] = None) -> np.ndarray:
    """
    Create a NumPy array of type ``object`` from nested lists of elements.

    Elements are never unpacked by NumPy, even if they are arrays or lists themselves.

    :param elements: a list of rows, each row a list of elements; or, if a shape is
        given, elements nested to the depth given by the number of dimensions
    :param shape: the shape of the array (default: a 2d shape derived from the
        elements)
    :return: the object array
    """
    if shape is None:
        rows = to_tuple(elements, element_type=(list, tuple), arg_name="elements")
        n_columns = len(rows[0]) if rows else 0
        if any(len(row) != n_columns for row in rows):
            raise ValueError("all rows of arg elements must have the same length")
        shape = (len(rows), n_columns)
        flat = [element for row in rows for element in row]
    else:
        shape = to_tuple(shape, element_type=int, arg_name="shape")
        flat = _flatten(elements, depth=len(shape))

    if len(flat) != int(np.prod(shape)):
        raise ValueError(
            f"got {len(flat)} elements but arg shape={shape} requires "
            f"{int(np.prod(shape))}"
        )

    array = np.empty(shape, dtype=object)
    for index, element in zip(np.ndindex(*shape), flat):
        array[index] = element
    return array


def record_from(
    values: Sequence[Any],
    names: Sequence[str],
    shape: Optional[Tuple[int, ...]] = None,
) -> Any:
    """
    Create a record by pairing field names with field values.

    :param values: the field values, in field order
    :param names: the field names
    :param shape: if given, create a NumPy structured array of this shape, taking
        each field value as the array of that field's values across all records;
        otherwise create a :class:`dict`
    :return: the record
    """
    names = to_tuple(names, element_type=str, arg_name="names")
    values = to_tuple(values, arg_name="values")

    if len(names) != len(values):
        raise ValueError(
            f"got {len(values)} field values for {len(names)} field names"
        )
    if len(set(names)) != len(names):
        raise ValueError(f"field names must be unique: {names}")

    if shape is None:
        return dict(zip(names, values))

    shape = to_tuple(shape, element_type=int, arg_name="shape")
    fields = [np.asarray(value) for value in values]

    record_array = np.empty(
        shape,
        dtype=[
            (name, field.dtype, field.shape[len(shape) :])
            for name, field in zip(names, fields)
        ],
    )
    for name, field in zip(names, fields):
        record_array[name] = field
    return record_array


def instant_from(serial: Any, origin: str, tz: Optional[str] = None) -> Any:
    """
    Create points in time from serial day numbers.

    :param serial: a serial day number, or an array-like of serial day numbers
    :param origin: the origin of the day numbers; must be ``"serial_day"`` (day 1 is
        1 January of year 1 in the proleptic Gregorian calendar)
    :param tz: the name of the time zone, or ``None`` if time zone naive
    :return: a :class:`pandas.Timestamp` for a scalar serial day number; otherwise
        an array of type ``datetime64[ns]``, or a :class:`pandas.DatetimeIndex` if a
        time zone is given
    """
    if origin != "serial_day":
        raise ValueError(f"arg origin={origin!r} must be 'serial_day'")
    return from_serial_days(serial, tz=tz)


def duration_from(text: Any, format: str = Duration.DEFAULT_FORMAT) -> Duration:
    """
    Create a :class:`.Duration` from elapsed times in digital format.

    :param text: a string or an array-like of strings, e.g., ``"01:30:00.000"``
    :param format: the display format of the duration (default: ``"hh:mm:ss"``)
    :return: the duration, with the same shape as the given text
    """
    return Duration(parse_duration(text), format=format)


def table_from(
    *columns: Any,
    column_names: Sequence[Any],
    row_names: Optional[Sequence[Any]] = None,
) -> pd.DataFrame:
    """
    Create a data frame from columns.

    :param columns: the column values, in column order
    :param column_names: the column labels
    :param row_names: the row labels (default: a range index)
    :return: the data frame
    """
    column_names = to_tuple(column_names, arg_name="column_names")

    if len(column_names) != len(columns):
        raise ValueError(
            f"got {len(columns)} columns for {len(column_names)} column names"
        )
    if len(set(column_names)) != len(column_names):
        raise ValueError(f"column names must be unique: {column_names}")

    data = {
        name: np.asarray(column) if isinstance(column, Duration) else column
        for name, column in zip(column_names, columns)
    }
    index: Optional[List[Any]] = None if row_names is None else list(row_names)

    return pd.DataFrame(data, index=index, columns=list(column_names))


#
# Evaluation
#


def literal_namespace() -> Dict[str, Any]:
    """
    Get the names that literal expressions may reference.

    :return: a new dictionary mapping names to the objects they refer to
    """
    return dict(
        np=np,
        concat=concat,
        cell=cell,
        record_from=record_from,
        instant_from=instant_from,
        duration_from=duration_from,
        table_from=table_from,
    )


def evaluate_literal(text: str) -> Any:
    """
    Evaluate the text of a literal expression, reconstructing the value it represents.

    The text is evaluated as Python code, in a fresh copy of the
    :func:`.literal_namespace`; only evaluate text from trusted sources.

    :param text: the text of the literal expression
    :return: the value represented by the expression
    """
    validate_type(text, expected_type=str, name="arg text")
    return eval(text, literal_namespace())


__tracker.validate()


#
# Private auxiliary functions
#


def _flatten(elements: Any, depth: int) -> List[Any]:
    if depth == 0:
        return [elements]
    if not (isinstance(elements, (list, tuple)) or is_list_like(elements)):
        raise TypeError(
            f"expected a list of elements nested {depth} levels deep, "
            f"but got a {type(elements).__name__}"
        )
    flat: List[Any] = []
    for element in elements:
        flat.extend(_flatten(element, depth - 1))
    return flat
