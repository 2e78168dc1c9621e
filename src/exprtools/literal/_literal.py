"""
Rendering of values as literal expressions: the dispatcher, and one renderer per kind
of value.
"""
import datetime
import logging
from typing import Any, Mapping, Optional

import numpy as np
import pandas as pd

from ..api import AllTracker, validate_type
from ..expression import Expression, HasExpressionRepr
from ..expression.atomic import Id
from ..expression.base import BracketPair
from ..expression.composite import DictLiteral, ListLiteral
from ..expression.formatter import PythonExpressionFormatter

# noinspection PyProtectedMember
from ._base import (
    HasLiteral,
    RenderOptions,
    _dtype_expression,
    assemble,
    render_base,
)

# noinspection PyProtectedMember
from ._calendar import (
    Duration,
    _is_timedelta_like,
    _to_timedelta_array,
    format_duration,
    to_serial_days,
)

log = logging.getLogger(__name__)

__all__ = [
    "to_literal",
    "to_literal_expression",
]


#
# Constants
#

# the digital format used to encode durations in literal expressions
_DURATION_LITERAL_FORMAT = "hh:mm:ss.SSS"


#
# Ensure all symbols introduced below are included in __all__
#

__tracker = AllTracker(globals())


#
# Functions
#


def to_literal(
    value: Any,
    *,
    precision: Optional[int] = None,
    single_line: bool = True,
    max_width: int = 80,
) -> str:
    """
    Render a value as the text of a literal expression.

    Evaluating the text with :func:`.evaluate_literal` reconstructs the value.

    Supported values include scalars, NumPy arrays of any number of dimensions,
    lists, tuples, dictionaries, NumPy structured arrays, points in time and
    elapsed times, pandas data frames, and instances of :class:`.HasLiteral` or
    :class:`.HasExpressionRepr`.

    Reconstruction is exact, with these exceptions:

    - floating point values are rounded if a precision is given
    - elapsed times are truncated to whole milliseconds
    - points in time are rounded to whole milliseconds
    - data frames lose their ``attrs``, axis names, and extension dtypes

    :param value: the value to render
    :param precision: if set, round all floating point values to this many
        significant digits
    :param single_line: if ``True``, render the text as a single line; otherwise
        break lines exceeding the maximum width
    :param max_width: the maximum line width for multi-line text
    :return: the text of the literal expression
    :raise TypeError: the value, or one of its elements, cannot be rendered
    """
    validate_type(single_line, expected_type=bool, name="arg single_line")

    expression = to_literal_expression(value, RenderOptions(precision=precision))

    return PythonExpressionFormatter(
        max_width=max_width, single_line=single_line
    ).to_text(expression)


def to_literal_expression(
    value: Any, options: Optional[RenderOptions] = None
) -> Expression:
    """
    Render a value as a literal expression.

    The first matching rule determines how the value is rendered:

    1. arrays with more than two dimensions are stacked from their slices along the
       last axis, using :func:`.concat`
    2. lists, tuples, object arrays, and dictionaries with non-string keys are
       rendered as collections, with each element rendered recursively
    3. dictionaries with string keys, and NumPy structured arrays, are rendered as
       records using :func:`.record_from`
    4. points in time are rendered as serial day numbers using :func:`.instant_from`
    5. elapsed times are rendered as digital text using :func:`.duration_from`
    6. data frames are rendered column by column using :func:`.table_from`
    7. instances of :class:`.HasLiteral` and :class:`.HasExpressionRepr` render
       themselves
    8. numbers are rendered by :func:`.render_base`, including their NumPy type
       unless it is ``float64``
    9. all other values are rendered by :func:`.render_base`

    :param value: the value to render
    :param options: the rendering options (default: no options)
    :return: the literal expression
    :raise TypeError: the value, or one of its elements, cannot be rendered
    """
    if options is None:
        options = RenderOptions()
    else:
        validate_type(options, expected_type=RenderOptions, name="arg options")

    if isinstance(value, (np.ndarray, Duration)) and value.ndim > 2:
        return _render_nd(value, options)
    elif _is_collection(value):
        return _render_collection(value, options)
    elif _is_record(value):
        return _render_record(value, options)
    elif _is_instant(value):
        return _render_instant(value)
    elif isinstance(value, Duration) or _is_timedelta_like(value):
        return _render_duration(value)
    elif isinstance(value, pd.DataFrame):
        return _render_table(value, options)
    elif isinstance(value, HasLiteral):
        return value.to_literal_expression(options)
    elif isinstance(value, HasExpressionRepr):
        return value.to_expression()
    elif _is_numeric(value):
        return render_base(
            value,
            options,
            type_tag=(
                isinstance(value, (np.generic, np.ndarray))
                and value.dtype != np.float64
            ),
        )
    else:
        return render_base(value, options)


__tracker.validate()


#
# Type predicates
#


def _is_collection(value: Any) -> bool:
    return (
        isinstance(value, (list, tuple))
        or (isinstance(value, np.ndarray) and value.dtype == object)
        or (isinstance(value, Mapping) and not _has_str_keys(value))
    )


def _is_record(value: Any) -> bool:
    return (isinstance(value, Mapping) and _has_str_keys(value)) or (
        isinstance(value, np.ndarray) and value.dtype.names is not None
    )


def _has_str_keys(mapping: Mapping) -> bool:
    return all(isinstance(key, str) for key in mapping)


def _is_instant(value: Any) -> bool:
    return (
        value is pd.NaT
        or isinstance(value, (datetime.datetime, np.datetime64, pd.DatetimeIndex))
        or (isinstance(value, np.ndarray) and value.dtype.kind == "M")
    )


def _is_numeric(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    elif isinstance(value, (int, float, complex)):
        return True
    else:
        return (
            isinstance(value, (np.number, np.ndarray)) and value.dtype.kind in "iufc"
        )


#
# Renderers
#


def _render_nd(value: Any, options: RenderOptions) -> Expression:
    # render one slice per index of the last axis, each with one dimension less
    ndim = value.ndim
    n_slices = value.shape[-1]

    if n_slices == 0:
        if isinstance(value, Duration):
            return _render_duration(value)
        kwargs = {}
        if value.dtype != np.float64:
            kwargs["dtype"] = _dtype_expression(value.dtype)
        return Id.concat(ndim, shape=value.shape, **kwargs)

    return Id.concat(
        ndim,
        *(to_literal_expression(value[..., i], options) for i in range(n_slices)),
    )


def _render_collection(value: Any, options: RenderOptions) -> Expression:
    if isinstance(value, Mapping):
        return DictLiteral(
            *(
                (
                    to_literal_expression(key, options),
                    to_literal_expression(element, options),
                )
                for key, element in value.items()
            )
        )

    if isinstance(value, np.ndarray):
        elements = np.empty(value.shape, dtype=object)
        for index, element in np.ndenumerate(value):
            elements[index] = to_literal_expression(element, options)
    else:
        elements = np.empty(len(value), dtype=object)
        for i, element in enumerate(value):
            elements[i] = to_literal_expression(element, options)

    if isinstance(value, list):
        return assemble(elements)
    elif isinstance(value, tuple):
        return assemble(elements, BracketPair.ROUND)
    elif value.ndim == 0:
        return Id.cell(elements[()], shape=())
    elif value.ndim == 2 and (value.size > 0 or value.shape == (0, 0)):
        # cell() infers the shape of non-empty 2d arrays from the nested rows
        return Id.cell(assemble(elements))
    else:
        return Id.cell(assemble(elements), shape=value.shape)


def _render_record(value: Any, options: RenderOptions) -> Expression:
    if isinstance(value, Mapping):
        return Id.record_from(
            _render_collection(list(value.values()), options),
            _render_collection(list(value.keys()), options),
        )

    # structured array: one slot per field, holding the values of all records
    names = list(value.dtype.names)
    return Id.record_from(
        ListLiteral(*(_render_field(value[name], options) for name in names)),
        _render_collection(names, options),
        shape=value.shape,
    )


def _render_field(field: np.ndarray, options: RenderOptions) -> Expression:
    # string fields keep their width, so that longer values fit after reconstruction
    if field.dtype.kind in "US" and field.ndim <= 2:
        return render_base(field, options, type_tag=True)
    else:
        return to_literal_expression(field, options)


def _render_instant(value: Any) -> Expression:
    serial, tz = to_serial_days(value)

    # serial day numbers are never rounded, regardless of the requested precision
    serial_expression = to_literal_expression(serial)

    if tz is None:
        return Id.instant_from(serial_expression, origin="serial_day")
    else:
        return Id.instant_from(serial_expression, origin="serial_day", tz=tz)


def _render_duration(value: Any) -> Expression:
    if isinstance(value, Duration):
        values = value.values
        display_format = value.format
    else:
        values = _to_timedelta_array(value)
        display_format = Duration.DEFAULT_FORMAT

    text = format_duration(values, _DURATION_LITERAL_FORMAT)
    text_expression = render_base(text[()] if text.ndim == 0 else text)

    if display_format == Duration.DEFAULT_FORMAT:
        return Id.duration_from(text_expression)
    else:
        return Id.duration_from(text_expression, format=display_format)


def _render_table(frame: pd.DataFrame, options: RenderOptions) -> Expression:
    if frame.attrs:
        log.debug(
            "dropping attributes of data frame: "
            f"{', '.join(map(str, frame.attrs.keys()))}"
        )

    n_rows, n_columns = frame.shape
    columns = [
        to_literal_expression(frame.iloc[:, i].to_numpy(), options)
        for i in range(n_columns)
    ]

    kwargs = dict(column_names=_render_collection(frame.columns.tolist(), options))

    index = frame.index
    if not (_is_range(index, n_rows) and (n_columns > 0 or n_rows == 0)):
        # a data frame without columns takes its number of rows from the row names
        kwargs["row_names"] = _render_collection(index.tolist(), options)

    return Id.table_from(*columns, **kwargs)


def _is_range(index: pd.Index, n: int) -> bool:
    return (
        isinstance(index, pd.RangeIndex)
        and index.start == 0
        and index.step == 1
        and index.stop == n
        and index.name is None
    )
