"""
Base scalar and matrix renderer, assembler, and rendering options of
:mod:`exprtools.literal`.
"""
import logging
import math
from abc import ABCMeta, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Type

import numpy as np

from ..api import AllTracker, validate_type
from ..expression import Expression
from ..expression.atomic import Id, Lit
from ..expression.base import BracketPair, CollectionLiteral
from ..expression.composite import ListLiteral, TupleLiteral

log = logging.getLogger(__name__)

__all__ = [
    "RenderOptions",
    "HasLiteral",
    "assemble",
    "render_base",
]


#
# Constants
#

# dtype kinds the base renderer can represent as literals
_KINDS_NUMERIC = "iufc"
_KINDS_TEXT = "US"
_KINDS_LITERAL = "biufcUS"

_LITERAL_TYPES: Dict[BracketPair, Type[CollectionLiteral]] = {
    BracketPair.SQUARE: ListLiteral,
    BracketPair.ROUND: TupleLiteral,
}


#
# Ensure all symbols introduced below are included in __all__
#

__tracker = AllTracker(globals())


#
# Classes
#


@dataclass(frozen=True)
class RenderOptions:
    """
    Options for rendering a value as a literal expression.

    The options are passed on unchanged through every recursive rendering call;
    only the base renderer interprets them.
    """

    #: if set, round all floating point leaves to this many significant digits
    precision: Optional[int] = None

    def __post_init__(self) -> None:
        precision = self.precision
        validate_type(precision, expected_type=int, optional=True, name="arg precision")
        if precision is not None and (isinstance(precision, bool) or precision < 1):
            raise ValueError(f"arg precision={precision!r} must be a positive integer")


class HasLiteral(metaclass=ABCMeta):
    """
    Mix-in class for objects that render themselves as literal expressions.

    :func:`.to_literal` delegates to :meth:`.to_literal_expression` for instances of
    this class, passing on the rendering options unchanged.
    """

    @abstractmethod
    def to_literal_expression(self, options: RenderOptions) -> Expression:
        """
        Render this object as an expression that reconstructs it.

        :param options: the rendering options of the current call
        :return: the expression representing this object
        """
        pass

    def __repr__(self) -> str:
        from ._literal import to_literal

        return to_literal(self)


#
# Functions
#


def assemble(
    expressions: np.ndarray, brackets: BracketPair = BracketPair.SQUARE
) -> CollectionLiteral:
    """
    Arrange a 1d or 2d array of rendered expressions as a bracketed literal.

    A 1d array becomes one literal, e.g., ``[a, b, c]``; a 2d array becomes a literal
    of row literals, e.g., ``[[a, b], [c, d]]``.
    Arrays with no elements become the empty literal, e.g., ``[]``.

    :param expressions: an object array of expressions, with 1 or 2 dimensions
    :param brackets: the brackets enclosing the literal(s)
    :return: the assembled literal
    """
    if expressions.ndim not in (1, 2):
        raise ValueError(
            f"arg expressions must have 1 or 2 dimensions, not {expressions.ndim}"
        )

    literal_type = _LITERAL_TYPES.get(brackets)

    def _literal(elements: Sequence[Expression]) -> CollectionLiteral:
        if literal_type:
            return literal_type(*elements)
        else:
            return CollectionLiteral(brackets, elements)

    if expressions.size == 0:
        return _literal(())
    elif expressions.ndim == 1:
        return _literal(expressions.tolist())
    else:
        return _literal([_literal(row) for row in expressions.tolist()])


def render_base(
    value: Any, options: Optional[RenderOptions] = None, *, type_tag: bool = False
) -> Expression:
    """
    Render a scalar, or an array with up to two dimensions, as a literal expression.

    Supports ``None``, :class:`bool`, :class:`int`, :class:`float`, :class:`complex`,
    :class:`str`, :class:`bytes`, and NumPy scalars and arrays of boolean, numeric,
    string and bytes type.

    Arrays are rendered as ``np.array(…)`` calls, empty arrays as ``np.zeros(…)``
    calls.
    Floats that are not finite are rendered as ``np.nan``, ``np.inf``, or ``-np.inf``.

    :param value: the value to render
    :param options: the rendering options; floating point values are rounded to
        ``options.precision`` significant digits if set
    :param type_tag: if ``True``, include the NumPy dtype of numeric values in the
        expression, e.g., ``np.int32(5)`` or ``np.array([1, 2], dtype=np.int32)``;
        string and bytes arrays are tagged with their width, e.g.,
        ``np.array(['a'], dtype='<U5')``
    :return: the literal expression
    :raise TypeError: the value is not supported by the base renderer
    """
    precision = options.precision if options else None

    # numpy scalars may subclass Python scalars, so they are handled first
    if isinstance(value, np.generic) and value.dtype.kind in _KINDS_LITERAL:
        element = _render_element(_to_python(value), precision)
        if type_tag and value.dtype.kind in _KINDS_NUMERIC:
            return _dtype_expression(value.dtype)(element)
        else:
            return element
    elif value is None or isinstance(value, (bool, str, bytes)):
        return Lit(value)
    elif isinstance(value, (int, float, complex)):
        return _render_element(value, precision)
    elif isinstance(value, np.ndarray) and value.dtype.kind in _KINDS_LITERAL:
        return _render_array(value, precision, type_tag)
    else:
        raise TypeError(
            f"cannot render an instance of {type(value).__name__} as a literal"
        )


__tracker.validate()


#
# Private auxiliary functions
#


def _render_array(array: np.ndarray, precision: Optional[int], type_tag: bool) -> Any:
    dtype = array.dtype
    kwargs = {}

    if array.size == 0:
        if dtype != np.float64:
            kwargs["dtype"] = _dtype_expression(dtype)
        return Id.np.zeros(array.shape, **kwargs)

    if array.ndim > 2:
        raise ValueError(
            f"arrays with more than 2 dimensions are not supported, got {array.ndim}"
        )

    if type_tag and dtype.kind in _KINDS_NUMERIC + _KINDS_TEXT:
        kwargs["dtype"] = _dtype_expression(dtype)

    def _nested(sub_array: Any) -> Expression:
        # iterating over an array yields numpy scalars, not 0d arrays
        if isinstance(sub_array, np.generic):
            return _render_element(_to_python(sub_array), precision)
        elif sub_array.ndim == 0:
            return _nested(sub_array[()])
        else:
            return ListLiteral(*map(_nested, sub_array))

    return Id.np.array(_nested(array), **kwargs)


def _dtype_expression(dtype: np.dtype) -> Expression:
    # numeric types by name, e.g., np.int32; all others by their dtype string
    if dtype.kind in _KINDS_NUMERIC:
        return getattr(Id.np, dtype.name)
    else:
        return Lit(dtype.str)


def _to_python(value: np.generic) -> Any:
    kind = value.dtype.kind
    if kind == "f":
        return float(value)
    elif kind == "c":
        return complex(value)
    elif kind in "iu":
        return int(value)
    elif kind == "b":
        return bool(value)
    elif kind == "U":
        return str(value)
    else:
        return bytes(value)


def _render_element(value: Any, precision: Optional[int]) -> Expression:
    if isinstance(value, bool) or not isinstance(value, (float, complex)):
        return Lit(value)
    elif isinstance(value, float):
        return _render_float(value, precision)
    elif math.isfinite(value.real) and math.isfinite(value.imag):
        if precision:
            value = complex(
                _round_significant(value.real, precision),
                _round_significant(value.imag, precision),
            )
        return Lit(value)
    else:
        return Id.complex(
            _render_float(value.real, precision), _render_float(value.imag, precision)
        )


def _render_float(value: float, precision: Optional[int]) -> Expression:
    if math.isnan(value):
        return Id.np.nan
    elif math.isinf(value):
        return Id.np.inf if value > 0 else -Id.np.inf
    elif precision:
        return Lit(_round_significant(value, precision))
    else:
        return Lit(value)


def _round_significant(value: float, precision: int) -> float:
    return float(f"{value:.{precision}g}")
