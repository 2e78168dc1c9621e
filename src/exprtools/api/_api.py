"""
Core implementation of :mod:`exprtools.api`.
"""

import logging
from typing import Any, Iterable, Optional, Tuple, Type, TypeVar, Union

import numpy as np
import pandas as pd

from ._alltracker import AllTracker

log = logging.getLogger(__name__)

__all__ = [
    "is_list_like",
    "to_tuple",
    "validate_element_types",
    "validate_type",
]


#
# Type variables
#

T = TypeVar("T")
T_Iterable = TypeVar("T_Iterable", bound=Iterable[Any])

TypeSpec = Union[type, Tuple[type, ...]]


#
# Ensure all symbols introduced below are included in __all__
#

__tracker = AllTracker(globals())


#
# Functions
#


def is_list_like(obj: Any) -> bool:
    """
    Check if an object can be treated as a sequence of elements.

    An object is list-like if it has a length and supports indexing, as do lists,
    tuples, NumPy arrays, and pandas series or indices.

    Never list-like are strings and byte strings, NumPy arrays with zero dimensions,
    and pandas data frames (their length is the number of rows, but iterating them
    yields the column labels).

    :param obj: the object to check
    :return: ``True`` if the object is list-like; ``False`` otherwise
    """
    if isinstance(obj, (str, bytes, pd.DataFrame)):
        return False
    elif isinstance(obj, np.ndarray):
        return obj.ndim > 0
    else:
        return hasattr(obj, "__len__") and hasattr(obj, "__getitem__")


def to_tuple(
    values: Union[Iterable[T], T, None],
    *,
    element_type: Optional[Union[Type[T], Tuple[Type[T], ...]]] = None,
    optional: bool = False,
    arg_name: Optional[str] = None,
) -> Tuple[T, ...]:
    """
    Convert one or more values to a tuple.

    Tuples are returned as they are, other iterables are converted to a tuple of their
    elements, and any other value (including strings and byte strings) is wrapped in a
    tuple of length 1.

    :param values: the value or values to convert
    :param element_type: if given, the type (or a tuple of alternative types) that
        all elements must have
    :param optional: if ``True``, convert ``None`` to an empty tuple instead of
        ``(None,)`` (default: ``False``)
    :param arg_name: the name of the argument passing the values; used in error
        messages
    :return: the values as a tuple
    :raise TypeError: an element does not have the expected type
    """
    elements: Tuple[T, ...]

    if values is None and optional:
        return ()
    elif isinstance(values, tuple):
        elements = values
    elif isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        elements = (values,)
    else:
        elements = tuple(values)

    if element_type is not None:
        validate_element_types(
            elements,
            expected_type=element_type,
            name=f"arg {arg_name}" if arg_name else None,
        )

    return elements


def validate_type(
    value: T,
    *,
    expected_type: Union[Type[T], Tuple[Type[T], ...]],
    optional: bool = False,
    name: Optional[str] = None,
) -> T:
    """
    Check that a value has the expected type.

    :param value: the value to check
    :param expected_type: the expected type, or a tuple of alternative types
    :param optional: if ``True``, also accept ``None`` (default: ``False``)
    :param name: the name of the value in error messages, e.g. ``"arg x"``
    :return: the value, unchanged
    :raise TypeError: the value does not have the expected type
    """
    if expected_type is object or (optional and value is None):
        return value

    if not isinstance(value, expected_type):
        raise _type_mismatch(
            name,
            expected_type=_including_none(expected_type, optional),
            actual_type=type(value),
            single=True,
        )

    return value


def validate_element_types(
    iterable: T_Iterable,
    *,
    expected_type: TypeSpec,
    optional: bool = False,
    name: Optional[str] = None,
) -> T_Iterable:
    """
    Check that all elements of an iterable have the expected type.

    :param iterable: the iterable to check; must not be a string or byte string
    :param expected_type: the expected type, or a tuple of alternative types
    :param optional: if ``True``, also accept ``None`` elements (default: ``False``)
    :param name: the name of the iterable in error messages, e.g. ``"arg x"``
    :return: the iterable, unchanged
    :raise TypeError: the iterable is a string, or one of its elements does not have
        the expected type
    """
    if isinstance(iterable, (str, bytes)):
        raise TypeError(
            f"{name} must not be a string or bytes instance"
            if name
            else "expected an iterable other than a string or bytes instance"
        )

    if expected_type is object:
        return iterable

    accepted_type = _including_none(expected_type, optional)
    for element in iterable:
        if not isinstance(element, accepted_type):
            raise _type_mismatch(
                name,
                expected_type=accepted_type,
                actual_type=type(element),
                single=False,
            )

    return iterable


__tracker.validate()


#
# Private auxiliary functions
#


def _including_none(expected_type: TypeSpec, optional: bool) -> TypeSpec:
    if not optional:
        return expected_type
    elif isinstance(expected_type, tuple):
        return (*expected_type, type(None))
    else:
        return expected_type, type(None)


def _type_mismatch(
    name: Optional[str], *, expected_type: TypeSpec, actual_type: type, single: bool
) -> TypeError:
    if isinstance(expected_type, tuple):
        type_names = ", ".join(t.__name__ for t in expected_type)
        expected = f"one of {{{type_names}}}"
    else:
        expected = expected_type.__name__

    return TypeError(
        f"{name + ' requires' if name else 'expected'} "
        f"{'an instance' if single else 'instances'} of {expected} "
        f"but got: {actual_type.__name__}"
    )
