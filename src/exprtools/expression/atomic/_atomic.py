"""
Implementation of :mod:`exprtools.expression.atomic`.
"""

import logging
from abc import ABCMeta
from typing import Any, TypeVar
from weakref import WeakValueDictionary

from ...api import AllTracker, inheritdoc
from ..base import AtomicExpression

log = logging.getLogger(__name__)


#
# Exported names
#

__all__ = [
    "Lit",
    "Id",
]


#
# Type variables
#

T_Literal = TypeVar("T_Literal", bool, int, float, complex, str, bytes)


#
# Ensure all symbols introduced below are included in __all__
#

__tracker = AllTracker(globals())


#
# Class definitions
#


@inheritdoc(match="[see superclass]")
class Lit(AtomicExpression[T_Literal]):
    """
    A literal value, e.g., a number or a string.

    The text of a literal is the :func:`repr` of its value; only create literals for
    values whose :func:`repr` is valid Python source.
    """

    def __init__(self, value: T_Literal) -> None:
        """
        :param value: the value of the literal
        """
        self._value = value

    @property
    def value_(self) -> T_Literal:
        """[see superclass]"""
        return self._value

    @property
    def text_(self) -> str:
        """[see superclass]"""
        return repr(self._value)


class _IdentifierFactory(ABCMeta):
    # creates identifiers on attribute access to the Id class, e.g. Id.np

    _identifiers: "WeakValueDictionary[str, Id]" = WeakValueDictionary()

    def __getattr__(cls, name: str) -> "Id":
        if name.startswith("_") or name.endswith("_"):
            raise AttributeError(name)

        identifiers = _IdentifierFactory._identifiers
        identifier = identifiers.get(name)
        if identifier is None:
            identifier = identifiers[name] = cls(name)
        return identifier


@inheritdoc(match="[see superclass]")
class Id(AtomicExpression[str], metaclass=_IdentifierFactory):
    """
    An identifier, e.g., the name of a variable, function, or module.

    Create identifiers by attribute access, e.g., ``Id.np``, or by instantiation,
    e.g., ``Id("np")``.
    Attribute access returns the same instance for the same name while that instance
    is in use; it is limited to names without leading or trailing underscores.
    """

    def __init__(self, name: Any) -> None:
        """
        :param name: the name of the identifier, or an object whose ``__name__`` to
            use as the name, e.g., a function or a class
        """
        if not isinstance(name, str):
            name = getattr(name, "__name__", None)
            if not isinstance(name, str):
                raise TypeError(
                    "arg name must be a string, or must have attribute __name__"
                )
        self._name = name

    @property
    def value_(self) -> str:
        """[see superclass]"""
        return self._name

    @property
    def text_(self) -> str:
        """[see superclass]"""
        return self._name


__tracker.validate()
