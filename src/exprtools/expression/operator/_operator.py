"""
Implementation of :mod:`exprtools.expression.operator`.
"""
import logging
from enum import Enum

from ...api import AllTracker

log = logging.getLogger(__name__)

__all__ = [
    "Operator",
    "BinaryOperator",
    "UnaryOperator",
]


#
# Ensure all symbols introduced below are included in __all__
#

__tracker = AllTracker(globals())


#
# Class definitions
#


class Operator(Enum):
    """
    Base class of operators, defined by their symbol and their precedence.

    Operators with a higher precedence bind more tightly than operators with a lower
    precedence.
    """

    #: the symbol of this operator
    symbol: str

    #: the precedence of this operator
    precedence: int

    def __init__(self, symbol: str, precedence: int) -> None:
        self.symbol = symbol
        self.precedence = precedence

    @property
    def is_unary(self) -> bool:
        """
        ``True`` if this operator takes a single operand; ``False`` otherwise.
        """
        return isinstance(self, UnaryOperator)

    def __str__(self) -> str:
        return self.symbol


class BinaryOperator(Operator):
    """
    Operators joining two or more operands.
    """

    #: keyword assignment in calls, as in ``dtype=np.int32``
    ASSIGN = ("=", 1)

    #: separates keys and values of dictionary entries
    COLON = (":", 2)

    #: attribute access, as in ``np.int32``
    DOT = (".", 4)


class UnaryOperator(Operator):
    """
    Prefix operators taking a single operand.
    """

    POS = ("+", 3)
    NEG = ("-", 3)


__tracker.validate()
