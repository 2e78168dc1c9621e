"""
Implementation of :mod:`exprtools.expression.base`.
"""
import logging
from abc import ABCMeta, abstractmethod
from enum import Enum
from typing import Any, Generic, Hashable, Iterable, Tuple, TypeVar

from ...api import AllTracker, inheritdoc
from .._expression import Expression, make_expression
from ..operator import BinaryOperator

log = logging.getLogger(__name__)


#
# Exported names
#

__all__ = [
    "AtomicExpression",
    "BracketPair",
    "CollectionLiteral",
    "PrefixExpression",
    "InfixExpression",
]


#
# Constants
#

# atomic expressions and bracketed collections never need parentheses
_PRECEDENCE_ATOMIC = BinaryOperator.DOT.precedence + 1


#
# Type variables
#

T = TypeVar("T")


#
# Ensure all symbols introduced below are included in __all__
#

__tracker = AllTracker(globals())


#
# Class definitions
#


@inheritdoc(match="[see superclass]")
class AtomicExpression(Expression, Generic[T], metaclass=ABCMeta):
    """
    An expression without subexpressions: an identifier or a literal.
    """

    @property
    @abstractmethod
    def text_(self) -> str:
        """
        The source text of this expression.
        """

    @property
    @abstractmethod
    def value_(self) -> T:
        """
        The value represented by this expression.
        """

    @property
    def subexpressions_(self) -> Tuple[Expression, ...]:
        """
        An empty tuple, as atomic expressions have no subexpressions.
        """
        return ()

    @property
    def precedence_(self) -> int:
        """[see superclass]"""
        return _PRECEDENCE_ATOMIC

    @property
    def key_(self) -> Hashable:
        """
        The source text of this expression; the values ``1``, ``1.0``, and ``True``
        are equal in Python, but their literals are not.
        """
        return self.text_


class BracketPair(Enum):
    """
    The brackets enclosing a collection literal, or the arguments of a call.
    """

    #: the opening bracket
    opening: str

    #: the closing bracket
    closing: str

    def __init__(self, opening: str, closing: str) -> None:
        self.opening = opening
        self.closing = closing

    #: round brackets, for tuples and calls
    ROUND = ("(", ")")

    #: square brackets, for lists
    SQUARE = ("[", "]")

    #: curly brackets, for dictionaries and sets
    CURLY = ("{", "}")


@inheritdoc(match="[see superclass]")
class CollectionLiteral(Expression):
    """
    Elements enclosed in brackets and separated by commas, e.g., a list literal, or
    the arguments of a call.
    """

    def __init__(self, brackets: BracketPair, elements: Iterable[Any]) -> None:
        """
        :param brackets: the enclosing brackets
        :param elements: the elements, each converted using :func:`.make_expression`
        """
        self._brackets = brackets
        self._elements: Tuple[Expression, ...] = tuple(
            make_expression(element) for element in elements
        )

    @property
    def brackets_(self) -> BracketPair:
        """
        The brackets enclosing the elements.
        """
        return self._brackets

    @property
    def elements_(self) -> Tuple[Expression, ...]:
        """
        The elements of this collection.
        """
        return self._elements

    @property
    def trailing_comma_(self) -> bool:
        """
        ``True`` if the last element is followed by a comma.
        """
        return False

    @property
    def subexpressions_(self) -> Tuple[Expression, ...]:
        """[see superclass]"""
        return self._elements

    @property
    def precedence_(self) -> int:
        """[see superclass]"""
        return _PRECEDENCE_ATOMIC

    @property
    def key_(self) -> Hashable:
        """[see superclass]"""
        return self._brackets, self._elements


@inheritdoc(match="[see superclass]")
class PrefixExpression(Expression, metaclass=ABCMeta):
    """
    A prefix followed by a body, joined by a separator, e.g., a call ``f(x)``, a
    keyword argument ``x=1``, or a unary operation ``-x``.
    """

    def __init__(self, prefix: Any, body: Any) -> None:
        """
        :param prefix: the prefix, converted using :func:`.make_expression`
        :param body: the body, converted using :func:`.make_expression`
        """
        self._prefix = make_expression(prefix)
        self._body = make_expression(body)

    @property
    def prefix_(self) -> Expression:
        """
        The prefix of this expression.
        """
        return self._prefix

    @property
    def body_(self) -> Expression:
        """
        The body of this expression.
        """
        return self._body

    @property
    @abstractmethod
    def separator_(self) -> str:
        """
        The text between the prefix and the body.
        """

    @property
    def subexpressions_(self) -> Tuple[Expression, ...]:
        """
        The prefix and the body of this expression.
        """
        return self._prefix, self._body

    @property
    def key_(self) -> Hashable:
        """[see superclass]"""
        return self.separator_, self._prefix, self._body


@inheritdoc(match="[see superclass]")
class InfixExpression(Expression, metaclass=ABCMeta):
    """
    Two or more subexpressions joined by a binary operator, e.g., ``np.random.rand``.
    """

    @property
    @abstractmethod
    def infix_(self) -> BinaryOperator:
        """
        The operator joining the subexpressions.
        """

    @property
    def precedence_(self) -> int:
        """[see superclass]"""
        return self.infix_.precedence

    @property
    def key_(self) -> Hashable:
        """[see superclass]"""
        return self.infix_, self.subexpressions_


__tracker.validate()
