"""
Implementation of :mod:`exprtools.expression`.
"""
import logging
from abc import ABCMeta, abstractmethod
from typing import Any, Hashable, Tuple

from ..api import AllTracker
from .operator import UnaryOperator

log = logging.getLogger(__name__)


#
# Exported names
#

__all__ = [
    "ExpressionFormatter",
    "HasExpressionRepr",
    "Expression",
    "make_expression",
]


#
# Ensure all symbols introduced below are included in __all__
#

__tracker = AllTracker(globals())


#
# Class definitions
#


class ExpressionFormatter(metaclass=ABCMeta):
    """
    Converts expressions to text.
    """

    @abstractmethod
    def to_text(self, expression: "Expression") -> str:
        """
        Format an expression as text.

        :param expression: the expression to format
        :return: the resulting text
        """


class HasExpressionRepr(metaclass=ABCMeta):
    """
    Mix-in class for objects that can be represented as an expression.

    :func:`repr` formats the expression on a single line; :class:`str` breaks the
    expression into multiple lines where it exceeds the default line width.
    """

    @abstractmethod
    def to_expression(self) -> "Expression":
        """
        Get an expression representing this object.

        :return: the expression
        """

    def __repr__(self) -> str:
        return repr(self.to_expression())

    def __str__(self) -> str:
        return str(self.to_expression())


class Expression(HasExpressionRepr, metaclass=ABCMeta):
    """
    A Python expression, represented as a tree of subexpressions.

    Expressions are built by attribute access and calls, e.g.,
    ``Id.np.zeros((2, 3))`` is the expression ``np.zeros((2, 3))``.
    Hence the properties of expression objects end with an underscore, to keep them
    apart from attribute access: ``Id.x.shape`` is an expression, while
    ``Id.x.precedence_`` is the precedence of expression ``x``.

    Expressions are immutable.
    Two expressions are equal if they have the same type and the same structure.
    """

    @property
    @abstractmethod
    def precedence_(self) -> int:
        """
        The precedence of this expression.

        A subexpression is enclosed in parentheses if it has a lower precedence than
        the expression containing it.
        """

    @property
    @abstractmethod
    def subexpressions_(self) -> Tuple["Expression", ...]:
        """
        The direct subexpressions of this expression.
        """

    @property
    def key_(self) -> Hashable:
        """
        The components of this expression that determine equality with other
        expressions of the same type.
        """
        return self.subexpressions_

    def to_expression(self) -> "Expression":
        """
        Get this expression.

        :return: this expression, unchanged
        """
        return self

    def __neg__(self) -> "Expression":
        from .composite import UnaryOperation

        return UnaryOperation(UnaryOperator.NEG, self)

    def __pos__(self) -> "Expression":
        from .composite import UnaryOperation

        return UnaryOperation(UnaryOperator.POS, self)

    def __call__(self, *args: Any, **kwargs: Any) -> "Expression":
        from .composite import Call

        return Call(self, *args, **kwargs)

    def __getattr__(self, name: str) -> "Expression":
        if name.startswith("_") or name.endswith("_"):
            raise AttributeError(name)

        from .composite import Attr

        return Attr(self, name)

    def __setattr__(self, name: str, value: Any) -> None:
        if not (name.startswith("_") or name.endswith("_")):
            raise TypeError(f"cannot set public field of Expression: {name}")
        super().__setattr__(name, value)

    def __iter__(self) -> None:
        raise TypeError(f"expression is not iterable: {self!r}")

    def __bool__(self) -> bool:
        raise TypeError(f"cannot convert expression to bool: {self!r}")

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Expression):
            return NotImplemented
        return type(self) is type(other) and self.key_ == other.key_

    def __hash__(self) -> int:
        return hash((type(self), self.key_))

    def __repr__(self) -> str:
        from .formatter import PythonExpressionFormatter

        return PythonExpressionFormatter(single_line=True).to_text(self)

    def __str__(self) -> str:
        from .formatter import PythonExpressionFormatter

        return PythonExpressionFormatter(single_line=False).to_text(self)


#
# Functions
#


def make_expression(value: Any) -> Expression:
    """
    Convert a value to an expression.

    - objects implementing :class:`.HasExpressionRepr` provide their own expression
    - lists, tuples, and dictionaries become the corresponding collection literals,
      with their elements converted recursively
    - functions, classes, and other objects with a ``__name__`` become an
      identifier of that name
    - all other values become a literal, using their :func:`repr` as text

    Arrays, floating point special values, and calendar values receive no special
    treatment; use :func:`.to_literal_expression` for these.

    :param value: the value to convert
    :return: the expression
    """
    from .atomic import Id, Lit
    from .composite import DictLiteral, ListLiteral, TupleLiteral

    if isinstance(value, HasExpressionRepr):
        return value.to_expression()
    elif isinstance(value, list):
        return ListLiteral(*value)
    elif isinstance(value, tuple):
        return TupleLiteral(*value)
    elif isinstance(value, dict):
        return DictLiteral(*value.items())
    elif not isinstance(value, (str, bytes)) and getattr(value, "__name__", None):
        return Id(value)
    else:
        return Lit(value)


__tracker.validate()
