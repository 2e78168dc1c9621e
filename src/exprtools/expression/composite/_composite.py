"""
Implementation of :mod:`exprtools.expression.composite`.
"""
import logging
from typing import Any, Tuple, Union, cast

from ...api import AllTracker, inheritdoc
from .._expression import Expression
from ..atomic import Id
from ..base import BracketPair, CollectionLiteral, InfixExpression, PrefixExpression
from ..operator import BinaryOperator, UnaryOperator

log = logging.getLogger(__name__)


#
# Exported names
#

__all__ = [
    "ListLiteral",
    "TupleLiteral",
    "DictLiteral",
    "DictEntry",
    "KeywordArgument",
    "UnaryOperation",
    "Call",
    "Attr",
]


#
# Ensure all symbols introduced below are included in __all__
#

__tracker = AllTracker(globals())


#
# Collection literals
#


class ListLiteral(CollectionLiteral):
    """
    A list literal, e.g., ``[1, 2]``.
    """

    def __init__(self, *elements: Any) -> None:
        """
        :param elements: the elements of the list
        """
        super().__init__(BracketPair.SQUARE, elements)


class TupleLiteral(CollectionLiteral):
    """
    A tuple literal, e.g., ``(1, 2)``; a tuple with a single element is written with
    a trailing comma, e.g., ``(1,)``.
    """

    def __init__(self, *elements: Any) -> None:
        """
        :param elements: the elements of the tuple
        """
        super().__init__(BracketPair.ROUND, elements)

    @property
    def trailing_comma_(self) -> bool:
        """
        ``True`` if this tuple has exactly one element.
        """
        return len(self.elements_) == 1


class DictLiteral(CollectionLiteral):
    """
    A dictionary literal, e.g., ``{1: 'a', 'b': 2}``.
    """

    def __init__(self, *entries: Tuple[Any, Any], **kwargs: Any) -> None:
        """
        :param entries: the entries of the dictionary, as ``(key, value)`` tuples
        :param kwargs: further entries, with string keys
        """
        super().__init__(
            BracketPair.CURLY,
            [
                *(DictEntry(key, value) for key, value in entries),
                *(DictEntry(key, value) for key, value in kwargs.items()),
            ],
        )


#
# Prefix expressions
#


@inheritdoc(match="[see superclass]")
class DictEntry(PrefixExpression):
    """
    An entry of a dictionary literal: a key and a value, separated by a colon.
    """

    def __init__(self, key: Any, value: Any) -> None:
        """
        :param key: the key of the entry
        :param value: the value of the entry
        """
        super().__init__(key, value)

    @property
    def separator_(self) -> str:
        """
        A colon followed by a space.
        """
        return f"{BinaryOperator.COLON.symbol} "

    @property
    def precedence_(self) -> int:
        """[see superclass]"""
        return BinaryOperator.COLON.precedence


@inheritdoc(match="[see superclass]")
class KeywordArgument(PrefixExpression):
    """
    A keyword argument of a call, e.g., ``dtype=np.int32``.
    """

    def __init__(self, name: str, value: Any) -> None:
        """
        :param name: the name of the keyword
        :param value: the value of the argument
        """
        super().__init__(Id(name), value)
        self._name = name

    @property
    def name_(self) -> str:
        """
        The name of the keyword.
        """
        return self._name

    @property
    def separator_(self) -> str:
        """
        An equals sign, without surrounding spaces.
        """
        return BinaryOperator.ASSIGN.symbol

    @property
    def precedence_(self) -> int:
        """[see superclass]"""
        return BinaryOperator.ASSIGN.precedence


@inheritdoc(match="[see superclass]")
class UnaryOperation(PrefixExpression):
    """
    A unary operation, e.g., ``-np.inf``; the prefix is the operator symbol.
    """

    def __init__(self, operator: UnaryOperator, operand: Any) -> None:
        """
        :param operator: the unary operator
        :param operand: the operand
        """
        if not isinstance(operator, UnaryOperator):
            raise TypeError(f"arg operator={operator!r} must be a UnaryOperator")
        super().__init__(Id(operator.symbol), operand)
        self._operator = operator

    @property
    def operator_(self) -> UnaryOperator:
        """
        The operator of this operation.
        """
        return self._operator

    @property
    def separator_(self) -> str:
        """
        An empty string, as the operand directly follows the operator.
        """
        return ""

    @property
    def precedence_(self) -> int:
        """[see superclass]"""
        return self._operator.precedence


@inheritdoc(match="[see superclass]")
class Call(PrefixExpression):
    """
    A call, e.g., ``np.zeros((2, 3), dtype=np.int8)``.
    """

    def __init__(self, callee: Any, *args: Any, **kwargs: Any) -> None:
        """
        :param callee: the object being called
        :param args: the positional arguments
        :param kwargs: the keyword arguments
        """
        super().__init__(
            callee,
            CollectionLiteral(
                BracketPair.ROUND,
                [
                    *args,
                    *(KeywordArgument(name, value) for name, value in kwargs.items()),
                ],
            ),
        )

    @property
    def callee_(self) -> Expression:
        """
        The object being called; the prefix of this expression.
        """
        return self.prefix_

    @property
    def body_(self) -> CollectionLiteral:
        """
        The arguments of this call, enclosed in round brackets.
        """
        return cast(CollectionLiteral, super().body_)

    @property
    def separator_(self) -> str:
        """
        An empty string, as the arguments directly follow the callee.
        """
        return ""

    @property
    def precedence_(self) -> int:
        """[see superclass]"""
        return BinaryOperator.DOT.precedence


#
# Infix expressions
#


@inheritdoc(match="[see superclass]")
class Attr(InfixExpression):
    """
    An attribute reference, e.g., ``np.random.default_rng``.

    Nested attribute references are flattened, so that ``a.b.c`` has three
    subexpressions.
    """

    def __init__(self, obj: Any, attribute: Union[Id, str]) -> None:
        """
        :param obj: the object whose attribute is referenced
        :param attribute: the name of the attribute
        """
        if isinstance(attribute, str):
            attribute = Id(attribute)
        elif not isinstance(attribute, Id):
            raise TypeError("arg attribute must be a string or an Identifier")

        if not isinstance(obj, Expression):
            obj = Id(obj)
        if isinstance(obj, Attr):
            self._path: Tuple[Expression, ...] = (*obj.subexpressions_, attribute)
        else:
            self._path = (obj, attribute)

    @property
    def infix_(self) -> BinaryOperator:
        """[see superclass]"""
        return BinaryOperator.DOT

    @property
    def subexpressions_(self) -> Tuple[Expression, ...]:
        """[see superclass]"""
        return self._path


__tracker.validate()
