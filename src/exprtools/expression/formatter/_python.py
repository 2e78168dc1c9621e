"""
Formatting of expressions as Python source text.
"""
from __future__ import annotations

import logging
from abc import ABCMeta, abstractmethod
from typing import List, NamedTuple, Sequence

from ...api import AllTracker, inheritdoc, validate_type
from .._expression import Expression, ExpressionFormatter
from ..base import (
    AtomicExpression,
    BracketPair,
    CollectionLiteral,
    InfixExpression,
    PrefixExpression,
)

log = logging.getLogger(__name__)

__all__ = [
    "FormattingConfig",
    "PythonExpressionFormatter",
]


#
# Ensure all symbols introduced below are included in __all__
#

__tracker = AllTracker(globals())


#
# Class definitions
#


class FormattingConfig(NamedTuple):
    """
    The layout parameters for formatting expressions as text.
    """

    #: the maximum width of a line, including indentation
    max_width: int = 80

    #: the number of spaces per indentation level
    indent_width: int = 4

    #: if ``True``, format expressions on a single line regardless of their width
    single_line: bool = False


@inheritdoc(match="[see superclass]")
class PythonExpressionFormatter(ExpressionFormatter):
    """
    Formats expressions as Python source text, with line breaks in the style of
    `black`.

    Expressions fitting the maximum width are kept on a single line.
    Otherwise, the elements of the outermost bracketed collection or argument list
    are placed on separate, indented lines, each followed by a comma except for the
    last one; the same applies recursively to every element that is still too wide.
    """

    def __init__(
        self, max_width: int = 80, indent_width: int = 4, single_line: bool = False
    ) -> None:
        """
        :param max_width: the maximum width of a line; ignored for single-line
            formatting (default: 80)
        :param indent_width: the number of spaces per indentation level
            (default: 4)
        :param single_line: if ``True``, never break lines (default: ``False``)
        """
        validate_type(max_width, expected_type=int, name="arg max_width")
        validate_type(indent_width, expected_type=int, name="arg indent_width")
        validate_type(single_line, expected_type=bool, name="arg single_line")

        self._config = FormattingConfig(
            max_width=max_width, indent_width=indent_width, single_line=single_line
        )

    @property
    def config(self) -> FormattingConfig:
        """
        The layout parameters of this formatter.
        """
        return self._config

    def to_text(self, expression: Expression) -> str:
        """[see superclass]"""
        block = _to_block(expression)
        config = self._config

        if config.single_line:
            return block.flat()

        return "\n".join(
            " " * (line.indent * config.indent_width) + line.text
            for line in block.lay_out(config, indent=0)
        )


__tracker.validate()


#
# Layout of expressions as blocks of text
#


class _Line(NamedTuple):
    indent: int
    text: str


class _Block(metaclass=ABCMeta):
    # the layout of an expression: either a single line, or multiple indented lines
    # if the single line exceeds the maximum width

    def __init__(self, width: int) -> None:
        # the width of this block when laid out on a single line
        self.width = width

    @abstractmethod
    def flat(self) -> str:
        pass

    def lay_out(
        self, config: FormattingConfig, indent: int, lead: int = 0, trail: int = 0
    ) -> List[_Line]:
        # lead and trail are the numbers of characters preceding the first line and
        # following the last line of this block
        if indent * config.indent_width + lead + self.width + trail <= config.max_width:
            return [_Line(indent, self.flat())]
        else:
            return self.break_lines(config, indent, lead, trail)

    def break_lines(
        self, config: FormattingConfig, indent: int, lead: int, trail: int
    ) -> List[_Line]:
        return [_Line(indent, self.flat())]


class _Text(_Block):
    # text that cannot be broken, e.g., an identifier or a literal

    def __init__(self, text: str) -> None:
        super().__init__(len(text))
        self.text = text

    def flat(self) -> str:
        return self.text


class _Bracketed(_Block):
    # comma-separated items enclosed in brackets

    def __init__(
        self,
        brackets: BracketPair,
        items: Sequence[_Block],
        trailing_comma: bool = False,
    ) -> None:
        super().__init__(
            len(brackets.opening)
            + sum(item.width + 2 for item in items)
            - (2 if items else 0)
            + int(trailing_comma)
            + len(brackets.closing)
        )
        self.brackets = brackets
        self.items = items
        self.trailing_comma = trailing_comma

    def flat(self) -> str:
        items = ", ".join(item.flat() for item in self.items)
        comma = "," if self.trailing_comma else ""
        return f"{self.brackets.opening}{items}{comma}{self.brackets.closing}"

    def break_lines(
        self, config: FormattingConfig, indent: int, lead: int, trail: int
    ) -> List[_Line]:
        if not self.items:
            return [_Line(indent, self.flat())]

        lines = [_Line(indent, self.brackets.opening)]
        last = len(self.items) - 1

        for i, item in enumerate(self.items):
            comma = i < last or self.trailing_comma
            item_lines = item.lay_out(config, indent + 1, trail=int(comma))
            if comma:
                line = item_lines[-1]
                item_lines[-1] = _Line(line.indent, line.text + ",")
            lines.extend(item_lines)

        lines.append(_Line(indent, self.brackets.closing))
        return lines


class _Joined(_Block):
    # two or more parts joined by a separator, e.g. np.int32 or dtype=np.int32

    def __init__(self, parts: Sequence[_Block], separator: str) -> None:
        super().__init__(
            sum(part.width for part in parts) + len(separator) * (len(parts) - 1)
        )
        self.parts = parts
        self.separator = separator

    def flat(self) -> str:
        return self.separator.join(part.flat() for part in self.parts)

    def break_lines(
        self, config: FormattingConfig, indent: int, lead: int, trail: int
    ) -> List[_Line]:
        # each part continues the last line of the preceding part
        separator = self.separator
        last = len(self.parts) - 1

        lines = self.parts[0].lay_out(
            config, indent, lead=lead, trail=trail if last == 0 else 0
        )

        for i, part in enumerate(self.parts[1:], start=1):
            head = lines.pop()
            preceding = len(head.text) + len(separator) + (lead if not lines else 0)
            part_lines = part.lay_out(
                config, indent, lead=preceding, trail=trail if i == last else 0
            )
            first = part_lines[0]
            part_lines[0] = _Line(head.indent, head.text + separator + first.text)
            lines.extend(part_lines)

        return lines


def _to_block(expression: Expression) -> _Block:
    if isinstance(expression, AtomicExpression):
        return _Text(expression.text_)
    elif isinstance(expression, CollectionLiteral):
        return _Bracketed(
            expression.brackets_,
            [_to_block(element) for element in expression.elements_],
            trailing_comma=expression.trailing_comma_,
        )
    elif isinstance(expression, PrefixExpression):
        precedence = expression.precedence_
        return _Joined(
            [
                _to_operand_block(expression.prefix_, precedence),
                _to_operand_block(expression.body_, precedence),
            ],
            expression.separator_,
        )
    elif isinstance(expression, InfixExpression):
        precedence = expression.precedence_
        first, *others = expression.subexpressions_
        return _Joined(
            [
                _to_operand_block(first, precedence),
                # operators are left-associative
                *(_to_operand_block(other, precedence + 1) for other in others),
            ],
            expression.infix_.symbol,
        )
    else:
        raise TypeError(f"unknown expression type: {type(expression).__name__}")


def _to_operand_block(expression: Expression, min_precedence: int) -> _Block:
    # enclose operands in parentheses if they bind less tightly than required
    block = _to_block(expression)
    if expression.precedence_ < min_precedence:
        return _Bracketed(BracketPair.ROUND, [block])
    else:
        return block
