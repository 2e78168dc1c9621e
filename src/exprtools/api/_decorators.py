"""
Core implementation of decorators in :mod:`exprtools.api`.
"""

import logging
from typing import Any, Callable, Optional, Type, TypeVar

from ._alltracker import AllTracker

log = logging.getLogger(__name__)

__all__ = ["inheritdoc"]


#
# Type variables
#

T_Type = TypeVar("T_Type", bound=Type[Any])


#
# Ensure all symbols introduced below are included in __all__
#

__tracker = AllTracker(globals())


def inheritdoc(*, match: str) -> Callable[[T_Type], T_Type]:
    """
    Class decorator replacing placeholder docstrings with the docstrings of the
    superclass.

    Every method or property of the decorated class whose docstring equals the
    placeholder inherits the docstring of the attribute with the same name in the
    superclass; the same applies to the docstring of the class itself:

    .. code-block:: python

      class Shape:
          def area(self) -> float:
              \"""Get the area of this shape.\"""

      @inheritdoc(match="[see superclass]")
      class Square(Shape):
          def area(self) -> float:
              \"""[see superclass]\"""

    A warning is logged if the class does not use the placeholder at all.

    :param match: the placeholder docstring
    :return: the class decorator
    """

    def _decorate(cls: T_Type) -> T_Type:
        if not isinstance(cls, type):
            raise TypeError(
                f"@{inheritdoc.__name__} can only decorate classes, "
                f"not a {type(cls).__name__}"
            )

        n_replaced = 0

        if cls.__doc__ == match:
            cls.__doc__ = cls.__mro__[1].__doc__
            n_replaced += 1

        for name, member in vars(cls).items():
            if _docstring(member) == match:
                inherited = getattr(super(cls, cls), name, None)
                _replace_docstring(member, _docstring(inherited))
                n_replaced += 1

        if not n_replaced:
            log.warning(
                f"{inheritdoc.__name__}: "
                f"no match found for docstring {match!r} in class {cls.__name__}"
            )

        return cls

    return _decorate


__tracker.validate()


def _docstring(member: Any) -> Optional[str]:
    # static and class methods keep their docstring on the wrapped function
    return getattr(getattr(member, "__func__", member), "__doc__", None)


def _replace_docstring(member: Any, docstring: Optional[str]) -> None:
    getattr(member, "__func__", member).__doc__ = docstring
