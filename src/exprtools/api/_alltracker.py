"""
Core implementation of :class:`exprtools.api.AllTracker`.
"""

import itertools
import logging
from typing import Any, Dict, List, Optional

log = logging.getLogger(__name__)

__all__ = [
    "AllTracker",
    "public_module_prefix",
]


class AllTracker:
    """
    Checks that the ``__all__`` declaration of a module lists exactly the public
    names defined by the module.

    Create the tracker right after the imports of a module, and call
    :meth:`.validate` once all public names have been defined.
    A name is tracked if it does not start with an underscore, and if it did not
    exist yet when the tracker was created.

    This supports the package layout of this library: private modules declare their
    exports in ``__all__``, and the public package star-imports them in its
    ``__init__.py``.

    Validation fails if

    - ``__all__`` does not match the tracked names
    - a tracked name refers to an object without a ``__module__`` attribute, i.e., a
      global constant, unless global constants are explicitly allowed
    - a tracked name refers to an object defined in a different module

    Every exported object is tagged with the name of its public module, in attribute
    ``__publicmodule__``.
    """

    #: the full name of the public module exporting the tracked names
    public_module: str

    #: if ``True``, global constants may be exported
    allow_global_constants: bool

    def __init__(
        self,
        globals_: Dict[str, Any],
        *,
        public_module: Optional[str] = None,
        allow_global_constants: bool = False,
    ) -> None:
        """
        :param globals_: the global namespace of the tracked module, as returned by
            :func:`globals`
        :param public_module: the full name of the public module exporting the
            tracked names (default: the public prefix of the tracked module's name)
        :param allow_global_constants: if ``True``, global constants may be listed
            in ``__all__`` (default: ``False``)
        """
        module = globals_.get("__name__")
        if module is None:
            raise ValueError("arg globals_ does not define module name in __name__")

        self._globals = globals_
        self._module: str = module
        self._defined_before = frozenset(globals_)

        self.public_module = public_module or public_module_prefix(module)
        self.allow_global_constants = allow_global_constants

        globals_["__publicmodule__"] = self.public_module

    def get_tracked(self) -> List[str]:
        """
        Get the public names defined since this tracker was created.

        :return: the tracked names, in alphabetical order
        """
        return sorted(
            name
            for name in self._globals
            if not name.startswith("_") and name not in self._defined_before
        )

    def validate(self) -> None:
        """
        Check the ``__all__`` declaration of the tracked module against the names
        defined since this tracker was created.

        :raise AssertionError: ``__all__`` does not list exactly the tracked names, or
            a tracked name must not be exported
        """
        tracked = self.get_tracked()

        if set(self._globals.get("__all__", ())) != set(tracked):
            raise AssertionError(
                "missing or unexpected all declaration, "
                f"expected:\n__all__ = {tracked}"
            )

        for name in tracked:
            self._validate_export(self._globals[name])

    def _validate_export(self, obj: Any) -> None:
        try:
            defining_module = obj.__module__
        except AttributeError:
            if not self.allow_global_constants:
                raise AssertionError(
                    f"exporting a global constant is not permitted: {obj!r}"
                )
            return

        if defining_module != self._module:
            raise AssertionError(
                f"{_qualname(obj)} is exported by module {self._module} "
                f"but defined in module {defining_module}"
            )

        try:
            obj.__publicmodule__ = self.public_module
        except AttributeError:
            # instances of builtin types do not accept new attributes
            log.debug(f"cannot tag {_qualname(obj)} with its public module")


def public_module_prefix(module_name: str) -> str:
    """
    Get the public part of a module name.

    The public part comprises all components of the module name that precede the
    first component starting with an underscore, e.g.,

    - ``a.b`` for module ``a.b._c.d._e``
    - ``a.b`` for module ``a.b``

    Module names starting with a private component, e.g., ``_a.b``, have no public
    part.

    :param module_name: the full name of a module
    :return: the public part of the module name
    :raise ValueError: the module name has no public part
    """
    public_parts = list(
        itertools.takewhile(
            lambda part: not part.startswith("_"), module_name.split(".")
        )
    )
    if not public_parts:
        raise ValueError(f"cannot infer public module path from module {module_name}")
    return ".".join(public_parts)


def _qualname(obj: Any) -> str:
    return getattr(obj, "__qualname__", None) or getattr(obj, "__name__", repr(obj))
