"""
Python expressions as trees of objects, and their formatting as source text.

:mod:`exprtools.literal` renders values as expressions; the formatter in
:mod:`exprtools.expression.formatter` turns them into text, breaking lines where
they get too wide.

Expression trees are built from identifiers (:class:`.Id`) and literals
(:class:`.Lit`).
Accessing an attribute of an expression, or calling it, yields a larger
expression:

.. code-block:: python

    Id.np.array(ListLiteral(1, 2), dtype=Id.np.int32)

Use the :class:`.Id` constructor for names with a leading or trailing underscore,
which attribute access on :class:`.Id` does not support.

:func:`.make_expression` converts plain values: nested lists, tuples and
dictionaries of Python literals become collection literals.

Classes inheriting from :class:`.HasExpressionRepr` only need to implement
:meth:`~.HasExpressionRepr.to_expression` to get a formatted :func:`repr`.
"""

from ._expression import *
