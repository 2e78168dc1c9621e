"""
Rendering of Python values as the text of literal expressions.

:func:`.to_literal` renders a value as the text of a Python expression that
reconstructs the value when evaluated using :func:`.evaluate_literal`:

.. code-block:: python

    >>> to_literal(np.arange(3, dtype=np.int32))
    'np.array([0, 1, 2], dtype=np.int32)'
    >>> to_literal({"x": 1, "y": "b"})
    "record_from([1, 'b'], ['x', 'y'])"

Literal expressions may reference NumPy as ``np``, and the constructors
:func:`.concat`, :func:`.cell`, :func:`.record_from`, :func:`.instant_from`,
:func:`.duration_from`, and :func:`.table_from`.
"""

from ._base import *
from ._calendar import *
from ._literal import *
from ._namespace import *
