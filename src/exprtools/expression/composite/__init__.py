"""
Expressions built from other expressions:

- list, tuple, and dictionary literals, e.g., ``[a, b]``
- unary operations, e.g., ``-a``
- calls with positional and keyword arguments, e.g., ``f(a, dtype=b)``
- attribute references, e.g., ``np.random.default_rng``
"""

from ._composite import *
