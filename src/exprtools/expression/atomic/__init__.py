"""
Identifiers and literals, the leaves of an expression tree.
"""
from ._atomic import *
