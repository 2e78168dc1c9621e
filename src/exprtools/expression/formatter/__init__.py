"""
Formatters generating text representations of expressions.
"""
from ._python import *
