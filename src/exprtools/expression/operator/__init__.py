"""
Operators used in expressions.
"""
from ._operator import *
