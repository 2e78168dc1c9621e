"""
Abstract expression types shared by the atomic and composite expressions:
atomic expressions, bracketed collections, and prefix and infix expressions.
"""
from ._base import *
