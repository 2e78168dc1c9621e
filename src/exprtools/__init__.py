"""
Render in-memory values as Python expressions that reconstruct them.
"""

__version__ = "1.0.0"
