"""Trim a C source file down to the declarations a set of functions needs."""

__version__ = "0.1.0"
