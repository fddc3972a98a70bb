"""Infix floating-point calculator: expression engine and command line."""

__version__ = "1.0.0"

from .MathEngine import calculate, evaluate, format_result
