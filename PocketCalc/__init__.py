"""Pocket Calculator: expression engine, calculator session and the PySide6 front end."""

from .Formatter import decimal_to_fraction, format_result
from .MathEngine import calculate, evaluate
from .ScientificEngine import AngleMode, factorial
from .Normalizer import normalize

__version__ = "1.0.0"
