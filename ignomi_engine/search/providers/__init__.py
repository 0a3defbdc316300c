"""
Search providers - Pluggable candidate sources.

Each provider matches a query into typed candidates and executes the
candidates it produced.
"""

from .apps import AppProvider
from .calculator import CalculatorProvider
from .clipboard import ClipboardProvider
from .commands import CommandProvider
from .quicklinks import QuicklinkProvider

__all__ = [
    "AppProvider",
    "CalculatorProvider",
    "ClipboardProvider",
    "CommandProvider",
    "QuicklinkProvider",
]
