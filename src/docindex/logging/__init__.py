"""
Logging module - Structured logging system.

HUMAN level (25) carries user-facing progress; everything else is technical.
"""

from .human import HumanFormatter, HumanLog, HumanLogHandler
from .levels import HUMAN
from .setup import configure_logging

__all__ = [
    "configure_logging",
    "HUMAN",
    "HumanFormatter",
    "HumanLog",
    "HumanLogHandler",
]
