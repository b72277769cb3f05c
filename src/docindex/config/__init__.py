"""
Configuration module for docindex.

Exports the main components for convenient imports.
"""

from .loader import load_config
from .schema import (
    AppConfig,
    DocumentsConfig,
    IndexConfig,
    LoggingConfig,
    StripConfig,
)

__all__ = [
    "load_config",
    "AppConfig",
    "DocumentsConfig",
    "IndexConfig",
    "LoggingConfig",
    "StripConfig",
]
