"""
Configuración compartida de pytest.

Los módulos de docindex emiten eventos HUMAN por structlog; se configura
el pipeline stdlib en silencio antes de cada test para que ningún logger
se cachee con la configuración por defecto.
"""

import pytest

from docindex.config.schema import LoggingConfig
from docindex.logging import configure_logging


@pytest.fixture(autouse=True)
def quiet_logging():
    """Logging silencioso antes y después de cada test."""
    configure_logging(LoggingConfig(), quiet=True)
    yield
    configure_logging(LoggingConfig(), quiet=True)
