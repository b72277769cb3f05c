"""
Configuración completa del sistema de logging estructurado.

Tres pipelines independientes:
1. Archivo (JSON) — Si config.file está configurado. Captura todo (DEBUG+).
2. Human handler (stderr) — Solo eventos HUMAN: qué se indexa y qué se renombra.
3. Console técnico (stderr) — WARNING por defecto, controlado por -v. Excluye HUMAN.

Con -v: añade INFO. Con -vv: añade DEBUG. Con --quiet: silencia stderr.
"""

import logging
import sys
from pathlib import Path

import structlog

from ..config.schema import LoggingConfig
from .human import HumanLogHandler
from .levels import HUMAN


def configure_logging(
    config: LoggingConfig,
    quiet: bool = False,
) -> None:
    """Configura el sistema completo de logging con tres pipelines.

    Args:
        config: Configuración de logging (level, file, verbose)
        quiet: Si True, desactiva human y console handlers (--quiet)
    """
    # Limpiar configuración anterior
    logging.root.handlers.clear()
    structlog.reset_defaults()

    # Root logger captura todo — los handlers filtran por nivel
    logging.root.setLevel(logging.DEBUG)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    # ── Pipeline 1: Archivo JSON ──────────────────────────────────────────
    if config.file:
        file_path = Path(config.file)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(str(file_path), encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(ensure_ascii=False),
            foreign_pre_chain=shared_processors,
        ))
        logging.root.addHandler(file_handler)

    if not quiet:
        # ── Pipeline 2: Human handler ─────────────────────────────────────
        human_handler = HumanLogHandler(stream=sys.stderr)
        human_handler.setLevel(_level_name_to_threshold(config.level, HUMAN))
        human_handler.addFilter(lambda record: record.levelno == HUMAN)
        logging.root.addHandler(human_handler)

        # ── Pipeline 3: Console técnico ───────────────────────────────────
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(
            _level_name_to_threshold(config.level, _verbose_to_level(config.verbose))
        )
        # Excluir eventos HUMAN (ya los muestra el human_handler)
        console_handler.addFilter(lambda record: record.levelno != HUMAN)
        console_handler.setFormatter(structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
            foreign_pre_chain=shared_processors,
        ))
        logging.root.addHandler(console_handler)
    else:
        # Sin handlers en root, logging.lastResort imprimiría el event_dict crudo
        logging.root.addHandler(logging.NullHandler())

    # El event_dict llega intacto a los handlers; cada uno renderiza a su manera
    structlog.configure(
        processors=shared_processors + [
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def _verbose_to_level(verbose: int) -> int:
    """Convierte nivel de verbose a nivel de logging para el console handler.

    Sin -v  → WARNING (solo problemas; human va por su propio handler)
    -v      → INFO (config cargada, mover seleccionado)
    -vv+    → DEBUG (decisiones por entrada, cortes de profundidad)
    """
    levels = {
        0: logging.WARNING,
        1: logging.INFO,
    }
    return levels.get(verbose, logging.DEBUG)


_LEVEL_NAMES: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "human": HUMAN,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


def _level_name_to_threshold(level: str, default: int) -> int:
    """Combina logging.level con el umbral propio del handler.

    logging.level solo puede subir el umbral (ej: "error" silencia el
    progreso HUMAN); los niveles bajos no lo reducen por debajo del default.
    """
    return max(_LEVEL_NAMES.get(level, HUMAN), default)

