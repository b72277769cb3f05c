"""
Human Log — Formatter y helper para los logs de progreso de docindex.

Produce output legible con estructura clara: el usuario ve qué se
indexa, qué se renombra y qué se salta, sin ruido técnico.

Formato de ejemplo:
    Indexing docs/ (max depth 10)
      ⚠ skipped docs/private: Permission denied
    ✓ Index written to docs/README.md (42 lines)

    Stripping numeric prefixes in docs/ (mover: git)
      rename 40 littlefs.md → littlefs.md
      rewrite littlefs.md (3 headings)
    ✓ 1 renamed, 1 rewritten, 0 failed
"""

import logging
import sys

from .levels import HUMAN

# Claves que structlog añade al event_dict y que no son parámetros del evento
_RESERVED_KEYS = frozenset({
    "event", "level", "logger", "timestamp", "_record", "_from_structlog",
})


class HumanFormatter:
    """Formateador de eventos de progreso.

    Convierte eventos estructurados a texto legible. Cada tipo de
    evento tiene su formato propio; los desconocidos se ignoran.
    """

    def format_event(self, event: str, **kw) -> str | None:
        """Formatea un evento a texto legible.

        Args:
            event: Nombre del evento (ej: "index.written", "strip.renamed")
            **kw: Parámetros del evento

        Returns:
            Texto formateado o None si el evento no tiene formato definido
        """
        match event:

            # ── INDEX ───────────────────────────────────────────────────
            case "index.scan.start":
                root = kw.get("root", "?")
                max_depth = kw.get("max_depth", "?")
                return f"Indexing {root} (max depth {max_depth})"

            case "index.entry.skipped":
                path = kw.get("path", "?")
                error = kw.get("error", "unreadable")
                return f"  ⚠ skipped {path}: {error}"

            case "index.written":
                path = kw.get("path", "?")
                lines = kw.get("lines", "?")
                return f"✓ Index written to {path} ({lines} lines)"

            # ── STRIP ───────────────────────────────────────────────────
            case "strip.start":
                root = kw.get("root", "?")
                mover = kw.get("mover", "?")
                dry = " [dry-run]" if kw.get("dry_run") else ""
                return f"Stripping numeric prefixes in {root} (mover: {mover}){dry}"

            case "strip.renamed":
                src = kw.get("source", "?")
                dst = kw.get("target", "?")
                return f"  rename {src} → {dst}"

            case "strip.rewritten":
                path = kw.get("path", "?")
                headings = kw.get("headings", "?")
                return f"  rewrite {path} ({headings} headings)"

            case "strip.failed":
                path = kw.get("path", "?")
                error = kw.get("error", "?")
                return f"  ✗ {path}: {error}"

            case "strip.complete":
                renamed = kw.get("renamed", 0)
                rewritten = kw.get("rewritten", 0)
                failed = kw.get("failed", 0)
                mark = "✓" if not failed else "⚡"
                return f"{mark} {renamed} renamed, {rewritten} rewritten, {failed} failed"

            case _:
                return None


class HumanLogHandler(logging.Handler):
    """Handler de logging que filtra eventos HUMAN y los formatea.

    Solo procesa registros de nivel HUMAN (25). El resto los ignora.
    Escribe a stderr para no romper pipes stdout (--stdout).
    """

    def __init__(self, stream=None) -> None:
        super().__init__(level=HUMAN)
        self.stream = stream or sys.stderr
        self.formatter_inst = HumanFormatter()

    def emit(self, record: logging.LogRecord) -> None:
        try:
            if record.levelno != HUMAN:
                return

            # Con ProcessorFormatter.wrap_for_formatter el msg es el event_dict
            if isinstance(record.msg, dict):
                event_dict = record.msg
                event = event_dict.get("event", "")
                kw = {k: v for k, v in event_dict.items() if k not in _RESERVED_KEYS}
            else:
                event = record.getMessage()
                kw = {}

            formatted = self.formatter_inst.format_event(event, **kw)
            if formatted is not None:
                self.stream.write(formatted + "\n")
                self.stream.flush()
        except Exception:
            self.handleError(record)


class HumanLog:
    """Helper tipado para emitir logs de nivel HUMAN desde el código.

    En lugar de llamar log.log(HUMAN, "event", ...) directamente,
    usa métodos con nombres semánticos claros.

    Uso:
        hlog = HumanLog(structlog.get_logger())
        hlog.scan_start(root="docs", max_depth=10)
        hlog.renamed("40 a.md", "a.md")
    """

    def __init__(self, logger) -> None:
        self._log = logger

    def scan_start(self, root: str, max_depth: int) -> None:
        self._log.log(HUMAN, "index.scan.start", root=root, max_depth=max_depth)

    def entry_skipped(self, path: str, error: str) -> None:
        self._log.log(HUMAN, "index.entry.skipped", path=path, error=error)

    def index_written(self, path: str, lines: int) -> None:
        self._log.log(HUMAN, "index.written", path=path, lines=lines)

    def strip_start(self, root: str, mover: str, dry_run: bool) -> None:
        self._log.log(HUMAN, "strip.start", root=root, mover=mover, dry_run=dry_run)

    def renamed(self, source: str, target: str) -> None:
        self._log.log(HUMAN, "strip.renamed", source=source, target=target)

    def rewritten(self, path: str, headings: int) -> None:
        self._log.log(HUMAN, "strip.rewritten", path=path, headings=headings)

    def failed(self, path: str, error: str) -> None:
        self._log.log(HUMAN, "strip.failed", path=path, error=error)

    def strip_complete(self, renamed: int, rewritten: int, failed: int) -> None:
        self._log.log(
            HUMAN, "strip.complete",
            renamed=renamed,
            rewritten=rewritten,
            failed=failed,
        )
