"""
Tests para el sistema de logging (HUMAN level, formatter, handler, setup).
"""

import json
import logging
from io import StringIO
from pathlib import Path

import pytest
import structlog

from docindex.config.schema import LoggingConfig
from docindex.logging import (
    HUMAN,
    HumanFormatter,
    HumanLog,
    HumanLogHandler,
    configure_logging,
)
from docindex.logging.setup import _level_name_to_threshold, _verbose_to_level


class TestHumanLevel:

    def test_value_between_info_and_warning(self) -> None:
        assert logging.INFO < HUMAN < logging.WARNING

    def test_registered_name(self) -> None:
        assert logging.getLevelName(HUMAN) == "HUMAN"
        assert structlog.stdlib.LEVEL_TO_NAME[HUMAN] == "human"


class TestHumanFormatter:

    @pytest.fixture
    def fmt(self) -> HumanFormatter:
        return HumanFormatter()

    def test_index_written(self, fmt: HumanFormatter) -> None:
        assert fmt.format_event("index.written", path="docs/README.md", lines=12) == (
            "✓ Index written to docs/README.md (12 lines)"
        )

    def test_entry_skipped(self, fmt: HumanFormatter) -> None:
        line = fmt.format_event("index.entry.skipped", path="private", error="Permission denied")
        assert line == "  ⚠ skipped private: Permission denied"

    def test_strip_start_dry_run(self, fmt: HumanFormatter) -> None:
        line = fmt.format_event("strip.start", root="docs", mover="git", dry_run=True)
        assert line.endswith("(mover: git) [dry-run]")

    def test_strip_complete_marks_failures(self, fmt: HumanFormatter) -> None:
        assert fmt.format_event("strip.complete", renamed=1, rewritten=2, failed=0).startswith("✓")
        assert fmt.format_event("strip.complete", renamed=1, rewritten=2, failed=3).startswith("⚡")

    def test_unknown_event(self, fmt: HumanFormatter) -> None:
        assert fmt.format_event("something.else") is None


class TestHumanLogHandler:

    def _record(self, msg, level: int = HUMAN) -> logging.LogRecord:
        return logging.LogRecord("docindex", level, __file__, 1, msg, (), None)

    def test_formats_structlog_event_dict(self) -> None:
        stream = StringIO()
        handler = HumanLogHandler(stream=stream)
        handler.emit(self._record({
            "event": "strip.renamed",
            "source": "1 a.md",
            "target": "a.md",
            "level": "human",
            "timestamp": "2024-01-01T00:00:00Z",
        }))
        assert stream.getvalue() == "  rename 1 a.md → a.md\n"

    def test_ignores_other_levels(self) -> None:
        stream = StringIO()
        HumanLogHandler(stream=stream).emit(
            self._record({"event": "index.written"}, level=logging.INFO)
        )
        assert stream.getvalue() == ""


class TestConfigureLogging:

    def test_human_events_reach_stderr(self, capsys: pytest.CaptureFixture) -> None:
        configure_logging(LoggingConfig())
        HumanLog(structlog.get_logger("test")).index_written(path="out.md", lines=3)
        assert "✓ Index written to out.md (3 lines)" in capsys.readouterr().err

    def test_quiet_silences_stderr(self, capsys: pytest.CaptureFixture) -> None:
        configure_logging(LoggingConfig(), quiet=True)
        HumanLog(structlog.get_logger("test")).index_written(path="out.md", lines=3)
        assert capsys.readouterr().err == ""

    def test_quiet_drops_warnings(self, capsys: pytest.CaptureFixture) -> None:
        configure_logging(LoggingConfig(), quiet=True)
        structlog.get_logger("test").warning("strip.walk_error", path="nope", error="missing")
        assert capsys.readouterr().err == ""

    def test_level_error_silences_progress(self, capsys: pytest.CaptureFixture) -> None:
        configure_logging(LoggingConfig(level="error"))
        HumanLog(structlog.get_logger("test")).index_written(path="out.md", lines=3)
        assert "Index written" not in capsys.readouterr().err

    def test_json_file(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "docindex.jsonl"
        configure_logging(LoggingConfig(file=log_file), quiet=True)

        structlog.get_logger("test").info("index.scan.complete", lines=7)
        for handler in logging.root.handlers:
            handler.flush()

        entries = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
        assert entries[-1]["event"] == "index.scan.complete"
        assert entries[-1]["lines"] == 7
        assert entries[-1]["level"] == "info"


class TestLevels:

    def test_verbose_to_level(self) -> None:
        assert _verbose_to_level(0) == logging.WARNING
        assert _verbose_to_level(1) == logging.INFO
        assert _verbose_to_level(2) == logging.DEBUG
        assert _verbose_to_level(5) == logging.DEBUG

    def test_level_only_raises_threshold(self) -> None:
        assert _level_name_to_threshold("debug", logging.WARNING) == logging.WARNING
        assert _level_name_to_threshold("error", HUMAN) == logging.ERROR
