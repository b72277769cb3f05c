"""
Prefix stripper — renames documents and rewrites their headings.

Two independent passes over the same document list:
1. Filename pass: "40 littlefs.md" → "littlefs.md" (via the selected mover).
2. Heading pass: "## 36.1 初始化" → "## 初始化", written only if changed.

Per-file failures are recorded and the batch keeps going. With dry_run,
nothing is touched and the report lists what would change.
"""

import fnmatch
import os
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from ..logging import HumanLog
from .patterns import strip_heading_prefixes, strip_name_prefix
from .vcs import GitMover, MoveError, PlainMover

logger = structlog.get_logger()

__all__ = [
    "PrefixStripper",
    "StripReport",
    "iter_documents",
]


@dataclass
class StripReport:
    """Outcome of a strip run. Paths are relative to the documents root."""

    renamed: list[tuple[str, str]] = field(default_factory=list)
    rewritten: list[str] = field(default_factory=list)
    failures: list[tuple[str, str]] = field(default_factory=list)
    dry_run: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.renamed or self.rewritten)

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_lines(self) -> list[str]:
        """Human-readable listing, one line per file."""
        verb = "would rename" if self.dry_run else "renamed"
        lines = [f"{verb}: {src} -> {dst}" for src, dst in self.renamed]
        verb = "would rewrite" if self.dry_run else "rewritten"
        lines += [f"{verb}: {path}" for path in self.rewritten]
        lines += [f"failed: {path} ({error})" for path, error in self.failures]
        return lines


def iter_documents(root: Path, extension: str, ignore: list[str] | tuple[str, ...]) -> list[Path]:
    """All documents under root, in a deterministic order.

    Ignored directories are pruned in place so the walk never enters them.
    """
    def _ignored(name: str) -> bool:
        return any(fnmatch.fnmatchcase(name, p) for p in ignore)

    def _on_error(error: OSError) -> None:
        logger.warning("strip.walk_error", path=error.filename, error=error.strerror)

    documents: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        dirnames[:] = sorted(d for d in dirnames if not _ignored(d))
        for filename in sorted(filenames):
            if filename.endswith(extension) and not _ignored(filename):
                documents.append(Path(dirpath) / filename)
    return documents


class PrefixStripper:
    """Strips numeric prefixes from document names and headings."""

    def __init__(
        self,
        root: Path,
        mover: PlainMover | GitMover,
        extension: str = ".md",
        ignore: list[str] | tuple[str, ...] = (".git",),
        rename_files: bool = True,
        rewrite_headings: bool = True,
        dry_run: bool = False,
    ) -> None:
        self.root = root.resolve()
        self.mover = mover
        self.extension = extension
        self.ignore = tuple(ignore)
        self.rename_files = rename_files
        self.rewrite_headings = rewrite_headings
        self.dry_run = dry_run
        self.log = logger.bind(component="prefix_stripper")
        self.hlog = HumanLog(self.log)

    def run(self) -> StripReport:
        """Run both passes and return the report.

        Raises:
            NotADirectoryError: If the root does not exist or is not a directory.
        """
        if not self.root.is_dir():
            raise NotADirectoryError(f"Not a directory: {self.root}")

        report = StripReport(dry_run=self.dry_run)
        self.hlog.strip_start(root=str(self.root), mover=self.mover.name, dry_run=self.dry_run)

        documents = iter_documents(self.root, self.extension, self.ignore)
        self.log.debug("strip.documents", count=len(documents))

        if self.rename_files:
            documents = self._rename_pass(documents, report)
        if self.rewrite_headings:
            self._rewrite_pass(documents, report)

        self.hlog.strip_complete(
            renamed=len(report.renamed),
            rewritten=len(report.rewritten),
            failed=len(report.failures),
        )
        return report

    def _rename_pass(self, documents: list[Path], report: StripReport) -> list[Path]:
        """Rename prefixed documents; returns the current path of every document."""
        current: list[Path] = []
        claimed: set[Path] = set()

        for path in documents:
            new_name = strip_name_prefix(path.name, self.extension)
            if new_name == path.name:
                current.append(path)
                continue

            target = path.with_name(new_name)
            source_rel, target_rel = self._rel(path), self._rel(target)

            if target.exists() or target in claimed:
                self._fail(report, source_rel, f"target already exists: {target_rel}")
                current.append(path)
                continue

            if not self.dry_run:
                try:
                    self.mover.move(path, target)
                except MoveError as e:
                    self._fail(report, source_rel, str(e))
                    current.append(path)
                    continue

            claimed.add(target)
            report.renamed.append((source_rel, target_rel))
            self.hlog.renamed(source=source_rel, target=target_rel)
            current.append(path if self.dry_run else target)

        return current

    def _rewrite_pass(self, documents: list[Path], report: StripReport) -> None:
        for path in documents:
            rel = self._rel(path)
            try:
                # newline="" keeps CRLF files byte-identical outside the edits
                with open(path, "r", encoding="utf-8", newline="") as f:
                    text = f.read()

                new_text, count = strip_heading_prefixes(text)
                if not count:
                    continue

                if not self.dry_run:
                    with open(path, "w", encoding="utf-8", newline="") as f:
                        f.write(new_text)
            except (OSError, UnicodeDecodeError) as e:
                self._fail(report, rel, getattr(e, "strerror", None) or str(e))
                continue

            report.rewritten.append(rel)
            self.hlog.rewritten(path=rel, headings=count)

    def _fail(self, report: StripReport, rel: str, error: str) -> None:
        report.failures.append((rel, error))
        self.hlog.failed(path=rel, error=error)

    def _rel(self, path: Path) -> str:
        return path.relative_to(self.root).as_posix()
