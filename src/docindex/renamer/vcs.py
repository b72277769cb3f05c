"""
File movers — version-control-aware renames.

GitMover uses `git mv` for tracked files so history follows the rename;
untracked files fall back to a plain rename. PlainMover never touches git.
"""

import os
import shutil
import subprocess
from pathlib import Path

import structlog

logger = structlog.get_logger()

__all__ = [
    "GitMover",
    "MoveError",
    "PlainMover",
    "PrerequisiteMissingError",
    "select_mover",
]


class PrerequisiteMissingError(Exception):
    """git is required but unavailable, or the root is not in a work tree."""


class MoveError(Exception):
    """A single rename failed."""


class PlainMover:
    """Filesystem rename, no history tracking."""

    name = "plain"

    def move(self, source: Path, target: Path) -> None:
        try:
            os.rename(source, target)
        except OSError as e:
            raise MoveError(e.strerror or str(e)) from e


class GitMover:
    """Renames through git so `git log --follow` keeps working."""

    name = "git"

    def __init__(self, root: Path) -> None:
        self.root = root
        self.log = logger.bind(component="git_mover")
        self._plain = PlainMover()

    def check_prerequisites(self) -> None:
        """Verify git is installed and the root is inside a work tree.

        Raises:
            PrerequisiteMissingError: If either check fails.
        """
        if shutil.which("git") is None:
            raise PrerequisiteMissingError("git executable not found on PATH")

        try:
            result = subprocess.run(
                ["git", "rev-parse", "--is-inside-work-tree"],
                capture_output=True,
                text=True,
                cwd=self.root,
            )
        except OSError as e:
            raise PrerequisiteMissingError(f"Could not run git: {e}") from e

        if result.returncode != 0 or result.stdout.strip() != "true":
            raise PrerequisiteMissingError(
                f"{self.root} is not inside a git work tree"
            )

    def is_tracked(self, path: Path) -> bool:
        result = subprocess.run(
            ["git", "ls-files", "--error-unmatch", "--", str(path)],
            capture_output=True,
            text=True,
            cwd=self.root,
        )
        return result.returncode == 0

    def move(self, source: Path, target: Path) -> None:
        if not self.is_tracked(source):
            self.log.debug("git_mover.untracked", path=str(source))
            self._plain.move(source, target)
            return

        result = subprocess.run(
            ["git", "mv", "--", str(source), str(target)],
            capture_output=True,
            text=True,
            cwd=self.root,
        )
        if result.returncode != 0:
            raise MoveError(result.stderr.strip()[:200] or "git mv failed")


def select_mover(mode: str, root: Path) -> PlainMover | GitMover:
    """Pick the mover for a run.

    Args:
        mode: "auto", "git" or "plain".
        root: Documents root (git commands run from here).

    Raises:
        PrerequisiteMissingError: Only for mode "git", before any change is made.
    """
    if mode == "plain":
        return PlainMover()

    mover = GitMover(root)
    if mode == "git":
        mover.check_prerequisites()
        return mover

    try:
        mover.check_prerequisites()
    except PrerequisiteMissingError as e:
        logger.info("mover.fallback_plain", reason=str(e))
        return PlainMover()
    return mover
