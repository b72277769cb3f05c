"""
Index document — title block, rendering and persistence.

The scan always completes before anything is written, so a failed scan
never leaves a half-written index behind.
"""

from dataclasses import dataclass
from pathlib import Path

import structlog

from ..config.schema import DocumentsConfig, IndexConfig
from ..logging import HumanLog
from .tree import TreeIndexer, TreeResult

logger = structlog.get_logger()

__all__ = [
    "IndexDocument",
    "IndexWriteError",
    "build_index_document",
    "render_index",
    "resolve_output_path",
    "save_index_document",
    "write_index",
]


class IndexWriteError(Exception):
    """The index file could not be written."""


@dataclass
class IndexDocument:
    """A rendered index ready to be written."""

    path: Path
    text: str
    result: TreeResult

    @property
    def line_count(self) -> int:
        return self.text.count("\n")


def render_index(title: str, lines: list[str]) -> str:
    """Join the title block and the index lines into the final text.

    The text always ends with a newline.
    """
    return "\n".join([f"# {title}", "", *lines]) + "\n"


def resolve_output_path(root: Path, output: str) -> Path:
    """Relative output names are placed inside the scan root."""
    path = Path(output).expanduser()
    if not path.is_absolute():
        path = root / path
    return path.resolve()


def write_index(path: Path, text: str, bom: bool = False) -> Path:
    """Persist the index as UTF-8, creating parent directories if needed.

    Args:
        path: Destination file.
        text: Full index text.
        bom: If True, prefix a UTF-8 byte-order mark.

    Returns:
        The path written.

    Raises:
        IndexWriteError: If the directory or file cannot be written.
    """
    encoding = "utf-8-sig" if bom else "utf-8"
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        # newline="\n" keeps the output byte-identical across platforms
        with open(path, "w", encoding=encoding, newline="\n") as f:
            f.write(text)
    except OSError as e:
        raise IndexWriteError(f"Could not write index to {path}: {e.strerror or e}") from e

    logger.debug("index.file_written", path=str(path), bytes=len(text.encode(encoding)))
    return path


def build_index_document(
    documents: DocumentsConfig,
    index: IndexConfig,
) -> IndexDocument:
    """Scan the documents root and render the index text (nothing is written).

    Args:
        documents: Root, extension and ignore list.
        index: Output name, title, depth bound and output exclusion.

    Returns:
        IndexDocument with the target path, the text and the raw scan result.
    """
    root = documents.root.resolve()
    output_path = resolve_output_path(root, index.output)

    indexer = TreeIndexer(
        root,
        extension=documents.extension,
        ignore=documents.ignore,
        max_depth=index.max_depth,
        exclude_paths=[output_path] if index.exclude_output else None,
    )
    result = indexer.build()

    return IndexDocument(
        path=output_path,
        text=render_index(index.title, result.lines),
        result=result,
    )


def save_index_document(document: IndexDocument, bom: bool = False) -> Path:
    """Write a rendered index and report it."""
    path = write_index(document.path, document.text, bom=bom)
    HumanLog(logger).index_written(path=str(path), lines=document.line_count)
    return path
