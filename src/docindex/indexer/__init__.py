"""
Módulo indexer — Índice Markdown de un árbol de documentos.

Recorre el árbol (TreeIndexer), poda las ramas sin documentos, numera
de forma contigua y escribe el documento final (document.py).
"""

from .document import (
    IndexDocument,
    IndexWriteError,
    build_index_document,
    render_index,
    resolve_output_path,
    save_index_document,
    write_index,
)
from .tree import DirectoryEntry, TreeIndexer, TreeResult

__all__ = [
    "DirectoryEntry",
    "IndexDocument",
    "IndexWriteError",
    "TreeIndexer",
    "TreeResult",
    "build_index_document",
    "render_index",
    "resolve_output_path",
    "save_index_document",
    "write_index",
]
