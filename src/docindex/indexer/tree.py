"""
Indexador de documentos — recorrido recursivo del árbol.

Construye las líneas Markdown de un índice numerado y enlazado de los
documentos que cuelgan de un directorio raíz.

Reglas del recorrido:
- Directorios antes que documentos; dentro de cada grupo, orden por nombre.
- Un directorio solo aparece si contiene (a cualquier profundidad) algún
  documento. Se decide después de recorrerlo, así que su línea se añade
  una vez conocido el resultado del hijo.
- La numeración de cada nivel es contigua (1, 2, 3...) y solo avanza con
  entradas emitidas: un directorio podado no consume número.
- Los errores de acceso (permisos, entradas que desaparecen) saltan la
  entrada con un aviso en vez de abortar el recorrido.
"""

import fnmatch
import os
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from ..logging import HumanLog

logger = structlog.get_logger()

__all__ = [
    "DEFAULT_EXTENSION",
    "DEFAULT_IGNORE",
    "DEFAULT_MAX_DEPTH",
    "DirectoryEntry",
    "TreeIndexer",
    "TreeResult",
    "format_container_line",
    "format_document_line",
]

DEFAULT_EXTENSION = ".md"

# Nombres ignorados por defecto (patrones fnmatch)
DEFAULT_IGNORE: tuple[str, ...] = (".git",)

# Profundidad máxima listada; la raíz es 0
DEFAULT_MAX_DEPTH = 10

INDENT = "  "


# --- Estructuras de datos ---

@dataclass(frozen=True)
class DirectoryEntry:
    """Hijo directo de un directorio: contenedor o documento."""

    name: str
    full_path: Path
    is_container: bool


@dataclass
class TreeResult:
    """Resultado de procesar un directorio."""

    lines: list[str] = field(default_factory=list)   # Ya indentadas y numeradas
    has_content: bool = False                        # Algún documento en el subárbol
    skipped: list[str] = field(default_factory=list) # Paths ilegibles (incluye descendientes)


# --- Formato de líneas ---

def format_container_line(depth: int, number: str, name: str, rel_path: str) -> str:
    """Línea de directorio: el número va fuera de los corchetes.

    >>> format_container_line(0, "3.", "drivers", "drivers")
    '- 3. [drivers](./drivers/)'
    """
    return f"{INDENT * depth}- {number} [{name}](./{rel_path}/)"


def format_document_line(depth: int, number: str, name: str, rel_path: str) -> str:
    """Línea de documento: el número va dentro de los corchetes.

    >>> format_document_line(2, "3.1.1.", "base.md", "drivers/base/base.md")
    '    - [3.1.1. base.md](./drivers/base/base.md)'
    """
    return f"{INDENT * depth}- [{number} {name}](./{rel_path})"


# --- Indexador ---

class TreeIndexer:
    """Recorre un árbol de directorios y produce el índice numerado.

    Cada llamada a scan() es independiente: devuelve sus propias líneas
    y la señal has_content, y el llamador decide si emite el directorio.
    No hay estado compartido entre hermanos.
    """

    def __init__(
        self,
        root: Path,
        extension: str = DEFAULT_EXTENSION,
        ignore: list[str] | tuple[str, ...] | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
        exclude_paths: list[Path] | None = None,
    ) -> None:
        """Inicializa el indexador.

        Args:
            root: Directorio raíz; los enlaces se calculan relativos a él
            extension: Sufijo exacto (sensible a mayúsculas) de los documentos
            ignore: Patrones fnmatch de nombres a saltar (default: .git)
            max_depth: Profundidad máxima listada (raíz = 0)
            exclude_paths: Paths concretos que no se listan (ej: el propio índice)
        """
        self.root = root.resolve()
        self.extension = extension
        self.ignore = tuple(DEFAULT_IGNORE if ignore is None else ignore)
        self.max_depth = max_depth
        self.exclude_paths = frozenset(Path(p).resolve() for p in exclude_paths or [])
        self._exclude_names = frozenset(p.name for p in self.exclude_paths)
        self.log = logger.bind(component="tree_indexer")
        self.hlog = HumanLog(self.log)

    def build(self) -> TreeResult:
        """Recorre el árbol completo desde la raíz.

        Raises:
            NotADirectoryError: Si la raíz no existe o no es un directorio.
        """
        if not self.root.is_dir():
            raise NotADirectoryError(f"Not a directory: {self.root}")

        self.hlog.scan_start(root=str(self.root), max_depth=self.max_depth)
        result = self.scan(self.root, depth=0, number_prefix="")
        self.log.info(
            "index.scan.complete",
            lines=len(result.lines),
            skipped=len(result.skipped),
        )
        return result

    def scan(self, directory: Path, depth: int, number_prefix: str) -> TreeResult:
        """Procesa un directorio y, recursivamente, sus subdirectorios.

        Args:
            directory: Directorio a recorrer
            depth: Profundidad de sus hijos directos (raíz = 0)
            number_prefix: Numeración del padre con su punto final ("" en la raíz)

        Returns:
            TreeResult con las líneas de este directorio y sus descendientes.
        """
        if depth > self.max_depth:
            self.log.debug("index.depth_limit", path=str(directory), depth=depth)
            return TreeResult()

        result = TreeResult()
        counter = 1

        for entry in self._list_entries(directory, result.skipped):
            number = f"{number_prefix}{counter}."
            rel_path = self._relative(entry.full_path)

            if entry.is_container:
                child = self.scan(entry.full_path, depth + 1, number)
                result.skipped.extend(child.skipped)
                if not child.has_content:
                    # Podado: no consume número
                    self.log.debug("index.pruned", path=rel_path)
                    continue
                result.lines.append(
                    format_container_line(depth, number, entry.name, rel_path)
                )
                result.lines.extend(child.lines)
            else:
                result.lines.append(
                    format_document_line(depth, number, entry.name, rel_path)
                )

            result.has_content = True
            counter += 1

        return result

    def _list_entries(self, directory: Path, skipped: list[str]) -> list[DirectoryEntry]:
        """Lista contenedores y documentos de un directorio, ya ordenados.

        Si el directorio no se puede leer se registra en skipped y se
        devuelve una lista vacía.
        """
        entries: list[DirectoryEntry] = []
        try:
            with os.scandir(directory) as it:
                for dirent in it:
                    if self._is_ignored(dirent.name):
                        continue

                    full_path = Path(dirent.path)
                    if dirent.name in self._exclude_names and full_path.resolve() in self.exclude_paths:
                        continue

                    try:
                        is_dir = dirent.is_dir()
                        is_file = not is_dir and dirent.is_file()
                    except OSError as e:
                        self._skip(full_path, e, skipped)
                        continue

                    if is_dir:
                        entries.append(DirectoryEntry(dirent.name, full_path, True))
                    elif is_file and dirent.name.endswith(self.extension):
                        entries.append(DirectoryEntry(dirent.name, full_path, False))
        except OSError as e:
            self._skip(directory, e, skipped)
            return []

        entries.sort(key=lambda e: (not e.is_container, e.name))
        return entries

    def _is_ignored(self, name: str) -> bool:
        return any(fnmatch.fnmatchcase(name, pattern) for pattern in self.ignore)

    def _relative(self, path: Path) -> str:
        """Path relativo a la raíz con separadores '/' en cualquier plataforma."""
        return path.relative_to(self.root).as_posix()

    def _skip(self, path: Path, error: OSError, skipped: list[str]) -> None:
        try:
            shown = self._relative(path) or "."
        except ValueError:
            shown = str(path)
        skipped.append(shown)
        self.hlog.entry_skipped(path=shown, error=error.strerror or str(error))
