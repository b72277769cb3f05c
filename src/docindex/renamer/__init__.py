"""
Renamer module — strips numeric prefixes from document names and headings.
"""

from .patterns import strip_heading_prefixes, strip_name_prefix
from .runner import PrefixStripper, StripReport, iter_documents
from .vcs import GitMover, MoveError, PlainMover, PrerequisiteMissingError, select_mover

__all__ = [
    "GitMover",
    "MoveError",
    "PlainMover",
    "PrefixStripper",
    "PrerequisiteMissingError",
    "StripReport",
    "iter_documents",
    "select_mover",
    "strip_heading_prefixes",
    "strip_name_prefix",
]
