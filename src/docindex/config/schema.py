"""
Pydantic models for docindex configuration.

Defines all configuration schemas using Pydantic v2 for validation,
defaults, and serialization.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator


class DocumentsConfig(BaseModel):
    """Which files count as documents and where to look for them.

    Shared by `build` and `strip`.
    """

    root: Path = Path(".")
    extension: str = Field(
        default=".md",
        description="Exact, case-sensitive filename suffix that identifies a document",
    )
    ignore: list[str] = Field(
        default_factory=lambda: [".git"],
        description="Names (fnmatch patterns) skipped during traversal",
    )

    model_config = {"extra": "forbid"}

    @field_validator("extension")
    @classmethod
    def _extension_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("extension must not be empty")
        return v


class IndexConfig(BaseModel):
    """Index document generation (`docindex build`)."""

    output: str = "README.md"
    title: str = "Title"
    max_depth: int = Field(default=10, ge=0, description="Deepest level still listed (root = 0)")
    exclude_output: bool = Field(
        default=True,
        description="If True, the output file itself is never listed in the index",
    )
    bom: bool = Field(default=False, description="Write a UTF-8 byte-order mark")

    model_config = {"extra": "forbid"}


class StripConfig(BaseModel):
    """Numeric prefix removal (`docindex strip`)."""

    mover: Literal["auto", "git", "plain"] = Field(
        default="auto",
        description=(
            "auto: git mv when inside a work tree, else plain rename. "
            "git: require git (checked before any change). plain: os.rename only."
        ),
    )
    rename_files: bool = True
    rewrite_headings: bool = True
    dry_run: bool = False

    model_config = {"extra": "forbid"}


class LoggingConfig(BaseModel):
    """Logging system configuration."""

    level: Literal["debug", "info", "human", "warn", "error"] = "human"
    file: Path | None = None
    verbose: int = 0

    model_config = {"extra": "forbid"}


class AppConfig(BaseModel):
    """Complete application configuration.

    This is the root of the configuration tree. It combines all sections
    and is the entry point for validation.
    """

    documents: DocumentsConfig = Field(default_factory=DocumentsConfig)
    index: IndexConfig = Field(default_factory=IndexConfig)
    strip: StripConfig = Field(default_factory=StripConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"extra": "forbid"}
