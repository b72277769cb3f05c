"""
Main CLI for docindex using Click.

Commands:
    build            Write a numbered Markdown index of a document tree.
    strip            Remove numeric prefixes from document names and headings.
    validate-config  Check a YAML configuration file.
"""

import sys
from pathlib import Path

import click
import yaml
from pydantic import ValidationError

from .config.loader import load_config
from .indexer import IndexWriteError, build_index_document, save_index_document
from .logging import configure_logging
from .renamer import PrefixStripper, PrerequisiteMissingError, select_mover

# Exit codes
EXIT_SUCCESS = 0
EXIT_FAILED = 1
EXIT_PARTIAL = 2
EXIT_CONFIG_ERROR = 3
EXIT_PREREQUISITE_MISSING = 4
EXIT_INTERRUPTED = 130

# Current version
_VERSION = "1.0.0"


def _load(config_path: Path | None, cli_args: dict):
    """Load config and configure logging, exiting with EXIT_CONFIG_ERROR on failure."""
    try:
        config = load_config(config_path=config_path, cli_args=cli_args)
    except FileNotFoundError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)
    except ValidationError as e:
        click.echo(f"Invalid configuration: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)
    except yaml.YAMLError as e:
        click.echo(f"Invalid YAML: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    configure_logging(config.logging, quiet=cli_args.get("quiet", False))
    return config


@click.group()
@click.version_option(version=_VERSION, prog_name="docindex")
def main() -> None:
    """docindex - Numbered Markdown indexes for document trees.

    Builds a linked table of contents of every document under a
    directory, skipping branches without documents, and strips numeric
    prefixes from document names and headings.
    """
    pass


@main.command()
@click.argument(
    "path",
    required=False,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@click.option("-o", "--output", help="Index file name, relative to PATH (default: README.md)")
@click.option("-t", "--title", help="H1 heading written at the top of the index")
@click.option("--max-depth", type=click.IntRange(min=0), help="Deepest level listed (default: 10)")
@click.option("--ext", help="Document extension, matched exactly (default: .md)")
@click.option("--ignore", multiple=True, help="Extra name (fnmatch pattern) to skip; repeatable")
@click.option("--bom", is_flag=True, help="Write a UTF-8 byte-order mark")
@click.option("--stdout", "to_stdout", is_flag=True, help="Print the index instead of writing it")
@click.option(
    "-c",
    "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to the YAML configuration file",
)
@click.option("-v", "--verbose", count=True, help="More technical logging (-v, -vv)")
@click.option("--quiet", is_flag=True, help="No progress output on stderr")
@click.option("--log-file", type=click.Path(path_type=Path), help="Write JSON logs to this file")
def build(**kwargs) -> None:  # type: ignore
    """Write a numbered, linked index of the documents under PATH.

    PATH defaults to the current directory.

    Examples:

        \b
        $ docindex build docs -t "Developer guide"

        \b
        # Preview without writing
        $ docindex build docs --stdout
    """
    config = _load(kwargs.get("config"), kwargs)

    try:
        document = build_index_document(config.documents, config.index)

        if kwargs.get("to_stdout"):
            click.echo(document.text, nl=False)
            sys.exit(EXIT_SUCCESS)

        path = save_index_document(document, bom=config.index.bom)
        click.echo(f"Index written to {path}")
        sys.exit(EXIT_SUCCESS)

    except KeyboardInterrupt:
        click.echo("\nInterrupted.", err=True)
        sys.exit(EXIT_INTERRUPTED)
    except (IndexWriteError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_FAILED)


@main.command()
@click.argument(
    "path",
    required=False,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@click.option("--dry-run", is_flag=True, help="Show what would change without touching files")
@click.option(
    "--mover",
    type=click.Choice(["auto", "git", "plain"]),
    help="Rename backend: git mv, plain rename, or auto-detect (default: auto)",
)
@click.option("--no-rename", is_flag=True, help="Skip the filename pass")
@click.option("--no-headings", is_flag=True, help="Skip the heading pass")
@click.option("--ext", help="Document extension, matched exactly (default: .md)")
@click.option("--ignore", multiple=True, help="Extra name (fnmatch pattern) to skip; repeatable")
@click.option(
    "-c",
    "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to the YAML configuration file",
)
@click.option("-v", "--verbose", count=True, help="More technical logging (-v, -vv)")
@click.option("--quiet", is_flag=True, help="No progress output on stderr")
@click.option("--log-file", type=click.Path(path_type=Path), help="Write JSON logs to this file")
def strip(**kwargs) -> None:  # type: ignore
    """Remove numeric prefixes from document names and headings under PATH.

    "40 littlefs.md" becomes "littlefs.md" and "## 36.1 Setup" becomes
    "## Setup". Running it twice changes nothing the second time.

    Examples:

        \b
        $ docindex strip docs --dry-run

        \b
        # Require git so renames keep their history
        $ docindex strip docs --mover git
    """
    config = _load(kwargs.get("config"), kwargs)
    root = config.documents.root.resolve()
    if not root.is_dir():
        click.echo(f"Error: Not a directory: {root}", err=True)
        sys.exit(EXIT_FAILED)

    try:
        mover = select_mover(config.strip.mover, root)
    except PrerequisiteMissingError as e:
        click.echo(f"Prerequisite missing: {e}. No files were changed.", err=True)
        sys.exit(EXIT_PREREQUISITE_MISSING)

    stripper = PrefixStripper(
        root,
        mover,
        extension=config.documents.extension,
        ignore=config.documents.ignore,
        rename_files=config.strip.rename_files,
        rewrite_headings=config.strip.rewrite_headings,
        dry_run=config.strip.dry_run,
    )

    try:
        report = stripper.run()
    except KeyboardInterrupt:
        click.echo("\nInterrupted.", err=True)
        sys.exit(EXIT_INTERRUPTED)
    except NotADirectoryError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_FAILED)

    for line in report.to_lines():
        click.echo(line)
    if not report.changed and report.ok:
        click.echo("Nothing to change.")

    sys.exit(EXIT_SUCCESS if report.ok else EXIT_PARTIAL)


@main.command("validate-config")
@click.option(
    "-c",
    "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="Path to the configuration file to validate",
)
def validate_config(config: Path) -> None:
    """Validate a YAML configuration file."""
    try:
        app_config = load_config(config_path=config)
    except FileNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)
    except ValidationError as e:
        click.echo(f"Invalid configuration: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)
    except Exception as e:
        click.echo(f"Could not read configuration: {e}", err=True)
        sys.exit(EXIT_FAILED)

    click.echo("Valid configuration")
    click.echo(f"  Root: {app_config.documents.root}")
    click.echo(f"  Extension: {app_config.documents.extension}")
    click.echo(f"  Output: {app_config.index.output}")
    click.echo(f"  Max depth: {app_config.index.max_depth}")
    click.echo(f"  Mover: {app_config.strip.mover}")


if __name__ == "__main__":
    main()
