"""
Tests para la carga de configuración.

Cubre deep_merge, YAML, variables de entorno, overrides de CLI y
validación de los schemas Pydantic.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from docindex.config import AppConfig, load_config
from docindex.config.loader import (
    apply_cli_overrides,
    deep_merge,
    load_env_overrides,
    load_yaml_config,
)

_ENV_VARS = (
    "DOCINDEX_ROOT",
    "DOCINDEX_OUTPUT",
    "DOCINDEX_TITLE",
    "DOCINDEX_MAX_DEPTH",
    "DOCINDEX_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def yaml_file(tmp_path: Path) -> Path:
    path = tmp_path / "docindex.yaml"
    path.write_text(
        "documents:\n"
        "  extension: .rst\n"
        "  ignore: ['.git', '_build']\n"
        "index:\n"
        "  title: Manual\n"
        "  bom: true\n"
        "strip:\n"
        "  mover: plain\n",
        encoding="utf-8",
    )
    return path


class TestDefaults:

    def test_defaults(self) -> None:
        config = AppConfig()
        assert config.documents.root == Path(".")
        assert config.documents.extension == ".md"
        assert config.documents.ignore == [".git"]
        assert config.index.output == "README.md"
        assert config.index.title == "Title"
        assert config.index.max_depth == 10
        assert config.index.exclude_output is True
        assert config.strip.mover == "auto"
        assert config.logging.level == "human"

    def test_unknown_keys_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AppConfig(index={"depth": 3})

    def test_negative_depth_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AppConfig(index={"max_depth": -1})

    def test_empty_extension_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AppConfig(documents={"extension": ""})

    def test_unknown_mover_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AppConfig(strip={"mover": "svn"})


class TestDeepMerge:

    def test_nested(self) -> None:
        base = {"a": {"b": 1, "c": 2}, "d": 3}
        override = {"a": {"b": 99}, "e": 4}
        assert deep_merge(base, override) == {"a": {"b": 99, "c": 2}, "d": 3, "e": 4}

    def test_base_not_mutated(self) -> None:
        base = {"a": {"b": 1}}
        deep_merge(base, {"a": {"b": 2}})
        assert base == {"a": {"b": 1}}


class TestYaml:

    def test_none_path(self) -> None:
        assert load_yaml_config(None) == {}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_yaml_config(tmp_path / "nope.yaml")

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_yaml_config(path) == {}

    def test_values_loaded(self, yaml_file: Path) -> None:
        config = load_config(config_path=yaml_file)
        assert config.documents.extension == ".rst"
        assert config.documents.ignore == [".git", "_build"]
        assert config.index.title == "Manual"
        assert config.index.bom is True
        assert config.index.output == "README.md"
        assert config.strip.mover == "plain"


class TestEnv:

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DOCINDEX_TITLE", "From env")
        monkeypatch.setenv("DOCINDEX_MAX_DEPTH", "4")
        monkeypatch.setenv("DOCINDEX_LOG_LEVEL", "DEBUG")
        assert load_env_overrides() == {
            "index": {"title": "From env", "max_depth": "4"},
            "logging": {"level": "debug"},
        }

        config = load_config()
        assert config.index.max_depth == 4

    def test_env_beats_yaml(self, yaml_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DOCINDEX_TITLE", "From env")
        assert load_config(config_path=yaml_file).index.title == "From env"


class TestCliOverrides:

    def test_cli_beats_env_and_yaml(self, yaml_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DOCINDEX_TITLE", "From env")
        config = load_config(config_path=yaml_file, cli_args={"title": "From CLI", "max_depth": 0})
        assert config.index.title == "From CLI"
        assert config.index.max_depth == 0

    def test_unset_flags_keep_yaml_values(self, yaml_file: Path) -> None:
        config = load_config(
            config_path=yaml_file,
            cli_args={"bom": False, "dry_run": False, "mover": None, "ignore": ()},
        )
        assert config.index.bom is True
        assert config.strip.mover == "plain"
        assert config.documents.ignore == [".git", "_build"]

    def test_ignore_appends(self, yaml_file: Path) -> None:
        config = load_config(config_path=yaml_file, cli_args={"ignore": ("drafts",)})
        assert config.documents.ignore == [".git", "_build", "drafts"]

    def test_ignore_appends_to_default(self) -> None:
        config = load_config(cli_args={"ignore": ("drafts",)})
        assert config.documents.ignore == [".git", "drafts"]

    def test_strip_flags(self) -> None:
        merged = apply_cli_overrides({}, {"no_rename": True, "no_headings": True, "dry_run": True})
        assert merged == {
            "strip": {"rename_files": False, "rewrite_headings": False, "dry_run": True},
        }

    def test_path_and_logging(self, tmp_path: Path) -> None:
        config = load_config(cli_args={"path": tmp_path, "verbose": 2, "log_file": tmp_path / "log.json"})
        assert config.documents.root == tmp_path
        assert config.logging.verbose == 2
        assert config.logging.file == tmp_path / "log.json"
