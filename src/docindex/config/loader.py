"""
Cargador de configuración con deep merge.

Orden de precedencia (de menor a mayor):
1. Defaults (definidos en los schemas Pydantic)
2. Archivo YAML
3. Variables de entorno
4. Argumentos CLI

El merge es recursivo para preservar todas las claves en todos los niveles.
"""

import os
from pathlib import Path
from typing import Any

import yaml

from .schema import AppConfig


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge recursivo de diccionarios.

    Args:
        base: Diccionario base
        override: Diccionario que sobreescribe valores del base

    Returns:
        Nuevo diccionario con valores merged. Override gana en conflictos de hojas.

    Example:
        >>> base = {"a": {"b": 1, "c": 2}, "d": 3}
        >>> override = {"a": {"b": 99}, "e": 4}
        >>> deep_merge(base, override)
        {"a": {"b": 99, "c": 2}, "d": 3, "e": 4}
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml_config(config_path: Path | None) -> dict[str, Any]:
    """Carga configuración desde archivo YAML.

    Args:
        config_path: Path al archivo YAML, o None para omitir

    Returns:
        Diccionario con la configuración, o dict vacío si no hay archivo
    """
    if not config_path:
        return {}

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
        return data if data else {}


def load_env_overrides() -> dict[str, Any]:
    """Carga overrides desde variables de entorno.

    Variables soportadas:
        DOCINDEX_ROOT: sobreescribe documents.root
        DOCINDEX_OUTPUT: sobreescribe index.output
        DOCINDEX_TITLE: sobreescribe index.title
        DOCINDEX_MAX_DEPTH: sobreescribe index.max_depth
        DOCINDEX_LOG_LEVEL: sobreescribe logging.level

    Returns:
        Diccionario con overrides desde env vars
    """
    overrides: dict[str, Any] = {}

    if root := os.environ.get("DOCINDEX_ROOT"):
        overrides.setdefault("documents", {})["root"] = root

    if output := os.environ.get("DOCINDEX_OUTPUT"):
        overrides.setdefault("index", {})["output"] = output

    if title := os.environ.get("DOCINDEX_TITLE"):
        overrides.setdefault("index", {})["title"] = title

    # Pydantic valida el entero; aquí solo se transporta el string
    if max_depth := os.environ.get("DOCINDEX_MAX_DEPTH"):
        overrides.setdefault("index", {})["max_depth"] = max_depth

    if log_level := os.environ.get("DOCINDEX_LOG_LEVEL"):
        overrides.setdefault("logging", {})["level"] = log_level.lower()

    return overrides


def apply_cli_overrides(config_dict: dict[str, Any], cli_args: dict[str, Any]) -> dict[str, Any]:
    """Aplica overrides desde argumentos CLI.

    Los flags booleanos solo se aplican cuando están activos, para no
    pisar con False un valor puesto a True en el YAML.

    Args:
        config_dict: Configuración base (ya merged con YAML y env)
        cli_args: Diccionario con argumentos CLI

    Returns:
        Configuración con overrides de CLI aplicados
    """
    overrides: dict[str, Any] = {}

    # Documents
    if cli_args.get("path"):
        overrides.setdefault("documents", {})["root"] = cli_args["path"]

    if cli_args.get("ext"):
        overrides.setdefault("documents", {})["extension"] = cli_args["ext"]

    if cli_args.get("ignore"):
        # --ignore añade a la lista configurada, no la reemplaza
        current = config_dict.get("documents", {}).get("ignore", [".git"])
        overrides.setdefault("documents", {})["ignore"] = list(current) + list(cli_args["ignore"])

    # Index
    if cli_args.get("output"):
        overrides.setdefault("index", {})["output"] = cli_args["output"]

    if cli_args.get("title"):
        overrides.setdefault("index", {})["title"] = cli_args["title"]

    if cli_args.get("max_depth") is not None:
        overrides.setdefault("index", {})["max_depth"] = cli_args["max_depth"]

    if cli_args.get("bom"):
        overrides.setdefault("index", {})["bom"] = True

    # Strip
    if cli_args.get("mover"):
        overrides.setdefault("strip", {})["mover"] = cli_args["mover"]

    if cli_args.get("dry_run"):
        overrides.setdefault("strip", {})["dry_run"] = True

    if cli_args.get("no_rename"):
        overrides.setdefault("strip", {})["rename_files"] = False

    if cli_args.get("no_headings"):
        overrides.setdefault("strip", {})["rewrite_headings"] = False

    # Logging
    if cli_args.get("log_file"):
        overrides.setdefault("logging", {})["file"] = cli_args["log_file"]

    if cli_args.get("verbose"):
        overrides.setdefault("logging", {})["verbose"] = cli_args["verbose"]

    return deep_merge(config_dict, overrides)


def load_config(
    config_path: Path | None = None,
    cli_args: dict[str, Any] | None = None,
) -> AppConfig:
    """Carga y valida la configuración completa de la aplicación.

    Proceso de carga:
    1. Cargar defaults de Pydantic
    2. Merge con YAML (si existe)
    3. Merge con env vars
    4. Merge con CLI args
    5. Validar con Pydantic

    Args:
        config_path: Path al archivo YAML de configuración
        cli_args: Diccionario con argumentos de la CLI

    Returns:
        AppConfig validado y completo

    Raises:
        FileNotFoundError: Si config_path no existe
        ValidationError: Si la configuración final no es válida
    """
    cli_args = cli_args or {}

    yaml_config = load_yaml_config(config_path)

    env_overrides = load_env_overrides()
    merged = deep_merge(yaml_config, env_overrides)

    merged = apply_cli_overrides(merged, cli_args)

    # Pydantic aplica los defaults automáticamente
    return AppConfig(**merged)
