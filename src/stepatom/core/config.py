"""Runner arguments — load / save / merge.

Merge order (later wins):
    1. Model defaults
    2. YAML file values
    3. Environment variables (PPD_ prefix)
    4. Overrides dict (CLI flags)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

from stepatom.core.exceptions import ConfigError
from stepatom.core.models import RunnerArgs

DEFAULT_CONFIG_FILENAME = "stepatom.config.yaml"
ENV_PREFIX = "PPD_"


def load_args(
    config_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> RunnerArgs:
    """Load RunnerArgs from YAML + env vars + overrides.

    Args:
        config_path: Explicit path to YAML config. If None, searches cwd and parents.
        overrides: CLI flag overrides to merge on top.

    Returns:
        Validated RunnerArgs instance.

    Raises:
        ConfigError: If YAML parsing or validation fails.
    """
    if config_path is None:
        config_path = find_config_path()
    yaml_data = read_args_file(config_path)

    # Env vars are collected by hand so they win over YAML once passed as init kwargs.
    merged = {**yaml_data, **_collect_env_vars()}
    if overrides:
        merged.update(overrides)

    try:
        return RunnerArgs(**merged)
    except Exception as e:
        msg = f"Runner args validation failed: {e}"
        raise ConfigError(msg) from e


def save_args(args: RunnerArgs, path: Path) -> None:
    """Save RunnerArgs to a YAML file."""
    data = args.model_dump(mode="json")
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:  # noqa: PTH123
        yaml.dump(data, f, default_flow_style=False, allow_unicode=True, sort_keys=False)


def find_config_path() -> Path:
    """Config file for the current directory.

    Candidates are ``stepatom.config.yaml`` and ``.stepatom/stepatom.config.yaml``
    in cwd, then in each parent. Without a match, the cwd default path.
    """
    cwd = Path.cwd()
    for directory in (cwd, *cwd.parents):
        for candidate in (
            directory / DEFAULT_CONFIG_FILENAME,
            directory / ".stepatom" / DEFAULT_CONFIG_FILENAME,
        ):
            if candidate.is_file():
                return candidate
    return cwd / DEFAULT_CONFIG_FILENAME


def read_args_file(path: Path) -> dict[str, Any]:
    """Raw runner argument mapping of a YAML file; empty when the file is missing or blank."""
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        msg = f"Failed to parse YAML: {path}: {e}"
        raise ConfigError(msg) from e
    except OSError as e:
        msg = f"Failed to read config: {path}: {e}"
        raise ConfigError(msg) from e

    if data is None:
        return {}
    if isinstance(data, dict):
        return data
    msg = f"Config file must be a YAML mapping, got {type(data).__name__}: {path}"
    raise ConfigError(msg)


def _collect_env_vars() -> dict[str, Any]:
    """Collect PPD_ prefixed env vars that name a RunnerArgs field."""
    fields = RunnerArgs.model_fields
    result: dict[str, Any] = {}
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        name = key[len(ENV_PREFIX) :].lower()
        if name in fields:
            result[name] = value
    return result
