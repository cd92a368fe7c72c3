"""Tests for RunnerArgs loading, saving, and layered merge."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
import yaml

from stepatom.core.config import (
    DEFAULT_CONFIG_FILENAME,
    _collect_env_vars,
    find_config_path,
    load_args,
    read_args_file,
    save_args,
)
from stepatom.core.exceptions import ConfigError
from stepatom.core.models import RunnerArgs


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for key in list(os.environ):
        if key.startswith("PPD_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


# ── Defaults ──


class TestDefaults:
    def test_default_values(self) -> None:
        args = RunnerArgs()
        assert args.log_extend is False
        assert args.output == "output"
        assert args.log_width == 120
        assert args.log_file_name == "output.log"

    def test_is_base_settings(self) -> None:
        from pydantic_settings import BaseSettings

        assert issubclass(RunnerArgs, BaseSettings)

    def test_env_var_read_by_model(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PPD_LOG_EXTEND", "true")
        assert RunnerArgs().log_extend is True


# ── YAML Loading ──


class TestYAMLLoading:
    def test_load_from_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / DEFAULT_CONFIG_FILENAME
        yaml_file.write_text(yaml.dump({"log_extend": True, "output": "runs"}), encoding="utf-8")
        args = load_args(config_path=yaml_file)
        assert args.log_extend is True
        assert args.output == "runs"

    def test_found_in_cwd(self, tmp_path: Path) -> None:
        (tmp_path / DEFAULT_CONFIG_FILENAME).write_text("log_width: 200\n", encoding="utf-8")
        assert load_args().log_width == 200

    def test_found_in_hidden_dir(self, tmp_path: Path) -> None:
        hidden = tmp_path / ".stepatom"
        hidden.mkdir()
        (hidden / DEFAULT_CONFIG_FILENAME).write_text("output: hidden\n", encoding="utf-8")
        assert load_args().output == "hidden"

    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        args = load_args(config_path=tmp_path / "nope.yaml")
        assert args == RunnerArgs()

    def test_empty_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("", encoding="utf-8")
        assert read_args_file(yaml_file) == {}

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "bad.yaml"
        yaml_file.write_text("log_extend: [unclosed", encoding="utf-8")
        with pytest.raises(ConfigError, match="Failed to parse YAML"):
            load_args(config_path=yaml_file)

    def test_non_mapping_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="must be a YAML mapping"):
            load_args(config_path=yaml_file)

    def test_validation_error(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "bad_values.yaml"
        yaml_file.write_text("log_width: 5\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="validation failed"):
            load_args(config_path=yaml_file)


# ── Merge order ──


class TestMergeOrder:
    def test_env_overrides_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        yaml_file = tmp_path / DEFAULT_CONFIG_FILENAME
        yaml_file.write_text("output: from-yaml\n", encoding="utf-8")
        monkeypatch.setenv("PPD_OUTPUT", "from-env")
        assert load_args(config_path=yaml_file).output == "from-env"

    def test_overrides_win(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PPD_LOG_EXTEND", "false")
        args = load_args(config_path=tmp_path / "none.yaml", overrides={"log_extend": True})
        assert args.log_extend is True

    def test_collect_env_vars_ignores_unknown(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PPD_LOG_WIDTH", "150")
        monkeypatch.setenv("PPD_SOMETHING_ELSE", "x")
        assert _collect_env_vars() == {"log_width": "150"}


# ── Save ──


class TestSave:
    def test_save_and_reload(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / DEFAULT_CONFIG_FILENAME
        save_args(RunnerArgs(log_extend=True, log_width=90), path)
        reloaded = load_args(config_path=path)
        assert reloaded.log_extend is True
        assert reloaded.log_width == 90

    def test_find_config_path_default(self, tmp_path: Path) -> None:
        assert find_config_path() == tmp_path / DEFAULT_CONFIG_FILENAME

    def test_find_config_path_in_parent(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        config = tmp_path / DEFAULT_CONFIG_FILENAME
        config.write_text("output: parent\n", encoding="utf-8")
        child = tmp_path / "a" / "b"
        child.mkdir(parents=True)
        monkeypatch.chdir(child)
        assert find_config_path() == config
        assert load_args().output == "parent"

    def test_read_missing_file(self, tmp_path: Path) -> None:
        assert read_args_file(tmp_path / "absent.yaml") == {}
