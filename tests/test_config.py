"""Tests for config file loading and merging."""

from __future__ import annotations

from pathlib import Path

import pytest

from ctxrender.config import (
    ConfigError,
    CtxRenderConfig,
    find_config_file,
    load_config,
    merge_settings,
)
from ctxrender.file_resolver import ResolveSettings


def test_find_config_ctxrender_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "ctxrender.toml"
    config_file.write_text("allow-globs = false\n")
    assert find_config_file(tmp_path) == config_file


def test_find_config_dot_ctxrender_toml_takes_precedence(tmp_path: Path) -> None:
    (tmp_path / "ctxrender.toml").write_text("allow-globs = false\n")
    dot_config = tmp_path / ".ctxrender.toml"
    dot_config.write_text("trim-contents = false\n")
    assert find_config_file(tmp_path) == dot_config


def test_find_config_pyproject_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "pyproject.toml"
    config_file.write_text("[tool.ctxrender]\ntrim-contents = false\n")
    assert find_config_file(tmp_path) == config_file


def test_find_config_pyproject_without_section_skipped(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[tool.ruff]\nline-length = 100\n")
    assert find_config_file(tmp_path) is None


def test_find_config_walks_up(tmp_path: Path) -> None:
    config_file = tmp_path / "ctxrender.toml"
    config_file.write_text("allow-globs = true\n")
    subdir = tmp_path / "sub" / "deep"
    subdir.mkdir(parents=True)
    assert find_config_file(subdir) == config_file


def test_find_config_none_when_missing(tmp_path: Path) -> None:
    assert find_config_file(tmp_path) is None


def test_load_config_kebab_and_snake_keys(tmp_path: Path) -> None:
    config_file = tmp_path / "ctxrender.toml"
    config_file.write_text("allow-globs = false\ntrim_contents = false\n")
    config = load_config(config_file)
    assert config == CtxRenderConfig(allow_globs=False, trim_contents=False)


def test_load_config_sections_are_flattened(tmp_path: Path) -> None:
    config_file = tmp_path / "ctxrender.toml"
    config_file.write_text("[inputs]\nallow-globs = false\n")
    assert load_config(config_file).allow_globs is False


def test_load_config_pyproject_section(tmp_path: Path) -> None:
    config_file = tmp_path / "pyproject.toml"
    config_file.write_text("[project]\nname = 'x'\n\n[tool.ctxrender]\ntrim-contents = false\n")
    config = load_config(config_file)
    assert config.trim_contents is False
    assert config.allow_globs is None


def test_load_config_ignores_unknown_keys(tmp_path: Path) -> None:
    config_file = tmp_path / "ctxrender.toml"
    config_file.write_text("color = 'blue'\n")
    assert load_config(config_file) == CtxRenderConfig()


def test_load_config_rejects_non_bool(tmp_path: Path) -> None:
    config_file = tmp_path / "ctxrender.toml"
    config_file.write_text("allow-globs = 'no'\n")
    with pytest.raises(ConfigError, match="allow-globs"):
        load_config(config_file)


def test_load_config_invalid_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "ctxrender.toml"
    config_file.write_text("allow-globs = \n")
    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(config_file)


def test_load_config_not_utf8(tmp_path: Path) -> None:
    config_file = tmp_path / "ctxrender.toml"
    config_file.write_bytes(b"allow-globs = false # \xff\n")
    with pytest.raises(ConfigError, match="not valid UTF-8"):
        load_config(config_file)


def test_load_config_unreadable(tmp_path: Path) -> None:
    config_dir = tmp_path / "ctxrender.toml"
    config_dir.mkdir()
    with pytest.raises(ConfigError, match="Could not read config file"):
        load_config(config_dir)


def test_merge_none_config_returns_settings_unchanged() -> None:
    settings = ResolveSettings()
    assert merge_settings(settings, None, set()) is settings


def test_merge_config_applies_when_not_explicit() -> None:
    config = CtxRenderConfig(allow_globs=False, trim_contents=False)
    merged = merge_settings(ResolveSettings(), config, set())
    assert merged == ResolveSettings(allow_globs=False, trim_contents=False)


def test_merge_explicit_cli_flags_win() -> None:
    config = CtxRenderConfig(allow_globs=True, trim_contents=True)
    settings = ResolveSettings(allow_globs=False, trim_contents=False)
    merged = merge_settings(settings, config, {"allow_globs"})
    assert merged == ResolveSettings(allow_globs=False, trim_contents=True)
