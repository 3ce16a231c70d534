"""
TOML-based config file loading for ctxrender.

Searches for `.ctxrender.toml`, `ctxrender.toml`, or `pyproject.toml [tool.ctxrender]`
walking up from the current directory. Config values are merged with CLI flags
using three-way precedence: explicit CLI flags > config file > built-in defaults.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, cast

from ctxrender.file_resolver import ResolveSettings

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]


class ConfigError(ValueError):
    """A config file exists but could not be parsed or has invalid values."""


@dataclass
class CtxRenderConfig:
    """
    Parsed config from a TOML file. Fields are `None` when not set in the config,
    allowing the merge logic to distinguish "not configured" from "explicitly set
    to default value".
    """

    allow_globs: bool | None = None
    trim_contents: bool | None = None


# Config file search order (first match wins within each directory level)
_CONFIG_FILENAMES = [".ctxrender.toml", "ctxrender.toml", "pyproject.toml"]

_VALID_FIELDS = {f.name for f in fields(CtxRenderConfig)}


def find_config_file(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` looking for a config file. Returns the first
    found, or `None`. Search order per directory: `.ctxrender.toml` >
    `ctxrender.toml` > `pyproject.toml` (only if it has `[tool.ctxrender]`).
    """
    current = start_dir.resolve()
    while True:
        for filename in _CONFIG_FILENAMES:
            candidate = current / filename
            if candidate.is_file():
                if filename == "pyproject.toml":
                    if _pyproject_has_ctxrender_section(candidate):
                        return candidate
                else:
                    return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def _pyproject_has_ctxrender_section(path: Path) -> bool:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
        return "ctxrender" in data.get("tool", {})
    except (tomllib.TOMLDecodeError, OSError):
        return False


def load_config(config_path: Path) -> CtxRenderConfig:
    """
    Load a `CtxRenderConfig` from a TOML file. Supports both standalone
    `ctxrender.toml` / `.ctxrender.toml` and `pyproject.toml` (extracts
    `[tool.ctxrender]`). TOML kebab-case keys are mapped to Python snake_case.
    """
    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e
    except UnicodeDecodeError as e:
        raise ConfigError(f"Config file {config_path} is not valid UTF-8 text") from e
    except OSError as e:
        raise ConfigError(f"Could not read config file {config_path}: {e.strerror or e}") from e

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get("ctxrender", {})

    return _parse_config_data(data, config_path)


def _parse_config_data(data: dict[str, Any], source: Path | None = None) -> CtxRenderConfig:
    """Parse a flat or sectioned TOML dict into `CtxRenderConfig`."""
    # Flatten sections: e.g. [inputs] merges into top level
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            for sub_key, sub_value in cast(dict[str, Any], value).items():
                flat[sub_key] = sub_value
        else:
            flat[key] = value

    mapped: dict[str, Any] = {}
    for key, value in flat.items():
        snake_key = key.replace("-", "_")
        if snake_key not in _VALID_FIELDS:
            continue
        if not isinstance(value, bool):
            where = f" in {source}" if source else ""
            raise ConfigError(f"Config key '{key}'{where} must be true or false, got {value!r}")
        mapped[snake_key] = value

    return CtxRenderConfig(**mapped)


def merge_settings(
    settings: ResolveSettings,
    config: CtxRenderConfig | None,
    explicit_flags: set[str],
) -> ResolveSettings:
    """
    Apply config values to `settings`, skipping any field the user set explicitly
    on the command line. Returns a new `ResolveSettings`.
    """
    if config is None:
        return settings

    if config.allow_globs is not None and "allow_globs" not in explicit_flags:
        settings = settings.with_allow_globs(config.allow_globs)
    if config.trim_contents is not None and "trim_contents" not in explicit_flags:
        settings = settings.with_trim_contents(config.trim_contents)
    return settings
