# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# bundle-diff/src/bundle_diff/config.py

"""Locate and load .bundlediffrc.json."""

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from .categorize import compile_categories
from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".bundlediffrc.json"
DEFAULT_CONFIG_PATH = Path(__file__).parent / "default_config.json"


@dataclass(frozen=True)
class BuildConfig:
    command: str | None = None
    path: str | None = None
    env: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Config:
    build: BuildConfig = field(default_factory=BuildConfig)
    categories: dict[str, re.Pattern] = field(default_factory=dict)


def find_config(start: Path | str | None = None) -> Path:
    """Walk up from start looking for a config file.

    Falls back to the config bundled with the package when the
    filesystem root is reached without a match.
    """
    directory = Path(start or Path.cwd()).resolve()
    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / CONFIG_FILENAME
        if candidate.is_file():
            logger.debug("Using config %s", candidate)
            return candidate
    logger.debug("No %s found, using bundled default", CONFIG_FILENAME)
    return DEFAULT_CONFIG_PATH


def check_config_path(path: Path | str) -> Path:
    resolved = Path(path).resolve()
    if not resolved.exists():
        raise ConfigError("Provided config path does not exist")
    if not resolved.is_file():
        raise ConfigError("Provided config path must point to a file")
    return resolved


def load_config(path: Path | str) -> Config:
    """Parse a config file into build options and compiled categories."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    except ValueError as e:
        raise ConfigError(f"Config {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must contain a JSON object")

    return Config(
        build=_parse_build(data.get("build") or {}, path),
        categories=_parse_categories(data.get("categories") or {}, path),
    )


def _parse_build(data: object, path: Path | str) -> BuildConfig:
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path}: 'build' must be an object")

    command = data.get("command")
    build_path = data.get("path")
    env = data.get("env") or {}
    for key, value in (("command", command), ("path", build_path)):
        if value is not None and not isinstance(value, str):
            raise ConfigError(f"Config {path}: 'build.{key}' must be a string")
    if not isinstance(env, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in env.items()
    ):
        raise ConfigError(f"Config {path}: 'build.env' must map strings to strings")

    return BuildConfig(command=command, path=build_path, env=dict(env))


def _parse_categories(data: object, path: Path | str) -> dict[str, re.Pattern]:
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path}: 'categories' must be an object")
    for name, pattern in data.items():
        if not isinstance(pattern, str):
            raise ConfigError(f"Config {path}: pattern for '{name}' must be a string")
    return compile_categories(data)
