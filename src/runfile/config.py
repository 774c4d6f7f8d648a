"""Configuration and Runfile discovery."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

import yaml

from runfile.errors import ConfigError, RunfileNotFoundError
from runfile.models import RunConfig

logger = logging.getLogger(__name__)

CONFIG_FILE = ".runfile.yml"
ENV_SHELL = "RUNFILE_SHELL"
ENV_NO_COLOR = "RUNFILE_NO_COLOR"

_FIELD_TYPES: dict[str, type] = {
    "shell": str,
    "runfile_names": list,
    "color": bool,
    "inherit_env": bool,
}


def _config_path(directory: Path) -> Path:
    return directory / CONFIG_FILE


def load_config(directory: Path, environ: Mapping[str, str] | None = None) -> RunConfig:
    """Load settings from ``directory/.runfile.yml`` and the environment.

    A missing file yields the defaults. Environment variables win over the file.
    """
    config = RunConfig()
    path = _config_path(directory)
    if path.exists():
        _apply_file(config, path)
    _apply_env(config, os.environ if environ is None else environ)
    return config


def _apply_file(config: RunConfig, path: Path) -> None:
    try:
        raw = yaml.safe_load(path.read_text())
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if raw is None:
        return
    if not isinstance(raw, dict):
        raise ConfigError(f"Invalid config format in {path}: expected mapping")

    for key, value in raw.items():
        expected = _FIELD_TYPES.get(key)
        if expected is None:
            logger.debug("Ignoring unknown config key '%s' in %s", key, path)
            continue
        if not isinstance(value, expected):
            raise ConfigError(
                f"{path}: '{key}' must be a {expected.__name__}, got {type(value).__name__}"
            )
        if key == "runfile_names" and not all(isinstance(n, str) and n for n in value):
            raise ConfigError(f"{path}: 'runfile_names' must be a list of file names")
        if key == "shell" and not value.strip():
            raise ConfigError(f"{path}: 'shell' must not be empty")
        setattr(config, key, value)
    logger.debug("Loaded config from %s", path)


def _apply_env(config: RunConfig, environ: Mapping[str, str]) -> None:
    shell = environ.get(ENV_SHELL, "").strip()
    if shell:
        config.shell = shell
    if environ.get(ENV_NO_COLOR):
        config.color = False


def find_runfile(start: Path, names: list[str] | None = None) -> Path:
    """Find a Runfile in ``start`` or the nearest parent directory that has one."""
    names = names or RunConfig().runfile_names
    current = start.resolve()
    for directory in (current, *current.parents):
        for name in names:
            candidate = directory / name
            if candidate.is_file():
                logger.debug("Found Runfile at %s", candidate)
                return candidate
    raise RunfileNotFoundError(
        f"No {' or '.join(names)} found in {current} or any parent directory"
    )
