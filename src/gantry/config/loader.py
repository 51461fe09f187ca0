# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/gantry/config/loader.py

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..errors import ConfigLoadError
from ..options import ExecutionOptions
from .models import GantryConfig

log = logging.getLogger("gantry")


def _load_yaml(path: Path) -> dict:
    """Load a YAML file, expanding ${ENV_VAR} references."""
    raw = path.read_text(encoding="utf-8")
    expanded = os.path.expandvars(raw)
    return yaml.safe_load(expanded) or {}


def read_config_file(path: str | Path) -> GantryConfig:
    """
    Load and validate a gantry module config.

    An empty file is a valid config: the module has no remote state, no
    source and no extra arguments.
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigLoadError(path, "file does not exist")
    try:
        data = _load_yaml(path)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        raise ConfigLoadError(path, str(exc)) from exc
    if not isinstance(data, dict):
        raise ConfigLoadError(path, "top level must be a mapping")
    try:
        return GantryConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigLoadError(path, str(exc)) from exc


def load_config(options: ExecutionOptions) -> GantryConfig:
    log.debug("Reading gantry config %s", options.config_path)
    return read_config_file(options.config_path)
