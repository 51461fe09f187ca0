# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/gantry/remote/state.py
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from ..options import ExecutionOptions

log = logging.getLogger("gantry")

# Local copy of the backend settings terraform writes during init.
TERRAFORM_STATE_FILE = Path(".terraform") / "terraform.tfstate"

# Backend-specific storage setup (bucket/table creation). Swap for a plugin
# system if more than a handful of backends need one.
_INITIALIZERS: Dict[str, Callable[["RemoteStateSpec", "ExecutionOptions"], None]] = {}


def register_initializer(backend: str):
    """Decorator to register a storage initializer for a backend type."""
    def _wrap(fn: Callable[["RemoteStateSpec", "ExecutionOptions"], None]):
        _INITIALIZERS[backend] = fn
        return fn
    return _wrap


def has_initializer(backend: str) -> bool:
    return backend in _INITIALIZERS


class RemoteStateSpec(BaseModel):
    backend: str
    config: Dict[str, Any] = Field(default_factory=dict)

    def needs_init(self, options: "ExecutionOptions") -> bool:
        """
        True unless terraform has already been initialized against exactly
        this backend type and config in the working dir.
        """
        state = _read_local_backend(options.working_dir / TERRAFORM_STATE_FILE)
        if state is None:
            return True
        if state.get("type") != self.backend:
            log.debug("Backend type changed from %s to %s", state.get("type"), self.backend)
            return True
        existing = {k: _stringify(v) for k, v in (state.get("config") or {}).items()}
        for key, value in self.config.items():
            if existing.get(key) != _stringify(value):
                log.debug("Backend config %s changed; init is needed", key)
                return True
        return False

    def initialize(self, options: "ExecutionOptions") -> None:
        if not has_initializer(self.backend):
            options.logger.debug("No storage initializer registered for backend %s", self.backend)
            return
        options.logger.info("Initializing remote state for the %s backend", self.backend)
        _INITIALIZERS[self.backend](self, options)

    def to_init_args(self) -> List[str]:
        return [f"-backend-config={key}={_stringify(self.config[key])}" for key in sorted(self.config)]


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _read_local_backend(path: Path) -> Optional[dict]:
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text())
    except (OSError, ValueError):
        log.debug("Unreadable local state file %s; treating as uninitialized", path)
        return None
    backend = data.get("backend") if isinstance(data, dict) else None
    return backend if isinstance(backend, dict) else None
