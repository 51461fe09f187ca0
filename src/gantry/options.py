# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/gantry/options.py
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Optional, TextIO

from packaging.version import Version

DEFAULT_CONFIG_FILE = "gantry.yaml"
DEFAULT_TERRAFORM_PATH = "terraform"


@dataclass
class ExecutionOptions:
    """
    Mutable context for one logical gantry command.

    Never share an instance between two commands; use clone() for nested
    invocations so the argument list and env overlay stay independent.
    """

    config_path: Path
    working_dir: Path
    terraform_path: str = DEFAULT_TERRAFORM_PATH
    terraform_cli_args: List[str] = field(default_factory=list)
    env: Dict[str, str] = field(default_factory=dict)
    iam_role: Optional[str] = None
    auto_init: bool = True
    non_interactive: bool = False
    source: Optional[str] = None
    source_update: bool = False
    ignore_dependency_errors: bool = False
    download_dir: Optional[Path] = None
    writer: TextIO = field(default_factory=lambda: sys.stdout)
    err_writer: TextIO = field(default_factory=lambda: sys.stderr)
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("gantry"))
    terraform_version: Optional[Version] = None

    def clone(self, config_path: str | Path) -> "ExecutionOptions":
        config_path = Path(config_path)
        return replace(
            self,
            config_path=config_path,
            working_dir=config_path.parent,
            terraform_cli_args=list(self.terraform_cli_args),
            env=dict(self.env),
        )

    def first_arg(self) -> str:
        return self.terraform_cli_args[0] if self.terraform_cli_args else ""

    def append_terraform_cli_args(self, *args: str) -> None:
        self.terraform_cli_args.extend(args)

    def insert_terraform_cli_args(self, *args: str) -> None:
        """Insert args right after the command token (or at the front if there is none)."""
        head = self.terraform_cli_args[:1]
        self.terraform_cli_args = head + list(args) + self.terraform_cli_args[1:]

    def effective_download_dir(self) -> Path:
        return self.download_dir or (self.working_dir / ".gantry-cache")
