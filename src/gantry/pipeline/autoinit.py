# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/gantry/pipeline/autoinit.py
from __future__ import annotations

import glob
import re
from typing import Optional

from ..config.models import GantryConfig
from ..options import ExecutionOptions
from ..remote.state import RemoteStateSpec
from ..scanner import SourceScanner

COMMANDS_THAT_USE_STATE = frozenset({
    "init",
    "apply",
    "destroy",
    "env",
    "import",
    "graph",
    "output",
    "plan",
    "push",
    "refresh",
    "show",
    "taint",
    "untaint",
    "validate",
    "force-unlock",
    "state",
})

COMMANDS_THAT_DO_NOT_NEED_INIT = frozenset({"version"})

MODULE_REGEX = re.compile(r'module[ \t]+".+"')

TERRAFORM_EXTENSION_GLOB = "*.tf"


def needs_init(options: ExecutionOptions, config: GantryConfig, scanner: SourceScanner) -> bool:
    """Whether `terraform init` has to run before the requested command."""
    if options.first_arg() in COMMANDS_THAT_DO_NOT_NEED_INIT:
        return False

    if providers_need_init(options, scanner):
        return True

    if modules_need_init(options, scanner):
        return True

    return remote_state_needs_init(config.remote_state, options)


def providers_need_init(options: ExecutionOptions, scanner: SourceScanner) -> bool:
    return not scanner.exists(options.working_dir / ".terraform" / "plugins")


def modules_need_init(options: ExecutionOptions, scanner: SourceScanner) -> bool:
    """
    True if modules were never downloaded and the code references modules.
    Out-of-date (as opposed to missing) modules are not detected.
    """
    if scanner.exists(options.working_dir / ".terraform" / "modules"):
        return False
    return scanner.scan_matches(MODULE_REGEX, f"{glob.escape(str(options.working_dir))}/{TERRAFORM_EXTENSION_GLOB}")


def remote_state_needs_init(remote_state: Optional[RemoteStateSpec], options: ExecutionOptions) -> bool:
    # "get" and "version" never touch state, so remote state is left alone for them
    if remote_state is not None and options.first_arg() in COMMANDS_THAT_USE_STATE:
        return remote_state.needs_init(options)
    return False
