# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/gantry/pipeline/safety.py
from __future__ import annotations

from ..errors import ArgumentNotAllowedError
from ..options import ExecutionOptions

FROM_MODULE_NOT_ALLOWED = "Option not allowed: %s.  gantry will handle setting -from-module automatically."
POSITIONAL_NOT_ALLOWED = (
    "Argument not allowed: %s.  gantry will handle setting the module source and DIR arguments automatically."
)


def verify_source_download_arguments(allow_source_download: bool, options: ExecutionOptions) -> None:
    """
    Only gantry itself may pass the module source / DIR arguments to init.
    Users (on the command line or via extra_arguments) get an error.
    """
    if allow_source_download or len(options.terraform_cli_args) <= 1:
        return

    for arg in options.terraform_cli_args[1:]:
        if "-from-module" in arg:
            raise ArgumentNotAllowedError(arg, FROM_MODULE_NOT_ALLOWED)
        if not arg.startswith("-"):
            raise ArgumentNotAllowedError(arg, POSITIONAL_NOT_ALLOWED)
