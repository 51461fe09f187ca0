# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/gantry/cli/args.py
from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, Sequence, TextIO, Tuple

from ..errors import ArgumentMissingValueError
from ..options import DEFAULT_CONFIG_FILE, DEFAULT_TERRAFORM_PATH, ExecutionOptions

OPT_CONFIG = "gantry-config"
OPT_TFPATH = "gantry-tfpath"
OPT_NO_AUTO_INIT = "gantry-no-auto-init"
OPT_NON_INTERACTIVE = "gantry-non-interactive"
OPT_WORKING_DIR = "gantry-working-dir"
OPT_SOURCE = "gantry-source"
OPT_SOURCE_UPDATE = "gantry-source-update"
OPT_IAM_ROLE = "gantry-iam-role"
OPT_IGNORE_DEPENDENCY_ERRORS = "gantry-ignore-dependency-errors"
OPT_DEBUG = "gantry-debug"

BOOLEAN_OPTS = frozenset({
    OPT_NON_INTERACTIVE,
    OPT_SOURCE_UPDATE,
    OPT_IGNORE_DEPENDENCY_ERRORS,
    OPT_NO_AUTO_INIT,
    OPT_DEBUG,
})
STRING_OPTS = frozenset({OPT_CONFIG, OPT_TFPATH, OPT_WORKING_DIR, OPT_SOURCE, OPT_IAM_ROLE})


def _option_name(arg: str) -> Optional[str]:
    """'--gantry-source=x' / '-gantry-source' -> 'gantry-source', else None."""
    name = arg.lstrip("-").split("=", 1)[0]
    if arg.startswith("-") and (name in BOOLEAN_OPTS or name in STRING_OPTS):
        return name
    return None


def split_gantry_args(args: Sequence[str]) -> Tuple[dict, List[str]]:
    """
    Pull gantry's own options out of *args* (wherever they appear) and
    return them with the remaining args, which are forwarded to terraform.
    """
    parsed: dict = {}
    rest: List[str] = []
    i = 0
    while i < len(args):
        arg = args[i]
        name = _option_name(arg)
        if name is None:
            rest.append(arg)
        elif name in BOOLEAN_OPTS:
            parsed[name] = True
        elif "=" in arg:
            parsed[name] = arg.split("=", 1)[1]
        else:
            if i + 1 >= len(args) or _option_name(args[i + 1]) is not None:
                raise ArgumentMissingValueError(name)
            parsed[name] = args[i + 1]
            i += 1
        i += 1
    return parsed, rest


def parse_options(
    args: Sequence[str],
    *,
    writer: Optional[TextIO] = None,
    err_writer: Optional[TextIO] = None,
    logger: Optional[logging.Logger] = None,
) -> ExecutionOptions:
    parsed, terraform_args = split_gantry_args(args)

    working_dir = Path(parsed.get(OPT_WORKING_DIR) or os.getcwd()).resolve()

    config = parsed.get(OPT_CONFIG) or os.environ.get("GANTRY_CONFIG") or DEFAULT_CONFIG_FILE
    config_path = Path(config)
    if not config_path.is_absolute():
        config_path = working_dir / config_path

    download = os.environ.get("GANTRY_DOWNLOAD")

    return ExecutionOptions(
        config_path=config_path,
        working_dir=working_dir,
        terraform_path=parsed.get(OPT_TFPATH) or os.environ.get("GANTRY_TFPATH") or DEFAULT_TERRAFORM_PATH,
        terraform_cli_args=terraform_args,
        iam_role=parsed.get(OPT_IAM_ROLE) or os.environ.get("GANTRY_IAM_ROLE"),
        auto_init=not parsed.get(OPT_NO_AUTO_INIT, False),
        non_interactive=parsed.get(OPT_NON_INTERACTIVE, False),
        source=parsed.get(OPT_SOURCE),
        source_update=parsed.get(OPT_SOURCE_UPDATE, False),
        ignore_dependency_errors=parsed.get(OPT_IGNORE_DEPENDENCY_ERRORS, False),
        download_dir=Path(download).resolve() if download else None,
        writer=writer or sys.stdout,
        err_writer=err_writer or sys.stderr,
        logger=logger or logging.getLogger("gantry"),
    )


def debug_requested(args: Sequence[str]) -> bool:
    return any(_option_name(a) == OPT_DEBUG for a in args)
