# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/gantry/cli/app.py
from __future__ import annotations

import logging
import sys
from typing import Callable, List, Optional, Sequence, TextIO

import typer

from gantry import __version__
from gantry.cli.args import debug_requested, parse_options
from gantry.cli.router import CommandRouter, check_deprecated
from gantry.engine.shell import EngineInvoker
from gantry.engine.version import (
    DEFAULT_TERRAFORM_VERSION_CONSTRAINT,
    check_terraform_version,
    populate_terraform_version,
)
from gantry.errors import GantryError, UnexpectedError
from gantry.logging.log import init_logging
from gantry.pipeline.runner import CommandPipeline

USAGE_TEXT = f"""DESCRIPTION:
   gantry {__version__} - a thin wrapper for Terraform that provides extra tools for working with
   multiple Terraform modules, remote state, and locking.

USAGE:
   gantry <COMMAND> [terraform args] [gantry options]

COMMANDS:
   plan-all             Display the plans of a 'stack' by running 'gantry plan' in each subfolder
   apply-all            Apply a 'stack' by running 'gantry apply' in each subfolder
   output-all           Display the outputs of a 'stack' by running 'gantry output' in each subfolder
   destroy-all          Destroy a 'stack' by running 'gantry destroy' in each subfolder
   validate-all         Validate 'stack' by running 'gantry validate' in each subfolder
   *                    gantry forwards all other commands directly to Terraform

GLOBAL OPTIONS:
   --gantry-config                    Path to the gantry config file. Default is gantry.yaml.
   --gantry-tfpath                    Path to the Terraform binary. Default is terraform (on PATH).
   --gantry-no-auto-init              Don't automatically run 'terraform init' during other gantry commands.
                                      You must run 'gantry init' manually.
   --gantry-non-interactive           Assume "yes" for all prompts.
   --gantry-working-dir               The path to the Terraform templates. Default is current directory.
   --gantry-source                    Download Terraform configurations from the specified source into a
                                      temporary folder, and run Terraform in that temporary folder.
   --gantry-source-update             Delete the contents of the temporary folder before downloading
                                      new source code into it.
   --gantry-iam-role                  Assume the specified IAM role before executing Terraform.
                                      Can also be set via the GANTRY_IAM_ROLE environment variable.
   --gantry-ignore-dependency-errors  *-all commands continue processing modules even if a dependency fails.
   --gantry-debug                     Print debug logs to the console.
"""

ExitFn = Callable[[int], None]

app = typer.Typer(help="gantry - orchestration for Terraform modules", add_completion=False)


# ------------------------------------------------------------------------------
# Application
# ------------------------------------------------------------------------------

def run_app(
    args: Sequence[str],
    *,
    router: Optional[CommandRouter] = None,
    engine: Optional[EngineInvoker] = None,
    writer: Optional[TextIO] = None,
    err_writer: Optional[TextIO] = None,
    logger: Optional[logging.Logger] = None,
) -> None:
    writer = writer or sys.stdout
    err_writer = err_writer or sys.stderr

    if not args:
        writer.write(USAGE_TEXT)
        return

    options = parse_options(args, writer=writer, err_writer=err_writer, logger=logger)

    engine = engine or EngineInvoker()
    populate_terraform_version(options, engine)
    check_terraform_version(DEFAULT_TERRAFORM_VERSION_CONSTRAINT, options)

    router = router or CommandRouter(CommandPipeline(engine=engine))
    command = check_deprecated(options.first_arg(), options)
    router.run_command(command, options)


def run_guarded(args: Sequence[str], *, logger: Optional[logging.Logger] = None, **kwargs) -> int:
    """
    The recovery boundary: every failure below this point ends up as a
    logged message and an exit code, never as an uncaught exception.
    """
    logger = logger or logging.getLogger("gantry")
    try:
        run_app(args, logger=logger, **kwargs)
    except GantryError as exc:
        logger.debug("Error trace", exc_info=True)
        logger.error("%s", exc)
        return exc.exit_code
    except Exception as exc:
        err = UnexpectedError(exc)
        logger.debug("Unexpected error trace", exc_info=True)
        logger.error("%s", err)
        return err.exit_code
    return 0


# ------------------------------------------------------------------------------
# CLI entry
# ------------------------------------------------------------------------------

@app.command(
    context_settings={
        "allow_extra_args": True,
        "ignore_unknown_options": True,
        "help_option_names": [],
    }
)
def gantry(ctx: typer.Context) -> int:
    logger, _, _ = init_logging(verbose=debug_requested(ctx.args))
    return run_guarded(list(ctx.args), logger=logger)


def main(argv: Optional[List[str]] = None, *, exit_fn: ExitFn = sys.exit) -> None:
    """Console-script entry. Tests pass their own exit_fn instead of sys.exit."""
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        code = app(args=args, prog_name="gantry", standalone_mode=False)
    except Exception as exc:
        # log setup and argument parsing fail here, before run_guarded
        err = exc if isinstance(exc, GantryError) else UnexpectedError(exc)
        logging.getLogger("gantry").error("%s", err)
        code = err.exit_code
    exit_fn(code or 0)


if __name__ == "__main__":
    main()
