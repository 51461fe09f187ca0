# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/gantry/pipeline/init.py
from __future__ import annotations

from typing import Callable, Optional

from packaging.version import Version

from ..config.models import GantryConfig
from ..errors import InitNeededButDisabledError
from ..options import ExecutionOptions
from ..scanner import SourceScanner
from ..source import TerraformSource
from .autoinit import remote_state_needs_init
from .safety import verify_source_download_arguments

CMD_INIT = "init"

# Before 0.10.0 terraform took the module source as a positional argument
# instead of -from-module.
FROM_MODULE_MIN_VERSION = Version("0.10.0")

RunWithConfig = Callable[[ExecutionOptions, GantryConfig, bool], None]


class InitInvoker:
    """
    Builds and runs the `terraform init` sub-invocation (Auto-Init), either
    plain or with the arguments that download a module source.
    """

    def __init__(self, run_with_config: RunWithConfig, scanner: SourceScanner):
        self._run_with_config = run_with_config
        self._scanner = scanner

    def run_terraform_init(
        self,
        options: ExecutionOptions,
        config: GantryConfig,
        terraform_source: Optional[TerraformSource] = None,
    ) -> None:
        """
        *options* are those of the command the user asked for; they are
        cloned, never modified. Refuses to run when auto-init is disabled
        and the user's command is not itself init.
        """
        if options.first_arg() != CMD_INIT and not options.auto_init:
            raise InitNeededButDisabledError(
                "Cannot continue because init is needed, but Auto-Init is disabled.  "
                "You must run 'gantry init' manually."
            )

        init_options = options.clone(options.config_path)
        init_options.terraform_cli_args = [CMD_INIT]
        init_options.working_dir = options.working_dir

        # init chatter goes to stderr so it doesn't pollute the real command's output
        init_options.writer = init_options.err_writer

        download_source = terraform_source is not None
        if download_source:
            init_options.working_dir = terraform_source.working_dir
            if not self._scanner.exists(terraform_source.working_dir):
                terraform_source.working_dir.mkdir(parents=True, exist_ok=True)

            init_options.append_terraform_cli_args(*source_download_args(options.terraform_version, terraform_source))

        options.logger.debug("Running auto-init with args %s", init_options.terraform_cli_args)
        self._run_with_config(init_options, config, download_source)

    def prepare_init_command(
        self,
        options: ExecutionOptions,
        config: GantryConfig,
        allow_source_download: bool,
    ) -> None:
        """
        Reject user-supplied source arguments, set up remote state storage if
        needed and add the backend config arguments to the init command.
        """
        verify_source_download_arguments(allow_source_download, options)

        remote_state = config.remote_state
        if remote_state is None:
            return

        if remote_state_needs_init(remote_state, options):
            remote_state.initialize(options)

        options.insert_terraform_cli_args(*remote_state.to_init_args())


def source_download_args(version: Optional[Version], terraform_source: TerraformSource) -> list[str]:
    url = terraform_source.canonical_source_url
    if version is not None and version < FROM_MODULE_MIN_VERSION:
        args = [url]
    else:
        args = [f"-from-module={url}"]
    args.append(str(terraform_source.download_dir))
    return args
