# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/gantry/pipeline/runner.py
from __future__ import annotations

from typing import Callable, Optional

from ..config.loader import load_config
from ..config.models import GantryConfig
from ..credentials import CredentialProvider, StsCredentialProvider
from ..engine.shell import EngineInvoker
from ..options import ExecutionOptions
from ..scanner import GlobScanner, SourceScanner
from ..source import SourceDownloader, TerraformSource, get_terraform_source_url
from .autoinit import needs_init
from .backend import check_terraform_code_defines_backend
from .init import CMD_INIT, InitInvoker

ConfigLoader = Callable[[ExecutionOptions], GantryConfig]


class CommandPipeline:
    """
    Runs one terraform command against one module:
    config -> IAM role -> source download -> backend check ->
    extra_arguments -> (auto-)init -> terraform.
    """

    def __init__(
        self,
        *,
        config_loader: ConfigLoader = load_config,
        credentials: Optional[CredentialProvider] = None,
        downloader: Optional[SourceDownloader] = None,
        engine: Optional[EngineInvoker] = None,
        scanner: Optional[SourceScanner] = None,
    ):
        self.config_loader = config_loader
        self.credentials = credentials or StsCredentialProvider()
        self.downloader = downloader or SourceDownloader()
        self.engine = engine or EngineInvoker()
        self.scanner = scanner or GlobScanner()
        self.init_invoker = InitInvoker(self.run_with_config, self.scanner)

    def run(self, options: ExecutionOptions) -> None:
        config = self.config_loader(options)

        self.assume_role_if_necessary(options)

        source_url = get_terraform_source_url(options, config)
        if source_url:
            self.download_terraform_source(source_url, options, config)

        if config.remote_state is not None:
            check_terraform_code_defines_backend(options, config.remote_state.backend, self.scanner)

        self.run_with_config(options, config, False)

    def assume_role_if_necessary(self, options: ExecutionOptions) -> None:
        if not options.iam_role:
            return

        options.logger.info("Assuming IAM role %s", options.iam_role)
        creds = self.credentials.assume_role(options.iam_role)
        options.env["AWS_ACCESS_KEY_ID"] = creds.access_key_id
        options.env["AWS_SECRET_ACCESS_KEY"] = creds.secret_access_key
        options.env["AWS_SESSION_TOKEN"] = creds.session_token

    def download_terraform_source(
        self,
        source_url: str,
        options: ExecutionOptions,
        config: GantryConfig,
    ) -> TerraformSource:
        return self.downloader.resolve(source_url, options, config, self.init_invoker.run_terraform_init)

    def run_with_config(
        self,
        options: ExecutionOptions,
        config: GantryConfig,
        allow_source_download: bool,
    ) -> None:
        """
        Forward options.terraform_cli_args (plus extra_arguments) to
        terraform. allow_source_download is only ever True for the init
        sub-invocation built by InitInvoker with a TerraformSource.
        """
        extra = config.extra_args_for(options.first_arg())
        if extra:
            options.insert_terraform_cli_args(*extra)

        if options.first_arg() == CMD_INIT:
            self.init_invoker.prepare_init_command(options, config, allow_source_download)
        else:
            self.prepare_non_init_command(options, config)

        self.engine.run_terraform_command(options, *options.terraform_cli_args)

    def prepare_non_init_command(self, options: ExecutionOptions, config: GantryConfig) -> None:
        if needs_init(options, config, self.scanner):
            self.init_invoker.run_terraform_init(options, config, None)
