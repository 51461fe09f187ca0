# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/gantry/engine/shell.py
from __future__ import annotations

import io
import os
import subprocess
from typing import Any, List, TextIO

import typer

from ..errors import EngineCommandError, WorkingDirNotFoundError
from ..options import ExecutionOptions


def _stream_target(stream: TextIO) -> Any:
    """Hand real file streams straight to the child; capture everything else."""
    try:
        stream.fileno()
    except (AttributeError, OSError, io.UnsupportedOperation):
        return subprocess.PIPE
    stream.flush()
    return stream


class EngineInvoker:
    """
    A thin wrapper around the `terraform` CLI.
    - Runs in options.working_dir with os.environ overlaid by options.env.
    - Testable by mocking subprocess.run.
    """

    def _env(self, options: ExecutionOptions) -> dict[str, str]:
        env = dict(os.environ)
        env.update(options.env)
        return env

    def _run(self, options: ExecutionOptions, argv: List[str], capture: bool) -> subprocess.CompletedProcess:
        if not options.working_dir.is_dir():
            raise WorkingDirNotFoundError(options.working_dir)

        options.logger.info("Running command: %s", " ".join(argv))
        stdout = subprocess.PIPE if capture else _stream_target(options.writer)
        stderr = _stream_target(options.err_writer)
        try:
            cp = subprocess.run(
                argv,
                cwd=str(options.working_dir),
                env=self._env(options),
                stdout=stdout,
                stderr=stderr,
                text=True,
                check=False,
            )
        except FileNotFoundError as exc:
            raise EngineCommandError(argv, 127) from exc

        if stdout is subprocess.PIPE and cp.stdout and not capture:
            options.writer.write(cp.stdout)
        if stderr is subprocess.PIPE and cp.stderr:
            options.err_writer.write(cp.stderr)

        if cp.returncode != 0:
            raise EngineCommandError(argv, cp.returncode)
        return cp

    def run_terraform_command(self, options: ExecutionOptions, *args: str) -> None:
        self._run(options, [options.terraform_path, *args], capture=False)

    def run_terraform_command_and_capture(self, options: ExecutionOptions, *args: str) -> str:
        cp = self._run(options, [options.terraform_path, *args], capture=True)
        return cp.stdout or ""


def prompt_user_for_yes_no(question: str, options: ExecutionOptions) -> bool:
    if options.non_interactive:
        options.logger.info("%s", question)
        options.logger.info("The non-interactive flag is set, so assuming 'yes' for all prompts")
        return True
    return typer.confirm(question, default=False, err=True)
