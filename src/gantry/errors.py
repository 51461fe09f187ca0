# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/gantry/errors.py
from __future__ import annotations

from pathlib import Path
from typing import List, Sequence


class GantryError(RuntimeError):
    """Base class for gantry failures."""

    exit_code: int = 1


class ConfigLoadError(GantryError):
    """Raised when the module config file cannot be read or validated."""

    def __init__(self, config_path: str | Path, reason: str):
        self.config_path = str(config_path)
        self.reason = reason
        super().__init__(f"Error reading gantry config {self.config_path}: {reason}")


class RoleAssumptionError(GantryError):
    def __init__(self, role: str, reason: str):
        self.role = role
        super().__init__(f"Failed to assume IAM role {role}: {reason}")


class SourceResolutionError(GantryError):
    def __init__(self, source_url: str, reason: str):
        self.source_url = source_url
        super().__init__(f"Failed to download Terraform source {source_url}: {reason}")


class BackendNotDefinedError(GantryError):
    """
    remote_state is configured but the Terraform code has no matching
    backend block, so the remote state settings would silently do nothing.
    """

    def __init__(self, config_path: str | Path, working_dir: str | Path, backend_type: str):
        self.config_path = str(config_path)
        self.working_dir = str(working_dir)
        self.backend_type = backend_type
        super().__init__(
            f"Found remote_state settings in {self.config_path} but no backend block in the "
            f"Terraform code in {self.working_dir}. You must define a backend block (it can be "
            f"empty!) in your Terraform code or your remote state settings will have no effect! "
            f"It should look something like this:\n\n{self.remediation}\n"
        )

    @property
    def remediation(self) -> str:
        return f'terraform {{\n  backend "{self.backend_type}" {{}}\n}}\n'


class ArgumentNotAllowedError(GantryError):
    def __init__(self, argument: str, message: str):
        self.argument = argument
        self.message = message
        super().__init__(message % argument)


class InitNeededButDisabledError(GantryError):
    pass


class UnrecognizedCommandError(GantryError):
    def __init__(self, command: str):
        self.command = command
        super().__init__(f"Unrecognized command: {command}")


class ArgumentMissingValueError(GantryError):
    def __init__(self, option: str):
        self.option = option
        super().__init__(f"You must specify a value for the --{option} option")


class EngineCommandError(GantryError):
    """The terraform binary exited with a non-zero status."""

    def __init__(self, argv: Sequence[str], returncode: int):
        self.argv = list(argv)
        self.returncode = returncode
        self.exit_code = returncode or 1
        super().__init__(f"terraform failed (rc={returncode}) for {self.argv!r}")


class WorkingDirNotFoundError(GantryError):
    def __init__(self, working_dir: str | Path):
        self.working_dir = str(working_dir)
        super().__init__(f"Working directory {self.working_dir} does not exist")


class EngineVersionError(GantryError):
    pass


class UnknownDependencyError(GantryError):
    pass


class CyclicDependencyError(GantryError):
    pass


class DependencyFailedError(GantryError):
    def __init__(self, module: str, dependency: str):
        self.module = module
        self.dependency = dependency
        super().__init__(
            f"Cannot process module {module} because one of its dependencies, {dependency}, "
            f"finished with an error"
        )


class MultiModuleError(GantryError):
    """Aggregates the per-module failures of a *-all command."""

    def __init__(self, errors: List[Exception]):
        self.errors = list(errors)
        lines = "\n".join(f"  - {e}" for e in self.errors)
        super().__init__(f"Encountered the following errors:\n{lines}")


class UnexpectedError(GantryError):
    """Any non-gantry exception caught at the top-level entry point."""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"{type(cause).__name__}: {cause}")
