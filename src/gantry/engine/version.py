# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/gantry/engine/version.py
from __future__ import annotations

import re

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version

from ..errors import EngineVersionError
from ..options import ExecutionOptions
from .shell import EngineInvoker

DEFAULT_TERRAFORM_VERSION_CONSTRAINT = ">=0.9.3"

# `terraform --version` prints e.g. "Terraform v0.11.7" on its first line
TERRAFORM_VERSION_REGEX = re.compile(r"Terraform v?(\S+)")


def parse_terraform_version(output: str) -> Version:
    match = TERRAFORM_VERSION_REGEX.search(output)
    if not match:
        raise EngineVersionError(f"Unable to parse Terraform version output: {output!r}")
    try:
        return Version(match.group(1))
    except InvalidVersion as exc:
        raise EngineVersionError(f"Invalid Terraform version {match.group(1)!r}") from exc


def populate_terraform_version(options: ExecutionOptions, engine: EngineInvoker) -> None:
    # capture against a clone so the version query never touches the user's args
    probe = options.clone(options.config_path)
    probe.working_dir = options.working_dir
    output = engine.run_terraform_command_and_capture(probe, "--version")
    options.terraform_version = parse_terraform_version(output)
    options.logger.debug("Terraform version: %s", options.terraform_version)


def check_terraform_version(constraint: str, options: ExecutionOptions) -> None:
    try:
        spec = SpecifierSet(constraint)
    except InvalidSpecifier as exc:
        raise EngineVersionError(f"Invalid version constraint {constraint!r}") from exc

    if options.terraform_version is None:
        raise EngineVersionError("Terraform version has not been determined")

    if not spec.contains(options.terraform_version, prereleases=True):
        raise EngineVersionError(
            f"The currently installed version of Terraform ({options.terraform_version}) is not "
            f"compatible with the version gantry requires ({constraint})."
        )
