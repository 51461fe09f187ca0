# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/gantry/pipeline/backend.py
from __future__ import annotations

import glob
import re

from ..errors import BackendNotDefinedError
from ..options import ExecutionOptions
from ..scanner import SourceScanner


def check_terraform_code_defines_backend(
    options: ExecutionOptions,
    backend_type: str,
    scanner: SourceScanner,
) -> None:
    """Raise BackendNotDefinedError unless some .tf or .tf.json file declares the backend."""
    name = re.escape(backend_type)

    hcl_backend = re.compile(rf'backend[ \t]+"{name}"')
    if scanner.scan_matches(hcl_backend, f"{glob.escape(str(options.working_dir))}/**/*.tf"):
        return

    json_backend = re.compile(rf'"backend":\s*{{\s*"{name}"', re.MULTILINE)
    if scanner.scan_matches(json_backend, f"{glob.escape(str(options.working_dir))}/**/*.tf.json"):
        return

    raise BackendNotDefinedError(options.config_path, options.working_dir, backend_type)
