# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/gantry/scanner.py
from __future__ import annotations

import glob
import os
import re
from pathlib import Path
from typing import Protocol, Union


class SourceScanner(Protocol):
    """
    File probing and regex scanning of Terraform sources.

    A stand-in for parsing HCL: commented-out blocks still match and
    unusually formatted JSON may not.
    """

    def exists(self, path: Union[str, Path]) -> bool: ...

    def scan_matches(self, pattern: re.Pattern[str], glob_path: str) -> bool: ...


class GlobScanner:
    def exists(self, path: Union[str, Path]) -> bool:
        return os.path.exists(path)

    def scan_matches(self, pattern: re.Pattern[str], glob_path: str) -> bool:
        for name in sorted(glob.glob(glob_path, recursive=True)):
            p = Path(name)
            if not p.is_file():
                continue
            if pattern.search(p.read_text(errors="replace")):
                return True
        return False

