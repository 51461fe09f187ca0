# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/gantry/source.py
from __future__ import annotations

import hashlib
import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Tuple

from .config.models import GantryConfig
from .errors import GantryError, SourceResolutionError
from .options import ExecutionOptions

log = logging.getLogger("gantry")

VERSION_FILE = ".gantry-source-version"

InitRunner = Callable[[ExecutionOptions, GantryConfig, "TerraformSource"], None]


@dataclass(frozen=True)
class TerraformSource:
    """Where a module's remote source is fetched to and where terraform runs."""

    canonical_source_url: str
    download_dir: Path
    working_dir: Path
    version_file: Path


def get_terraform_source_url(options: ExecutionOptions, config: GantryConfig) -> str:
    """--gantry-source wins over terraform.source from the config."""
    if options.source:
        return options.source
    if config.terraform and config.terraform.source:
        return config.terraform.source
    return ""


def split_subdir(url: str) -> Tuple[str, str]:
    """
    Split "<root>//<subdir>[?query]" into ("<root>[?query]", "<subdir>").
    The "//" of a scheme ("https://") is not a separator.
    """
    stop = url.find("?")
    if stop == -1:
        stop = len(url)

    offset = 0
    scheme = url.find("://", 0, stop)
    if scheme > -1:
        offset = scheme + 3

    idx = url.find("//", offset, stop)
    if idx == -1:
        return url, ""
    return url[:idx] + url[stop:], url[idx + 2:stop].strip("/")


def _canonicalize(url: str, working_dir: Path) -> str:
    if "::" in url or "://" in url:
        return url
    candidate = Path(url).expanduser()
    if not candidate.is_absolute():
        candidate = working_dir / candidate
    if candidate.exists():
        return str(candidate.resolve())
    return url


def _is_local(url: str) -> bool:
    return Path(url).is_absolute() and Path(url).exists()


def _source_version(canonical_url: str) -> str:
    """
    Remote sources are versioned by their URL (which carries the ref);
    local sources by the mtimes of their files, so edits trigger a refresh.
    """
    h = hashlib.sha1(canonical_url.encode())
    if _is_local(canonical_url):
        for root, dirs, files in os.walk(canonical_url):
            dirs[:] = sorted(d for d in dirs if not d.startswith("."))
            for name in sorted(files):
                p = Path(root) / name
                h.update(f"{p}:{p.stat().st_mtime_ns}".encode())
    return h.hexdigest()


def process_terraform_source(source_url: str, options: ExecutionOptions) -> TerraformSource:
    root, subdir = split_subdir(source_url)
    canonical = _canonicalize(root, options.working_dir)
    download_dir = options.effective_download_dir() / hashlib.sha1(canonical.encode()).hexdigest()
    working_dir = download_dir / subdir if subdir else download_dir
    return TerraformSource(
        canonical_source_url=canonical,
        download_dir=download_dir,
        working_dir=working_dir,
        version_file=download_dir / VERSION_FILE,
    )


class SourceDownloader:
    def resolve(
        self,
        source_url: str,
        options: ExecutionOptions,
        config: GantryConfig,
        init: InitRunner,
    ) -> TerraformSource:
        """
        Download *source_url* (via `terraform init` with the source
        arguments) unless the cached copy is current, copy the module's own
        files over it and point options.working_dir at the result.
        """
        try:
            source = process_terraform_source(source_url, options)
            self._download_if_necessary(source, options, config, init)
            self._copy_local_files(options.working_dir, source.working_dir, source.download_dir)
        except GantryError:
            raise
        except OSError as exc:
            raise SourceResolutionError(source_url, str(exc)) from exc

        options.logger.debug("Running terraform in downloaded source %s", source.working_dir)
        options.working_dir = source.working_dir
        return source

    def _download_if_necessary(
        self,
        source: TerraformSource,
        options: ExecutionOptions,
        config: GantryConfig,
        init: InitRunner,
    ) -> None:
        if options.source_update and source.download_dir.exists():
            options.logger.info("The --gantry-source-update flag is set, so deleting %s", source.download_dir)
            shutil.rmtree(source.download_dir)

        version = _source_version(source.canonical_source_url)
        current = self._read_version(source)
        if current == version and source.working_dir.exists():
            options.logger.debug("Terraform files in %s are up to date", source.working_dir)
            return

        if source.download_dir.exists():
            shutil.rmtree(source.download_dir)

        options.logger.info("Downloading Terraform configurations from %s into %s",
                            source.canonical_source_url, source.download_dir)
        init(options, config, source)

        source.download_dir.mkdir(parents=True, exist_ok=True)
        source.version_file.write_text(version)

    def _read_version(self, source: TerraformSource) -> Optional[str]:
        if not source.version_file.is_file():
            return None
        return source.version_file.read_text().strip()

    def _copy_local_files(self, src: Path, dest: Path, cache_root: Path) -> None:
        """Copy the module's own files (tfvars, overrides, config) into dest."""
        dest.mkdir(parents=True, exist_ok=True)
        cache_root = cache_root.resolve()
        for entry in src.iterdir():
            if entry.name.startswith("."):
                continue
            resolved = entry.resolve()
            if resolved == cache_root or cache_root.is_relative_to(resolved):
                continue
            if entry.is_dir():
                shutil.copytree(entry, dest / entry.name, dirs_exist_ok=True)
            else:
                shutil.copy2(entry, dest / entry.name)
