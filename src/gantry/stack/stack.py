# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/gantry/stack/stack.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, List, Sequence

from ..config.loader import read_config_file
from ..errors import DependencyFailedError, GantryError, MultiModuleError, UnexpectedError
from ..options import ExecutionOptions
from .planner import Module, plan_modules

log = logging.getLogger("gantry")

ModuleRunner = Callable[[ExecutionOptions], None]

# never descend into terraform's or gantry's own working dirs
_SKIP_DIRS = {".terraform", ".gantry-cache"}


class Stack:
    """
    Modules under one folder, ordered by their declared dependencies.
    Modules run one at a time; a module never starts before every module it
    depends on has finished.
    """

    def __init__(self, path: Path, modules: List[Module], run_module: ModuleRunner):
        self.path = path
        self.modules = plan_modules(modules)
        self._run_module = run_module

    def describe(self) -> str:
        lines = [f"The stack at {self.path} will be processed in the following order:"]
        for m in self.modules:
            line = f"Module {m.path}"
            if m.dependencies:
                line += f" (depends on {', '.join(str(d) for d in m.dependencies)})"
            lines.append(line)
        return "\n".join(lines)

    def plan(self, options: ExecutionOptions) -> None:
        self._run_all(options, ["plan"])

    def apply(self, options: ExecutionOptions) -> None:
        self._run_all(options, ["apply", "-input=false", "-auto-approve"])

    def destroy(self, options: ExecutionOptions) -> None:
        self._run_all(options, ["destroy", "-input=false", "-auto-approve"], reverse=True)

    def output(self, options: ExecutionOptions) -> None:
        self._run_all(options, ["output"])

    def validate(self, options: ExecutionOptions) -> None:
        self._run_all(options, ["validate"])

    def _blockers(self, reverse: bool) -> Dict[Path, List[Path]]:
        if not reverse:
            return {m.path: list(m.dependencies) for m in self.modules}
        # destroy: a module has to wait for everything that depends on it
        return {
            m.path: [o.path for o in self.modules if m.path in o.dependencies]
            for m in self.modules
        }

    def _run_all(self, options: ExecutionOptions, command: Sequence[str], reverse: bool = False) -> None:
        user_args = options.terraform_cli_args[1:]
        ordered = list(reversed(self.modules)) if reverse else self.modules
        blockers = self._blockers(reverse)

        failed: set[Path] = set()
        errors: List[Exception] = []

        for module in ordered:
            failed_dep = next((d for d in blockers[module.path] if d in failed), None)
            if failed_dep is not None and not options.ignore_dependency_errors:
                err = DependencyFailedError(module.name, str(failed_dep))
                options.logger.error("%s", err)
                errors.append(err)
                failed.add(module.path)
                continue

            module_options = options.clone(module.config_path)
            module_options.terraform_cli_args = [*command, *user_args]
            options.logger.info("Module %s: running %s", module.name, " ".join(module_options.terraform_cli_args))
            try:
                self._run_module(module_options)
            except Exception as exc:
                err = exc if isinstance(exc, GantryError) else UnexpectedError(exc)
                options.logger.debug("Module %s error trace", module.name, exc_info=True)
                options.logger.error("Module %s has finished with an error: %s", module.name, err)
                errors.append(err)
                failed.add(module.path)
            else:
                options.logger.info("Module %s has finished successfully!", module.name)

        if errors:
            raise MultiModuleError(errors)


def find_stack_in_subfolders(options: ExecutionOptions, run_module: ModuleRunner) -> Stack:
    """Every subfolder of the working dir holding a config file is a module."""
    root = options.working_dir.resolve()
    config_name = options.config_path.name

    modules: List[Module] = []
    for config_path in sorted(root.rglob(config_name)):
        rel = config_path.relative_to(root)
        if any(part in _SKIP_DIRS or part.startswith(".") for part in rel.parts[:-1]):
            continue
        module_dir = config_path.parent
        config = read_config_file(config_path)
        deps = [(module_dir / p).resolve() for p in config.dependency_paths()]
        modules.append(Module(path=module_dir, config_path=config_path, dependencies=deps))

    log.debug("Found %d modules under %s", len(modules), root)
    return Stack(root, modules, run_module)
