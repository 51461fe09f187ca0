# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/gantry/cli/router.py
from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Mapping

from ..engine.shell import prompt_user_for_yes_no
from ..errors import UnrecognizedCommandError
from ..options import ExecutionOptions
from ..pipeline.runner import CommandPipeline
from ..stack.stack import ModuleRunner, Stack, find_stack_in_subfolders

CMD_PLAN_ALL = "plan-all"
CMD_APPLY_ALL = "apply-all"
CMD_DESTROY_ALL = "destroy-all"
CMD_OUTPUT_ALL = "output-all"
CMD_VALIDATE_ALL = "validate-all"

# deprecated
CMD_SPIN_UP = "spin-up"
CMD_TEAR_DOWN = "tear-down"

MULTI_MODULE_COMMANDS = frozenset({
    CMD_APPLY_ALL,
    CMD_DESTROY_ALL,
    CMD_OUTPUT_ALL,
    CMD_PLAN_ALL,
    CMD_VALIDATE_ALL,
})

DEPRECATED_COMMANDS: Mapping[str, str] = MappingProxyType({
    CMD_SPIN_UP: CMD_APPLY_ALL,
    CMD_TEAR_DOWN: CMD_DESTROY_ALL,
})

# token -> (Stack method name, confirmation question or None)
STACK_OPERATIONS: Mapping[str, tuple] = MappingProxyType({
    CMD_PLAN_ALL: ("plan", None),
    CMD_APPLY_ALL: (
        "apply",
        "Are you sure you want to run 'gantry apply' in each folder of the stack described above?",
    ),
    CMD_DESTROY_ALL: (
        "destroy",
        "WARNING: Are you sure you want to run 'gantry destroy' in each folder of the stack "
        "described above? There is no undo!",
    ),
    CMD_OUTPUT_ALL: ("output", None),
    CMD_VALIDATE_ALL: ("validate", None),
})

StackFinder = Callable[[ExecutionOptions, ModuleRunner], Stack]
Prompt = Callable[[str, ExecutionOptions], bool]


def check_deprecated(command: str, options: ExecutionOptions) -> str:
    """Return the replacement for a deprecated command (logging a notice), else command."""
    new_command = DEPRECATED_COMMANDS.get(command)
    if new_command is not None:
        options.logger.warning("%s is deprecated; running %s instead.", command, new_command)
        return new_command
    return command


def is_multi_module_command(command: str) -> bool:
    return command in MULTI_MODULE_COMMANDS


class CommandRouter:
    def __init__(
        self,
        pipeline: CommandPipeline,
        *,
        find_stack: StackFinder = find_stack_in_subfolders,
        prompt: Prompt = prompt_user_for_yes_no,
    ):
        self.pipeline = pipeline
        self.find_stack = find_stack
        self.prompt = prompt

    def run_command(self, command: str, options: ExecutionOptions) -> None:
        if is_multi_module_command(command):
            self.run_multi_module_command(command, options)
        else:
            self.pipeline.run(options)

    def run_multi_module_command(self, command: str, options: ExecutionOptions) -> None:
        operation = STACK_OPERATIONS.get(command)
        if operation is None:
            raise UnrecognizedCommandError(command)
        method, question = operation

        stack = self.find_stack(options, self.pipeline.run)
        options.logger.info("%s", stack.describe())

        if question is not None and not self.prompt(question, options):
            return

        getattr(stack, method)(options)
