import io
import logging
from pathlib import Path

import pytest
import typer

from gantry.cli.router import (
    DEPRECATED_COMMANDS,
    CommandRouter,
    check_deprecated,
    is_multi_module_command,
)
from gantry.engine.shell import prompt_user_for_yes_no
from gantry.errors import UnrecognizedCommandError
from gantry.options import ExecutionOptions


class FakeStack:
    def __init__(self):
        self.calls = []

    def describe(self):
        return "The stack at /live will be processed in the following order:\nModule /live/vpc"

    def __getattr__(self, name):
        if name in {"plan", "apply", "destroy", "output", "validate"}:
            return lambda options: self.calls.append(name)
        raise AttributeError(name)


class FakePipeline:
    def __init__(self):
        self.runs = []

    def run(self, options):
        self.runs.append(list(options.terraform_cli_args))


class Prompt:
    def __init__(self, answer):
        self.answer = answer
        self.questions = []

    def __call__(self, question, options):
        self.questions.append(question)
        return self.answer


def _opts(args, non_interactive=False) -> ExecutionOptions:
    return ExecutionOptions(
        config_path=Path("/live/gantry.yaml"),
        working_dir=Path("/live"),
        terraform_cli_args=list(args),
        non_interactive=non_interactive,
        writer=io.StringIO(),
        err_writer=io.StringIO(),
    )


def _router(stack, prompt=None, pipeline=None):
    return CommandRouter(
        pipeline or FakePipeline(),
        find_stack=lambda options, run_module: stack,
        prompt=prompt or Prompt(True),
    )


class ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.messages = []

    def emit(self, record):
        self.messages.append(record.getMessage())


def test_check_deprecated_rewrites_aliases():
    handler = ListHandler()
    opts = _opts(["spin-up"])
    opts.logger = logging.getLogger("gantry.tests.router")
    opts.logger.addHandler(handler)

    assert check_deprecated("spin-up", opts) == "apply-all"
    assert handler.messages == ["spin-up is deprecated; running apply-all instead."]
    assert check_deprecated("tear-down", opts) == "destroy-all"
    assert check_deprecated("plan", opts) == "plan"
    assert check_deprecated("apply-all", opts) == "apply-all"


def test_alias_table_is_read_only():
    with pytest.raises(TypeError):
        DEPRECATED_COMMANDS["nuke"] = "destroy-all"


def test_multi_module_classification():
    for cmd in ["plan-all", "apply-all", "destroy-all", "output-all", "validate-all"]:
        assert is_multi_module_command(cmd)
    for cmd in ["plan", "apply", "spin-up", "version", ""]:
        assert not is_multi_module_command(cmd)


def test_single_module_commands_go_to_pipeline():
    pipeline = FakePipeline()
    stack = FakeStack()
    _router(stack, pipeline=pipeline).run_command("plan", _opts(["plan", "-out=x"]))
    assert pipeline.runs == [["plan", "-out=x"]]
    assert stack.calls == []


def test_destroy_all_declined_is_a_silent_noop():
    stack = FakeStack()
    prompt = Prompt(False)

    _router(stack, prompt).run_command("destroy-all", _opts(["destroy-all"]))

    assert stack.calls == []
    assert "WARNING" in prompt.questions[0]
    assert "There is no undo!" in prompt.questions[0]


def test_apply_all_confirmed_applies():
    stack = FakeStack()
    prompt = Prompt(True)
    _router(stack, prompt).run_command("apply-all", _opts(["apply-all"]))
    assert stack.calls == ["apply"]
    assert len(prompt.questions) == 1


@pytest.mark.parametrize("command,method", [("plan-all", "plan"), ("output-all", "output"), ("validate-all", "validate")])
def test_read_only_stack_commands_need_no_confirmation(command, method):
    stack = FakeStack()
    prompt = Prompt(False)
    _router(stack, prompt).run_command(command, _opts([command]))
    assert stack.calls == [method]
    assert prompt.questions == []


def test_unknown_multi_module_token():
    with pytest.raises(UnrecognizedCommandError) as ei:
        _router(FakeStack()).run_multi_module_command("import-all", _opts(["import-all"]))
    assert "Unrecognized command: import-all" in str(ei.value)


def test_non_interactive_prompt_never_asks(monkeypatch):
    def boom(*a, **k):
        raise AssertionError("should not prompt")

    monkeypatch.setattr(typer, "confirm", boom)
    assert prompt_user_for_yes_no("Sure?", _opts(["apply-all"], non_interactive=True)) is True


def test_interactive_prompt_uses_typer_confirm(monkeypatch):
    monkeypatch.setattr(typer, "confirm", lambda question, default=False, err=False: False)
    assert prompt_user_for_yes_no("Sure?", _opts(["apply-all"])) is False
