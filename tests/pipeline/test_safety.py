from pathlib import Path

import pytest

from gantry.errors import ArgumentNotAllowedError
from gantry.options import ExecutionOptions
from gantry.pipeline.safety import verify_source_download_arguments


def _opts(args):
    return ExecutionOptions(config_path=Path("/m/gantry.yaml"), working_dir=Path("/m"), terraform_cli_args=args)


def test_rejects_from_module_when_download_not_allowed():
    with pytest.raises(ArgumentNotAllowedError) as ei:
        verify_source_download_arguments(False, _opts(["init", "-from-module=x"]))
    assert ei.value.argument == "-from-module=x"
    assert "-from-module=x" in str(ei.value)


def test_rejects_from_module_substring_forms():
    with pytest.raises(ArgumentNotAllowedError):
        verify_source_download_arguments(False, _opts(["init", "--from-module", "-upgrade"]))


def test_rejects_positional_dir():
    with pytest.raises(ArgumentNotAllowedError) as ei:
        verify_source_download_arguments(False, _opts(["init", "-upgrade", "mydir"]))
    assert ei.value.argument == "mydir"
    assert "Argument not allowed: mydir" in str(ei.value)


def test_accepts_everything_when_download_allowed():
    verify_source_download_arguments(True, _opts(["init", "-from-module=x"]))
    verify_source_download_arguments(True, _opts(["init", "mydir"]))


def test_accepts_plain_options_and_bare_command():
    verify_source_download_arguments(False, _opts(["init"]))
    verify_source_download_arguments(False, _opts(["init", "-upgrade", "-backend-config=bucket=b"]))
