from pathlib import Path

import pytest

from gantry.cli.args import debug_requested, parse_options
from gantry.errors import ArgumentMissingValueError


def test_gantry_options_are_stripped_wherever_they_appear(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("GANTRY_IAM_ROLE", raising=False)
    opts = parse_options([
        "--gantry-non-interactive",
        "apply",
        "-var", "a=b",
        f"--gantry-working-dir={tmp_path}",
        "--gantry-source", "git::https://example.com/m.git",
        "--gantry-no-auto-init",
        "-input=false",
    ])

    assert opts.terraform_cli_args == ["apply", "-var", "a=b", "-input=false"]
    assert opts.non_interactive is True
    assert opts.auto_init is False
    assert opts.working_dir == tmp_path.resolve()
    assert opts.source == "git::https://example.com/m.git"
    assert opts.config_path == tmp_path.resolve() / "gantry.yaml"
    assert opts.iam_role is None


def test_defaults(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for var in ["GANTRY_IAM_ROLE", "GANTRY_TFPATH", "GANTRY_CONFIG", "GANTRY_DOWNLOAD"]:
        monkeypatch.delenv(var, raising=False)

    opts = parse_options(["plan"])
    assert opts.terraform_path == "terraform"
    assert opts.auto_init is True
    assert opts.non_interactive is False
    assert opts.source_update is False
    assert opts.ignore_dependency_errors is False
    assert opts.download_dir is None
    assert opts.working_dir == tmp_path.resolve()


def test_environment_fallbacks(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("GANTRY_IAM_ROLE", "arn:aws:iam::1:role/x")
    monkeypatch.setenv("GANTRY_TFPATH", "/opt/tf/terraform")
    monkeypatch.setenv("GANTRY_DOWNLOAD", str(tmp_path / "dl"))

    opts = parse_options(["plan", f"--gantry-working-dir={tmp_path}"])
    assert opts.iam_role == "arn:aws:iam::1:role/x"
    assert opts.terraform_path == "/opt/tf/terraform"
    assert opts.download_dir == (tmp_path / "dl").resolve()


def test_explicit_flag_beats_environment(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("GANTRY_IAM_ROLE", "from-env")
    opts = parse_options(["plan", "--gantry-iam-role", "from-flag", f"--gantry-working-dir={tmp_path}"])
    assert opts.iam_role == "from-flag"


def test_absolute_config_path_kept(tmp_path: Path):
    cfg = tmp_path / "other.yaml"
    opts = parse_options(["plan", f"--gantry-config={cfg}", f"--gantry-working-dir={tmp_path}"])
    assert opts.config_path == cfg


def test_string_option_without_value():
    with pytest.raises(ArgumentMissingValueError):
        parse_options(["plan", "--gantry-iam-role"])
    with pytest.raises(ArgumentMissingValueError):
        parse_options(["plan", "--gantry-source", "--gantry-non-interactive"])


def test_debug_flag_detection():
    assert debug_requested(["plan", "--gantry-debug"])
    assert not debug_requested(["plan", "-debug"])
