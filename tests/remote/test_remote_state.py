import json
from pathlib import Path

from gantry.options import ExecutionOptions
from gantry.remote.state import RemoteStateSpec, has_initializer, register_initializer


def _opts(wd: Path) -> ExecutionOptions:
    return ExecutionOptions(config_path=wd / "gantry.yaml", working_dir=wd, terraform_cli_args=["init"])


def _write_state(wd: Path, backend: dict) -> None:
    (wd / ".terraform").mkdir(exist_ok=True)
    (wd / ".terraform" / "terraform.tfstate").write_text(json.dumps({"version": 3, "backend": backend}))


def test_init_args_are_sorted_backend_configs():
    spec = RemoteStateSpec(backend="s3", config={"region": "us-east-1", "bucket": "b", "encrypt": True})
    assert spec.to_init_args() == [
        "-backend-config=bucket=b",
        "-backend-config=encrypt=true",
        "-backend-config=region=us-east-1",
    ]


def test_needs_init_without_local_state(tmp_path: Path):
    assert RemoteStateSpec(backend="s3").needs_init(_opts(tmp_path)) is True


def test_needs_init_when_backend_changes(tmp_path: Path):
    _write_state(tmp_path, {"type": "s3", "config": {"bucket": "old"}})
    assert RemoteStateSpec(backend="s3", config={"bucket": "new"}).needs_init(_opts(tmp_path)) is True
    assert RemoteStateSpec(backend="gcs", config={"bucket": "old"}).needs_init(_opts(tmp_path)) is True


def test_no_init_when_backend_matches(tmp_path: Path):
    _write_state(tmp_path, {"type": "s3", "config": {"bucket": "b", "encrypt": "true", "extra": "x"}})
    spec = RemoteStateSpec(backend="s3", config={"bucket": "b", "encrypt": True})
    assert spec.needs_init(_opts(tmp_path)) is False


def test_garbage_local_state_means_init(tmp_path: Path):
    (tmp_path / ".terraform").mkdir()
    (tmp_path / ".terraform" / "terraform.tfstate").write_text("{not json")
    assert RemoteStateSpec(backend="s3").needs_init(_opts(tmp_path)) is True


def test_initialize_dispatches_to_registered_backend(tmp_path: Path):
    seen = []

    @register_initializer("test-remote-backend")
    def _create_storage(spec, options):
        seen.append((spec.config["bucket"], options.working_dir))

    assert has_initializer("test-remote-backend")
    RemoteStateSpec(backend="test-remote-backend", config={"bucket": "b"}).initialize(_opts(tmp_path))
    assert seen == [("b", tmp_path)]


def test_initialize_without_initializer_is_noop(tmp_path: Path):
    assert not has_initializer("local-unregistered")
    RemoteStateSpec(backend="local-unregistered").initialize(_opts(tmp_path))
