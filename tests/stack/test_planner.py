from pathlib import Path

import pytest

from gantry.errors import CyclicDependencyError, UnknownDependencyError
from gantry.stack.planner import Module, plan_modules


def _m(name, deps=()):
    p = Path("/live") / name
    return Module(path=p, config_path=p / "gantry.yaml", dependencies=[Path("/live") / d for d in deps])


def test_plan_orders_dependencies():
    a = _m("a")
    b = _m("b", ["a"])
    c = _m("c", ["b"])
    ordered = plan_modules([c, b, a])
    assert [m.path.name for m in ordered] == ["a", "b", "c"]


def test_plan_is_deterministic_for_independent_modules():
    ordered = plan_modules([_m("z"), _m("m"), _m("a"), _m("app", ["z", "a"])])
    assert [m.path.name for m in ordered] == ["a", "m", "z", "app"]


def test_plan_unknown_dep_raises():
    with pytest.raises(UnknownDependencyError) as ei:
        plan_modules([_m("x", ["missing"])])
    assert "not part of the stack" in str(ei.value)


def test_plan_cycle_detected():
    with pytest.raises(CyclicDependencyError):
        plan_modules([_m("a", ["b"]), _m("b", ["a"])])
