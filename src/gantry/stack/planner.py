# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/gantry/stack/planner.py
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Set

from ..errors import CyclicDependencyError, UnknownDependencyError


@dataclass
class Module:
    path: Path                                             # module working dir
    config_path: Path
    dependencies: List[Path] = field(default_factory=list)  # module dirs this one depends on

    @property
    def name(self) -> str:
        return str(self.path)


def _validate_dependencies(modules: List[Module]) -> None:
    names: Set[Path] = {m.path for m in modules}
    for m in modules:
        for d in m.dependencies:
            if d not in names:
                raise UnknownDependencyError(
                    f"Module '{m.name}' depends on '{d}', which is not part of the stack"
                )


def plan_modules(modules: List[Module]) -> List[Module]:
    """
    Stable topological sort of modules based on their dependency paths.
    """
    _validate_dependencies(modules)

    by_path: Dict[Path, Module] = {m.path: m for m in modules}
    indeg: Dict[Path, int] = {m.path: len(set(m.dependencies)) for m in modules}
    graph: Dict[Path, Set[Path]] = {m.path: set(m.dependencies) for m in modules}

    queue = deque(sorted(p for p, deg in indeg.items() if deg == 0))
    order: List[Module] = []

    while queue:
        n = queue.popleft()
        order.append(by_path[n])
        for m, deps in graph.items():
            if n in deps:
                indeg[m] -= 1
                if indeg[m] == 0:
                    queue.append(m)
                    queue = deque(sorted(queue))  # deterministic

    if len(order) != len(modules):
        stuck = sorted(str(p) for p, deg in indeg.items() if deg > 0)
        raise CyclicDependencyError(f"Cyclic dependency detected among modules: {', '.join(stuck)}")

    return order
