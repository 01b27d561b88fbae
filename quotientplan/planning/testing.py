# Copyright 2025-2026 Dimensional Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Scripted stand-ins for level planners, used by the planning tests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from collections.abc import Sequence

    from quotientplan.planning.spec import ProblemDefinitionSpec, SpaceInformationSpec, StatePath


@dataclass(frozen=True)
class FakeSpace:
    """Space with nothing but a dimension."""

    dimension: int


class FakeQuotient:
    """QuotientSpec that solves after a fixed number of quanta.

    The solution of level ``k`` is a two-waypoint path filled with ``k`` so
    tests can tell which level produced it. ``solve_after=None`` never solves.
    Every quantum appends the level index to the shared ``expansions`` list.
    """

    def __init__(
        self,
        index: int,
        space: SpaceInformationSpec,
        solve_after: int | None = 1,
        importance: float = 1.0,
        expansions: list[int] | None = None,
    ) -> None:
        self.index = index
        self.space = space
        self.solve_after = solve_after
        self.importance = importance
        self.expansions = expansions if expansions is not None else []
        self.importance_schedule: list[float] = []
        self.fail_on_quantum = False

        self.pdef: ProblemDefinitionSpec | None = None
        self.parent_path: StatePath | None = None
        self.setup_calls = 0
        self.clear_calls = 0
        self.quanta = 0
        self._solution: StatePath | None = None

    def setup(self) -> None:
        self.setup_calls += 1

    def clear(self) -> None:
        self.clear_calls += 1
        self.quanta = 0
        self.parent_path = None
        self._solution = None

    def set_problem_definition(self, pdef: ProblemDefinitionSpec) -> None:
        self.pdef = pdef

    def expand_one_quantum(self) -> bool:
        self.expansions.append(self.index)
        if self.fail_on_quantum:
            raise RuntimeError(f"level {self.index} failed")
        self.quanta += 1
        if self.importance_schedule:
            self.importance = self.importance_schedule.pop(0)
        if self.solve_after is not None and self.quanta >= self.solve_after:
            self._solution = np.full((2, self.space.dimension), float(self.index))
        return self._solution is not None

    def get_importance(self) -> float:
        return self.importance

    def get_feasible_node_count(self) -> int:
        return self.quanta

    def get_total_node_count(self) -> int:
        return 2 * self.quanta

    def adopt_parent_solution(self, path: StatePath) -> None:
        self.parent_path = path

    def get_solution(self) -> StatePath | None:
        return self._solution


class FakePlannerFactory:
    """Planner factory building FakeQuotients and remembering them in level order."""

    def __init__(
        self,
        solve_after: int | None | Sequence[int | None] = 1,
        importances: Sequence[float] | None = None,
    ) -> None:
        self.solve_after = solve_after
        self.importances = importances
        self.planners: list[FakeQuotient] = []
        self.expansions: list[int] = []

    def __call__(self, space: SpaceInformationSpec) -> FakeQuotient:
        k = len(self.planners)
        if isinstance(self.solve_after, int) or self.solve_after is None:
            solve_after = self.solve_after
        else:
            solve_after = self.solve_after[k]
        importance = 1.0 if self.importances is None else self.importances[k]
        planner = FakeQuotient(k, space, solve_after, importance, self.expansions)
        self.planners.append(planner)
        return planner
