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

"""Level records and the hierarchy that owns them.

The hierarchy is an index-addressed arena: level ``k`` lives at position
``k`` for the lifetime of the hierarchy, and everything else (the scheduler,
the orchestrator) refers to levels by index only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from quotientplan.planning.spec import (
    ConfigurationError,
    ProblemDefinitionSpec,
    QuotientSpec,
)
from quotientplan.utils.logging_config import setup_logger

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence

    from quotientplan.planning.spec import LevelIndex, SpaceInformationSpec, StatePath

    PlannerFactory = Callable[[SpaceInformationSpec], QuotientSpec]


@dataclass(eq=False)
class Level:
    """One abstraction layer: a space, its problem and the planner solving it.

    Node counters are read from the planner on every access; the level keeps
    no statistics of its own.
    """

    index: LevelIndex
    space: SpaceInformationSpec
    planner: QuotientSpec
    dimension: int = field(init=False)
    problem_definition: ProblemDefinitionSpec | None = None
    solution: StatePath | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "dimension", int(self.space.dimension))

    def __setattr__(self, name: str, value: Any) -> None:
        if name in ("index", "dimension") and name in self.__dict__:
            raise AttributeError(f"Level.{name} is fixed at construction")
        super().__setattr__(name, value)

    @property
    def is_solved(self) -> bool:
        return self.solution is not None

    @property
    def feasible_node_count(self) -> int:
        return self.planner.get_feasible_node_count()

    @property
    def total_node_count(self) -> int:
        return self.planner.get_total_node_count()

    @property
    def importance(self) -> float:
        return self.planner.get_importance()

    def bind(self, pdef: ProblemDefinitionSpec) -> None:
        self.problem_definition = pdef
        self.planner.set_problem_definition(pdef)

    def clear(self) -> None:
        self.solution = None
        self.planner.clear()


class Hierarchy:
    """Ordered levels, coarsest (0) to the original problem (N-1).

    Raises:
        ConfigurationError: If ``spaces`` is empty, dimensions decrease, or the
            factory returns an object lacking the QuotientSpec capabilities.
    """

    def __init__(
        self,
        spaces: Sequence[SpaceInformationSpec],
        planner_factory: PlannerFactory,
        logger: Any | None = None,
    ) -> None:
        self._logger = logger if logger is not None else setup_logger()
        if len(spaces) == 0:
            raise ConfigurationError("A hierarchy needs at least one level")

        dimensions = [int(space.dimension) for space in spaces]
        for k in range(len(dimensions) - 1):
            if dimensions[k] > dimensions[k + 1]:
                raise ConfigurationError(
                    f"Level dimensions must be non-decreasing, but level {k} has "
                    f"dimension {dimensions[k]} and level {k + 1} has {dimensions[k + 1]}"
                )

        self._levels: list[Level] = []
        for k, space in enumerate(spaces):
            planner = planner_factory(space)
            if not isinstance(planner, QuotientSpec):
                raise ConfigurationError(
                    f"Planner for level {k} ({type(planner).__name__}) does not implement "
                    "the QuotientSpec capabilities"
                )
            self._levels.append(Level(index=k, space=space, planner=planner))

        self._logger.debug("Hierarchy created", levels=len(self._levels), dimensions=dimensions)

    def __len__(self) -> int:
        return len(self._levels)

    def __getitem__(self, index: LevelIndex) -> Level:
        if index < 0:
            raise IndexError(f"Level index must be non-negative, got {index}")
        return self._levels[index]

    def __iter__(self) -> Iterator[Level]:
        return iter(self._levels)

    @property
    def dimensions(self) -> list[int]:
        return [level.dimension for level in self._levels]

    @property
    def last_index(self) -> LevelIndex:
        return len(self._levels) - 1

    def bind_problem_definitions(
        self, pdefs: ProblemDefinitionSpec | Sequence[ProblemDefinitionSpec]
    ) -> None:
        """Bind one problem per level, or project a single top-level problem onto every level.

        Every definition is checked before any level is rebound.

        Raises:
            ConfigurationError: If a sequence does not have one entry per level,
                or a definition's dimension differs from its level's.
        """
        if isinstance(pdefs, ProblemDefinitionSpec):
            per_level = [pdefs.project(level.space) for level in self._levels]
        else:
            per_level = list(pdefs)
            if len(per_level) != len(self._levels):
                raise ConfigurationError(
                    f"Got {len(per_level)} problem definitions for {len(self._levels)} levels"
                )

        for level, pdef in zip(self._levels, per_level, strict=True):
            dimension = getattr(pdef, "dimension", None)
            if dimension is not None and dimension != level.dimension:
                raise ConfigurationError(
                    f"Problem of dimension {dimension} given for level {level.index} "
                    f"of dimension {level.dimension}"
                )

        for level, pdef in zip(self._levels, per_level, strict=True):
            level.bind(pdef)

    @property
    def is_bound(self) -> bool:
        return all(level.problem_definition is not None for level in self._levels)

    def clear(self) -> None:
        for level in self._levels:
            level.clear()
