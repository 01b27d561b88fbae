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

"""MultiQuotient planner.

Plans over a sequence of quotient spaces of increasing dimension. Each level
is solved by its own single-level planner; a scheduler hands out one
expansion quantum at a time to the most important unsolved level, and the
solution of level k is passed up to level k+1 to bias its sampling.

Example:
    >>> from quotientplan.planning import MultiQuotient, ProblemDefinition
    >>> from quotientplan.planning.planners import QRRT
    >>> from quotientplan.planning.spaces import make_quotient_spaces
    >>>
    >>> spaces = make_quotient_spaces([-1] * 6, [1] * 6, [2, 4, 6])
    >>> planner = MultiQuotient(spaces, QRRT)
    >>> planner.set_problem_definition(ProblemDefinition([-0.9] * 6, [0.9] * 6))
    >>> status = planner.solve(5.0)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from quotientplan.planning.hierarchy import Hierarchy
from quotientplan.planning.params import ParamSet
from quotientplan.planning.scheduler import QuotientScheduler
from quotientplan.planning.spec import (
    ConfigurationError,
    LevelStats,
    ParamKind,
    PlannerData,
    PlannerState,
    PlannerStatus,
    SolveStatus,
)
from quotientplan.planning.termination import as_termination_condition
from quotientplan.utils.logging_config import setup_logger
from quotientplan.utils.path_utils import compute_path_length

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from quotientplan.planning.hierarchy import PlannerFactory
    from quotientplan.planning.spec import (
        LevelIndex,
        ProblemDefinitionSpec,
        SpaceInformationSpec,
        StatePath,
    )


class MultiQuotient:
    """Hierarchical planner over a sequence of quotient spaces.

    Args:
        spaces: Level spaces, coarsest first; dimensions must be non-decreasing
        planner_factory: Builds the single-level planner of a level from its space
        name: Planner name, used in logs
        logger: Log handle; a new one is created when omitted

    Raises:
        ConfigurationError: On an empty or non-monotonic space sequence.
    """

    def __init__(
        self,
        spaces: Sequence[SpaceInformationSpec],
        planner_factory: PlannerFactory,
        name: str = "QuotientPlanner",
        logger: Any | None = None,
    ) -> None:
        self._name = name
        self._logger = logger if logger is not None else setup_logger()
        self._hierarchy = Hierarchy(spaces, planner_factory, logger=self._logger)
        self._scheduler = QuotientScheduler(self._hierarchy)

        self._current_level: LevelIndex = 0
        self._stop_level: LevelIndex | None = None
        self._status = SolveStatus.UNSOLVED
        self._state = PlannerState.IDLE
        self._is_setup = False

        self.params = ParamSet(logger=self._logger)
        self.params.declare(
            "stopLevel",
            ParamKind.INT,
            self.set_stop_level,
            lambda: self.stop_level,
            range_suggestion=f"0:{self._hierarchy.last_index}",
        )
        for level in self._hierarchy:
            level_params = getattr(level.planner, "params", None)
            if isinstance(level_params, ParamSet):
                self.params.include(level_params, prefix=f"level{level.index}.")

        self._logger.info(
            "MultiQuotient initialized",
            planner=self._name,
            levels=len(self._hierarchy),
            dimensions=self._hierarchy.dimensions,
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def get_name(self) -> str:
        return self._name

    def set_problem_definition(
        self, pdefs: ProblemDefinitionSpec | Sequence[ProblemDefinitionSpec]
    ) -> None:
        """Bind one problem per level, or a single top-level problem projected onto each level.

        Rebinding after setup discards the progress made on the previous problem,
        also when a level rejects its new definition.

        Raises:
            ConfigurationError: If a sequence does not have one entry per level
                or a definition does not match its level.
        """
        try:
            self._hierarchy.bind_problem_definitions(pdefs)
        finally:
            if self._is_setup:
                self._logger.info(
                    "Problem definition rebound, clearing progress", planner=self._name
                )
                self.clear()

    def setup(self) -> None:
        """Set up every level's planner and seed the scheduler with level 0.

        Raises:
            ConfigurationError: If no problem definition has been bound.
        """
        if not self._hierarchy.is_bound:
            raise ConfigurationError("set_problem_definition() must be called before setup()")

        for level in self._hierarchy:
            level.planner.setup()

        if not self._is_setup:
            self._is_setup = True
            self._reset_progress()

    def clear(self) -> None:
        """Discard all solutions and planner state, returning to level 0. Idempotent."""
        self._hierarchy.clear()
        self._reset_progress()

    def _reset_progress(self) -> None:
        self._scheduler.clear()
        self._current_level = 0
        self._status = SolveStatus.UNSOLVED
        if self._is_setup:
            self._scheduler.push(0)
            self._state = PlannerState.SETUP
        else:
            self._state = PlannerState.IDLE

    # =========================================================================
    # Solve
    # =========================================================================

    def solve(self, ptc: Callable[[], bool] | float) -> PlannerStatus:
        """Run the scheduling loop until the stop level is solved or ``ptc`` fires.

        ``ptc`` is polled once before every quantum. A number is taken as a
        time budget in seconds. Calling ``solve`` again resumes where the
        previous call stopped unless ``clear()`` was called in between.

        Returns:
            EXACT_SOLUTION when the last level is solved, APPROXIMATE_SOLUTION
            when a lower stop level is solved, TIMEOUT when ``ptc`` fired first,
            UNKNOWN when no level can make progress. Never raises.
        """
        try:
            ptc = as_termination_condition(ptc)
        except (TypeError, ValueError) as e:
            self._logger.error("Invalid termination condition", planner=self._name, error=str(e))
            return PlannerStatus.UNKNOWN

        if not self._is_setup:
            try:
                self.setup()
            except ConfigurationError as e:
                self._logger.error("Cannot solve, setup failed", planner=self._name, error=str(e))
                return PlannerStatus.UNKNOWN
            except Exception:
                self._logger.exception("Cannot solve, level setup failed", planner=self._name)
                return PlannerStatus.UNKNOWN

        stop = self.stop_level
        self._state = PlannerState.RUNNING
        self._status = SolveStatus.UNSOLVED

        while True:
            if self._current_level > stop:
                return self._finish_solved(stop)

            if self._hierarchy[self._current_level].is_solved:
                if self._current_level == stop:
                    return self._finish_solved(stop)
                self._advance()
                continue

            try:
                cancelled = bool(ptc())
            except Exception:
                self._logger.exception("Termination condition failed", planner=self._name)
                cancelled = True
            if cancelled:
                return self._finish(SolveStatus.CANCELLED)

            if not self._scheduler:
                return self._finish(SolveStatus.EXHAUSTED)

            self._run_quantum()

    def _run_quantum(self) -> None:
        entry = self._scheduler.peek()
        try:
            result = self._scheduler.step()
            if result.solved:
                self._record_solution(result.level_index)
        except Exception:
            self._logger.exception(
                "Quantum failed, level removed from the scheduler",
                planner=self._name,
                level=entry.level_index if entry else None,
            )

    def _record_solution(self, level_index: LevelIndex) -> None:
        level = self._hierarchy[level_index]
        path = level.planner.get_solution()
        if path is None:
            self._logger.error(
                "Planner reported a solution but returned no path",
                planner=self._name,
                level=level_index,
            )
            return

        length = compute_path_length(path)
        level.solution = path
        self._logger.info(
            "Level solved",
            planner=self._name,
            level=level_index,
            dimension=level.dimension,
            feasible_nodes=level.feasible_node_count,
            total_nodes=level.total_node_count,
            path_length=length,
        )

    def _advance(self) -> None:
        """Hand the current level's path to the next level and make it current."""
        solved = self._hierarchy[self._current_level]
        following = self._hierarchy[self._current_level + 1]
        self._current_level = following.index

        try:
            following.planner.adopt_parent_solution(solved.solution)
            if not following.is_solved and following.index not in self._scheduler:
                self._scheduler.push(following.index)
        except Exception:
            self._logger.exception(
                "Could not hand the parent solution up, level not scheduled",
                planner=self._name,
                level=following.index,
            )

    def _finish_solved(self, stop: LevelIndex) -> PlannerStatus:
        self._status = SolveStatus.SOLVED
        self._state = PlannerState.SOLVED
        exact = stop == self._hierarchy.last_index
        self._logger.info("Solved", planner=self._name, stop_level=stop, exact=exact)
        return PlannerStatus.EXACT_SOLUTION if exact else PlannerStatus.APPROXIMATE_SOLUTION

    def _finish(self, status: SolveStatus) -> PlannerStatus:
        self._status = status
        if status == SolveStatus.CANCELLED:
            self._state = PlannerState.CANCELLED
            self._logger.info(
                "Solve cancelled by termination condition",
                planner=self._name,
                current_level=self._current_level,
            )
            return PlannerStatus.TIMEOUT

        self._state = PlannerState.EXHAUSTED
        self._logger.warning(
            "No level left to expand", planner=self._name, current_level=self._current_level
        )
        return PlannerStatus.UNKNOWN

    # =========================================================================
    # Progress
    # =========================================================================

    @property
    def current_level(self) -> LevelIndex:
        """Lowest level without an accepted solution, or the stop level once solved."""
        return self._current_level

    @property
    def stop_level(self) -> LevelIndex:
        """Terminal level of a solve; the last level unless set otherwise."""
        if self._stop_level is None:
            return self._hierarchy.last_index
        return self._stop_level

    def set_stop_level(self, level: LevelIndex) -> None:
        """Treat ``level`` as the terminal level of later solves.

        Raises:
            ConfigurationError: If ``level`` is outside ``[0, N-1]``.
        """
        if not 0 <= level <= self._hierarchy.last_index:
            raise ConfigurationError(
                f"Stop level must be in [0, {self._hierarchy.last_index}], got {level}"
            )
        self._stop_level = level

    @property
    def status(self) -> SolveStatus:
        return self._status

    @property
    def state(self) -> PlannerState:
        return self._state

    @property
    def is_setup(self) -> bool:
        return self._is_setup

    @property
    def hierarchy(self) -> Hierarchy:
        return self._hierarchy

    def get_solution_path(self) -> StatePath | None:
        """Solution of the stop level (the final answer), or None."""
        return self._hierarchy[self.stop_level].solution

    def get_solution_paths(self) -> list[StatePath | None]:
        """Recorded solution of every level, None where a level is unsolved."""
        return [level.solution for level in self._hierarchy]

    # =========================================================================
    # Statistics (read from the level planners)
    # =========================================================================

    def get_levels(self) -> int:
        """Number of quotient spaces."""
        return len(self._hierarchy)

    def get_feasible_nodes(self) -> list[int]:
        return [level.feasible_node_count for level in self._hierarchy]

    def get_nodes(self) -> list[int]:
        return [level.total_node_count for level in self._hierarchy]

    def get_dimensions_per_level(self) -> list[int]:
        return self._hierarchy.dimensions

    def get_planner_data(self) -> PlannerData:
        return PlannerData(
            name=self._name,
            current_level=self._current_level,
            stop_level=self.stop_level,
            levels=[
                LevelStats(
                    index=level.index,
                    dimension=level.dimension,
                    feasible_nodes=level.feasible_node_count,
                    total_nodes=level.total_node_count,
                    importance=float(level.importance),
                    solved=level.is_solved,
                    path=level.solution,
                    path_length=(
                        None if level.solution is None else compute_path_length(level.solution)
                    ),
                )
                for level in self._hierarchy
            ],
        )
