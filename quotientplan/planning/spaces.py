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

"""Box-bounded Euclidean spaces and problem definitions.

A quotient-space sequence over R^n is built from nested coordinate prefixes:
level k plans in the first ``d_k`` coordinates of the full configuration, so
projecting a state or a problem onto a coarser level is a slice.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from quotientplan.planning.spec import ConfigurationError
from quotientplan.utils.path_utils import interpolate_segment

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from numpy.typing import ArrayLike, NDArray

    from quotientplan.planning.spec import SpaceInformationSpec, State

    ValidityChecker = Callable[[State], bool]


class EuclideanSpaceInformation:
    """A box in R^n with an optional state validity checker.

    Motions are checked by sampling the straight segment every
    ``collision_resolution`` units.
    """

    def __init__(
        self,
        lower: ArrayLike,
        upper: ArrayLike,
        validity_checker: ValidityChecker | None = None,
        collision_resolution: float = 0.05,
        name: str = "",
    ) -> None:
        self._lower = np.asarray(lower, dtype=np.float64).reshape(-1)
        self._upper = np.asarray(upper, dtype=np.float64).reshape(-1)
        if self._lower.shape != self._upper.shape:
            raise ConfigurationError(
                f"Bounds disagree on dimension: {self._lower.shape[0]} vs {self._upper.shape[0]}"
            )
        if len(self._lower) == 0:
            raise ConfigurationError("A space needs at least one dimension")
        if np.any(self._lower > self._upper):
            raise ConfigurationError("Lower bounds must not exceed upper bounds")
        if collision_resolution <= 0:
            raise ConfigurationError(
                f"collision_resolution must be positive, got {collision_resolution}"
            )
        self._validity_checker = validity_checker
        self._collision_resolution = collision_resolution
        self.name = name or f"R{len(self._lower)}"

    def __repr__(self) -> str:
        return f"EuclideanSpaceInformation(name={self.name!r}, dimension={self.dimension})"

    @property
    def dimension(self) -> int:
        return len(self._lower)

    @property
    def bounds(self) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        return self._lower.copy(), self._upper.copy()

    def satisfies_bounds(self, state: ArrayLike) -> bool:
        q = np.asarray(state, dtype=np.float64)
        return bool(np.all(q >= self._lower) and np.all(q <= self._upper))

    def is_valid(self, state: ArrayLike) -> bool:
        """Inside the bounds and accepted by the validity checker."""
        q = np.asarray(state, dtype=np.float64)
        if q.shape != self._lower.shape or not self.satisfies_bounds(q):
            return False
        if self._validity_checker is None:
            return True
        return bool(self._validity_checker(q))

    def check_motion(self, start: ArrayLike, end: ArrayLike) -> bool:
        """Check the straight segment between two states (end included, start assumed valid)."""
        segment = interpolate_segment(start, end, self._collision_resolution)
        return all(self.is_valid(q) for q in segment[1:])

    def distance(self, a: ArrayLike, b: ArrayLike) -> float:
        return float(
            np.linalg.norm(np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64))
        )

    def sample_uniform(self, rng: np.random.Generator) -> State:
        return rng.uniform(self._lower, self._upper)


def make_quotient_spaces(
    lower: ArrayLike,
    upper: ArrayLike,
    dimensions: Sequence[int],
    validity_checkers: Sequence[ValidityChecker | None] | None = None,
    collision_resolution: float = 0.05,
) -> list[EuclideanSpaceInformation]:
    """Build the nested coordinate-prefix spaces of a full box.

    Args:
        lower: Lower bounds of the full space
        upper: Upper bounds of the full space
        dimensions: Dimension of each level, coarsest first
        validity_checkers: One checker per level (None entries accept every state)
        collision_resolution: Motion checking resolution shared by all levels

    Example:
        spaces = make_quotient_spaces([-1] * 6, [1] * 6, [2, 4, 6])
    """
    full_lower = np.asarray(lower, dtype=np.float64).reshape(-1)
    full_upper = np.asarray(upper, dtype=np.float64).reshape(-1)
    if validity_checkers is None:
        validity_checkers = [None] * len(dimensions)
    if len(validity_checkers) != len(dimensions):
        raise ConfigurationError(
            f"Got {len(validity_checkers)} validity checkers for {len(dimensions)} levels"
        )

    spaces = []
    for k, (dim, checker) in enumerate(zip(dimensions, validity_checkers, strict=True)):
        if dim < 1 or dim > len(full_lower):
            raise ConfigurationError(
                f"Level {k} dimension {dim} outside [1, {len(full_lower)}]"
            )
        spaces.append(
            EuclideanSpaceInformation(
                full_lower[:dim],
                full_upper[:dim],
                validity_checker=checker,
                collision_resolution=collision_resolution,
                name=f"Q{k}(R{dim})",
            )
        )
    return spaces


@dataclass(frozen=True, eq=False)
class ProblemDefinition:
    """Start/goal query in a Euclidean space.

    Attributes:
        start: Start state
        goal: Goal state
        goal_tolerance: A state within this distance of ``goal`` satisfies the goal
    """

    start: NDArray[np.float64]
    goal: NDArray[np.float64]
    goal_tolerance: float = 0.1

    def __post_init__(self) -> None:
        start = np.asarray(self.start, dtype=np.float64).reshape(-1)
        goal = np.asarray(self.goal, dtype=np.float64).reshape(-1)
        if start.shape != goal.shape:
            raise ConfigurationError(
                f"Start and goal disagree on dimension: {start.shape[0]} vs {goal.shape[0]}"
            )
        if self.goal_tolerance < 0:
            raise ConfigurationError(
                f"goal_tolerance must be non-negative, got {self.goal_tolerance}"
            )
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "goal", goal)

    @property
    def dimension(self) -> int:
        return len(self.start)

    def project(self, space: SpaceInformationSpec) -> ProblemDefinition:
        """Keep the first ``space.dimension`` coordinates of start and goal."""
        dim = space.dimension
        if dim > self.dimension:
            raise ConfigurationError(
                f"Cannot project a {self.dimension}-dimensional problem onto a "
                f"{dim}-dimensional space"
            )
        return ProblemDefinition(self.start[:dim], self.goal[:dim], self.goal_tolerance)

    def is_goal(self, state: ArrayLike, tolerance: float | None = None) -> bool:
        tol = self.goal_tolerance if tolerance is None else tolerance
        return float(np.linalg.norm(np.asarray(state, dtype=np.float64) - self.goal)) <= tol
