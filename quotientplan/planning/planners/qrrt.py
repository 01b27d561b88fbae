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

"""Quotient-space RRT implementing QuotientSpec.

Each quantum is one RRT extension: draw a sample, steer the nearest tree node
towards it by at most ``range``, and keep the new node if the motion is
valid. After ``adopt_parent_solution`` a share of the samples is drawn around
the coarser level's path: the first coordinates come from a random point
along that path, the remaining ones are sampled uniformly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import numpy as np

from quotientplan.planning.params import ParamSet
from quotientplan.planning.spec import ConfigurationError, ParamKind
from quotientplan.utils.logging_config import setup_logger
from quotientplan.utils.path_utils import as_path, point_along_path

if TYPE_CHECKING:
    from quotientplan.planning.spaces import EuclideanSpaceInformation, ProblemDefinition
    from quotientplan.planning.spec import State, StatePath


@dataclass(eq=False)
class TreeNode:
    """Node in the RRT tree."""

    config: State
    parent: TreeNode | None = None
    children: list[TreeNode] = field(default_factory=list)

    def path_to_root(self) -> list[State]:
        """Get path from the root to this node."""
        path = []
        node: TreeNode | None = self
        while node is not None:
            path.append(node.config)
            node = node.parent
        return list(reversed(path))


class QRRT:
    """RRT on one quotient space, expanded one quantum at a time.

    Importance is ``1 / (tree_size + 1)``: small trees are expanded first, so
    effort spreads evenly over the levels sharing the scheduler.
    """

    def __init__(
        self,
        space: EuclideanSpaceInformation,
        range: float = 0.2,
        goal_bias: float = 0.05,
        parent_bias: float = 0.5,
        seed: int | None = None,
        logger: Any | None = None,
    ) -> None:
        self._space = space
        self._logger = logger if logger is not None else setup_logger()
        self._rng = np.random.default_rng(seed)

        self._range = 0.0
        self._goal_bias = 0.0
        self._parent_bias = 0.0
        self.set_range(range)
        self.set_goal_bias(goal_bias)
        self.set_parent_bias(parent_bias)

        self._pdef: ProblemDefinition | None = None
        self._parent_path: StatePath | None = None
        self._tree: list[TreeNode] = []
        self._configs = np.empty((0, space.dimension), dtype=np.float64)
        self._solution: StatePath | None = None
        self._feasible_samples = 0
        self._total_samples = 0

        self.params = ParamSet(logger=self._logger)
        self.params.declare("range", ParamKind.FLOAT, self.set_range, self.get_range, "0.:1.:10.")
        self.params.declare(
            "goal_bias", ParamKind.FLOAT, self.set_goal_bias, self.get_goal_bias, "0.:.05:1."
        )
        self.params.declare(
            "parent_bias", ParamKind.FLOAT, self.set_parent_bias, self.get_parent_bias, "0.:.05:1."
        )

    def get_name(self) -> str:
        return "QRRT"

    # =========================================================================
    # Parameters
    # =========================================================================

    def set_range(self, value: float) -> None:
        if value <= 0:
            raise ValueError(f"range must be positive, got {value}")
        self._range = float(value)

    def get_range(self) -> float:
        return self._range

    def set_goal_bias(self, value: float) -> None:
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"goal_bias must be in [0, 1], got {value}")
        self._goal_bias = float(value)

    def get_goal_bias(self) -> float:
        return self._goal_bias

    def set_parent_bias(self, value: float) -> None:
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"parent_bias must be in [0, 1], got {value}")
        self._parent_bias = float(value)

    def get_parent_bias(self) -> float:
        return self._parent_bias

    # =========================================================================
    # QuotientSpec
    # =========================================================================

    def set_problem_definition(self, pdef: ProblemDefinition) -> None:
        if pdef.dimension != self._space.dimension:
            raise ConfigurationError(
                f"Problem of dimension {pdef.dimension} bound to a "
                f"{self._space.dimension}-dimensional space"
            )
        self._pdef = pdef
        self.clear()

    def setup(self) -> None:
        if self._pdef is None:
            raise ConfigurationError("QRRT needs a problem definition before setup()")
        if not self._space.is_valid(self._pdef.start):
            self._logger.warning("Start state is invalid", space=self._space.name)
        if not self._space.is_valid(self._pdef.goal):
            self._logger.warning("Goal state is invalid", space=self._space.name)

    def clear(self) -> None:
        self._tree = []
        self._configs = np.empty((0, self._space.dimension), dtype=np.float64)
        self._solution = None
        self._parent_path = None
        self._feasible_samples = 0
        self._total_samples = 0

    def adopt_parent_solution(self, path: StatePath) -> None:
        parent = as_path(path)
        if len(parent) == 0:
            raise ValueError("Parent path has no waypoints")
        if parent.shape[1] > self._space.dimension:
            raise ValueError(
                f"Parent path of dimension {parent.shape[1]} does not fit a "
                f"{self._space.dimension}-dimensional space"
            )
        self._parent_path = parent

    def expand_one_quantum(self) -> bool:
        if self._solution is not None:
            return True
        if self._pdef is None:
            raise ConfigurationError("QRRT needs a problem definition before expanding")

        if not self._tree:
            if not self._space.is_valid(self._pdef.start):
                return False
            self._add_node(TreeNode(config=self._pdef.start.copy()))
            if self._pdef.is_goal(self._pdef.start):
                self._solution = self._pdef.start[None, :].copy()
                return True

        sample = self._sample()
        self._total_samples += 1
        if not self._space.is_valid(sample):
            return False
        self._feasible_samples += 1

        new_node = self._extend(sample)
        if new_node is None:
            return False

        if self._pdef.is_goal(new_node.config):
            self._solution = np.vstack(new_node.path_to_root())
            return True

        goal = self._pdef.goal
        if self._space.distance(new_node.config, goal) <= self._range and self._space.check_motion(
            new_node.config, goal
        ):
            goal_node = TreeNode(config=goal.copy(), parent=new_node)
            self._add_node(goal_node)
            self._solution = np.vstack(goal_node.path_to_root())
            return True

        return False

    def get_importance(self) -> float:
        return 1.0 / (len(self._tree) + 1)

    def get_feasible_node_count(self) -> int:
        return self._feasible_samples

    def get_total_node_count(self) -> int:
        return self._total_samples

    def get_solution(self) -> StatePath | None:
        return None if self._solution is None else self._solution.copy()

    # =========================================================================
    # Tree growth
    # =========================================================================

    @property
    def tree_size(self) -> int:
        return len(self._tree)

    def _sample(self) -> State:
        assert self._pdef is not None
        u = self._rng.random()
        if u < self._goal_bias:
            return self._pdef.goal.copy()

        sample = self._space.sample_uniform(self._rng)
        if self._parent_path is not None and u < self._goal_bias + self._parent_bias:
            lifted = point_along_path(self._parent_path, self._rng.random())
            sample[: len(lifted)] = lifted
        return sample

    def _extend(self, target: State) -> TreeNode | None:
        """Extend tree toward target, returns new node if successful."""
        distances = np.linalg.norm(self._configs[: len(self._tree)] - target, axis=1)
        nearest = self._tree[int(np.argmin(distances))]

        diff = target - nearest.config
        dist = float(np.linalg.norm(diff))
        if dist == 0.0:
            return None
        if dist <= self._range:
            new_config = target.copy()
        else:
            new_config = nearest.config + self._range * (diff / dist)

        if not self._space.check_motion(nearest.config, new_config):
            return None

        new_node = TreeNode(config=new_config, parent=nearest)
        self._add_node(new_node)
        return new_node

    def _add_node(self, node: TreeNode) -> None:
        n = len(self._tree)
        if n == len(self._configs):
            grown = np.empty((max(16, 2 * n), self._space.dimension), dtype=np.float64)
            grown[:n] = self._configs[:n]
            self._configs = grown
        self._configs[n] = node.config
        self._tree.append(node)
        if node.parent is not None:
            node.parent.children.append(node)
