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

"""
Path Utilities

Standalone utility functions for state paths. A path is an array of shape
(n_waypoints, dimension); every function accepts any array-like of that shape.

- compute_path_length(): Total Euclidean length
- interpolate_segment(): Waypoints between two states
- point_along_path(): State at a fraction of the arc length
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray

    from quotientplan.planning.spec import State, StatePath


def as_path(path: ArrayLike) -> StatePath:
    """Convert to a float64 array of shape (n_waypoints, dimension)."""
    arr = np.asarray(path, dtype=np.float64)
    if arr.ndim != 2:
        raise ValueError(f"Path must be 2-dimensional (n_waypoints, dimension), got {arr.shape}")
    return arr


def _segment_lengths(path: StatePath) -> NDArray[np.float64]:
    return np.linalg.norm(np.diff(path, axis=0), axis=1)


def compute_path_length(path: ArrayLike) -> float:
    """Compute total path length.

    Sums the Euclidean distances between consecutive waypoints.

    Example:
        length = compute_path_length(planner.get_solution_path())
    """
    arr = as_path(path)
    if len(arr) <= 1:
        return 0.0
    return float(np.sum(_segment_lengths(arr)))


def interpolate_segment(start: ArrayLike, end: ArrayLike, step_size: float) -> StatePath:
    """Interpolate between two states.

    Returns the states from start to end (inclusive) with at most
    ``step_size`` distance between consecutive ones.
    """
    q_start = np.asarray(start, dtype=np.float64)
    q_end = np.asarray(end, dtype=np.float64)

    distance = float(np.linalg.norm(q_end - q_start))
    if distance <= step_size:
        return np.vstack([q_start, q_end])

    num_steps = int(np.ceil(distance / step_size))
    alphas = np.linspace(0.0, 1.0, num_steps + 1)[:, None]
    return q_start + alphas * (q_end - q_start)


def point_along_path(path: ArrayLike, fraction: float) -> State:
    """State at ``fraction`` (clipped to [0, 1]) of the path's arc length.

    Used to draw samples from a coarser level's solution.

    Raises:
        ValueError: If the path has no waypoints.
    """
    arr = as_path(path)
    if len(arr) == 0:
        raise ValueError("Cannot pick a point along an empty path")
    if len(arr) == 1:
        return arr[0].copy()

    lengths = _segment_lengths(arr)
    total = float(np.sum(lengths))
    if total == 0.0:
        return arr[0].copy()

    target = min(max(fraction, 0.0), 1.0) * total
    cumulative = np.concatenate([[0.0], np.cumsum(lengths)])
    i = int(np.searchsorted(cumulative, target, side="right")) - 1
    i = min(i, len(lengths) - 1)
    if lengths[i] == 0.0:
        return arr[i].copy()
    alpha = (target - cumulative[i]) / lengths[i]
    return arr[i] + alpha * (arr[i + 1] - arr[i])

