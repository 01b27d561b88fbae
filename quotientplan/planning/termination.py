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

"""Termination conditions polled by the scheduling loop.

Any zero-argument callable returning bool can terminate ``MultiQuotient.solve``.
``PlannerTerminationCondition`` wraps one and adds an explicit ``terminate()``
switch, so a caller can cancel a running solve from a callback.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


class PlannerTerminationCondition:
    """Termination predicate evaluated once per scheduling step."""

    def __init__(self, fn: Callable[[], bool]) -> None:
        self._fn = fn
        self._terminated = False

    def terminate(self) -> None:
        """Force every later evaluation to return True."""
        self._terminated = True

    def eval(self) -> bool:
        if not self._terminated and self._fn():
            self._terminated = True
        return self._terminated

    def __call__(self) -> bool:
        return self.eval()

    def __bool__(self) -> bool:
        return self.eval()


def timed_planner_termination_condition(duration: float) -> PlannerTerminationCondition:
    """Terminate once ``duration`` seconds have elapsed since creation."""
    if duration < 0:
        raise ValueError(f"duration must be non-negative, got {duration}")
    deadline = time.monotonic() + duration
    return PlannerTerminationCondition(lambda: time.monotonic() >= deadline)


def iteration_termination_condition(iterations: int) -> PlannerTerminationCondition:
    """Terminate on the evaluation following the ``iterations``-th one.

    With ``iterations=n`` exactly n scheduling steps are allowed.
    """
    if iterations < 0:
        raise ValueError(f"iterations must be non-negative, got {iterations}")
    evaluations = 0

    def _exceeded() -> bool:
        nonlocal evaluations
        evaluations += 1
        return evaluations > iterations

    return PlannerTerminationCondition(_exceeded)


def planner_or_termination_condition(
    first: Callable[[], bool], second: Callable[[], bool]
) -> PlannerTerminationCondition:
    """Terminate as soon as either condition does."""
    return PlannerTerminationCondition(lambda: bool(first()) or bool(second()))


def as_termination_condition(ptc: Callable[[], bool] | float) -> Callable[[], bool]:
    """Accept a predicate or a time budget in seconds.

    A budget that is not positive (or NaN) has already expired.
    """
    if callable(ptc):
        return ptc
    budget = float(ptc)
    if not budget > 0:
        return PlannerTerminationCondition(lambda: True)
    return timed_planner_termination_condition(budget)
