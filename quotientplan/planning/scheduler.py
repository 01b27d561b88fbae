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

"""Priority scheduling of expansion quanta across levels.

The scheduler keeps a heap of level indices ordered by the importance each
level's planner reports, highest first, ties going to the lower (coarser)
level. One ``step()`` gives exactly one quantum to the best level and
re-ranks it right away, so a level whose importance has collapsed surfaces
again once every other queued level ranks lower still.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import heapq
import math
from typing import TYPE_CHECKING

from quotientplan.planning.spec import StepResult

if TYPE_CHECKING:
    from quotientplan.planning.hierarchy import Hierarchy
    from quotientplan.planning.spec import LevelIndex


@dataclass(order=True, frozen=True)
class SchedulerEntry:
    """Heap entry: a level index with the importance it had when queued.

    Ordering is by ``(-importance, level_index)`` so that ``heapq`` pops the
    most important level first. NaN importances rank last.
    """

    sort_key: tuple[float, int] = field(init=False, repr=False)
    level_index: LevelIndex = field(compare=False)
    importance: float = field(compare=False)

    def __post_init__(self) -> None:
        priority = math.inf if math.isnan(self.importance) else -self.importance
        object.__setattr__(self, "sort_key", (priority, self.level_index))


class QuotientScheduler:
    """Priority queue of not-yet-solved levels, holding at most one entry per level."""

    def __init__(self, hierarchy: Hierarchy) -> None:
        self._hierarchy = hierarchy
        self._heap: list[SchedulerEntry] = []
        self._queued: set[LevelIndex] = set()

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def __contains__(self, level_index: object) -> bool:
        return level_index in self._queued

    def push(self, level_index: LevelIndex) -> SchedulerEntry:
        """Queue a level with its current importance.

        Raises:
            ValueError: If the level is already queued.
        """
        if level_index in self._queued:
            raise ValueError(f"Level {level_index} is already scheduled")
        level = self._hierarchy[level_index]
        entry = SchedulerEntry(level_index=level_index, importance=float(level.importance))
        heapq.heappush(self._heap, entry)
        self._queued.add(level_index)
        return entry

    def pop(self) -> SchedulerEntry:
        """Remove and return the most important entry. Raises IndexError when empty."""
        entry = heapq.heappop(self._heap)
        self._queued.discard(entry.level_index)
        return entry

    def peek(self) -> SchedulerEntry | None:
        return self._heap[0] if self._heap else None

    def step(self) -> StepResult:
        """Give one expansion quantum to the most important level.

        The level is requeued with a fresh importance unless the quantum
        produced a solution. If the planner raises, the level stays out of
        the queue and the exception propagates.

        Raises:
            IndexError: If no level is queued.
        """
        if not self._heap:
            raise IndexError("step() on an empty scheduler")

        entry = self.pop()
        level = self._hierarchy[entry.level_index]
        solved = bool(level.planner.expand_one_quantum())
        if not solved:
            self.push(entry.level_index)
        return StepResult(level_index=entry.level_index, solved=solved)

    def entries(self) -> list[SchedulerEntry]:
        """Queued entries, best first."""
        return sorted(self._heap)

    def clear(self) -> None:
        self._heap.clear()
        self._queued.clear()
