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
Multi-Level Planning Module

Hierarchical motion planning over quotient spaces using Protocol-based architecture.

## Architecture

- Hierarchy: Levels (space + problem + planner), coarsest first, dimensions non-decreasing
- QuotientScheduler: Hands one expansion quantum at a time to the most important level
- MultiQuotient: Solve loop; passes each level's solution up to bias the next level
- QuotientSpec: Capability set of a single-level planner
  - QRRT: Quotient-space RRT
- SpaceInformationSpec / ProblemDefinitionSpec: Level space and query
  - EuclideanSpaceInformation, ProblemDefinition: Box-bounded R^n

## Factory Functions

```python
from quotientplan.planning import (
    ProblemDefinition,
    create_multi_quotient,
    timed_planner_termination_condition,
)
from quotientplan.planning.spaces import make_quotient_spaces

spaces = make_quotient_spaces([-1] * 6, [1] * 6, [2, 4, 6])
planner = create_multi_quotient(spaces, planner_name="qrrt", range=0.1)
planner.set_problem_definition(ProblemDefinition([-0.9] * 6, [0.9] * 6))
status = planner.solve(timed_planner_termination_condition(5.0))
path = planner.get_solution_path()
```

## Parameters

Tunables are exposed as strings through ``planner.params``:

```python
planner.params.set_param("stopLevel", "1")
planner.params.set_param("level2.range", "0.05")
```
"""

from quotientplan.planning.factory import create_multi_quotient, create_planner
from quotientplan.planning.hierarchy import Hierarchy, Level
from quotientplan.planning.multi_quotient import MultiQuotient
from quotientplan.planning.params import Param, ParamSet, ParsedValue, parse_param_value
from quotientplan.planning.scheduler import QuotientScheduler, SchedulerEntry
from quotientplan.planning.spaces import (
    EuclideanSpaceInformation,
    ProblemDefinition,
    make_quotient_spaces,
)
from quotientplan.planning.spec import (
    ConfigurationError,
    LevelStats,
    ParamKind,
    PlannerData,
    PlannerState,
    PlannerStatus,
    ProblemDefinitionSpec,
    QuotientSpec,
    SolveStatus,
    SpaceInformationSpec,
    StatePath,
    StepResult,
    TerminationConditionSpec,
)
from quotientplan.planning.termination import (
    PlannerTerminationCondition,
    iteration_termination_condition,
    planner_or_termination_condition,
    timed_planner_termination_condition,
)

__all__ = [
    "ConfigurationError",
    "EuclideanSpaceInformation",
    "Hierarchy",
    "Level",
    "LevelStats",
    "MultiQuotient",
    "Param",
    "ParamKind",
    "ParamSet",
    "ParsedValue",
    "PlannerData",
    "PlannerState",
    "PlannerStatus",
    "PlannerTerminationCondition",
    "ProblemDefinition",
    "ProblemDefinitionSpec",
    "QuotientScheduler",
    "QuotientSpec",
    "SchedulerEntry",
    "SolveStatus",
    "SpaceInformationSpec",
    "StatePath",
    "StepResult",
    "TerminationConditionSpec",
    "create_multi_quotient",
    "create_planner",
    "iteration_termination_condition",
    "make_quotient_spaces",
    "parse_param_value",
    "planner_or_termination_condition",
    "timed_planner_termination_condition",
]
