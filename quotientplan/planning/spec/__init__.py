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

"""Multi-level planning specifications."""

from quotientplan.planning.spec.enums import (
    ParamKind,
    PlannerState,
    PlannerStatus,
    SolveStatus,
)
from quotientplan.planning.spec.errors import ConfigurationError
from quotientplan.planning.spec.protocols import (
    ProblemDefinitionSpec,
    QuotientSpec,
    SpaceInformationSpec,
    TerminationConditionSpec,
)
from quotientplan.planning.spec.types import (
    LevelIndex,
    LevelStats,
    PlannerData,
    State,
    StatePath,
    StepResult,
)

__all__ = [
    "ConfigurationError",
    "LevelIndex",
    "LevelStats",
    "ParamKind",
    "PlannerData",
    "PlannerState",
    "PlannerStatus",
    "ProblemDefinitionSpec",
    "QuotientSpec",
    "SolveStatus",
    "SpaceInformationSpec",
    "State",
    "StatePath",
    "StepResult",
    "TerminationConditionSpec",
]
