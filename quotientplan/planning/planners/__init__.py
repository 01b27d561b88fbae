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
Single-Level Planners Module

Planners usable as levels of a MultiQuotient hierarchy. Each implements the
QuotientSpec capability set: bounded expansion quanta, an importance score,
node counters and adoption of the coarser level's solution.

## Implementations

- QRRT: Quotient-space RRT (one tree extension per quantum)

## Usage

```python
from quotientplan.planning.factory import create_planner

planner = create_planner("qrrt", space, range=0.1)  # Returns QuotientSpec
```
"""

from quotientplan.planning.planners.qrrt import QRRT

__all__ = ["QRRT"]
