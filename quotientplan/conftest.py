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

from unittest.mock import MagicMock

import pytest

from quotientplan.planning.spaces import ProblemDefinition
from quotientplan.planning.testing import FakePlannerFactory, FakeSpace


@pytest.fixture
def mock_logger():
    """Logger handle whose calls can be asserted on."""
    return MagicMock()


@pytest.fixture
def fake_spaces():
    """Three levels of dimension 2, 4 and 6."""
    return [FakeSpace(2), FakeSpace(4), FakeSpace(6)]


@pytest.fixture
def fake_factory():
    """Factory whose planners each solve in their first quantum."""
    return FakePlannerFactory(solve_after=1)


@pytest.fixture
def pdef6():
    """A 6-dimensional query, projectable onto every level of ``fake_spaces``."""
    return ProblemDefinition(start=[0.0] * 6, goal=[1.0] * 6)
