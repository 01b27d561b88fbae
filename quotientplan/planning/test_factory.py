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

"""Tests for the planner factories."""

from __future__ import annotations

import pytest

from quotientplan.core.global_config import GlobalConfig
from quotientplan.planning.factory import create_multi_quotient, create_planner
from quotientplan.planning.multi_quotient import MultiQuotient
from quotientplan.planning.planners.qrrt import QRRT
from quotientplan.planning.spaces import make_quotient_spaces
from quotientplan.planning.spec import QuotientSpec


@pytest.fixture
def spaces():
    return make_quotient_spaces([-1] * 4, [1] * 4, [2, 4])


def test_create_planner(spaces, mock_logger):
    planner = create_planner("qrrt", spaces[0], range=0.3, logger=mock_logger)

    assert isinstance(planner, QRRT)
    assert isinstance(planner, QuotientSpec)
    assert planner.get_range() == 0.3


def test_create_planner_unknown_name(spaces):
    with pytest.raises(ValueError, match="Unknown planner"):
        create_planner("prm", spaces[0])


def test_create_multi_quotient_uses_config(spaces, mock_logger):
    config = GlobalConfig(range=0.15, goal_bias=0.2, seed=7)

    planner = create_multi_quotient(spaces, config=config, logger=mock_logger)

    assert isinstance(planner, MultiQuotient)
    assert planner.get_name() == "MultiQRRT"
    assert planner.params.get_param("level0.range") == "0.15"
    assert planner.params.get_param("level1.goal_bias") == "0.2"


def test_explicit_kwargs_override_config(spaces, mock_logger):
    config = GlobalConfig(range=0.15)

    planner = create_multi_quotient(spaces, config=config, logger=mock_logger, range=0.4)

    assert planner.params.get_param("level1.range") == "0.4"


def test_create_multi_quotient_unknown_planner(spaces):
    with pytest.raises(ValueError, match="Unknown planner"):
        create_multi_quotient(spaces, planner_name="prm")


def test_config_from_environment(monkeypatch):
    monkeypatch.setenv("QUOTIENTPLAN_RANGE", "0.05")
    monkeypatch.setenv("QUOTIENTPLAN_SEED", "3")

    config = GlobalConfig()

    assert config.range == 0.05
    assert config.seed == 3
    assert config.planner_kwargs()["seed"] == 3
