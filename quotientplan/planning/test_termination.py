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

"""Tests for termination conditions."""

from __future__ import annotations

import time

import pytest

from quotientplan.planning.termination import (
    PlannerTerminationCondition,
    as_termination_condition,
    iteration_termination_condition,
    planner_or_termination_condition,
    timed_planner_termination_condition,
)


def test_wraps_predicate():
    flag = {"stop": False}
    ptc = PlannerTerminationCondition(lambda: flag["stop"])

    assert ptc() is False
    flag["stop"] = True
    assert ptc.eval() is True


def test_termination_latches():
    values = iter([True, False, False])
    ptc = PlannerTerminationCondition(lambda: next(values))

    assert ptc()
    assert ptc()
    assert bool(ptc)


def test_terminate():
    ptc = PlannerTerminationCondition(lambda: False)
    ptc.terminate()
    assert ptc()


def test_iteration_condition_allows_n_evaluations():
    ptc = iteration_termination_condition(3)
    assert [ptc() for _ in range(5)] == [False, False, False, True, True]


def test_zero_iterations_terminates_immediately():
    assert iteration_termination_condition(0)()


def test_timed_condition():
    assert timed_planner_termination_condition(0.0)()

    ptc = timed_planner_termination_condition(60.0)
    assert not ptc()


def test_timed_condition_expires():
    ptc = timed_planner_termination_condition(0.01)
    time.sleep(0.02)
    assert ptc()


@pytest.mark.parametrize("bad", [-1.0])
def test_negative_budgets_rejected(bad):
    with pytest.raises(ValueError):
        timed_planner_termination_condition(bad)
    with pytest.raises(ValueError):
        iteration_termination_condition(int(bad))


def test_or_condition():
    ptc = planner_or_termination_condition(lambda: False, iteration_termination_condition(1))
    assert not ptc()
    assert ptc()


def test_as_termination_condition():
    fn = lambda: False  # noqa: E731
    assert as_termination_condition(fn) is fn
    assert as_termination_condition(0)()
    assert not as_termination_condition(30)()


@pytest.mark.parametrize("budget", [-5, -0.001, float("nan")])
def test_expired_budget_is_already_terminated(budget):
    assert as_termination_condition(budget)()
