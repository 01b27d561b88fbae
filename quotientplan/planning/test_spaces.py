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

"""Tests for Euclidean spaces and problem definitions."""

from __future__ import annotations

import numpy as np
import pytest

from quotientplan.planning.spaces import (
    EuclideanSpaceInformation,
    ProblemDefinition,
    make_quotient_spaces,
)
from quotientplan.planning.spec import ConfigurationError, SpaceInformationSpec


def _outside_disc(state) -> bool:
    """Obstacle: disc of radius 0.3 at the origin of the first two coordinates."""
    return float(np.linalg.norm(state[:2])) > 0.3


class TestEuclideanSpaceInformation:
    def test_dimension_and_bounds(self):
        space = EuclideanSpaceInformation([-1, -2], [1, 2])

        assert isinstance(space, SpaceInformationSpec)
        assert space.dimension == 2
        lower, upper = space.bounds
        np.testing.assert_array_equal(lower, [-1, -2])
        np.testing.assert_array_equal(upper, [1, 2])

    @pytest.mark.parametrize(
        "lower,upper",
        [([0, 0], [1]), ([], []), ([1, 0], [0, 1])],
    )
    def test_invalid_bounds(self, lower, upper):
        with pytest.raises(ConfigurationError):
            EuclideanSpaceInformation(lower, upper)

    def test_validity(self):
        space = EuclideanSpaceInformation([-1, -1], [1, 1], validity_checker=_outside_disc)

        assert space.is_valid([0.5, 0.5])
        assert not space.is_valid([0.0, 0.1])
        assert not space.is_valid([1.5, 0.0])
        assert not space.is_valid([0.5, 0.5, 0.5])

    def test_check_motion_through_obstacle(self):
        space = EuclideanSpaceInformation(
            [-1, -1], [1, 1], validity_checker=_outside_disc, collision_resolution=0.01
        )

        assert not space.check_motion([-0.8, 0.0], [0.8, 0.0])
        assert space.check_motion([-0.8, 0.5], [0.8, 0.5])

    def test_samples_within_bounds(self):
        space = EuclideanSpaceInformation([-1, 0, 2], [1, 0.5, 3])
        rng = np.random.default_rng(0)

        samples = [space.sample_uniform(rng) for _ in range(100)]

        assert all(space.satisfies_bounds(s) for s in samples)


def test_make_quotient_spaces():
    spaces = make_quotient_spaces([-1, -2, -3, -4], [1, 2, 3, 4], [1, 2, 4])

    assert [s.dimension for s in spaces] == [1, 2, 4]
    np.testing.assert_array_equal(spaces[1].bounds[1], [1, 2])
    assert spaces[2].name == "Q2(R4)"


def test_make_quotient_spaces_rejects_bad_input():
    with pytest.raises(ConfigurationError):
        make_quotient_spaces([-1, -1], [1, 1], [1, 3])
    with pytest.raises(ConfigurationError):
        make_quotient_spaces([-1, -1], [1, 1], [1, 2], validity_checkers=[None])


class TestProblemDefinition:
    def test_projection_keeps_prefix(self):
        pdef = ProblemDefinition([0, 1, 2, 3], [4, 5, 6, 7], goal_tolerance=0.2)

        projected = pdef.project(EuclideanSpaceInformation([0, 0], [10, 10]))

        np.testing.assert_array_equal(projected.start, [0, 1])
        np.testing.assert_array_equal(projected.goal, [4, 5])
        assert projected.goal_tolerance == 0.2
        assert projected.dimension == 2

    def test_projection_onto_larger_space_rejected(self):
        pdef = ProblemDefinition([0], [1])
        with pytest.raises(ConfigurationError):
            pdef.project(EuclideanSpaceInformation([0, 0], [1, 1]))

    def test_mismatched_start_goal_rejected(self):
        with pytest.raises(ConfigurationError):
            ProblemDefinition([0, 0], [1])

    def test_is_goal(self):
        pdef = ProblemDefinition([0, 0], [1, 1], goal_tolerance=0.1)

        assert pdef.is_goal([1.05, 1.0])
        assert not pdef.is_goal([1.2, 1.0])
        assert pdef.is_goal([1.2, 1.0], tolerance=0.5)
