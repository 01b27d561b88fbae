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

"""Tests for named planner parameters."""

from __future__ import annotations

import pytest

from quotientplan.planning.params import (
    ParamSet,
    format_param_value,
    parse_param_value,
)
from quotientplan.planning.spec import ParamKind


class _Knobs:
    def __init__(self) -> None:
        self.count = 3
        self.ratio = 0.5
        self.enabled = False
        self.label = "coarse"

    def set_count(self, value: int) -> None:
        if value < 0:
            raise ValueError("count must be non-negative")
        self.count = value


@pytest.fixture
def knobs():
    return _Knobs()


@pytest.fixture
def param_set(knobs, mock_logger):
    params = ParamSet(logger=mock_logger)
    params.declare("count", ParamKind.INT, knobs.set_count, lambda: knobs.count)
    params.declare(
        "ratio", ParamKind.FLOAT, lambda v: setattr(knobs, "ratio", v), lambda: knobs.ratio
    )
    params.declare(
        "enabled", ParamKind.BOOL, lambda v: setattr(knobs, "enabled", v), lambda: knobs.enabled
    )
    params.declare(
        "label", ParamKind.STRING, lambda v: setattr(knobs, "label", v), lambda: knobs.label
    )
    return params


# =============================================================================
# Parsing
# =============================================================================


@pytest.mark.parametrize(
    "kind,text,expected",
    [
        (ParamKind.INT, "2", 2),
        (ParamKind.INT, " -4 ", -4),
        (ParamKind.FLOAT, "0.25", 0.25),
        (ParamKind.FLOAT, "3", 3.0),
        (ParamKind.BOOL, "true", True),
        (ParamKind.BOOL, "0", False),
        (ParamKind.BOOL, "Yes", True),
        (ParamKind.STRING, "fine level", "fine level"),
    ],
)
def test_parse_valid(kind, text, expected):
    parsed = parse_param_value(kind, text)
    assert parsed.ok
    assert parsed.value == expected
    assert type(parsed.value) is type(expected)


@pytest.mark.parametrize(
    "kind,text",
    [
        (ParamKind.INT, "abc"),
        (ParamKind.INT, "2.5"),
        (ParamKind.INT, ""),
        (ParamKind.FLOAT, "fast"),
        (ParamKind.BOOL, "maybe"),
    ],
)
def test_parse_invalid(kind, text):
    parsed = parse_param_value(kind, text)
    assert not parsed.ok
    assert parsed.value is None
    assert text in parsed.error


def test_format_is_parseable():
    assert format_param_value(ParamKind.BOOL, True) == "true"
    assert format_param_value(ParamKind.INT, 7) == "7"
    assert parse_param_value(ParamKind.FLOAT, format_param_value(ParamKind.FLOAT, 0.1)).value == 0.1


# =============================================================================
# ParamSet
# =============================================================================


class TestParamSet:
    """String access to declared parameters."""

    def test_set_and_get(self, param_set, knobs):
        assert param_set.set_param("count", "2")
        assert param_set.get_param("count") == "2"
        assert knobs.count == 2

        assert param_set.set_param("enabled", "1")
        assert param_set.get_param("enabled") == "true"

    def test_parse_failure_keeps_value_and_warns(self, param_set, knobs, mock_logger):
        assert param_set.set_param("count", "abc") is False

        assert knobs.count == 3
        assert param_set.get_param("count") == "3"
        mock_logger.warning.assert_called_once()

    def test_setter_rejection_keeps_value(self, param_set, knobs, mock_logger):
        assert param_set.set_param("count", "-1") is False

        assert knobs.count == 3
        mock_logger.warning.assert_called_once()

    def test_setter_type_error_returns_false(self, mock_logger):
        def set_label(value: str) -> None:
            raise TypeError("label must be bytes")

        params = ParamSet(logger=mock_logger)
        params.declare("label", ParamKind.STRING, set_label)

        assert params.set_param("label", "fine") is False
        mock_logger.warning.assert_called_once()

    def test_unknown_parameter(self, param_set, mock_logger):
        assert param_set.set_param("missing", "1") is False
        mock_logger.warning.assert_called_once()
        with pytest.raises(KeyError):
            param_set.get_param("missing")

    def test_set_params_reports_any_failure(self, param_set, knobs):
        assert param_set.set_params({"count": "5", "ratio": "0.75"}) is True
        assert param_set.set_params({"count": "6", "ratio": "nope"}) is False
        # Valid entries are applied even when another one fails
        assert knobs.count == 6
        assert knobs.ratio == 0.75

    def test_get_params(self, param_set):
        assert param_set.get_params() == {
            "count": "3",
            "enabled": "false",
            "label": "coarse",
            "ratio": "0.5",
        }
        assert param_set.get_param_names() == ["count", "enabled", "label", "ratio"]

    def test_include_with_prefix(self, param_set, knobs, mock_logger):
        outer = ParamSet(logger=mock_logger)
        outer.include(param_set, prefix="level1.")

        assert len(outer) == 4
        assert "level1.count" in outer
        assert outer.set_param("level1.count", "9")
        assert knobs.count == 9

    def test_write_only_parameter(self, mock_logger):
        received = []
        params = ParamSet(logger=mock_logger)
        params.declare("seed", ParamKind.INT, received.append)

        assert params.set_param("seed", "42")
        assert received == [42]
        assert params.get_param("seed") == ""

    def test_remove_and_clear(self, param_set):
        param_set.remove("label")
        param_set.remove("label")
        assert "label" not in param_set
        assert len(param_set) == 3

        param_set.clear()
        assert len(param_set) == 0
