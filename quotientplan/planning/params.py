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

"""Named planner parameters.

Planners declare their tunables once, as ``(name, kind, setter, getter)``
entries, so that they can be configured generically from strings (a config
file, a command line, a benchmark sweep) without knowing the planner type.

Values are one of a few kinds (see ``ParamKind``). Parsing a string never
raises: ``parse_param_value`` returns a ``ParsedValue`` carrying either the
typed value or an error message, and ``ParamSet.set_param`` turns a failure
into ``False`` plus a logged warning, leaving the previous value in place.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, TypeAlias

from quotientplan.planning.spec import ParamKind
from quotientplan.utils.logging_config import setup_logger

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping

ParamValue: TypeAlias = bool | int | float | str

_TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})
_FALSE_STRINGS = frozenset({"false", "0", "no", "off"})


@dataclass(frozen=True)
class ParsedValue:
    """Result of converting a string to a typed parameter value.

    Attributes:
        value: Converted value (None on failure)
        error: Human-readable reason of the failure (None on success)
    """

    value: ParamValue | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_param_value(kind: ParamKind, text: str) -> ParsedValue:
    """Convert ``text`` to a value of ``kind``."""
    stripped = text.strip()
    if kind == ParamKind.STRING:
        return ParsedValue(value=text)
    if kind == ParamKind.BOOL:
        lowered = stripped.lower()
        if lowered in _TRUE_STRINGS:
            return ParsedValue(value=True)
        if lowered in _FALSE_STRINGS:
            return ParsedValue(value=False)
        return ParsedValue(error=f"'{text}' is not a boolean")
    try:
        if kind == ParamKind.INT:
            return ParsedValue(value=int(stripped))
        return ParsedValue(value=float(stripped))
    except ValueError:
        return ParsedValue(error=f"'{text}' is not a valid {kind.name.lower()}")


def format_param_value(kind: ParamKind, value: ParamValue) -> str:
    """Convert a typed value back to the string form ``parse_param_value`` accepts."""
    if kind == ParamKind.BOOL:
        return "true" if value else "false"
    if kind == ParamKind.FLOAT:
        return repr(float(value))
    return str(value)


@dataclass(frozen=True)
class Param:
    """A declared parameter.

    Attributes:
        name: Key used by ``ParamSet.set_param``
        kind: Value kind the string form is parsed into
        setter: Receives the typed value; may raise ValueError to reject it
        getter: Returns the current typed value (None for write-only parameters)
        range_suggestion: Free-form hint for tools sweeping the parameter (e.g. "0.:1.")
    """

    name: str
    kind: ParamKind
    setter: Callable[[Any], None]
    getter: Callable[[], Any] | None = None
    range_suggestion: str = ""

    def get_value(self) -> str:
        if self.getter is None:
            return ""
        return format_param_value(self.kind, self.getter())


class ParamSet:
    """A set of named parameters, settable and readable as strings."""

    def __init__(self, logger: Any | None = None) -> None:
        self._logger = logger if logger is not None else setup_logger()
        self._params: dict[str, Param] = {}

    def declare(
        self,
        name: str,
        kind: ParamKind,
        setter: Callable[[Any], None],
        getter: Callable[[], Any] | None = None,
        range_suggestion: str = "",
    ) -> Param:
        """Declare (or redeclare) parameter ``name``."""
        param = Param(name, kind, setter, getter, range_suggestion)
        self._params[name] = param
        return param

    def add(self, param: Param) -> None:
        self._params[param.name] = param

    def remove(self, name: str) -> None:
        self._params.pop(name, None)

    def include(self, other: ParamSet, prefix: str = "") -> None:
        """Expose every parameter of ``other`` here, optionally under ``prefix``."""
        for name, param in other._params.items():
            self.add(replace(param, name=prefix + name))

    def clear(self) -> None:
        self._params.clear()

    def set_param(self, key: str, value: str) -> bool:
        """Set parameter ``key`` from its string form.

        Returns:
            True if the parameter exists, the string parsed and the setter
            accepted the value. On failure a warning is logged and the
            previous value is kept.
        """
        param = self._params.get(key)
        if param is None:
            self._logger.warning("Unknown parameter", param=key, value=value)
            return False

        parsed = parse_param_value(param.kind, value)
        if not parsed.ok:
            self._logger.warning(
                "Invalid value format specified for parameter", param=key, error=parsed.error
            )
            return False

        try:
            param.setter(parsed.value)
        except (ValueError, TypeError) as e:
            self._logger.warning("Parameter value rejected", param=key, value=value, error=str(e))
            return False

        self._logger.debug("Parameter set", param=key, value=param.get_value() or value)
        return True

    def set_params(self, kv: Mapping[str, str]) -> bool:
        """Set several parameters. Returns True only if every one was set."""
        results = [self.set_param(key, value) for key, value in kv.items()]
        return all(results)

    def get_param(self, key: str) -> str:
        """String form of parameter ``key``. Raises KeyError for unknown parameters."""
        return self._params[key].get_value()

    def get_params(self) -> dict[str, str]:
        return {name: param.get_value() for name, param in sorted(self._params.items())}

    def get_param_names(self) -> list[str]:
        return sorted(self._params)

    def __getitem__(self, key: str) -> Param:
        return self._params[key]

    def __contains__(self, key: object) -> bool:
        return key in self._params

    def __iter__(self) -> Iterator[Param]:
        return iter(self._params.values())

    def __len__(self) -> int:
        return len(self._params)
