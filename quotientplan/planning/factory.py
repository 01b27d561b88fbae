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

"""Factory functions for multi-level planning components."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from quotientplan.core.global_config import GlobalConfig
from quotientplan.planning.multi_quotient import MultiQuotient

if TYPE_CHECKING:
    from collections.abc import Sequence

    from quotientplan.planning.spec import QuotientSpec, SpaceInformationSpec

_AVAILABLE_PLANNERS = ["qrrt"]


def create_planner(name: str, space: SpaceInformationSpec, **kwargs: Any) -> QuotientSpec:
    """Create a single-level planner for ``space``. name='qrrt'."""
    if name == "qrrt":
        from quotientplan.planning.planners.qrrt import QRRT

        return QRRT(space, **kwargs)
    else:
        raise ValueError(f"Unknown planner: {name}. Available: {_AVAILABLE_PLANNERS}")


def create_multi_quotient(
    spaces: Sequence[SpaceInformationSpec],
    planner_name: str | None = None,
    config: GlobalConfig | None = None,
    name: str | None = None,
    logger: Any | None = None,
    **planner_kwargs: Any,
) -> MultiQuotient:
    """Create a MultiQuotient whose levels all use the same planner type.

    Planner defaults come from ``config`` (``GlobalConfig()`` when omitted,
    i.e. ``QUOTIENTPLAN_*`` environment variables); ``planner_kwargs`` win.
    A configured seed is offset by the level index so levels do not share
    a random stream.
    """
    config = config if config is not None else GlobalConfig()
    planner_name = planner_name or config.planner
    if planner_name not in _AVAILABLE_PLANNERS:
        raise ValueError(f"Unknown planner: {planner_name}. Available: {_AVAILABLE_PLANNERS}")

    kwargs: dict[str, Any] = {**config.planner_kwargs(), **planner_kwargs}
    seed = kwargs.pop("seed", None)
    level_counter = iter(range(len(spaces)))

    def _factory(space: SpaceInformationSpec) -> QuotientSpec:
        k = next(level_counter)
        level_seed = None if seed is None else seed + k
        return create_planner(planner_name, space, seed=level_seed, logger=logger, **kwargs)

    return MultiQuotient(
        spaces,
        _factory,
        name=name or f"Multi{planner_name.upper()}",
        logger=logger,
    )
