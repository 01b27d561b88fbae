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

from pydantic_settings import BaseSettings, SettingsConfigDict


class GlobalConfig(BaseSettings):
    """Process-wide planner defaults, read from ``QUOTIENTPLAN_*`` env vars or ``.env``."""

    planner: str = "qrrt"
    range: float = 0.2
    goal_bias: float = 0.05
    parent_bias: float = 0.5
    seed: int | None = None

    model_config = SettingsConfigDict(
        env_prefix="QUOTIENTPLAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    def planner_kwargs(self) -> dict[str, float | int | None]:
        """Keyword arguments accepted by the single-level planner constructors."""
        return {
            "range": self.range,
            "goal_bias": self.goal_bias,
            "parent_bias": self.parent_bias,
            "seed": self.seed,
        }
