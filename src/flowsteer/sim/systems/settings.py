from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..core.config import AgentSettings, validate_settings

if TYPE_CHECKING:
    from ..core.context import SimulationContext

logger = logging.getLogger(__name__)


@dataclass
class SettingsUpdater:
    """Externally edited tunables pushed uniformly onto every agent between ticks."""

    preferred_speed: float = 50.0
    max_speed: float = 60.0
    max_accel: float = 100.0
    horizon: float = 3.0
    radius: float = 2.5
    sensor_range: float = 8.0

    @classmethod
    def from_settings(cls, settings: AgentSettings) -> "SettingsUpdater":
        return cls(
            preferred_speed=settings.preferred_speed,
            max_speed=settings.max_speed,
            max_accel=settings.max_accel,
            horizon=settings.horizon,
            radius=settings.radius,
            sensor_range=settings.sensor_range,
        )

    def to_settings(self) -> AgentSettings:
        return validate_settings(
            AgentSettings(
                preferred_speed=self.preferred_speed,
                max_speed=self.max_speed,
                max_accel=self.max_accel,
                horizon=self.horizon,
                radius=self.radius,
                sensor_range=self.sensor_range,
            )
        )


def sync_settings(context: SimulationContext, updater: SettingsUpdater) -> int:
    settings = updater.to_settings()
    for agent in context.agents.values():
        agent.settings = settings.copy()
    logger.debug("synchronised settings onto %d agents: %s", len(context.agents), settings)
    return len(context.agents)
