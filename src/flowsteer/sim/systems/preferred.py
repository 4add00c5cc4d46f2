from __future__ import annotations

import math
from typing import TYPE_CHECKING

from pygame.math import Vector2

from ..core.config import AgentSettings
from ..utils.math2d import _clamp_value, _safe_normalize

if TYPE_CHECKING:
    from ..core.flowfield import FlowField
    from ..core.grid import EnvironmentGrid
    from pygame.math import Vector3


def arrival_scale(distance: float, sensor_range: float) -> float:
    slow_radius = max(sensor_range * 2.0, 0.1)
    if distance < slow_radius:
        return _clamp_value(distance / slow_radius, 0.0, 1.0)
    return 1.0


def preferred_velocity(
    position: Vector3,
    settings: AgentSettings,
    flow_field: FlowField,
    grid: EnvironmentGrid,
) -> Vector2:
    """Goal-seeking planar velocity, slowed inside the arrival radius."""
    direction = _safe_normalize(flow_field.sample_direction(position, grid))
    destination = flow_field.destination
    goal_dist = math.hypot(destination.x - position.x, destination.z - position.z)
    speed = settings.preferred_speed * arrival_scale(goal_dist, settings.sensor_range)
    return direction * speed
