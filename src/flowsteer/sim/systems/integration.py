from __future__ import annotations

import math
from typing import Sequence

from pygame.math import Vector2

from ..core.config import AgentSettings
from ..types.snapshot import AgentSnapshot
from ..utils.math2d import FLOAT_EPSILON, _clamp_length


def separation(position: Vector2, radius: float, neighbors: Sequence[AgentSnapshot], dt: float) -> tuple[Vector2, int]:
    """Summed push-out impulse from every neighbor inside 1.05x contact distance.

    The sum is not capped here; :func:`integrate` clamps the final
    velocity. Returns the impulse and how many neighbors contributed.
    """
    accum_x = 0.0
    accum_y = 0.0
    contributors = 0
    inv_dt = 1.0 / max(dt, 0.001)
    for neighbor in neighbors:
        offset_x = position.x - neighbor.position.x
        offset_y = position.y - neighbor.position.y
        dist = math.hypot(offset_x, offset_y)
        reach = (radius + neighbor.radius) * 1.05
        if dist < reach and dist > 1e-3:
            push = (reach - dist) * inv_dt
            accum_x += offset_x / dist * push
            accum_y += offset_y / dist * push
            contributors += 1
    return Vector2(accum_x, accum_y), contributors


def integrate(
    velocity: Vector2,
    solved: Vector2,
    separation_impulse: Vector2,
    settings: AgentSettings,
    dt: float,
) -> Vector2:
    desired = _clamp_length(solved + separation_impulse, settings.max_speed)
    accel = _clamp_length(desired - velocity, settings.max_accel)
    return _clamp_length(velocity + accel * dt, settings.max_speed + FLOAT_EPSILON)
