from __future__ import annotations

import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..core.context import SimulationContext


def apply_movement(context: SimulationContext, dt: float) -> float:
    """Advance every managed agent along its published steering velocity.

    Returns the mean planar speed of the moved agents.
    """
    speed_sum = 0.0
    moved = 0
    for flow_field in context.flow_fields:
        for unit, steer in flow_field.steering_map.items():
            agent = context.agents.get(unit)
            if agent is None:
                continue
            agent.position.update(
                agent.position.x + steer.x * dt,
                agent.position.y,
                agent.position.z + steer.z * dt,
            )
            speed_sum += math.hypot(steer.x, steer.z)
            moved += 1
    return 0.0 if moved == 0 else speed_sum / moved
