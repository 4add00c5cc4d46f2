from __future__ import annotations

from dataclasses import dataclass, field
from typing import NewType

from pygame.math import Vector3

from .config import AgentSettings

AgentId = NewType("AgentId", int)


@dataclass(slots=True)
class Agent:
    """Crowd member steered by the velocity-obstacle solver.

    ``position`` and ``velocity`` are world-space with y up; only x and z take
    part in the planar steering math. ``steering`` is the last solved velocity
    and is informational only.
    """

    id: AgentId
    position: Vector3
    velocity: Vector3 = field(default_factory=Vector3)
    steering: Vector3 = field(default_factory=Vector3)
    settings: AgentSettings = field(default_factory=AgentSettings)
