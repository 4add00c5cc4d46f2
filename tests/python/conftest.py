import os
import sys
from pathlib import Path

import pytest
from pygame.math import Vector2, Vector3

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

ROOT = Path(__file__).resolve().parents[2]
src_root = ROOT / "src"
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))

from flowsteer.sim.core.agent import Agent, AgentId  # noqa: E402
from flowsteer.sim.core.config import AgentSettings, GridConfig  # noqa: E402
from flowsteer.sim.core.context import SimulationContext  # noqa: E402
from flowsteer.sim.core.flowfield import FlowField  # noqa: E402
from flowsteer.sim.core.grid import EnvironmentGrid  # noqa: E402


def constant_field(units, direction=(1.0, 0.0), destination=(1000.0, 0.0)) -> FlowField:
    fixed = Vector2(direction)
    return FlowField(
        units=list(units),
        destination=Vector3(destination[0], 0.0, destination[1]),
        sampler=lambda position, grid: Vector2(fixed),
    )


def make_agent(agent_id: int, x: float, z: float, vx: float = 0.0, vz: float = 0.0, **settings) -> Agent:
    return Agent(
        id=AgentId(agent_id),
        position=Vector3(x, 0.0, z),
        velocity=Vector3(vx, 0.0, vz),
        settings=AgentSettings(**settings),
    )


@pytest.fixture
def grid() -> EnvironmentGrid:
    return EnvironmentGrid(GridConfig())


@pytest.fixture
def context(grid) -> SimulationContext:
    return SimulationContext(grid=grid)
