from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from pygame.math import Vector2, Vector3

from ..core.agent import Agent, AgentId
from ..core.context import SimulationContext
from ..core.flowfield import FlowField
from ..core.grid import EnvironmentGrid
from ..core.spatial_grid import SpatialGrid
from ..types.snapshot import AgentSnapshot
from ..utils.math2d import lift, planar
from .constraints import build_orca_constraints
from .debug import Gizmos, draw_diagnostics
from .integration import integrate, separation
from .preferred import preferred_velocity
from .solver import solve_orca

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AgentSolve:
    agent_id: AgentId
    velocity: Vector2
    neighbors: int
    examined: int
    constraints: int
    separations: int


@dataclass(slots=True)
class SteeringStats:
    solved: int = 0
    skipped: int = 0
    neighbor_checks: int = 0
    constraints: int = 0
    separations: int = 0


def take_snapshot(agents: Iterable[Agent]) -> List[AgentSnapshot]:
    return [
        AgentSnapshot(
            id=agent.id,
            position=planar(agent.position),
            velocity=planar(agent.velocity),
            radius=agent.settings.radius,
        )
        for agent in agents
    ]


def solve_agent(
    agent: Agent,
    flow_field: FlowField,
    grid: EnvironmentGrid,
    spatial: SpatialGrid,
    dt: float,
    neighbors: List[AgentSnapshot] | None = None,
) -> AgentSolve:
    """
    Solve one agent against the frame-start snapshot held by ``spatial``.

    Reads only; the caller commits the returned velocity.
    """

    if neighbors is None:
        neighbors = []
    settings = agent.settings
    position = planar(agent.position)
    velocity = planar(agent.velocity)

    examined = spatial.collect_neighbors(position, settings.sensor_range, neighbors, exclude_id=agent.id)
    preferred = preferred_velocity(agent.position, settings, flow_field, grid)
    constraints = build_orca_constraints(position, velocity, settings, neighbors, dt)
    solved = solve_orca(preferred, constraints, settings.max_speed)
    push, contributors = separation(position, settings.radius, neighbors, dt)
    new_velocity = integrate(velocity, solved, push, settings, dt)
    return AgentSolve(
        agent_id=agent.id,
        velocity=new_velocity,
        neighbors=len(neighbors),
        examined=examined,
        constraints=len(constraints),
        separations=contributors,
    )


def calculate_fvo_steering(
    context: SimulationContext,
    dt: float,
    spatial: SpatialGrid | None = None,
    gizmos: Gizmos | None = None,
) -> SteeringStats:
    """Run one steering tick over every flow field in ``context``."""
    grid = context.grid
    if spatial is None:
        spatial = SpatialGrid.for_grid(grid)
    spatial.rebuild(take_snapshot(context.agents.values()))
    draw_diagnostics(context.debug, grid, context.agents.values(), gizmos)

    stats = SteeringStats()
    neighbors: List[AgentSnapshot] = []
    for flow_field in context.flow_fields:
        pending: List[Tuple[AgentId, Vector3]] = []
        for unit in flow_field.units:
            agent = context.agents.get(unit)
            if agent is None:
                logger.debug("skipping unit %s: no agent state this tick", unit)
                stats.skipped += 1
                continue
            result = solve_agent(agent, flow_field, grid, spatial, dt, neighbors)
            new_velocity = lift(result.velocity)
            agent.steering = Vector3(new_velocity)
            agent.velocity = new_velocity
            pending.append((unit, Vector3(new_velocity)))

            stats.solved += 1
            stats.neighbor_checks += result.examined
            stats.constraints += result.constraints
            stats.separations += result.separations
        flow_field.flush(pending)

    if context.debug is not None and context.debug.print_statements:
        logger.info(
            "steering: solved=%d skipped=%d checks=%d constraints=%d separations=%d",
            stats.solved,
            stats.skipped,
            stats.neighbor_checks,
            stats.constraints,
            stats.separations,
        )
    return stats
