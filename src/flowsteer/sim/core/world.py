from __future__ import annotations

import logging
from time import perf_counter
from typing import Any, Dict, List

from pygame.math import Vector3

from .agent import Agent, AgentId
from .config import SimulationConfig
from .context import SimulationContext
from .flowfield import FlowField
from .grid import EnvironmentGrid
from .rng import DeterministicRng
from .spatial_grid import SpatialGrid
from ..systems import movement, steering
from ..systems.debug import Gizmos
from ..systems.settings import SettingsUpdater, sync_settings
from ..types.metrics import TickMetrics
from ..types.snapshot import Snapshot, SnapshotMetadata

logger = logging.getLogger(__name__)


class World:
    def __init__(self, config: SimulationConfig):
        self._config = config
        self._rng = DeterministicRng(config.seed)
        self._grid = EnvironmentGrid(config.grid)
        self._spatial = SpatialGrid.for_grid(self._grid)
        self._context = SimulationContext(grid=self._grid, debug=config.debug)
        self._gizmos = Gizmos()
        self._pending_settings: SettingsUpdater | None = None
        self._metrics: TickMetrics | None = None
        self._next_id = 0
        self._bootstrap_population()

    @property
    def agents(self) -> List[Agent]:
        return list(self._context.agents.values())

    @property
    def context(self) -> SimulationContext:
        return self._context

    @property
    def flow_fields(self) -> List[FlowField]:
        return self._context.flow_fields

    @property
    def grid(self) -> EnvironmentGrid:
        return self._grid

    @property
    def gizmos(self) -> Gizmos:
        return self._gizmos

    @property
    def metrics(self) -> TickMetrics | None:
        return self._metrics

    def reset(self) -> None:
        self._context.agents.clear()
        self._context.flow_fields.clear()
        self._spatial.clear()
        self._gizmos.clear()
        self._rng.reset()
        self._pending_settings = None
        self._metrics = None
        self._next_id = 0
        self._bootstrap_population()

    def update_settings(self, updater: SettingsUpdater) -> None:
        """Queue tunables for every agent; applied before the next tick."""
        updater.to_settings()
        self._pending_settings = updater

    def add_agent(self, position: Vector3, flow_field: FlowField | None = None) -> AgentId:
        agent = Agent(
            id=AgentId(self._next_id),
            position=Vector3(position),
            settings=self._config.settings.copy(),
        )
        self._next_id += 1
        self._context.add_agent(agent)
        if flow_field is not None:
            flow_field.units.append(agent.id)
        return agent.id

    def remove_agent(self, agent_id: AgentId) -> None:
        self._context.remove_agent(agent_id)

    def step(self, tick: int) -> TickMetrics:
        start = perf_counter()
        dt = self._config.time_step
        if self._pending_settings is not None:
            sync_settings(self._context, self._pending_settings)
            self._pending_settings = None

        self._gizmos.clear()
        stats = steering.calculate_fvo_steering(self._context, dt, spatial=self._spatial, gizmos=self._gizmos)
        average_speed = movement.apply_movement(self._context, dt)

        elapsed_ms = (perf_counter() - start) * 1000.0
        metrics = TickMetrics(
            tick=tick,
            agents=len(self._context.agents),
            solved=stats.solved,
            skipped=stats.skipped,
            neighbor_checks=stats.neighbor_checks,
            constraints=stats.constraints,
            separations=stats.separations,
            average_speed=average_speed,
            tick_duration_ms=elapsed_ms,
        )
        self._metrics = metrics
        return metrics

    def snapshot(self, tick: int) -> Snapshot:
        metrics = self._metrics if self._metrics is not None else self._empty_metrics(tick)
        dt = self._config.time_step
        metadata = SnapshotMetadata(
            world_width=self._grid.world_width,
            world_depth=self._grid.world_depth,
            buckets=self._grid.buckets,
            sim_dt=dt,
            tick_rate=0.0 if dt <= 0 else 1.0 / dt,
            seed=self._config.seed,
            config_version=self._config.config_version,
        )
        return Snapshot(
            tick=tick,
            metrics=metrics,
            agents=[self._agent_snapshot(agent) for agent in self._context.agents.values()],
            flow_fields=[self._flow_field_snapshot(index, ff) for index, ff in enumerate(self._context.flow_fields)],
            debug=self._gizmos.export(),
            metadata=metadata,
        )

    def _bootstrap_population(self) -> None:
        for group in self._config.groups:
            destination = Vector3(group.destination[0], 0.0, group.destination[1])
            flow_field = FlowField.toward_destination([], destination)
            self._context.flow_fields.append(flow_field)
            for _ in range(group.count):
                offset = self._rng.next_in_disk(group.spawn_radius)
                position = Vector3(group.spawn[0] + offset.x, 0.0, group.spawn[1] + offset.y)
                self.add_agent(position, flow_field)
        logger.debug(
            "spawned %d agents across %d flow fields", len(self._context.agents), len(self._context.flow_fields)
        )

    def _empty_metrics(self, tick: int) -> TickMetrics:
        return TickMetrics(
            tick=tick,
            agents=len(self._context.agents),
            solved=0,
            skipped=0,
            neighbor_checks=0,
            constraints=0,
            separations=0,
            average_speed=0.0,
        )

    @staticmethod
    def _agent_snapshot(agent: Agent) -> Dict[str, Any]:
        return {
            "id": int(agent.id),
            "x": agent.position.x,
            "y": agent.position.y,
            "z": agent.position.z,
            "vx": agent.velocity.x,
            "vz": agent.velocity.z,
            "speed": agent.velocity.length(),
            "radius": agent.settings.radius,
            "sensor_range": agent.settings.sensor_range,
        }

    @staticmethod
    def _flow_field_snapshot(index: int, flow_field: FlowField) -> Dict[str, Any]:
        destination = flow_field.destination
        return {
            "index": index,
            "destination": [destination.x, destination.y, destination.z],
            "units": [int(unit) for unit in flow_field.units],
            "steering": {str(int(unit)): [v.x, v.y, v.z] for unit, v in flow_field.steering_map.items()},
        }
