from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Tuple

from pygame.math import Vector2, Vector3

from ..utils.math2d import _safe_normalize_xy
from .agent import AgentId
from .grid import EnvironmentGrid

DirectionSampler = Callable[[Vector3, EnvironmentGrid], Vector2]


def _toward(destination: Vector3) -> DirectionSampler:
    def sample(position: Vector3, grid: EnvironmentGrid) -> Vector2:
        if grid.cell_from_world(position) == grid.cell_from_world(destination):
            return Vector2()
        return _safe_normalize_xy(destination.x - position.x, destination.z - position.z)

    return sample


def _from_cells(directions: Mapping[Tuple[int, int], Vector2]) -> DirectionSampler:
    def sample(position: Vector3, grid: EnvironmentGrid) -> Vector2:
        direction = directions.get(grid.cell_from_world(position))
        if direction is None:
            return Vector2()
        return Vector2(direction)

    return sample


@dataclass
class FlowField:
    """A managed group of agents sharing one destination.

    Path planning lives outside this package; a flow field only exposes the
    sampled travel direction and collects the solved velocity of each unit in
    ``steering_map`` once per tick.
    """

    units: List[AgentId]
    destination: Vector3
    sampler: DirectionSampler
    steering_map: Dict[AgentId, Vector3] = field(default_factory=dict)

    @classmethod
    def toward_destination(cls, units: List[AgentId], destination: Vector3) -> "FlowField":
        """Straight-line field; zero direction on the destination cell."""
        return cls(units=list(units), destination=Vector3(destination), sampler=_toward(destination))

    @classmethod
    def from_cell_directions(
        cls,
        units: List[AgentId],
        destination: Vector3,
        directions: Mapping[Tuple[int, int], Vector2],
    ) -> "FlowField":
        """Field backed by precomputed per-cell directions, e.g. from a planner."""
        return cls(units=list(units), destination=Vector3(destination), sampler=_from_cells(dict(directions)))

    def sample_direction(self, position: Vector3, grid: EnvironmentGrid) -> Vector2:
        return self.sampler(position, grid)

    def flush(self, pending: List[Tuple[AgentId, Vector3]]) -> None:
        self.steering_map.clear()
        for unit, steer in pending:
            self.steering_map[unit] = steer
