from __future__ import annotations

import math
from typing import Dict, Iterable, List, Tuple

from pygame.math import Vector2

from ..types.snapshot import AgentSnapshot
from .grid import EnvironmentGrid


class SpatialGrid:
    """Uniform bucket partition of the frame-start agent snapshot.

    Buckets are anchored on the world position of the grid's centre cell and
    may be rectangular, so search windows are sized per axis.
    """

    def __init__(self, bucket_size_x: float, bucket_size_y: float, origin: Vector2) -> None:
        self._bucket_size_x = bucket_size_x
        self._bucket_size_y = bucket_size_y
        self._origin_x = origin.x
        self._origin_y = origin.y
        self._cells: Dict[Tuple[int, int], List[AgentSnapshot]] = {}
        self._max_radius = 0.0

    @classmethod
    def for_grid(cls, grid: EnvironmentGrid) -> "SpatialGrid":
        bucket_size_x, bucket_size_y = grid.bucket_size
        origin = grid.cell_world_position(*grid.center_cell())
        return cls(bucket_size_x, bucket_size_y, Vector2(origin.x, origin.z))

    @property
    def bucket_size(self) -> Tuple[float, float]:
        return self._bucket_size_x, self._bucket_size_y

    @property
    def cells(self) -> Dict[Tuple[int, int], List[AgentSnapshot]]:
        return self._cells

    def build_neighbor_cell_offsets(self, radius: float) -> List[Tuple[int, int]]:
        range_x = int(math.ceil(radius / self._bucket_size_x))
        range_y = int(math.ceil(radius / self._bucket_size_y))
        return [(dx, dy) for dx in range(-range_x, range_x + 1) for dy in range(-range_y, range_y + 1)]

    def clear(self) -> None:
        self._cells.clear()
        self._max_radius = 0.0

    def rebuild(self, snapshot: Iterable[AgentSnapshot]) -> None:
        self.clear()
        for entry in snapshot:
            self.insert(entry)

    def insert(self, entry: AgentSnapshot) -> None:
        key = self._cell_key(entry.position)
        bucket = self._cells.get(key)
        if bucket is None:
            bucket = []
            self._cells[key] = bucket
        bucket.append(entry)
        if entry.radius > self._max_radius:
            self._max_radius = entry.radius

    def collect_neighbors(
        self,
        position: Vector2,
        sensor_range: float,
        out_neighbors: List[AgentSnapshot],
        exclude_id: int | None = None,
    ) -> int:
        """
        Fill ``out_neighbors`` with every entry within ``sensor_range`` plus that
        entry's own radius of ``position``.

        Returns the number of entries examined, for tick metrics.
        """

        out_neighbors.clear()
        base_key = self._cell_key(position)
        pos_x = position.x
        pos_y = position.y
        cells = self._cells
        append = out_neighbors.append
        examined = 0

        # Window also spans the widest body so edge-straddling neighbors are found.
        for dx, dy in self.build_neighbor_cell_offsets(sensor_range + self._max_radius):
            bucket = cells.get((base_key[0] + dx, base_key[1] + dy))
            if not bucket:
                continue
            for entry in bucket:
                if exclude_id is not None and entry.id == exclude_id:
                    continue
                examined += 1
                offset_x = entry.position.x - pos_x
                offset_y = entry.position.y - pos_y
                reach = sensor_range + entry.radius
                if offset_x * offset_x + offset_y * offset_y <= reach * reach:
                    append(entry)
        return examined

    def _cell_key(self, position: Vector2) -> Tuple[int, int]:
        return (
            int(math.floor((position.x - self._origin_x) / self._bucket_size_x)),
            int(math.floor((position.y - self._origin_y) / self._bucket_size_y)),
        )
