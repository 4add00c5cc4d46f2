from __future__ import annotations

import math
from typing import Tuple

from pygame.math import Vector3

from .config import GridConfig


class EnvironmentGrid:
    """Static map geometry shared by flow fields and the spatial hash.

    Cells are laid out on the ground plane and centred on the world origin.
    A grid with zero cells on either axis is a caller error and is not
    guarded here.
    """

    def __init__(self, config: GridConfig):
        self._columns = int(config.columns)
        self._rows = int(config.rows)
        self._cell_diameter = float(config.cell_diameter)
        self._cell_radius = self._cell_diameter * 0.5
        self._buckets = float(config.buckets)

    @property
    def size(self) -> Tuple[int, int]:
        return self._columns, self._rows

    @property
    def cell_diameter(self) -> float:
        return self._cell_diameter

    @property
    def buckets(self) -> float:
        return self._buckets

    @property
    def world_width(self) -> float:
        return self._columns * self._cell_diameter

    @property
    def world_depth(self) -> float:
        return self._rows * self._cell_diameter

    @property
    def bucket_size(self) -> Tuple[float, float]:
        return self.world_width / self._buckets, self.world_depth / self._buckets

    def center_cell(self) -> Tuple[int, int]:
        return self._columns // 2, self._rows // 2

    def cell_world_position(self, column: int, row: int) -> Vector3:
        return Vector3(
            self._cell_diameter * column + self._cell_radius - self.world_width * 0.5,
            0.0,
            self._cell_diameter * row + self._cell_radius - self.world_depth * 0.5,
        )

    def cell_from_world(self, position: Vector3) -> Tuple[int, int]:
        column = int(math.floor((position.x + self.world_width * 0.5) / self._cell_diameter))
        row = int(math.floor((position.z + self.world_depth * 0.5) / self._cell_diameter))
        column = max(0, min(self._columns - 1, column))
        row = max(0, min(self._rows - 1, row))
        return column, row

