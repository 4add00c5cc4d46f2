from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Tuple

from pygame import Color
from pygame.math import Vector3

from ..core.agent import Agent
from ..core.config import DebugOptions
from ..core.grid import EnvironmentGrid

GRID_COLOR = Color("yellow")
RADIUS_COLOR = Color("red")


@dataclass(frozen=True, slots=True)
class GridOverlay:
    center: Vector3
    cell_count: Tuple[int, int]
    spacing: Tuple[float, float]
    color: Color


@dataclass(frozen=True, slots=True)
class CircleGizmo:
    center: Vector3
    radius: float
    color: Color


@dataclass
class Gizmos:
    """Recorder for diagnostic primitives; a renderer drains it after the tick."""

    grids: List[GridOverlay] = field(default_factory=list)
    circles: List[CircleGizmo] = field(default_factory=list)

    def grid(self, center: Vector3, cell_count: Tuple[int, int], spacing: Tuple[float, float], color: Color) -> None:
        self.grids.append(GridOverlay(Vector3(center), cell_count, spacing, Color(color)))

    def circle(self, center: Vector3, radius: float, color: Color) -> None:
        self.circles.append(CircleGizmo(Vector3(center), radius, Color(color)))

    def clear(self) -> None:
        self.grids.clear()
        self.circles.clear()

    def export(self) -> Dict[str, Any]:
        return {
            "grids": [
                {
                    "center": [g.center.x, g.center.y, g.center.z],
                    "cells": list(g.cell_count),
                    "spacing": list(g.spacing),
                    "color": [g.color.r, g.color.g, g.color.b, g.color.a],
                }
                for g in self.grids
            ],
            "circles": [
                {
                    "center": [c.center.x, c.center.y, c.center.z],
                    "radius": c.radius,
                    "color": [c.color.r, c.color.g, c.color.b, c.color.a],
                }
                for c in self.circles
            ],
        }


def draw_diagnostics(
    options: DebugOptions | None,
    grid: EnvironmentGrid,
    agents: Iterable[Agent],
    gizmos: Gizmos | None,
) -> None:
    if options is None or gizmos is None:
        return
    if options.draw_spatial_grid:
        buckets = int(grid.buckets)
        gizmos.grid(Vector3(), (buckets, buckets), grid.bucket_size, GRID_COLOR)
    if options.draw_radius:
        for agent in agents:
            gizmos.circle(agent.position, agent.settings.sensor_range, RADIUS_COLOR)
