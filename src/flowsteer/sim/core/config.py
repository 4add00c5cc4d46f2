from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import List

import yaml


@dataclass
class AgentSettings:
    preferred_speed: float = 50.0
    max_speed: float = 60.0
    max_accel: float = 100.0
    # Lookahead window for collision prediction, seconds.
    horizon: float = 3.0
    radius: float = 2.5
    sensor_range: float = 8.0

    def copy(self) -> "AgentSettings":
        return replace(self)


@dataclass
class GridConfig:
    columns: int = 50
    rows: int = 50
    cell_diameter: float = 10.0
    buckets: float = 5.0


@dataclass
class DebugOptions:
    draw_spatial_grid: bool = False
    draw_radius: bool = False
    print_statements: bool = False


@dataclass
class GroupConfig:
    spawn: tuple[float, float] = (0.0, 0.0)
    destination: tuple[float, float] = (0.0, 0.0)
    count: int = 20
    spawn_radius: float = 30.0


def _default_groups() -> List[GroupConfig]:
    return [
        GroupConfig(spawn=(-180.0, 0.0), destination=(180.0, 0.0)),
        GroupConfig(spawn=(180.0, 0.0), destination=(-180.0, 0.0)),
    ]


@dataclass
class SimulationConfig:
    time_step: float = 1.0 / 60.0
    seed: int = 42
    config_version: str = "v1"
    settings: AgentSettings = field(default_factory=AgentSettings)
    grid: GridConfig = field(default_factory=GridConfig)
    debug: DebugOptions = field(default_factory=DebugOptions)
    groups: List[GroupConfig] = field(default_factory=_default_groups)

    @staticmethod
    def from_yaml(path: Path) -> "SimulationConfig":
        data = yaml.safe_load(Path(path).read_text()) or {}
        return load_config(data)


def validate_settings(settings: AgentSettings) -> AgentSettings:
    if settings.horizon <= 0.0:
        raise ValueError(f"horizon must be positive, got {settings.horizon}")
    if settings.radius <= 0.0:
        raise ValueError(f"radius must be positive, got {settings.radius}")
    if settings.sensor_range < 0.0:
        raise ValueError(f"sensor_range must not be negative, got {settings.sensor_range}")
    if settings.max_speed < 0.0 or settings.max_accel < 0.0:
        raise ValueError("max_speed and max_accel must not be negative")
    return settings


def validate_grid(grid: GridConfig) -> GridConfig:
    if grid.columns < 1 or grid.rows < 1:
        raise ValueError(f"grid needs at least one cell per axis, got {grid.columns}x{grid.rows}")
    if grid.cell_diameter <= 0.0:
        raise ValueError(f"cell_diameter must be positive, got {grid.cell_diameter}")
    if grid.buckets <= 0.0:
        raise ValueError(f"buckets must be positive, got {grid.buckets}")
    return grid


def load_config(raw: dict) -> SimulationConfig:
    def _pair(value: tuple[float, float] | list[float] | None, default: tuple[float, float]) -> tuple[float, float]:
        if isinstance(value, (tuple, list)) and len(value) == 2:
            return (float(value[0]), float(value[1]))
        return default

    settings = validate_settings(AgentSettings(**raw.get("settings", {})))
    grid = validate_grid(GridConfig(**raw.get("grid", {})))
    debug = DebugOptions(**raw.get("debug", {}))
    if "groups" in raw:
        groups = []
        for entry in raw["groups"] or []:
            defaults = GroupConfig()
            values = {k: v for k, v in entry.items() if k not in {"spawn", "destination"}}
            groups.append(
                GroupConfig(
                    spawn=_pair(entry.get("spawn"), defaults.spawn),
                    destination=_pair(entry.get("destination"), defaults.destination),
                    **values,
                )
            )
    else:
        groups = _default_groups()
    sim_values = {k: v for k, v in raw.items() if k not in {"settings", "grid", "debug", "groups"}}
    return SimulationConfig(settings=settings, grid=grid, debug=debug, groups=groups, **sim_values)
