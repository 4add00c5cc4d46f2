from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from pygame.math import Vector2

from ..core.agent import AgentId
from .metrics import TickMetrics


@dataclass(frozen=True, slots=True)
class AgentSnapshot:
    """Frame-start copy of the state neighbors are allowed to read."""

    id: AgentId
    position: Vector2
    velocity: Vector2
    radius: float


@dataclass(slots=True)
class Snapshot:
    tick: int
    metrics: TickMetrics
    agents: List[Dict[str, Any]]
    flow_fields: List[Dict[str, Any]]
    debug: Dict[str, Any]
    metadata: "SnapshotMetadata"


@dataclass(slots=True)
class SnapshotMetadata:
    world_width: float
    world_depth: float
    buckets: float
    sim_dt: float
    tick_rate: float
    seed: int
    config_version: str
