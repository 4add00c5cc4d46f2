from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class TickMetrics:
    tick: int
    agents: int
    solved: int
    skipped: int
    neighbor_checks: int
    constraints: int
    separations: int
    average_speed: float
    tick_duration_ms: float = 0.0
