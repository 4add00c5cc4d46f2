from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence

from pygame.math import Vector2

from ..core.config import AgentSettings
from ..types.snapshot import AgentSnapshot
from ..utils.math2d import _cross, _safe_normalize_xy


@dataclass(frozen=True, slots=True)
class OrcaConstraint:
    """Half-plane of admissible velocities ``(v - point) . normal <= 0``."""

    point: Vector2
    normal: Vector2

    def violation(self, velocity: Vector2) -> float:
        return (velocity.x - self.point.x) * self.normal.x + (velocity.y - self.point.y) * self.normal.y


def _cutoff_shift(w: Vector2, combined_radius: float, inv_tau: float) -> tuple[Vector2, Vector2]:
    w_len = w.length()
    normal = w / w_len
    return normal * (combined_radius * inv_tau - w_len), normal


def _leg_shift(
    rel_pos: Vector2, rel_vel: Vector2, dist_sq: float, combined_radius: float
) -> tuple[Vector2, Vector2]:
    combined_radius_sq = combined_radius * combined_radius
    dist = math.sqrt(dist_sq)
    leg = math.sqrt(dist_sq - combined_radius_sq)
    ux = rel_pos.x / dist
    uy = rel_pos.y / dist
    if _cross(rel_vel, rel_pos) > 0.0:
        dir_x = (ux * leg - uy * combined_radius) / dist
        dir_y = (ux * combined_radius + uy * leg) / dist
    else:
        dir_x = (ux * leg + uy * combined_radius) / dist
        dir_y = (-ux * combined_radius + uy * leg) / dist
    normal = _safe_normalize_xy(-dir_y, dir_x)
    return normal * rel_vel.dot(normal), normal


def build_orca_constraints(
    position: Vector2,
    velocity: Vector2,
    settings: AgentSettings,
    neighbors: Sequence[AgentSnapshot],
    dt: float,
) -> List[OrcaConstraint]:
    """
    One velocity-obstacle half-plane per neighbor, in neighbor order.

    The whole shift lands on this agent: avoidance is unilateral, so an agent
    still clears a neighbor that does not react in the same tick.
    """

    constraints: List[OrcaConstraint] = []
    inv_tau = 1.0 / max(settings.horizon, 0.001)
    inv_dt = 1.0 / max(dt, 0.001)

    for neighbor in neighbors:
        rel_pos = neighbor.position - position
        rel_vel = velocity - neighbor.velocity
        combined_radius = settings.radius + neighbor.radius
        combined_radius_sq = combined_radius * combined_radius
        dist_sq = rel_pos.length_squared()

        if dist_sq > combined_radius_sq:
            w = rel_vel - rel_pos * inv_tau
            w_len_sq = w.length_squared()
            dot = w.dot(rel_pos)
            if dot < 0.0 and dot * dot > combined_radius_sq * w_len_sq:
                shift, normal = _cutoff_shift(w, combined_radius, inv_tau)
            else:
                shift, normal = _leg_shift(rel_pos, rel_vel, dist_sq, combined_radius)
        else:
            # Overlapping: push out within roughly one tick.
            dist = max(math.sqrt(dist_sq), 1e-3)
            normal = rel_pos / dist
            shift = normal * ((combined_radius - dist) * inv_dt)

        constraints.append(OrcaConstraint(point=velocity + shift, normal=normal))

    return constraints
