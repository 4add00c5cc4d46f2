from __future__ import annotations

import math

from pygame.math import Vector2
from pytest import approx

from flowsteer.sim.core.agent import AgentId
from flowsteer.sim.core.config import AgentSettings
from flowsteer.sim.systems.constraints import OrcaConstraint, build_orca_constraints
from flowsteer.sim.systems.solver import solve_orca
from flowsteer.sim.types.snapshot import AgentSnapshot


def _neighbor(x: float, y: float, vx: float = 0.0, vy: float = 0.0, radius: float = 2.5) -> AgentSnapshot:
    return AgentSnapshot(AgentId(99), Vector2(x, y), Vector2(vx, vy), radius)


def test_overlapping_pair_gets_opposing_normals():
    settings = AgentSettings()
    a = build_orca_constraints(Vector2(0, 0), Vector2(), settings, [_neighbor(3, 0)], dt=0.1)
    b = build_orca_constraints(Vector2(3, 0), Vector2(), settings, [_neighbor(0, 0)], dt=0.1)

    assert a[0].normal.x == approx(1.0)
    assert b[0].normal.x == approx(-1.0)
    assert a[0].normal.y == approx(0.0)
    # Penetration 2.0 resolved over one 0.1 s tick.
    assert a[0].point.x == approx(20.0)
    assert b[0].point.x == approx(-20.0)


def test_overlap_push_uses_timestep_floor():
    constraints = build_orca_constraints(Vector2(), Vector2(), AgentSettings(), [_neighbor(4, 0)], dt=0.0)
    assert constraints[0].point.x == approx(1.0 / 0.001)


def test_colocated_agents_contribute_no_direction():
    constraints = build_orca_constraints(Vector2(), Vector2(), AgentSettings(), [_neighbor(0, 0)], dt=0.1)
    assert constraints[0].normal.length() == approx(0.0)


def test_cutoff_cap_projection():
    constraints = build_orca_constraints(Vector2(), Vector2(), AgentSettings(), [_neighbor(10, 0)], dt=0.1)
    c = constraints[0]
    assert (c.normal.x, c.normal.y) == (approx(-1.0), approx(0.0))
    # combined * inv_tau - |w| = 5/3 - 10/3
    assert c.point.x == approx(5.0 / 3.0)
    assert c.point.y == approx(0.0)


def test_leg_projection_picks_side_from_cross_product():
    settings = AgentSettings()
    right = build_orca_constraints(Vector2(), Vector2(0, 10), settings, [_neighbor(10, 0)], dt=0.1)[0]
    left = build_orca_constraints(Vector2(), Vector2(0, -10), settings, [_neighbor(10, 0)], dt=0.1)[0]

    half_root3 = math.sqrt(3.0) / 2.0
    assert (right.normal.x, right.normal.y) == (approx(0.5), approx(half_root3))
    assert (left.normal.x, left.normal.y) == (approx(-0.5), approx(half_root3))
    assert right.normal.length() == approx(1.0)
    # anchor = self velocity + normal * (rel_vel . normal)
    assert (right.point.x, right.point.y) == (approx(0.5 * 10 * half_root3), approx(10 + 10 * half_root3 * half_root3))
    assert (left.point.x, left.point.y) == (approx(0.5 * 10 * half_root3), approx(-10 - 10 * half_root3 * half_root3))


def test_zero_horizon_is_floored():
    settings = AgentSettings(horizon=0.0)
    constraints = build_orca_constraints(Vector2(), Vector2(), settings, [_neighbor(10, 0)], dt=0.1)
    assert len(constraints) == 1
    assert math.isfinite(constraints[0].point.x)


def test_constraints_follow_neighbor_order():
    neighbors = [_neighbor(3, 0), _neighbor(0, 3), _neighbor(-3, 0)]
    constraints = build_orca_constraints(Vector2(), Vector2(), AgentSettings(), neighbors, dt=0.1)
    assert [(round(c.normal.x), round(c.normal.y)) for c in constraints] == [(1, 0), (0, 1), (-1, 0)]


def test_solver_without_constraints_clamps_preferred():
    result = solve_orca(Vector2(80.0, 0.0), [], max_speed=60.0)
    assert (result.x, result.y) == (approx(60.0), approx(0.0))

    result = solve_orca(Vector2(3.0, 4.0), [], max_speed=60.0)
    assert (result.x, result.y) == (approx(3.0), approx(4.0))


def test_solver_projects_violated_constraint():
    constraint = OrcaConstraint(point=Vector2(10.0, 0.0), normal=Vector2(1.0, 0.0))
    result = solve_orca(Vector2(50.0, 5.0), [constraint], max_speed=60.0)
    assert (result.x, result.y) == (approx(10.0), approx(5.0))
    assert constraint.violation(result) == approx(0.0)


def test_solver_skips_satisfied_constraint():
    constraint = OrcaConstraint(point=Vector2(100.0, 0.0), normal=Vector2(1.0, 0.0))
    result = solve_orca(Vector2(20.0, 0.0), [constraint], max_speed=60.0)
    assert result.x == approx(20.0)


def test_solver_clips_sequentially_and_reclamps():
    first = OrcaConstraint(point=Vector2(10.0, 0.0), normal=Vector2(1.0, 0.0))
    second = OrcaConstraint(point=Vector2(0.0, 10.0), normal=Vector2(0.0, 1.0))
    result = solve_orca(Vector2(50.0, 50.0), [first, second], max_speed=100.0)
    assert (result.x, result.y) == (approx(10.0), approx(10.0))

    # Infeasible against the speed limit: projection lands outside, then clamped.
    unreachable = OrcaConstraint(point=Vector2(30.0, 0.0), normal=Vector2(-1.0, 0.0))
    result = solve_orca(Vector2(10.0, 0.0), [unreachable], max_speed=12.0)
    assert (result.x, result.y) == (approx(12.0), approx(0.0))
