from __future__ import annotations

from pygame.math import Vector2, Vector3
from pytest import approx

from conftest import constant_field
from flowsteer.sim.core.config import AgentSettings
from flowsteer.sim.systems.integration import integrate
from flowsteer.sim.systems.preferred import arrival_scale, preferred_velocity


def test_arrival_scale_ramps_inside_slow_radius():
    assert arrival_scale(0.0, 8.0) == 0.0
    assert arrival_scale(8.0, 8.0) == approx(0.5)
    assert arrival_scale(16.0, 8.0) == 1.0
    assert arrival_scale(400.0, 8.0) == 1.0


def test_zero_sensor_range_keeps_minimum_slow_radius():
    assert arrival_scale(0.05, 0.0) == approx(0.5)
    assert arrival_scale(0.1, 0.0) == 1.0


def test_preferred_velocity_far_from_goal_uses_full_speed(grid):
    field = constant_field([], direction=(3.0, 4.0))
    velocity = preferred_velocity(Vector3(), AgentSettings(), field, grid)
    assert (velocity.x, velocity.y) == (approx(30.0), approx(40.0))


def test_preferred_velocity_slows_near_goal(grid):
    field = constant_field([], destination=(8.0, 0.0))
    velocity = preferred_velocity(Vector3(), AgentSettings(), field, grid)
    assert velocity.x == approx(25.0)


def test_goal_distance_ignores_height(grid):
    field = constant_field([], destination=(8.0, 0.0))
    velocity = preferred_velocity(Vector3(0.0, 30.0, 0.0), AgentSettings(), field, grid)
    assert velocity.x == approx(25.0)


def test_zero_direction_gives_zero_velocity(grid):
    field = constant_field([], direction=(0.0, 0.0))
    velocity = preferred_velocity(Vector3(), AgentSettings(), field, grid)
    assert velocity.length() == 0.0


def test_integrate_limits_acceleration():
    settings = AgentSettings(max_accel=10.0)
    result = integrate(Vector2(), Vector2(50.0, 0.0), Vector2(), settings, dt=0.5)
    assert (result.x, result.y) == (approx(5.0), approx(0.0))


def test_integrate_caps_desired_velocity_first():
    settings = AgentSettings(max_speed=20.0, max_accel=1000.0)
    result = integrate(Vector2(), Vector2(0.0, 50.0), Vector2(0.0, 50.0), settings, dt=1.0)
    assert result.y == approx(20.0)


def test_integrate_zero_speed_stops_agent():
    settings = AgentSettings(max_speed=0.0)
    result = integrate(Vector2(), Vector2(30.0, 0.0), Vector2(), settings, dt=0.1)
    assert result.length() == approx(0.0, abs=1e-6)
