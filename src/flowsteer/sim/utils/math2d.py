from __future__ import annotations

import math

from pygame.math import Vector2, Vector3

# Single-precision epsilon; speed clamps allow this much headroom.
FLOAT_EPSILON = 1.1920929e-07


def _safe_normalize(vector: Vector2) -> Vector2:
    return _safe_normalize_xy(vector.x, vector.y)


def _safe_normalize_xy(x: float, y: float) -> Vector2:
    magnitude_sq = x * x + y * y
    if magnitude_sq < 1e-10:
        return Vector2()
    inv = 1.0 / math.sqrt(magnitude_sq)
    return Vector2(x * inv, y * inv)


def _clamp_length_xy(x: float, y: float, max_length: float) -> Vector2:
    if max_length <= 0:
        return Vector2()
    magnitude_sq = x * x + y * y
    if magnitude_sq <= max_length * max_length:
        return Vector2(x, y)
    if magnitude_sq == 0:
        return Vector2()
    inv = max_length / math.sqrt(magnitude_sq)
    return Vector2(x * inv, y * inv)


def _clamp_length(vector: Vector2, max_length: float) -> Vector2:
    return _clamp_length_xy(vector.x, vector.y, max_length)


def _clamp_value(value: float, min_value: float, max_value: float) -> float:
    return max(min_value, min(max_value, value))


def _cross(a: Vector2, b: Vector2) -> float:
    return a.x * b.y - a.y * b.x


def planar(vector: Vector3) -> Vector2:
    """Project a world-space vector onto the ground plane (x, z)."""
    return Vector2(vector.x, vector.z)


def lift(vector: Vector2, height: float = 0.0) -> Vector3:
    """Inverse of :func:`planar`; the planar y component becomes world z."""
    return Vector3(vector.x, height, vector.y)
