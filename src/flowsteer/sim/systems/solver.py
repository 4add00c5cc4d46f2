from __future__ import annotations

from typing import Sequence

from pygame.math import Vector2

from ..utils.math2d import _clamp_length
from .constraints import OrcaConstraint


def solve_orca(preferred: Vector2, constraints: Sequence[OrcaConstraint], max_speed: float) -> Vector2:
    """
    Greedy sequential clipping of ``preferred`` against ``constraints``.

    Each violated half-plane projects the candidate onto its boundary and the
    result is re-clamped to ``max_speed``. Visiting order matters when
    constraints conflict, and an empty intersection is not detected.
    """

    result = _clamp_length(preferred, max_speed)
    for constraint in constraints:
        violation = constraint.violation(result)
        if violation <= 0.0:
            continue
        result = _clamp_length(result - constraint.normal * violation, max_speed)
    return result
