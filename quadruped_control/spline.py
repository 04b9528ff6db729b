"""Two-segment quartic spline used to blend joint positions."""

from __future__ import annotations

import numpy as np
from numpy.polynomial import polynomial as _poly

_ZERO = [0.0] * 5


def _position_row(t: float) -> list[float]:
    return [1.0, t, t**2, t**3, t**4]


def _velocity_row(t: float) -> list[float]:
    return [0.0, 1.0, 2.0 * t, 3.0 * t**2, 4.0 * t**3]


def _acceleration_row(t: float) -> list[float]:
    return [0.0, 0.0, 2.0, 6.0 * t, 12.0 * t**2]


def _coefficients(
    p0: float, v0: float, a0: float, t0: float,
    p1: float, t1: float,
    p2: float, v2: float, a2: float, t2: float,
) -> tuple[np.ndarray, np.ndarray]:
    """Solve for the two quartic segments (ascending powers of time)."""
    if len({t0, t1, t2}) != 3:
        raise ValueError("spline knot times t0, t1 and t2 must be distinct")

    def negated(row: list[float]) -> list[float]:
        return [-value for value in row]

    rows = [
        _position_row(t0) + _ZERO,
        _velocity_row(t0) + _ZERO,
        _acceleration_row(t0) + _ZERO,
        _position_row(t1) + _ZERO,
        _ZERO + _position_row(t1),
        _ZERO + _position_row(t2),
        _ZERO + _velocity_row(t2),
        _ZERO + _acceleration_row(t2),
        _velocity_row(t1) + negated(_velocity_row(t1)),
        _acceleration_row(t1) + negated(_acceleration_row(t1)),
    ]
    rhs = [p0, v0, a0, p1, p1, p2, v2, a2, 0.0, 0.0]
    try:
        solution = np.linalg.solve(np.array(rows, dtype=float), np.array(rhs, dtype=float))
    except np.linalg.LinAlgError as exc:
        raise ValueError(f"spline boundary conditions are singular: {exc}") from exc
    return solution[:5], solution[5:]


def two_segment_spline(
    p0: float, v0: float, a0: float, t0: float,
    p1: float, t1: float,
    p2: float, v2: float, a2: float, t2: float,
    t: float,
) -> float:
    """Position at time ``t`` of a spline through (t0, p0), (t1, p1), (t2, p2).

    The first quartic segment matches position, velocity and acceleration at
    ``t0``; the second matches them at ``t2``. Both pass through ``p1`` at
    ``t1`` with continuous velocity and acceleration. After ``t2`` the
    position is held at ``p2``.
    """
    first, second = _coefficients(p0, v0, a0, t0, p1, t1, p2, v2, a2, t2)
    if t <= t1:
        return float(_poly.polyval(t, first))
    if t <= t2:
        return float(_poly.polyval(t, second))
    return float(p2)