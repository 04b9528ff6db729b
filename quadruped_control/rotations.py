"""ZYX Euler angle, quaternion and angular velocity conversions.

Euler angles are ordered (yaw, pitch, roll); quaternions are (w, x, y, z).
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

_PITCH_SINE_LIMIT = 0.99999


def quat_to_zyx(quat: Sequence[float]) -> np.ndarray:
    """Convert a (w, x, y, z) quaternion to (yaw, pitch, roll)."""
    w, x, y, z = (float(value) for value in quat)
    pitch_sine = min(-2.0 * (x * z - w * y), _PITCH_SINE_LIMIT)
    yaw = math.atan2(2.0 * (x * y + w * z), w * w + x * x - y * y - z * z)
    pitch = math.asin(pitch_sine) if pitch_sine >= -1.0 else math.nan
    roll = math.atan2(2.0 * (y * z + w * x), w * w - x * x - y * y + z * z)
    return np.array([yaw, pitch, roll])


def rotation_matrix_from_zyx(zyx: Sequence[float]) -> np.ndarray:
    """Rotation matrix Rz(yaw) @ Ry(pitch) @ Rx(roll)."""
    yaw, pitch, roll = (float(value) for value in zyx)
    cz, sz = math.cos(yaw), math.sin(yaw)
    cy, sy = math.cos(pitch), math.sin(pitch)
    cx, sx = math.cos(roll), math.sin(roll)
    return np.array(
        [
            [cz * cy, cz * sy * sx - sz * cx, cz * sy * cx + sz * sx],
            [sz * cy, sz * sy * sx + cz * cx, sz * sy * cx - cz * sx],
            [-sy, cy * sx, cy * cx],
        ]
    )


def quaternion_from_zyx(zyx: Sequence[float]) -> np.ndarray:
    """Unit quaternion (w, x, y, z) of the rotation Rz(yaw) Ry(pitch) Rx(roll)."""
    yaw, pitch, roll = (float(value) for value in zyx)
    cz, sz = math.cos(yaw / 2.0), math.sin(yaw / 2.0)
    cy, sy = math.cos(pitch / 2.0), math.sin(pitch / 2.0)
    cx, sx = math.cos(roll / 2.0), math.sin(roll / 2.0)
    return np.array(
        [
            cx * cy * cz + sx * sy * sz,
            sx * cy * cz - cx * sy * sz,
            cx * sy * cz + sx * cy * sz,
            cx * cy * sz - sx * sy * cz,
        ]
    )


def zyx_derivatives_from_global_angular_velocity(
    zyx: Sequence[float], angular_velocity: Sequence[float]
) -> np.ndarray:
    """Euler angle rates from an angular velocity expressed in the world frame."""
    yaw, pitch, _ = (float(value) for value in zyx)
    wx, wy, wz = (float(value) for value in angular_velocity)
    cz, sz = math.cos(yaw), math.sin(yaw)
    cy, sy = math.cos(pitch), math.sin(pitch)
    roll_rate = (cz * wx + sz * wy) / cy
    pitch_rate = -sz * wx + cz * wy
    yaw_rate = wz + sy * roll_rate
    return np.array([yaw_rate, pitch_rate, roll_rate])


def zyx_derivatives_from_local_angular_velocity(
    zyx: Sequence[float], angular_velocity: Sequence[float]
) -> np.ndarray:
    """Euler angle rates from an angular velocity expressed in the body frame."""
    _, pitch, roll = (float(value) for value in zyx)
    wx, wy, wz = (float(value) for value in angular_velocity)
    cy, sy = math.cos(pitch), math.sin(pitch)
    cx, sx = math.cos(roll), math.sin(roll)
    yaw_rate = (sx * wy + cx * wz) / cy
    pitch_rate = cx * wy - sx * wz
    roll_rate = wx + sy * yaw_rate
    return np.array([yaw_rate, pitch_rate, roll_rate])


def global_angular_velocity_from_zyx_derivatives(
    zyx: Sequence[float], zyx_derivatives: Sequence[float]
) -> np.ndarray:
    """World-frame angular velocity from Euler angle rates."""
    yaw, pitch, _ = (float(value) for value in zyx)
    yaw_rate, pitch_rate, roll_rate = (float(value) for value in zyx_derivatives)
    cz, sz = math.cos(yaw), math.sin(yaw)
    cy, sy = math.cos(pitch), math.sin(pitch)
    return np.array(
        [
            -sz * pitch_rate + cy * cz * roll_rate,
            cz * pitch_rate + cy * sz * roll_rate,
            yaw_rate - sy * roll_rate,
        ]
    )


def normalize_angle(angle: float) -> float:
    """Wrap an angle into the interval (-pi, pi]."""
    result = math.fmod(angle + math.pi, 2.0 * math.pi)
    if result <= 0.0:
        return result + math.pi
    return result - math.pi


def shortest_angular_distance(start: float, end: float) -> float:
    """Signed shortest rotation that takes ``start`` to ``end``."""
    return normalize_angle(end - start)