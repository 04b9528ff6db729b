"""Ground slope estimation from the positions of four feet in stance."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from .rotations import rotation_matrix_from_zyx

_NUM_FEET = 4
_UP = np.array([0.0, 0.0, 1.0])


def _angle_to_vertical(normal: np.ndarray) -> float:
    cosine = float(_UP @ normal) / (np.linalg.norm(_UP) * np.linalg.norm(normal))
    return math.pi - math.acos(cosine)


class TerrainEstimator:
    """Fits a plane through the feet and reports its pitch and roll.

    Feet are ordered front-left, front-right, hind-left, hind-right. The
    estimate is only refreshed while all four feet are in contact.
    """

    def __init__(self) -> None:
        self._ground_euler_angle = np.zeros(3)
        self._body_rotation = np.eye(3)
        self._feet_in_body = np.zeros((_NUM_FEET, 3))

    @property
    def ground_euler_angle(self) -> np.ndarray:
        """Ground (yaw, pitch, roll) expressed in the body frame."""
        return self._ground_euler_angle.copy()

    def update(
        self,
        body_euler_angles: Sequence[float],
        feet_positions: Sequence[Sequence[float]],
        contact_flags: Sequence[bool],
    ) -> None:
        """Refresh the estimate from foot positions relative to the body, in the world frame."""
        if len(contact_flags) < _NUM_FEET:
            raise ValueError(f"expected {_NUM_FEET} contact flags, got {len(contact_flags)}")
        if not all(bool(flag) for flag in contact_flags[:_NUM_FEET]):
            return

        feet = np.asarray(feet_positions, dtype=float)
        if feet.shape != (_NUM_FEET, 3):
            raise ValueError(f"expected feet positions of shape (4, 3), got {feet.shape}")

        self._body_rotation = rotation_matrix_from_zyx(body_euler_angles)
        self._feet_in_body = feet @ self._body_rotation
        front_left, front_right, hind_left, hind_right = self._feet_in_body

        moments = self._feet_in_body.T @ self._feet_in_body
        sums = self._feet_in_body.sum(axis=0)
        try:
            normal = np.linalg.solve(moments, sums)
        except np.linalg.LinAlgError as exc:
            raise ValueError(f"foot positions do not determine a plane: {exc}") from exc

        pitch = _angle_to_vertical(np.array([normal[0], 0.0, normal[2]]))
        roll = _angle_to_vertical(np.array([0.0, normal[1], normal[2]]))

        z_fl, z_fr, z_hl, z_hr = front_left[2], front_right[2], hind_left[2], hind_right[2]
        pitch_sign = -1.0 if z_fr - z_hr + z_fl - z_hl > 0 else 1.0
        roll_sign = -1.0 if z_fr + z_hr - z_fl - z_hl > 0 else 1.0

        self._ground_euler_angle = np.array([0.0, pitch_sign * pitch, roll_sign * roll])