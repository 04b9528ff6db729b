"""Shared controller state: user commands, observation and hardware handles."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

import numpy as np

_NUM_LEGS = 4
_LEG_BITS = (8, 4, 2, 1)  # left-front, right-front, left-hind, right-hind


def mode_number_from_contacts(contact_flags: Sequence[bool]) -> int:
    """Encode four stance flags (LF, RF, LH, RH) as a mode number in 0..15."""
    if len(contact_flags) != _NUM_LEGS:
        raise ValueError(f"expected {_NUM_LEGS} contact flags, got {len(contact_flags)}")
    return sum(bit for bit, flag in zip(_LEG_BITS, contact_flags) if flag)


def contacts_from_mode_number(mode: int) -> tuple[bool, bool, bool, bool]:
    """Decode a mode number in 0..15 into stance flags (LF, RF, LH, RH)."""
    if not 0 <= mode < 2**_NUM_LEGS:
        raise ValueError(f"invalid mode number {mode}")
    lf, rf, lh, rh = (bool(mode & bit) for bit in _LEG_BITS)
    return lf, rf, lh, rh


@dataclass
class UserCommands:
    """Operator commands: normalised velocities, body height ratio and gait."""

    linear_x_input: float = 0.0
    linear_y_input: float = 0.0
    angular_y_input: float = 0.0
    angular_z_input: float = 0.0
    height_ratio: float = 0.2
    gait_name: str = "stance"
    passive_enable: bool = False


@dataclass
class SystemObservation:
    """The measured system state handed to the optimiser."""

    time: float = 0.0
    state: np.ndarray = field(default_factory=lambda: np.zeros(0))
    input: np.ndarray = field(default_factory=lambda: np.zeros(0))
    mode: int = 0


@dataclass
class CtrlComponent:
    """Hardware handles and state shared between controller parts.

    State handles expose ``get_value()``; command handles expose
    ``set_value(value)``. IMU handles are ordered as quaternion (w, x, y, z),
    angular velocity (x, y, z) and linear acceleration (x, y, z).
    """

    joint_torque_command: list[Any] = field(default_factory=list)
    joint_position_command: list[Any] = field(default_factory=list)
    joint_velocity_command: list[Any] = field(default_factory=list)
    joint_kp_command: list[Any] = field(default_factory=list)
    joint_kd_command: list[Any] = field(default_factory=list)

    joint_effort_state: list[Any] = field(default_factory=list)
    joint_position_state: list[Any] = field(default_factory=list)
    joint_velocity_state: list[Any] = field(default_factory=list)

    imu_state: list[Any] = field(default_factory=list)

    user_cmds: UserCommands = field(default_factory=UserCommands)
    observation: SystemObservation = field(default_factory=SystemObservation)
    frequency: int = 0

    estimator: Any = None
    target_manager: Any = None

    def clear(self) -> None:
        """Drop every hardware handle, keeping commands and observation."""
        for handles in (
            self.joint_torque_command,
            self.joint_position_command,
            self.joint_velocity_command,
            self.joint_kd_command,
            self.joint_kp_command,
            self.joint_effort_state,
            self.joint_position_state,
            self.joint_velocity_state,
            self.imu_state,
        ):
            handles.clear()