"""Reference trajectories built from operator velocity commands."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

import numpy as np

from .components import CtrlComponent, SystemObservation
from .rotations import quaternion_from_zyx, rotation_matrix_from_zyx
from .state_estimation import Odometry

_POSE_SLICE = slice(6, 12)


@dataclass
class TargetTrajectories:
    """Time-indexed desired states and inputs handed to the optimiser.

    A state is (vx, vy, vz, wz, wy, wx, x, y, z, yaw, pitch, roll, joints).
    """

    time_trajectory: list[float]
    state_trajectory: list[np.ndarray]
    input_trajectory: list[np.ndarray] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.time_trajectory = [float(value) for value in self.time_trajectory]
        self.state_trajectory = [np.asarray(s, dtype=float).copy() for s in self.state_trajectory]
        self.input_trajectory = [np.asarray(u, dtype=float).copy() for u in self.input_trajectory]
        if len(self.state_trajectory) != len(self.time_trajectory):
            raise ValueError("state trajectory and time trajectory differ in length")
        if self.input_trajectory and len(self.input_trajectory) != len(self.time_trajectory):
            raise ValueError("input trajectory and time trajectory differ in length")


def odometry_from_trajectories(trajectories: TargetTrajectories) -> Odometry:
    """Odometry of the final target state; the twist is in the body frame."""
    if len(trajectories.state_trajectory) < 2:
        raise ValueError("trajectories need at least two states")
    final_state = trajectories.state_trajectory[1]
    if final_state.size < 12:
        raise ValueError("target state must hold at least twelve entries")
    zyx = final_state[9:12]
    rotation_t = rotation_matrix_from_zyx(zyx).T
    return Odometry(
        position=final_state[6:9].copy(),
        orientation=quaternion_from_zyx(zyx),
        pose_covariance=np.zeros((6, 6)),
        linear_velocity=rotation_t @ final_state[0:3],
        angular_velocity=rotation_t @ final_state[3:6],
        twist_covariance=np.zeros((6, 6)),
    )


class TargetManager:
    """Integrates user velocity commands into a target base pose.

    ``reference_sink`` is called with every new :class:`TargetTrajectories`.
    The target pose (x, y, z, yaw, pitch, roll) is kept in the world frame.
    """

    def __init__(
        self,
        ctrl_component: CtrlComponent,
        reference_sink: Callable[[TargetTrajectories], Any],
        command_height: float,
        default_joint_state: Sequence[float],
        time_to_target: float,
        target_rotation_velocity: float,
        target_displacement_velocity: float,
    ) -> None:
        if time_to_target <= 0:
            raise ValueError("time_to_target must be positive")
        self.ctrl_component = ctrl_component
        self.reference_sink = reference_sink
        self.command_height = float(command_height)
        self.default_joint_state = np.asarray(default_joint_state, dtype=float).ravel()
        self.time_to_target = float(time_to_target)
        self.target_rotation_velocity = float(target_rotation_velocity)
        self.target_displacement_velocity = float(target_displacement_velocity)
        self._target_pose = np.zeros(6)
        self.last_odometry: Odometry | None = None

    @property
    def target_pose(self) -> np.ndarray:
        """Current target (x, y, z, yaw, pitch, roll) in the world frame."""
        return self._target_pose.copy()

    def update(self, ground_euler_angle: Sequence[float], dt: float) -> TargetTrajectories:
        """Advance the target by ``dt`` seconds and publish new trajectories."""
        cmds = self.ctrl_component.user_cmds
        observation = self.ctrl_component.observation

        linear_goal = np.array(
            [
                cmds.linear_x_input * self.target_displacement_velocity,
                cmds.linear_y_input * self.target_displacement_velocity,
                0.0,
            ]
        )
        yaw_rate_goal = cmds.angular_z_input * self.target_rotation_velocity

        state = np.asarray(observation.state, dtype=float)
        if state.size < 12:
            raise ValueError("observation state must hold at least twelve entries")
        current_pose = state[_POSE_SLICE]
        cmd_vel_rot = rotation_matrix_from_zyx(current_pose[3:6]) @ linear_goal

        ground = np.asarray(ground_euler_angle, dtype=float)
        time_step = dt / self.time_to_target
        pose = self._target_pose
        pose[0] += cmd_vel_rot[0] * time_step
        pose[1] += cmd_vel_rot[1] * time_step
        pose[2] = cmds.height_ratio * self.command_height
        pose[3] += yaw_rate_goal * time_step
        pose[4] = ground[1]
        pose[5] = ground[2]

        reaching_time = observation.time + self.time_to_target
        trajectories = self.target_pose_to_trajectories(pose, observation, reaching_time)
        trajectories.state_trajectory[0][0:3] = cmd_vel_rot
        trajectories.state_trajectory[1][0:3] = cmd_vel_rot

        self.last_odometry = odometry_from_trajectories(trajectories)
        self.reference_sink(trajectories)
        return trajectories

    def target_pose_to_trajectories(
        self,
        target_pose: Sequence[float],
        observation: SystemObservation,
        target_reaching_time: float,
    ) -> TargetTrajectories:
        """Straight trajectory from the observed pose to ``target_pose``."""
        state = np.asarray(observation.state, dtype=float)
        target = np.asarray(target_pose, dtype=float).ravel()
        if target.size != 6:
            raise ValueError(f"target pose must have 6 entries, got {target.size}")
        expected = 12 + self.default_joint_state.size
        if state.size != expected:
            raise ValueError(
                f"observation state has {state.size} entries, expected {expected}"
            )
        start = np.concatenate((np.zeros(6), state[_POSE_SLICE], self.default_joint_state))
        end = np.concatenate((np.zeros(6), target, self.default_joint_state))
        input_size = np.asarray(observation.input).size
        return TargetTrajectories(
            time_trajectory=[observation.time, target_reaching_time],
            state_trajectory=[start, end],
            input_trajectory=[np.zeros(input_size), np.zeros(input_size)],
        )