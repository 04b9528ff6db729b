"""Base state estimation from joint encoders, an IMU and foot kinematics."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Callable, Mapping, Sequence

import numpy as np

from .components import CtrlComponent, mode_number_from_contacts
from .rotations import (
    global_angular_velocity_from_zyx_derivatives,
    quat_to_zyx,
    rotation_matrix_from_zyx,
    zyx_derivatives_from_global_angular_velocity,
    zyx_derivatives_from_local_angular_velocity,
)

_GRAVITY = np.array([0.0, 0.0, -9.81])
_IMU_CHANNELS = 10
_HIGH_SUSPECT = 100.0
_SETTINGS_PREFIX = "kalmanFilter"

Kinematics = Callable[[np.ndarray, np.ndarray], tuple[Any, Any]]


@dataclass
class Odometry:
    """Estimated pose and twist; the twist is expressed in the body frame."""

    position: np.ndarray
    orientation: np.ndarray  # (w, x, y, z)
    pose_covariance: np.ndarray  # 6x6
    linear_velocity: np.ndarray
    angular_velocity: np.ndarray
    twist_covariance: np.ndarray  # 6x6
    frame_id: str = "odom"
    child_frame_id: str = "base"


@dataclass
class KalmanFilterSettings:
    """Noise parameters of the linear Kalman filter."""

    foot_radius: float = 0.02
    imu_process_noise_position: float = 0.02
    imu_process_noise_velocity: float = 0.02
    foot_process_noise_position: float = 0.002
    foot_sensor_noise_position: float = 0.005
    foot_sensor_noise_velocity: float = 0.1
    foot_height_sensor_noise: float = 0.01

    _KEYS = {
        "foot_radius": "footRadius",
        "imu_process_noise_position": "imuProcessNoisePosition",
        "imu_process_noise_velocity": "imuProcessNoiseVelocity",
        "foot_process_noise_position": "footProcessNoisePosition",
        "foot_sensor_noise_position": "footSensorNoisePosition",
        "foot_sensor_noise_velocity": "footSensorNoiseVelocity",
        "foot_height_sensor_noise": "footHeightSensorNoise",
    }

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "KalmanFilterSettings":
        """Read settings by their task-file names; missing entries keep defaults.

        Names may sit under a nested ``kalmanFilter`` mapping, carry a
        ``kalmanFilter.`` prefix, or stand alone.
        """
        nested = values.get(_SETTINGS_PREFIX)
        source: Mapping[str, Any] = nested if isinstance(nested, Mapping) else values
        settings = cls()
        for attr, key in cls._KEYS.items():
            for candidate in (key, f"{_SETTINGS_PREFIX}.{key}"):
                if candidate in source:
                    setattr(settings, attr, float(source[candidate]))
                    break
        return settings


class StateEstimateBase:
    """Keeps the rigid-body state (yaw, pitch, roll, x, y, z, joints, and rates)."""

    def __init__(self, num_joints: int, ctrl_component: CtrlComponent) -> None:
        self.ctrl_component = ctrl_component
        self.num_joints = int(num_joints)
        self.generalized_coordinates_num = 6 + self.num_joints
        self._rbd_state = np.zeros(2 * self.generalized_coordinates_num)
        self.zyx_offset = np.zeros(3)
        self._contact_flags: tuple[bool, ...] = (False,) * 4
        self.quat = np.array([1.0, 0.0, 0.0, 0.0])
        self.angular_vel_local = np.zeros(3)
        self.linear_accel_local = np.zeros(3)
        self.orientation_covariance = np.zeros((3, 3))
        self.angular_vel_covariance = np.zeros((3, 3))
        self.linear_accel_covariance = np.zeros((3, 3))

    @property
    def rbd_state(self) -> np.ndarray:
        """Copy of the current rigid-body state."""
        return self._rbd_state.copy()

    @property
    def contact_flags(self) -> tuple[bool, ...]:
        return self._contact_flags

    def update_joint_states(self) -> None:
        """Read joint positions and velocities from the state handles."""
        comp = self.ctrl_component
        size = len(comp.joint_effort_state)
        if size != self.num_joints:
            raise ValueError(f"expected {self.num_joints} joints, got {size}")
        if len(comp.joint_position_state) < size or len(comp.joint_velocity_state) < size:
            raise ValueError("missing joint position or velocity handles")
        positions = [handle.get_value() for handle in comp.joint_position_state[:size]]
        velocities = [handle.get_value() for handle in comp.joint_velocity_state[:size]]
        gc = self.generalized_coordinates_num
        self._rbd_state[6:6 + size] = positions
        self._rbd_state[gc + 6:gc + 6 + size] = velocities

    def update_contact(self, contact_flags: Sequence[bool]) -> None:
        """Store the current stance flags."""
        self._contact_flags = tuple(bool(flag) for flag in contact_flags)

    def update_imu(self) -> None:
        """Read orientation, angular velocity and acceleration from the IMU handles."""
        imu = self.ctrl_component.imu_state
        if len(imu) < _IMU_CHANNELS:
            raise ValueError(f"expected {_IMU_CHANNELS} IMU channels, got {len(imu)}")
        readings = np.array([handle.get_value() for handle in imu[:_IMU_CHANNELS]], dtype=float)
        self.quat = readings[0:4]
        self.angular_vel_local = readings[4:7]
        self.linear_accel_local = readings[7:10]

        measured_zyx = quat_to_zyx(self.quat)
        zyx = measured_zyx - self.zyx_offset
        angular_vel_global = global_angular_velocity_from_zyx_derivatives(
            zyx,
            zyx_derivatives_from_local_angular_velocity(measured_zyx, self.angular_vel_local),
        )
        self._update_angular(zyx, angular_vel_global)

    @property
    def mode(self) -> int:
        """Mode number of the current stance flags."""
        return mode_number_from_contacts(self._contact_flags)

    def _update_angular(self, zyx: np.ndarray, angular_vel: np.ndarray) -> None:
        gc = self.generalized_coordinates_num
        self._rbd_state[0:3] = zyx
        self._rbd_state[gc:gc + 3] = angular_vel

    def _update_linear(self, position: np.ndarray, linear_vel: np.ndarray) -> None:
        gc = self.generalized_coordinates_num
        self._rbd_state[3:6] = position
        self._rbd_state[gc + 3:gc + 6] = linear_vel


class KalmanFilterEstimator(StateEstimateBase):
    """Linear Kalman filter over base position, base velocity and foot positions.

    ``kinematics(q, v)`` returns foot positions and velocities relative to the
    body, expressed in the world frame, each of shape ``(num_contacts, 3)``.
    ``q`` and ``v`` hold the base position (zero), ZYX angles or their rates,
    and the joint values.
    """

    def __init__(
        self,
        num_contacts: int,
        num_joints: int,
        kinematics: Kinematics,
        ctrl_component: CtrlComponent,
    ) -> None:
        super().__init__(num_joints, ctrl_component)
        self.kinematics = kinematics
        self.settings = KalmanFilterSettings()

        self.num_contacts = int(num_contacts)
        self.dim_contacts = 3 * self.num_contacts
        self.num_state = 6 + self.dim_contacts
        self.num_observe = 2 * self.dim_contacts + self.num_contacts

        self._x_hat = np.zeros(self.num_state)
        self._ps = np.zeros(self.dim_contacts)
        self._vs = np.zeros(self.dim_contacts)
        self._a = np.eye(self.num_state)
        self._b = np.zeros((self.num_state, 3))

        nc, dc = self.num_contacts, self.dim_contacts
        self._c = np.zeros((self.num_observe, self.num_state))
        for i in range(nc):
            self._c[3 * i:3 * i + 3, 0:3] = np.eye(3)
            self._c[3 * (nc + i):3 * (nc + i) + 3, 3:6] = np.eye(3)
            self._c[2 * dc + i, 6 + 3 * i + 2] = 1.0
        self._c[0:dc, 6:6 + dc] = -np.eye(dc)

        self._q = np.eye(self.num_state)
        self._p = 100.0 * self._q
        self._r = np.eye(self.num_observe)
        self.feet_heights = np.zeros(nc)

        self._feet_positions = np.zeros((0, 3))
        self._feet_velocities = np.zeros((0, 3))

    @property
    def state(self) -> np.ndarray:
        """Filter state: base position, base velocity, foot positions."""
        return self._x_hat.copy()

    @property
    def covariance(self) -> np.ndarray:
        return self._p.copy()

    def load_settings(self, values: Mapping[str, Any]) -> None:
        """Replace the noise settings from a task-file mapping."""
        self.settings = KalmanFilterSettings.from_mapping(values)

    def feet_positions(self) -> np.ndarray:
        """Foot positions relative to the body, in the world frame, from the last update."""
        return self._feet_positions.copy()

    def update(self, contact_flags: Sequence[bool], dt: float) -> np.ndarray:
        """Run one predict/correct step and return the rigid-body state."""
        if len(contact_flags) < self.num_contacts:
            raise ValueError(
                f"expected {self.num_contacts} contact flags, got {len(contact_flags)}"
            )
        self.update_joint_states()
        self.update_contact(contact_flags)
        self.update_imu()

        nc, dc, ns = self.num_contacts, self.dim_contacts, self.num_state
        eye3 = np.eye(3)
        self._a[0:3, 3:6] = dt * eye3
        self._b[0:3, 0:3] = 0.5 * dt * dt * eye3
        self._b[3:6, 0:3] = dt * eye3
        self._q[0:3, 0:3] = (dt / 20.0) * eye3
        self._q[3:6, 3:6] = (dt * 9.81 / 20.0) * eye3
        self._q[6:, 6:] = dt * np.eye(dc)

        self._compute_feet_kinematics()

        s = self.settings
        q = np.eye(ns)
        q[0:3, 0:3] = self._q[0:3, 0:3] * s.imu_process_noise_position
        q[2, 2] = 10000.0
        q[3:6, 3:6] = self._q[3:6, 3:6] * s.imu_process_noise_velocity
        q[6:, 6:] = self._q[6:, 6:] * s.foot_process_noise_position

        r = np.eye(self.num_observe)
        r[0:dc, 0:dc] = self._r[0:dc, 0:dc] * s.foot_sensor_noise_position
        r[dc:2 * dc, dc:2 * dc] = self._r[dc:2 * dc, dc:2 * dc] * s.foot_sensor_noise_velocity
        r[2 * dc:, 2 * dc:] = self._r[2 * dc:, 2 * dc:] * s.foot_height_sensor_noise

        for i, in_contact in enumerate(self._contact_flags[:nc]):
            scale = 1.0 if in_contact else _HIGH_SUSPECT
            q_block = slice(6 + 3 * i, 9 + 3 * i)
            pos_block = slice(3 * i, 3 * i + 3)
            vel_block = slice(dc + 3 * i, dc + 3 * i + 3)
            q[q_block, q_block] *= scale
            r[pos_block, pos_block] *= scale
            r[vel_block, vel_block] *= scale
            r[2 * dc + i, 2 * dc + i] *= scale

            self._ps[pos_block] = -self._feet_positions[i]
            self._ps[3 * i + 2] += s.foot_radius
            self._vs[pos_block] = -self._feet_velocities[i]

        accel = rotation_matrix_from_zyx(quat_to_zyx(self.quat)) @ self.linear_accel_local + _GRAVITY

        y = np.concatenate((self._ps, self._vs, self.feet_heights))
        a, c = self._a, self._c
        self._x_hat = a @ self._x_hat + self._b @ accel
        pm = a @ self._p @ a.T + q
        ey = y - c @ self._x_hat
        s_mat = c @ pm @ c.T + r
        gain_base = pm @ c.T
        self._x_hat = self._x_hat + gain_base @ np.linalg.solve(s_mat, ey)
        self._p = (np.eye(ns) - gain_base @ np.linalg.solve(s_mat, c)) @ pm
        self._p = (self._p + self._p.T) / 2.0

        self._update_linear(self._x_hat[0:3], self._x_hat[3:6])
        return self.rbd_state

    def odometry(self) -> Odometry:
        """Current estimate as odometry; the twist is in the body frame."""
        pose_cov = np.zeros((6, 6))
        pose_cov[0:3, 0:3] = self._p[0:3, 0:3]
        pose_cov[3:6, 3:6] = self.orientation_covariance
        twist_cov = np.zeros((6, 6))
        twist_cov[0:3, 0:3] = self._p[3:6, 3:6]
        twist_cov[3:6, 3:6] = self.angular_vel_covariance
        rotation = rotation_matrix_from_zyx(quat_to_zyx(self.quat))
        return Odometry(
            position=self._x_hat[0:3].copy(),
            orientation=np.array(self.quat, dtype=float),
            pose_covariance=pose_cov,
            linear_velocity=rotation.T @ self._x_hat[3:6],
            angular_velocity=np.array(self.angular_vel_local, dtype=float),
            twist_covariance=twist_cov,
        )

    def _compute_feet_kinematics(self) -> None:
        gc, nj = self.generalized_coordinates_num, self.num_joints
        rbd = self._rbd_state
        q_pin = np.zeros(gc)
        q_pin[3:6] = rbd[0:3]
        q_pin[6:] = rbd[6:6 + nj]
        v_pin = np.zeros(gc)
        v_pin[3:6] = zyx_derivatives_from_global_angular_velocity(q_pin[3:6], rbd[gc:gc + 3])
        v_pin[6:] = rbd[gc + 6:gc + 6 + nj]

        positions, velocities = self.kinematics(q_pin, v_pin)
        positions = np.asarray(positions, dtype=float)
        velocities = np.asarray(velocities, dtype=float)
        expected = (self.num_contacts, 3)
        if positions.shape != expected or velocities.shape != expected:
            raise ValueError(
                f"kinematics must return arrays of shape {expected}, "
                f"got {positions.shape} and {velocities.shape}"
            )
        self._feet_positions = positions
        self._feet_velocities = velocities