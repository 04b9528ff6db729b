"""Hardware interface naming, assignment and command writing for the controller."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from .components import CtrlComponent

SAFE_STOP_KD = 5.0

_COMMAND_LISTS = {
    "effort": "joint_torque_command",
    "position": "joint_position_command",
    "velocity": "joint_velocity_command",
    "kp": "joint_kp_command",
    "kd": "joint_kd_command",
}

_STATE_LISTS = {
    "position": "joint_position_state",
    "effort": "joint_effort_state",
    "velocity": "joint_velocity_state",
}


@dataclass
class ControllerConfig:
    """Controller parameters: model files, joint and sensor names, default gains.

    If ``imu_interfaces`` is not given, it defaults to ``state_interfaces``.
    """

    urdf_file: str = ""
    task_file: str = ""
    reference_file: str = ""
    gait_file: str = ""
    joints: list[str] = field(default_factory=list)
    feet: list[str] = field(default_factory=list)
    command_interfaces: list[str] = field(default_factory=list)
    state_interfaces: list[str] = field(default_factory=list)
    imu_name: str = ""
    imu_interfaces: list[str] | None = None
    default_kp: float = 0.0
    default_kd: float = 6.0

    def __post_init__(self) -> None:
        self.joints = list(self.joints)
        self.feet = list(self.feet)
        self.command_interfaces = list(self.command_interfaces)
        self.state_interfaces = list(self.state_interfaces)
        if self.imu_interfaces is None:
            self.imu_interfaces = list(self.state_interfaces)
        else:
            self.imu_interfaces = list(self.imu_interfaces)
        self.default_kp = float(self.default_kp)
        self.default_kd = float(self.default_kd)


def command_interface_names(
    joint_names: Iterable[str], command_types: Sequence[str]
) -> list[str]:
    """Names ``joint/type`` for every joint and command type, joint by joint."""
    return [f"{joint}/{kind}" for joint in joint_names for kind in command_types]


def state_interface_names(
    joint_names: Iterable[str],
    state_types: Sequence[str],
    imu_name: str,
    imu_types: Iterable[str],
) -> list[str]:
    """Joint state interface names followed by the IMU interface names."""
    names = [f"{joint}/{kind}" for joint in joint_names for kind in state_types]
    names.extend(f"{imu_name}/{kind}" for kind in imu_types)
    return names


def _split_name(handle: Any) -> tuple[str, str]:
    prefix, _, interface = str(handle.name).rpartition("/")
    return prefix, interface


def assign_interfaces(
    ctrl_component: CtrlComponent,
    command_interfaces: Iterable[Any],
    state_interfaces: Iterable[Any],
    imu_name: str,
) -> None:
    """Sort hardware handles into the component's lists by interface type.

    Each handle carries a ``name`` of the form ``prefix/interface``. Handles
    whose prefix is ``imu_name`` become IMU channels, in the order given.
    Previously assigned handles are dropped first.
    """
    ctrl_component.clear()

    for handle in command_interfaces:
        _, interface = _split_name(handle)
        attr = _COMMAND_LISTS.get(interface)
        if attr is None:
            raise ValueError(f"unknown command interface type: {interface!r}")
        getattr(ctrl_component, attr).append(handle)

    for handle in state_interfaces:
        prefix, interface = _split_name(handle)
        if prefix == imu_name:
            ctrl_component.imu_state.append(handle)
            continue
        attr = _STATE_LISTS.get(interface)
        if attr is None:
            raise ValueError(f"unknown state interface type: {interface!r}")
        getattr(ctrl_component, attr).append(handle)


def _command_lists(ctrl_component: CtrlComponent) -> list[list[Any]]:
    lists = [
        ctrl_component.joint_torque_command,
        ctrl_component.joint_position_command,
        ctrl_component.joint_velocity_command,
        ctrl_component.joint_kp_command,
        ctrl_component.joint_kd_command,
    ]
    count = len(lists[0])
    if any(len(handles) != count for handles in lists):
        raise ValueError("command interface lists differ in length")
    return lists


def write_commands(
    ctrl_component: CtrlComponent,
    torque: Sequence[float],
    position: Sequence[float],
    velocity: Sequence[float],
    kp: float,
    kd: float,
) -> None:
    """Send feed-forward torque, desired position and velocity, and PD gains to every joint."""
    torques, positions, velocities, kps, kds = _command_lists(ctrl_component)
    count = len(torques)
    for label, values in (("torque", torque), ("position", position), ("velocity", velocity)):
        if len(values) < count:
            raise ValueError(f"{label} has {len(values)} entries, expected {count}")
    for handles, values in zip((torques, positions, velocities), (torque, position, velocity)):
        for handle, value in zip(handles, values):
            handle.set_value(float(value))
    for handle in kps:
        handle.set_value(float(kp))
    for handle in kds:
        handle.set_value(float(kd))


def write_safe_stop(ctrl_component: CtrlComponent) -> None:
    """Command every joint to a passive, damped state."""
    torques, positions, velocities, kps, kds = _command_lists(ctrl_component)
    for handles in (torques, positions, velocities, kps):
        for handle in handles:
            handle.set_value(0.0)
    for handle in kds:
        handle.set_value(SAFE_STOP_KD)