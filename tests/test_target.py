import math

import numpy as np
import pytest

from quadruped_control.components import CtrlComponent, SystemObservation
from quadruped_control.target import (
    TargetManager,
    TargetTrajectories,
    odometry_from_trajectories,
)

NUM_JOINTS = 12
DEFAULT_JOINTS = [0.0, 0.72, -1.44] * 4


def make_manager(yaw=0.0, time=1.0):
    comp = CtrlComponent()
    state = np.zeros(12 + NUM_JOINTS)
    state[6:9] = [0.3, -0.2, 0.4]
    state[9] = yaw
    comp.observation = SystemObservation(time=time, state=state, input=np.zeros(24))
    sent = []
    manager = TargetManager(
        comp,
        sent.append,
        command_height=0.5,
        default_joint_state=DEFAULT_JOINTS,
        time_to_target=2.0,
        target_rotation_velocity=0.5,
        target_displacement_velocity=0.8,
    )
    return comp, manager, sent


def test_update_sends_trajectories_to_sink():
    comp, manager, sent = make_manager()
    result = manager.update([0.0, 0.0, 0.0], 0.01)
    assert sent == [result]
    assert result.time_trajectory == [1.0, 1.0 + 2.0]
    np.testing.assert_allclose(result.state_trajectory[0][6:12], comp.observation.state[6:12])
    np.testing.assert_allclose(result.state_trajectory[1][12:], DEFAULT_JOINTS)
    assert len(result.input_trajectory) == 2
    assert result.input_trajectory[0].shape == (24,)


def test_height_follows_ratio():
    comp, manager, _ = make_manager()
    comp.user_cmds.height_ratio = 0.9
    result = manager.update([0.0, 0.0, 0.0], 0.01)
    assert manager.target_pose[2] == pytest.approx(0.9 * 0.5)
    assert result.state_trajectory[1][8] == pytest.approx(0.9 * 0.5)


def test_forward_command_integrates_x():
    comp, manager, _ = make_manager()
    comp.user_cmds.linear_x_input = 1.0
    dt = 0.1
    for _ in range(3):
        result = manager.update([0.0, 0.0, 0.0], dt)
    expected_velocity = 1.0 * 0.8
    assert manager.target_pose[0] == pytest.approx(3 * expected_velocity * dt / 2.0)
    assert manager.target_pose[1] == pytest.approx(0.0)
    np.testing.assert_allclose(result.state_trajectory[0][0:3], [expected_velocity, 0.0, 0.0])
    np.testing.assert_allclose(result.state_trajectory[1][0:3], [expected_velocity, 0.0, 0.0])


def test_forward_command_rotated_by_yaw():
    comp, manager, _ = make_manager(yaw=math.pi / 2)
    comp.user_cmds.linear_x_input = 1.0
    manager.update([0.0, 0.0, 0.0], 0.1)
    pose = manager.target_pose
    assert pose[0] == pytest.approx(0.0, abs=1e-12)
    assert pose[1] == pytest.approx(0.8 * 0.1 / 2.0)


def test_yaw_rate_integrates_yaw():
    comp, manager, _ = make_manager()
    comp.user_cmds.angular_z_input = -1.0
    manager.update([0.0, 0.0, 0.0], 0.2)
    manager.update([0.0, 0.0, 0.0], 0.2)
    assert manager.target_pose[3] == pytest.approx(2 * -0.5 * 0.2 / 2.0)


def test_ground_angles_set_pitch_and_roll():
    _, manager, _ = make_manager()
    result = manager.update([0.7, 0.1, -0.05], 0.01)
    np.testing.assert_allclose(manager.target_pose[4:6], [0.1, -0.05])
    np.testing.assert_allclose(result.state_trajectory[1][10:12], [0.1, -0.05])


def test_last_odometry_matches_target():
    comp, manager, _ = make_manager()
    comp.user_cmds.linear_x_input = 0.5
    result = manager.update([0.0, 0.0, 0.0], 0.1)
    odom = manager.last_odometry
    np.testing.assert_allclose(odom.position, result.state_trajectory[1][6:9])
    assert odom.frame_id == "odom"
    assert odom.child_frame_id == "base"


def test_odometry_identity_orientation():
    state = np.zeros(24)
    state[0:3] = [0.4, 0.1, 0.0]
    state[6:9] = [1.0, 2.0, 0.3]
    traj = TargetTrajectories([0.0, 1.0], [np.zeros(24), state])
    odom = odometry_from_trajectories(traj)
    np.testing.assert_allclose(odom.position, [1.0, 2.0, 0.3])
    np.testing.assert_allclose(odom.orientation, [1.0, 0.0, 0.0, 0.0])
    np.testing.assert_allclose(odom.linear_velocity, [0.4, 0.1, 0.0])


def test_odometry_twist_in_body_frame():
    state = np.zeros(24)
    state[0:3] = [0.0, 1.0, 0.0]
    state[9] = math.pi / 2
    traj = TargetTrajectories([0.0, 1.0], [np.zeros(24), state])
    odom = odometry_from_trajectories(traj)
    np.testing.assert_allclose(odom.linear_velocity, [1.0, 0.0, 0.0], atol=1e-12)
    assert np.linalg.norm(odom.orientation) == pytest.approx(1.0)


def test_state_dimension_mismatch_raises():
    comp, manager, _ = make_manager()
    comp.observation.state = np.zeros(20)
    with pytest.raises(ValueError):
        manager.update([0.0, 0.0, 0.0], 0.01)


def test_target_pose_must_have_six_entries():
    comp, manager, _ = make_manager()
    with pytest.raises(ValueError):
        manager.target_pose_to_trajectories([0.0] * 5, comp.observation, 3.0)


def test_trajectory_lengths_checked():
    with pytest.raises(ValueError):
        TargetTrajectories([0.0, 1.0], [np.zeros(3)])


def test_time_to_target_must_be_positive():
    with pytest.raises(ValueError):
        TargetManager(CtrlComponent(), print, 0.5, DEFAULT_JOINTS, 0.0, 1.0, 1.0)