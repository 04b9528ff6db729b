# quadruped_control

Building blocks for the control loop of a four-legged robot. Everything works on
plain NumPy arrays and Python objects; no robotics middleware is needed.

## Modules

- `quadruped_control.spline`: `two_segment_spline(p0, v0, a0, t0, p1, t1, p2, v2, a2, t2, t)`,
  the position at time `t` of a two-piece quartic spline through `(t0, p0)`,
  `(t1, p1)` and `(t2, p2)`. Velocity and acceleration are matched at `t0` and `t2`
  and are continuous at `t1`; after `t2` the position is held at `p2`. Knot times
  that are not distinct raise `ValueError`.
- `quadruped_control.stand`: `StandController(middle_position, final_position)`.
  After `set_init_position(...)`, `calc_target_position(index, current_time, finish_time)`
  gives the target of one joint: the first half of the motion blends from the initial
  pose to the middle pose, the second half from the middle pose to the final pose.
- `quadruped_control.rotations`: conversions for Z-Y-X Euler angles ordered
  (yaw, pitch, roll) and quaternions ordered (w, x, y, z): `quat_to_zyx`,
  `rotation_matrix_from_zyx`, `quaternion_from_zyx`, the Euler-rate conversions
  `zyx_derivatives_from_global_angular_velocity`,
  `zyx_derivatives_from_local_angular_velocity` and
  `global_angular_velocity_from_zyx_derivatives`, and the angle helpers
  `normalize_angle` (into (-pi, pi]) and `shortest_angular_distance`.
- `quadruped_control.task`: `Task(a, b, d, f)`, a set of linear equalities
  `a x = b` and inequalities `d x <= f` for whole-body control. `Task.empty(n)`
  makes a task with no rows; tasks stack with `+` and scale with `*`. The helpers
  `concatenate_matrices` and `concatenate_vectors` do the stacking.
- `quadruped_control.terrain`: `TerrainEstimator`. `update(body_euler_angles,
  feet_positions, contact_flags)` fits a plane through the four feet (ordered
  front-left, front-right, hind-left, hind-right) while all four are in contact;
  the `ground_euler_angle` property gives the ground (yaw, pitch, roll) in the body
  frame, with yaw always zero.
- `quadruped_control.components`: the shared controller state `CtrlComponent`
  (hardware handle lists, `UserCommands`, `SystemObservation`, update frequency),
  and `mode_number_from_contacts` / `contacts_from_mode_number`, which encode four
  stance flags as a mode number from 0 to 15.
- `quadruped_control.state_estimation`: `KalmanFilterEstimator(num_contacts,
  num_joints, kinematics, ctrl_component)`, a linear Kalman filter over base
  position, base velocity and foot positions. It reads joint and IMU handles from
  the `CtrlComponent`; `update(contact_flags, dt)` returns the rigid-body state
  (yaw, pitch, roll, x, y, z, joints, then their rates) and `odometry()` returns an
  `Odometry` with the twist in the body frame. Noise parameters live in
  `KalmanFilterSettings`, which `load_settings(values)` reads from a mapping of
  task-file names such as `footRadius`, either nested under `kalmanFilter` or
  prefixed with `kalmanFilter.`.
- `quadruped_control.target`: `TargetManager`, which integrates the operator's
  velocity commands into a world-frame target pose each `update(ground_euler_angle, dt)`,
  hands a `TargetTrajectories` to a callback, and keeps its odometry in
  `last_odometry`. `odometry_from_trajectories` builds that odometry.
- `quadruped_control.gait`: `GaitManager` and `ModeSequenceTemplate`. After
  `init(gaits)` with an ordered mapping of gait names to templates,
  `pre_solver_run(init_time, final_time)` inserts the gait named in
  `user_cmds.gait_name` into a gait schedule whenever the selection changes.
  Unknown names are logged and ignored.
- `quadruped_control.interfaces`: `ControllerConfig`, the interface name builders
  `command_interface_names` and `state_interface_names`, `assign_interfaces`
  (sorts handles named `prefix/interface` into a `CtrlComponent`), `write_commands`
  and `write_safe_stop` (zero torque, position, velocity and kp, kd of 5).
- `quadruped_control.controller`: `RepeatedTimer` for benchmarking loops,
  `unwrap_yaw(last_yaw, new_yaw)`, and `make_stand_controller()`, a
  `StandController` for twelve joints with the default middle and final poses.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

Stand-up targets:

```python
from quadruped_control.controller import make_stand_controller

stand = make_stand_controller()
stand.set_init_position([0.0] * 12)
angle = stand.calc_target_position(1, 1.0, 5.0)
```

Gait switching:

```python
from quadruped_control.components import CtrlComponent
from quadruped_control.gait import GaitManager, ModeSequenceTemplate


class Schedule:
    def insert_mode_sequence_template(self, template, final_time, time_horizon):
        print(template.mode_sequence, final_time, time_horizon)


component = CtrlComponent()
manager = GaitManager(component, Schedule())
manager.init({
    "stance": ModeSequenceTemplate([0.0, 1.0], [15]),
    "trot": ModeSequenceTemplate([0.0, 0.3, 0.6], [9, 6]),
})
component.user_cmds.gait_name = "trot"
manager.pre_solver_run(0.0, 1.0)
```

Rotations:

```python
import numpy as np
from quadruped_control.rotations import quaternion_from_zyx, quat_to_zyx, rotation_matrix_from_zyx

zyx = np.array([0.3, 0.1, -0.2])
r = rotation_matrix_from_zyx(zyx)
back = quat_to_zyx(quaternion_from_zyx(zyx))
```

## What this package does not do

- It contains no model predictive control solver and no whole-body control solver;
  `Task` only describes the linear constraints such a solver would take.
- It has no robot model. `KalmanFilterEstimator` takes a `kinematics(q, v)`
  callable that you supply to compute foot positions and velocities.
- It does not read task, reference or gait files; settings and gaits are passed in
  as Python mappings and values.
- It does not talk to hardware or any messaging system. Hardware handles are any
  objects with `get_value()` / `set_value(value)` and, for `assign_interfaces`, a
  `name`; odometry and trajectories are returned as Python objects or handed to
  callbacks you provide.
- It provides no command-line program.