"""Spline, rotation, terrain, state estimation, target, gait and interface helpers for quadruped controllers."""

__version__ = "0.1.0"

__all__ = [
    "spline",
    "rotations",
    "task",
    "stand",
    "terrain",
    "components",
    "state_estimation",
    "target",
    "gait",
    "interfaces",
    "controller",
]