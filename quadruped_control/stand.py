"""Stand-up motion: blends every joint from its start pose to a final pose."""

from __future__ import annotations

from typing import Sequence

from .spline import two_segment_spline


class StandController:
    """Joint position targets for standing up via an intermediate pose.

    The first half of the motion moves from the initial pose to the middle
    pose. The second half moves from the middle pose to the final pose.
    """

    def __init__(self, middle_position: Sequence[float], final_position: Sequence[float]) -> None:
        self._middle = tuple(float(value) for value in middle_position)
        self._final = tuple(float(value) for value in final_position)
        self._init: tuple[float, ...] | None = None

    def set_init_position(self, init_position: Sequence[float]) -> None:
        """Record the joint positions the motion starts from."""
        self._init = tuple(float(value) for value in init_position)

    def calc_target_position(self, index: int, current_time: float, finish_time: float) -> float:
        """Target position of joint ``index`` at ``current_time``.

        The spline is evaluated at ten times the completed fraction of each
        half of the motion, so each half reaches its end pose at the halfway
        point and at ``finish_time`` respectively.
        """
        if self._init is None:
            raise RuntimeError("initial joint positions have not been set")
        if finish_time == 0:
            raise ValueError("finish_time must be non-zero")
        joint_count = min(len(self._init), len(self._middle), len(self._final))
        if not 0 <= index < joint_count:
            raise IndexError(f"joint index {index} out of range for {joint_count} joints")

        init = self._init[index]
        middle = self._middle[index]
        final = self._final[index]
        percent = current_time / finish_time
        half = finish_time / 2.0

        if percent < 0.5:
            return two_segment_spline(
                init, 0.0, 0.0, 0.0,
                (middle + init) / 2.0, half,
                middle, 0.0, 0.0, finish_time,
                10.0 * percent,
            )
        if percent > 0.5:
            return two_segment_spline(
                middle, 0.0, 0.0, 0.0,
                (final + middle) / 2.0, half,
                final, 0.0, 0.0, finish_time,
                10.0 * (percent - 0.5),
            )
        return final