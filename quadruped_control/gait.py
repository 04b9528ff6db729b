"""Switches the gait schedule when the operator selects a new gait."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Protocol, Sequence

from .components import CtrlComponent

logger = logging.getLogger(__name__)

STANCE = 15


@dataclass(frozen=True)
class ModeSequenceTemplate:
    """A repeating gait: mode ``mode_sequence[i]`` holds between switching times i and i+1."""

    switching_times: tuple[float, ...]
    mode_sequence: tuple[int, ...]

    def __init__(self, switching_times: Sequence[float], mode_sequence: Sequence[int]) -> None:
        times = tuple(float(value) for value in switching_times)
        modes = tuple(int(value) for value in mode_sequence)
        if len(times) != len(modes) + 1:
            raise ValueError(
                "a mode sequence template needs one more switching time than modes"
            )
        object.__setattr__(self, "switching_times", times)
        object.__setattr__(self, "mode_sequence", modes)


class GaitSchedule(Protocol):
    def insert_mode_sequence_template(
        self, template: ModeSequenceTemplate, final_time: float, time_horizon: float
    ) -> Any: ...


class GaitManager:
    """Inserts the operator's selected gait into the schedule before each solve."""

    def __init__(self, ctrl_component: CtrlComponent, gait_schedule: GaitSchedule) -> None:
        self.ctrl_component = ctrl_component
        self.gait_schedule = gait_schedule
        self.target_gait = ModeSequenceTemplate([0.0, 1.0], [STANCE])
        self.last_gait_name = "stance"
        self.gait_updated = False
        self._gait_names: list[str] = []
        self._gaits: list[ModeSequenceTemplate] = []

    @property
    def gait_names(self) -> list[str]:
        return list(self._gait_names)

    def init(self, gaits: Mapping[str, ModeSequenceTemplate]) -> None:
        """Load the available gaits, in order, replacing any loaded before."""
        names: list[str] = []
        templates: list[ModeSequenceTemplate] = []
        for name, template in gaits.items():
            if not isinstance(template, ModeSequenceTemplate):
                raise TypeError(f"gait {name!r} is not a ModeSequenceTemplate")
            names.append(str(name))
            templates.append(template)
        self._gait_names = names
        self._gaits = templates
        logger.info("GaitManager is ready.")

    def pre_solver_run(self, init_time: float, final_time: float) -> None:
        """Insert the target gait into the schedule if the selection changed."""
        self._select_target_gait()
        if self.gait_updated:
            self.gait_schedule.insert_mode_sequence_template(
                self.target_gait, final_time, final_time - init_time
            )
            self.gait_updated = False

    def post_solver_run(self, solution: Any) -> None:
        """Nothing to do after a solve."""
        return None

    def find_gait_index(self, gait_name: str) -> int:
        """Position of ``gait_name`` among the loaded gaits; ValueError if absent."""
        try:
            return self._gait_names.index(gait_name)
        except ValueError:
            raise ValueError(f"unknown gait name: {gait_name}") from None

    def _select_target_gait(self) -> None:
        name = self.ctrl_component.user_cmds.gait_name
        if name == self.last_gait_name:
            return
        try:
            index = self.find_gait_index(name)
        except ValueError:
            logger.info("Unknown gait name: %s, keeping the current gait", name)
            return
        self.target_gait = self._gaits[index]
        logger.info("Switch to gait: %s", self._gait_names[index])
        self.gait_updated = True
        self.last_gait_name = name