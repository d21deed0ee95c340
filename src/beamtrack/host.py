"""Host boundary — what the core reads from and commands on the environment.

The host owns physics, rendering and scheduling.  Once per tick the core
calls ``sense()`` and ``self_kinematics()``, then issues at most one
rate-style command per axis plus any discrete actions.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from .engagement.states import SensorSweep
from .guidance.vector import Vec2
from .tracking.track import ScanPlot


class ShipClass(str, enum.Enum):
    FIGHTER = "fighter"
    MISSILE = "missile"


@dataclass(frozen=True)
class Kinematics:
    position: Vec2
    velocity: Vec2
    heading: float
    angular_velocity: float


@runtime_checkable
class Host(Protocol):
    def current_tick(self) -> int: ...

    def sense(self) -> ScanPlot | None: ...

    def self_kinematics(self) -> Kinematics: ...

    def set_sensor_aim(self, sweep: SensorSweep) -> None: ...

    def actuate_linear(self, accel: Vec2) -> None: ...

    def actuate_torque(self, angular_accel: float) -> None: ...

    def actuate_turn_rate(self, rate: float) -> None: ...

    def trigger_weapon(self, index: int) -> None: ...

    def trigger_self_destruct(self) -> None: ...
