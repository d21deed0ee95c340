"""ArenaHost — a small deterministic 2D kinematic world implementing ``Host``.

Used by the tests and the scenario runner.  One agent body is piloted by
the guidance core; every other body flies a straight line at constant
velocity.  The sensor is a single cone (heading, width, min/max range)
that returns the nearest body inside it, so at most one plot per tick.

Physics per ``step()``:
  1. apply this tick's angular command (torque integrates angular
     velocity; a turn-rate command sets it directly)
  2. apply linear acceleration, clamped to ``max_acceleration``
  3. integrate heading and positions by ``1 / ticks_per_second``
  4. advance the tick counter and clear the per-tick command latch
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from loguru import logger

from .engagement.states import SensorSweep
from .guidance.vector import Vec2, angle, angle_diff, distance, length, scale, sub, wrap_angle
from .host import Kinematics
from .tracking.track import ScanPlot, TrackClass


@dataclass
class Body:
    """A non-piloted contact flying at constant velocity."""

    body_id: str
    position: Vec2
    velocity: Vec2 = (0.0, 0.0)
    classification: TrackClass | None = None
    alive: bool = True


@dataclass
class CommandLog:
    """Everything the agent asked for, tick by tick."""

    linear: list[tuple[int, Vec2]] = field(default_factory=list)
    torque: list[tuple[int, float]] = field(default_factory=list)
    turn_rate: list[tuple[int, float]] = field(default_factory=list)
    sensor: list[tuple[int, SensorSweep]] = field(default_factory=list)
    weapons: list[tuple[int, int]] = field(default_factory=list)
    self_destruct: list[int] = field(default_factory=list)

    def fired(self, index: int) -> int:
        return sum(1 for _, i in self.weapons if i == index)


class ArenaHost:
    """Kinematic arena exposing the per-tick host contract to one agent."""

    def __init__(
        self,
        position: Vec2 = (0.0, 0.0),
        velocity: Vec2 = (0.0, 0.0),
        heading: float = 0.0,
        ticks_per_second: float = 60.0,
        max_acceleration: float | None = None,
        plot_noise_std: float = 0.0,
        seed: int | None = None,
    ) -> None:
        self.ticks_per_second = ticks_per_second
        self.max_acceleration = max_acceleration
        self.plot_noise_std = plot_noise_std
        self._rng = np.random.default_rng(seed)

        self.position = position
        self.velocity = velocity
        self.heading = heading
        self.angular_velocity = 0.0
        self.bodies: dict[str, Body] = {}
        self.sweep = SensorSweep(heading, 2.0 * np.pi, 0.0, float("inf"))
        self.commands = CommandLog()
        self.destroyed = False

        self._tick = 0
        self._linear: Vec2 = (0.0, 0.0)
        self._torque: float | None = None
        self._turn_rate: float | None = None

    # -- world setup --------------------------------------------------------

    def add_body(self, body: Body) -> Body:
        self.bodies[body.body_id] = body
        return body

    def remove_body(self, body_id: str) -> None:
        self.bodies.pop(body_id, None)

    # -- Host protocol -------------------------------------------------------

    def current_tick(self) -> int:
        return self._tick

    def self_kinematics(self) -> Kinematics:
        return Kinematics(self.position, self.velocity, self.heading, self.angular_velocity)

    def sense(self) -> ScanPlot | None:
        """Nearest live body inside the current sensor cone, if any."""
        best: Body | None = None
        best_d = float("inf")
        for body in self.bodies.values():
            if not body.alive or not self.in_cone(body.position):
                continue
            d = distance(self.position, body.position)
            if d < best_d:
                best, best_d = body, d
        if best is None:
            return None

        position = best.position
        if self.plot_noise_std > 0.0:
            nx, ny = self._rng.normal(0.0, self.plot_noise_std, 2)
            position = (position[0] + float(nx), position[1] + float(ny))
        return ScanPlot(
            position=position,
            velocity=best.velocity,
            tick=self._tick,
            snr=self._snr(best_d),
            classification=best.classification,
        )

    def set_sensor_aim(self, sweep: SensorSweep) -> None:
        self.sweep = sweep
        self.commands.sensor.append((self._tick, sweep))

    def actuate_linear(self, accel: Vec2) -> None:
        self._linear = accel
        self.commands.linear.append((self._tick, accel))

    def actuate_torque(self, angular_accel: float) -> None:
        self._torque = angular_accel
        self.commands.torque.append((self._tick, angular_accel))

    def actuate_turn_rate(self, rate: float) -> None:
        self._turn_rate = rate
        self.commands.turn_rate.append((self._tick, rate))

    def trigger_weapon(self, index: int) -> None:
        self.commands.weapons.append((self._tick, index))

    def trigger_self_destruct(self) -> None:
        self.commands.self_destruct.append(self._tick)
        self.destroyed = True
        logger.info("arena: agent self-destructed at tick {}", self._tick)

    # -- simulation ------------------------------------------------------------

    def in_cone(self, point: Vec2) -> bool:
        d = distance(self.position, point)
        if d < self.sweep.min_range or d > self.sweep.max_range:
            return False
        if self.sweep.width >= 2.0 * np.pi:
            return True
        bearing = angle(sub(point, self.position))
        return abs(angle_diff(self.sweep.heading, bearing)) <= self.sweep.width / 2.0

    def step(self) -> None:
        dt = 1.0 / self.ticks_per_second
        if self._turn_rate is not None:
            self.angular_velocity = self._turn_rate
        elif self._torque is not None:
            self.angular_velocity += self._torque * dt

        accel = self._linear
        if self.max_acceleration is not None:
            magnitude = length(accel)
            if magnitude > self.max_acceleration:
                accel = scale(accel, self.max_acceleration / magnitude)

        self.velocity = (self.velocity[0] + accel[0] * dt, self.velocity[1] + accel[1] * dt)
        self.position = (self.position[0] + self.velocity[0] * dt,
                         self.position[1] + self.velocity[1] * dt)
        self.heading = wrap_angle(self.heading + self.angular_velocity * dt)

        for body in self.bodies.values():
            if body.alive:
                body.position = (body.position[0] + body.velocity[0] * dt,
                                 body.position[1] + body.velocity[1] * dt)

        self._tick += 1
        self._linear = (0.0, 0.0)
        self._torque = None
        self._turn_rate = None

    def _snr(self, d: float) -> float:
        # Radar equation falloff, 1/R^4, in dB relative to 1 m
        return float(-40.0 * np.log10(max(d, 1.0)))
