"""Guidance loop — per-tick driver composing tracker, engagement and solvers.

A Ship is a tagged union over roles.  Each role carries its own state and
is dispatched once per tick:

  Fighter  sense -> track -> engagement/designation -> state behavior
           (maneuver + lead aim + trigger) -> sensor sweep -> events
  Missile  sweep -> sense -> track -> designate nearest -> pursue ->
           self-destruct inside blast radius

Neither role ever raises out of ``tick()`` for a missing target: every
failure in the core degrades to "no target this tick".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from loguru import logger

from .comms.event_bus import EventBus
from .config import GuidanceSettings
from .engagement.designation import Designation
from .engagement.states import Engagement, EngagementState, SensorSweep, rotating_sweep
from .guidance import controller, intercept
from .guidance.controller import TurnCommand, TurnProfile
from .guidance.vector import (
    Vec2, add, angle, angle_diff, from_angle, length, normalize, scale, sub,
)
from .host import Host, Kinematics, ShipClass
from .tracking.track import Track
from .tracking.tracker import Tracker

IdleBehavior = Callable[[Host, Kinematics], None]


def aim_origin(kin: Kinematics, offset: float) -> Vec2:
    """Gun muzzle position: the hull center shifted back along the heading."""
    return sub(kin.position, from_angle(kin.heading, offset))


@dataclass
class Maneuver:
    """Linear acceleration chosen for this tick and why."""

    accel: Vec2
    reason: str


def maneuver_to_target(kin: Kinematics, origin: Vec2, target: Track,
                       settings: GuidanceSettings) -> Maneuver:
    """Range-banded approach on the designated track.

    If the ship can still stop before it would reach the target, it closes
    at full push from beyond gun range, matches the target's velocity in
    the gun band, and hovers in close, backing off while the range is
    shrinking.  Otherwise it brakes.
    """
    direction = sub(target.position, origin)
    contact_distance = length(direction)
    unit = normalize(direction)
    future = add(target.position, target.velocity)
    distance_increasing = length(sub(origin, future)) > contact_distance

    tti = intercept.seconds_to_intercept(direction, length(kin.velocity))
    time_to_stop = length(kin.velocity) / settings.max_forward_acceleration

    if time_to_stop >= tti:
        return Maneuver(scale(kin.velocity, -1.0), "brake")
    if contact_distance < settings.close_range:
        if distance_increasing:
            return Maneuver(scale(unit, 10.0), "close_in")
        return Maneuver(scale(unit, -10.0), "back_off")
    if contact_distance < settings.fire_range:
        return Maneuver(scale(target.velocity, 10.0), "match")
    return Maneuver(scale(unit, 100.0), "close")


@dataclass
class Fighter:
    """Gun-and-missile platform that hunts the nearest contact."""

    host: Host
    settings: GuidanceSettings
    bus: EventBus | None = None
    idle_behavior: IdleBehavior | None = None
    tracker: Tracker = field(init=False)
    engagement: Engagement = field(init=False)
    last_turn: TurnCommand | None = field(default=None, init=False)
    last_maneuver: Maneuver | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        self.tracker = Tracker(self.settings)
        self.engagement = Engagement(self.settings)

    def tick(self) -> None:
        tick = self.host.current_tick()
        kin = self.host.self_kinematics()
        origin = aim_origin(kin, self.settings.aim_offset)

        pruned = self.tracker.ingest(self.host.sense(), tick)
        if pruned:
            self._publish("tracks_dropped", {"track_ids": pruned}, tick)

        previous_state = self.engagement.state
        designated = self.engagement.update(self.tracker, origin, pruned)
        if designated:
            self._publish("target_designated",
                          {"track_id": self.engagement.designation.track_id}, tick)
        if pruned or designated:
            logger.debug("{}", self.tracker.summary())
        state = self.engagement.state
        if state is not previous_state:
            self._publish("engagement_state",
                          {"state": state.value, "previous": previous_state.value}, tick)

        target = self.engagement.target(self.tracker)
        if state is EngagementState.NO_TARGET:
            if self.idle_behavior is not None:
                self.idle_behavior(self.host, kin)
        elif target is not None and state in (EngagementState.ENGAGED,
                                              EngagementState.OUT_OF_TARGET_RANGE):
            self.last_maneuver = maneuver_to_target(kin, origin, target, self.settings)
            self.host.actuate_linear(self.last_maneuver.accel)
            self._engage(kin, origin, target, tick, fire=state is EngagementState.ENGAGED)

        self.host.set_sensor_aim(self.engagement.select_sweep(self.tracker, origin))

    def _engage(self, kin: Kinematics, origin: Vec2, target: Track, tick: int, fire: bool) -> None:
        s = self.settings
        rel_p = sub(target.position, origin)
        rel_v = sub(target.velocity, kin.velocity)
        lead = intercept.quadratic_lead(rel_p, rel_v, s.projectile_speed, s.ticks_per_second)
        target_distance = length(rel_p)
        logger.debug("track {}: range {:.0f} m, closing {:.1f} m/s, {:.0f} ticks out",
                     target.track_id, target_distance, intercept.closing_speed(rel_p, rel_v),
                     intercept.ticks_to_intercept(rel_p, rel_v, s.ticks_per_second))

        profile: TurnProfile = controller.AGGRESSIVE if target_distance < s.fire_range else controller.CRUISE
        error = angle_diff(kin.heading, angle(lead.point))
        command = controller.command_turn(error, kin.angular_velocity, profile)
        if command.fire_eligible:
            snap = controller.command_turn(error, kin.angular_velocity, controller.SNAP)
            if snap.kind == controller.TURN_RATE:
                command = snap
        self.last_turn = command
        if command.kind == controller.TURN_RATE:
            # Never rotate past the aim point within a single tick
            limit = abs(command.error) * s.ticks_per_second
            self.host.actuate_turn_rate(max(-limit, min(limit, command.value)))
        else:
            self.host.actuate_torque(command.value)

        if fire and controller.fire_permitted(command, target_distance, s.fire_range):
            self.host.trigger_weapon(s.gun_index)
            self._publish("weapon_fired", {"index": s.gun_index, "track_id": target.track_id}, tick)
        if s.launch_missiles:
            self.host.trigger_weapon(s.missile_index)
            self._publish("weapon_fired", {"index": s.missile_index, "track_id": target.track_id}, tick)

    def _publish(self, event_type: str, data: dict, tick: int) -> None:
        if self.bus is not None:
            self.bus.publish(event_type, data, tick=tick)


@dataclass
class Missile:
    """Self-guided munition: pursues the nearest track and detonates on it."""

    host: Host
    settings: GuidanceSettings
    bus: EventBus | None = None
    tracker: Tracker = field(init=False)
    designation: Designation = field(init=False)
    sweep: SensorSweep = field(init=False)
    detonated: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.tracker = Tracker(self.settings)
        self.designation = Designation(self.settings.sticky_ticks)
        self.sweep = SensorSweep(0.0, self.settings.search_beam_width,
                                 self.settings.sensor_min_range, self.settings.search_max_range)

    def tick(self) -> None:
        if self.detonated:
            return
        s = self.settings
        tick = self.host.current_tick()
        kin = self.host.self_kinematics()

        self.sweep = rotating_sweep(self.sweep, s.search_beam_width,
                                    s.sensor_min_range, s.search_max_range)
        self.host.set_sensor_aim(self.sweep)

        pruned = self.tracker.ingest(self.host.sense(), tick)
        self.designation.release_pruned(pruned)
        self.designation.update(self.tracker, kin.position)
        if self.designation.track_id is None:
            return
        target = self.tracker.get(self.designation.track_id)

        dp = sub(target.position, kin.position)
        dv = sub(target.velocity, kin.velocity)
        self.host.actuate_turn_rate(
            controller.turn_rate_toward(angle_diff(kin.heading, angle(dp)), s.missile_turn_gain)
        )
        self.host.actuate_linear(scale(add(dp, dv), s.missile_thrust_gain))

        d = length(dp)
        if d < s.blast_radius:
            logger.info("munition detonating at {:.1f} m from track {}", d, target.track_id)
            self.host.trigger_self_destruct()
            self.detonated = True
            if self.bus is not None:
                self.bus.publish("self_destruct", {"distance": d}, tick=tick)


Role = Fighter | Missile


class Ship:
    """Top-level per-tick router over the active role."""

    def __init__(self, role: Role) -> None:
        self.role = role

    @classmethod
    def for_class(cls, ship_class: ShipClass | str, host: Host,
                  settings: GuidanceSettings | None = None,
                  bus: EventBus | None = None) -> "Ship":
        settings = settings or GuidanceSettings()
        ship_class = ShipClass(ship_class)
        if ship_class is ShipClass.FIGHTER:
            return cls(Fighter(host, settings, bus))
        return cls(Missile(host, settings, bus))

    def tick(self) -> None:
        if isinstance(self.role, (Fighter, Missile)):
            self.role.tick()
        else:
            raise TypeError(f"unsupported role {type(self.role).__name__}")
