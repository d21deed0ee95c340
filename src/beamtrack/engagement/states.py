"""Engagement FSM — operating mode, designated target, and sensor sweep.

States:
  no_target -> searching -> engaged -> out_of_target_range
                                    -> out_of_radar_range
  Any state returns to searching once its trigger clears.

The machine is evaluated once per tick after the tracker has ingested the
tick's plot.  Context keys:

    has_contacts:        bool -- tracker holds at least one track
    ticks_since_contact: int  -- ticks since any plot arrived
    target_distance:     float | None -- range to the designated track

Transition priority, first match wins:
  1. contacts + designated target beyond engage_range -> out_of_target_range
  2. contacts                                          -> engaged
  3. ticks_since_contact > radar_timeout               -> out_of_radar_range
  4. anything else                                     -> searching
     (no_target is left only by rule 1, 2 or 3)

Each state picks a sensor sweep:
  no_target / searching  wide rotating sweep, short range
  engaged / out_of_target_range  beam focused on the designated track
  out_of_radar_range     narrow rotating sweep at maximum range
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass

from loguru import logger

from ..config import GuidanceSettings
from ..guidance.vector import Vec2, angle, distance, sub, wrap_angle
from ..tracking.track import Track
from ..tracking.tracker import Tracker
from .designation import Designation
from .state_machine import State, StateMachine


class EngagementState(str, enum.Enum):
    NO_TARGET = "no_target"
    SEARCHING = "searching"
    ENGAGED = "engaged"
    OUT_OF_TARGET_RANGE = "out_of_target_range"
    OUT_OF_RADAR_RANGE = "out_of_radar_range"


@dataclass(frozen=True)
class SensorSweep:
    """Sensor cone for next tick's ``sense()``."""

    heading: float
    width: float
    min_range: float
    max_range: float


def rotating_sweep(previous: SensorSweep, width: float, min_range: float,
                   max_range: float) -> SensorSweep:
    """Step the beam by the previous width so successive ticks tile the circle."""
    return SensorSweep(
        heading=wrap_angle(previous.heading + previous.width),
        width=width,
        min_range=min_range,
        max_range=max_range,
    )


def focused_sweep(origin: Vec2, target: Vec2, settings: GuidanceSettings) -> SensorSweep:
    """Beam centered on ``target`` with a range window around it.

    Width narrows with distance as ``pi / log2(d)``; the window spans
    70%..110% of the range so a closing target stays inside it.
    """
    d = distance(origin, target)
    if d > 2.0:
        width = math.pi / math.log2(d)
    else:
        width = settings.search_beam_width
    width = min(max(width, settings.min_focus_beam_width), settings.search_beam_width)
    return SensorSweep(
        heading=angle(sub(target, origin)),
        width=width,
        min_range=max(d - d * 0.3, settings.sensor_min_range),
        max_range=max(d + d * 0.1, settings.sensor_min_range * 2.0),
    )


class _SearchState(State):
    def on_enter(self, ctx: dict) -> None:
        logger.info("searching for target")


class _EngagedState(State):
    def on_enter(self, ctx: dict) -> None:
        logger.info("engaging target")


class _OutOfTargetRangeState(State):
    def on_enter(self, ctx: dict) -> None:
        logger.info("target out of range, closing")


class _OutOfRadarRangeState(State):
    def on_enter(self, ctx: dict) -> None:
        logger.info("extending sensor to maximum range")


def create_engagement_fsm(settings: GuidanceSettings) -> StateMachine:
    """Build the engagement FSM with its priority-ordered transitions."""
    sm = StateMachine(EngagementState.NO_TARGET.value)
    sm.add_state(State(EngagementState.NO_TARGET.value))
    sm.add_state(_SearchState(EngagementState.SEARCHING.value))
    sm.add_state(_EngagedState(EngagementState.ENGAGED.value))
    sm.add_state(_OutOfTargetRangeState(EngagementState.OUT_OF_TARGET_RANGE.value))
    sm.add_state(_OutOfRadarRangeState(EngagementState.OUT_OF_RADAR_RANGE.value))

    def beyond_engage_range(ctx: dict) -> bool:
        d = ctx.get("target_distance")
        return bool(ctx.get("has_contacts")) and d is not None and d > settings.engage_range

    def contacts(ctx: dict) -> bool:
        return bool(ctx.get("has_contacts"))

    def radar_timed_out(ctx: dict) -> bool:
        return (not ctx.get("has_contacts")
                and ctx.get("ticks_since_contact", 0) > settings.radar_timeout_ticks)

    def in_range_contacts(ctx: dict) -> bool:
        return contacts(ctx) and not beyond_engage_range(ctx)

    def quiet(ctx: dict) -> bool:
        return not ctx.get("has_contacts") and not radar_timed_out(ctx)

    ordered = [
        (EngagementState.OUT_OF_TARGET_RANGE, beyond_engage_range),
        (EngagementState.ENGAGED, in_range_contacts),
        (EngagementState.OUT_OF_RADAR_RANGE, radar_timed_out),
        (EngagementState.SEARCHING, quiet),
    ]
    for src in EngagementState:
        for dst, condition in ordered:
            if dst is src:
                continue
            # no_target holds until the first contact or a radar timeout
            if src is EngagementState.NO_TARGET and dst is EngagementState.SEARCHING:
                continue
            sm.add_transition(src.value, dst.value, condition)
    return sm


class Engagement:
    """Engagement mode, designation, and sweep selection for one agent."""

    def __init__(self, settings: GuidanceSettings | None = None) -> None:
        self._settings = settings or GuidanceSettings()
        self._fsm = create_engagement_fsm(self._settings)
        self.designation = Designation(self._settings.sticky_ticks)
        self._sweep = SensorSweep(
            heading=0.0,
            width=self._settings.search_beam_width,
            min_range=self._settings.sensor_min_range,
            max_range=self._settings.search_max_range,
        )

    @property
    def state(self) -> EngagementState:
        return EngagementState(self._fsm.current_state)

    @property
    def fsm(self) -> StateMachine:
        return self._fsm

    @property
    def sweep(self) -> SensorSweep:
        return self._sweep

    def target(self, tracker: Tracker) -> Track | None:
        """The designated Track, or None (never raises)."""
        if self.designation.track_id is None or self.designation.track_id not in tracker:
            return None
        return tracker.get(self.designation.track_id)

    def update(self, tracker: Tracker, origin: Vec2, pruned: list[int] | None = None) -> bool:
        """One tick: release pruned targets, update designation, step FSM.

        Returns True when the designated track changed.
        """
        if pruned:
            self.designation.release_pruned(pruned)
        changed = self.designation.update(tracker, origin)

        target = self.target(tracker)
        ctx = {
            "has_contacts": tracker.has_contacts(),
            "ticks_since_contact": tracker.ticks_since_contact,
            "target_distance": target.distance_from(origin) if target is not None else None,
        }
        self._fsm.tick(ctx)
        return changed

    def select_sweep(self, tracker: Tracker, origin: Vec2) -> SensorSweep:
        """Choose next tick's sensor cone for the current state."""
        s = self._settings
        state = self.state
        target = self.target(tracker)
        if state in (EngagementState.ENGAGED, EngagementState.OUT_OF_TARGET_RANGE) and target is not None:
            sweep = focused_sweep(origin, target.position, s)
        elif state is EngagementState.OUT_OF_RADAR_RANGE:
            sweep = rotating_sweep(self._sweep, s.long_range_beam_width,
                                   s.sensor_min_range, s.long_range_max_range)
        else:
            sweep = rotating_sweep(self._sweep, s.search_beam_width,
                                   s.sensor_min_range, s.search_max_range)
        self._sweep = sweep
        return sweep
