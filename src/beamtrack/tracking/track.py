"""Track and ScanPlot — per-contact kinematic state built from sensor plots.

A ScanPlot is one instantaneous sensor return.  It is transient: it is
either consumed into an existing Track by gate association or used to
spawn a new Tentative Track.

Each tick a Track advances exactly once:

  - no plot queued: coast, ``position += velocity / tps``
  - one plot queued: one-step differencing smoother against the plot's
    reported velocity (see ``_apply_measurement``)
  - several plots queued: merged by averaging into one measurement first

The gate is recentered on the resolved position after every update,
including coast-only ticks.
"""

from __future__ import annotations

import enum
import math
from collections import deque
from dataclasses import dataclass, field

from loguru import logger

from ..guidance.vector import Vec2, distance
from .gate import TrackGate


class TrackClass(enum.Enum):
    TENTATIVE = "tentative"
    FRIEND = "friend"
    FOE = "foe"
    MUNITION = "munition"


@dataclass(frozen=True)
class ScanPlot:
    """One sensor return for an unidentified contact."""

    position: Vec2
    velocity: Vec2
    tick: int = 0
    snr: float = 0.0                          # signal quality, dB
    classification: TrackClass | None = None  # sensor-side class hint, if any


@dataclass
class Track:
    """Persistent kinematic estimate of one contact."""

    track_id: int
    position: Vec2
    velocity: Vec2
    gate: TrackGate
    last_contact_tick: int
    classification: TrackClass = TrackClass.TENTATIVE
    hits: int = 1
    plots: deque[ScanPlot] = field(default_factory=deque)

    @property
    def heading(self) -> float:
        return math.atan2(self.velocity[1], self.velocity[0])

    @property
    def speed(self) -> float:
        return math.hypot(self.velocity[0], self.velocity[1])

    def ticks_since_contact(self, tick: int) -> int:
        return tick - self.last_contact_tick

    def distance_from(self, point: Vec2) -> float:
        return distance(self.position, point)

    def check_gate(self, point: Vec2) -> bool:
        return self.gate.point_in_gate(point)

    def push_plot(self, plot: ScanPlot) -> None:
        self.plots.append(plot)
        self.last_contact_tick = max(self.last_contact_tick, plot.tick)
        self.hits += 1
        if plot.classification is not None:
            self.classification = plot.classification
        elif self.classification is TrackClass.TENTATIVE:
            self.classification = TrackClass.FOE

    def update(self, ticks_per_second: float) -> None:
        """Advance this track one tick from whatever plots are queued."""
        if not self.plots:
            self.position = (
                self.position[0] + self.velocity[0] / ticks_per_second,
                self.position[1] + self.velocity[1] / ticks_per_second,
            )
        elif len(self.plots) == 1:
            self._apply_measurement(self.plots.popleft().velocity, ticks_per_second)
        else:
            count = len(self.plots)
            logger.warning("track {}: merging {} plots queued in one tick", self.track_id, count)
            merged = _merge_plots(list(self.plots))
            self.plots.clear()
            self._apply_measurement(merged.velocity, ticks_per_second)

        self.gate.update_center(self.position)

    def _apply_measurement(self, plot_velocity: Vec2, ticks_per_second: float) -> None:
        # Velocities in meters per tick; the half-difference is the
        # acceleration seen over the last tick.
        cvx = self.velocity[0] / ticks_per_second
        cvy = self.velocity[1] / ticks_per_second
        pvx = plot_velocity[0] / ticks_per_second
        pvy = plot_velocity[1] / ticks_per_second
        ax = (cvx - pvx) / 2.0
        ay = (cvy - pvy) / 2.0
        self.velocity = ((cvx + ax) * ticks_per_second, (cvy + ay) * ticks_per_second)
        self.position = (self.position[0] + ax, self.position[1] + ay)
        logger.debug("track {}: velocity -> {}", self.track_id, self.velocity)

    def to_dict(self) -> dict:
        return {
            "track_id": self.track_id,
            "position": {"x": self.position[0], "y": self.position[1]},
            "velocity": {"x": self.velocity[0], "y": self.velocity[1]},
            "heading": self.heading,
            "classification": self.classification.value,
            "gate_radius": self.gate.radius,
            "last_contact_tick": self.last_contact_tick,
            "hits": self.hits,
        }


def derived_acceleration(current_velocity: Vec2, plot_velocity: Vec2,
                         ticks_per_second: float) -> Vec2:
    """Per-tick acceleration the smoother derives from a velocity pair."""
    return (
        (current_velocity[0] / ticks_per_second - plot_velocity[0] / ticks_per_second) / 2.0,
        (current_velocity[1] / ticks_per_second - plot_velocity[1] / ticks_per_second) / 2.0,
    )


def _merge_plots(plots: list[ScanPlot]) -> ScanPlot:
    n = len(plots)
    return ScanPlot(
        position=(sum(p.position[0] for p in plots) / n, sum(p.position[1] for p in plots) / n),
        velocity=(sum(p.velocity[0] for p in plots) / n, sum(p.velocity[1] for p in plots) / n),
        tick=max(p.tick for p in plots),
        snr=max(p.snr for p in plots),
    )
