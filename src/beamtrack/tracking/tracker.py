"""Tracker — turns one sensor plot per tick into a pruned set of tracks.

Architecture
------------
The tracker is the sole owner of every Track.  Tracks live in a dict keyed
by a monotonically assigned integer id; ids are never reused.  Anything
else that cares about a track (the designation held by the engagement
layer, a munition's pursuit target) keeps only the id and resolves it
through ``get()`` on each use, so pruning can never leave a dangling
reference behind.

Each call to ``ingest()`` is one tick:

  1. Every live track coasts one step forward.
  2. If a plot arrived, it is offered to tracks in insertion order.  The
     *first* track whose gate strictly contains the plot claims it, the
     plot is queued and the track updated immediately.  This is greedy and
     order-dependent rather than globally optimal, which is acceptable
     because the sensor never yields more than one plot per tick.
  3. An unclaimed plot spawns a new Tentative track.
  4. Tracks whose ticks-since-contact has reached the staleness window are
     removed and their ids returned so holders can release them in the
     same tick.

The contact-recency counter (``ticks_since_contact``) counts ticks since
*any* plot arrived and drives the engagement layer's long-range sweep.
"""

from __future__ import annotations

from loguru import logger

from ..config import GuidanceSettings
from ..errors import LookupFailure
from ..guidance.vector import Vec2
from .gate import TrackGate
from .track import ScanPlot, Track, TrackClass


class Tracker:
    """Registry of all tracks built from this agent's sensor."""

    def __init__(self, settings: GuidanceSettings | None = None) -> None:
        self._settings = settings or GuidanceSettings()
        self._tracks: dict[int, Track] = {}
        self._next_id: int = 0
        self._tick: int = 0
        self._ticks_since_contact: int = 0

    # -- properties ----------------------------------------------------------

    @property
    def tick(self) -> int:
        return self._tick

    @property
    def ticks_since_contact(self) -> int:
        return self._ticks_since_contact

    def __len__(self) -> int:
        return len(self._tracks)

    def __contains__(self, track_id: object) -> bool:
        return track_id in self._tracks

    # -- per-tick entry point -------------------------------------------------

    def ingest(self, plot: ScanPlot | None, tick: int | None = None) -> list[int]:
        """Advance all tracks one tick and fold in ``plot``.

        Args:
            plot: This tick's sensor return, if any.
            tick: Host tick number.  When omitted the tracker keeps its
                own counter, advancing by one per call.

        Returns:
            Ids of the tracks pruned this tick.
        """
        self._tick = self._tick + 1 if tick is None else tick
        tps = self._settings.ticks_per_second

        for track in self._tracks.values():
            track.update(tps)

        if plot is None:
            self._ticks_since_contact += 1
        else:
            self._ticks_since_contact = 0
            if plot.tick != self._tick:
                plot = ScanPlot(plot.position, plot.velocity, self._tick, plot.snr, plot.classification)
            self._associate(plot)

        return self._prune_stale()

    def _associate(self, plot: ScanPlot) -> None:
        for track in self._tracks.values():
            if track.check_gate(plot.position):
                logger.debug("plot at {} associated with track {}", plot.position, track.track_id)
                track.push_plot(plot)
                track.update(self._settings.ticks_per_second)
                return
        self._spawn(plot)

    def _spawn(self, plot: ScanPlot) -> Track:
        track_id = self._new_id()
        track = Track(
            track_id=track_id,
            position=plot.position,
            velocity=plot.velocity,
            gate=TrackGate(plot.position, self._settings.gate_radius),
            last_contact_tick=self._tick,
            classification=plot.classification or TrackClass.TENTATIVE,
        )
        self._tracks[track_id] = track
        logger.debug("new track {} at {}", track_id, plot.position)
        return track

    def _new_id(self) -> int:
        track_id = self._next_id
        self._next_id += 1
        return track_id

    def _prune_stale(self) -> list[int]:
        window = self._settings.staleness_ticks
        stale = [
            tid for tid, t in self._tracks.items()
            if t.ticks_since_contact(self._tick) >= window
        ]
        for tid in stale:
            del self._tracks[tid]
        if stale:
            logger.debug("pruned stale tracks {}", stale)
        return stale

    # -- queries --------------------------------------------------------------

    def has_contacts(self) -> bool:
        return bool(self._tracks)

    def get(self, track_id: int) -> Track:
        """Return the track for ``track_id`` or raise LookupFailure."""
        try:
            return self._tracks[track_id]
        except KeyError:
            raise LookupFailure(track_id) from None

    def nearest(self, point: Vec2) -> int:
        """Id of the track closest to ``point``.

        Raises LookupFailure when the tracker is empty; callers should
        check ``has_contacts()`` first.
        """
        if not self._tracks:
            raise LookupFailure()
        return min(self._tracks.values(), key=lambda t: t.distance_from(point)).track_id

    def tracks(self) -> list[Track]:
        """Snapshot of all live tracks."""
        return list(self._tracks.values())

    def classify(self, track_id: int, classification: TrackClass) -> None:
        self.get(track_id).classification = classification

    def summary(self) -> str:
        """One-line picture of the track table for log output."""
        if not self._tracks:
            return f"tick {self._tick}: no tracks ({self._ticks_since_contact} ticks since contact)"
        counts: dict[str, int] = {}
        for t in self._tracks.values():
            counts[t.classification.value] = counts.get(t.classification.value, 0) + 1
        parts = [f"{n} {name}" for name, n in sorted(counts.items())]
        return f"tick {self._tick}: {len(self._tracks)} track(s) ({', '.join(parts)})"
