"""Designation — the one target this agent is prosecuting, with hysteresis.

Once a track is designated it is held for ``sticky_ticks`` ticks before
``Tracker.nearest()`` may replace it.  Without the hold the agent would
thrash between two near-equidistant tracks every tick.

The designation stores only the track id.  If that track is pruned the
designation is cleared in the same tick and re-acquired from ``nearest()``
straight away, skipping the hold.
"""

from __future__ import annotations

from loguru import logger

from ..errors import StaleTarget
from ..guidance.vector import Vec2
from ..tracking.track import Track
from ..tracking.tracker import Tracker


class Designation:
    """Optional designated track id plus its hysteresis counter."""

    def __init__(self, sticky_ticks: int = 1) -> None:
        self.sticky_ticks = sticky_ticks
        self.track_id: int | None = None
        self.sticky_remaining: int = 0

    @property
    def is_set(self) -> bool:
        return self.track_id is not None

    def clear(self) -> None:
        self.track_id = None
        self.sticky_remaining = 0

    def designate(self, track_id: int) -> None:
        self.track_id = track_id
        self.sticky_remaining = self.sticky_ticks

    def resolve(self, tracker: Tracker) -> Track | None:
        """Return the designated Track, raising StaleTarget if it was pruned."""
        if self.track_id is None:
            return None
        if self.track_id not in tracker:
            raise StaleTarget(self.track_id)
        return tracker.get(self.track_id)

    def release_pruned(self, pruned: list[int]) -> bool:
        """Clear the designation if its track is in ``pruned``."""
        if self.track_id is not None and self.track_id in pruned:
            logger.warning("designated track {} pruned, releasing", self.track_id)
            self.clear()
            return True
        return False

    def update(self, tracker: Tracker, origin: Vec2) -> bool:
        """Run one tick of designation discipline.

        Returns True when the designated id changed this tick.
        """
        previous = self.track_id
        try:
            self.resolve(tracker)
        except StaleTarget as exc:
            logger.warning("{}; re-acquiring", exc)
            self.clear()

        if not tracker.has_contacts():
            if self.track_id is not None:
                self.clear()
            return previous != self.track_id

        if self.track_id is None:
            self.designate(tracker.nearest(origin))
            logger.info("designated track {}", self.track_id)
        elif self.sticky_remaining > 0:
            self.sticky_remaining -= 1
        else:
            self.designate(tracker.nearest(origin))
            if self.track_id != previous:
                logger.info("re-designated track {} -> {}", previous, self.track_id)
        return previous != self.track_id
