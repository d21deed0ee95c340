"""Error taxonomy for the tracking and guidance core.

None of these are fatal.  Every failure degrades to "no target this tick"
and the agent resumes its search behavior on the next tick.
"""

from __future__ import annotations


class BeamtrackError(Exception):
    """Base class for all tracking and guidance errors."""


class LookupFailure(BeamtrackError, LookupError):
    """A query named a track id the tracker does not hold (or it is empty)."""

    def __init__(self, track_id: int | None = None, message: str | None = None) -> None:
        self.track_id = track_id
        if message is None:
            message = (
                "tracker holds no tracks" if track_id is None
                else f"unknown track id {track_id}"
            )
        super().__init__(message)


class NoSolution(BeamtrackError):
    """The intercept quadratic has no positive real root."""


class StaleTarget(BeamtrackError):
    """The designated target's backing track was pruned."""

    def __init__(self, track_id: int) -> None:
        self.track_id = track_id
        super().__init__(f"designated track {track_id} no longer exists")
