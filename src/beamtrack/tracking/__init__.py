"""Tracking subsystem — plots, gates, tracks, and the tracker."""
from .gate import TrackGate
from .track import ScanPlot, Track, TrackClass, derived_acceleration
from .tracker import Tracker

__all__ = [
    "ScanPlot",
    "Track",
    "TrackClass",
    "TrackGate",
    "Tracker",
    "derived_acceleration",
]
