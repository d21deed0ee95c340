"""Unit tests for Track — coast law, differencing smoother, merge policy."""

from __future__ import annotations

import math

import pytest

from beamtrack.tracking.gate import TrackGate
from beamtrack.tracking.track import (
    ScanPlot, Track, TrackClass, derived_acceleration,
)


pytestmark = pytest.mark.unit

TPS = 60.0

VELOCITIES = [
    (0.0, 0.0),
    (100.0, 0.0),
    (-37.5, 12.25),
    (1234.5, -987.6),
    (0.001, 5e4),
]


def _make_track(position=(10.0, 20.0), velocity=(0.0, 0.0), track_id: int = 0) -> Track:
    return Track(
        track_id=track_id,
        position=position,
        velocity=velocity,
        gate=TrackGate(position, 50.0),
        last_contact_tick=0,
    )


# --------------------------------------------------------------------------
# Coast
# --------------------------------------------------------------------------

class TestCoast:
    @pytest.mark.parametrize("velocity", VELOCITIES)
    def test_coast_law(self, velocity):
        t = _make_track(velocity=velocity)
        old_x, old_y = t.position
        t.update(TPS)
        assert t.position == (old_x + velocity[0] / 60.0, old_y + velocity[1] / 60.0)
        assert t.velocity == velocity

    @pytest.mark.parametrize("velocity", VELOCITIES)
    def test_gate_recentered_on_coast(self, velocity):
        t = _make_track(velocity=velocity)
        t.update(TPS)
        assert t.gate.center == t.position

    def test_coast_respects_tick_rate(self):
        t = _make_track(position=(0.0, 0.0), velocity=(120.0, 0.0))
        t.update(120.0)
        assert t.position == (1.0, 0.0)


# --------------------------------------------------------------------------
# Differencing smoother
# --------------------------------------------------------------------------

class TestDifferencingFilter:
    @pytest.mark.parametrize("current", VELOCITIES)
    @pytest.mark.parametrize("measured", VELOCITIES)
    def test_derived_acceleration(self, current, measured):
        ax, ay = derived_acceleration(current, measured, TPS)
        assert ax == (current[0] / 60.0 - measured[0] / 60.0) / 2.0
        assert ay == (current[1] / 60.0 - measured[1] / 60.0) / 2.0

    @pytest.mark.parametrize("current", VELOCITIES)
    @pytest.mark.parametrize("measured", VELOCITIES)
    def test_single_plot_update(self, current, measured):
        t = _make_track(velocity=current)
        old = t.position
        t.push_plot(ScanPlot(position=(0.0, 0.0), velocity=measured, tick=1))
        t.update(TPS)

        ax, ay = derived_acceleration(current, measured, TPS)
        assert t.velocity[0] == pytest.approx((current[0] / 60.0 + ax) * 60.0)
        assert t.velocity[1] == pytest.approx((current[1] / 60.0 + ay) * 60.0)
        assert t.position[0] == pytest.approx(old[0] + ax)
        assert t.position[1] == pytest.approx(old[1] + ay)
        assert t.gate.center == t.position
        assert not t.plots

    def test_matching_velocity_is_steady(self):
        t = _make_track(velocity=(50.0, -20.0))
        t.push_plot(ScanPlot(position=(0.0, 0.0), velocity=(50.0, -20.0), tick=1))
        t.update(TPS)
        assert t.velocity == pytest.approx((50.0, -20.0))
        assert t.position == (10.0, 20.0)


class TestMultiplePlots:
    def test_plots_are_averaged(self):
        t = _make_track(velocity=(0.0, 0.0))
        t.push_plot(ScanPlot((0.0, 0.0), (100.0, 0.0), tick=1))
        t.push_plot(ScanPlot((2.0, 0.0), (300.0, 0.0), tick=1))
        t.update(TPS)
        # merged measurement (200, 0): accel = (0 - 200/60) / 2
        assert t.velocity[0] == pytest.approx(-100.0)
        assert t.velocity[1] == pytest.approx(0.0)
        assert t.position[0] == pytest.approx(10.0 - 200.0 / 120.0)
        assert not t.plots


# --------------------------------------------------------------------------
# Bookkeeping
# --------------------------------------------------------------------------

class TestTrackBookkeeping:
    def test_heading_from_velocity(self):
        t = _make_track(velocity=(0.0, 10.0))
        assert t.heading == pytest.approx(math.pi / 2.0)

    def test_speed(self):
        assert _make_track(velocity=(3.0, 4.0)).speed == 5.0

    def test_push_plot_refreshes_contact(self):
        t = _make_track()
        t.push_plot(ScanPlot((0.0, 0.0), (0.0, 0.0), tick=12))
        assert t.last_contact_tick == 12
        assert t.ticks_since_contact(20) == 8
        assert t.hits == 2

    def test_tentative_promoted_to_foe(self):
        t = _make_track()
        assert t.classification is TrackClass.TENTATIVE
        t.push_plot(ScanPlot((0.0, 0.0), (0.0, 0.0), tick=1))
        assert t.classification is TrackClass.FOE

    def test_plot_hint_overrides(self):
        t = _make_track()
        t.push_plot(ScanPlot((0.0, 0.0), (0.0, 0.0), tick=1, classification=TrackClass.MUNITION))
        assert t.classification is TrackClass.MUNITION

    def test_distance_from(self):
        t = _make_track(position=(3.0, 4.0))
        assert t.distance_from((0.0, 0.0)) == 5.0

    def test_to_dict(self):
        d = _make_track(track_id=7).to_dict()
        assert d["track_id"] == 7
        assert d["position"] == {"x": 10.0, "y": 20.0}
        assert d["classification"] == "tentative"
        assert d["gate_radius"] == 50.0
