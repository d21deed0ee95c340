"""Unit tests for the 2D vector and angle helpers."""

from __future__ import annotations

import math

import pytest

from beamtrack.guidance.vector import (
    angle_diff, from_angle, length, normalize, wrap_angle,
)


pytestmark = pytest.mark.unit

IN_RANGE = [0.0, 0.1, 0.2, -0.2, 0.01, 1e-12, 1.0, -2.5, 3.0, math.pi, -math.pi]


class TestWrapAngle:
    @pytest.mark.parametrize("theta", IN_RANGE)
    def test_in_range_is_identity(self, theta):
        assert wrap_angle(theta) == theta

    @pytest.mark.parametrize("theta", [0.2, -1.3, 2.9])
    @pytest.mark.parametrize("turns", [1, 2, -1, -3])
    def test_full_turns_removed(self, theta, turns):
        assert wrap_angle(theta + turns * 2.0 * math.pi) == pytest.approx(theta)

    @pytest.mark.parametrize("theta", [3.5, -3.5, 7.0, -10.0, 100.0])
    def test_result_in_range(self, theta):
        assert -math.pi <= wrap_angle(theta) <= math.pi

    def test_angle_diff_exact_in_range(self):
        assert angle_diff(0.0, 0.2) == 0.2
        assert angle_diff(0.5, 0.5) == 0.0

    def test_angle_diff_shortest_way_round(self):
        assert angle_diff(3.0, -3.0) == pytest.approx(2.0 * math.pi - 6.0)


class TestVectors:
    def test_normalize_zero_stays_zero(self):
        assert normalize((0.0, 0.0)) == (0.0, 0.0)

    def test_normalize(self):
        assert normalize((3.0, 4.0)) == (0.6, 0.8)

    def test_from_angle(self):
        x, y = from_angle(math.pi / 2.0, 2.0)
        assert x == pytest.approx(0.0)
        assert y == 2.0
        assert length(from_angle(1.234, 5.0)) == pytest.approx(5.0)
