"""Unit tests for the angular convergence controller."""

from __future__ import annotations

import math

import pytest

from beamtrack.guidance.controller import (
    AGGRESSIVE, CRUISE, SNAP, TORQUE, TURN_RATE,
    TurnCommand, TurnPhase, TurnProfile,
    command_turn, convergence_acceleration, fire_permitted,
    turn_phase, turn_rate_toward,
)


pytestmark = pytest.mark.unit

GAINS = [1.0, 4.0, 10.0, 50.0, 69.0, 1000.0, 50_000.0]


class TestConvergenceAcceleration:
    def test_pure_error_term(self):
        assert convergence_acceleration(0.2, 0.0, 50.0) == 10.0

    @pytest.mark.parametrize("gain", GAINS)
    def test_zero_error_zero_rate(self, gain):
        assert convergence_acceleration(0.0, 0.0, gain) == 0.0

    def test_damping_term(self):
        # k = 4: 4 * 0 - 2 * 2 * 1.5
        assert convergence_acceleration(0.0, 1.5, 4.0) == pytest.approx(-6.0)

    def test_error_is_wrapped(self):
        wrapped = convergence_acceleration(0.2 + 2.0 * math.pi, 0.0, 50.0)
        assert wrapped == pytest.approx(10.0)

    def test_sign_follows_error(self):
        assert convergence_acceleration(-0.3, 0.0, 10.0) == pytest.approx(-3.0)


class TestTurnPhase:
    def test_coarse_above_fine_tolerance(self):
        assert turn_phase(0.5, CRUISE) is TurnPhase.COARSE_TURN
        assert turn_phase(-0.5, CRUISE) is TurnPhase.COARSE_TURN

    def test_fire_eligible_defaults_to_fine_tolerance(self):
        assert turn_phase(0.05, CRUISE) is TurnPhase.FIRE_ELIGIBLE

    def test_fine_hold_band(self):
        profile = TurnProfile(coarse_gain=50.0, fine_gain=1000.0,
                              fine_tolerance=0.1, fire_tolerance=0.02)
        assert turn_phase(0.05, profile) is TurnPhase.FINE_HOLD
        assert turn_phase(0.01, profile) is TurnPhase.FIRE_ELIGIBLE

    def test_tolerance_boundary_is_inclusive(self):
        assert turn_phase(0.1, CRUISE) is TurnPhase.FIRE_ELIGIBLE
        assert turn_phase(-0.1, CRUISE) is TurnPhase.FIRE_ELIGIBLE

    def test_fire_boundary_is_inclusive(self):
        profile = TurnProfile(coarse_gain=50.0, fine_gain=1000.0,
                              fine_tolerance=0.1, fire_tolerance=0.02)
        assert turn_phase(0.02, profile) is TurnPhase.FIRE_ELIGIBLE
        assert turn_phase(0.1, profile) is TurnPhase.FINE_HOLD

    def test_snap_boundary(self):
        assert turn_phase(0.01, SNAP) is TurnPhase.FIRE_ELIGIBLE
        assert command_turn(0.01, 0.0, SNAP).kind == TURN_RATE

    def test_effective_fire_tolerance(self):
        assert CRUISE.effective_fire_tolerance == 0.1
        assert TurnProfile(1.0, 1.0, 0.1, 0.02).effective_fire_tolerance == 0.02


class TestCommandTurn:
    def test_coarse_uses_coarse_gain(self):
        cmd = command_turn(0.5, 0.2, CRUISE)
        assert cmd.phase is TurnPhase.COARSE_TURN
        assert cmd.kind == TORQUE
        assert cmd.value == pytest.approx(50.0 * 0.5 - 2.0 * math.sqrt(50.0) * 0.2)
        assert not cmd.fire_eligible

    def test_fine_uses_fine_gain(self):
        cmd = command_turn(0.05, 0.0, CRUISE)
        assert cmd.kind == TORQUE
        assert cmd.value == pytest.approx(1000.0 * 0.05)
        assert cmd.fire_eligible

    def test_aggressive_profile_gains(self):
        assert command_turn(1.0, 0.0, AGGRESSIVE).value == pytest.approx(4.0)
        assert command_turn(0.05, 0.0, AGGRESSIVE).value == pytest.approx(0.5)

    def test_snap_switches_to_rate_command(self):
        cmd = command_turn(0.005, 0.0, SNAP)
        assert cmd.phase is TurnPhase.FIRE_ELIGIBLE
        assert cmd.kind == TURN_RATE
        assert cmd.value == pytest.approx(50_000.0 * 0.005)

    def test_snap_coarse_is_torque(self):
        cmd = command_turn(0.5, 0.0, SNAP)
        assert cmd.kind == TORQUE
        assert cmd.value == pytest.approx(69.0 * 0.5)

    def test_error_reported_wrapped(self):
        cmd = command_turn(2.0 * math.pi + 0.05, 0.0, CRUISE)
        assert cmd.error == pytest.approx(0.05)


class TestFirePermitted:
    def _eligible(self) -> TurnCommand:
        return TurnCommand(TurnPhase.FIRE_ELIGIBLE, TORQUE, 0.0, 0.0)

    def test_eligible_without_range(self):
        assert fire_permitted(self._eligible())

    def test_eligible_in_range(self):
        assert fire_permitted(self._eligible(), distance=800.0, fire_range=1000.0)

    def test_eligible_out_of_range(self):
        assert not fire_permitted(self._eligible(), distance=1000.0, fire_range=1000.0)

    @pytest.mark.parametrize("phase", [TurnPhase.COARSE_TURN, TurnPhase.FINE_HOLD])
    def test_not_eligible(self, phase):
        cmd = TurnCommand(phase, TORQUE, 1.0, 0.5)
        assert not fire_permitted(cmd, distance=10.0, fire_range=1000.0)


class TestTurnRate:
    def test_turn_rate_toward(self):
        assert turn_rate_toward(0.3, 10.0) == pytest.approx(3.0)

    def test_turn_rate_wraps(self):
        assert turn_rate_toward(-0.3 + 2.0 * math.pi, 10.0) == pytest.approx(-3.0)
