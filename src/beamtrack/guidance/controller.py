"""Angular convergence controller — heading error to rotation commands.

For a unit-inertia rotor the command

    accel = k * e - 2 * sqrt(k) * w

is critically damped: the heading converges on the mark without
overshoot.  A larger ``k`` converges faster but saturates the actuator
sooner, so callers turn coarsely with a low gain and switch to a high gain
once the error is small.  Right before firing, some profiles swap the
acceleration command for a direct turn-rate command to kill residual
jitter.

The phase is derived from ``|e|`` alone each tick:

    COARSE_TURN   |e| > fine_tolerance
    FINE_HOLD     fire_tolerance < |e| <= fine_tolerance
    FIRE_ELIGIBLE |e| <= fire_tolerance
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass

from .vector import wrap_angle

TORQUE = "torque"
TURN_RATE = "turn_rate"


class TurnPhase(enum.Enum):
    COARSE_TURN = "coarse_turn"
    FINE_HOLD = "fine_hold"
    FIRE_ELIGIBLE = "fire_eligible"


@dataclass(frozen=True)
class TurnProfile:
    """Gain schedule for one kind of turn."""

    coarse_gain: float
    fine_gain: float
    fine_tolerance: float = 0.1
    fire_tolerance: float | None = None     # defaults to fine_tolerance
    rate_gain: float | None = None          # direct rate command once fire-eligible

    @property
    def effective_fire_tolerance(self) -> float:
        if self.fire_tolerance is None:
            return self.fine_tolerance
        return self.fire_tolerance


# Long-range lead pursuit
CRUISE = TurnProfile(coarse_gain=50.0, fine_gain=1_000.0, fine_tolerance=0.1)
# Inside gun range: soft gains so the nose does not saturate against a jinking target
AGGRESSIVE = TurnProfile(coarse_gain=4.0, fine_gain=10.0, fine_tolerance=0.1)
# Point the nose and pin it there
SNAP = TurnProfile(coarse_gain=69.0, fine_gain=69.0, fine_tolerance=0.01, rate_gain=50_000.0)


@dataclass(frozen=True)
class TurnCommand:
    phase: TurnPhase
    kind: str           # TORQUE or TURN_RATE
    value: float
    error: float

    @property
    def fire_eligible(self) -> bool:
        return self.phase is TurnPhase.FIRE_ELIGIBLE


def convergence_acceleration(error: float, angular_velocity: float, gain: float) -> float:
    """Critically damped angular acceleration toward ``error``."""
    e = wrap_angle(error)
    return gain * e - 2.0 * math.sqrt(gain) * angular_velocity


def turn_phase(error: float, profile: TurnProfile) -> TurnPhase:
    magnitude = abs(wrap_angle(error))
    if magnitude > profile.fine_tolerance:
        return TurnPhase.COARSE_TURN
    if magnitude > profile.effective_fire_tolerance:
        return TurnPhase.FINE_HOLD
    return TurnPhase.FIRE_ELIGIBLE


def command_turn(error: float, angular_velocity: float, profile: TurnProfile) -> TurnCommand:
    """Pick gain and command kind for this tick's heading error."""
    e = wrap_angle(error)
    phase = turn_phase(e, profile)
    if phase is TurnPhase.COARSE_TURN:
        value = convergence_acceleration(e, angular_velocity, profile.coarse_gain)
        return TurnCommand(phase, TORQUE, value, e)
    if phase is TurnPhase.FIRE_ELIGIBLE and profile.rate_gain is not None:
        value = convergence_acceleration(e, angular_velocity, profile.rate_gain)
        return TurnCommand(phase, TURN_RATE, value, e)
    value = convergence_acceleration(e, angular_velocity, profile.fine_gain)
    return TurnCommand(phase, TORQUE, value, e)


def fire_permitted(command: TurnCommand, distance: float | None = None,
                   fire_range: float | None = None) -> bool:
    """Trigger gate: converged on the mark and, optionally, inside range."""
    if not command.fire_eligible:
        return False
    if fire_range is not None and distance is not None:
        return distance < fire_range
    return True


def turn_rate_toward(error: float, gain: float) -> float:
    """Proportional turn-rate command, used by munitions."""
    return gain * wrap_angle(error)
