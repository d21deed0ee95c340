"""Guidance subsystem — vector helpers, intercept solver, angular controller."""
from .controller import (
    AGGRESSIVE, CRUISE, SNAP, TurnCommand, TurnPhase, TurnProfile,
    command_turn, convergence_acceleration, fire_permitted, turn_rate_toward,
)
from .intercept import (
    Lead, closing_speed, intercept_time, iterative_intercept_time, iterative_lead,
    linear_lead, linear_lead_in_ticks, quadratic_lead, seconds_to_intercept,
    solve_or_raise, ticks_to_intercept,
)

__all__ = [
    "AGGRESSIVE",
    "CRUISE",
    "Lead",
    "SNAP",
    "TurnCommand",
    "TurnPhase",
    "TurnProfile",
    "closing_speed",
    "command_turn",
    "convergence_acceleration",
    "fire_permitted",
    "intercept_time",
    "iterative_intercept_time",
    "iterative_lead",
    "linear_lead",
    "linear_lead_in_ticks",
    "quadratic_lead",
    "seconds_to_intercept",
    "solve_or_raise",
    "ticks_to_intercept",
    "turn_rate_toward",
]
