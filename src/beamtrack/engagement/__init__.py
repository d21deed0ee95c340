"""Engagement subsystem — operating mode FSM, designation, sensor sweeps."""
from .designation import Designation
from .state_machine import State, StateMachine, Transition
from .states import (
    Engagement, EngagementState, SensorSweep, create_engagement_fsm,
    focused_sweep, rotating_sweep,
)

__all__ = [
    "Designation",
    "Engagement",
    "EngagementState",
    "SensorSweep",
    "State",
    "StateMachine",
    "Transition",
    "create_engagement_fsm",
    "focused_sweep",
    "rotating_sweep",
]
