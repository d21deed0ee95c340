"""Tick-driven finite state machine.

States are small objects with ``on_enter``/``on_exit`` hooks and a
``tick()`` that may return the name of the next state.  Transitions can
also be declared on the machine itself as (source, destination, condition,
guard) tuples evaluated against a context dict every tick.

Time is counted in ticks, not seconds: the host scheduler runs the loop
at a fixed rate and the machine never reads a clock.

Evaluation order per tick:
  1. declared transitions from the current state, in insertion order;
     the first whose condition and guard both pass wins
  2. otherwise the current state's own ``tick()`` result
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any, Callable

from loguru import logger

Condition = Callable[[dict], bool]


class State:
    """Base state.  Override ``tick`` to drive self-transitions."""

    def __init__(self, name: str, min_ticks: int = 0) -> None:
        self.name = name
        self.min_ticks = min_ticks

    def on_enter(self, ctx: dict) -> None:
        pass

    def on_exit(self, ctx: dict) -> None:
        pass

    def tick(self, ctx: dict) -> str | None:
        return None

    def __repr__(self) -> str:
        return f"<State {self.name}>"


@dataclass
class Transition:
    source: str
    destination: str
    condition: Condition
    guard: Condition | None = None

    def passes(self, ctx: dict) -> bool:
        if not self.condition(ctx):
            return False
        return self.guard is None or self.guard(ctx)


class StateMachine:
    """Named-state FSM advanced once per tick."""

    HISTORY_LEN = 32

    def __init__(self, initial: str) -> None:
        self._states: dict[str, State] = {}
        self._transitions: list[Transition] = []
        self._current = initial
        self._ticks_in_state = 0
        self._entered = False
        self.history: deque[tuple[str, str]] = deque(maxlen=self.HISTORY_LEN)

    @property
    def current_state(self) -> str:
        return self._current

    @property
    def ticks_in_state(self) -> int:
        return self._ticks_in_state

    @property
    def state_names(self) -> list[str]:
        return list(self._states)

    def add_state(self, state: State) -> None:
        self._states[state.name] = state

    def add_transition(self, source: str, destination: str, condition: Condition,
                       guard: Condition | None = None) -> None:
        self._transitions.append(Transition(source, destination, condition, guard))

    def tick(self, ctx: dict[str, Any] | None = None) -> str:
        """Evaluate one tick and return the (possibly new) current state."""
        ctx = ctx if ctx is not None else {}
        state = self._states.get(self._current)
        if state is None:
            raise KeyError(f"unknown state {self._current!r}")
        if not self._entered:
            state.on_enter(ctx)
            self._entered = True

        self._ticks_in_state += 1
        if self._ticks_in_state <= state.min_ticks:
            return self._current

        target = None
        for tr in self._transitions:
            if tr.source == self._current and tr.passes(ctx):
                target = tr.destination
                break
        if target is None:
            target = state.tick(ctx)
        if target is not None and target != self._current:
            self.transition_to(target, ctx)
        return self._current

    def transition_to(self, name: str, ctx: dict | None = None) -> None:
        """Force a transition, running exit/enter hooks."""
        if name not in self._states:
            raise KeyError(f"unknown state {name!r}")
        ctx = ctx if ctx is not None else {}
        previous = self._current
        if self._entered:
            self._states[previous].on_exit(ctx)
        self._current = name
        self._ticks_in_state = 0
        self._states[name].on_enter(ctx)
        self._entered = True
        self.history.append((previous, name))
        logger.debug("fsm {} -> {}", previous, name)
