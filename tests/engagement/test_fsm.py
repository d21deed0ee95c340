"""Unit tests for the tick-driven StateMachine."""

from __future__ import annotations

import pytest

from beamtrack.engagement.state_machine import State, StateMachine, Transition


pytestmark = pytest.mark.unit


class _Recording(State):
    def __init__(self, name: str, min_ticks: int = 0, next_state: str | None = None) -> None:
        super().__init__(name, min_ticks)
        self.next_state = next_state
        self.entered = 0
        self.exited = 0
        self.ticked = 0

    def on_enter(self, ctx: dict) -> None:
        self.entered += 1

    def on_exit(self, ctx: dict) -> None:
        self.exited += 1

    def tick(self, ctx: dict) -> str | None:
        self.ticked += 1
        return self.next_state


def _two_state() -> tuple[StateMachine, _Recording, _Recording]:
    a, b = _Recording("a"), _Recording("b")
    sm = StateMachine("a")
    sm.add_state(a)
    sm.add_state(b)
    return sm, a, b


class TestTransition:
    def test_condition_only(self):
        tr = Transition("a", "b", lambda ctx: ctx["go"])
        assert tr.passes({"go": True})
        assert not tr.passes({"go": False})

    def test_guard_blocks(self):
        tr = Transition("a", "b", lambda ctx: True, guard=lambda ctx: ctx["armed"])
        assert not tr.passes({"armed": False})
        assert tr.passes({"armed": True})


class TestStateMachine:
    def test_initial_state_entered_on_first_tick(self):
        sm, a, _ = _two_state()
        assert a.entered == 0
        sm.tick()
        assert a.entered == 1
        assert sm.current_state == "a"

    def test_declared_transition(self):
        sm, a, b = _two_state()
        sm.add_transition("a", "b", lambda ctx: ctx.get("go", False))
        assert sm.tick({"go": False}) == "a"
        assert sm.tick({"go": True}) == "b"
        assert a.exited == 1
        assert b.entered == 1
        assert sm.ticks_in_state == 0

    def test_first_matching_transition_wins(self):
        sm, _, _ = _two_state()
        sm.add_state(State("c"))
        sm.add_transition("a", "c", lambda ctx: True)
        sm.add_transition("a", "b", lambda ctx: True)
        assert sm.tick() == "c"

    def test_state_tick_used_when_no_transition(self):
        sm = StateMachine("a")
        a = _Recording("a", next_state="b")
        sm.add_state(a)
        sm.add_state(_Recording("b"))
        assert sm.tick() == "b"
        assert a.ticked == 1

    def test_declared_transition_preempts_state_tick(self):
        sm = StateMachine("a")
        a = _Recording("a", next_state="b")
        sm.add_state(a)
        sm.add_state(_Recording("b"))
        sm.add_state(State("c"))
        sm.add_transition("a", "c", lambda ctx: True)
        assert sm.tick() == "c"
        assert a.ticked == 0

    def test_min_ticks_holds_state(self):
        sm = StateMachine("a")
        sm.add_state(State("a", min_ticks=2))
        sm.add_state(State("b"))
        sm.add_transition("a", "b", lambda ctx: True)
        assert sm.tick() == "a"
        assert sm.tick() == "a"
        assert sm.tick() == "b"

    def test_history(self):
        sm, _, _ = _two_state()
        sm.add_transition("a", "b", lambda ctx: True)
        sm.add_transition("b", "a", lambda ctx: True)
        sm.tick()
        sm.tick()
        assert list(sm.history) == [("a", "b"), ("b", "a")]

    def test_ticks_in_state_counts(self):
        sm, _, _ = _two_state()
        for _ in range(3):
            sm.tick()
        assert sm.ticks_in_state == 3

    def test_unknown_initial_state(self):
        sm = StateMachine("missing")
        with pytest.raises(KeyError):
            sm.tick()

    def test_transition_to_unknown(self):
        sm, _, _ = _two_state()
        with pytest.raises(KeyError):
            sm.transition_to("nowhere")

    def test_state_names(self):
        sm, _, _ = _two_state()
        assert sm.state_names == ["a", "b"]
