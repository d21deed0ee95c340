"""Intercept prediction — lead points for fixed-speed projectiles.

All inputs are *relative*: ``p`` is the target position minus the shooter's
aim origin and ``v`` is the target velocity minus the shooter velocity.
The projectile leaves the origin at scalar speed ``s``.  We want the time
T at which the projectile can reach the target:

    |p + v * T| = s * T

Squaring both sides yields a quadratic in T:

    (v.v - s^2) * T^2 + 2 * (p.v) * T + p.p = 0

The smallest positive root gives the first-hit intercept; the aim point is
``p + v * T``.  When the quadratic has no positive real root the solver
returns ``None`` and callers fall back to a first-order linear lead in
tick units, ``p + v_tick * |p| / ceil(s / tps)``, rather than aiming at the
target's current position.

The fixed-point iteration ``T <- |p + T*v| / s`` is kept as a cross-check
of the closed form away from degenerate geometry.
"""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass

from loguru import logger

from ..errors import NoSolution
from .vector import Vec2, add, dot, length, scale

EPSILON = sys.float_info.epsilon

QUADRATIC = "quadratic"
LINEAR_TICKS = "linear_ticks"
ITERATIVE = "iterative"


@dataclass(frozen=True)
class Lead:
    """An aim point plus how it was obtained."""

    point: Vec2
    time: float | None   # seconds to impact, None for the linear fallback
    method: str

    @property
    def solved(self) -> bool:
        return self.method != LINEAR_TICKS


def smallest_positive_root(a: float, b: float, c: float) -> float | None:
    """Smallest positive real root of ``a*t^2 + b*t + c``, or None."""
    if a == 0.0:
        # Target speed equals projectile speed: b*t + c = 0
        if b == 0.0:
            return None
        t = -c / b
        return t if t > 0.0 else None

    discriminant = b * b - 4.0 * a * c
    if discriminant < 0.0:
        return None

    s = math.sqrt(discriminant)
    t1 = (-b - s) / (2.0 * a)
    t2 = (-b + s) / (2.0 * a)
    if t1 > 0.0 and t2 > 0.0:
        return min(t1, t2)
    if t1 > 0.0:
        return t1
    if t2 > 0.0:
        return t2
    return None


def intercept_time(p: Vec2, v: Vec2, speed: float) -> float | None:
    """Closed-form first-hit time in seconds, or None when uncatchable."""
    a = dot(v, v) - speed * speed
    b = 2.0 * dot(p, v)
    c = dot(p, p)
    return smallest_positive_root(a, b, c)


def solve_or_raise(p: Vec2, v: Vec2, speed: float) -> float:
    """Like :func:`intercept_time` but raises :class:`NoSolution`."""
    t = intercept_time(p, v, speed)
    if t is None:
        raise NoSolution(f"no positive intercept time for p={p} v={v} s={speed}")
    return t


def linear_lead(p: Vec2, v: Vec2, speed: float) -> Vec2:
    """First-order lead in seconds: ``p + v * |p| / s``."""
    return add(p, scale(v, length(p) / speed))


def linear_lead_in_ticks(p: Vec2, v: Vec2, speed: float, ticks_per_second: float) -> Vec2:
    """First-order lead evaluated in tick units.

    ``v`` is scaled to meters per tick and the projectile's per-tick travel
    is rounded up, since the controlling loop only re-aims once per tick.
    """
    v_tick = scale(v, 1.0 / ticks_per_second)
    s_tick = math.ceil(speed / ticks_per_second)
    return add(p, scale(v_tick, length(p) / s_tick))


def quadratic_lead(p: Vec2, v: Vec2, speed: float, ticks_per_second: float) -> Lead:
    """Aim point from the closed form, falling back to the tick-unit linear lead."""
    t = intercept_time(p, v, speed)
    if t is None:
        logger.debug("no intercept solution for p={} v={}, using linear lead", p, v)
        return Lead(linear_lead_in_ticks(p, v, speed, ticks_per_second), None, LINEAR_TICKS)
    return Lead(add(p, scale(v, t)), t, QUADRATIC)


def iterative_intercept_time(p: Vec2, v: Vec2, speed: float, max_iterations: int = 10) -> float:
    """Fixed-point estimate of the intercept time, seeded at zero."""
    t = 0.0
    for _ in range(max_iterations):
        previous = t
        t = length(add(p, scale(v, t))) / speed
        if abs(t - previous) < EPSILON:
            break
    return t


def iterative_lead(p: Vec2, v: Vec2, speed: float, max_iterations: int = 10) -> Lead:
    t = iterative_intercept_time(p, v, speed, max_iterations)
    return Lead(add(p, scale(v, t)), t, ITERATIVE)


def closing_speed(p: Vec2, v: Vec2) -> float:
    """Rate at which range is shrinking, m/s (positive when closing)."""
    r = length(p)
    if r == 0.0:
        return 0.0
    return -dot(v, p) / r


def seconds_to_intercept(p: Vec2, own_speed: float) -> float:
    """Naive time to cover the current range at the shooter's own speed."""
    if own_speed <= 0.0:
        return math.inf
    return length(p) / own_speed


def ticks_to_intercept(p: Vec2, v: Vec2, ticks_per_second: float) -> float:
    """Range divided by relative speed per tick."""
    rel_tick = length(v) / ticks_per_second
    if rel_tick == 0.0:
        return math.inf
    return length(p) / rel_tick
