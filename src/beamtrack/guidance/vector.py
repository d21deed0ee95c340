"""Plain 2D vector helpers on ``(x, y)`` tuples.

Arena coordinates are meters; headings are radians measured
counter-clockwise from +x, matching ``math.atan2(y, x)``.
"""

from __future__ import annotations

import math

Vec2 = tuple[float, float]

ZERO: Vec2 = (0.0, 0.0)


def add(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] + b[0], a[1] + b[1])


def sub(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] - b[0], a[1] - b[1])


def scale(a: Vec2, k: float) -> Vec2:
    return (a[0] * k, a[1] * k)


def dot(a: Vec2, b: Vec2) -> float:
    return a[0] * b[0] + a[1] * b[1]


def length(a: Vec2) -> float:
    return math.hypot(a[0], a[1])


def distance(a: Vec2, b: Vec2) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def angle(a: Vec2) -> float:
    """Direction of ``a`` in radians."""
    return math.atan2(a[1], a[0])


def normalize(a: Vec2) -> Vec2:
    """Unit vector along ``a``; the zero vector stays zero."""
    n = length(a)
    if n == 0.0:
        return ZERO
    return (a[0] / n, a[1] / n)


def from_angle(theta: float, magnitude: float = 1.0) -> Vec2:
    return (math.cos(theta) * magnitude, math.sin(theta) * magnitude)


def angle_diff(current: float, target: float) -> float:
    """Signed shortest rotation from ``current`` to ``target``, in [-pi, pi]."""
    return wrap_angle(target - current)


def wrap_angle(theta: float) -> float:
    """Wrap an angle into [-pi, pi].  In-range angles come back unchanged."""
    if -math.pi <= theta <= math.pi:
        return theta
    wrapped = math.fmod(theta + math.pi, 2.0 * math.pi)
    if wrapped < 0.0:
        wrapped += 2.0 * math.pi
    return wrapped - math.pi
