"""TrackGate — square association window around a track's resolved position."""

from __future__ import annotations

from dataclasses import dataclass

from ..guidance.vector import Vec2


@dataclass
class TrackGate:
    """Axis-aligned square of side ``radius`` centered on ``center``.

    Membership is strictly interior: a point lying exactly on any edge is
    outside the gate.
    """

    center: Vec2
    radius: float

    def point_in_gate(self, point: Vec2) -> bool:
        half = self.radius / 2.0
        x, y = point
        cx, cy = self.center
        if x >= cx + half or x <= cx - half:
            return False
        if y >= cy + half or y <= cy - half:
            return False
        return True

    def update_center(self, center: Vec2) -> None:
        self.center = center

    def update_radius(self, radius: float) -> None:
        if radius <= 0.0:
            raise ValueError(f"gate radius must be positive, got {radius}")
        self.radius = radius
