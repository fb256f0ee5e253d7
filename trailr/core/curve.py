# trailr/core/curve.py
from __future__ import annotations
from bisect import bisect_right
from dataclasses import dataclass
from typing import Iterable, List, Optional

from trailr.core.logging import get_logger

log = get_logger(__name__)


def clamp01(v: float) -> float:
    return max(0.0, min(1.0, float(v)))


@dataclass
class ControlPoint:
    x: float  # 0 = first layer, 1 = last layer
    y: float  # 0 = 0% opacity, 1 = 100%

    def copy(self) -> "ControlPoint":
        return ControlPoint(self.x, self.y)


class CurveModel:
    """
    Piecewise-linear opacity curve over [0, 1].

    Points are kept sorted by x. The first and last points are anchors pinned
    at x=0 and x=1: their y can change, their x never does, and they cannot
    be removed. Every mutator leaves the sequence in that shape, so callers
    never have to validate it.
    """

    def __init__(self, points: Optional[Iterable[ControlPoint]] = None) -> None:
        self._points: List[ControlPoint] = [ControlPoint(0.0, 1.0), ControlPoint(1.0, 0.0)]
        if points is not None:
            self.load_preset(points)

    # Read access
    @property
    def points(self) -> List[ControlPoint]:
        """Copies of the current points, in order."""
        return [p.copy() for p in self._points]

    def __len__(self) -> int:
        return len(self._points)

    def __getitem__(self, index: int) -> ControlPoint:
        return self._points[index].copy()

    @property
    def last_index(self) -> int:
        return len(self._points) - 1

    def is_anchor(self, index: int) -> bool:
        return index == 0 or index == self.last_index

    # Mutations
    def load_preset(self, points: Optional[Iterable[ControlPoint]]) -> bool:
        """Replace every point with a copy of ``points``. Unknown/empty templates are ignored."""
        if not points:
            log.debug("load_preset ignored: no template")
            return False
        fresh = [ControlPoint(float(p.x), float(p.y)) for p in points]
        if len(fresh) < 2:
            log.debug("load_preset ignored: template has %d point(s)", len(fresh))
            return False
        self._points = fresh
        return True

    def insert(self, point: ControlPoint) -> int:
        """
        Add a point and return its index after sorting by x.

        Same result as append-then-stable-sort: a point tied on x lands after
        the existing ones, so a point at x=1 becomes the new last anchor.
        """
        p = ControlPoint(clamp01(point.x), clamp01(point.y))
        xs = [q.x for q in self._points]
        index = bisect_right(xs, p.x)
        self._points.insert(index, p)
        return index

    def remove_at(self, index: int) -> bool:
        if index <= 0 or index >= self.last_index:
            return False
        del self._points[index]
        return True

    def move_to(self, index: int, new_x: float, new_y: float) -> bool:
        if index < 0 or index > self.last_index:
            return False
        y = clamp01(new_y)
        if self.is_anchor(index):
            self._points[index] = ControlPoint(self._points[index].x, y)
            return True
        min_x = self._points[index - 1].x
        max_x = self._points[index + 1].x
        x = max(min_x, min(max_x, float(new_x)))
        self._points[index] = ControlPoint(x, y)
        return True

    def invert(self) -> None:
        """Mirror the curve horizontally (x -> 1 - x)."""
        mirrored = [ControlPoint(1.0 - p.x, p.y) for p in reversed(self._points)]
        mirrored.sort(key=lambda p: p.x)
        # 1 - 1.0 and 1 - 0.0 are exact, but pin anyway so drift never leaks in
        mirrored[0].x = 0.0
        mirrored[-1].x = 1.0
        self._points = mirrored

    # Query
    def sample(self, x: float) -> float:
        """Evaluate the curve at ``x``; flat beyond either end."""
        pts = self._points
        i = 0
        while i < len(pts) and pts[i].x < x:
            i += 1

        if i == 0:
            return pts[0].y
        if i >= len(pts):
            return pts[-1].y

        p1 = pts[i - 1]
        p2 = pts[i]
        span = p2.x - p1.x
        if span == 0:
            return p1.y
        t = (x - p1.x) / span
        return p1.y + t * (p2.y - p1.y)

    def __repr__(self) -> str:
        inner = ", ".join(f"({p.x:.3f}, {p.y:.3f})" for p in self._points)
        return f"CurveModel([{inner}])"
