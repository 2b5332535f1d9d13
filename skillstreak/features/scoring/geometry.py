"""Point-set helpers for trace comparison."""

from __future__ import annotations

import math
from typing import Dict, List, Sequence

from skillstreak.models.scoring import Point


def bounding_box(points: Sequence[Point]) -> Dict[str, float]:
    """Axis-aligned bounds of a non-empty point sequence."""
    if not points:
        raise ValueError("bounding_box requires at least one point")
    xs = [p.x for p in points]
    ys = [p.y for p in points]
    return {"min_x": min(xs), "max_x": max(xs), "min_y": min(ys), "max_y": max(ys)}


def normalize(points: Sequence[Point]) -> List[Point]:
    """
    Rescale points so their bounding box maps onto the unit square.

    A zero-extent axis keeps a denominator of 1, so a horizontal stroke
    normalizes to y == 0 rather than dividing by zero.
    """
    if not points:
        return []
    box = bounding_box(points)
    width = (box["max_x"] - box["min_x"]) or 1.0
    height = (box["max_y"] - box["min_y"]) or 1.0
    return [
        Point(x=(p.x - box["min_x"]) / width, y=(p.y - box["min_y"]) / height, timestamp=p.timestamp)
        for p in points
    ]


def distance(a: Point, b: Point) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def nearest_distance(point: Point, points: Sequence[Point]) -> float:
    """Smallest Euclidean distance from point to any member of points (inf if empty)."""
    best = math.inf
    for other in points:
        d = distance(point, other)
        if d < best:
            best = d
    return best
