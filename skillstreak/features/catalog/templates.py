"""
Reference letter paths.

Each letter is a list of strokes drawn in a 100x100 box (y grows downward),
resampled every STEP units so templates have a roughly even point density.
"""

from __future__ import annotations

import math
from typing import Dict, List, Sequence, Tuple

from skillstreak.models.scoring import Point

STEP = 5.0

Vertex = Tuple[float, float]


def _arc(cx: float, cy: float, r: float, start_deg: float, end_deg: float, segments: int = 16) -> List[Vertex]:
    span = end_deg - start_deg
    return [
        (cx + r * math.cos(math.radians(start_deg + span * i / segments)),
         cy + r * math.sin(math.radians(start_deg + span * i / segments)))
        for i in range(segments + 1)
    ]


LETTER_STROKES: Dict[str, List[List[Vertex]]] = {
    "A": [[(0, 100), (50, 0), (100, 100)], [(25, 50), (75, 50)]],
    "B": [
        [(0, 0), (0, 100)],
        [(0, 0), (55, 0)] + _arc(55, 25, 25, -90, 90, 8) + [(0, 50)],
        [(0, 50), (60, 50)] + _arc(60, 75, 25, -90, 90, 8) + [(0, 100)],
    ],
    "C": [_arc(50, 50, 50, -45, -315)],
    "I": [[(50, 0), (50, 100)]],
    "L": [[(0, 0), (0, 100), (70, 100)]],
    "M": [[(0, 100), (0, 0), (50, 60), (100, 0), (100, 100)]],
    "O": [_arc(50, 50, 50, 0, 360, 24)],
    "Q": [_arc(50, 50, 50, 0, 360, 24), [(60, 70), (100, 100)]],
    "T": [[(0, 0), (100, 0)], [(50, 0), (50, 100)]],
    "W": [[(0, 0), (25, 100), (50, 40), (75, 100), (100, 0)]],
}


def _resample(stroke: Sequence[Vertex], step: float) -> List[Point]:
    points: List[Point] = [Point(x=float(stroke[0][0]), y=float(stroke[0][1]))]
    for (x0, y0), (x1, y1) in zip(stroke, stroke[1:]):
        length = math.hypot(x1 - x0, y1 - y0)
        pieces = max(1, int(math.ceil(length / step)))
        for i in range(1, pieces + 1):
            t = i / pieces
            points.append(Point(x=round(x0 + (x1 - x0) * t, 3), y=round(y0 + (y1 - y0) * t, 3)))
    return points


def build_template(strokes: Sequence[Sequence[Vertex]], step: float = STEP) -> Tuple[Point, ...]:
    """Flatten strokes into one ordered template path."""
    path: List[Point] = []
    for stroke in strokes:
        path.extend(_resample(stroke, step))
    return tuple(path)


def default_letter_templates() -> Dict[str, Tuple[Point, ...]]:
    return {letter: build_template(strokes) for letter, strokes in LETTER_STROKES.items()}
