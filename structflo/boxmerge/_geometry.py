"""Pure bounding-box geometry shared by the kernel and its helpers.

All boxes use inclusive pixel bounds: a box ``(0, 0, 9, 9)`` is 10×10.
"""

from typing import Sequence

import numpy as np


def box_areas(coords: np.ndarray) -> np.ndarray:
    """Return one inclusive-bound area per row of an ``(N, 4)`` array."""
    if len(coords) == 0:
        return np.empty(0, dtype=np.float64)
    x1, y1, x2, y2 = coords[:, 0], coords[:, 1], coords[:, 2], coords[:, 3]
    return (x2 - x1 + 1) * (y2 - y1 + 1)


def intersection_area(a: Sequence[float], b: Sequence[float]) -> float:
    """Overlap area of *a* and *b*; disjoint or degenerate boxes give 0."""
    xx1 = max(a[0], b[0])
    yy1 = max(a[1], b[1])
    xx2 = min(a[2], b[2])
    yy2 = min(a[3], b[3])
    w = max(0.0, xx2 - xx1 + 1)
    h = max(0.0, yy2 - yy1 + 1)
    return w * h


def overlap(a: Sequence[float], b: Sequence[float], area_a: float, area_b: float) -> float:
    """Intersection-over-union of *a* and *b* using precomputed areas.

    The areas are passed in rather than derived from *a* and *b* so callers
    can keep using the areas of the original boxes after coordinates change.
    A non-positive union (two zero-area boxes) counts as no overlap.
    """
    inter = intersection_area(a, b)
    union = area_a + area_b - inter
    if union <= 0:
        return 0.0
    return inter / union
