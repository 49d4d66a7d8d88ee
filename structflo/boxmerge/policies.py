"""Named policies for the two tunable steps of merge-NMS.

Association weighting
---------------------
A suppressed box *j* is merged into its major box only when
``weight(overlap, j, score_j) >= assoc_thresh``.  The default, ``"index"``,
multiplies the overlap by the raw box index ``j``, so a box at index 0 is
never associated.  ``"score"`` weights by the suppressed box's confidence
instead and ``"overlap"`` ignores both.

Merge rules
-----------
Given the original coordinates of every box in a cluster, a merge rule
returns the survivor's new ``(x1, y1, x2, y2)``.  ``"asymmetric"`` is the
default: horizontal union (min-left, max-right) with a vertical
shrink (max-top, min-bottom).  ``"union"`` takes the full enclosing box.
"""

from __future__ import annotations

from typing import Callable

import numpy as np

AssociationWeight = Callable[[float, int, float], float]
MergeRule = Callable[[np.ndarray], tuple[float, float, float, float]]


# ---------------------------------------------------------------------------
# Association weights
# ---------------------------------------------------------------------------


def weight_by_index(overlap: float, index: int, score: float) -> float:
    return overlap * index


def weight_by_score(overlap: float, index: int, score: float) -> float:
    return overlap * score


def weight_by_overlap(overlap: float, index: int, score: float) -> float:
    return overlap


ASSOCIATION_WEIGHTS: dict[str, AssociationWeight] = {
    "index": weight_by_index,
    "score": weight_by_score,
    "overlap": weight_by_overlap,
}


# ---------------------------------------------------------------------------
# Merge rules
# ---------------------------------------------------------------------------


def merge_asymmetric(members: np.ndarray) -> tuple[float, float, float, float]:
    """min x1, max y1, max x2, min y2 over the ``(K, 4)`` member rows."""
    return (
        float(members[:, 0].min()),
        float(members[:, 1].max()),
        float(members[:, 2].max()),
        float(members[:, 3].min()),
    )


def merge_union(members: np.ndarray) -> tuple[float, float, float, float]:
    """Smallest box enclosing every member."""
    return (
        float(members[:, 0].min()),
        float(members[:, 1].min()),
        float(members[:, 2].max()),
        float(members[:, 3].max()),
    )


MERGE_RULES: dict[str, MergeRule] = {
    "asymmetric": merge_asymmetric,
    "union": merge_union,
}


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


def get_weighting(name: str) -> AssociationWeight:
    if name not in ASSOCIATION_WEIGHTS:
        raise ValueError(
            f"Unknown association weighting '{name}'.  "
            f"Known: {sorted(ASSOCIATION_WEIGHTS)}"
        )
    return ASSOCIATION_WEIGHTS[name]


def get_merge_rule(name: str) -> MergeRule:
    if name not in MERGE_RULES:
        raise ValueError(f"Unknown merge rule '{name}'.  Known: {sorted(MERGE_RULES)}")
    return MERGE_RULES[name]
