"""Merge-NMS: greedy suppression that widens each survivor over its cluster.

Classic NMS keeps the highest-scoring box of an overlapping group and drops
the rest.  Here the survivor ("major" box) also absorbs the extent of the
suppressed boxes that sit tightly on it, so near-duplicate detections still
contribute geometry.

Pipeline
--------
``BoxSet`` → :func:`box_areas` (once) → :func:`score_order` (once) →
:func:`suppress` (calls :func:`merge_cluster` per survivor) →
:func:`collect_kept`.

Invariants
----------
- Areas are computed once from the input coordinates.
- Every overlap test and every merge reads a snapshot of the input
  coordinates, so a survivor's rewrite never feeds a later comparison or
  another survivor's merge.
- Suppression is permanent; a box is either suppressed or a survivor.

The pairwise loop is O(N²) with no spatial index.  That is fine for the few
hundred candidates per image a detector produces; inputs above
``MergeConfig.large_input_warning`` are logged.
"""

from __future__ import annotations

import dataclasses
import logging

import numpy as np

from structflo.boxmerge._geometry import box_areas, overlap
from structflo.boxmerge.config import MergeConfig
from structflo.boxmerge.models import BoxSet
from structflo.boxmerge.policies import MergeRule, get_merge_rule, get_weighting

logger = logging.getLogger(__name__)


def score_order(scores: np.ndarray) -> np.ndarray:
    """Indices sorted by descending score; equal scores keep ascending index order."""
    return np.argsort(-np.asarray(scores), kind="stable")


def merge_cluster(
    original: np.ndarray, members: list[int], rule: MergeRule
) -> tuple[float, float, float, float]:
    """Apply *rule* to the original coordinates of every index in *members*."""
    return rule(original[members])


def suppress(
    box_set: BoxSet,
    areas: np.ndarray,
    order: np.ndarray,
    config: MergeConfig,
) -> np.ndarray:
    """Run the suppression pass and rewrite survivors in ``box_set.coords``.

    Returns the boolean suppressed flag of every box.
    """
    weight = get_weighting(config.weighting)
    rule = get_merge_rule(config.merge_rule)

    original = box_set.coords.copy()
    boxes = original.tolist()
    area = areas.tolist()
    scores = box_set.scores.tolist()
    order = order.tolist()

    n = len(order)
    suppressed = np.zeros(n, dtype=bool)

    for i_pos, i in enumerate(order):
        if suppressed[i]:
            continue
        associates = []
        for j in order[i_pos + 1 :]:
            if suppressed[j]:
                continue
            ovr = overlap(boxes[i], boxes[j], area[i], area[j])
            if ovr >= config.iou_thresh:
                if weight(ovr, j, scores[j]) >= config.assoc_thresh:
                    associates.append(j)
                suppressed[j] = True
        associates.append(i)

        merged = merge_cluster(original, associates, rule)
        box_set.coords[i] = merged
        logger.debug(
            "major box %d absorbed %d box(es): %s -> %s",
            i,
            len(associates) - 1,
            boxes[i],
            list(merged),
        )

    return suppressed


def collect_kept(suppressed: np.ndarray) -> np.ndarray:
    """Ascending indices of the boxes that were not suppressed."""
    return np.flatnonzero(~suppressed).astype(np.int64)


def merge_nms(
    boxes,
    scores,
    iou_thresh: float | None = None,
    *,
    config: MergeConfig | None = None,
) -> np.ndarray:
    """Return indices of kept boxes after merge-NMS (highest score first).

    Args:
        boxes:      (N, 4) array-like of [x1, y1, x2, y2], inclusive bounds.
                    A floating-point ndarray is rewritten in place: each kept
                    row receives its merged coordinates.
        scores:     (N,) confidence scores.
        iou_thresh: Suppression threshold; overrides ``config.iou_thresh``.
        config:     Association / merge policy.  Defaults to ``MergeConfig()``.

    Returns:
        ``int64`` array of kept indices in ascending order.

    Raises:
        BoxShapeError: boxes and scores are malformed or not index-aligned.
        ValueError:    the threshold or a policy name is invalid.
    """
    keep, _ = _run(BoxSet.from_arrays(boxes, scores), iou_thresh, config)
    return keep


def merge_nms_boxes(
    boxes,
    scores,
    iou_thresh: float | None = None,
    *,
    config: MergeConfig | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """Like :func:`merge_nms` but leaves *boxes* untouched.

    Returns ``(keep, merged)`` where ``merged`` is a float64 ``(N, 4)`` copy of
    the input with every kept row rewritten.
    """
    box_set = BoxSet.from_arrays(boxes, scores)
    box_set = BoxSet(box_set.coords.astype(np.float64, copy=True), box_set.scores)
    return _run(box_set, iou_thresh, config)


def _run(
    box_set: BoxSet, iou_thresh: float | None, config: MergeConfig | None
) -> tuple[np.ndarray, np.ndarray]:
    config = config or MergeConfig()
    if iou_thresh is not None:
        config = dataclasses.replace(config, iou_thresh=iou_thresh)

    n = len(box_set)
    if n == 0:
        return np.empty(0, dtype=np.int64), box_set.coords
    if n > config.large_input_warning:
        logger.warning(
            "merge_nms on %d boxes: the pairwise loop is O(N^2) and may be slow", n
        )

    areas = box_areas(box_set.coords)
    order = score_order(box_set.scores)
    suppressed = suppress(box_set, areas, order, config)
    keep = collect_kept(suppressed)
    logger.debug("merge_nms kept %d of %d boxes", len(keep), n)
    return keep, box_set.coords
