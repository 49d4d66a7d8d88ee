"""Core data structures: single boxes, detections and the flat BoxSet."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class BoxShapeError(ValueError):
    """Raised when boxes and scores are not index-aligned or malformed."""


# ---------------------------------------------------------------------------
# Single boxes
# ---------------------------------------------------------------------------


@dataclass
class BBox:
    """Axis-aligned box with inclusive pixel bounds."""

    x1: float
    y1: float
    x2: float
    y2: float

    @classmethod
    def from_list(cls, lst: list[float]) -> BBox:
        if len(lst) < 4:
            raise BoxShapeError(f"A box needs four coordinates, got {len(lst)}: {lst}")
        return cls(lst[0], lst[1], lst[2], lst[3])

    @property
    def width(self) -> float:
        return self.x2 - self.x1 + 1

    @property
    def height(self) -> float:
        return self.y2 - self.y1 + 1

    @property
    def area(self) -> float:
        return self.width * self.height

    def as_list(self) -> list[float]:
        return [self.x1, self.y1, self.x2, self.y2]

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.x1, self.y1, self.x2, self.y2)


@dataclass
class Detection:
    bbox: BBox
    conf: float

    @classmethod
    def from_dict(cls, d: dict) -> Detection:
        return cls(bbox=BBox.from_list(d["bbox"]), conf=float(d["conf"]))

    def to_dict(self) -> dict:
        return {
            "bbox": [round(float(v), 2) for v in self.bbox.as_list()],
            "conf": round(float(self.conf), 4),
        }


# ---------------------------------------------------------------------------
# BoxSet
# ---------------------------------------------------------------------------


@dataclass
class BoxSet:
    """N boxes as an ``(N, 4)`` coordinate array plus an ``(N,)`` score array.

    ``coords`` is the array the merge step rewrites.  :meth:`from_arrays`
    wraps a floating-point ndarray without copying, so the rewrite is seen by
    whoever owns that array; anything else is converted to ``float64`` first.
    """

    coords: np.ndarray
    scores: np.ndarray

    @classmethod
    def from_arrays(cls, boxes, scores) -> BoxSet:
        boxes = _as_float_array(boxes)
        scores = np.asarray(scores, dtype=np.float64)

        if boxes.ndim >= 1 and len(boxes) == 0 and scores.size == 0:
            return cls(np.empty((0, 4), dtype=np.float64), np.empty(0, dtype=np.float64))
        if boxes.ndim != 2 or boxes.shape[1] < 4:
            raise BoxShapeError(
                f"boxes must have shape (N, 4) [x1, y1, x2, y2], got {boxes.shape}"
            )
        if scores.ndim != 1:
            raise BoxShapeError(f"scores must be 1-D, got shape {scores.shape}")
        if len(boxes) != len(scores):
            raise BoxShapeError(
                f"boxes and scores disagree: {len(boxes)} boxes vs {len(scores)} scores"
            )
        # Extra columns (e.g. a score column) are ignored; a view keeps writes shared.
        return cls(boxes[:, :4], scores)

    @classmethod
    def from_detections(cls, detections: list[Detection]) -> BoxSet:
        if not detections:
            return cls.from_arrays(np.empty((0, 4)), np.empty(0))
        coords = np.array([d.bbox.as_list() for d in detections], dtype=np.float64)
        scores = np.array([d.conf for d in detections], dtype=np.float64)
        return cls(coords, scores)

    def __len__(self) -> int:
        return len(self.coords)

    def to_detections(self, indices=None) -> list[Detection]:
        """Return ``Detection`` objects for *indices* (all boxes when None)."""
        if indices is None:
            indices = range(len(self))
        return [
            Detection(BBox.from_list(self.coords[i].tolist()), float(self.scores[i]))
            for i in indices
        ]


def _as_float_array(boxes) -> np.ndarray:
    if isinstance(boxes, np.ndarray) and np.issubdtype(boxes.dtype, np.floating):
        return boxes
    try:
        return np.asarray(boxes, dtype=np.float64)
    except ValueError as exc:  # ragged rows
        raise BoxShapeError(f"boxes must be a rectangular (N, 4) array: {exc}") from exc
