"""Reading detections from JSON and serialising merge-NMS results."""

from __future__ import annotations

import json
from pathlib import Path

import numpy as np

from structflo.boxmerge.models import BoxSet, Detection


def load_detections(path: Path | str) -> list[Detection]:
    """Load detections from a JSON file.

    Accepts either a bare list of ``{"bbox": [x1, y1, x2, y2], "conf": c}``
    objects or an object with that list under ``"detections"``.
    """
    data = json.loads(Path(path).read_text())
    if isinstance(data, dict):
        if "detections" not in data:
            raise ValueError(
                f"{path}: expected a list of detections or an object with a "
                f"\"detections\" key, got keys {sorted(data)}"
            )
        data = data["detections"]
    return [Detection.from_dict(d) for d in data]


def detections_to_arrays(detections: list[Detection]) -> tuple[np.ndarray, np.ndarray]:
    """Return ``(boxes, scores)`` float64 arrays for *detections*."""
    box_set = BoxSet.from_detections(detections)
    return box_set.coords, box_set.scores


def to_records(keep: np.ndarray, box_set: BoxSet) -> list[dict]:
    """One flat dict per kept box: its input index, merged bbox and score."""
    records = []
    for i, det in zip(keep.tolist(), box_set.to_detections(keep)):
        records.append({"index": i, **det.to_dict()})
    return records


def to_json(records: list[dict], indent: int = 2) -> str:
    """Serialise records to a formatted JSON string."""
    return json.dumps(records, indent=indent)


def to_dataframe(records: list[dict]):
    """Convert records to a pandas DataFrame with x1/y1/x2/y2 columns.

    Requires pandas to be installed (``pip install pandas``).
    """
    import pandas as pd  # type: ignore[import]

    rows = [
        {"index": r["index"], **dict(zip(("x1", "y1", "x2", "y2"), r["bbox"])), "conf": r["conf"]}
        for r in records
    ]
    return pd.DataFrame(rows, columns=["index", "x1", "y1", "x2", "y2", "conf"])
