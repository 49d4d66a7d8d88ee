"""``torch`` front end for merge-NMS with the tensor operator's contract.

``nms_cpu(dets, scores, threshold)`` takes CPU tensors, returns the kept
indices as an ``int64`` tensor and rewrites the kept rows of *dets* in place.
The kernel itself runs on a NumPy view that shares memory with *dets*.
"""

from __future__ import annotations

import torch

from structflo.boxmerge.config import MergeConfig
from structflo.boxmerge.inference.merge_nms import merge_nms


def nms_cpu(
    dets: torch.Tensor,
    scores: torch.Tensor,
    threshold: float,
    *,
    config: MergeConfig | None = None,
) -> torch.Tensor:
    """Merge-NMS over ``dets`` (N, 4) [x1, y1, x2, y2] and ``scores`` (N,).

    Raises:
        ValueError: tensors are on a CUDA device, their dtypes differ, or the
            dtype is not float32 or float64.
    """
    if dets.is_cuda:
        raise ValueError("dets must be a CPU tensor")
    if scores.is_cuda:
        raise ValueError("scores must be a CPU tensor")
    if dets.dtype != scores.dtype:
        raise ValueError(
            f"dets should have the same type as scores ({dets.dtype} vs {scores.dtype})"
        )
    if dets.dtype not in (torch.float32, torch.float64):
        raise ValueError(
            f"dets must be a float32 or float64 floating point tensor, got {dets.dtype}"
        )

    if dets.numel() == 0:
        return torch.empty(0, dtype=torch.int64)

    # Detached view: writes from the kernel land in dets' storage.
    boxes = dets.detach().numpy()
    keep = merge_nms(boxes, scores.detach().numpy(), threshold, config=config)
    return torch.from_numpy(keep)
