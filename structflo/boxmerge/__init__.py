"""structflo.boxmerge — non-maximum suppression that merges cluster extents.

Quick start
-----------
>>> import numpy as np
>>> from structflo.boxmerge import merge_nms
>>> boxes = np.array([[0, 0, 10, 10], [1, 1, 11, 11]], dtype=float)
>>> scores = np.array([0.9, 0.8])
>>> merge_nms(boxes, scores, iou_thresh=0.5)
array([0])
>>> boxes[0]
array([ 0.,  1., 11., 10.])

Policies
--------
>>> from structflo.boxmerge import make_score_weighted_config
>>> keep = merge_nms(boxes, scores, config=make_score_weighted_config())
"""

from structflo.boxmerge.config import MergeConfig, make_merge_config, make_score_weighted_config
from structflo.boxmerge.inference.merge_nms import merge_nms, merge_nms_boxes
from structflo.boxmerge.models import BBox, BoxSet, BoxShapeError, Detection

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Kernel
    "merge_nms",
    "merge_nms_boxes",
    # Configuration
    "MergeConfig",
    "make_merge_config",
    "make_score_weighted_config",
    # Data models
    "BBox",
    "BoxSet",
    "BoxShapeError",
    "Detection",
]
