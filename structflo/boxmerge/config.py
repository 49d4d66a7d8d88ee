"""Merge-NMS configuration dataclass and factory functions."""

import math
from dataclasses import dataclass

from structflo.boxmerge.policies import get_merge_rule, get_weighting


@dataclass
class MergeConfig:
    # Suppression
    iou_thresh: float = 0.5

    # Association: how tightly a suppressed box must sit on its major box
    # before it widens the major box.  Higher → fewer associated boxes.
    assoc_thresh: float = 0.6
    weighting: str = "index"          # see policies.ASSOCIATION_WEIGHTS
    merge_rule: str = "asymmetric"    # see policies.MERGE_RULES

    # Inputs above this size are processed but logged as slow (O(N²) loop)
    large_input_warning: int = 5000

    def __post_init__(self):
        if math.isnan(self.iou_thresh) or not 0.0 < self.iou_thresh <= 1.0:
            raise ValueError(f"iou_thresh must be in (0, 1], got {self.iou_thresh}")
        if math.isnan(self.assoc_thresh):
            raise ValueError("assoc_thresh must be a number, got NaN")
        # Resolve eagerly so a typo fails at construction, not mid-pass.
        get_weighting(self.weighting)
        get_merge_rule(self.merge_rule)


def make_merge_config(**overrides) -> MergeConfig:
    """Return the default MergeConfig with *overrides* applied.

    Defaults: index-weighted association at 0.6 and the asymmetric merge rule.
    """
    return MergeConfig(**overrides)


def make_score_weighted_config(iou_thresh: float = 0.5) -> MergeConfig:
    """Return a MergeConfig that weights association by confidence.

    Pairs ``"score"`` weighting with the enclosing ``"union"`` merge, which is
    what the default index-weighted / asymmetric rules most likely meant.
    """
    return MergeConfig(
        iou_thresh=iou_thresh,
        weighting="score",
        merge_rule="union",
    )
