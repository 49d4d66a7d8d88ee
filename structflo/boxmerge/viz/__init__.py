"""Visualisation helpers for structflo-boxmerge.

Quick access::

    from structflo.boxmerge.viz import plot_detections, plot_merge
"""

from structflo.boxmerge.viz.detections import plot_detections, plot_merge

__all__ = [
    "plot_detections",
    "plot_merge",
]
