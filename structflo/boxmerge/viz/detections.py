"""Matplotlib-based visualisation of candidate and merged boxes.

All public helpers accept ``PIL.Image``, a file path, or a NumPy array and
return a ``matplotlib.figure.Figure`` so the caller can save, show, or embed
the result in a notebook.

Typical usage::

    from structflo.boxmerge.viz import plot_detections, plot_merge

    fig = plot_detections(image, detections)
    fig = plot_merge(image, candidates, kept)
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence, Union

import matplotlib.patches as mpatches
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure
from PIL import Image

from structflo.boxmerge.models import Detection

# ── colour palette ──────────────────────────────────────────────────────────
CANDIDATE_COLOR: str = "lightgray"
KEPT_COLOR: str = "lime"

# ── image coercion ──────────────────────────────────────────────────────────
ImageLike = Union[Path, str, np.ndarray, "Image.Image"]


def _to_pil(image: ImageLike) -> Image.Image:
    if isinstance(image, (str, Path)):
        return Image.open(image).convert("RGB")
    if isinstance(image, np.ndarray):
        return Image.fromarray(image).convert("RGB")
    if isinstance(image, Image.Image):
        return image.convert("RGB")
    raise TypeError(f"Unsupported image type: {type(image)}")


# ── internal helpers ────────────────────────────────────────────────────────


def _prepare_axes(
    image: ImageLike,
    ax: plt.Axes | None,
    figsize: tuple[float, float],
) -> tuple[Figure, plt.Axes]:
    pil = _to_pil(image)
    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=figsize)
    else:
        fig = ax.get_figure()
    ax.imshow(pil)
    ax.axis("off")
    return fig, ax


def _draw_box(
    ax: plt.Axes,
    det: Detection,
    color: str,
    *,
    linewidth: float = 2,
    linestyle: str = "-",
    show_conf: bool = True,
) -> None:
    """Draw one detection; the rectangle spans its inclusive pixel bounds."""
    b = det.bbox
    ax.add_patch(
        mpatches.Rectangle(
            (b.x1, b.y1),
            b.width,
            b.height,
            linewidth=linewidth,
            linestyle=linestyle,
            edgecolor=color,
            facecolor="none",
        )
    )
    if show_conf:
        ax.text(
            b.x1,
            b.y1 - 4,
            f"{det.conf:.2f}",
            color=color,
            fontsize=8,
            weight="bold",
            bbox=dict(facecolor="black", alpha=0.5, pad=1),
        )


# ── public API ──────────────────────────────────────────────────────────────


def plot_detections(
    image: ImageLike,
    detections: Sequence[Detection],
    *,
    ax: plt.Axes | None = None,
    figsize: tuple[float, float] = (10, 14),
    color: str = KEPT_COLOR,
    title: str | None = None,
) -> Figure:
    """Overlay bounding boxes with their confidences on *image*.

    Parameters
    ----------
    image:
        Input image (path, PIL, or ndarray).
    detections:
        ``Detection`` objects to draw.
    ax:
        Existing matplotlib axes to draw on.  A new figure is created when
        *None* (default).
    figsize:
        Figure size when creating a new figure.
    color:
        Edge colour of every box.
    title:
        Optional title.  Auto-generated when *None*.

    Returns
    -------
    matplotlib.figure.Figure
    """
    fig, ax = _prepare_axes(image, ax, figsize)

    for det in detections:
        _draw_box(ax, det, color)

    ax.set_title(title or f"{len(detections)} detections")
    fig.tight_layout()
    return fig


def plot_merge(
    image: ImageLike,
    candidates: Sequence[Detection],
    kept: Sequence[Detection],
    *,
    ax: plt.Axes | None = None,
    figsize: tuple[float, float] = (10, 14),
    title: str | None = None,
) -> Figure:
    """Show merge-NMS input and output on one image.

    Candidates are drawn thin and dashed in grey; the kept boxes, with their
    merged coordinates, are drawn on top in green with their scores.
    """
    fig, ax = _prepare_axes(image, ax, figsize)

    for det in candidates:
        _draw_box(ax, det, CANDIDATE_COLOR, linewidth=1, linestyle="--", show_conf=False)
    for det in kept:
        _draw_box(ax, det, KEPT_COLOR)

    ax.set_title(title or f"Merge-NMS: {len(candidates)} candidates → {len(kept)} kept")
    fig.tight_layout()
    return fig
