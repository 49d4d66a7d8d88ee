"""Tests for structflo.boxmerge.viz.detections — matplotlib visualisation helpers."""

import matplotlib
import matplotlib.pyplot as plt
import numpy as np
import pytest
from PIL import Image

from structflo.boxmerge.models import BBox, Detection
from structflo.boxmerge.viz.detections import _to_pil, plot_detections, plot_merge

# Use non-interactive backend for CI
matplotlib.use("Agg")


# ── fixtures ────────────────────────────────────────────────────────────────


@pytest.fixture()
def sample_image() -> Image.Image:
    """100×80 white test image."""
    return Image.new("RGB", (100, 80), "white")


@pytest.fixture()
def candidates() -> list[Detection]:
    return [
        Detection(bbox=BBox(10, 10, 40, 50), conf=0.95),
        Detection(bbox=BBox(12, 11, 42, 49), conf=0.70),
        Detection(bbox=BBox(60, 10, 90, 30), conf=0.88),
    ]


@pytest.fixture()
def kept() -> list[Detection]:
    return [
        Detection(bbox=BBox(10, 11, 42, 49), conf=0.95),
        Detection(bbox=BBox(60, 10, 90, 30), conf=0.88),
    ]


# ── _to_pil ─────────────────────────────────────────────────────────────────


class TestToPil:
    def test_from_pil(self, sample_image: Image.Image) -> None:
        result = _to_pil(sample_image)
        assert isinstance(result, Image.Image)
        assert result.mode == "RGB"

    def test_from_ndarray(self) -> None:
        result = _to_pil(np.zeros((20, 30, 3), dtype=np.uint8))
        assert result.size == (30, 20)

    def test_from_path(self, tmp_path) -> None:
        path = tmp_path / "test.png"
        Image.new("RGB", (10, 10), "red").save(path)
        assert isinstance(_to_pil(path), Image.Image)
        assert isinstance(_to_pil(str(path)), Image.Image)

    def test_unsupported_type_raises(self) -> None:
        with pytest.raises(TypeError, match="Unsupported image type"):
            _to_pil(42)


# ── plot_detections ─────────────────────────────────────────────────────────


class TestPlotDetections:
    def test_returns_figure(self, sample_image, candidates) -> None:
        fig = plot_detections(sample_image, candidates)
        assert isinstance(fig, matplotlib.figure.Figure)
        assert fig.axes[0].get_title() == "3 detections"
        plt.close(fig)

    def test_custom_title(self, sample_image, candidates) -> None:
        fig = plot_detections(sample_image, candidates, title="My Title")
        assert fig.axes[0].get_title() == "My Title"
        plt.close(fig)

    def test_one_patch_per_box(self, sample_image, candidates) -> None:
        fig = plot_detections(sample_image, candidates)
        assert len(fig.axes[0].patches) == 3
        plt.close(fig)

    def test_empty(self, sample_image) -> None:
        fig = plot_detections(sample_image, [])
        assert isinstance(fig, matplotlib.figure.Figure)
        plt.close(fig)

    def test_with_existing_axes(self, sample_image, candidates) -> None:
        fig_ext, ax_ext = plt.subplots()
        fig = plot_detections(sample_image, candidates, ax=ax_ext)
        assert fig is fig_ext
        plt.close(fig)


# ── plot_merge ──────────────────────────────────────────────────────────────


class TestPlotMerge:
    def test_returns_figure(self, sample_image, candidates, kept) -> None:
        fig = plot_merge(sample_image, candidates, kept)
        assert isinstance(fig, matplotlib.figure.Figure)
        assert "3 candidates" in fig.axes[0].get_title()
        assert "2 kept" in fig.axes[0].get_title()
        plt.close(fig)

    def test_draws_both_sets(self, sample_image, candidates, kept) -> None:
        fig = plot_merge(sample_image, candidates, kept)
        assert len(fig.axes[0].patches) == 5
        plt.close(fig)

    def test_custom_title(self, sample_image, candidates, kept) -> None:
        fig = plot_merge(sample_image, candidates, kept, title="Custom")
        assert fig.axes[0].get_title() == "Custom"
        plt.close(fig)


class TestVizInit:
    def test_top_level_imports(self) -> None:
        from structflo.boxmerge.viz import plot_detections, plot_merge  # noqa: F401
