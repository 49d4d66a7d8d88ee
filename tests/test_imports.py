"""Smoke tests: verify all public modules are importable."""


def test_import_root():
    from structflo.boxmerge import __version__

    assert __version__


def test_import_kernel():
    from structflo.boxmerge import merge_nms, merge_nms_boxes

    assert merge_nms and merge_nms_boxes


def test_import_config():
    from structflo.boxmerge.config import MergeConfig

    assert MergeConfig


def test_import_geometry():
    from structflo.boxmerge._geometry import box_areas

    assert box_areas


def test_import_models():
    from structflo.boxmerge.models import BBox, BoxSet, Detection

    assert BBox and BoxSet and Detection


def test_import_records():
    from structflo.boxmerge.records import load_detections

    assert load_detections


def test_import_cli():
    from structflo.boxmerge.cli import main

    assert main
