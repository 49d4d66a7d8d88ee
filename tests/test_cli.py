"""Tests for structflo.boxmerge.cli — the ``boxmerge`` entry point."""

import json

import pytest
from PIL import Image

from structflo.boxmerge.cli import build_parser, main

DETS = [
    {"bbox": [0, 0, 10, 10], "conf": 0.9},
    {"bbox": [1, 1, 11, 11], "conf": 0.8},
    {"bbox": [50, 50, 60, 60], "conf": 0.7},
]


@pytest.fixture()
def dets_file(tmp_path):
    path = tmp_path / "dets.json"
    path.write_text(json.dumps(DETS))
    return path


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args(["--dets", "x.json"])
        assert args.iou == 0.5
        assert args.assoc_thresh == 0.6
        assert args.weighting == "index"
        assert args.merge_rule == "asymmetric"

    def test_rejects_unknown_policy(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--dets", "x.json", "--weighting", "area"])


class TestMain:
    def test_stdout_json(self, dets_file, capsys):
        main(["--dets", str(dets_file)])
        out = json.loads(capsys.readouterr().out)
        assert [r["index"] for r in out] == [0, 2]
        assert out[0]["bbox"] == [0, 1, 11, 10]

    def test_writes_out_file(self, dets_file, tmp_path):
        out = tmp_path / "kept.json"
        main(["--dets", str(dets_file), "--out", str(out)])
        assert len(json.loads(out.read_text())) == 2

    def test_policy_flags(self, dets_file, capsys):
        main(["--dets", str(dets_file), "--weighting", "score", "--merge_rule", "union"])
        out = json.loads(capsys.readouterr().out)
        assert out[0]["bbox"] == [0, 0, 10, 10]

    def test_csv(self, dets_file, tmp_path):
        pytest.importorskip("pandas")
        csv_path = tmp_path / "kept.csv"
        main(["--dets", str(dets_file), "--out", str(tmp_path / "k.json"), "--csv", str(csv_path)])
        lines = csv_path.read_text().strip().splitlines()
        assert lines[0] == "index,x1,y1,x2,y2,conf"
        assert len(lines) == 3

    def test_plot(self, dets_file, tmp_path):
        image = tmp_path / "page.png"
        Image.new("RGB", (80, 80), "white").save(image)
        plot = tmp_path / "merged.png"
        main(
            [
                "--dets", str(dets_file),
                "--out", str(tmp_path / "k.json"),
                "--image", str(image),
                "--plot", str(plot),
            ]
        )
        assert plot.exists()

    def test_missing_file_exits(self, tmp_path):
        with pytest.raises(SystemExit, match="Detections not found"):
            main(["--dets", str(tmp_path / "missing.json")])

    def test_plot_without_image_exits(self, dets_file):
        with pytest.raises(SystemExit, match="requires --image"):
            main(["--dets", str(dets_file), "--plot", "x.png"])

    def test_bad_threshold_exits(self, dets_file):
        with pytest.raises(SystemExit, match="Invalid input"):
            main(["--dets", str(dets_file), "--iou", "2.0"])

    def test_malformed_detection_exits(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([{"bbox": [0, 0, 1, 1]}]))
        with pytest.raises(SystemExit, match="Invalid input"):
            main(["--dets", str(path)])

    def test_null_bbox_exits(self, tmp_path):
        path = tmp_path / "null.json"
        path.write_text(json.dumps([{"bbox": None, "conf": 0.5}]))
        with pytest.raises(SystemExit, match="Invalid input"):
            main(["--dets", str(path)])

    def test_misnamed_wrapper_key_exits(self, tmp_path):
        path = tmp_path / "typo.json"
        path.write_text(json.dumps({"dets": DETS}))
        with pytest.raises(SystemExit, match="Invalid input"):
            main(["--dets", str(path)])
