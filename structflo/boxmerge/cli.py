"""CLI entry point: boxmerge

Run merge-NMS over a JSON file of detections and emit the kept boxes, with
their merged coordinates, as JSON or CSV.

Examples
--------
# Default policies (index weighting, asymmetric merge), result to stdout
boxmerge --dets dets.json

# Stricter suppression, save JSON and CSV
boxmerge --dets dets.json --iou 0.7 --out kept.json --csv kept.csv

# Confidence-weighted association with the enclosing merge rule
boxmerge --dets dets.json --weighting score --merge_rule union

# Draw candidates and merged boxes over the page
boxmerge --dets dets.json --image page.png --plot merged.png
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from structflo.boxmerge import records
from structflo.boxmerge.config import MergeConfig
from structflo.boxmerge.inference.merge_nms import merge_nms
from structflo.boxmerge.models import BoxSet, BoxShapeError
from structflo.boxmerge.policies import ASSOCIATION_WEIGHTS, MERGE_RULES


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Suppress overlapping detections and merge their extents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    p.add_argument(
        "--dets", required=True, help='JSON list of {"bbox": [x1, y1, x2, y2], "conf": c}'
    )
    p.add_argument("--iou", type=float, default=0.5, help="Suppression IoU threshold")
    p.add_argument(
        "--assoc_thresh",
        type=float,
        default=0.6,
        help="Association threshold; higher → fewer boxes widen the survivor",
    )
    p.add_argument(
        "--weighting",
        choices=sorted(ASSOCIATION_WEIGHTS),
        default="index",
        help="Association weighting policy",
    )
    p.add_argument(
        "--merge_rule",
        choices=sorted(MERGE_RULES),
        default="asymmetric",
        help="How a survivor's coordinates are merged",
    )
    p.add_argument("--out", default=None, help="Output JSON file (default: stdout)")
    p.add_argument("--csv", default=None, help="Output CSV file (requires pandas)")
    p.add_argument("--image", default=None, help="Page image for --plot")
    p.add_argument("--plot", default=None, help="Save a before/after figure here")
    p.add_argument("-v", "--verbose", action="store_true", help="Log every merge")
    return p


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    dets_path = Path(args.dets)
    if not dets_path.exists():
        sys.exit(f"Detections not found: {dets_path}")
    if args.plot and not args.image:
        sys.exit("--plot requires --image")

    try:
        config = MergeConfig(
            iou_thresh=args.iou,
            assoc_thresh=args.assoc_thresh,
            weighting=args.weighting,
            merge_rule=args.merge_rule,
        )
        detections = records.load_detections(dets_path)
        box_set = BoxSet.from_detections(detections)
    except (BoxShapeError, ValueError, KeyError, TypeError) as exc:
        sys.exit(f"Invalid input: {exc}")

    print(f"Processing: {dets_path} ({len(box_set)} boxes)", file=sys.stderr)
    keep = merge_nms(box_set.coords, box_set.scores, config=config)
    print(f"Kept {len(keep)} box(es)", file=sys.stderr)

    rows = records.to_records(keep, box_set)
    json_str = records.to_json(rows)

    if args.out:
        Path(args.out).write_text(json_str)
        print(f"JSON → {args.out}", file=sys.stderr)
    else:
        print(json_str)

    if args.csv:
        records.to_dataframe(rows).to_csv(args.csv, index=False)
        print(f"CSV  → {args.csv}", file=sys.stderr)

    if args.plot:
        import matplotlib

        matplotlib.use("Agg")
        from structflo.boxmerge.viz import plot_merge

        fig = plot_merge(args.image, detections, box_set.to_detections(keep))
        fig.savefig(args.plot, dpi=150, bbox_inches="tight")
        print(f"Plot → {args.plot}", file=sys.stderr)


if __name__ == "__main__":
    main()
