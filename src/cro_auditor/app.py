# src/cro_auditor/app.py
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import pandas as pd

from cro_auditor.controllers.audit_controller import AuditController
from cro_auditor.dom.builder import SnapshotBuilder
from cro_auditor.dom.engine import ScoringEngine
from cro_auditor.utils.config_manager import config_manager
from cro_auditor.utils.configure_logging import configure_from_settings
from cro_auditor.utils.path_utils import PathUtils

# Initialize logging based on configuration
configure_from_settings(config_manager.get_nested("debug", {}))
logger = logging.getLogger(__name__)


def _read_snapshot(path: Path) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _apply_threshold(threshold: Optional[int]) -> None:
    # An explicit threshold disables the theme-adaptive one
    if threshold is not None:
        config_manager.set_nested("whitespace.pixel_threshold", threshold)
        config_manager.set_nested("whitespace.adaptive_threshold", False)


def cmd_run(args: argparse.Namespace) -> int:
    """Audits a single snapshot file and prints (or writes) the JSON report."""
    _apply_threshold(args.threshold)
    try:
        payload = _read_snapshot(args.snapshot)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Could not read snapshot {args.snapshot}: {e}")
        return 1

    screenshot = None
    if args.screenshot:
        try:
            screenshot = args.screenshot.read_bytes()
        except OSError as e:
            logger.warning(f"Could not read screenshot {args.screenshot}: {e}")

    snapshot = SnapshotBuilder().parse_snapshot(payload)
    report = ScoringEngine().run_audit(snapshot, screenshot)
    output = report.model_dump_json(indent=2)

    if args.output:
        args.output.write_text(output, encoding="utf-8")
        logger.info(f"Report written to {args.output}")
    else:
        print(output)
    return 0


def load_batch(directory: Path) -> pd.DataFrame:
    """
    Collects every '*.json' snapshot in a directory. A PNG with the same stem is
    attached as the screenshot.
    """
    rows = []
    for path in sorted(directory.glob("*.json")):
        try:
            payload = _read_snapshot(path)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Skipping {path.name}: {e}")
            continue
        png = path.with_suffix(".png")
        url = payload.get("url") if isinstance(payload, dict) else None
        rows.append({
            "url": url or path.stem,
            "snapshot": payload,
            "screenshot": png.read_bytes() if png.exists() else None,
        })
    return pd.DataFrame(rows, columns=["url", "snapshot", "screenshot"])


def cmd_batch(args: argparse.Namespace) -> int:
    """Audits a directory of snapshots in parallel."""
    if not args.directory.is_dir():
        logger.error(f"Not a directory: {args.directory}")
        return 1

    df = load_batch(args.directory)
    if df.empty:
        logger.warning(f"No snapshots found in {args.directory}")
        return 1

    controller = AuditController()
    summary = controller.run_audit(df, workers=args.workers, pixel_threshold=args.threshold)
    print(json.dumps(summary, indent=2))

    if args.export:
        export_path = args.export
        if export_path.parent == Path("."):
            export_path = PathUtils.get_export_dir() / export_path
        controller.export_csv(export_path)
    return 0 if summary["pages_failed"] == 0 else 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cro-audit",
        description="Score rendered page snapshots for conversion-rate heuristics."
    )
    parser.add_argument("--log-level", default=None, help="Override the configured log level.")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Audit a single snapshot.")
    run.add_argument("snapshot", type=Path, help="Snapshot JSON produced by the renderer.")
    run.add_argument("--screenshot", type=Path, help="PNG/JPEG screenshot of the viewport.")
    run.add_argument("--threshold", type=int, help="Pixel luma threshold (0-255) for whitespace.")
    run.add_argument("--output", type=Path, help="Write the report here instead of stdout.")
    run.set_defaults(func=cmd_run)

    batch = sub.add_parser("batch", help="Audit every snapshot in a directory.")
    batch.add_argument("directory", type=Path)
    batch.add_argument("--workers", type=int, default=None)
    batch.add_argument("--threshold", type=int, help="Pixel luma threshold (0-255) for whitespace.")
    batch.add_argument("--export", type=Path, help="Write per-category rows to this CSV file.")
    batch.set_defaults(func=cmd_batch)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.log_level:
        configure_from_settings(config_manager.get_nested("debug", {}), level_override=args.log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
