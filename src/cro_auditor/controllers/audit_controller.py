# src/cro_auditor/controllers/audit_controller.py
import logging
from collections import Counter, defaultdict
from concurrent.futures import ProcessPoolExecutor
from functools import partial
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd
from tqdm import tqdm

from cro_auditor.dom.builder import SnapshotBuilder
from cro_auditor.dom.engine import ScoringEngine
from cro_auditor.model import PageReport
from cro_auditor.utils.config_manager import config_manager

logger = logging.getLogger(__name__)


def _worker_audit_page(
        page_data: Tuple[str, Dict[str, Any], Optional[bytes]],
        pixel_threshold: Optional[int] = None
) -> Optional[Dict[str, Any]]:
    """
    Worker function to audit a single snapshot in a separate process.
    Returns the serialized report plus its flattened export rows.
    """
    url, payload, screenshot = page_data
    if not payload:
        return None

    if pixel_threshold is not None:
        config_manager.set_nested("whitespace.pixel_threshold", pixel_threshold)
        config_manager.set_nested("whitespace.adaptive_threshold", False)

    try:
        snapshot = SnapshotBuilder().parse_snapshot({"url": url, **payload} if url else payload)
        report = ScoringEngine().run_audit(snapshot, screenshot or None)
        return {
            "report": report.model_dump(mode="json"),
            "export_rows": build_export_rows(report),
        }
    except (TypeError, ValueError) as e:
        logger.error(f"Worker failed on {url}: {e}")
        return {"error": str(e), "url": url}


def build_export_rows(report: PageReport) -> List[Dict[str, Any]]:
    """One flat row per category, ready for CSV export."""
    return [
        {
            "URL": report.url,
            "Category": category,
            "Score": result.score,
            "Status": result.status.value,
            "Issues": len(result.issues),
        }
        for category, result in report.categories.items()
    ]


class AuditController:
    """
    Orchestrates a batch audit: parallel execution of the scoring engine over
    many snapshots and aggregation of the per-page reports.
    """

    def __init__(self):
        self.reports: List[Dict[str, Any]] = []
        self.export_rows: List[Dict[str, Any]] = []
        self.failures: List[Dict[str, Any]] = []
        self.stats = defaultdict(Counter)

    def run_audit(
            self,
            df: pd.DataFrame,
            workers: Optional[int] = None,
            pixel_threshold: Optional[int] = None,
            progress_callback=None
    ) -> Dict[str, Any]:
        """
        Audits every row of a DataFrame with 'url', 'snapshot' and (optional)
        'screenshot' columns and returns the batch summary.
        """
        total_rows = len(df)
        workers = workers or config_manager.get_nested("batch.workers", 4)

        self.reports = []
        self.export_rows = []
        self.failures = []
        self.stats = defaultdict(Counter)

        tasks = []
        for row in df.itertuples(index=False):
            screenshot = getattr(row, "screenshot", None)
            if not isinstance(screenshot, (bytes, bytearray)):
                screenshot = None
            tasks.append((getattr(row, "url", "") or "", row.snapshot, screenshot))

        with ProcessPoolExecutor(max_workers=workers) as executor:
            func = partial(_worker_audit_page, pixel_threshold=pixel_threshold)
            results_iter = executor.map(func, tasks)

            if progress_callback is None:
                results_iter = tqdm(results_iter, total=total_rows, desc="Auditing", unit="page")

            for i, result in enumerate(results_iter):
                if progress_callback:
                    progress_callback(i + 1, total_rows)

                if not result:
                    continue
                if "error" in result:
                    self.failures.append(result)
                    continue

                report = result["report"]
                self.reports.append(report)
                self.export_rows.extend(result["export_rows"])
                self.stats["verdicts"][report.get("verdict") or "n/a"] += 1
                for category, cat_result in report["categories"].items():
                    self.stats[category][cat_result["status"]] += 1

        summary = self._build_summary(total_rows)
        logger.info(
            f"Batch audit finished: {summary['pages_audited']}/{total_rows} pages audited, "
            f"{summary['pages_failed']} failed"
        )
        return summary

    def _build_summary(self, total: int) -> Dict[str, Any]:
        scores = [r["overall_score"] for r in self.reports if r.get("overall_score") is not None]
        category_scores = {}
        if self.export_rows:
            frame = pd.DataFrame(self.export_rows)
            category_scores = {
                cat: (None if pd.isna(mean) else round(float(mean), 1))
                for cat, mean in frame.groupby("Category")["Score"].mean().items()
            }

        return {
            "pages_total": total,
            "pages_audited": len(self.reports),
            "pages_failed": len(self.failures),
            "average_score": round(sum(scores) / len(scores), 1) if scores else None,
            "category_averages": category_scores,
            "verdicts": dict(self.stats["verdicts"]),
        }

    # --- Result Getters ---
    def get_reports(self) -> List[Dict[str, Any]]:
        return self.reports

    def get_results_for_export(self) -> List[Dict[str, Any]]:
        return self.export_rows

    def export_csv(self, path) -> int:
        """Writes the export rows to CSV and returns the number of rows written."""
        frame = pd.DataFrame(self.export_rows, columns=["URL", "Category", "Score", "Status", "Issues"])
        frame.to_csv(path, index=False)
        logger.info(f"Exported {len(frame)} rows to {path}")
        return len(frame)
