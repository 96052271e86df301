# src/cro_auditor/dom/engine.py
import logging
from typing import Dict, Optional

from .models import PageSnapshot
from .registry import AnalyzerRegistry
from ..model import CategoryResult, PageReport, get_verdict
from ..scoring.aggregator import overall_score

logger = logging.getLogger(__name__)


class ScoringEngine:
    """
    Runs every registered analyzer over a PageSnapshot and folds the category
    results into a PageReport.

    A failing analyzer only costs its own category: the error is logged and the
    category is reported as failed with a score of 0.
    """

    def __init__(self):
        AnalyzerRegistry.discover()
        self.definitions = AnalyzerRegistry.get_definitions()

    def run_audit(self, snapshot: PageSnapshot, screenshot: Optional[bytes] = None) -> PageReport:
        categories: Dict[str, CategoryResult] = {}

        for defn in self.definitions:
            try:
                result = defn.analyze(snapshot, screenshot)
            except Exception as e:
                logger.error(f"Error in {defn.label} analysis for {snapshot.url}: {e}", exc_info=True)
                result = CategoryResult.failed(defn.category, defn.label)
            categories[defn.category] = result

        score = overall_score(categories.values())
        verdict = get_verdict(score)
        logger.info(f"Audit of {snapshot.url or '<snapshot>'} complete: overall {score} ({verdict})")

        return PageReport(
            url=snapshot.url,
            categories=categories,
            overall_score=score,
            verdict=verdict,
        )
