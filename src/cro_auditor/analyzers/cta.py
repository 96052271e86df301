# src/cro_auditor/analyzers/cta.py
import logging
from typing import Optional

from cro_auditor.dom.core import AnalyzerDefinition
from cro_auditor.dom.models import PageSnapshot
from cro_auditor.model import CTAResult
from cro_auditor.scoring.cta_scorer import score_ctas, select_primary
from cro_auditor.signals.cta_classifier import extract_cta_signals
from cro_auditor.signals.dedupe import dedupe_ctas

logger = logging.getLogger(__name__)


def analyze_cta(snapshot: PageSnapshot, screenshot: Optional[bytes] = None) -> CTAResult:
    """Extract, deduplicate, pick the primary CTA and score the set."""
    found = extract_cta_signals(snapshot.elements, snapshot.viewport)
    ctas = dedupe_ctas(found)
    primary = select_primary(ctas)
    result = score_ctas(ctas, primary)
    logger.info(
        f"CTA analysis complete: {len(ctas)} CTAs found ({len(found)} before deduplication), score: {result.score}"
    )
    return result


DEFINITION = AnalyzerDefinition(
    category="cta",
    label="CTA",
    analyze=analyze_cta,
    order=10
)
