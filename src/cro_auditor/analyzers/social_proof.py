# src/cro_auditor/analyzers/social_proof.py
import logging
from typing import Optional

from cro_auditor.dom.core import AnalyzerDefinition
from cro_auditor.dom.models import PageSnapshot
from cro_auditor.model import SocialProofResult
from cro_auditor.scoring.social_proof_scorer import score_social_proof
from cro_auditor.signals.dedupe import dedupe_social_proof
from cro_auditor.signals.social_proof_classifier import extract_social_proof_signals

logger = logging.getLogger(__name__)


def analyze_social_proof(snapshot: PageSnapshot, screenshot: Optional[bytes] = None) -> SocialProofResult:
    found = extract_social_proof_signals(snapshot.elements, snapshot.viewport, snapshot.structured_data)
    elements = dedupe_social_proof(found)
    result = score_social_proof(elements)
    logger.info(f"Social proof analysis complete: {len(elements)} elements found, score: {result.score}")
    return result


DEFINITION = AnalyzerDefinition(
    category="social_proof",
    label="Social proof",
    analyze=analyze_social_proof,
    order=50
)
