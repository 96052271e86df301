# src/cro_auditor/scoring/cta_scorer.py
import logging
from typing import List, Optional, Sequence

from cro_auditor.dictionaries.cta_dictionary import CTA_DICTIONARY
from cro_auditor.model import CTAResult
from cro_auditor.signals.models import CTASignal

logger = logging.getLogger(__name__)


def priority_score(cta: CTASignal) -> int:
    """Weighted priority used to pick the page's main conversion target."""
    score = 0
    lower = cta.text.lower()

    if cta.context == "hero":
        score += 50
    if cta.type == "form-submit":
        score += 40
    if any(keyword in lower for keyword in CTA_DICTIONARY.checkout_keywords):
        score += 35
    if cta.type == "primary":
        score += 30
    if cta.is_above_fold:
        score += 20

    if cta.action_strength == "strong":
        score += 15
    elif cta.action_strength == "medium":
        score += 10

    if cta.visibility == "high":
        score += 15
    elif cta.visibility == "medium":
        score += 10

    # Header links are usually navigation unless they start something
    if cta.context == "header" and "start" not in lower and "get" not in lower:
        score -= 10
    if cta.context == "content":
        score += 8
    if cta.urgency == "high":
        score += 5
    return score


def select_primary(ctas: Sequence[CTASignal]) -> Optional[CTASignal]:
    """Highest priority wins; ties go to the earliest signal."""
    best, best_score = None, None
    for cta in ctas:
        score = priority_score(cta)
        if best_score is None or score > best_score:
            best, best_score = cta, score
    return best


def score_ctas(ctas: Sequence[CTASignal], primary: Optional[CTASignal]) -> CTAResult:
    """Starts at 100 and applies the fixed deductions and bonuses; clamped to [0, 100]."""
    issues: List[str] = []
    recommendations: List[str] = []
    score = 100

    above_fold = [cta for cta in ctas if cta.is_above_fold]

    if not above_fold:
        issues.append("No clear CTA above the fold")
        score -= 50

    if primary is None and ctas:
        issues.append("No clear primary CTA identified")
        recommendations.append("Add a prominent primary CTA with strong action words")
        score -= 30

    if not ctas:
        issues.append("No CTAs found on page")
        score -= 50

    if len(above_fold) > 4:
        issues.append(
            f"Too many competing CTAs above the fold ({len(above_fold)} found) - focus on 1-2 primary actions"
        )
        score -= 20

    if primary is not None:
        if primary.action_strength == "weak":
            issues.append("Primary CTA uses weak action words")
            recommendations.append('Use stronger action words like "Get", "Start", "Buy", or "Join"')
            score -= 15
        if primary.visibility == "low":
            issues.append("Primary CTA has low visibility")
            recommendations.append("Make primary CTA more prominent with better contrast, size, and spacing")
            score -= 20
        if not primary.has_value_proposition:
            recommendations.append("Add value proposition near your primary CTA")
            score -= 10
        if primary.context == "footer":
            issues.append("Primary CTA is located in footer instead of above the fold")
            score -= 25

    mobile_ready = sum(1 for cta in ctas if cta.mobile_optimized)
    if mobile_ready < len(ctas) * 0.8:
        issues.append("Some CTAs may not be mobile-optimized")
        recommendations.append("Ensure CTAs have adequate touch target size (44px+) and readable text (16px+)")
        score -= 10

    if ctas and all(cta.action_strength == "weak" and cta.type == "other" for cta in ctas):
        score -= 15

    if primary is not None and primary.has_guarantee:
        score += 5
    if primary is not None and primary.has_value_proposition and primary.context == "hero":
        score += 5

    score = max(0, min(100, round(score)))
    return CTAResult(
        score=score,
        issues=issues,
        recommendations=recommendations,
        ctas=list(ctas),
        primary_cta=primary,
        secondary_ctas=[cta for cta in ctas if cta is not primary],
        metrics={"total": len(ctas), "above_fold": len(above_fold)},
    )
