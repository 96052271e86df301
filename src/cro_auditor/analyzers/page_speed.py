# src/cro_auditor/analyzers/page_speed.py
import logging
from typing import Optional

from cro_auditor.dom.core import AnalyzerDefinition
from cro_auditor.dom.models import PageSnapshot, PageTimings
from cro_auditor.model import CategoryResult

logger = logging.getLogger(__name__)


def vitals_are_good(t: PageTimings) -> bool:
    return t.lcp <= 2500 and t.fcp <= 1800 and t.cls <= 0.1 and t.tbt <= 200 and t.speed_index <= 3400


def analyze_page_speed(snapshot: PageSnapshot, screenshot: Optional[bytes] = None) -> CategoryResult:
    """Scores collector-supplied lab timings against the Lighthouse bands."""
    t = snapshot.timings
    if t is None:
        return CategoryResult.not_applicable("page_speed")

    score = round(max(0.0, min(1.0, t.performance_score)) * 100)
    if score >= 95 and vitals_are_good(t):
        score = 100

    issues, recommendations = [], []

    if t.lcp > 4000:
        issues.append(f"Poor LCP: {round(t.lcp)}ms (should be ≤ 2500ms)")
        recommendations.append("Optimize largest content element loading (LCP > 4000ms)")
    elif t.lcp > 2500:
        issues.append(f"Slow LCP: {round(t.lcp)}ms (should be ≤ 2500ms)")
        recommendations.append("Improve largest content element loading time")
    elif t.lcp > 1500:
        issues.append(f"Moderate LCP: {round(t.lcp)}ms (good but could be better)")
        recommendations.append("Consider optimizing LCP further for excellent performance")

    if t.fcp > 3000:
        issues.append(f"Poor FCP: {round(t.fcp)}ms (should be ≤ 1800ms)")
        recommendations.append("Optimize initial content rendering")
    elif t.fcp > 1800:
        issues.append(f"Slow FCP: {round(t.fcp)}ms (should be ≤ 1800ms)")
        recommendations.append("Improve first content paint time")

    if t.cls > 0.25:
        issues.append(f"Poor CLS: {t.cls:.3f} (should be ≤ 0.1)")
        recommendations.append("Minimize layout shifts (CLS > 0.25)")
    elif t.cls > 0.1:
        issues.append(f"High CLS: {t.cls:.3f} (should be ≤ 0.1)")
        recommendations.append("Reduce unexpected layout shifts")

    if t.tbt > 600:
        issues.append(f"Poor TBT: {round(t.tbt)}ms (should be ≤ 200ms)")
        recommendations.append("Reduce main thread blocking time (TBT > 600ms)")
    elif t.tbt > 300:
        issues.append(f"High TBT: {round(t.tbt)}ms (should be ≤ 200ms)")
        recommendations.append("Reduce main thread blocking time (TBT > 300ms)")
    elif t.tbt > 50:
        recommendations.append("Fine-tune JavaScript execution for optimal blocking time")

    if t.speed_index > 5800:
        issues.append(f"Poor Speed Index: {round(t.speed_index)}ms (should be ≤ 3400ms)")
        recommendations.append("Optimize visual content loading speed")
    elif t.speed_index > 3400:
        issues.append(f"Slow Speed Index: {round(t.speed_index)}ms (should be ≤ 3400ms)")
        recommendations.append("Improve visual loading performance")

    if not issues:
        recommendations.append("Excellent performance! Consider monitoring Core Web Vitals regularly")

    logger.info(f"Page speed score: {score}/100")
    return CategoryResult(
        category="page_speed",
        score=score,
        issues=issues,
        recommendations=recommendations,
        metrics=t.model_dump(),
    )


DEFINITION = AnalyzerDefinition(
    category="page_speed",
    label="Page speed",
    analyze=analyze_page_speed,
    order=60
)
