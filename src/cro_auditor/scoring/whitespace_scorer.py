# src/cro_auditor/scoring/whitespace_scorer.py
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from cro_auditor.layout.models import DensityGrid, SpacingAnalysis, WhitespaceMetrics

logger = logging.getLogger(__name__)

# (very low, low, moderate) whitespace bands per page theme
ISSUE_BANDS: Dict[str, Tuple[float, float, float]] = {
    "light": (0.30, 0.35, 0.45),
    "dark": (0.24, 0.30, 0.40),
    "mixed": (0.28, 0.33, 0.43),
}


def clutter_score(whitespace_ratio: float, max_density: int, spacing: SpacingAnalysis) -> int:
    """0..100 composite: whitespace band, densest grid cell and spacing penalties."""
    score = 0
    if whitespace_ratio <= 0.25:
        score += 60
    elif whitespace_ratio < 0.35:
        score += 40
    elif whitespace_ratio < 0.45:
        score += 20
    elif whitespace_ratio < 0.55:
        score += 5

    if max_density > 50:
        score += 25
    elif max_density > 30:
        score += 15
    elif max_density > 20:
        score += 8

    if not spacing.headline.adequate:
        score += 4
    if not spacing.cta.adequate:
        score += 5
    if not spacing.content_block_adequate:
        score += 3
    if not spacing.line_height_adequate:
        score += 3
    return max(0, min(100, score))


def build_metrics(dom_ratio: float, raster_ratio: Optional[float], density: DensityGrid,
                  spacing: SpacingAnalysis, theme: str = "light", threshold: int = 240) -> WhitespaceMetrics:
    effective = raster_ratio if raster_ratio is not None else dom_ratio
    return WhitespaceMetrics(
        dom_ratio=dom_ratio,
        raster_ratio=raster_ratio,
        clutter_score=clutter_score(effective, density.max_density, spacing),
        density=density,
        spacing=spacing,
        theme=theme,
        threshold=threshold,
    )


def whitespace_score(metrics: WhitespaceMetrics) -> int:
    score = 100 - metrics.clutter_score

    if metrics.raster_ratio is not None:
        if metrics.raster_ratio >= 0.6:
            score += 10
        elif metrics.raster_ratio >= 0.5:
            score += 5
    elif metrics.dom_ratio >= 0.5:
        score += 5

    max_density = metrics.density.max_density if metrics.density else 0
    if max_density <= 15:
        score += 5
    elif max_density <= 25:
        score += 2
    return max(0, min(100, round(score)))


def whitespace_issues(metrics: WhitespaceMetrics) -> List[str]:
    issues: List[str] = []

    if metrics.clutter_score > 70:
        issues.append("Page layout appears cluttered")
    elif metrics.clutter_score > 50:
        issues.append("Page layout shows signs of clutter")

    max_density = metrics.density.max_density if metrics.density else 0
    if max_density > 12:
        issues.append(f"High element density detected ({max_density} elements in one section)")

    spacing = metrics.spacing
    if spacing is not None:
        if not spacing.headline.adequate:
            issues.append("Insufficient spacing around headlines")
        if not spacing.cta.adequate:
            issues.append("CTA elements lack adequate spacing")
        if not spacing.content_block_adequate:
            issues.append("Insufficient spacing between content blocks")
        if not spacing.line_height_adequate:
            issues.append("Line height too tight for optimal readability")

    ratio = metrics.effective_ratio
    if metrics.raster_ratio is not None:
        method = f"visual analysis with {metrics.theme} theme (threshold: {metrics.threshold})"
    else:
        method = "DOM analysis"
    very, low, moderate = ISSUE_BANDS.get(metrics.theme, ISSUE_BANDS["light"])
    percent = round(ratio * 100)
    if ratio < very:
        issues.append(f"Very low whitespace ratio ({percent}% via {method})")
    elif ratio < low:
        issues.append(f"Low whitespace ratio ({percent}% via {method})")
    elif ratio < moderate:
        issues.append(f"Moderate whitespace ratio ({percent}% via {method})")
    return issues


# --- Recommendations ---

@dataclass(frozen=True)
class RecommendationTemplate:
    id: str
    impact: str
    condition: Callable[[Dict[str, float]], bool]
    template: str


WHITESPACE_RECOMMENDATIONS = (
    RecommendationTemplate(
        "whitespace-severely-cluttered", "High",
        lambda ctx: ctx["whitespace_ratio"] < 0.25,
        "Page is severely cluttered ({whitespace_ratio} whitespace ratio). "
        "Remove non-essential elements to improve focus.",
    ),
    RecommendationTemplate(
        "whitespace-too-dense", "High",
        lambda ctx: 0.25 <= ctx["whitespace_ratio"] < 0.35,
        "Increase whitespace from {whitespace_ratio} to at least 40%. "
        "Dense layouts reduce comprehension and conversions.",
    ),
    RecommendationTemplate(
        "whitespace-poor-line-height", "High",
        lambda ctx: ctx["avg_line_height"] < 1.3,
        "Line height of {avg_line_height} is too tight. Increase to 1.5-1.6 for body text readability.",
    ),
    RecommendationTemplate(
        "whitespace-moderate-density", "Medium",
        lambda ctx: 0.35 <= ctx["whitespace_ratio"] < 0.4,
        "Whitespace ratio of {whitespace_ratio} is adequate but could improve. "
        "Target 40-50% for optimal readability.",
    ),
    RecommendationTemplate(
        "whitespace-improve-line-height", "Medium",
        lambda ctx: 1.3 <= ctx["avg_line_height"] < 1.4,
        "Increase line height from {avg_line_height} to 1.5 for improved readability on paragraphs.",
    ),
    RecommendationTemplate(
        "whitespace-section-spacing", "Medium",
        lambda ctx: ctx["content_density"] > 0.6,
        "Add more vertical spacing between page sections. "
        "Use consistent padding (64px+) to create visual breathing room.",
    ),
    RecommendationTemplate(
        "whitespace-headline-spacing", "Medium",
        lambda ctx: ctx["clutter_score"] > 50,
        "Increase whitespace around headlines. Add minimum 24px top margin and 16px bottom margin.",
    ),
    RecommendationTemplate(
        "whitespace-cta-spacing", "Medium",
        lambda ctx: ctx["whitespace_ratio"] < 0.45 and ctx["content_density"] > 0.5,
        "Add more whitespace around CTA buttons (minimum 20px margins). Isolated CTAs draw more attention.",
    ),
    RecommendationTemplate(
        "whitespace-content-width", "Low",
        lambda ctx: ctx["content_density"] > 0.4,
        "Limit paragraph width to 65-75 characters for optimal reading comfort.",
    ),
    RecommendationTemplate(
        "whitespace-consistent-spacing", "Low",
        lambda ctx: ctx["whitespace_ratio"] < 0.5,
        "Establish a consistent spacing scale (8px base unit). Use multiples for all margins and padding.",
    ),
)


def _format_value(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}"


def whitespace_recommendations(metrics: WhitespaceMetrics) -> List[str]:
    density = metrics.density.average_density if metrics.density else 0.0
    ctx = {
        "whitespace_ratio": metrics.effective_ratio,
        "content_density": density / 20,
        "avg_line_height": metrics.spacing.line_height if metrics.spacing else 1.2,
        "clutter_score": metrics.clutter_score,
    }
    formatted = {key: _format_value(value) for key, value in ctx.items()}
    return [rec.template.format(**formatted) for rec in WHITESPACE_RECOMMENDATIONS if rec.condition(ctx)]
