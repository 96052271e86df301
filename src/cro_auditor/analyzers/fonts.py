# src/cro_auditor/analyzers/fonts.py
import logging
from typing import List, Optional, Tuple

from cro_auditor.dom.core import AnalyzerDefinition
from cro_auditor.dom.models import PageSnapshot
from cro_auditor.model import CategoryResult

logger = logging.getLogger(__name__)

SYSTEM_FONTS = frozenset(name.lower() for name in (
    "system-ui", "-apple-system", "BlinkMacSystemFont",
    "serif", "sans-serif", "monospace", "cursive", "fantasy",
    "Arial", "Helvetica", "Times", "Times New Roman", "Georgia",
    "Verdana", "Tahoma", "Trebuchet MS", "Impact", "Comic Sans MS",
    "Courier", "Courier New", "Lucida Console", "Palatino",
))


def font_declarations(snapshot: PageSnapshot) -> List[str]:
    """Unique font-family stacks, from the collector when supplied, else from element styles."""
    source = snapshot.fonts or [record.style.font_family for record in snapshot.elements]
    seen = {}
    for declaration in source:
        declaration = (declaration or "").strip()
        if declaration and declaration != "inherit":
            seen.setdefault(declaration, None)
    return list(seen)


def classify_fonts(declarations: List[str]) -> Tuple[List[str], List[str]]:
    """Splits stacks into (system, web) by the first family of each stack."""
    system, web = [], []
    for declaration in declarations:
        first = declaration.split(",")[0].strip().strip("'\"").lower()
        (system if first in SYSTEM_FONTS else web).append(declaration)
    return system, web


def font_score(system_count: int, web_count: int) -> int:
    score = 100
    if system_count > 3:
        score -= (system_count - 3) * 5
    if web_count > 2:
        score -= (web_count - 2) * 15
    elif web_count == 2:
        score -= 5
    if web_count == 0 and system_count <= 3:
        score = min(100, score + 5)
    return max(0, score)


def analyze_fonts(snapshot: PageSnapshot, screenshot: Optional[bytes] = None) -> CategoryResult:
    declarations = font_declarations(snapshot)
    if not declarations:
        return CategoryResult.not_applicable("fonts")

    system, web = classify_fonts(declarations)
    s, w = len(system), len(web)

    issues = []
    if w > 2:
        issues.append(
            f"Too many web fonts detected ({w}). Each web font requires additional network "
            f"requests and can slow page loading."
        )
    if s > 5:
        issues.append(
            f"Excessive system font variety ({s}) can create visual inconsistency despite not affecting performance."
        )
    if w > 3:
        issues.append("Excessive web font usage may significantly impact page performance and user experience.")

    recommendations = []
    if w > 2:
        recommendations.append("Limit web fonts to 1-2 maximum for optimal performance.")
        recommendations.append(
            "Consider using system fonts for body text and save web fonts for headings or branding."
        )
    if s > 3 and w <= 2:
        recommendations.append("Consider consolidating system fonts for better visual consistency.")
    if w == 0:
        recommendations.append(
            "Excellent choice using system fonts! This ensures fast loading and good cross-platform compatibility."
        )
    elif w <= 2 and s <= 3:
        recommendations.append(
            "Good font balance! Limited web fonts with system font fallbacks provide good performance."
        )
    recommendations.append("Use font weights and styles instead of different font families for text variation.")
    recommendations.append("Ensure web fonts are preloaded and have proper fallbacks to system fonts.")

    score = font_score(s, w)
    logger.info(f"Font usage score: {score}/100 ({len(declarations)} font families, {s} system, {w} web)")
    return CategoryResult(
        category="fonts",
        score=score,
        issues=issues,
        recommendations=recommendations,
        metrics={"font_families": declarations, "system_font_count": s, "web_font_count": w},
    )


DEFINITION = AnalyzerDefinition(
    category="fonts",
    label="Font",
    analyze=analyze_fonts,
    order=30
)
