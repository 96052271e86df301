# src/cro_auditor/scoring/social_proof_scorer.py
import logging
from typing import Dict, List, Sequence

from cro_auditor.model import SocialProofResult
from cro_auditor.signals.models import SocialProofSignal
from cro_auditor.signals.social_proof_rules import is_suspicious

logger = logging.getLogger(__name__)

SUMMARY_KEYS = {
    "testimonial": "testimonials",
    "review": "reviews",
    "rating": "ratings",
    "trust-badge": "trust_badges",
    "customer-count": "customer_counts",
    "social-media": "social_media",
    "certification": "certifications",
    "partnership": "partnerships",
    "case-study": "case_studies",
    "news-mention": "news_mentions",
}

# Types that count towards variety
DIVERSITY_TYPES = ("testimonial", "review", "trust-badge", "customer-count", "certification")

HIGH_CREDIBILITY = 70


def summarize(elements: Sequence[SocialProofSignal]) -> Dict[str, int]:
    summary = {"total_elements": len(elements), "above_fold_elements": sum(e.is_above_fold for e in elements)}
    for key in SUMMARY_KEYS.values():
        summary[key] = 0
    for element in elements:
        summary[SUMMARY_KEYS[element.type]] += 1
    return summary


def score_social_proof(elements: Sequence[SocialProofSignal]) -> SocialProofResult:
    issues: List[str] = []
    recommendations: List[str] = []
    summary = summarize(elements)

    if not elements:
        return SocialProofResult(
            score=0,
            issues=["No social proof elements found on the page"],
            recommendations=["Add testimonials, reviews, or trust badges to build credibility"],
            summary=summary,
        )

    score = 100

    if summary["above_fold_elements"] == 0:
        issues.append("No social proof elements above the fold")
        recommendations.append("Place at least one testimonial or trust indicator above the fold")
        score -= 30

    types_present = sum(1 for t in DIVERSITY_TYPES if summary[SUMMARY_KEYS[t]] > 0)
    if types_present < 2:
        issues.append("Limited variety of social proof types")
        recommendations.append(
            "Add different types of social proof (testimonials, reviews, trust badges, customer counts)"
        )
        score -= 20
    elif types_present >= 4:
        score += 10

    high_quality = [e for e in elements if e.credibility_score >= HIGH_CREDIBILITY]
    if not high_quality:
        issues.append("Social proof elements lack credibility indicators")
        recommendations.append("Add names, companies, photos, and specific details to testimonials")
        score -= 25

    testimonials = [e for e in elements if e.type == "testimonial"]
    if testimonials:
        quality = [e for e in testimonials if e.has_name and e.credibility_score >= 60]
        if len(quality) / len(testimonials) < 0.5:
            issues.append("Testimonials lack names or credibility indicators")
            recommendations.append("Include full names, titles, and companies in testimonials")
            score -= 15
    else:
        recommendations.append("Add customer testimonials with names and companies for stronger credibility")
        score -= 15

    if summary["trust_badges"] == 0 and summary["certifications"] == 0:
        recommendations.append("Add security badges or certifications to increase trust")
        score -= 10

    if summary["customer_counts"] == 0:
        recommendations.append("Display customer counts or usage statistics to show popularity")
        score -= 10

    low_visibility = [e for e in elements if e.visibility == "low"]
    if len(low_visibility) > len(elements) * 0.3:
        issues.append("Some social proof elements have low visibility")
        recommendations.append("Make social proof elements more prominent with better styling and positioning")
        score -= 10

    if not any(e.context == "hero" and e.is_above_fold for e in elements):
        recommendations.append("Place social proof in the hero section for maximum impact")
        score -= 5

    if (len(elements) >= 3 and summary["above_fold_elements"] >= 2
            and len(high_quality) >= 2 and types_present >= 3):
        score += 10

    if any(e.credibility_score < 30 or is_suspicious(e.text) for e in elements):
        issues.append("Some social proof elements appear generic or low-quality")
        recommendations.append("Replace generic social proof with authentic customer feedback")
        score -= 15

    return SocialProofResult(
        score=max(0, min(100, round(score))),
        issues=issues,
        recommendations=recommendations,
        elements=list(elements),
        summary=summary,
    )
