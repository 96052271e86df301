from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, SerializeAsAny

from cro_auditor.signals.models import CTASignal, SocialProofSignal


class CroAuditorError(Exception):
    """Base class for errors raised by the auditor."""


class CategoryStatus(str, Enum):
    ANALYZED = "analyzed"
    NOT_APPLICABLE = "not_applicable"
    FAILED = "failed"


class CategoryResult(BaseModel):
    """
    Terminal artifact of one analyzer.

    A `None` score means the category does not apply to the page (e.g. no images)
    and must be left out of the overall average, which is different from a 0.
    """
    category: str
    score: Optional[int] = Field(default=None, ge=0, le=100)
    status: CategoryStatus = CategoryStatus.ANALYZED
    issues: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    metrics: Dict[str, Any] = Field(default_factory=dict)

    @property
    def is_applicable(self) -> bool:
        return self.score is not None

    @classmethod
    def not_applicable(cls, category: str, recommendations: Optional[List[str]] = None,
                       **metrics: Any) -> "CategoryResult":
        return cls(
            category=category,
            score=None,
            status=CategoryStatus.NOT_APPLICABLE,
            recommendations=recommendations or [],
            metrics=metrics,
        )

    @classmethod
    def failed(cls, category: str, label: str) -> "CategoryResult":
        return cls(
            category=category,
            score=0,
            status=CategoryStatus.FAILED,
            issues=[f"{label} analysis failed due to an error"],
        )


class CTAResult(CategoryResult):
    category: str = "cta"
    ctas: List[CTASignal] = Field(default_factory=list)
    primary_cta: Optional[CTASignal] = None
    secondary_ctas: List[CTASignal] = Field(default_factory=list)


class SocialProofResult(CategoryResult):
    category: str = "social_proof"
    elements: List[SocialProofSignal] = Field(default_factory=list)
    summary: Dict[str, int] = Field(default_factory=dict)


class PageReport(BaseModel):
    """Per-page outcome: every category result plus the overall score and verdict."""
    url: str = ""
    categories: Dict[str, SerializeAsAny[CategoryResult]] = Field(default_factory=dict)
    overall_score: Optional[int] = Field(default=None, ge=0, le=100)
    verdict: Optional[str] = None

    def get(self, category: str) -> Optional[CategoryResult]:
        return self.categories.get(category)


def get_verdict(score: Optional[int]) -> Optional[str]:
    """Human-readable status label for an overall score."""
    if score is None:
        return None
    if score >= 85:
        return "Excellent"
    if score >= 70:
        return "Good"
    if score >= 50:
        return "Fair"
    return "Critical"
