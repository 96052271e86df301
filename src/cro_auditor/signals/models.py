# src/cro_auditor/signals/models.py
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from cro_auditor.dom.core import Geometry

CTAType = Literal["primary", "secondary", "form-submit", "text-link", "other"]
Strength = Literal["strong", "medium", "weak"]
Level = Literal["high", "medium", "low"]
CTAContext = Literal["hero", "header", "content", "sidebar", "footer", "form", "other"]

SocialProofType = Literal[
    "testimonial", "review", "rating", "trust-badge", "customer-count",
    "social-media", "certification", "partnership", "case-study", "news-mention",
]
SocialProofContext = Literal["hero", "header", "content", "sidebar", "footer", "other"]


class Signal(BaseModel):
    """A classified domain object derived from one element record."""
    model_config = ConfigDict(frozen=True)

    index: int = -1  # arena index of the source record, -1 for annotation-derived signals
    text: str
    is_above_fold: bool = False
    position: Geometry = Field(default_factory=Geometry)


class CTASignal(Signal):
    type: CTAType = "other"
    action_strength: Strength = "medium"
    urgency: Level = "low"
    visibility: Level = "medium"
    context: CTAContext = "content"
    has_value_proposition: bool = False
    has_urgency: bool = False
    has_guarantee: bool = False
    mobile_optimized: bool = True


class SocialProofSignal(Signal):
    type: SocialProofType
    credibility_score: int = Field(default=50, ge=0, le=100)
    has_image: bool = False
    has_name: bool = False
    has_company: bool = False
    has_rating: bool = False
    visibility: Level = "medium"
    context: SocialProofContext = "content"
    source: Literal["element", "structured-data"] = "element"
