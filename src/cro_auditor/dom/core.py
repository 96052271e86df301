# src/cro_auditor/dom/core.py
import math
import re
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

_PX_RE = re.compile(r"-?\d+(?:\.\d+)?")

TRANSPARENT_BACKGROUNDS = ("", "transparent", "rgba(0, 0, 0, 0)", "rgba(0,0,0,0)")


def parse_px(value: Any, default: float = 0.0) -> float:
    """
    Converts a computed CSS length ('16px', '12px 24px', 14, None) to a float.
    Only the first length of a shorthand is used, mirroring parseInt/parseFloat.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            return math.inf if value > 0 else -math.inf
    match = _PX_RE.search(str(value))
    return float(match.group()) if match else default


class SnapshotModel(BaseModel):
    """Base for renderer-supplied models: immutable, camelCase tolerant, extra keys ignored."""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class Geometry(SnapshotModel):
    """Bounding box of an element relative to the top-left of the viewport (px)."""
    top: float = 0.0
    left: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @field_validator("top", "left", "width", "height", mode="before")
    @classmethod
    def coerce_length(cls, v: Any) -> float:
        return parse_px(v)

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def area(self) -> float:
        return max(0.0, self.width) * max(0.0, self.height)

    @property
    def center(self) -> tuple:
        return self.left + self.width / 2, self.top + self.height / 2

    @property
    def is_degenerate(self) -> bool:
        return self.width <= 0 or self.height <= 0


class StyleSubset(SnapshotModel):
    """
    The subset of computed CSS properties the analyzers read.
    Lengths are stored in px; unparsable values fall back to neutral defaults.
    """
    display: str = ""
    visibility: str = ""
    font_family: str = ""
    font_size: float = 16.0
    line_height: str = "normal"
    background_color: str = "rgba(0, 0, 0, 0)"
    border: str = ""
    border_radius: float = 0.0
    padding: float = 0.0
    padding_top: float = 0.0
    padding_bottom: float = 0.0
    padding_left: float = 0.0
    padding_right: float = 0.0
    margin_top: float = 0.0
    margin_bottom: float = 0.0
    margin_left: float = 0.0
    margin_right: float = 0.0
    min_height: float = 0.0
    width: float = 0.0
    gap: float = 0.0
    row_gap: float = 0.0

    @field_validator(
        "border_radius", "padding", "padding_top", "padding_bottom", "padding_left", "padding_right",
        "margin_top", "margin_bottom", "margin_left", "margin_right", "min_height", "width", "gap", "row_gap",
        mode="before",
    )
    @classmethod
    def coerce_length(cls, v: Any) -> float:
        return parse_px(v)

    @field_validator("font_size", mode="before")
    @classmethod
    def coerce_font_size(cls, v: Any) -> float:
        return parse_px(v, default=16.0)

    @field_validator(
        "display", "visibility", "font_family", "line_height", "background_color", "border", mode="before"
    )
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()

    @property
    def has_background(self) -> bool:
        return self.background_color.lower() not in TRANSPARENT_BACKGROUNDS

    @property
    def has_border(self) -> bool:
        return bool(self.border) and self.border != "none" and "0px" not in self.border

    @property
    def vertical_gap(self) -> float:
        return self.row_gap or self.gap

    @property
    def line_height_ratio(self) -> float:
        """Line height relative to the font size ('normal' is the browser default 1.2)."""
        raw = self.line_height.lower()
        if not raw or raw == "normal":
            return 1.2
        if raw.endswith("px"):
            return parse_px(raw) / (self.font_size or 16.0)
        return parse_px(raw, default=1.2) or 1.2


class AncestryFlags(SnapshotModel):
    """Results of closest(...) lookups the renderer evaluated for the element."""
    in_header: bool = False
    in_nav: bool = False
    in_footer: bool = False
    in_form: bool = False
    in_hero: bool = False
    in_sidebar: bool = False
    in_logo: bool = False


class DescendantFlags(SnapshotModel):
    """Results of querySelector(...) lookups below the element."""
    has_image: bool = False
    has_avatar: bool = False
    has_name: bool = False
    has_company: bool = False
    has_rating: bool = False
    has_logo_visual: bool = False
    has_social_icon: bool = False
    image_count: int = 0
    image_labels: List[str] = Field(default_factory=list)


class ElementRecord(SnapshotModel):
    """
    One rendered element as captured by the renderer. Records are immutable and
    addressed by their arena index; the analyzers never hold live DOM references.
    """
    index: int = 0
    tag: str
    text: str = ""
    class_tokens: List[str] = Field(default_factory=list)
    attributes: Dict[str, str] = Field(default_factory=dict)
    geometry: Geometry = Field(default_factory=Geometry)
    style: StyleSubset = Field(default_factory=StyleSubset)
    parent_style: Optional[StyleSubset] = None
    ancestry: AncestryFlags = Field(default_factory=AncestryFlags)
    descendants: DescendantFlags = Field(default_factory=DescendantFlags)
    sibling_text: str = ""

    @field_validator("tag", mode="before")
    @classmethod
    def normalize_tag(cls, v: Any) -> str:
        if not v or not isinstance(v, str):
            raise ValueError("element tag is required")
        return v.strip().lower()

    @field_validator("text", "sibling_text", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("class_tokens", mode="before")
    @classmethod
    def split_classes(cls, v: Any) -> List[str]:
        if v is None:
            return []
        if isinstance(v, str):
            return v.split()
        return [str(token) for token in v if token]

    @field_validator("attributes", mode="before")
    @classmethod
    def stringify_attributes(cls, v: Any) -> Dict[str, str]:
        if not isinstance(v, dict):
            return {}
        return {str(k).lower(): str(val) for k, val in v.items() if val is not None}

    # --- Convenience accessors ---

    @property
    def role(self) -> str:
        return self.attributes.get("role", "").lower()

    @property
    def class_name(self) -> str:
        return " ".join(self.class_tokens)

    @property
    def is_submit_input(self) -> bool:
        return self.tag == "input" and self.attributes.get("type", "").lower() == "submit"

    @property
    def display_text(self) -> str:
        """Trimmed text content; submit inputs expose their value instead."""
        if self.tag == "input":
            value = self.attributes.get("value", "").strip()
            if value:
                return value
        return self.text.strip()

    @property
    def is_hidden(self) -> bool:
        return (
            self.style.display == "none"
            or self.style.visibility == "hidden"
            or self.geometry.is_degenerate
        )


class Viewport(SnapshotModel):
    width: int = 1920
    height: int = 1080

    @field_validator("width", "height", mode="before")
    @classmethod
    def non_negative(cls, v: Any) -> int:
        px = parse_px(v)
        if not math.isfinite(px):
            raise ValueError("viewport dimensions must be finite")
        return max(0, int(px))

    @property
    def area(self) -> int:
        return self.width * self.height


class AnalyzerDefinition:
    """
    Configuration object binding a report category to the function that scores it.
    Modules in 'cro_auditor.analyzers' expose one as DEFINITION for discovery.
    """

    def __init__(
            self,
            category: str,
            label: str,
            analyze: Callable[..., Any],
            order: int = 100
    ):
        self.category = category
        self.label = label
        self.analyze = analyze
        self.order = order

    def __repr__(self) -> str:
        return f"AnalyzerDefinition(category={self.category!r}, order={self.order})"
