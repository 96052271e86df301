# src/cro_auditor/dom/models.py
from typing import Optional, List, Dict, Any

from pydantic import Field, field_validator

from .core import ElementRecord, SnapshotModel, Viewport, parse_px


class ImageRecord(SnapshotModel):
    """An <img> tag or CSS background image reported by the renderer."""
    src: str = ""
    kind: str = "img"  # 'img' or 'background'
    alt: Optional[str] = None
    role: str = ""
    width: float = 0.0
    height: float = 0.0
    is_above_fold: bool = False
    loading: str = ""
    fetch_priority: str = ""
    has_srcset: bool = False
    has_sizes: bool = False
    has_blur_placeholder: bool = False

    @field_validator("width", "height", mode="before")
    @classmethod
    def coerce_length(cls, v: Any) -> float:
        return parse_px(v)


class PageTimings(SnapshotModel):
    """Lab metrics from the page-speed collector (milliseconds, CLS unitless)."""
    performance_score: float = 0.0  # 0..1, Lighthouse style
    lcp: float = 0.0
    fcp: float = 0.0
    cls: float = 0.0
    tbt: float = 0.0
    speed_index: float = 0.0


class PageSnapshot(SnapshotModel):
    """
    Everything the renderer captured for one page load.

    The element list is the arena the analyzers index into; structured data holds
    the JSON-LD entries found on the page. The snapshot is never mutated.
    """
    url: str = ""
    viewport: Viewport = Field(default_factory=Viewport)
    elements: List[ElementRecord] = Field(default_factory=list)
    structured_data: List[Dict[str, Any]] = Field(default_factory=list)
    html: Optional[str] = None
    fonts: List[str] = Field(default_factory=list)
    images: List[ImageRecord] = Field(default_factory=list)
    timings: Optional[PageTimings] = None
    snapshot_errors: List[str] = Field(default_factory=list)

    def element(self, index: int) -> Optional[ElementRecord]:
        if 0 <= index < len(self.elements):
            return self.elements[index]
        return None
