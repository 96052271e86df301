# src/cro_auditor/layout/models.py
from typing import List, Optional

from pydantic import BaseModel, Field


class DensityGrid(BaseModel):
    """Element counts per grid cell, row-major. Each element lands in at most one cell."""
    columns: int
    rows: int
    per_cell_count: List[int] = Field(default_factory=list)
    total_elements: int = 0

    @property
    def max_density(self) -> int:
        return max(self.per_cell_count, default=0)

    @property
    def average_density(self) -> float:
        if not self.per_cell_count:
            return 0.0
        return sum(self.per_cell_count) / len(self.per_cell_count)


class OverlapArea(BaseModel):
    content_area: float = 0.0
    whitespace_ratio: float = Field(default=0.0, ge=0.0, le=1.0)
    content_elements: int = 0


class SpacingCheck(BaseModel):
    top: float = 0.0
    bottom: float = 0.0
    adequate: bool = False


class SpacingAnalysis(BaseModel):
    headline: SpacingCheck = Field(default_factory=SpacingCheck)
    cta: SpacingCheck = Field(default_factory=SpacingCheck)
    content_block_margin: float = 0.0
    content_block_adequate: bool = False
    line_height: float = 1.2
    line_height_adequate: bool = False

    @property
    def all_adequate(self) -> bool:
        return (self.headline.adequate and self.cta.adequate
                and self.content_block_adequate and self.line_height_adequate)


class RasterAnalysis(BaseModel):
    total_pixels: int = 0
    content_pixels: int = 0
    ratio: float = Field(default=0.0, ge=0.0, le=1.0)
    threshold: int = 240


class ThemeDetection(BaseModel):
    theme: str = "light"  # 'light', 'dark' or 'mixed'
    average_luminance: float = 255.0
    adaptive_threshold: int = 240


class WhitespaceMetrics(BaseModel):
    dom_ratio: float = Field(default=0.0, ge=0.0, le=1.0)
    raster_ratio: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    clutter_score: int = Field(default=0, ge=0, le=100)
    density: Optional[DensityGrid] = None
    spacing: Optional[SpacingAnalysis] = None
    theme: str = "light"
    threshold: int = 240

    @property
    def effective_ratio(self) -> float:
        """The raster ratio supersedes the DOM estimate whenever it was obtained."""
        return self.raster_ratio if self.raster_ratio is not None else self.dom_ratio
