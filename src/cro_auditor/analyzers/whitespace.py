# src/cro_auditor/analyzers/whitespace.py
import logging
from typing import Optional

from cro_auditor.dom.core import AnalyzerDefinition
from cro_auditor.dom.models import PageSnapshot
from cro_auditor.layout.density import analyze_density, analyze_overlap_area, analyze_spacing
from cro_auditor.layout.raster import RasterDecodeError, analyze_raster, detect_theme, load_luma
from cro_auditor.model import CategoryResult
from cro_auditor.scoring.whitespace_scorer import (
    build_metrics, whitespace_issues, whitespace_recommendations, whitespace_score,
)
from cro_auditor.utils.config_manager import config_manager

logger = logging.getLogger(__name__)


def analyze_whitespace(snapshot: PageSnapshot, screenshot: Optional[bytes] = None) -> CategoryResult:
    """
    Combines the DOM estimate (grid density, overlap-aware content area, spacing)
    with the pixel-level ratio of the screenshot when one is supplied and decodable.
    """
    columns = config_manager.get_nested("whitespace.grid_columns", 3)
    rows = config_manager.get_nested("whitespace.grid_rows", 4)
    threshold = config_manager.get_nested("whitespace.pixel_threshold", 240)
    adaptive = config_manager.get_nested("whitespace.adaptive_threshold", False)
    edge_aware = config_manager.get_nested("whitespace.edge_aware", False)

    records = snapshot.elements
    density = analyze_density(records, snapshot.viewport, columns, rows)
    overlap = analyze_overlap_area(records, snapshot.viewport)
    spacing = analyze_spacing(records)

    raster_ratio = None
    theme = "light"
    if screenshot:
        try:
            detection = detect_theme(luma=load_luma(screenshot))
            theme = detection.theme
            if adaptive:
                threshold = detection.adaptive_threshold
            raster_ratio = analyze_raster(screenshot, threshold, edge_aware).ratio
        except RasterDecodeError as e:
            logger.warning(f"Screenshot analysis failed, falling back to DOM-based analysis: {e}")

    metrics = build_metrics(overlap.whitespace_ratio, raster_ratio, density, spacing, theme, threshold)
    score = whitespace_score(metrics)
    logger.info(
        f"Whitespace analysis complete: ratio {metrics.effective_ratio:.2f} "
        f"({'raster' if raster_ratio is not None else 'DOM'}), clutter {metrics.clutter_score}, score: {score}"
    )
    return CategoryResult(
        category="whitespace",
        score=score,
        issues=whitespace_issues(metrics),
        recommendations=whitespace_recommendations(metrics),
        metrics={
            "dom_ratio": metrics.dom_ratio,
            "raster_ratio": metrics.raster_ratio,
            "effective_ratio": metrics.effective_ratio,
            "clutter_score": metrics.clutter_score,
            "max_density": density.max_density,
            "density_per_section": density.per_cell_count,
            "content_area": overlap.content_area,
            "has_adequate_spacing": spacing.all_adequate,
            "theme": theme,
            "threshold": threshold,
        },
    )


DEFINITION = AnalyzerDefinition(
    category="whitespace",
    label="Whitespace",
    analyze=analyze_whitespace,
    order=20
)
