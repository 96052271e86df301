# src/cro_auditor/layout/density.py
import logging
import math
from typing import Iterable, List, Sequence

import numpy as np

from cro_auditor.dictionaries.matcher import matches_any_selector
from cro_auditor.dom.core import ElementRecord, Viewport
from cro_auditor.layout.models import DensityGrid, OverlapArea, SpacingAnalysis, SpacingCheck

logger = logging.getLogger(__name__)

STRUCTURAL_TAGS = frozenset({"html", "body", "head", "script", "style", "meta", "link", "title"})
MEDIA_TAGS = frozenset({"img", "video", "canvas", "svg", "button", "input", "iframe"})

HEADLINE_TAGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})
CTA_SPACING_SELECTORS = ("button", '[class*="cta"]', '[class*="btn"]', 'input[type="submit"]')
BLOCK_TAGS = frozenset({"div", "section", "article", "p"})
TEXT_TAGS = frozenset({"p", "div", "span", "li", "td", "th"})

CHARS_PER_LINE = 80
LINE_HEIGHT_PX = 20


def analyze_density(records: Iterable[ElementRecord], viewport: Viewport,
                    columns: int = 3, rows: int = 4) -> DensityGrid:
    """
    Partitions the viewport into columns x rows cells and counts elements by
    their center point. Degenerate boxes and boxes entirely above or below the
    viewport are ignored; centers that fall outside the grid are not counted.
    """
    columns, rows = max(1, int(columns)), max(1, int(rows))
    boxes = [
        r.geometry for r in records
        if not r.geometry.is_degenerate and r.geometry.bottom > 0 and r.geometry.top < viewport.height
    ]
    counts = np.zeros(columns * rows, dtype=np.int64)

    if boxes and viewport.width > 0 and viewport.height > 0:
        centers = np.array([box.center for box in boxes], dtype=float)
        cell_w, cell_h = viewport.width / columns, viewport.height / rows
        cols = np.floor(centers[:, 0] / cell_w).astype(np.int64)
        rws = np.floor(centers[:, 1] / cell_h).astype(np.int64)
        inside = (cols >= 0) & (cols < columns) & (rws >= 0) & (rws < rows)
        counts = np.bincount(rws[inside] * columns + cols[inside], minlength=columns * rows)

    grid = DensityGrid(
        columns=columns,
        rows=rows,
        per_cell_count=[int(c) for c in counts],
        total_elements=len(boxes),
    )
    logger.debug(f"Density grid {columns}x{rows}: max {grid.max_density}, {len(boxes)} elements")
    return grid


def content_rectangle(record: ElementRecord, viewport: Viewport):
    """
    Returns (left, top, right, bottom) for an element that counts as visible
    content, or None. Text blocks get a height estimated from their length.
    """
    g = record.geometry
    if record.tag in STRUCTURAL_TAGS:
        return None
    if g.top < 0 or g.top >= viewport.height:
        return None

    text = record.text.strip()
    has_text = len(text) > 3
    is_media = record.tag in MEDIA_TAGS

    # Text blocks without a render height are sized by the estimate below
    if g.is_degenerate and not (has_text and not is_media and g.width > 10):
        return None

    # Full-width, tall, empty wrappers are layout containers, not content
    if viewport.width and viewport.height:
        if g.width / viewport.width > 0.8 and g.height / viewport.height > 0.5 and not text:
            return None

    if not (has_text or is_media) or g.width <= 10:
        return None

    height = g.height
    if has_text and not is_media:
        estimated = math.ceil(len(text) / CHARS_PER_LINE) * LINE_HEIGHT_PX
        height = min(height, estimated) if height > 0 else estimated
    elif height <= 10:
        return None

    return g.left, g.top, g.left + g.width, g.top + height


def union_area(rects: Sequence[tuple], width: float, height: float) -> float:
    """
    Area covered by the rectangles after clipping to (0, 0, width, height).

    Rectangles are taken largest first; each contributes only the part of it not
    already covered. Coverage is tracked on the grid formed by all rectangle
    edges, so the result is exact and never exceeds the clip area.
    """
    clipped = []
    for left, top, right, bottom in rects:
        left, right = max(0.0, left), min(float(width), right)
        top, bottom = max(0.0, top), min(float(height), bottom)
        if right > left and bottom > top:
            clipped.append((left, top, right, bottom))
    if not clipped:
        return 0.0

    clipped.sort(key=lambda r: (r[2] - r[0]) * (r[3] - r[1]), reverse=True)
    xs = np.unique([v for r in clipped for v in (r[0], r[2])])
    ys = np.unique([v for r in clipped for v in (r[1], r[3])])
    cell_area = np.outer(np.diff(ys), np.diff(xs))
    covered = np.zeros(cell_area.shape, dtype=bool)

    total = 0.0
    for left, top, right, bottom in clipped:
        x0, x1 = np.searchsorted(xs, [left, right])
        y0, y1 = np.searchsorted(ys, [top, bottom])
        window = covered[y0:y1, x0:x1]
        total += float(cell_area[y0:y1, x0:x1][~window].sum())
        window[:] = True
    return total


def analyze_overlap_area(records: Iterable[ElementRecord], viewport: Viewport) -> OverlapArea:
    """DOM-estimated whitespace: 1 - (union of content boxes / viewport area), clamped to [0, 1]."""
    rects: List[tuple] = []
    for record in records:
        rect = content_rectangle(record, viewport)
        if rect is not None:
            rects.append(rect)

    viewport_area = viewport.area
    content_area = union_area(rects, viewport.width, viewport.height)
    if viewport_area <= 0:
        return OverlapArea(content_area=0.0, whitespace_ratio=0.0, content_elements=len(rects))

    ratio = max(0.0, min(1.0, 1.0 - content_area / viewport_area))
    logger.debug(f"Content area {content_area:.0f}px² over {len(rects)} elements, whitespace {ratio:.4f}")
    return OverlapArea(content_area=content_area, whitespace_ratio=round(ratio, 4), content_elements=len(rects))


def _mean(values: List[float], default: float = 0.0) -> float:
    return sum(values) / len(values) if values else default


def analyze_spacing(records: Iterable[ElementRecord]) -> SpacingAnalysis:
    """
    Average effective spacing around headlines, CTAs and content blocks, plus the
    average line height of text elements. Parent gap and padding count towards spacing.
    """
    head_top: List[float] = []
    head_bottom: List[float] = []
    cta_top: List[float] = []
    cta_bottom: List[float] = []
    block_margins: List[float] = []
    line_heights: List[float] = []

    for record in records:
        style = record.style
        parent = record.parent_style
        gap = parent.vertical_gap if parent else 0.0
        pad_top = parent.padding_top if parent else 0.0
        pad_bottom = parent.padding_bottom if parent else 0.0

        if record.tag in HEADLINE_TAGS:
            top = style.margin_top + gap * 0.5 + pad_top * 0.5
            bottom = style.margin_bottom + gap * 0.5 + pad_bottom * 0.5
            if top > 0 or bottom > 0:
                head_top.append(top)
                head_bottom.append(bottom)

        if matches_any_selector(record, CTA_SPACING_SELECTORS):
            cta_top.append(style.margin_top + gap * 0.5 + pad_top * 0.5)
            cta_bottom.append(style.margin_bottom + gap * 0.5 + pad_bottom * 0.5)

        if record.tag in BLOCK_TAGS:
            effective = style.margin_bottom + gap + style.padding_bottom * 0.5
            if effective > 0:
                block_margins.append(effective)

        if record.tag in TEXT_TAGS and len(record.text.strip()) > 20:
            ratio = style.line_height_ratio
            if 0.8 < ratio < 3:
                line_heights.append(ratio)

    headline = SpacingCheck(top=_mean(head_top), bottom=_mean(head_bottom))
    headline.adequate = headline.top >= 16 and headline.bottom >= 12
    cta = SpacingCheck(top=_mean(cta_top), bottom=_mean(cta_bottom))
    cta.adequate = cta.top >= 20 and cta.bottom >= 20
    block = _mean(block_margins)
    line_height = _mean(line_heights, default=1.2)

    return SpacingAnalysis(
        headline=headline,
        cta=cta,
        content_block_margin=block,
        content_block_adequate=block >= 16,
        line_height=line_height,
        line_height_adequate=line_height >= 1.4,
    )
