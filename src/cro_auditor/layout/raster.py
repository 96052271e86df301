# src/cro_auditor/layout/raster.py
import io
import logging
from typing import Optional

import numpy as np
from PIL import Image, UnidentifiedImageError

from cro_auditor.layout.models import RasterAnalysis, ThemeDetection
from cro_auditor.model import CroAuditorError

logger = logging.getLogger(__name__)

NEAR_THRESHOLD_BAND = 20
LOW_GRADIENT = 10
THEME_SAMPLES = 5


class RasterDecodeError(CroAuditorError):
    """Raised when a screenshot cannot be decoded into pixels."""


def load_luma(image_bytes: bytes) -> np.ndarray:
    """Decodes an image and returns its luma plane (0.299 R + 0.587 G + 0.114 B) as float64."""
    if not image_bytes:
        raise RasterDecodeError("Empty image buffer")
    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            rgb = np.asarray(img.convert("RGB"), dtype=np.float64)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise RasterDecodeError(f"Could not decode screenshot: {e}") from e
    return rgb[..., 0] * 0.299 + rgb[..., 1] * 0.587 + rgb[..., 2] * 0.114


def count_content_pixels(luma: np.ndarray, threshold: float, edge_aware: bool = False) -> int:
    """
    Plain mode: a pixel is content iff its luma is below the threshold.

    Edge-aware mode keeps near-white pixels (within the band just under the
    threshold) as background unless they sit on a visible edge, so watermarks
    and soft gradients are not counted as content.
    """
    if not edge_aware:
        return int(np.count_nonzero(luma < threshold))

    below = luma < threshold
    content = luma < threshold - NEAR_THRESHOLD_BAND

    height, width = luma.shape
    gradient = np.zeros_like(luma)
    if height > 1 and width > 1:
        inner = luma[:-1, :-1]
        gradient[:-1, :-1] = np.abs(inner - luma[:-1, 1:]) + np.abs(inner - luma[1:, :-1])

    border = np.zeros_like(below)
    border[-1, :] = True
    border[:, -1] = True

    band = below & ~content
    content |= band & border
    content |= band & ~border & (gradient >= LOW_GRADIENT)
    return int(np.count_nonzero(content))


def analyze_raster(image_bytes: bytes, threshold: int = 240, edge_aware: bool = False) -> RasterAnalysis:
    """Whitespace ratio of a rendered screenshot: 1 - content pixels / total pixels."""
    luma = load_luma(image_bytes)
    total = int(luma.size)
    if total == 0:
        return RasterAnalysis(threshold=threshold)

    content = count_content_pixels(luma, threshold, edge_aware)
    ratio = (total - content) / total
    logger.info(
        f"Screenshot analysis: {total} pixels, {content} content "
        f"({round((1 - ratio) * 100)}% content, threshold {threshold})"
    )
    return RasterAnalysis(total_pixels=total, content_pixels=content, ratio=ratio, threshold=threshold)


def calculate_adaptive_threshold(theme: str, average_luminance: float) -> int:
    if theme == "light":
        threshold = 240
        if average_luminance > 250:
            threshold = 250
        elif average_luminance < 180:
            threshold = 220
    elif theme == "dark":
        threshold = 100
        if average_luminance < 30:
            threshold = 80
        elif average_luminance > 60:
            threshold = 120
    else:
        threshold = max(100.0, min(240.0, 170 + (average_luminance - 128) * 0.5))
    return round(threshold)


def detect_theme(image_bytes: Optional[bytes] = None, luma: Optional[np.ndarray] = None) -> ThemeDetection:
    """Samples a 5x5 grid of luma values and classifies the page as light, dark or mixed."""
    if luma is None:
        luma = load_luma(image_bytes)
    height, width = luma.shape
    if height == 0 or width == 0:
        return ThemeDetection()

    ys = ((np.arange(THEME_SAMPLES) + 0.5) * height / THEME_SAMPLES).astype(int)
    xs = ((np.arange(THEME_SAMPLES) + 0.5) * width / THEME_SAMPLES).astype(int)
    average = float(luma[np.ix_(np.clip(ys, 0, height - 1), np.clip(xs, 0, width - 1))].mean())

    if average > 200:
        theme = "light"
    elif average < 80:
        theme = "dark"
    else:
        theme = "mixed"
    return ThemeDetection(
        theme=theme,
        average_luminance=average,
        adaptive_threshold=calculate_adaptive_threshold(theme, average),
    )
