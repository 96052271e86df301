# tests/core/test_raster.py
import io

import numpy as np
import pytest
from PIL import Image

from cro_auditor.layout.raster import (
    RasterDecodeError, analyze_raster, calculate_adaptive_threshold, count_content_pixels, detect_theme, load_luma,
)


def test_all_white_is_all_whitespace(png_bytes):
    result = analyze_raster(png_bytes((255, 255, 255)), threshold=240)
    assert result.total_pixels == 100
    assert result.content_pixels == 0
    assert result.ratio == 1.0


def test_all_black_is_all_content(png_bytes):
    result = analyze_raster(png_bytes((0, 0, 0)), threshold=240)
    assert result.content_pixels == 100
    assert result.ratio == 0.0


def test_half_filled_image():
    img = Image.new("RGB", (10, 10), (255, 255, 255))
    for x in range(5):
        for y in range(10):
            img.putpixel((x, y), (20, 20, 20))
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    assert analyze_raster(buffer.getvalue()).ratio == pytest.approx(0.5)


def test_luma_weights(png_bytes):
    luma = load_luma(png_bytes((255, 0, 0), size=(1, 1)))
    assert luma[0, 0] == pytest.approx(0.299 * 255)


def test_threshold_splits_content_from_background(png_bytes):
    assert analyze_raster(png_bytes((245, 245, 245)), threshold=240).ratio == 1.0
    assert analyze_raster(png_bytes((200, 200, 200)), threshold=240).ratio == 0.0
    assert analyze_raster(png_bytes((200, 200, 200)), threshold=180).ratio == 1.0


def test_undecodable_bytes_raise():
    with pytest.raises(RasterDecodeError):
        analyze_raster(b"definitely not an image")
    with pytest.raises(RasterDecodeError):
        analyze_raster(b"")


def test_oversized_image_raises_decode_error(png_bytes, monkeypatch):
    # Pillow refuses images over twice MAX_IMAGE_PIXELS
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)
    with pytest.raises(RasterDecodeError):
        load_luma(png_bytes((255, 255, 255), size=(10, 10)))


def test_edge_aware_ignores_flat_near_white():
    # Flat 230 field: within 20 of the threshold, no edges
    luma = np.full((6, 6), 230.0)
    assert count_content_pixels(luma, 240) == 36
    # Only the right column and bottom row use the plain threshold
    assert count_content_pixels(luma, 240, edge_aware=True) == 11


def test_edge_aware_keeps_dark_pixels():
    luma = np.full((4, 4), 255.0)
    luma[1, 1] = 10.0
    assert count_content_pixels(luma, 240, edge_aware=True) == 1


def test_theme_detection(png_bytes):
    assert detect_theme(png_bytes((255, 255, 255))).theme == "light"
    assert detect_theme(png_bytes((10, 10, 10))).theme == "dark"
    mixed = detect_theme(png_bytes((128, 128, 128)))
    assert mixed.theme == "mixed"
    assert mixed.adaptive_threshold == 170


@pytest.mark.parametrize("theme, luminance, expected", [
    ("light", 255, 250),
    ("light", 220, 240),
    ("light", 150, 220),
    ("dark", 20, 80),
    ("dark", 50, 100),
    ("dark", 70, 120),
    ("mixed", 0, 106),
    ("mixed", 255, 234),
])
def test_adaptive_threshold(theme, luminance, expected):
    assert calculate_adaptive_threshold(theme, luminance) == expected
