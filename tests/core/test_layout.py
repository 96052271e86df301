# tests/core/test_layout.py
import pytest

from cro_auditor.dom.core import Viewport
from cro_auditor.layout.density import (
    analyze_density, analyze_overlap_area, analyze_spacing, content_rectangle, union_area,
)


# --- Density grid ---

def test_center_point_assignment(make_record):
    viewport = Viewport(width=300, height=400)
    # Spans two columns but its center sits in the middle one
    records = [
        make_record(left=50, top=10, width=150, height=20),
        make_record(left=210, top=310, width=50, height=50),
    ]
    grid = analyze_density(records, viewport, columns=3, rows=4)
    assert grid.per_cell_count == [0, 1, 0,
                                   0, 0, 0,
                                   0, 0, 0,
                                   0, 0, 1]
    assert grid.max_density == 1


def test_degenerate_and_offscreen_elements_are_excluded(make_record):
    viewport = Viewport(width=300, height=400)
    records = [
        make_record(width=0, height=0),
        make_record(top=900, height=50),
        make_record(top=-200, height=50),
        make_record(top=10, left=10, width=20, height=20),
    ]
    grid = analyze_density(records, viewport, columns=3, rows=4)
    assert grid.total_elements == 1
    assert sum(grid.per_cell_count) == 1


def test_grid_sum_never_exceeds_qualifying(make_record):
    viewport = Viewport(width=300, height=400)
    # Center falls right of the viewport
    records = [make_record(left=280, top=10, width=200, height=20), make_record(left=0, top=0, width=10, height=10)]
    grid = analyze_density(records, viewport)
    assert sum(grid.per_cell_count) <= grid.total_elements


def test_empty_grid():
    grid = analyze_density([], Viewport(width=300, height=400), columns=2, rows=2)
    assert grid.per_cell_count == [0, 0, 0, 0]
    assert grid.max_density == 0
    assert grid.average_density == 0


# --- Overlap-aware area ---

def test_union_of_disjoint_rectangles():
    rects = [(0, 0, 10, 10), (20, 20, 30, 30)]
    assert union_area(rects, 100, 100) == pytest.approx(200)


def test_union_counts_overlap_once():
    rects = [(0, 0, 10, 10), (5, 5, 15, 15)]
    assert union_area(rects, 100, 100) == pytest.approx(175)


def test_union_of_nested_rectangles():
    rects = [(0, 0, 50, 50), (10, 10, 20, 20), (12, 12, 18, 18)]
    assert union_area(rects, 100, 100) == pytest.approx(2500)


def test_union_is_clipped_to_viewport():
    assert union_area([(-50, -50, 500, 500)], 100, 100) == pytest.approx(10000)


def test_union_is_monotonic():
    rects = [(0, 0, 40, 30), (20, 10, 60, 50), (70, 0, 90, 90)]
    additions = [(10, 10, 30, 30), (0, 0, 100, 5), (95, 95, 120, 120)]
    for extra in additions:
        before = union_area(rects, 100, 100)
        after = union_area(rects + [extra], 100, 100)
        assert after >= before
        assert after <= 100 * 100


def test_text_height_is_estimated(make_record, viewport):
    record = make_record(tag="p", text="x" * 170, top=0, left=0, width=600, height=500)
    assert content_rectangle(record, viewport) == (0, 0, 600, 60)


def test_text_without_render_height_uses_estimate(make_record, viewport):
    record = make_record(tag="p", text="x" * 160, top=0, left=0, width=500, height=0)
    assert content_rectangle(record, viewport) == (0, 0, 500, 40)

    result = analyze_overlap_area([record], viewport)
    assert result.content_area == pytest.approx(20000)
    assert result.whitespace_ratio < 1.0


def test_zero_height_media_and_narrow_text_are_skipped(make_record, viewport):
    assert content_rectangle(make_record(tag="img", width=200, height=0), viewport) is None
    assert content_rectangle(make_record(tag="p", text="x" * 160, width=8, height=0), viewport) is None


def test_empty_layout_wrapper_is_not_content(make_record, viewport):
    wrapper = make_record(tag="div", text="", top=0, left=0, width=1900, height=900)
    assert content_rectangle(wrapper, viewport) is None


def test_media_needs_height(make_record, viewport):
    assert content_rectangle(make_record(tag="img", width=200, height=8), viewport) is None
    assert content_rectangle(make_record(tag="img", top=0, left=0, width=200, height=100), viewport) == (0, 0, 200, 100)


def test_overlap_ratio(make_record):
    viewport = Viewport(width=100, height=100)
    records = [
        make_record(tag="img", top=0, left=0, width=50, height=50),
        make_record(tag="img", top=25, left=25, width=50, height=50),
    ]
    result = analyze_overlap_area(records, viewport)
    assert result.content_area == pytest.approx(4375)
    assert result.whitespace_ratio == pytest.approx(0.5625)


def test_overlap_with_zero_viewport(make_record):
    result = analyze_overlap_area([make_record(tag="img")], Viewport(width=0, height=0))
    assert result.whitespace_ratio == 0.0


def test_no_content_is_all_whitespace(viewport):
    assert analyze_overlap_area([], viewport).whitespace_ratio == 1.0


# --- Spacing ---

def test_spacing_with_parent_gap(make_record):
    parent = {"gap": "16px", "padding_top": "8px", "padding_bottom": "8px"}
    records = [
        make_record(tag="h1", text="Headline", style={"margin_top": "8px", "margin_bottom": "4px"},
                    parent_style=parent),
        make_record(tag="button", text="Go", style={"margin_top": "16px", "margin_bottom": "16px"},
                    parent_style=parent),
        make_record(tag="p", text="A paragraph long enough to count for line height.",
                    style={"margin_bottom": "16px", "line_height": "24px", "font_size": "16px"}),
    ]
    spacing = analyze_spacing(records)
    # 8 + 16/2 + 8/2
    assert spacing.headline.top == pytest.approx(20)
    assert spacing.headline.adequate
    assert spacing.cta.top == pytest.approx(28)
    assert spacing.cta.adequate
    assert spacing.line_height == pytest.approx(1.5)
    assert spacing.line_height_adequate
    assert spacing.content_block_adequate


def test_spacing_defaults_are_inadequate():
    spacing = analyze_spacing([])
    assert not spacing.all_adequate
    assert spacing.line_height == pytest.approx(1.2)
