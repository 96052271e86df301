# tests/core/test_builder.py
import pytest

from cro_auditor.dom.builder import SnapshotBuilder, extract_structured_data

HTML = """
<html><head>
<script type="application/ld+json">{"@type": "Organization", "name": "Acme"}</script>
<script type="application/ld+json">[{"@type": "Review", "reviewBody": "Great"}, "noise"]</script>
<script type="application/ld+json">{not json</script>
<script>var x = 1;</script>
</head><body></body></html>
"""


def test_extract_structured_data():
    entries = extract_structured_data(HTML)
    assert [e["@type"] for e in entries] == ["Organization", "Review"]


def test_extract_structured_data_empty():
    assert extract_structured_data(None) == []
    assert extract_structured_data("<p>no scripts</p>") == []


def test_parse_snapshot_renderer_payload():
    payload = {
        "url": "https://example.com/",
        "viewport": {"width": 1440, "height": 900},
        "elements": [
            {
                "tag": "BUTTON",
                "text": "Get started",
                "classTokens": "btn btn-primary",
                "attributes": {"type": "button", "data-track": None},
                "geometry": {"top": "120px", "left": 40, "width": "180px", "height": 48},
                "style": {"fontSize": "18px", "lineHeight": "normal", "paddingTop": "12px"},
                "ancestry": {"inHero": True},
            },
            {"tag": "p", "text": "Body copy"},
        ],
        "timings": {"performanceScore": 0.91, "lcp": 1800},
    }
    snapshot = SnapshotBuilder().parse_snapshot(payload)

    assert snapshot.url == "https://example.com/"
    assert snapshot.viewport.height == 900
    button = snapshot.elements[0]
    assert button.tag == "button"
    assert button.class_tokens == ["btn", "btn-primary"]
    assert button.attributes == {"type": "button"}
    assert button.geometry.width == 180
    assert button.style.font_size == 18
    assert button.ancestry.in_hero
    assert snapshot.timings.performance_score == 0.91
    assert snapshot.snapshot_errors == []


def test_malformed_elements_are_dropped_and_reindexed():
    payload = {
        "elements": [
            {"tag": "h1", "text": "Welcome"},
            {"text": "no tag"},
            "not a record",
            {"tag": "a", "text": "Shop now", "geometry": {"top": "oops"}},
        ]
    }
    snapshot = SnapshotBuilder().parse_snapshot(payload)
    assert [e.tag for e in snapshot.elements] == ["h1", "a"]
    assert [e.index for e in snapshot.elements] == [0, 1]
    assert snapshot.elements[1].geometry.top == 0
    assert len(snapshot.snapshot_errors) == 2


def test_structured_data_falls_back_to_html():
    snapshot = SnapshotBuilder().parse_snapshot({"html": HTML})
    assert len(snapshot.structured_data) == 2


def test_explicit_structured_data_wins():
    snapshot = SnapshotBuilder().parse_snapshot({
        "html": HTML,
        "structuredData": {"@type": "AggregateRating", "ratingValue": 4.5},
    })
    assert snapshot.structured_data == [{"@type": "AggregateRating", "ratingValue": 4.5}]


def test_missing_viewport_uses_configured_default():
    snapshot = SnapshotBuilder().parse_snapshot({})
    assert (snapshot.viewport.width, snapshot.viewport.height) == (1920, 1080)
    assert snapshot.elements == []
    assert snapshot.timings is None


@pytest.mark.parametrize("width", [float("inf"), float("-inf"), 10 ** 400])
def test_non_finite_viewport_uses_configured_default(width):
    snapshot = SnapshotBuilder().parse_snapshot({"viewport": {"width": width, "height": 800}})
    assert (snapshot.viewport.width, snapshot.viewport.height) == (1920, 1080)
    assert any(error.startswith("viewport") for error in snapshot.snapshot_errors)
