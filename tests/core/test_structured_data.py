# tests/core/test_structured_data.py
from cro_auditor.signals.structured_data import name_of, signals_from_structured_data

PRODUCT = {
    "@context": "https://schema.org",
    "@type": "Product",
    "name": "Widget Pro",
    "aggregateRating": {"@type": "AggregateRating", "ratingValue": "4.8", "reviewCount": "1250"},
    "review": [{
        "@type": "Review",
        "reviewBody": "Setup took ten minutes and support answered every question within the hour.",
        "author": {"@type": "Person", "name": "Maria Lopez"},
        "reviewRating": {"@type": "Rating", "ratingValue": "5", "bestRating": "5"},
    }],
}


def test_name_of_variants():
    assert name_of("Acme") == "Acme"
    assert name_of({"name": "Acme"}) == "Acme"
    assert name_of([{"name": "First"}, {"name": "Second"}]) == "First"
    assert name_of(None) == ""


def test_nested_review_and_rating():
    signals = signals_from_structured_data([PRODUCT])
    assert [s.type for s in signals] == ["review", "rating"]

    review = signals[0]
    assert "Maria Lopez" in review.text
    assert "(Rated 5/5)" in review.text
    assert review.has_name and review.has_rating
    assert review.credibility_score >= 80


def test_annotation_signals_have_neutral_placement():
    for signal in signals_from_structured_data([PRODUCT]):
        assert signal.source == "structured-data"
        assert signal.context == "other"
        assert signal.visibility == "medium"
        assert not signal.is_above_fold


def test_graph_is_walked():
    doc = {"@context": "https://schema.org", "@graph": [PRODUCT]}
    assert len(signals_from_structured_data([doc])) == 2


def test_organization_awards_become_trust_badges():
    org = {
        "@type": "Organization",
        "name": "Acme Analytics",
        "award": ["Best Analytics Platform 2024", "Customer Choice Award"],
    }
    signals = signals_from_structured_data([org])
    assert [s.type for s in signals] == ["trust-badge", "trust-badge"]
    assert signals[0].text == "Acme Analytics awarded Best Analytics Platform 2024"


def test_organization_nested_entries_are_not_duplicated():
    org = {
        "@type": "Organization",
        "name": "Acme Analytics",
        "aggregateRating": {"@type": "AggregateRating", "ratingValue": "4.6", "ratingCount": "310"},
    }
    assert len(signals_from_structured_data([org])) == 1


def test_article_becomes_news_mention():
    article = {
        "@type": "NewsArticle",
        "headline": "Acme raises its series B",
        "publisher": {"@type": "Organization", "name": "The Daily Ledger"},
    }
    signals = signals_from_structured_data([article])
    assert len(signals) == 1
    assert signals[0].type == "news-mention"
    assert signals[0].text.startswith("Featured in The Daily Ledger")


def test_malformed_entries_are_ignored():
    entries = ["not an object", 42, None, {"@type": "Review"}, {"@type": ["Thing", None]}]
    assert signals_from_structured_data(entries) == []
