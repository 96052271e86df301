# tests/core/test_engine.py
from unittest.mock import patch

import pytest

from cro_auditor.dom.core import AnalyzerDefinition
from cro_auditor.dom.engine import ScoringEngine
from cro_auditor.dom.models import PageSnapshot
from cro_auditor.dom.registry import AnalyzerRegistry
from cro_auditor.model import CategoryResult, CategoryStatus, PageReport, get_verdict
from cro_auditor.scoring.aggregator import overall_score


def _result(category, score):
    return CategoryResult(category=category, score=score)


def test_registry_discovers_all_categories():
    AnalyzerRegistry.discover()
    assert AnalyzerRegistry.get_all_categories() == [
        "cta", "whitespace", "fonts", "images", "social_proof", "page_speed",
    ]


def test_overall_score_skips_not_applicable():
    results = [_result("a", 80), _result("b", None), _result("c", 61)]
    assert overall_score(results) == 70


def test_overall_score_all_not_applicable():
    assert overall_score([_result("a", None), _result("b", None)]) is None


@pytest.mark.parametrize("score, verdict", [
    (None, None), (100, "Excellent"), (85, "Excellent"), (84, "Good"), (70, "Good"),
    (69, "Fair"), (50, "Fair"), (49, "Critical"), (0, "Critical"),
])
def test_verdict_bands(score, verdict):
    assert get_verdict(score) == verdict


def test_empty_snapshot_report():
    report = ScoringEngine().run_audit(PageSnapshot(url="https://example.com"))
    assert isinstance(report, PageReport)
    assert report.get("cta").score == 0
    assert report.get("social_proof").score == 0
    assert report.get("images").status is CategoryStatus.NOT_APPLICABLE
    assert report.get("fonts").score is None
    assert report.get("page_speed").score is None
    # mean of cta 0, social proof 0 and whitespace
    whitespace = report.get("whitespace").score
    assert report.overall_score == round(whitespace / 3)


def test_failing_analyzer_is_isolated():
    def explode(snapshot, screenshot=None):
        raise RuntimeError("boom")

    engine = ScoringEngine()
    engine.definitions = [
        AnalyzerDefinition("images", "Image optimization", explode, order=1),
        AnalyzerDefinition("fonts", "Font", lambda s, shot=None: _result("fonts", 90), order=2),
    ]
    report = engine.run_audit(PageSnapshot())

    failed = report.get("images")
    assert failed.score == 0
    assert failed.status is CategoryStatus.FAILED
    assert failed.issues == ["Image optimization analysis failed due to an error"]
    assert report.get("fonts").score == 90
    assert report.overall_score == 45


def test_failure_inside_real_analyzer_is_isolated():
    with patch("cro_auditor.analyzers.cta.extract_cta_signals", side_effect=ValueError("bad record")):
        report = ScoringEngine().run_audit(PageSnapshot())
    assert report.get("cta").status is CategoryStatus.FAILED
    assert report.get("cta").issues == ["CTA analysis failed due to an error"]
    assert report.get("social_proof").status is CategoryStatus.ANALYZED


def test_report_serializes_subclass_fields(make_record):
    snapshot = PageSnapshot(elements=[
        make_record(tag="button", text="Start free trial", classes=["btn-primary"], top=300),
    ])
    dumped = ScoringEngine().run_audit(snapshot).model_dump(mode="json")
    assert dumped["categories"]["cta"]["primary_cta"]["text"] == "Start free trial"
    assert "summary" in dumped["categories"]["social_proof"]
