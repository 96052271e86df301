# tests/core/test_cta.py
import pytest

from cro_auditor.analyzers.cta import analyze_cta
from cro_auditor.dom.models import PageSnapshot
from cro_auditor.scoring.cta_scorer import priority_score, score_ctas, select_primary
from cro_auditor.signals.cta_classifier import (
    analyze_action_strength, analyze_urgency, classify_additional_cta, classify_cta, determine_context,
    extract_cta_signals,
)
from cro_auditor.signals.models import CTASignal

BUTTON_STYLE = {
    "font_size": "16px",
    "padding": "12px 24px",
    "background_color": "rgb(0, 102, 255)",
}


@pytest.fixture
def three_ctas(make_record):
    """A hero 'Get Started' button plus two weak links below the fold."""
    return [
        make_record(tag="button", text="Get Started", classes=["btn-primary"], top=300, width=160, height=48,
                    style=BUTTON_STYLE, ancestry={"in_hero": True},
                    sibling_text="Free 14-day trial. Save hours every week."),
        make_record(tag="a", text="Learn more", attributes={"href": "/resources"}, top=1500, width=100, height=20),
        make_record(tag="a", text="View the demo", attributes={"href": "/product-tour"}, top=1700, width=110,
                    height=20),
    ]


# --- Classification ---

def test_three_ctas_primary_is_get_started(three_ctas, viewport):
    signals = extract_cta_signals(three_ctas, viewport)
    assert [s.text for s in signals] == ["Get Started", "Learn more", "View the demo"]

    primary = select_primary(signals)
    assert primary.text == "Get Started"
    assert primary.type == "primary"
    assert primary.context == "hero"
    assert primary.is_above_fold


def test_three_ctas_score_has_no_competing_penalty(three_ctas, viewport):
    signals = extract_cta_signals(three_ctas, viewport)
    result = score_ctas(signals, select_primary(signals))

    assert not any("competing" in issue for issue in result.issues)
    assert result.score == 100
    assert result.metrics == {"total": 3, "above_fold": 1}
    assert [s.text for s in result.secondary_ctas] == ["Learn more", "View the demo"]


def test_button_in_form_is_form_submit(make_record, viewport):
    record = make_record(tag="button", text="Send message", ancestry={"in_form": True})
    signal = classify_cta(record, viewport, "secondary")
    assert signal.type == "form-submit"


def test_submit_input_uses_value_as_text(make_record, viewport):
    record = make_record(tag="input", attributes={"type": "submit", "value": "Create my account"})
    signal = classify_cta(record, viewport, "form-submit")
    assert signal.text == "Create my account"
    assert signal.type == "form-submit"


def test_prominent_secondary_with_strong_word_is_promoted(make_record, viewport):
    record = make_record(tag="a", text="Download the guide", classes=["btn"], attributes={"href": "/guide"},
                         style={"background_color": "rgb(255, 0, 0)"})
    signal = classify_cta(record, viewport, "secondary")
    assert signal.type == "primary"


def test_transparent_secondary_is_not_promoted(make_record, viewport):
    record = make_record(tag="a", text="Download the guide", classes=["btn"], attributes={"href": "/guide"})
    assert classify_cta(record, viewport, "secondary").type == "secondary"


@pytest.mark.parametrize("text", ["John D.", "Sarah", "JD", "About us", "Next", "Slide 3", "2/5", "Acme logo"])
def test_text_gate_rejects_non_actions(make_record, viewport, text):
    record = make_record(tag="button", text=text)
    assert classify_cta(record, viewport, "secondary") is None


def test_hidden_elements_are_rejected(make_record, viewport):
    hidden = make_record(tag="button", text="Start your trial", style={"display": "none"})
    collapsed = make_record(tag="button", text="Start your trial", width=0, height=0)
    assert classify_cta(hidden, viewport, "secondary") is None
    assert classify_cta(collapsed, viewport, "secondary") is None


def test_logo_ancestry_is_rejected(make_record, viewport):
    record = make_record(tag="a", text="Start here", attributes={"href": "/"}, ancestry={"in_logo": True})
    assert classify_cta(record, viewport, "secondary") is None


def test_second_pass_recovers_price_prefixed_cta(make_record, viewport):
    record = make_record(tag="a", text="$150 – Build Your Website", attributes={"href": "/packages/basic"})
    signals = extract_cta_signals([record], viewport)
    assert len(signals) == 1
    assert signals[0].text == "$150 – Build Your Website"
    assert signals[0].type == "secondary"


def test_second_pass_truncates_long_text(make_record, viewport):
    text = "Get started with a guided onboarding session " * 3
    record = make_record(tag="a", text=text.strip(), attributes={"href": "/onboarding"})
    signal = classify_additional_cta(record, viewport)
    assert signal.text.endswith("...")
    assert len(signal.text) == 103


def test_second_pass_skips_elements_claimed_by_groups(make_record, viewport):
    record = make_record(tag="a", text="Get started", classes=["cta"], attributes={"href": "/signup"})
    signals = extract_cta_signals([record], viewport)
    assert len(signals) == 1
    assert signals[0].type == "primary"


def test_empty_text_elements_are_skipped(make_record, viewport):
    records = [
        make_record(tag="button", text=""),
        make_record(tag="button", text="Start free trial", top=200),
    ]
    signals = extract_cta_signals(records, viewport)
    assert [s.text for s in signals] == ["Start free trial"]


# --- Per-signal attributes ---

def test_context_rules(make_record, viewport):
    assert determine_context(make_record(top=500), viewport) == "hero"
    assert determine_context(make_record(top=40, ancestry={"in_header": True}), viewport) == "header"
    assert determine_context(make_record(top=2000, ancestry={"in_footer": True}), viewport) == "footer"
    assert determine_context(make_record(top=2000, ancestry={"in_form": True}), viewport) == "form"
    assert determine_context(make_record(top=2000), viewport) == "content"


def test_action_strength():
    assert analyze_action_strength("Get Started") == "strong"
    assert analyze_action_strength("Learn more") == "weak"
    assert analyze_action_strength("Our pricing") == "medium"


def test_urgency_levels():
    assert analyze_urgency("Only 3 left in stock") == "high"
    assert analyze_urgency("Join today") == "high"
    assert analyze_urgency("Try it free") == "medium"
    assert analyze_urgency("Learn more") == "low"


# --- Scoring ---

def test_zero_ctas_fires_both_penalties():
    result = score_ctas([], None)
    assert result.score == 0
    assert "No clear CTA above the fold" in result.issues
    assert "No CTAs found on page" in result.issues
    assert result.primary_cta is None


def test_empty_snapshot_scores_zero():
    result = analyze_cta(PageSnapshot())
    assert result.score == 0
    assert result.ctas == []


def test_primary_tie_goes_to_first():
    a = CTASignal(text="Start now", context="content")
    b = CTASignal(text="Start today", context="content")
    assert priority_score(a) == priority_score(b)
    assert select_primary([a, b]) is a


def test_footer_primary_penalty():
    primary = CTASignal(text="Buy the kit", type="primary", context="footer", is_above_fold=False,
                        action_strength="strong", visibility="high", has_value_proposition=True)
    result = score_ctas([primary], primary)
    assert "Primary CTA is located in footer instead of above the fold" in result.issues
    # -50 nothing above the fold, -25 footer
    assert result.score == 25


def test_too_many_above_fold_ctas():
    ctas = [
        CTASignal(text=f"Option {i}", is_above_fold=True, action_strength="strong", visibility="high",
                  has_value_proposition=True)
        for i in range(5)
    ]
    result = score_ctas(ctas, ctas[0])
    assert any("Too many competing CTAs above the fold (5 found)" in issue for issue in result.issues)
    assert result.score == 80


def test_scores_are_bounded():
    weak = CTASignal(text="Click", type="other", action_strength="weak", visibility="low",
                     mobile_optimized=False)
    result = score_ctas([weak], weak)
    assert 0 <= result.score <= 100
