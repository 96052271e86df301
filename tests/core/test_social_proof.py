# tests/core/test_social_proof.py
from cro_auditor.analyzers.social_proof import analyze_social_proof
from cro_auditor.dom.models import PageSnapshot
from cro_auditor.scoring.social_proof_scorer import score_social_proof, summarize
from cro_auditor.signals.models import SocialProofSignal
from cro_auditor.signals.social_proof_classifier import (
    classify_element, classify_social_proof, extract_social_proof_signals, quote_detected,
)
from cro_auditor.signals.social_proof_rules import credibility_score, is_generic_content, passes_length_constraints

READABLE = {"font_size": "16px"}


def test_zero_elements_scores_zero():
    result = score_social_proof([])
    assert result.score == 0
    assert result.issues == ["No social proof elements found on the page"]


def test_empty_snapshot_scores_zero():
    result = analyze_social_proof(PageSnapshot())
    assert result.score == 0
    assert result.issues == ["No social proof elements found on the page"]
    assert result.summary["total_elements"] == 0


# --- Credibility ---

def test_credibility_all_indicators_clamped():
    text = "x" * 150
    assert credibility_score(text, True, True, True, True) == 100


def test_credibility_short_text_penalty():
    assert credibility_score("Great", False, False, False, False) == 30


def test_credibility_suspicious_penalty():
    assert credibility_score("Lorem ipsum dolor sit amet quote", False, False, False, False) == 20


def test_credibility_never_negative():
    assert credibility_score("lorem ipsum", False, False, False, False) == 0


# --- Filters ---

def test_length_bounds_per_type():
    assert passes_length_constraints("SSL secured", "trust-badge")
    assert not passes_length_constraints("Great", "testimonial")
    assert passes_length_constraints("", "partnership", has_visual_evidence=True)


def test_generic_content_filter():
    assert is_generic_content("Our team builds great websites", "testimonial")
    assert is_generic_content("Read the case study →", "case-study")
    # partnerships and press mentions are exempt
    assert not is_generic_content("Our partners", "partnership")


def test_quote_detection():
    quote = '"The onboarding was excellent and the results were even better than promised."'
    assert quote_detected(quote.lower(), 300)
    assert not quote_detected("the onboarding was excellent and the results were great", 300)
    assert not quote_detected('"we build excellent products for every customer segment"', 300)


# --- Classification ---

def test_testimonial_with_name_and_title(make_record, viewport):
    record = make_record(
        tag="div", classes=["testimonial"], top=400, width=600, height=120, style=READABLE,
        text="Working with them was fantastic, our conversion rate doubled within a quarter. "
             "Jane Smith, Marketing Director",
    )
    signal = classify_social_proof(record, viewport, "testimonial")
    assert signal.type == "testimonial"
    assert signal.has_name
    assert signal.has_company
    assert signal.credibility_score >= 85
    assert signal.visibility == "high"
    assert signal.is_above_fold


def test_review_rule_requires_rating_indicator(make_record):
    text = "Every review we got from this agency was detailed, honest and genuinely useful"
    plain = make_record(tag="div", classes=["review"], text=text, style=READABLE)
    rated = make_record(tag="div", classes=["review"], text=text, style=READABLE,
                        descendants={"has_rating": True})
    assert classify_element(plain, text) == "other"
    assert classify_element(rated, text) == "review"


def test_partner_logo_fallback_text(make_record, viewport):
    record = make_record(tag="div", classes=["partner-logos"], width=800, height=80,
                         descendants={"has_logo_visual": True, "image_count": 6})
    signal = classify_social_proof(record, viewport, "partnership")
    assert signal.type == "partnership"
    assert signal.text == "Partner logos (6)"


def test_partner_logo_labels_become_text(make_record, viewport):
    record = make_record(tag="div", classes=["logo-grid"], width=800, height=80,
                         descendants={"image_count": 2, "image_labels": ["Stripe", "Shopify"]})
    signal = classify_social_proof(record, viewport, "partnership")
    assert signal.text == "Stripe • Shopify"


def test_hidden_element_is_skipped(make_record, viewport):
    record = make_record(tag="div", classes=["trust-badge"], text="SSL secured checkout",
                         style={"display": "none"})
    assert classify_social_proof(record, viewport, "trust-badge") is None


def test_second_pass_customer_count(make_record, viewport):
    record = make_record(tag="p", text="Trusted by more than 12,000 customers across 40 countries",
                         top=600, width=500, height=40, style=READABLE)
    signals = extract_social_proof_signals([record], viewport)
    assert len(signals) == 1
    assert signals[0].type == "customer-count"


def test_structured_data_signals_are_appended(make_record, viewport):
    entries = [{
        "@type": "AggregateRating",
        "ratingValue": "4.8",
        "bestRating": "5",
        "reviewCount": "1250",
    }]
    signals = extract_social_proof_signals([], viewport, entries)
    assert len(signals) == 1
    assert signals[0].source == "structured-data"
    assert signals[0].type == "rating"


# --- Scoring ---

def _signal(type_, **kwargs):
    defaults = {"text": f"{type_} signal text", "credibility_score": 75, "is_above_fold": True,
                "visibility": "high", "context": "hero", "has_name": True}
    defaults.update(kwargs)
    return SocialProofSignal(type=type_, **defaults)


def test_summary_counts_by_type():
    summary = summarize([_signal("testimonial"), _signal("testimonial"), _signal("rating", is_above_fold=False)])
    assert summary["total_elements"] == 3
    assert summary["above_fold_elements"] == 2
    assert summary["testimonials"] == 2
    assert summary["ratings"] == 1
    assert summary["trust_badges"] == 0


def test_strong_mix_scores_full_marks():
    elements = [
        _signal("testimonial", text="Jane Smith loved it"),
        _signal("trust-badge", text="Verified secure checkout"),
        _signal("customer-count", text="12,000 customers"),
        _signal("review", text="Five stars from Bob Lee"),
    ]
    result = score_social_proof(elements)
    assert result.score == 100
    assert result.issues == []


def test_single_weak_element_collects_penalties():
    element = _signal("rating", credibility_score=40, is_above_fold=False, visibility="low", context="content",
                      has_name=False, text="4/5 on average")
    result = score_social_proof([element])
    # -30 fold, -20 variety, -25 credibility, -15 testimonials, -10 badges, -10 counts, -10 visibility, -5 hero
    assert result.score == 0
    assert "No social proof elements above the fold" in result.issues
    assert "Limited variety of social proof types" in result.issues
