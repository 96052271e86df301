# src/cro_auditor/signals/social_proof_classifier.py
import logging
from typing import Any, Dict, Iterable, List, Optional, Set

from bs4 import Tag

from cro_auditor.dictionaries.matcher import matches_any_selector, to_tag
from cro_auditor.dictionaries.social_proof_dictionary import SOCIAL_PROOF_DICTIONARY, SocialProofDictionary
from cro_auditor.dom.core import ElementRecord, Viewport
from cro_auditor.signals.models import SocialProofSignal
from cro_auditor.signals.structured_data import signals_from_structured_data
from cro_auditor.signals.social_proof_rules import (
    credibility_score, is_generic_content, match_pattern, normalize_text, passes_length_constraints, truncate,
)
from cro_auditor.utils.config_manager import config_manager

logger = logging.getLogger(__name__)


def collect_element_text(record: ElementRecord, dictionary: SocialProofDictionary = SOCIAL_PROOF_DICTIONARY) -> str:
    """Text content, accessibility attributes and image labels, unique and joined with ' • '."""
    chunks: Dict[str, None] = {}

    def push(value: Optional[str]):
        normalized = normalize_text(value)
        if normalized:
            chunks.setdefault(normalized, None)

    push(record.text)
    for attr in dictionary.accessibility_attributes:
        push(record.attributes.get(attr))
    for label in record.descendants.image_labels:
        push(label)
    return " • ".join(chunks)


def derive_logo_text(record: ElementRecord) -> str:
    names: Dict[str, None] = {}
    for label in record.descendants.image_labels:
        normalized = normalize_text(label)
        if normalized:
            names.setdefault(normalized, None)
    if not names:
        aria = normalize_text(record.attributes.get("aria-label") or record.attributes.get("title"))
        if aria:
            names.setdefault(aria, None)
    return " • ".join(names)


def has_rating_indicator(record: Optional[ElementRecord], text: str, tag: Optional[Tag] = None,
                         dictionary: SocialProofDictionary = SOCIAL_PROOF_DICTIONARY) -> bool:
    if match_pattern("rating", text, dictionary):
        return True
    if record is None:
        return False
    if record.descendants.has_rating:
        return True
    return matches_any_selector(tag if tag is not None else record, dictionary.rating_indicator_selectors)


def has_logo_indicators(record: ElementRecord, tag: Optional[Tag] = None,
                        dictionary: SocialProofDictionary = SOCIAL_PROOF_DICTIONARY) -> bool:
    if record.descendants.has_logo_visual or record.descendants.image_count > 0:
        return True
    return matches_any_selector(tag if tag is not None else record, dictionary.logo_indicator_selectors)


def quote_detected(text: str, max_length: int, dictionary: SocialProofDictionary = SOCIAL_PROOF_DICTIONARY) -> bool:
    """A quoted, positive statement that does not read like the site talking about itself."""
    rule = dictionary.quote_detection
    if '"' not in text and "'" not in text:
        return False
    if not rule.min_length < len(text) < max_length:
        return False
    if not match_pattern(rule.positive_pattern_key, text, dictionary):
        return False
    if rule.negative_prefix_key and match_pattern(
            rule.negative_prefix_key, text[:rule.negative_prefix_window], dictionary):
        return False
    return True


def classify_element(record: ElementRecord, text: str, tag: Optional[Tag] = None,
                     dictionary: SocialProofDictionary = SOCIAL_PROOF_DICTIONARY) -> str:
    """Returns the social-proof type for an element, or 'other' when no rule applies."""
    class_list = record.class_name.lower()
    rating_present = has_rating_indicator(record, text, tag, dictionary)

    for rule in dictionary.type_rules:
        class_match = any(keyword in class_list for keyword in rule.class_keywords)
        text_match = any(match_pattern(key, text, dictionary) for key in rule.text_pattern_keys)
        selector_match = bool(rule.selector_queries) and (
            matches_any_selector(tag if tag is not None else record, rule.selector_queries)
            or (rule.type == "social-media" and record.descendants.has_social_icon)
        )
        if not (class_match or text_match or selector_match):
            continue
        if rule.requires_rating_indicator and not rating_present:
            continue
        return rule.type

    if quote_detected(text.lower(), dictionary.quote_detection.max_length, dictionary):
        return "testimonial"
    return "other"


def analyze_visibility(record: ElementRecord) -> str:
    font_size = record.style.font_size
    width, height = record.geometry.width, record.geometry.height
    if font_size >= 14 and width > 200 and height > 50:
        return "high"
    if font_size < 12 or width < 100 or height < 30:
        return "low"
    return "medium"


def determine_context(record: ElementRecord) -> str:
    ancestry = record.ancestry
    if ancestry.in_header or ancestry.in_nav:
        return "header"
    if ancestry.in_footer:
        return "footer"
    if ancestry.in_hero:
        return "hero"
    if ancestry.in_sidebar:
        return "sidebar"
    return "content"


def build_signal(record: ElementRecord, viewport: Viewport, signal_type: str, text: str,
                 tag: Optional[Tag] = None, use_descendants: bool = True,
                 dictionary: SocialProofDictionary = SOCIAL_PROOF_DICTIONARY) -> SocialProofSignal:
    descendants = record.descendants
    has_name = bool(match_pattern("person_name", text, dictionary))
    has_company = bool(match_pattern("job_title", text, dictionary))
    if use_descendants:
        has_name = has_name or descendants.has_name
        has_company = has_company or descendants.has_company
    has_image = descendants.has_image or descendants.has_avatar
    has_rating = has_rating_indicator(record, text, tag, dictionary)

    return SocialProofSignal(
        index=record.index,
        type=signal_type,
        text=truncate(text),
        credibility_score=credibility_score(text, has_name, has_company, has_image, has_rating, dictionary),
        position=record.geometry,
        is_above_fold=record.geometry.top < viewport.height,
        has_image=has_image,
        has_name=has_name,
        has_company=has_company,
        has_rating=has_rating,
        visibility=analyze_visibility(record),
        context=determine_context(record),
    )


def classify_social_proof(record: ElementRecord, viewport: Viewport, default_type: str,
                          tag: Optional[Tag] = None,
                          dictionary: SocialProofDictionary = SOCIAL_PROOF_DICTIONARY) -> Optional[SocialProofSignal]:
    """
    Classifies an element matched by a structural selector group.
    Returns None when the element is hidden, empty or filtered out.
    """
    text = collect_element_text(record, dictionary)
    logo_visuals = has_logo_indicators(record, tag, dictionary)

    if not text and logo_visuals:
        text = derive_logo_text(record)
        if not text and default_type == "partnership":
            count = record.descendants.image_count
            text = f"Partner logos ({count})" if count > 0 else "Partner logos"
    if not text or record.is_hidden:
        return None

    classified = classify_element(record, text, tag, dictionary)
    final_type = default_type if classified == "other" else classified
    if final_type == "other":
        return None
    if not passes_length_constraints(text, final_type, logo_visuals, dictionary):
        return None
    if is_generic_content(text, final_type, dictionary):
        return None
    return build_signal(record, viewport, final_type, text, tag, dictionary=dictionary)


def classify_additional_text(record: ElementRecord, viewport: Viewport, tag: Optional[Tag] = None,
                             dictionary: SocialProofDictionary = SOCIAL_PROOF_DICTIONARY) -> Optional[SocialProofSignal]:
    """Second pass over plain text tags: customer counts, trust cues and quoted praise."""
    text = collect_element_text(record, dictionary)
    min_len = config_manager.get_nested("social_proof.min_additional_text_length", 30)
    if not text or len(text) < min_len:
        return None

    has_customer_count = match_pattern("customer_count", text, dictionary)
    has_quote = quote_detected(
        text, max(dictionary.quote_detection.max_length, dictionary.additional_quote_max_length), dictionary
    )
    has_trust = match_pattern("trust_indicator", text, dictionary)
    if not (has_customer_count or has_quote or has_trust):
        return None
    if record.is_hidden:
        return None

    if has_customer_count:
        detected = "customer-count"
    elif has_trust:
        detected = "trust-badge"
    else:
        detected = "testimonial"

    if not passes_length_constraints(text, detected, dictionary=dictionary):
        return None
    if is_generic_content(text, detected, dictionary):
        return None
    return build_signal(record, viewport, detected, text, tag, use_descendants=False, dictionary=dictionary)


def extract_social_proof_signals(records: Iterable[ElementRecord], viewport: Viewport,
                                 structured_data: Optional[List[Dict[str, Any]]] = None,
                                 dictionary: SocialProofDictionary = SOCIAL_PROOF_DICTIONARY
                                 ) -> List[SocialProofSignal]:
    """
    Three passes, in order: structural selector groups, plain text tags not yet
    claimed, and page annotations. Output is in discovery order, not deduplicated.
    """
    records = list(records)
    tags = {record.index: to_tag(record) for record in records}
    processed: Set[int] = set()
    signals: List[SocialProofSignal] = []

    for group in dictionary.selector_groups:
        for record in records:
            if record.index in processed:
                continue
            tag = tags[record.index]
            if not matches_any_selector(tag, group.selectors):
                continue
            try:
                signal = classify_social_proof(record, viewport, group.type, tag, dictionary)
            except (ValueError, TypeError) as e:
                logger.debug(f"Skipping malformed element #{record.index}: {e}")
                continue
            if signal is not None:
                signals.append(signal)
                processed.add(record.index)

    text_tags = set(dictionary.additional_text_tags)
    for record in records:
        if record.index in processed or record.tag not in text_tags:
            continue
        try:
            signal = classify_additional_text(record, viewport, tags[record.index], dictionary)
        except (ValueError, TypeError) as e:
            logger.debug(f"Skipping malformed element #{record.index}: {e}")
            continue
        if signal is not None:
            signals.append(signal)
            processed.add(record.index)

    annotated = signals_from_structured_data(structured_data or [], dictionary)
    signals.extend(annotated)

    logger.info(f"Found {len(signals)} social proof elements ({len(annotated)} from structured data)")
    return signals
