# src/cro_auditor/signals/cta_classifier.py
import logging
from typing import Iterable, List, Optional, Set

from cro_auditor.dictionaries.cta_dictionary import CTA_DICTIONARY, CTADictionary
from cro_auditor.dictionaries.matcher import (
    PatternKind, contains_any_word, matches, matches_any_pattern, matches_any_selector, to_tag,
)
from cro_auditor.dom.core import ElementRecord, StyleSubset, Viewport
from cro_auditor.signals.models import CTASignal
from cro_auditor.utils.config_manager import config_manager

logger = logging.getLogger(__name__)


# --- Per-element analysis ---

def determine_context(record: ElementRecord, viewport: Viewport) -> str:
    ancestry = record.ancestry
    if ancestry.in_hero:
        return "hero"

    # Main area between the header band and the fold, outside navigation chrome
    top = record.geometry.top
    in_main_area = 100 < top < viewport.height * 0.8
    if in_main_area and not (ancestry.in_nav or ancestry.in_footer or ancestry.in_header):
        return "hero"

    if ancestry.in_header or ancestry.in_nav:
        return "header"
    if ancestry.in_footer:
        return "footer"
    if ancestry.in_sidebar:
        return "sidebar"
    if ancestry.in_form:
        return "form"
    return "content"


def analyze_action_strength(text: str, dictionary: CTADictionary = CTA_DICTIONARY) -> str:
    if contains_any_word(text, dictionary.strong_action_words):
        return "strong"
    if contains_any_word(text, dictionary.weak_action_words):
        return "weak"
    return "medium"


def analyze_urgency(text: str, dictionary: CTADictionary = CTA_DICTIONARY) -> str:
    if contains_any_word(text, dictionary.urgency_words) or matches_any_pattern(text, dictionary.urgency_patterns):
        return "high"
    lower = text.lower()
    if "free" in lower or "trial" in lower:
        return "medium"
    return "low"


def is_button_like(record: ElementRecord) -> bool:
    return (
        record.tag == "button"
        or (record.tag == "a" and record.style.has_background)
        or record.role == "button"
    )


def analyze_visibility(record: ElementRecord) -> str:
    """Scores font, padding, background, shape and size into high/medium/low."""
    style = record.style
    geometry = record.geometry
    score = 0

    if style.font_size >= 16:
        score += 25
    elif style.font_size >= 14:
        score += 15
    elif style.font_size >= 12:
        score += 5

    if style.padding >= 12:
        score += 20
    elif style.padding >= 8:
        score += 15
    elif style.padding >= 4:
        score += 10

    if style.has_background:
        score += 20
    if style.border_radius > 0:
        score += 10
    if style.has_border:
        score += 10
    if is_button_like(record):
        score += 20

    if geometry.width >= 120 and geometry.height >= 40:
        score += 15
    elif geometry.width >= 80 and geometry.height >= 32:
        score += 10

    if style.min_height >= 40 or geometry.height >= 40:
        score += 10

    if score >= 70:
        return "high"
    if score >= 40:
        return "medium"
    return "low"


def is_mobile_optimized(style: StyleSubset, viewport: Viewport) -> bool:
    if viewport.width > 768:
        return True
    return style.font_size >= 16 and style.padding >= 8 and (style.width >= 44 or style.width == 0)


def is_interactive(record: ElementRecord) -> bool:
    attrs = record.attributes
    return (
        record.tag == "button"
        or (record.tag == "a" and "href" in attrs)
        or "onclick" in attrs
        or record.role == "button"
    )


def has_prominent_background(style: StyleSubset) -> bool:
    color = style.background_color.lower()
    return style.has_background and ("rgb" in color or "#" in color)


def refine_type(record: ElementRecord, initial_type: str, text: str,
                dictionary: CTADictionary = CTA_DICTIONARY) -> str:
    if matches(PatternKind.CLASS_TOKEN, record, dictionary.primary_cta_classes):
        return "primary"
    if matches(PatternKind.CLASS_PATTERN, record, dictionary.primary_cta_class_patterns):
        return "primary"

    if record.is_submit_input:
        return "form-submit"
    if record.tag == "button" and record.ancestry.in_form:
        return "form-submit"

    interactive = is_interactive(record)
    if interactive and contains_any_word(text, dictionary.primary_cta_phrases):
        return "primary"

    if (
        initial_type == "secondary"
        and interactive
        and has_prominent_background(record.style)
        and contains_any_word(text, dictionary.strong_action_words)
    ):
        return "primary"

    return initial_type


def has_logo_marker(record: ElementRecord) -> bool:
    return "logo" in record.class_name.lower() or record.ancestry.in_logo


def passes_text_gate(text: str, dictionary: CTADictionary = CTA_DICTIONARY) -> bool:
    """
    Rejects texts that cannot be a call to action: out-of-range length, signatures,
    long descriptive copy, logos, navigation and decorative labels.
    """
    min_len = config_manager.get_nested("cta.min_text_length", 2)
    max_len = config_manager.get_nested("cta.max_text_length", 150)
    long_len = config_manager.get_nested("cta.long_text_length", 80)

    if not min_len <= len(text) <= max_len:
        return False
    if matches(PatternKind.REGEX, text, dictionary.name_patterns):
        return False
    lower = text.lower()
    if len(text) > long_len and "start" not in lower and "get" not in lower:
        return False
    if matches(PatternKind.REGEX, text, dictionary.logo_patterns):
        return False
    if matches(PatternKind.WORD, text, dictionary.navigation_words):
        return False
    if matches(PatternKind.WORD, text, dictionary.navigation_phrases):
        return False
    if matches(PatternKind.REGEX, text, dictionary.decorative_patterns):
        return False
    return True


def build_signal(record: ElementRecord, viewport: Viewport, cta_type: str, text: str,
                 dictionary: CTADictionary = CTA_DICTIONARY, display_text: Optional[str] = None) -> CTASignal:
    urgency = analyze_urgency(text, dictionary)
    surrounding = record.sibling_text.lower()
    return CTASignal(
        index=record.index,
        text=display_text if display_text is not None else text,
        type=refine_type(record, cta_type, text, dictionary),
        is_above_fold=record.geometry.top < viewport.height,
        action_strength=analyze_action_strength(text, dictionary),
        urgency=urgency,
        visibility=analyze_visibility(record),
        context=determine_context(record, viewport),
        has_value_proposition=contains_any_word(surrounding, dictionary.value_proposition_words),
        has_urgency=urgency == "high",
        has_guarantee=contains_any_word(surrounding, dictionary.guarantee_words),
        mobile_optimized=is_mobile_optimized(record.style, viewport),
        position=record.geometry,
    )


def classify_cta(record: ElementRecord, viewport: Viewport, default_type: str,
                 dictionary: CTADictionary = CTA_DICTIONARY) -> Optional[CTASignal]:
    """
    Maps one element to a CTA signal, or None when the element is rejected.
    `default_type` comes from the first structural selector group the element matched.
    """
    text = record.display_text
    if not text or not passes_text_gate(text, dictionary):
        return None
    if has_logo_marker(record) or record.is_hidden:
        return None
    return build_signal(record, viewport, default_type, text, dictionary)


def classify_additional_cta(record: ElementRecord, viewport: Viewport,
                            dictionary: CTADictionary = CTA_DICTIONARY) -> Optional[CTASignal]:
    """Second pass: any clickable element whose text carries an action phrase."""
    text = record.display_text
    max_len = config_manager.get_nested("cta.max_second_pass_length", 200)
    truncate = config_manager.get_nested("cta.truncate_length", 100)

    if not 2 <= len(text) <= max_len:
        return None
    if matches(PatternKind.REGEX, text, dictionary.name_patterns):
        return None
    if matches(PatternKind.REGEX, text, dictionary.logo_patterns):
        return None
    if has_logo_marker(record):
        return None
    if not matches(PatternKind.WORD, text, dictionary.action_phrases):
        return None
    if record.is_hidden:
        return None

    display = text[:truncate] + "..." if len(text) > truncate else text
    return build_signal(record, viewport, "secondary", text, dictionary, display_text=display)


# --- Page-level extraction ---

def extract_cta_signals(records: Iterable[ElementRecord], viewport: Viewport,
                        dictionary: CTADictionary = CTA_DICTIONARY) -> List[CTASignal]:
    """
    Runs the structural selector groups in priority order, then the clickable
    second pass over elements no group claimed. Returns signals in discovery order.
    """
    records = list(records)
    tags = {record.index: to_tag(record) for record in records}
    processed: Set[int] = set()
    signals: List[CTASignal] = []

    for group in dictionary.selector_groups:
        for record in records:
            if record.index in processed:
                continue
            if not matches_any_selector(tags[record.index], group.selectors):
                continue
            try:
                signal = classify_cta(record, viewport, group.default_type, dictionary)
            except (ValueError, TypeError) as e:
                logger.debug(f"Skipping malformed element #{record.index}: {e}")
                continue
            if signal is None:
                continue
            signals.append(signal)
            processed.add(record.index)

    for record in records:
        if record.index in processed:
            continue
        if not matches_any_selector(tags[record.index], dictionary.clickable_selectors):
            continue
        try:
            signal = classify_additional_cta(record, viewport, dictionary)
        except (ValueError, TypeError) as e:
            logger.debug(f"Skipping malformed element #{record.index}: {e}")
            continue
        if signal is not None:
            signals.append(signal)
            processed.add(record.index)

    logger.info(f"Found {len(signals)} potential CTAs")
    return signals
