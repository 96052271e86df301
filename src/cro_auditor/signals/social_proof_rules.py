# src/cro_auditor/signals/social_proof_rules.py
"""
Text-level rules shared by the element classifier and the structured data
reader: normalization, length and generic-content filters, credibility.
"""
import re
from typing import Optional

from cro_auditor.dictionaries.social_proof_dictionary import SOCIAL_PROOF_DICTIONARY, SocialProofDictionary
from cro_auditor.utils.config_manager import config_manager

_WS_RE = re.compile(r"\s+")


def normalize_text(value: Optional[str]) -> str:
    if not value:
        return ""
    return _WS_RE.sub(" ", str(value)).strip()


def match_pattern(key: str, text: str, dictionary: SocialProofDictionary = SOCIAL_PROOF_DICTIONARY) -> bool:
    return any(pattern.search(text) for pattern in dictionary.patterns(key))


def word_count(text: str) -> int:
    return len(text.split())


def passes_length_constraints(text: str, signal_type: str, has_visual_evidence: bool = False,
                              dictionary: SocialProofDictionary = SOCIAL_PROOF_DICTIONARY) -> bool:
    count = word_count(text)
    if count == 0:
        return has_visual_evidence
    bounds = dictionary.length_bounds.get(signal_type, dictionary.default_length_bounds)
    return bounds.min_words <= count <= bounds.max_words


def is_generic_content(text: str, signal_type: str,
                       dictionary: SocialProofDictionary = SOCIAL_PROOF_DICTIONARY) -> bool:
    """Navigation copy and the site's own marketing lines are not social proof."""
    if signal_type in dictionary.generic_allowed_types:
        return False
    trimmed = text.strip()
    if not trimmed:
        return True
    lower = trimmed.lower()
    if any(lower.startswith(prefix) for prefix in dictionary.generic_prefixes):
        return True
    if any(keyword in lower for keyword in dictionary.generic_keywords):
        return True
    if any(char in trimmed for char in dictionary.arrow_characters):
        return True
    return bool(dictionary.emoji_pattern.search(trimmed))


def is_suspicious(text: str, dictionary: SocialProofDictionary = SOCIAL_PROOF_DICTIONARY) -> bool:
    return match_pattern("suspicious_content", text, dictionary)


def credibility_score(text: str, has_name: bool, has_company: bool, has_image: bool, has_rating: bool,
                      dictionary: SocialProofDictionary = SOCIAL_PROOF_DICTIONARY) -> int:
    """Heuristic 0..100 estimate of how trustworthy a social-proof item looks."""
    score = 50
    if has_name:
        score += 15
    if has_company:
        score += 20
    if has_image:
        score += 10
    if has_rating:
        score += 15
    if 100 <= len(text) <= 500:
        score += 10
    if len(text) < 20:
        score -= 20
    if is_suspicious(text, dictionary):
        score -= 30
    return max(0, min(100, score))


def truncate(text: str) -> str:
    limit = config_manager.get_nested("social_proof.max_text_length", 300)
    return text[:limit] + "..." if len(text) > limit else text
