# src/cro_auditor/dictionaries/social_proof_dictionary.py
"""
Classification rules and text patterns for social-proof detection.
"""
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Pattern, Tuple


@dataclass(frozen=True)
class SelectorGroup:
    type: str
    selectors: Tuple[str, ...]


@dataclass(frozen=True)
class TypeRule:
    type: str
    class_keywords: Tuple[str, ...] = ()
    text_pattern_keys: Tuple[str, ...] = ()
    selector_queries: Tuple[str, ...] = ()
    requires_rating_indicator: bool = False


@dataclass(frozen=True)
class LengthBounds:
    min_words: int
    max_words: int


@dataclass(frozen=True)
class QuoteDetection:
    min_length: int = 30
    max_length: int = 300
    positive_pattern_key: str = "testimonial_positive"
    negative_prefix_key: Optional[str] = "testimonial_negative_prefix"
    negative_prefix_window: int = 80


def _patterns(*sources: str, flags: int = re.IGNORECASE) -> Tuple[Pattern, ...]:
    return tuple(re.compile(source, flags) for source in sources)


_TEXT_PATTERNS = {
    "testimonial": _patterns(r"testimonial"),
    "review": _patterns(r"review"),
    "rating": _patterns(r"★|⭐|stars?|rating|\d+/\d+|\d+\.\d+/\d+"),
    "trust_badge": _patterns(r"ssl|secure|verified|trusted|guarantee|certified|award"),
    "certification": _patterns(r"certified|accredited|compliant|gdpr|hipaa|soc\s?\d+"),
    "customer_count": _patterns(
        r"\d+[,\.]?\d*\s*(customers?|users?|clients?|companies?|businesses?|people|members?)",
        r"over\s+\d+|more than\s+\d+|\d+\+\s*(customers?|users?|clients?)",
    ),
    "social_media": _patterns(r"followers?|likes?|shares?|facebook|twitter|instagram|linkedin|youtube"),
    "partnership": _patterns(r"partner|partnership|powered by|featured in|trusted by"),
    "case_study": _patterns(r"case study|success story|customer story|client story"),
    "news_mention": _patterns(r"featured in|mentioned in|press|news|media|forbes|techcrunch|reuters"),
    "testimonial_positive": _patterns(
        r"\b(amazing|excellent|great|fantastic|wonderful|outstanding|love|recommend|best|helped"
        r"|improved|transformed|changed my|saved us|increased our)\b"
    ),
    "testimonial_negative_prefix": _patterns(
        r"\b(we|our|us|you|your|lansky|tech|build|design|development|service|solution|offer|provide)\b"
    ),
    "trust_indicator": _patterns(r"ssl|secure|verified|trusted|guarantee|certified|award|safe|protected"),
    "suspicious_content": _patterns(r"lorem ipsum|placeholder|sample|test"),
    # Credibility cues read from the text itself
    "person_name": (re.compile(r"[A-Z][a-z]+ [A-Z][a-z]+"),),
    "job_title": _patterns(r"\b(CEO|CTO|Manager|Director|VP|President|Founder)\b"),
}


@dataclass(frozen=True)
class SocialProofDictionary:
    accessibility_attributes: Tuple[str, ...] = (
        "aria-label", "title", "data-name", "data-company",
        "data-client", "data-partner", "data-brand", "data-source",
    )
    selector_groups: Tuple[SelectorGroup, ...] = (
        SelectorGroup("testimonial", (
            ".testimonial", ".quote", ".client-quote", '[class*="testimonial"]', '[class*="quote"]', "blockquote",
        )),
        SelectorGroup("review", (
            ".review", ".rating", ".stars", '[class*="review"]', '[class*="rating"]', '[class*="star"]',
        )),
        SelectorGroup("trust-badge", (
            ".trust-badge", ".security", ".ssl", ".certified", '[class*="trust"]', '[class*="secure"]',
            '[class*="ssl"]',
        )),
        SelectorGroup("customer-count", (
            ".stats", ".counter", ".customer-count", '[class*="stats"]', '[class*="counter"]',
            '[class*="customer"]',
        )),
        SelectorGroup("social-media", (
            ".social", ".followers", '[class*="social"]', '[class*="follow"]',
        )),
        SelectorGroup("partnership", (
            ".logo", ".Logo", ".partner", ".featured", ".UserLogo", ".LogoGrid",
            '[class*="logo" i]', '[class*="partner" i]', '[class*="featured" i]',
        )),
        SelectorGroup("case-study", (
            ".case-study", ".success-story", '[class*="case"]', '[class*="success"]',
        )),
        SelectorGroup("news-mention", (
            ".press", ".media", ".news", '[class*="press"]', '[class*="media"]', '[class*="news"]',
        )),
    )
    type_rules: Tuple[TypeRule, ...] = (
        TypeRule("testimonial", class_keywords=("testimonial", "quote", "client-quote"),
                 text_pattern_keys=("testimonial",)),
        TypeRule("review", class_keywords=("review",), text_pattern_keys=("review",),
                 requires_rating_indicator=True),
        TypeRule("rating", text_pattern_keys=("rating",), requires_rating_indicator=True),
        TypeRule("trust-badge", class_keywords=("trust", "badge", "secure", "ssl", "certified"),
                 text_pattern_keys=("trust_badge",)),
        TypeRule("customer-count", class_keywords=("stats", "counter", "customer-count"),
                 text_pattern_keys=("customer_count",)),
        TypeRule("social-media", class_keywords=("social", "follow"), text_pattern_keys=("social_media",),
                 selector_queries=('[class*="social"]', '[class*="facebook"]', '[class*="twitter"]',
                                   '[class*="instagram"]')),
        TypeRule("certification", class_keywords=("certification", "compliance"),
                 text_pattern_keys=("certification",)),
        TypeRule("partnership", class_keywords=("partner", "featured", "logo"),
                 text_pattern_keys=("partnership",)),
        TypeRule("case-study", class_keywords=("case-study", "success"), text_pattern_keys=("case_study",)),
        TypeRule("news-mention", class_keywords=("press", "media", "news"), text_pattern_keys=("news_mention",)),
    )
    text_patterns: Mapping[str, Tuple[Pattern, ...]] = field(
        default_factory=lambda: MappingProxyType(dict(_TEXT_PATTERNS))
    )
    generic_prefixes: Tuple[str, ...] = (
        "home", "about", "contact", "services", "portfolio", "blog", "get started", "learn more",
        "our", "we", "you", "your", "build", "design", "develop", "create", "solution", "offer",
        "provide", "built", "terms", "privacy", "policy",
    )
    generic_keywords: Tuple[str, ...] = (
        "click", "button", "link", "menu", "navigation", "header", "footer", "sidebar", "copyright",
        "reserved", "policy", "terms", "lansky", "tech", "founder", "web development", "done right",
    )
    arrow_characters: Tuple[str, ...] = ("→", "↓")
    emoji_pattern: Pattern = field(default_factory=lambda: re.compile(r"^\s*[💡👩🏻‍💻💰😤]"))
    # Types allowed to bypass the generic-content filter
    generic_allowed_types: Tuple[str, ...] = ("partnership", "news-mention")
    length_bounds: Mapping[str, LengthBounds] = field(default_factory=lambda: MappingProxyType({
        "testimonial": LengthBounds(10, 180),
        "review": LengthBounds(5, 120),
        "rating": LengthBounds(5, 120),
        "case-study": LengthBounds(25, 400),
        "customer-count": LengthBounds(3, 80),
        "trust-badge": LengthBounds(2, 60),
        "certification": LengthBounds(2, 60),
        "partnership": LengthBounds(1, 40),
        "news-mention": LengthBounds(3, 120),
    }))
    default_length_bounds: LengthBounds = LengthBounds(3, 250)
    additional_text_tags: Tuple[str, ...] = ("p", "div", "span", "h1", "h2", "h3", "h4", "h5", "h6")
    logo_indicator_selectors: Tuple[str, ...] = (
        "img", "svg", "[data-logo]", '[class*="logo" i]', ".Logo", ".UserLogo", ".LogoGrid",
    )
    rating_indicator_selectors: Tuple[str, ...] = (".rating", ".stars", '[class*="rating"]', '[class*="star"]')
    quote_detection: QuoteDetection = QuoteDetection()
    # Second-pass quotes may run longer than classified ones
    additional_quote_max_length: int = 600
    max_signal_text_length: int = 300

    def patterns(self, key: str) -> Tuple[Pattern, ...]:
        return self.text_patterns.get(key, ())


SOCIAL_PROOF_DICTIONARY = SocialProofDictionary()
