# src/cro_auditor/dictionaries/cta_dictionary.py
"""
Centralized word, phrase and pattern lists for CTA analysis.
Data only; evaluation lives in dictionaries.matcher.
"""
import re
from dataclasses import dataclass, field
from typing import Pattern, Tuple


def _compile(*patterns: str, flags: int = re.IGNORECASE) -> Tuple[Pattern, ...]:
    return tuple(re.compile(p, flags) for p in patterns)


@dataclass(frozen=True)
class SelectorGroup:
    selectors: Tuple[str, ...]
    default_type: str


@dataclass(frozen=True)
class CTADictionary:
    # Strong action verbs indicating conversion intent (incentives excluded)
    strong_action_words: Tuple[str, ...] = (
        "buy", "purchase", "order", "get", "start", "begin", "join",
        "sign up", "register", "download", "grab", "claim", "unlock",
        "access", "discover", "try", "create", "book", "request",
        "apply", "enroll", "schedule",
    )
    weak_action_words: Tuple[str, ...] = (
        "learn", "read", "view", "see", "browse", "explore",
        "submit", "send", "click",
    )
    incentives: Tuple[str, ...] = (
        "free", "trial", "demo", "no credit card", "no credit card required", "no cc required",
    )
    primary_cta_phrases: Tuple[str, ...] = (
        "start your project", "get started", "try free", "start free",
        "sign up free", "start trial", "book demo", "request demo",
        "buy now", "add to cart", "purchase", "order now", "shop now",
        "get access", "join now", "start building", "create account",
        "start today", "join waitlist", "join the waitlist",
        "talk to sales", "schedule a demo", "see pricing", "view plans",
        "start for free", "get a quote", "book a call", "start now",
        "start your free trial",
    )
    urgency_words: Tuple[str, ...] = (
        "now", "today", "instant", "immediately", "limited", "exclusive",
        "urgent", "hurry", "fast", "quick", "deadline", "expires",
        "last chance", "ending", "ends soon",
    )
    # Token-aware, e.g. "only 3 left"
    urgency_patterns: Tuple[Pattern, ...] = field(default_factory=lambda: _compile(
        r"\bonly\s+\d+\s+left\b",
        r"\b\d+\s+(spots|seats|slots)\s+left\b",
        r"\blimited\s+time\b",
    ))
    value_proposition_words: Tuple[str, ...] = (
        "free", "save", "discount", "offer", "deal", "benefit", "advantage",
        "result", "outcome", "guarantee", "promise", "increase", "improve",
        "boost", "double", "triple", "roi", "return", "profit",
    )
    guarantee_words: Tuple[str, ...] = (
        "guarantee", "money back", "refund", "risk free", "no risk",
        "satisfaction guaranteed", "promise", "assured",
    )
    navigation_words: Tuple[str, ...] = (
        "home", "about", "contact", "help", "faq", "blog", "news",
        "terms", "privacy", "documentation", "docs", "support",
        "community", "resources", "company", "careers", "partners",
        "investors", "press", "legal",
        "pricing", "features", "solutions",
    )
    navigation_phrases: Tuple[str, ...] = (
        "learn more about", "read more about", "more information", "find out more",
        "see pricing", "view plans", "view pricing", "compare plans",
    )
    action_phrases: Tuple[str, ...] = (
        "build your", "get started", "start free", "join now", "sign up",
        "try free", "buy now", "learn more", "contact", "demo", "subscribe",
        "start your project", "request demo", "book demo", "start trial",
        "add to cart", "shop now", "order now", "start building",
        "create account", "get access", "join waitlist", "join the waitlist",
        "talk to sales", "schedule a demo", "see pricing", "view plans",
        "start for free", "get a quote", "book a call", "start now",
        "start your free trial",
    )
    # Exact class tokens
    primary_cta_classes: Tuple[str, ...] = (
        "btn-primary", "cta-primary", "primary-button", "main-cta",
        "btn--primary", "button--primary", "button-primary", "Button--cta",
        "btn-cta", "bg-primary", "is-primary",
    )
    primary_cta_class_patterns: Tuple[Pattern, ...] = field(default_factory=lambda: _compile(
        r"(btn|button|cta|action)[-_]?primary[-_]?\d*",
        r"\bbg-primary\b",
        r"\bButton[^\s]*__[^\s]*\bprimary\b",
    ))
    # Pagination, sliders and similar non-actions
    decorative_patterns: Tuple[Pattern, ...] = field(default_factory=lambda: (
        re.compile(r"^(next|previous|prev)$", re.IGNORECASE),
        re.compile(r"^(slide|tab) \d+$", re.IGNORECASE),
        re.compile(r"^\d+/\d+$"),
        re.compile(r"^page \d+$", re.IGNORECASE),
    ))
    logo_patterns: Tuple[Pattern, ...] = field(default_factory=lambda: (
        re.compile(r"logo$", re.IGNORECASE),
        re.compile(r"^[A-Z][a-z]+ logo$", re.IGNORECASE),
        re.compile(r"^[A-Z]+ logo$", re.IGNORECASE),
        re.compile(r"^[A-Z]{2,}$"),
        re.compile(r"^[A-Z][a-z]+\s+[A-Z][a-z]+\s+(Inc|LLC|Corp|Ltd)$", re.IGNORECASE),
    ))
    # Testimonial signatures and initials
    name_patterns: Tuple[Pattern, ...] = field(default_factory=lambda: (
        re.compile(r"^[A-Z][a-z]+ ?[A-Z]?\.?$"),
        re.compile(r"^[A-Z][a-z]+$"),
        re.compile(r"^[A-Z]{1,3}$"),
    ))
    # Ordered structural groups; the first matching group sets the default type
    selector_groups: Tuple[SelectorGroup, ...] = (
        SelectorGroup(('.cta-button', '[class*="cta-button"]', '.cta', '[class*="cta"]'), "primary"),
        SelectorGroup(('a[href*="checkout"]', 'a[href*="cart"]', 'a[href*="purchase"]', 'a[href*="buy"]'),
                      "primary"),
        SelectorGroup(('a[href*="signup"]', 'a[href*="register"]', 'a[href*="trial"]', 'a[href*="order"]'),
                      "primary"),
        SelectorGroup(('button[class*="primary"]', '.btn-primary', '.button-primary'), "primary"),
        SelectorGroup(('input[type="submit"]', 'button[type="submit"]'), "form-submit"),
        SelectorGroup(('.btn', '.button', 'button'), "secondary"),
        SelectorGroup(('[role="button"]',), "secondary"),
        SelectorGroup(('[onclick]',), "other"),
    )
    # Broader universe scanned for missed CTAs
    clickable_selectors: Tuple[str, ...] = (
        "a", "button", 'input[type="submit"]', "[onclick]", '[role="button"]',
    )
    checkout_keywords: Tuple[str, ...] = ("checkout", "purchase", "cart")


CTA_DICTIONARY = CTADictionary()
