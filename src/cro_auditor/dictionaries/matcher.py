# src/cro_auditor/dictionaries/matcher.py
import logging
import re
from enum import Enum
from functools import lru_cache
from typing import Iterable, Pattern, Sequence, Union

from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from cro_auditor.dom.core import ElementRecord

logger = logging.getLogger(__name__)

# Detached tags are created from this document; they are never appended to it.
_FACTORY = BeautifulSoup("", "html.parser")


class PatternKind(str, Enum):
    """Closed set of dictionary entry kinds understood by `matches`."""
    WORD = "word"
    REGEX = "regex"
    CLASS_TOKEN = "class_token"
    CLASS_PATTERN = "class_pattern"
    SELECTOR = "selector"


@lru_cache(maxsize=1024)
def phrase_to_boundary_regex(phrase: str) -> Pattern:
    """
    Builds a boundary-aware, whitespace-tolerant regex for a phrase.
    'get started' -> \\bget\\s+started\\b (case-insensitive)
    """
    tokens = [re.escape(token) for token in phrase.strip().split()]
    return re.compile(r"\b" + r"\s+".join(tokens) + r"\b", re.IGNORECASE)


def contains_any_word(text: str, words: Iterable[str]) -> bool:
    if not text:
        return False
    return any(phrase_to_boundary_regex(word).search(text) for word in words)


def matches_any_pattern(text: str, patterns: Iterable[Pattern]) -> bool:
    if not text:
        return False
    return any(pattern.search(text) for pattern in patterns)


def has_any_class(record: ElementRecord, classes: Iterable[str]) -> bool:
    tokens = set(record.class_tokens)
    return any(name in tokens for name in classes)


def matches_any_class_pattern(record: ElementRecord, patterns: Iterable[Pattern]) -> bool:
    class_name = record.class_name
    if not class_name:
        return False
    return any(pattern.search(class_name) for pattern in patterns)


def to_tag(record: ElementRecord) -> Tag:
    """Synthesises a detached bs4 tag carrying the record's tag name, classes and attributes."""
    attrs = {key: value for key, value in record.attributes.items() if key != "class"}
    if record.class_tokens:
        attrs["class"] = list(record.class_tokens)
    return _FACTORY.new_tag(record.tag, attrs=attrs)


def matches_any_selector(record: Union[ElementRecord, Tag], selectors: Sequence[str]) -> bool:
    """
    Evaluates CSS selectors against the element itself (Element.matches semantics).
    Invalid selectors are logged and treated as non-matching.
    """
    if not selectors:
        return False
    tag = record if isinstance(record, Tag) else to_tag(record)
    for selector in selectors:
        try:
            if tag.css.match(selector):
                return True
        except SelectorSyntaxError as e:
            logger.debug(f"Skipping invalid selector '{selector}': {e}")
    return False


def matches(kind: PatternKind, subject: Union[str, ElementRecord], entries: Sequence) -> bool:
    """
    Single entry point for dictionary-driven matching.

    Text kinds (WORD, REGEX) take a string subject; element kinds (CLASS_TOKEN,
    CLASS_PATTERN, SELECTOR) take an ElementRecord.
    """
    if kind is PatternKind.WORD:
        return contains_any_word(subject, entries)
    if kind is PatternKind.REGEX:
        return matches_any_pattern(subject, entries)
    if kind is PatternKind.CLASS_TOKEN:
        return has_any_class(subject, entries)
    if kind is PatternKind.CLASS_PATTERN:
        return matches_any_class_pattern(subject, entries)
    if kind is PatternKind.SELECTOR:
        return matches_any_selector(subject, entries)
    raise ValueError(f"Unknown pattern kind: {kind}")
