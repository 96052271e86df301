# src/cro_auditor/signals/structured_data.py
import logging
from typing import Any, List

from cro_auditor.dictionaries.social_proof_dictionary import SOCIAL_PROOF_DICTIONARY, SocialProofDictionary
from cro_auditor.signals.models import SocialProofSignal
from cro_auditor.signals.social_proof_rules import (
    credibility_score, is_generic_content, match_pattern, normalize_text, passes_length_constraints, truncate,
)

logger = logging.getLogger(__name__)

_ARTICLE_TYPES = ("newsarticle", "article", "blogposting")


def name_of(field: Any) -> str:
    """Schema.org fields may hold a plain string or an object with a name."""
    if not field:
        return ""
    if isinstance(field, str):
        return field
    if isinstance(field, dict):
        return str(field.get("name") or field.get("alternateName") or "")
    if isinstance(field, list) and field:
        return name_of(field[0])
    return ""


def _get(entry: dict, *keys: str) -> Any:
    for key in keys:
        value = entry.get(key)
        if value:
            return value
    return None


class StructuredDataReader:
    """
    Converts JSON-LD review, rating, article and organization entries into
    social-proof signals. Annotation-derived signals have no geometry: they sit
    in the 'other' context, below the fold, with medium visibility.
    """

    def __init__(self, dictionary: SocialProofDictionary = SOCIAL_PROOF_DICTIONARY):
        self.dictionary = dictionary
        self.signals: List[SocialProofSignal] = []

    def push(self, text: str, signal_type: str, has_image: bool = False, has_name: bool = False,
             has_company: bool = False, has_rating: bool = False):
        normalized = normalize_text(text)
        if not normalized:
            return
        if not passes_length_constraints(normalized, signal_type, dictionary=self.dictionary):
            return
        if is_generic_content(normalized, signal_type, self.dictionary):
            return

        has_name = has_name or match_pattern("person_name", normalized, self.dictionary)
        has_company = has_company or match_pattern("job_title", normalized, self.dictionary)
        has_rating = has_rating or match_pattern("rating", normalized, self.dictionary)
        self.signals.append(SocialProofSignal(
            type=signal_type,
            text=truncate(normalized),
            credibility_score=credibility_score(
                normalized, has_name, has_company, has_image, has_rating, self.dictionary
            ),
            is_above_fold=False,
            has_image=has_image,
            has_name=has_name,
            has_company=has_company,
            has_rating=has_rating,
            visibility="medium",
            context="other",
            source="structured-data",
        ))

    def process(self, entry: Any):
        if not entry:
            return
        if isinstance(entry, list):
            for item in entry:
                self.process(item)
            return
        if not isinstance(entry, dict):
            return

        if "@graph" in entry:
            self.process(entry["@graph"])

        type_field = entry.get("@type")
        type_names = type_field if isinstance(type_field, list) else [type_field]
        nested_done = False
        for type_name in type_names:
            if not type_name:
                continue
            lower_type = str(type_name).lower()
            if lower_type in ("review", "testimonial"):
                self._review(entry)
            elif lower_type == "aggregaterating":
                self._aggregate_rating(entry)
            elif lower_type in _ARTICLE_TYPES:
                self._article(entry)
            elif lower_type in ("organization", "brand"):
                self._organization(entry)
                nested_done = True

        if nested_done:
            return
        for key in ("review", "aggregateRating", "testimonial"):
            if entry.get(key):
                self.process(entry[key])

    def _review(self, entry: dict):
        body = _get(entry, "reviewBody", "description", "name")
        if not body:
            return
        author = name_of(entry.get("author"))
        company = name_of(entry.get("publisher")) or name_of(entry.get("itemReviewed"))
        review_rating = entry.get("reviewRating") if isinstance(entry.get("reviewRating"), dict) else {}
        aggregate = entry.get("aggregateRating") if isinstance(entry.get("aggregateRating"), dict) else {}
        rating_value = review_rating.get("ratingValue") or aggregate.get("ratingValue")
        scale = review_rating.get("bestRating")

        text = str(body)
        if rating_value:
            text = f"{text} (Rated {rating_value}{f'/{scale}' if scale else ''})"
        if author:
            text = f"{text} — {author}"
        if company:
            text = f"{text}, {company}"
        self.push(
            text,
            "review" if rating_value else "testimonial",
            has_image=bool(entry.get("image")),
            has_name=bool(author),
            has_company=bool(company),
            has_rating=bool(rating_value),
        )

    def _aggregate_rating(self, entry: dict):
        rating_value = _get(entry, "ratingValue", "rating")
        best = _get(entry, "bestRating", "ratingScale")
        count = _get(entry, "reviewCount", "ratingCount")
        if not (rating_value or count):
            return
        parts = []
        if rating_value:
            parts.append(f"Average rating {rating_value}{f'/{best}' if best else ''}")
        if count:
            parts.append(f"based on {count} reviews")
        self.push(" ".join(parts), "rating", has_rating=bool(rating_value))

    def _article(self, entry: dict):
        publisher = name_of(entry.get("publisher"))
        headline = _get(entry, "headline", "name", "alternativeHeadline")
        if not (publisher or headline):
            return
        text = f"Featured in {publisher}" if publisher else "Media mention"
        if headline:
            text = f'{text} — "{headline}"'
        self.push(text, "news-mention", has_company=bool(publisher))

    def _organization(self, entry: dict):
        if entry.get("aggregateRating"):
            self.process(entry["aggregateRating"])
        if entry.get("review"):
            self.process(entry["review"])
        awards = entry.get("award")
        if awards:
            for award in awards if isinstance(awards, list) else [awards]:
                self.push(f"{entry.get('name') or 'This company'} awarded {award}", "trust-badge",
                          has_company=bool(entry.get("name")))


def signals_from_structured_data(entries: List[Any],
                                 dictionary: SocialProofDictionary = SOCIAL_PROOF_DICTIONARY
                                 ) -> List[SocialProofSignal]:
    reader = StructuredDataReader(dictionary)
    for entry in entries:
        try:
            reader.process(entry)
        except (TypeError, ValueError, AttributeError) as e:
            logger.debug(f"Ignoring malformed structured data entry: {e}")
    return reader.signals
