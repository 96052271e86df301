# src/cro_auditor/signals/dedupe.py
import logging
from typing import Callable, List, Sequence, TypeVar

from cro_auditor.signals.models import CTASignal, Signal, SocialProofSignal

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=Signal)


def normalize_text(text: str) -> str:
    return text.strip().casefold()


def is_similar(a: str, b: str) -> bool:
    """Equal after normalization, or one contains the other."""
    na, nb = normalize_text(a), normalize_text(b)
    return na == nb or na in nb or nb in na


def shorter_text(candidate: CTASignal, existing: CTASignal) -> bool:
    return len(candidate.text) < len(existing.text)


def higher_credibility(candidate: SocialProofSignal, existing: SocialProofSignal) -> bool:
    return candidate.credibility_score > existing.credibility_score


def dedupe(signals: Sequence[S], is_better: Callable[[S, S], bool]) -> List[S]:
    """
    Collapses similar signals in one pass over the input, in discovery order.

    Each incoming signal is compared against every accepted signal it is similar
    to. It is kept only when it beats all of them, and then replaces them all;
    otherwise it is dropped. The output never holds a similar pair and running it
    twice changes nothing.
    """
    accepted: List[S] = []
    for signal in signals:
        similar = [i for i, existing in enumerate(accepted) if is_similar(signal.text, existing.text)]
        if not similar:
            accepted.append(signal)
            continue
        if all(is_better(signal, accepted[i]) for i in similar):
            # takes the slot of the first member it replaces
            first = similar[0]
            accepted = [
                signal if i == first else s
                for i, s in enumerate(accepted)
                if i == first or i not in similar
            ]
    if len(accepted) != len(signals):
        logger.debug(f"Deduplicated {len(signals)} signals to {len(accepted)}")
    return accepted


def dedupe_ctas(signals: Sequence[CTASignal]) -> List[CTASignal]:
    return dedupe(signals, shorter_text)


def dedupe_social_proof(signals: Sequence[SocialProofSignal]) -> List[SocialProofSignal]:
    return dedupe(signals, higher_credibility)
