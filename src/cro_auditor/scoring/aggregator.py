# src/cro_auditor/scoring/aggregator.py
from typing import Iterable, Optional

from cro_auditor.model import CategoryResult


def overall_score(results: Iterable[CategoryResult]) -> Optional[int]:
    """
    Mean of the applicable category scores. Categories scored None are left out
    of both the sum and the count; None is returned when nothing applies.
    """
    scores = [r.score for r in results if r.score is not None]
    if not scores:
        return None
    return max(0, min(100, round(sum(scores) / len(scores))))
