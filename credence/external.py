"""
Adapters for signals computed outside the engine.

Fact-check lookups and news-search calls are made by the caller; these
functions only turn their already-fetched results into ``SignalResult``s that
can be passed to ``CredibilityEngine.analyze(..., extra_signals=...)``.
"""
import logging
from typing import Dict, Iterable, Optional

from .models import AnalyzerName, NEUTRAL_SCORE, SignalResult

log = logging.getLogger(__name__)

# Publisher ratings that count against a claim
NEGATIVE_RATINGS = ("false", "pants on fire", "misleading", "incorrect")

FACT_CHECK_PENALTY = 10
FACT_CHECK_FLOOR = 10
FACT_CHECK_CLEAN_SCORE = 70

# (minimum number of covering sources, score), evaluated top-down
COVERAGE_BANDS = [
    (5, 80),
    (3, 70),
    (1, 60),
]

def is_negative_rating(rating: Optional[str]) -> bool:
    text = (rating or "").lower()
    return any(term in text for term in NEGATIVE_RATINGS)

def fact_check_signal(ratings: Iterable[Optional[str]]) -> SignalResult:
    """Score a list of fact-check ratings for claims matching the content.

    No claims is neutral. Any negative rating lowers the score by 10 per
    negative claim from 50, never below 10; otherwise the claims support the
    content and score 70.
    """
    ratings = list(ratings)
    if not ratings:
        return SignalResult.neutral("No fact-checks found for this content", claims=0, negative=0)

    negative = sum(1 for r in ratings if is_negative_rating(r))
    if negative:
        score = max(FACT_CHECK_FLOOR, NEUTRAL_SCORE - FACT_CHECK_PENALTY * negative)
        log.debug("Fact-check: %d of %d claims rated negatively", negative, len(ratings))
        return SignalResult(
            score=score,
            has_issue=True,
            message=f"{negative} related claim(s) rated false or misleading by fact-checkers",
            details={"claims": len(ratings), "negative": negative},
        )
    return SignalResult(
        score=FACT_CHECK_CLEAN_SCORE,
        has_issue=False,
        message=f"{len(ratings)} related fact-check(s) found, none rated false",
        details={"claims": len(ratings), "negative": 0},
    )

def source_coverage_signal(source_names: Iterable[Optional[str]]) -> SignalResult:
    """Score how many distinct news outlets cover the same story."""
    sources = sorted({name.strip() for name in source_names if name and name.strip()})
    count = len(sources)
    for minimum, score in COVERAGE_BANDS:
        if count >= minimum:
            return SignalResult(
                score=score,
                has_issue=False,
                message=f"Story covered by {count} news source(s)",
                details={"sources": sources, "count": count},
            )
    return SignalResult.neutral("No other news sources found covering this story", sources=[], count=0)

def external_signals(ratings: Optional[Iterable[Optional[str]]] = None,
                     source_names: Optional[Iterable[Optional[str]]] = None) -> Dict[AnalyzerName, SignalResult]:
    """Build the ``extra_signals`` mapping, skipping lookups that were not made."""
    signals: Dict[AnalyzerName, SignalResult] = {}
    if ratings is not None:
        signals[AnalyzerName.FACT_CHECK] = fact_check_signal(ratings)
    if source_names is not None:
        signals[AnalyzerName.SOURCE_COVERAGE] = source_coverage_signal(source_names)
    return signals
