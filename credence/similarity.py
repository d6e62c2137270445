"""
Near-duplicate detection against previously analyzed submissions.
"""
from typing import FrozenSet, Optional, Sequence

from nltk.tokenize import RegexpTokenizer

from .credence_config import NEAR_DUPLICATE_THRESHOLD
from .models import AnalyzerName, HistoryEntry, NormalizedContent, SignalResult

_NON_WORD = RegexpTokenizer(r"\W+", gaps=True)

# Entries above this similarity are listed in the details even when not reused
RELATED_THRESHOLD = 0.3
NO_MATCH_SCORE = 70.0

def fingerprint(text: str) -> FrozenSet[str]:
    """Lower-cased token set, split on non-word characters."""
    return frozenset(tok for tok in _NON_WORD.tokenize(text.lower()) if tok)

def jaccard(a: FrozenSet[str], b: FrozenSet[str]) -> float:
    union = len(a | b)
    if union == 0:
        return 0.0
    return len(a & b) / union

class HistoryComparator:
    """Compares content with the history log and reuses prior judgments.

    Scores: the matched entry's historical score when the best Jaccard
    similarity exceeds ``threshold``, otherwise a neutral 70. Never an issue.
    """

    name = AnalyzerName.HISTORY_SIMILARITY

    def __init__(self, threshold: float = NEAR_DUPLICATE_THRESHOLD):
        self.threshold = threshold

    def compare(self, content: NormalizedContent,
                history: Sequence[HistoryEntry]) -> Optional[SignalResult]:
        if not history:
            return None

        current = fingerprint(content.text)
        scored = [(jaccard(current, entry.fingerprint), entry) for entry in history]
        # Highest similarity first; ties go to the most recent entry
        best_similarity, best = max(scored, key=lambda pair: (pair[0], pair[1].timestamp))

        related = sorted(
            ((sim, entry) for sim, entry in scored if sim > RELATED_THRESHOLD),
            key=lambda pair: (pair[0], pair[1].timestamp),
            reverse=True,
        )
        details = {
            "similarity": round(best_similarity, 4),
            "matched_at": best.timestamp.isoformat(),
            "similar_entries": [
                f"Similar content ({round(sim * 100)}% match) analyzed on {entry.timestamp.date().isoformat()}"
                for sim, entry in related
            ],
            "compared_entries": len(history),
        }

        if best_similarity > self.threshold:
            return SignalResult(
                score=best.score,
                has_issue=False,
                message=f"Content is {round(best_similarity * 100)}% similar to previously analyzed content",
                details={**details, "reused_score": best.score},
            )
        return SignalResult(
            score=NO_MATCH_SCORE,
            has_issue=False,
            message="No significant similarity to previously analyzed content",
            details=details,
        )
