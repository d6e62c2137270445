"""
Value types shared by the analyzers, combinator, learner and engine.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Tuple, Union

from .errors import InputError

NEUTRAL_SCORE = 50.0

class AnalyzerName(str, Enum):
    """Join key between signal results and the weight profile.

    Definition order is the order issues and insights are reported in.
    """
    SENSATIONALIST = "sensationalist-language"
    CLICKBAIT = "clickbait-headline-pattern"
    FACTUAL_LANGUAGE = "factual-language-markers"
    TEXT_FORMATTING = "text-formatting-abuse"
    BALANCE = "perspective-balance"
    DOMAIN = "domain-reputation"
    LENGTH = "content-length"
    SENTIMENT = "sentiment-intensity"
    READABILITY = "readability-level"
    TOPIC = "topic-relevance"
    POLITICAL_BIAS = "political-bias-lexicon"
    FACTUAL_CLAIMS = "factual-claim-density"
    SOURCE_CITATIONS = "source-citation-density"
    HISTORY_SIMILARITY = "history-similarity"
    # Supplied by external collaborators, never computed in-process
    FACT_CHECK = "fact-check"
    SOURCE_COVERAGE = "source-coverage"

class ReasonTag(str, Enum):
    """Why a reviewer disagreed with a score."""
    MISSING_CONTEXT = "Missing Context"
    INCORRECT_SOURCE = "Incorrect Source Assessment"
    MISSED_SENSATIONALISM = "Missed Sensationalism"
    TOO_STRICT = "Too Strict"
    TOO_LENIENT = "Too Lenient"
    GENERAL = "General"

def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, float(value)))

@dataclass(frozen=True)
class NormalizedContent:
    """Plain text ready for analysis plus the host it came from, if any."""
    text: str
    source_domain: Optional[str] = None

@dataclass(frozen=True)
class SignalResult:
    """One analyzer's judgment. Scores are 0-100, higher is more credible."""
    score: float
    has_issue: bool
    message: str
    details: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "score", _clamp(self.score))
        object.__setattr__(self, "details", MappingProxyType(dict(self.details)))

    @classmethod
    def neutral(cls, message: str, **details: Any) -> "SignalResult":
        """Midpoint signal used when an analyzer cannot form a judgment."""
        return cls(score=NEUTRAL_SCORE, has_issue=False, message=message, details=details)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "has_issue": self.has_issue,
            "message": self.message,
            "details": dict(self.details),
        }

@dataclass(frozen=True)
class HistoryEntry:
    """Fingerprint of a completed analysis, kept for near-duplicate lookups."""
    fingerprint: FrozenSet[str]
    score: float
    timestamp: datetime

@dataclass(frozen=True)
class FeedbackEvent:
    """A reviewer's correction of an engine score."""
    original_score: float
    user_score: float
    reasons: FrozenSet[Union[ReasonTag, str]] = frozenset()

    def __post_init__(self):
        if not 0 <= float(self.original_score) <= 100:
            raise InputError(f"original_score must be between 0 and 100, got {self.original_score}")
        if not 0 <= float(self.user_score) <= 100:
            raise InputError(f"user_score must be between 0 and 100, got {self.user_score}")
        object.__setattr__(self, "reasons", frozenset(self.reasons))

    @property
    def discrepancy(self) -> float:
        return float(self.user_score) - float(self.original_score)

    @classmethod
    def create(cls, original_score: float, user_score: float,
               reasons: Iterable[Union[ReasonTag, str]] = ()) -> "FeedbackEvent":
        return cls(original_score=original_score, user_score=user_score, reasons=frozenset(reasons))

@dataclass(frozen=True)
class AggregateResult:
    """Final, immutable outcome of one analysis call."""
    score: int
    verdict: str
    issues: Tuple[str, ...] = ()
    insights: Tuple[str, ...] = ()
    signals: Mapping[AnalyzerName, SignalResult] = field(default_factory=dict)
    failed: bool = False

    def __post_init__(self):
        object.__setattr__(self, "issues", tuple(self.issues))
        object.__setattr__(self, "insights", tuple(self.insights))
        object.__setattr__(self, "signals", MappingProxyType(dict(self.signals)))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary for presentation."""
        return {
            "score": self.score,
            "verdict": self.verdict,
            "issues": list(self.issues),
            "insights": list(self.insights),
            "signals": {name.value: sig.to_dict() for name, sig in self.signals.items()},
            "failed": self.failed,
        }
