"""
Weighted score combination and verdict classification.
"""
import logging
import math
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from .analyzers import DomainReputationAgent
from .credence_config import FAILURE_VERDICT, SATIRE_VERDICT, VERDICT_THRESHOLDS, load_policy
from .errors import ConfigurationError
from .models import AggregateResult, AnalyzerName, SignalResult

log = logging.getLogger(__name__)

class InsightPolicy(str, Enum):
    """When a signal without an issue contributes its message to insights."""
    ALWAYS = "always"
    NEVER = "never"
    UNLESS_UNKNOWN = "unless_unknown"  # suppressed when details["reputation"] == "Unknown"

DEFAULT_INSIGHT_POLICY: Dict[AnalyzerName, InsightPolicy] = {
    AnalyzerName.DOMAIN: InsightPolicy.UNLESS_UNKNOWN,
}

class VerdictTable:
    """Ordered (minimum score, label) rows evaluated top-down."""

    def __init__(self, rows: Sequence[Tuple[float, str]] = VERDICT_THRESHOLDS):
        ordered = sorted(((float(m), str(label)) for m, label in rows), key=lambda r: -r[0])
        if not ordered:
            raise ConfigurationError("Verdict table is empty")
        if ordered[-1][0] > 0:
            raise ConfigurationError(
                f"Verdict table must cover scores down to 0, lowest row starts at {ordered[-1][0]}")
        self.rows: List[Tuple[float, str]] = ordered

    @classmethod
    def from_policy(cls, policy: Optional[Mapping[str, Any]] = None) -> "VerdictTable":
        """Build a table from a policy dict as returned by ``load_policy``."""
        policy = policy if policy is not None else load_policy()
        thresholds = policy.get("thresholds", {})
        return cls([(minimum, label) for label, minimum in thresholds.items()])

    def classify(self, score: float) -> str:
        for minimum, label in self.rows:
            if score >= minimum:
                return label
        return self.rows[-1][1]

def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))

class ScoreCombinator:
    """Merges analyzer signals into one score, verdict and explanation."""

    def __init__(self,
                 verdicts: Optional[VerdictTable] = None,
                 insight_policy: Optional[Mapping[AnalyzerName, InsightPolicy]] = None,
                 satire_verdict: str = SATIRE_VERDICT):
        self.verdicts = verdicts or VerdictTable()
        self.insight_policy = dict(DEFAULT_INSIGHT_POLICY if insight_policy is None else insight_policy)
        self.satire_verdict = satire_verdict

    @classmethod
    def from_policy(cls, policy: Optional[Mapping[str, Any]] = None) -> "ScoreCombinator":
        policy = policy if policy is not None else load_policy()
        return cls(
            verdicts=VerdictTable.from_policy(policy),
            satire_verdict=policy.get("satire_verdict", SATIRE_VERDICT),
        )

    def _insight_allowed(self, name: AnalyzerName, signal: SignalResult) -> bool:
        policy = self.insight_policy.get(name, InsightPolicy.ALWAYS)
        if policy == InsightPolicy.NEVER:
            return False
        if policy == InsightPolicy.UNLESS_UNKNOWN:
            return signal.details.get("reputation") != DomainReputationAgent.UNKNOWN
        return True

    @staticmethod
    def is_satire(signals: Mapping[AnalyzerName, SignalResult]) -> bool:
        domain = signals.get(AnalyzerName.DOMAIN)
        return domain is not None and domain.details.get("reputation") == DomainReputationAgent.SATIRE

    def combine(self,
                signals: Mapping[Union[AnalyzerName, str], SignalResult],
                similarity: Optional[SignalResult],
                weights: Mapping[AnalyzerName, float]) -> AggregateResult:
        """Weighted mean of all present signals, classified into a verdict.

        Args:
            signals: Analyzer and external signals keyed by analyzer name
            similarity: History signal, or None when there was no history
            weights: Current weight profile

        Raises:
            ConfigurationError: A signal has no weight, a weight is not
                positive, or there is nothing to combine
        """
        merged: Dict[AnalyzerName, SignalResult] = {}
        for key, signal in signals.items():
            try:
                merged[AnalyzerName(key)] = signal
            except ValueError:
                raise ConfigurationError(f"Unknown analyzer name in signals: {key!r}")
        if similarity is not None:
            merged[AnalyzerName.HISTORY_SIMILARITY] = similarity
        if not merged:
            raise ConfigurationError("No signals to combine")

        ordered = [name for name in AnalyzerName if name in merged]
        missing = [name.value for name in ordered if name not in weights]
        if missing:
            raise ConfigurationError(f"No weight configured for: {', '.join(missing)}")

        scores = np.array([merged[name].score for name in ordered], dtype=float)
        w = np.array([float(weights[name]) for name in ordered], dtype=float)
        if not np.all(np.isfinite(w)) or np.any(w <= 0):
            raise ConfigurationError("Weights must be positive and finite")

        mean = float(np.average(scores, weights=w))
        score = min(100, max(0, round_half_up(mean)))

        verdict = self.verdicts.classify(score)
        if self.is_satire(merged):
            verdict = self.satire_verdict

        issues: List[str] = []
        insights: List[str] = []
        for name in ordered:
            signal = merged[name]
            if signal.has_issue:
                issues.append(signal.message)
            elif self._insight_allowed(name, signal):
                insights.append(signal.message)

        log.debug("Combined %d signals: mean=%.3f score=%d verdict=%s", len(ordered), mean, score, verdict)
        return AggregateResult(
            score=score,
            verdict=verdict,
            issues=issues,
            insights=insights,
            signals={name: merged[name] for name in ordered},
        )

def failure_result(*reasons: str) -> AggregateResult:
    """Clearly marked result for an analysis that could not run."""
    return AggregateResult(score=0, verdict=FAILURE_VERDICT, issues=list(reasons), failed=True)
