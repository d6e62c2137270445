"""
Feedback-driven weight adaptation.

A reviewer's score is compared with the engine's. Small disagreements are
ignored; larger ones nudge specific weights by fixed multipliers looked up
from the reviewer's reason tags. The profile is then rescaled so the sum of
all weights never changes: learning shifts relative importance only.
"""
import logging
import math
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple, Union

import numpy as np
from rapidfuzz import fuzz, process, utils

from .credence_config import FEEDBACK_NOISE_BAND
from .models import AnalyzerName, FeedbackEvent, ReasonTag
from .weights import WeightProfile, WeightStore

log = logging.getLogger(__name__)

# (analyzer, multiplier when the reviewer scored higher, multiplier when lower)
Adjustment = Tuple[AnalyzerName, float, float]

REASON_ADJUSTMENTS: Dict[ReasonTag, List[Adjustment]] = {
    ReasonTag.MISSING_CONTEXT: [
        (AnalyzerName.FACTUAL_LANGUAGE, 1.05, 1.05),
        (AnalyzerName.BALANCE, 1.05, 1.05),
        (AnalyzerName.SOURCE_CITATIONS, 1.05, 1.05),
    ],
    ReasonTag.INCORRECT_SOURCE: [
        (AnalyzerName.DOMAIN, 0.95, 1.05),
    ],
    ReasonTag.MISSED_SENSATIONALISM: [
        (AnalyzerName.SENSATIONALIST, 1.1, 1.1),
        (AnalyzerName.CLICKBAIT, 1.05, 1.05),
    ],
    ReasonTag.TOO_STRICT: [
        (AnalyzerName.SENSATIONALIST, 0.95, 0.95),
        (AnalyzerName.CLICKBAIT, 0.95, 0.95),
    ],
    ReasonTag.TOO_LENIENT: [
        (AnalyzerName.SENSATIONALIST, 1.05, 1.05),
        (AnalyzerName.CLICKBAIT, 1.05, 1.05),
    ],
}

# Divisors for the blanket nudge applied to every weight
GENERAL_NUDGE_DIVISOR = 500.0
UNTAGGED_NUDGE_DIVISOR = 1000.0
REASON_MATCH_CUTOFF = 85.0
ACCURATE_USER_SCORE = 75.0

def reason_label(reason: Union[ReasonTag, str]) -> str:
    return reason.value if isinstance(reason, ReasonTag) else str(reason)

def resolve_reason(reason: Union[ReasonTag, str], cutoff: float = REASON_MATCH_CUTOFF) -> ReasonTag:
    """Map a free-form reason string to the closest known tag.

    Unrecognized strings resolve to ``ReasonTag.GENERAL``.
    """
    if isinstance(reason, ReasonTag):
        return reason
    choices = [tag.value for tag in ReasonTag]
    match = process.extractOne(str(reason), choices, scorer=fuzz.WRatio,
                               processor=utils.default_process, score_cutoff=cutoff)
    if match is None:
        return ReasonTag.GENERAL
    return ReasonTag(match[0])

def renormalize(weights: Mapping[AnalyzerName, float], target_total: float) -> Dict[AnalyzerName, float]:
    """Scale all weights uniformly so they sum to ``target_total``."""
    names = list(weights)
    values = np.array([weights[n] for n in names], dtype=float)
    values *= target_total / values.sum()
    return {name: float(v) for name, v in zip(names, values)}

@dataclass
class FeedbackStats:
    """Running totals over every feedback event the learner has seen."""
    received: int = 0
    applied: int = 0
    ignored: int = 0
    accurate: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record(self, feedback: FeedbackEvent, applied: bool) -> None:
        with self._lock:
            self.received += 1
            if applied:
                self.applied += 1
            else:
                self.ignored += 1
            if feedback.user_score >= ACCURATE_USER_SCORE:
                self.accurate += 1

    @property
    def accuracy_rate(self) -> float:
        """Percentage of feedback that rated the analysis accurate."""
        return self.accurate / self.received * 100 if self.received else 0.0

    def to_dict(self) -> Dict[str, float]:
        with self._lock:
            return {
                "total": self.received,
                "applied": self.applied,
                "ignored": self.ignored,
                "accurate": self.accurate,
                "accuracy_rate": self.accuracy_rate,
            }

class WeightLearner:
    """Applies feedback events to a weight store."""

    def __init__(self,
                 noise_band: float = FEEDBACK_NOISE_BAND,
                 adjustments: Optional[Mapping[ReasonTag, List[Adjustment]]] = None):
        self.noise_band = noise_band
        self.adjustments = dict(REASON_ADJUSTMENTS if adjustments is None else adjustments)
        self.stats = FeedbackStats()

    def adjust(self, weights: Mapping[AnalyzerName, float],
               feedback: FeedbackEvent) -> Dict[AnalyzerName, float]:
        """Apply reason multipliers without renormalizing."""
        discrepancy = feedback.discrepancy
        names = list(weights)
        index = {name: i for i, name in enumerate(names)}
        values = np.array([weights[n] for n in names], dtype=float)

        if not feedback.reasons:
            values *= 1 + discrepancy / UNTAGGED_NUDGE_DIVISOR
        # Sorted so the floating-point product order is reproducible
        for raw in sorted(feedback.reasons, key=reason_label):
            tag = resolve_reason(raw)
            if tag == ReasonTag.GENERAL or tag not in self.adjustments:
                values *= 1 + discrepancy / GENERAL_NUDGE_DIVISOR
                continue
            for name, when_higher, when_lower in self.adjustments[tag]:
                if name in index:
                    values[index[name]] *= when_higher if discrepancy > 0 else when_lower

        return {name: float(v) for name, v in zip(names, values)}

    def learn(self, feedback: FeedbackEvent, store: WeightStore) -> WeightProfile:
        """Run one learning step against the store.

        The read, adjustment, renormalization, persistence and swap all happen
        while holding the store's transaction lock.

        Returns:
            The profile in effect after the step
        """
        discrepancy = feedback.discrepancy
        if abs(discrepancy) < self.noise_band:
            self.stats.record(feedback, applied=False)
            log.info("Feedback within noise band (discrepancy=%.1f), weights unchanged", discrepancy)
            return store.get()

        with store.transaction() as current:
            target_total = math.fsum(current.values())
            adjusted = self.adjust(current, feedback)
            profile = store.commit(renormalize(adjusted, target_total))

        self.stats.record(feedback, applied=True)
        log.info("Applied feedback (discrepancy=%.1f, reasons=%s)",
                 discrepancy, sorted(reason_label(r) for r in feedback.reasons) or "none")
        return profile
