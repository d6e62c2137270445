"""
Credence engine - primary interface to the credibility scoring system.

The CredibilityEngine wires the analyzer council, history comparator, score
combinator, weight store and learner together behind a small API:

    analyze(content, extra_signals=None) -> AggregateResult
        Score already-normalized content
    analyze_text(text, url=None) -> AggregateResult
        Sanitize raw text first, then score it
    record_feedback(event) -> WeightProfile
        Apply one reviewer correction to the weight profile
    reset_weights() -> None
        Restore the built-in weights

Usage:
    >>> from credence import get_engine, FeedbackEvent
    >>> engine = get_engine()
    >>> result = engine.analyze_text("Officials said on Monday...", url="https://apnews.com/x")
    >>> print(result.score, result.verdict)
    >>> engine.record_feedback(FeedbackEvent.create(result.score, 90, ["Too Strict"]))
"""
import logging
import threading
from typing import Any, Dict, Mapping, Optional, Union

from .combinator import ScoreCombinator, failure_result
from .council import AnalyzerCouncil, build_default_council
from .credence_config import (
    ENABLE_PERSISTENCE,
    LOG_LEVEL,
    WEIGHTS_BACKEND,
    WEIGHTS_PATH,
    WeightsBackend,
    validate_config,
)
from .errors import ConfigurationError, InputError
from .history import HistoryLog
from .learner import WeightLearner
from .models import AggregateResult, AnalyzerName, FeedbackEvent, NormalizedContent, SignalResult
from .persistence import WeightPersistence, create_weight_persistence
from .sanitizer import ContentSanitizer
from .similarity import HistoryComparator
from .weights import WeightProfile, WeightStore

log = logging.getLogger(__name__)

def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging for CLI and service use."""
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

class CredibilityEngine:
    """Facade over one council, weight store and history log."""

    def __init__(self,
                 council: Optional[AnalyzerCouncil] = None,
                 store: Optional[WeightStore] = None,
                 history: Optional[HistoryLog] = None,
                 combinator: Optional[ScoreCombinator] = None,
                 learner: Optional[WeightLearner] = None,
                 comparator: Optional[HistoryComparator] = None,
                 sanitizer: Optional[ContentSanitizer] = None,
                 persistence: Optional[WeightPersistence] = None):
        """Initialize the engine.

        Any collaborator left as None is built with default settings. A
        ``persistence`` backend is only used when no ``store`` is given.
        """
        self.council = council or build_default_council()
        self.store = store or WeightStore(persistence=persistence)
        self.history = history or HistoryLog()
        self.combinator = combinator or ScoreCombinator.from_policy()
        self.learner = learner or WeightLearner()
        self.comparator = comparator or HistoryComparator()
        self.sanitizer = sanitizer or ContentSanitizer()

        weights = self.store.get()
        uncovered = [n.value for n in self.council.names + [AnalyzerName.HISTORY_SIMILARITY]
                     if n not in weights]
        if uncovered:
            log.error("Weight profile has no entry for: %s; analysis will fail", ", ".join(uncovered))

    def _merge_extra(self, signals: Dict[AnalyzerName, SignalResult],
                     extra_signals: Optional[Mapping[Union[AnalyzerName, str], SignalResult]]) -> None:
        for key, signal in (extra_signals or {}).items():
            try:
                name = AnalyzerName(key)
            except ValueError:
                raise ConfigurationError(f"Unknown external signal: {key!r}")
            if name in signals or name == AnalyzerName.HISTORY_SIMILARITY:
                raise ConfigurationError(f"External signal {name.value} duplicates a computed signal")
            signals[name] = signal

    def analyze(self, content: NormalizedContent,
                extra_signals: Optional[Mapping[Union[AnalyzerName, str], SignalResult]] = None) -> AggregateResult:
        """Score content and record it in the history log.

        Args:
            content: Normalized text and optional source domain
            extra_signals: Precomputed external signals (fact-check, source coverage)

        Returns:
            AggregateResult; a failed result when the input is empty or the
            configuration cannot produce a score
        """
        if not content.text or not content.text.strip():
            log.info("Analysis rejected: no content provided")
            return failure_result("No content provided for analysis")

        limit = self.sanitizer.max_length
        if len(content.text) > limit:
            log.info("Truncating content from %d to %d characters", len(content.text), limit)
            content = NormalizedContent(text=content.text[:limit].rstrip(),
                                        source_domain=content.source_domain)

        try:
            signals = self.council.dispatch(content)
            self._merge_extra(signals, extra_signals)
            similarity = self.comparator.compare(content, self.history.snapshot())
            result = self.combinator.combine(signals, similarity, self.store.get())
        except ConfigurationError as e:
            log.error("Analysis failed due to configuration: %s", e)
            return failure_result(f"Configuration error: {e}")

        self.history.record(content.text, result.score)
        log.info("Analyzed %d characters: score=%d verdict=%s", len(content.text), result.score, result.verdict)
        return result

    def analyze_text(self, text: Optional[str], url: Optional[str] = None,
                     extra_signals: Optional[Mapping[Union[AnalyzerName, str], SignalResult]] = None) -> AggregateResult:
        """Sanitize raw text and score it."""
        try:
            content = self.sanitizer.prepare(text, url)
        except InputError as e:
            log.info("Analysis rejected: %s", e)
            return failure_result(str(e))
        return self.analyze(content, extra_signals=extra_signals)

    def record_feedback(self, event: FeedbackEvent) -> WeightProfile:
        """Apply a reviewer correction; returns the profile now in effect."""
        return self.learner.learn(event, self.store)

    def reset_weights(self) -> None:
        self.store.reset()

    def weights(self) -> WeightProfile:
        return self.store.get()

    def feedback_stats(self) -> Dict[str, Any]:
        """Totals over all feedback seen by this engine."""
        return self.learner.stats.to_dict()

    def shutdown(self) -> None:
        """Release the council's worker pool."""
        self.council.shutdown()

    def __enter__(self) -> "CredibilityEngine":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

def build_persistence(weights_path: Optional[str] = None) -> Optional[WeightPersistence]:
    """Weight persistence backend selected by configuration, or None if disabled."""
    if not ENABLE_PERSISTENCE:
        return None
    if WEIGHTS_BACKEND == WeightsBackend.MEMORY:
        return create_weight_persistence(WeightsBackend.MEMORY.value)
    return create_weight_persistence(WeightsBackend.JSON.value, path=weights_path or WEIGHTS_PATH)

_engine: Optional[CredibilityEngine] = None
_engine_lock = threading.Lock()

def get_engine(weights_path: Optional[str] = None) -> CredibilityEngine:
    """Process-wide engine, created on first use.

    Raises:
        ConfigurationError: If the environment configuration is invalid
    """
    global _engine
    with _engine_lock:
        if _engine is None:
            error = validate_config()
            if error:
                log.error("Invalid configuration: %s", error)
                raise ConfigurationError(error)
            _engine = CredibilityEngine(persistence=build_persistence(weights_path))
            log.info("Credibility engine initialized")
        return _engine

def shutdown_engine() -> None:
    """Shut down and forget the process-wide engine."""
    global _engine
    with _engine_lock:
        if _engine is not None:
            _engine.shutdown()
            _engine = None
