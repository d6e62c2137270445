"""
Credence - Adaptive News Credibility Scoring

Credence scores a piece of text for credibility by running a council of
independent heuristic analyzers concurrently, comparing the text with
previously analyzed submissions, and merging every signal into one 0-100
score and verdict by weighted averaging. Reviewer feedback nudges the weights
over time while keeping their total fixed.

Key Features:
- Analyzer Council: Sixteen explainable signals, from sensationalist language to source reputation
- Near-duplicate Detection: Reuses prior judgments for content seen before
- Adaptive Weighting: Multiplicative, reason-driven feedback learning
- Pluggable Persistence: JSON file (file-locked) or in-memory weight storage
- Deterministic: Same content, weights and history always give the same result

Quick Start:
    >>> from credence import get_engine
    >>> engine = get_engine()
    >>> result = engine.analyze_text("Your article text", url="https://example.com/story")
    >>> print(result.verdict, result.issues)
"""

from .engine import CredibilityEngine, configure_logging, get_engine, shutdown_engine
from .council import AnalyzerCouncil, build_default_council
from .combinator import ScoreCombinator, VerdictTable
from .errors import ConfigurationError, CredenceError, InputError, PersistenceUnavailable
from .external import fact_check_signal, source_coverage_signal
from .history import HistoryLog
from .learner import WeightLearner
from .models import (
    AggregateResult,
    AnalyzerName,
    FeedbackEvent,
    NormalizedContent,
    ReasonTag,
    SignalResult,
)
from .persistence import JsonWeightPersistence, MemoryWeightPersistence, create_weight_persistence
from .sanitizer import ContentSanitizer, prepare_content
from .weights import DEFAULT_WEIGHTS, WeightStore

__version__ = "1.0.0"
__all__ = [
    "CredibilityEngine",
    "configure_logging",
    "get_engine",
    "shutdown_engine",
    "AnalyzerCouncil",
    "build_default_council",
    "ScoreCombinator",
    "VerdictTable",
    "CredenceError",
    "ConfigurationError",
    "InputError",
    "PersistenceUnavailable",
    "fact_check_signal",
    "source_coverage_signal",
    "HistoryLog",
    "WeightLearner",
    "AggregateResult",
    "AnalyzerName",
    "FeedbackEvent",
    "NormalizedContent",
    "ReasonTag",
    "SignalResult",
    "JsonWeightPersistence",
    "MemoryWeightPersistence",
    "create_weight_persistence",
    "ContentSanitizer",
    "prepare_content",
    "DEFAULT_WEIGHTS",
    "WeightStore",
]
