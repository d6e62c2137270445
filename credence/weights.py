"""
Weight store: the single piece of mutable scoring state.

The store hands out read-only snapshots, swaps whole profiles atomically and
exposes a lock-holding transaction for read-modify-write updates such as a
learning step.
"""
import logging
import math
import threading
from contextlib import contextmanager
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Union

from .errors import ConfigurationError, PersistenceUnavailable
from .models import AnalyzerName
from .persistence import WeightPersistence

log = logging.getLogger(__name__)

WeightProfile = Mapping[AnalyzerName, float]

DEFAULT_WEIGHTS: Dict[AnalyzerName, float] = {
    # Source reputation carries about half of the built-in analyzer mass; an
    # unreliable host must pull otherwise unremarkable text below 50.
    AnalyzerName.DOMAIN: 10.0,
    AnalyzerName.SENSATIONALIST: 2.0,
    AnalyzerName.CLICKBAIT: 1.5,
    AnalyzerName.FACTUAL_LANGUAGE: 1.0,
    AnalyzerName.SOURCE_CITATIONS: 1.0,
    AnalyzerName.SENTIMENT: 0.8,
    AnalyzerName.FACTUAL_CLAIMS: 0.8,
    AnalyzerName.POLITICAL_BIAS: 0.6,
    AnalyzerName.TEXT_FORMATTING: 0.5,
    AnalyzerName.BALANCE: 0.5,
    AnalyzerName.LENGTH: 0.3,
    AnalyzerName.READABILITY: 0.3,
    AnalyzerName.TOPIC: 0.2,
    AnalyzerName.HISTORY_SIMILARITY: 1.0,
    AnalyzerName.FACT_CHECK: 4.0,
    AnalyzerName.SOURCE_COVERAGE: 2.0,
}

def validate_profile(profile: Mapping[Union[AnalyzerName, str], float],
                     expected: Optional[Mapping[AnalyzerName, float]] = None) -> Dict[AnalyzerName, float]:
    """Normalize keys to ``AnalyzerName`` and check every weight.

    Args:
        profile: Candidate profile, keyed by name or enum member
        expected: If given, the profile must cover exactly these names

    Raises:
        ConfigurationError: Unknown names, non-positive weights or a key set
            that differs from ``expected``
    """
    validated: Dict[AnalyzerName, float] = {}
    for key, value in profile.items():
        try:
            name = AnalyzerName(key)
        except ValueError:
            raise ConfigurationError(f"Unknown analyzer name in weight profile: {key!r}")
        try:
            weight = float(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Weight for {name.value} is not a number: {value!r}")
        if not math.isfinite(weight) or weight <= 0:
            raise ConfigurationError(f"Weight for {name.value} must be positive, got {value!r}")
        validated[name] = weight

    if expected is not None and set(validated) != set(expected):
        missing = sorted(n.value for n in set(expected) - set(validated))
        extra = sorted(n.value for n in set(validated) - set(expected))
        raise ConfigurationError(f"Weight profile mismatch (missing={missing}, unexpected={extra})")
    return validated

class WeightStore:
    """Process-wide weight profile with optional persistence."""

    def __init__(self, persistence: Optional[WeightPersistence] = None,
                 defaults: Mapping[AnalyzerName, float] = DEFAULT_WEIGHTS):
        self._defaults = validate_profile(defaults)
        self.persistence = persistence
        self._lock = threading.RLock()
        self._profile = self._load()

    def _load(self) -> Dict[AnalyzerName, float]:
        """Load the persisted profile, falling back to defaults."""
        if self.persistence is None:
            return dict(self._defaults)
        try:
            stored = self.persistence.load_weights()
        except PersistenceUnavailable as e:
            log.warning("Weight profile unavailable, using defaults: %s", e)
            return dict(self._defaults)
        if stored is None:
            log.info("No persisted weight profile, using defaults")
            return dict(self._defaults)
        try:
            profile = validate_profile(stored, expected=self._defaults)
        except ConfigurationError as e:
            log.warning("Persisted weight profile rejected, using defaults: %s", e)
            return dict(self._defaults)
        log.info("Loaded persisted weight profile (%d weights)", len(profile))
        return profile

    @property
    def defaults(self) -> WeightProfile:
        return MappingProxyType(dict(self._defaults))

    def get(self) -> WeightProfile:
        """Read-only snapshot of the current profile."""
        with self._lock:
            return MappingProxyType(dict(self._profile))

    def total(self) -> float:
        with self._lock:
            return math.fsum(self._profile.values())

    def commit(self, profile: Mapping[Union[AnalyzerName, str], float]) -> WeightProfile:
        """Validate, persist and atomically install a new profile.

        A failed save is logged and the in-memory profile is still replaced.
        """
        validated = validate_profile(profile, expected=self._defaults)
        with self._lock:
            self._persist(validated)
            self._profile = validated
            return MappingProxyType(dict(validated))

    @contextmanager
    def transaction(self) -> Iterator[WeightProfile]:
        """Hold the store lock across a read-modify-write sequence.

        Yields the current snapshot; call ``commit`` before leaving the block.
        """
        with self._lock:
            yield MappingProxyType(dict(self._profile))

    def reset(self) -> WeightProfile:
        """Restore built-in defaults and drop the persisted override."""
        with self._lock:
            self._profile = dict(self._defaults)
            if self.persistence is not None:
                try:
                    self.persistence.clear()
                except PersistenceUnavailable as e:
                    log.warning("Failed to clear persisted weights: %s", e)
            log.info("Weights reset to defaults")
            return MappingProxyType(dict(self._profile))

    def _persist(self, profile: Mapping[AnalyzerName, float]) -> None:
        if self.persistence is None:
            return
        try:
            self.persistence.save_weights({name.value: weight for name, weight in profile.items()})
        except PersistenceUnavailable as e:
            log.warning("Failed to persist weights, keeping in-memory profile: %s", e)
