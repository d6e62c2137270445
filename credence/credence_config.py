"""
Configuration settings and feature flags for the Credence engine.
"""
import json
import logging
import os
from enum import Enum
from typing import Optional, Dict, Any, List, Tuple

log = logging.getLogger(__name__)

class WeightsBackend(str, Enum):
    """Supported weight persistence backends"""
    JSON = "json"      # JSON file guarded by a file lock
    MEMORY = "memory"  # Process-local, lost on exit

# Feature flags and configuration with defaults
WEIGHTS_BACKEND: WeightsBackend = WeightsBackend(os.getenv("CREDENCE_WEIGHTS_BACKEND", "json").lower())
WEIGHTS_PATH: str = os.getenv("CREDENCE_WEIGHTS_PATH", "./credence_weights.json")
POLICY_PATH: Optional[str] = os.getenv("CREDENCE_POLICY_PATH") or None
ENABLE_PERSISTENCE: bool = os.getenv("CREDENCE_ENABLE_PERSISTENCE", "true").lower() == "true"
LOG_LEVEL: str = os.getenv("CREDENCE_LOG_LEVEL", "INFO")
MAX_WORKERS: int = int(os.getenv("CREDENCE_MAX_WORKERS", "8"))

# Input and history limits
MAX_INPUT_LENGTH: int = int(os.getenv("CREDENCE_MAX_INPUT_LENGTH", "5000"))
HISTORY_CAPACITY: int = int(os.getenv("CREDENCE_HISTORY_CAPACITY", "500"))

# Scoring knobs
NEAR_DUPLICATE_THRESHOLD: float = float(os.getenv("CREDENCE_NEAR_DUPLICATE_THRESHOLD", "0.7"))
FEEDBACK_NOISE_BAND: float = float(os.getenv("CREDENCE_FEEDBACK_NOISE_BAND", "10"))

# Ordered top-down; the first row whose minimum the score reaches wins.
VERDICT_THRESHOLDS: List[Tuple[float, str]] = [
    (85.0, "Very Likely Real"),
    (70.0, "Likely Real"),
    (50.0, "Uncertain"),
    (30.0, "Potentially Misleading"),
    (0.0, "Likely Fake"),
]
SATIRE_VERDICT: str = "Satirical Content"
FAILURE_VERDICT: str = "Analysis Failed"

def validate_config() -> Optional[str]:
    """Validate current configuration settings.

    Returns:
        str or None: Error message if invalid, None if valid
    """
    try:
        if not isinstance(WEIGHTS_BACKEND, WeightsBackend):
            return f"Invalid WEIGHTS_BACKEND value: {WEIGHTS_BACKEND}"
        if not 0 < MAX_INPUT_LENGTH <= 1_000_000:
            return f"MAX_INPUT_LENGTH must be between 0 and 1,000,000, got {MAX_INPUT_LENGTH}"
        if not 0 < HISTORY_CAPACITY <= 1_000_000:
            return f"HISTORY_CAPACITY must be between 0 and 1,000,000, got {HISTORY_CAPACITY}"
        if not 0 < NEAR_DUPLICATE_THRESHOLD < 1:
            return f"NEAR_DUPLICATE_THRESHOLD must be between 0 and 1, got {NEAR_DUPLICATE_THRESHOLD}"
        if not 0 <= FEEDBACK_NOISE_BAND <= 100:
            return f"FEEDBACK_NOISE_BAND must be between 0 and 100, got {FEEDBACK_NOISE_BAND}"
        if not 0 < MAX_WORKERS <= 64:
            return f"MAX_WORKERS must be between 0 and 64, got {MAX_WORKERS}"
        return None
    except Exception as e:
        return f"Configuration validation error: {str(e)}"

def get_config() -> Dict[str, Any]:
    """Get current configuration as a dictionary."""
    return {
        "weights_backend": WEIGHTS_BACKEND.value,
        "weights_path": WEIGHTS_PATH,
        "policy_path": POLICY_PATH,
        "enable_persistence": ENABLE_PERSISTENCE,
        "log_level": LOG_LEVEL,
        "max_workers": MAX_WORKERS,
        "max_input_length": MAX_INPUT_LENGTH,
        "history_capacity": HISTORY_CAPACITY,
        "near_duplicate_threshold": NEAR_DUPLICATE_THRESHOLD,
        "feedback_noise_band": FEEDBACK_NOISE_BAND,
        "verdict_thresholds": [list(row) for row in VERDICT_THRESHOLDS],
    }

def _deep_merge(target: Dict, source: Dict) -> None:
    """Deep merge source dict into target dict."""
    for key, value in source.items():
        if key in target and isinstance(target[key], dict) and isinstance(value, dict):
            _deep_merge(target[key], value)
        else:
            target[key] = value

def load_policy(policy_path: Optional[str] = None) -> Dict[str, Any]:
    """Load the scoring policy, merging an optional JSON file over the defaults.

    The file may override ``thresholds`` (a mapping of verdict label to minimum
    score) and ``satire_verdict``. A missing or unreadable file leaves the
    defaults in place.
    """
    policy: Dict[str, Any] = {
        "thresholds": {label: minimum for minimum, label in VERDICT_THRESHOLDS},
        "satire_verdict": SATIRE_VERDICT,
    }
    path = policy_path if policy_path is not None else POLICY_PATH
    if not path:
        return policy
    try:
        with open(path, "r", encoding="utf-8") as f:
            custom = json.load(f)
        _deep_merge(policy, custom)
    except (OSError, ValueError) as e:
        log.warning("Failed to load custom policy from %s: %s", path, e)
    return policy
