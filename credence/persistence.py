"""
Storage backends for the learned weight profile.
"""
import hashlib
import json
import logging
import os
import threading
from abc import ABC, abstractmethod
from typing import Dict, Mapping, Optional

import filelock

from .errors import PersistenceUnavailable

log = logging.getLogger(__name__)

class WeightPersistence(ABC):
    """Abstract base class for weight storage backends."""

    @abstractmethod
    def load_weights(self) -> Optional[Dict[str, float]]:
        """Load the persisted profile.

        Returns:
            Mapping of analyzer name to weight, or None if nothing was saved

        Raises:
            PersistenceUnavailable: If stored data exists but cannot be read
        """
        pass

    @abstractmethod
    def save_weights(self, weights: Mapping[str, float]) -> None:
        """Persist a profile, replacing any previous one.

        Raises:
            PersistenceUnavailable: If the profile could not be written
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove the persisted override so the next load returns None."""
        pass

class MemoryWeightPersistence(WeightPersistence):
    """Process-local backend, used when persistence is disabled and in tests."""

    def __init__(self, initial: Optional[Mapping[str, float]] = None):
        self._data: Optional[Dict[str, float]] = dict(initial) if initial is not None else None
        self._lock = threading.Lock()
        self.saves = 0

    def load_weights(self) -> Optional[Dict[str, float]]:
        with self._lock:
            return dict(self._data) if self._data is not None else None

    def save_weights(self, weights: Mapping[str, float]) -> None:
        with self._lock:
            self._data = dict(weights)
            self.saves += 1

    def clear(self) -> None:
        with self._lock:
            self._data = None

class JsonWeightPersistence(WeightPersistence):
    """JSON file backend with an integrity digest.

    Writes go to a temp file and are moved into place with ``os.replace``
    while holding a ``filelock`` lock, so readers in other processes never see
    a half-written profile.
    """

    VERSION = "1"

    def __init__(self, path: str, lock_timeout: float = 10.0):
        self.path = os.path.abspath(path)
        self.lock = filelock.FileLock(f"{self.path}.lock", timeout=lock_timeout)

    def _ensure_directory(self) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)

    @staticmethod
    def _digest(weights: Mapping[str, float]) -> str:
        content = json.dumps(dict(weights), sort_keys=True)
        return hashlib.sha256(content.encode("utf-8")).hexdigest()

    def load_weights(self) -> Optional[Dict[str, float]]:
        try:
            self._ensure_directory()
            with self.lock:
                if not os.path.exists(self.path):
                    return None
                with open(self.path, "r", encoding="utf-8") as f:
                    record = json.load(f)
        except filelock.Timeout as e:
            raise PersistenceUnavailable(f"Timed out locking {self.path}") from e
        except (OSError, ValueError) as e:
            raise PersistenceUnavailable(f"Failed to read weights from {self.path}: {e}") from e

        if not isinstance(record, dict) or record.get("version") != self.VERSION:
            raise PersistenceUnavailable(f"Unsupported weight file format in {self.path}")
        weights = record.get("weights")
        if not isinstance(weights, dict):
            raise PersistenceUnavailable(f"Weight file {self.path} has no weights mapping")
        if record.get("_digest") != self._digest(weights):
            raise PersistenceUnavailable(f"Weight file {self.path} failed its integrity check")
        try:
            return {str(k): float(v) for k, v in weights.items()}
        except (TypeError, ValueError) as e:
            raise PersistenceUnavailable(f"Weight file {self.path} has non-numeric weights") from e

    def save_weights(self, weights: Mapping[str, float]) -> None:
        record = {
            "version": self.VERSION,
            "weights": {str(k): float(v) for k, v in weights.items()},
        }
        record["_digest"] = self._digest(record["weights"])
        temp_path = f"{self.path}.tmp"
        try:
            self._ensure_directory()
            with self.lock:
                with open(temp_path, "w", encoding="utf-8") as f:
                    json.dump(record, f, indent=2, sort_keys=True)
                os.replace(temp_path, self.path)
        except filelock.Timeout as e:
            raise PersistenceUnavailable(f"Timed out locking {self.path}") from e
        except OSError as e:
            raise PersistenceUnavailable(f"Failed to save weights to {self.path}: {e}") from e

    def clear(self) -> None:
        try:
            self._ensure_directory()
            with self.lock:
                if os.path.exists(self.path):
                    os.remove(self.path)
        except filelock.Timeout as e:
            raise PersistenceUnavailable(f"Timed out locking {self.path}") from e
        except OSError as e:
            raise PersistenceUnavailable(f"Failed to remove {self.path}: {e}") from e

def create_weight_persistence(backend_type: str, **kwargs) -> WeightPersistence:
    """Factory function to create a weight persistence backend."""
    if backend_type == "json":
        return JsonWeightPersistence(kwargs.get("path", "./credence_weights.json"))
    elif backend_type == "memory":
        return MemoryWeightPersistence(kwargs.get("initial"))
    else:
        raise ValueError(f"Unknown backend type: {backend_type}")
