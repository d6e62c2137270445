"""
Bounded, append-only log of completed analyses.
"""
import logging
import threading
from collections import deque
from datetime import datetime, timezone
from typing import Deque, List, Optional

from .credence_config import HISTORY_CAPACITY
from .errors import ConfigurationError
from .models import HistoryEntry
from .similarity import fingerprint

log = logging.getLogger(__name__)

def _now() -> datetime:
    """Get current UTC time."""
    return datetime.now(timezone.utc)

class HistoryLog:
    """FIFO history with a fixed capacity.

    Appends and evictions happen under one lock, so concurrent writers never
    lose an entry or evict the same entry twice.
    """

    def __init__(self, capacity: int = HISTORY_CAPACITY):
        if capacity <= 0:
            raise ConfigurationError(f"History capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._entries: Deque[HistoryEntry] = deque(maxlen=capacity)
        self._lock = threading.Lock()
        self.evicted = 0

    def append(self, entry: HistoryEntry) -> None:
        with self._lock:
            if len(self._entries) == self.capacity:
                self.evicted += 1
            self._entries.append(entry)

    def record(self, text: str, score: float, timestamp: Optional[datetime] = None) -> HistoryEntry:
        """Fingerprint text and append it with its score."""
        entry = HistoryEntry(fingerprint=fingerprint(text), score=score, timestamp=timestamp or _now())
        self.append(entry)
        log.debug("History entry recorded (score=%s, size=%d)", score, len(self))
        return entry

    def snapshot(self) -> List[HistoryEntry]:
        """Copy of the entries, oldest first."""
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
