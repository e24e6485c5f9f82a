from __future__ import annotations

from time import time
from typing import Any, Dict, List, Optional, Tuple
import threading

import structlog

from app.config.settings import settings

logger = structlog.get_logger()


class TTLCache:
    """Simple in-memory TTL cache with optional background auto-purge.

    - Capacity-bounded; evicts entries closest to expiry first when over capacity.
    - Thread-safe using a simple lock.
    - Optional background thread purges expired entries every N seconds so
    memory is reclaimed even when there are no reads.
    """

    def __init__(
        self,
        max_items: int = 256,
        auto_purge_interval_seconds: Optional[float] = 15.0,
    ) -> None:
        self._data: Dict[Any, Tuple[float, Any]] = {}
        self._max = max_items
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._auto_interval = auto_purge_interval_seconds
        self._thread: Optional[threading.Thread] = None
        if self._auto_interval and self._auto_interval > 0:
            self._thread = threading.Thread(target=self._auto_purge_loop, daemon=True)
            self._thread.start()

    def _auto_purge_loop(self) -> None:
        while not self._stop_event.wait(self._auto_interval or 15.0):
            try:
                self._purge()
            except Exception as e:
                # never raise from the daemon thread
                logger.warning("Cache purge failed", error=str(e))

    def stop(self) -> None:
        self._stop_event.set()

    def _purge(self) -> None:
        now = time()
        with self._lock:
            # Remove expired
            expired = [k for k, (exp, _) in self._data.items() if exp < now]
            for k in expired:
                self._data.pop(k, None)
            # Enforce capacity
            if len(self._data) > self._max:
                over = len(self._data) - self._max
                for k, _ in sorted(self._data.items(), key=lambda kv: kv[1][0])[:over]:
                    self._data.pop(k, None)

    def get(self, key: Any) -> Optional[Any]:
        with self._lock:
            item = self._data.get(key)
            if not item:
                return None
            exp, val = item
            if exp < time():
                # expired
                self._data.pop(key, None)
                return None
            return val

    def set(self, key: Any, value: Any, ttl_seconds: float) -> None:
        # Store even None values for negative-caching
        with self._lock:
            self._data[key] = (time() + float(ttl_seconds), value)
        # opportunistic purge
        self._purge()

    def keys(self) -> List[Any]:
        now = time()
        with self._lock:
            return [k for k, (exp, _) in self._data.items() if exp >= now]

    def clear(self, key: Any) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

    def clear_all(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        return len(self.keys())


# Shared caches used by services
JIRA_TICKET_CACHE = TTLCache(max_items=512, auto_purge_interval_seconds=15.0)
# Generation results keyed by document name
GENERATION_CACHE = TTLCache(max_items=256, auto_purge_interval_seconds=60.0)
# Zephyr keys of pushed features: {document_name: {feature_index: [testcase keys]}}
PUSHED_STATE_CACHE = TTLCache(max_items=256, auto_purge_interval_seconds=60.0)


def record_pushed_feature(document_name: str, feature_index: int, testcase_keys: List[str]) -> Dict[int, List[str]]:
    """Merge pushed Zephyr keys for one feature into the document's pushed state."""
    state = dict(PUSHED_STATE_CACHE.get(document_name) or {})
    state[feature_index] = list(testcase_keys)
    PUSHED_STATE_CACHE.set(document_name, state, settings.cache_ttl_generation)
    return state
