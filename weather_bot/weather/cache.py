"""
In-memory weather cache.

Callers build keys that embed a time bucket (see client.cache_key), so all
lookups for the same city within one bucket hit the same entry. Entries live
longer than a bucket and are removed by a periodic sweep.
"""

import logging
import threading
import time
from typing import Callable, Dict, Optional, Tuple

from .models import WeatherRecord

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 15 * 60


class WeatherCache:
    """Thread-safe keyed store with per-entry expiry."""
    
    def __init__(
        self,
        default_ttl: float = DEFAULT_TTL_SECONDS,
        time_func: Callable[[], float] = time.time
    ):
        """
        Initialize the cache.
        
        Args:
            default_ttl: Entry lifetime in seconds when set() gets no ttl
            time_func: Clock returning epoch seconds
        """
        self.default_ttl = default_ttl
        self._time_func = time_func
        self._lock = threading.Lock()
        self._entries: Dict[str, Tuple[float, WeatherRecord]] = {}
    
    def get(self, key: str) -> Optional[WeatherRecord]:
        """Return the cached record or None if missing or expired."""
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, record = entry
        if expires_at <= self._time_func():
            return None
        return record
    
    def set(self, key: str, record: WeatherRecord, ttl: Optional[float] = None) -> None:
        """Store a record for ttl seconds (default_ttl if not given)."""
        lifetime = self.default_ttl if ttl is None else ttl
        expires_at = self._time_func() + lifetime
        with self._lock:
            self._entries[key] = (expires_at, record)
    
    def delete_expired(self) -> int:
        """
        Remove expired entries.
        
        The lock is held only to snapshot the table and to drop single keys,
        so concurrent lookups are never blocked for the whole sweep.
        
        Returns:
            Number of entries removed
        """
        with self._lock:
            snapshot = list(self._entries.items())
        
        now = self._time_func()
        expired = [key for key, (expires_at, _) in snapshot if expires_at <= now]
        
        removed = 0
        for key in expired:
            with self._lock:
                entry = self._entries.get(key)
                # Entry may have been refreshed since the snapshot
                if entry is not None and entry[0] <= now:
                    del self._entries[key]
                    removed += 1
        
        if removed:
            logger.debug(f"Cache sweep removed {removed} expired entries")
        return removed
    
    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
    
    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
