"""
In-memory sliding window rate limiter.

Provides:
- MemoryRateLimiter: per-key sliding window with a background sweeper

Each key owns its own lock, so concurrent requests for different keys
never contend. The registry lock is held only to look up or insert a
window, never while a key is being evaluated.

Usage:
    limiter = MemoryRateLimiter(LOGIN_POLICY)
    if not limiter.allow(client_ip):
        retry = limiter.retry_after(client_ip)
    ...
    limiter.close()
"""

import logging
import math
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Callable, Deque, Dict, Optional

from src.app.services.rate_limiter import IRateLimiter, RateLimitPolicy

logger = logging.getLogger(__name__)


@dataclass
class _Window:
    timestamps: Deque[float] = field(default_factory=deque)
    lock: threading.Lock = field(default_factory=threading.Lock)
    # Set by the sweeper once the window is removed from the registry
    retired: bool = False

    def prune(self, cutoff: float) -> None:
        while self.timestamps and self.timestamps[0] <= cutoff:
            self.timestamps.popleft()


class MemoryRateLimiter(IRateLimiter):
    def __init__(
        self,
        policy: RateLimitPolicy,
        clock: Callable[[], float] = time.time,
        start_cleanup: bool = True,
    ):
        if policy.max_requests < 1 or policy.window_seconds <= 0:
            raise ValueError("Rate limit policy needs max_requests >= 1 and a positive window")
        self.policy = policy
        self._clock = clock
        self._windows: Dict[str, _Window] = {}
        self._registry_lock = threading.Lock()
        self._stop = threading.Event()
        self._cleanup_thread: Optional[threading.Thread] = None
        if start_cleanup:
            self._cleanup_thread = threading.Thread(
                target=self._cleanup_loop,
                name=f"rate-limiter-cleanup[{policy.key_prefix or 'default'}]",
                daemon=True,
            )
            self._cleanup_thread.start()

    def _key(self, key: str) -> str:
        return f"{self.policy.key_prefix}{key}"

    def _window(self, key: str, create: bool) -> Optional[_Window]:
        full_key = self._key(key)
        with self._registry_lock:
            window = self._windows.get(full_key)
            if window is None and create:
                window = _Window()
                self._windows[full_key] = window
            return window

    def allow(self, key: str) -> bool:
        while True:
            window = self._window(key, create=True)
            with window.lock:
                if window.retired:
                    continue
                now = self._clock()
                window.prune(now - self.policy.window_seconds)
                if len(window.timestamps) >= self.policy.max_requests:
                    logger.info("Rate limit hit for %s", self._key(key))
                    return False
                window.timestamps.append(now)
                return True

    def reset(self, key: str) -> None:
        with self._registry_lock:
            window = self._windows.pop(self._key(key), None)
        if window is not None:
            with window.lock:
                window.retired = True

    def get_remaining(self, key: str) -> int:
        window = self._window(key, create=False)
        if window is None:
            return self.policy.max_requests
        with window.lock:
            window.prune(self._clock() - self.policy.window_seconds)
            return max(0, self.policy.max_requests - len(window.timestamps))

    def _reset_timestamp(self, key: str) -> float:
        now = self._clock()
        window = self._window(key, create=False)
        if window is None:
            return now
        with window.lock:
            window.prune(now - self.policy.window_seconds)
            if not window.timestamps:
                return now
            return window.timestamps[0] + self.policy.window_seconds

    def get_reset_time(self, key: str) -> datetime:
        return datetime.fromtimestamp(self._reset_timestamp(key), UTC)

    def retry_after(self, key: str) -> int:
        seconds = self._reset_timestamp(key) - self._clock()
        return max(1, math.ceil(seconds))

    def cleanup(self) -> int:
        """Evict keys whose every timestamp has left the window. Returns evicted count."""
        cutoff = self._clock() - self.policy.window_seconds
        evicted = 0
        with self._registry_lock:
            for full_key, window in list(self._windows.items()):
                # Never wait on a key lock here; busy windows are swept next round
                if not window.lock.acquire(blocking=False):
                    continue
                try:
                    window.prune(cutoff)
                    if not window.timestamps:
                        window.retired = True
                        del self._windows[full_key]
                        evicted += 1
                finally:
                    window.lock.release()
        if evicted:
            logger.debug("Rate limiter evicted %d idle keys", evicted)
        return evicted

    def _cleanup_loop(self) -> None:
        while not self._stop.wait(self.policy.window_seconds):
            self.cleanup()

    def close(self) -> None:
        self._stop.set()
        if self._cleanup_thread is not None:
            self._cleanup_thread.join(timeout=5)
            self._cleanup_thread = None

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._windows)
