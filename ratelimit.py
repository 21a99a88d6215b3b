"""
ratelimit.py — per-client fixed-window request limiter.

Each key (client IP) gets `max_requests` hits per window; the window starts
at the key's first hit and resets once it has elapsed.

State lives in process memory, like the rest of the app's request-scoped
state. (With several worker processes, each enforces its own limit.)
"""

import threading
import time
from dataclasses import dataclass


@dataclass
class RateLimitStatus:
    allowed: bool
    limit: int
    remaining: int
    reset_in: int   # whole seconds until the window resets

    def headers(self) -> dict:
        """IETF draft RateLimit-* response headers."""
        return {
            "RateLimit-Limit": str(self.limit),
            "RateLimit-Remaining": str(self.remaining),
            "RateLimit-Reset": str(self.reset_in),
        }


class RateLimiter:
    def __init__(self, max_requests: int, window_seconds: int, clock=time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        # key → (window_start, hit_count)
        self._hits: dict[str, tuple[float, int]] = {}

    def hit(self, key: str) -> RateLimitStatus:
        """Record one request for *key* and say whether it may proceed."""
        now = self._clock()
        with self._lock:
            self._evict_expired(now)
            start, count = self._hits.get(key, (now, 0))
            count += 1
            self._hits[key] = (start, count)

        reset_in = max(0, int(round(start + self.window_seconds - now)))
        return RateLimitStatus(
            allowed=count <= self.max_requests,
            limit=self.max_requests,
            remaining=max(0, self.max_requests - count),
            reset_in=reset_in,
        )

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()

    def _evict_expired(self, now: float) -> None:
        expired = [
            key for key, (start, _) in self._hits.items()
            if now - start >= self.window_seconds
        ]
        for key in expired:
            del self._hits[key]
