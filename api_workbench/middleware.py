"""
Process-wide rate limiting for the HTTP routes.
"""

import threading
import time

from fastapi import status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware


class TokenBucket:
    """
    Token bucket refilled at `rate` tokens per second up to `burst` tokens.

    Thread-safe; the clock is injectable for tests.
    """

    def __init__(self, rate: float, burst: int, clock=time.monotonic) -> None:
        self.rate = rate
        self.burst = burst
        self._clock = clock
        self._tokens = float(burst)
        self._updated = clock()
        self._lock = threading.Lock()

    def allow(self) -> bool:
        with self._lock:
            now = self._clock()
            elapsed = max(0.0, now - self._updated)
            self._updated = now
            self._tokens = min(float(self.burst), self._tokens + elapsed * self.rate)
            if self._tokens < 1.0:
                return False
            self._tokens -= 1.0
            return True


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests with 429 once the shared bucket is empty."""

    def __init__(self, app, bucket: TokenBucket) -> None:
        super().__init__(app)
        self.bucket = bucket

    async def dispatch(self, request, call_next):
        if not self.bucket.allow():
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"detail": "Too many requests", "error_code": "RATE_LIMITED"},
            )
        return await call_next(request)
