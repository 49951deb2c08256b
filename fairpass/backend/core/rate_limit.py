"""
Registration Rate Limiter.

Fixed-window counter keyed by client identifier, held in process memory.
Limits come from config/settings/security.yaml. Counts are per process,
so a multi-instance deployment gets one window per instance.
"""

import time
from collections.abc import Mapping
from dataclasses import dataclass

from fairpass.backend.core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class RateLimitResult:
    """Result of a rate limit check."""

    allowed: bool
    remaining: int
    reset_time: float

    @property
    def retry_after_seconds(self) -> int:
        return max(0, int(self.reset_time - time.time()) + 1)


@dataclass
class _Window:
    count: int
    reset_time: float


class FixedWindowRateLimiter:
    """
    In-memory fixed-window limiter.

    A window opens on the first request for an identifier and lasts
    window_seconds. Expired windows are pruned on every check.
    """

    def __init__(self) -> None:
        self._windows: dict[str, _Window] = {}

    def check(self, identifier: str, limit: int, window_seconds: int) -> RateLimitResult:
        now = time.time()
        self._prune(now)

        window = self._windows.get(identifier)
        if window is None or now > window.reset_time:
            reset_time = now + window_seconds
            self._windows[identifier] = _Window(count=1, reset_time=reset_time)
            return RateLimitResult(allowed=True, remaining=limit - 1, reset_time=reset_time)

        if window.count >= limit:
            logger.warning(
                "Rate limit exceeded",
                extra={"identifier": identifier, "limit": limit},
            )
            return RateLimitResult(allowed=False, remaining=0, reset_time=window.reset_time)

        window.count += 1
        return RateLimitResult(
            allowed=True,
            remaining=limit - window.count,
            reset_time=window.reset_time,
        )

    def reset(self) -> None:
        self._windows.clear()

    def _prune(self, now: float) -> None:
        expired = [key for key, w in self._windows.items() if now > w.reset_time]
        for key in expired:
            del self._windows[key]


def get_client_identifier(headers: Mapping[str, str]) -> str:
    """Client IP from proxy headers, first forwarded hop wins."""
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()

    real_ip = headers.get("x-real-ip")
    if real_ip:
        return real_ip

    cf_ip = headers.get("cf-connecting-ip")
    if cf_ip:
        return cf_ip

    return "unknown"


_rate_limiter: FixedWindowRateLimiter | None = None


def get_rate_limiter() -> FixedWindowRateLimiter:
    """Get or create the process-wide limiter."""
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = FixedWindowRateLimiter()
    return _rate_limiter


def check_rate_limit(identifier: str, limit: int, window_seconds: int) -> RateLimitResult:
    return get_rate_limiter().check(identifier, limit, window_seconds)
