"""
Resilience Infrastructure.

Circuit breaker listener, retry callback, and the composed HTTP client used by
every third-party integration (email, WhatsApp, CRM).

The composed stack is always applied in this order (outside-in):
    Circuit Breaker (aiobreaker) → Retry (tenacity) → Timeout (httpx) → Call

Usage:
    from fairpass.backend.core.resilience import ProviderHttpClient

    client = ProviderHttpClient("resend")
    response = await client.request("POST", url, json=payload)
"""

from datetime import timedelta
from typing import Any

import aiobreaker
import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from fairpass.backend.core.config import get_app_config
from fairpass.backend.core.logging import get_logger

logger = get_logger(__name__)


class ResilienceLogger(aiobreaker.CircuitBreakerListener):
    """Circuit breaker listener that emits structured resilience events.

    Every state transition is logged with a standardized set of fields:

        jq 'select(.resilience_event != null)' logs/system.jsonl
    """

    def __init__(self, dependency: str) -> None:
        self.dependency = dependency

    def state_change(self, cb: aiobreaker.CircuitBreaker, old_state: Any, new_state: Any) -> None:
        event_map = {
            "open": "circuit_breaker_opened",
            "half-open": "circuit_breaker_half_open",
            "closed": "circuit_breaker_closed",
        }
        new_str = str(new_state).lower()
        event = event_map.get(new_str, f"circuit_breaker_{new_str}")
        log_level = "error" if new_str == "open" else "info"

        getattr(logger, log_level)(
            f"Circuit breaker {self.dependency}: {old_state} → {new_state}",
            extra={
                "resilience_event": event,
                "dependency": self.dependency,
                "failure_count": cb.fail_counter,
            },
        )

    def failure(self, cb: aiobreaker.CircuitBreaker, exception: Exception) -> None:
        logger.warning(
            f"Circuit breaker {self.dependency}: failure recorded",
            extra={
                "resilience_event": "circuit_breaker_failure",
                "dependency": self.dependency,
                "failure_count": cb.fail_counter,
                "error": str(exception),
            },
        )


def log_retry(retry_state: Any) -> None:
    """Tenacity before_sleep callback that emits structured retry events.

    Args:
        retry_state: tenacity.RetryCallState instance
    """
    duration_ms = None
    if retry_state.outcome_timestamp and retry_state.start_time:
        duration_ms = round(
            (retry_state.outcome_timestamp - retry_state.start_time) * 1000
        )

    error = None
    if retry_state.outcome and retry_state.outcome.failed:
        error = str(retry_state.outcome.exception())

    fn_name = getattr(retry_state.fn, "__name__", "http_request")

    logger.warning(
        f"Retrying {fn_name} (attempt {retry_state.attempt_number})",
        extra={
            "resilience_event": "retry_attempt",
            "dependency": fn_name,
            "attempt": retry_state.attempt_number,
            "duration_ms": duration_ms,
            "error": error,
        },
    )


def create_circuit_breaker(
    dependency: str,
    fail_max: int = 5,
    timeout_duration: int = 30,
) -> aiobreaker.CircuitBreaker:
    """Create a circuit breaker with structured logging.

    Args:
        dependency: Name of the external dependency (for logging)
        fail_max: Number of failures before opening
        timeout_duration: Seconds to wait before half-open test
    """
    return aiobreaker.CircuitBreaker(
        fail_max=fail_max,
        timeout_duration=timedelta(seconds=timeout_duration),
        listeners=[ResilienceLogger(dependency)],
    )


class ProviderHttpClient:
    """
    httpx client wrapped in a circuit breaker and transport-level retries.

    Only transport failures (connection errors, timeouts) are retried. An HTTP
    error status is returned to the caller, which decides what it means.

    Args:
        dependency: Provider name used in logs and breaker events
        transport: Optional httpx transport (tests pass httpx.MockTransport)
    """

    def __init__(
        self,
        dependency: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        config = get_app_config().integrations.http
        self.dependency = dependency
        self._config = config
        self._transport = transport
        self._breaker = create_circuit_breaker(
            dependency,
            fail_max=config.breaker_fail_max,
            timeout_duration=config.breaker_timeout_seconds,
        )

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request through the breaker. Raises on exhausted retries."""
        return await self._breaker.call_async(self._send_with_retry, method, url, **kwargs)

    async def _send_with_retry(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._config.retry_attempts),
            wait=wait_exponential(multiplier=1, min=1, max=self._config.retry_max_wait_seconds),
            retry=retry_if_exception_type(httpx.TransportError),
            before_sleep=log_retry,
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                async with httpx.AsyncClient(
                    timeout=self._config.timeout_seconds,
                    transport=self._transport,
                ) as client:
                    return await client.request(method, url, **kwargs)
        raise RuntimeError("unreachable")
