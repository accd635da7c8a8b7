import logging
from collections.abc import Callable
from typing import Any

import httpx
from tenacity import RetryCallState, retry, retry_if_exception_type, stop_after_attempt, wait_exponential_jitter

logger = logging.getLogger(__name__)

_RETRYABLE = (httpx.TransportError, httpx.HTTPStatusError)


def default_http_retry(label: str, *, attempts: int = 3) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Tenacity decorator for idempotent reads against the sync server.

    Each retry logs ``"<label> failed (attempt N), retrying: <error>"``; the
    final failure is re-raised unchanged. Writes never go through this.
    """

    def _warn(state: RetryCallState) -> None:
        error = state.outcome.exception() if state.outcome is not None else None
        logger.warning("%s failed (attempt %d), retrying: %s", label, state.attempt_number, error)

    return retry(
        retry=retry_if_exception_type(_RETRYABLE),
        stop=stop_after_attempt(attempts),
        wait=wait_exponential_jitter(initial=1, max=10),
        before_sleep=_warn,
        reraise=True,
    )
