"""
Caller-side retry for retryable application errors.

The circuit breaker never retries. Callers that want to (the tool
dispatcher) wrap their call with ``create_retry_decorator`` which retries
only errors flagged ``retryable`` (service unavailable, service timeout).
"""

import logging

from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from design_system.core.config.constants import RETRY_BASE_DELAY, RETRY_MAX_DELAY
from design_system.core.exceptions import is_retryable


def create_retry_decorator(
    max_attempts: int = 1,
    base_delay: float = RETRY_BASE_DELAY,
    max_delay: float = RETRY_MAX_DELAY,
):
    """
    Build a tenacity decorator for async callables.

    Args:
        max_attempts: Total attempts including the first (1 disables retry)
        base_delay: Initial backoff in seconds
        max_delay: Backoff ceiling in seconds

    The last error is re-raised unchanged once attempts are exhausted.
    """
    std_logger = logging.getLogger(__name__)  # Tenacity needs std lib logger

    return retry(
        stop=stop_after_attempt(max(1, max_attempts)),
        wait=wait_exponential_jitter(initial=base_delay, max=max_delay),
        retry=retry_if_exception(is_retryable),
        before_sleep=before_sleep_log(std_logger, logging.WARNING),
        reraise=True,
    )
