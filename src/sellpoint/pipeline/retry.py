"""Bounded retry of a generation attempt."""
from __future__ import annotations
import logging
import time
from dataclasses import dataclass
from typing import Callable, TypeVar

from tenacity import RetryCallState, RetryError, Retrying, retry_if_exception_type, stop_after_attempt

from sellpoint.common.errors import AttemptError, UpstreamExhaustedError

LOGGER = logging.getLogger("sellpoint.pipeline.retry")

T = TypeVar("T")

def no_backoff(attempt: int) -> float:
    return 0.0

@dataclass(frozen=True)
class RetryPolicy:
    """
    Attempt budget and delay between attempts.

    Args:
        max_attempts: Total attempts including the first one.
        backoff: Seconds to wait after failed attempt ``n`` before attempt ``n + 1``.
    """
    max_attempts: int = 3
    backoff: Callable[[int], float] = no_backoff

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

DEFAULT_RETRY_POLICY = RetryPolicy()

def _log_failure(state: RetryCallState) -> None:
    LOGGER.warning("[Attempt %d] Failed: %s", state.attempt_number, state.outcome.exception())

def _log_retry(state: RetryCallState) -> None:
    LOGGER.info("[Attempt %d] Retrying...", state.attempt_number)

def run_with_retry(
    attempt: Callable[[], T],
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Call ``attempt`` until it succeeds or the policy's budget is spent.

    Only ``AttemptError`` is retried; anything else propagates unchanged.

    Raises:
        UpstreamExhaustedError: every attempt failed. The last failure is
            kept on the exception for logging only.
    """
    def _sleep(seconds: float) -> None:
        if seconds > 0:
            sleep(seconds)

    retrying = Retrying(
        stop=stop_after_attempt(policy.max_attempts),
        wait=lambda state: policy.backoff(state.attempt_number),
        retry=retry_if_exception_type(AttemptError),
        sleep=_sleep,
        after=_log_failure,
        before_sleep=_log_retry,
    )
    try:
        return retrying(attempt)
    except RetryError as e:
        last_error = e.last_attempt.exception()
        LOGGER.error("All %d attempts failed: %s", policy.max_attempts, last_error)
        raise UpstreamExhaustedError(policy.max_attempts, last_error) from last_error
