"""Exponential backoff decorators for upstream calls (WeatherAPI, LLM providers)."""

import logging

import httpx
import structlog
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = structlog.stdlib.get_logger(__name__)

# Network-level failures only; HTTP error statuses are passed through to the caller.
TRANSIENT_HTTP_ERRORS = (httpx.ConnectError, httpx.TimeoutException)


def _backoff(max_attempts: int, min_wait: float, max_wait: float, exceptions: tuple):
    return retry(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=1, min=min_wait, max=max_wait),
        retry=retry_if_exception_type(exceptions),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )


def http_retry(
    max_attempts: int = 3,
    min_wait: float = 1.0,
    max_wait: float = 8.0,
    exceptions: tuple = TRANSIENT_HTTP_ERRORS,
):
    """Retry decorator for outbound HTTP calls.

    Args:
        max_attempts: Total attempts including the first
        min_wait: Min wait between attempts (seconds)
        max_wait: Max wait between attempts (seconds)
        exceptions: Exception types worth another attempt
    """
    return _backoff(max_attempts, min_wait, max_wait, exceptions)


def llm_retry(
    max_attempts: int = 3,
    min_wait: float = 2.0,
    max_wait: float = 30.0,
    exceptions: tuple = (Exception,),
):
    """Retry decorator for LLM generation; rate limits clear slowly so waits run longer."""
    return _backoff(max_attempts, min_wait, max_wait, exceptions)
