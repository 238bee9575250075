"""
Retry decorators with exponential backoff for FareScope.

Fare lookups run inside a long sequential batch, so transient network
failures are retried a few times before the collector gives up on a route.
"""

import logging
from typing import Tuple, Type

import httpx
from tenacity import (
    after_log,
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

# Transport-level failures worth another attempt. HTTP status errors are not
# retried: a 4xx/5xx from the fare API is reported straight away.
API_RETRIABLE_EXCEPTIONS: Tuple[Type[Exception], ...] = (
    ConnectionError,
    TimeoutError,
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
)


def api_retry(
    max_attempts: int = 3,
    min_wait_seconds: float = 2,
    max_wait_seconds: float = 10,
):
    """
    Retry decorator for external API calls.

    Args:
        max_attempts: Maximum number of attempts (default: 3)
        min_wait_seconds: Minimum wait between attempts (default: 2)
        max_wait_seconds: Maximum wait between attempts (default: 10)

    Returns:
        tenacity decorator; works for sync and async callables

    Examples:
        >>> @api_retry(max_attempts=3)
        ... async def call_external_api():
        ...     async with httpx.AsyncClient() as client:
        ...         response = await client.get("https://api.example.com/data")
        ...         response.raise_for_status()
        ...         return response.json()
    """
    if max_attempts < 1:
        max_attempts = 1

    return retry(
        retry=retry_if_exception_type(API_RETRIABLE_EXCEPTIONS),
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(
            multiplier=min_wait_seconds, min=min_wait_seconds, max=max_wait_seconds
        ),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        after=after_log(logger, logging.DEBUG),
        reraise=True,
    )
