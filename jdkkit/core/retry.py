"""
Bounded retry loop with fixed or exponential backoff.

Attempts are strictly sequential: the loop sleeps between attempts and never
runs two attempts at once. There is no overall timeout; callers needing a
bounded total latency must impose it around the whole call.
"""

import logging
import time
from typing import Callable, TypeVar

from jdkkit.core.exceptions import FatalFetchError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_RETRIES = 10
DEFAULT_INTERVAL_MS = 1000

MAX_RETRIES_MESSAGE = "Unable to download JDK, max retries reached"


def retry(
    fn: Callable[[], T],
    retries: int = DEFAULT_RETRIES,
    interval: int = DEFAULT_INTERVAL_MS,
    exponential: bool = False,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Call ``fn`` until it succeeds or the retry budget is used up.

    Args:
        fn: Zero-argument callable performing one attempt
        retries: Number of retries after the first attempt
        interval: Milliseconds to wait before the next attempt
        exponential: Double the interval after every failed attempt
        sleep: Sleep function taking seconds (injectable for tests)

    Returns:
        The return value of the first successful attempt

    Raises:
        FatalFetchError: If every attempt failed; chained from the last error
        ValueError: If retries or interval is negative

    Example:
        >>> path = retry(lambda: download_file(url, dest), 10, 1000, True)
    """
    if retries < 0:
        raise ValueError(f"retries must be >= 0, got {retries}")
    if interval < 0:
        raise ValueError(f"interval must be >= 0, got {interval}")

    retries_left = retries
    delay = interval

    while True:
        try:
            return fn()
        except Exception as e:
            if retries_left <= 0:
                raise FatalFetchError(MAX_RETRIES_MESSAGE) from e

            logger.warning(f"Download failed because of: {e}")
            logger.warning(f"Retrying after a grace period of {delay}ms.")
            logger.info(f"{retries_left} retries left")

            sleep(delay / 1000.0)

            retries_left -= 1
            if exponential:
                delay *= 2
