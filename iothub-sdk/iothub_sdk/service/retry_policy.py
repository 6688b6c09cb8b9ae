# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""Retry of transient IoTHub registry failures using exponential back-off with jitter"""

import asyncio
import logging
import random
from typing import Awaitable, Callable, Optional, TypeVar
from .errors import IoTHubServiceError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_RETRIES = 5
DEFAULT_INITIAL_DELAY = 1
DEFAULT_MAX_DELAY = 30

# The time, after jitter is applied, can be up to this percentage larger than the
# pre-jittered time.
JITTER_UP_FACTOR = 0.25

# The time, after jitter is applied, can be up to this percentage smaller than the
# pre-jittered time.
JITTER_DOWN_FACTOR = 0.5


class RetryPolicy:
    """Exponential back-off with jitter.

    The first retry waits `initial_delay` seconds, the second 2x that, the third 4x and so
    on, capped at `max_delay` before jitter is applied.
    """

    def __init__(
        self,
        max_retries: int = DEFAULT_MAX_RETRIES,
        initial_delay: float = DEFAULT_INITIAL_DELAY,
        max_delay: float = DEFAULT_MAX_DELAY,
        jitter: bool = True,
    ) -> None:
        """
        :param int max_retries: Maximum number of retries after the first attempt
        :param float initial_delay: Seconds to sleep before the first retry
        :param float max_delay: Largest number of seconds to sleep between retries
            (before applying jitter)
        :param bool jitter: Whether to randomize the delays

        :raises: ValueError if a value is negative, or if max_delay is less than initial_delay
        :raises: TypeError if max_retries is not an integer
        """
        if isinstance(max_retries, bool) or not isinstance(max_retries, int):
            raise TypeError("Invalid type for 'max_retries'. Must be an integer.")
        if max_retries < 0:
            raise ValueError("'max_retries' cannot be negative")
        if initial_delay < 0:
            raise ValueError("'initial_delay' cannot be negative")
        if max_delay < initial_delay:
            raise ValueError("'max_delay' cannot be less than 'initial_delay'")
        self.max_retries = max_retries
        self.initial_delay = initial_delay
        self.max_delay = max_delay
        self.jitter = jitter

    def should_retry(self, error: BaseException, attempt: int) -> bool:
        """Return True if the failed attempt (1-based) should be retried"""
        if not isinstance(error, IoTHubServiceError):
            return False
        return error.is_transient and attempt <= self.max_retries

    def get_delay(self, attempt: int) -> float:
        """Return the seconds to sleep after the given failed attempt (1-based)"""
        delay = min(self.initial_delay * pow(2, attempt - 1), self.max_delay)
        if self.jitter:
            delay = _apply_jitter(delay)
        return delay


def _apply_jitter(base: float) -> float:
    min_value = base * (1 - JITTER_DOWN_FACTOR)
    max_value = base * (1 + JITTER_UP_FACTOR)
    return random.uniform(min_value, max_value)


async def retry_transient(
    coro_fn: Callable[[], Awaitable[T]], policy: Optional[RetryPolicy] = None
) -> T:
    """Invoke `coro_fn` and await the result, retrying transient IoTHubServiceErrors.

    Non-transient errors, and any other exception, are raised immediately. Cancellation
    is never retried.

    :param coro_fn: A callable with no arguments returning an awaitable
        (e.g. `lambda: client.devices.get("mydevice")`)
    :param policy: The RetryPolicy to use. Default policy if not provided.
    :type policy: :class:`RetryPolicy`

    :returns: The result of the awaitable returned by `coro_fn`
    """
    if policy is None:
        policy = RetryPolicy()
    attempt = 1
    while True:
        try:
            return await coro_fn()
        except IoTHubServiceError as e:
            if not policy.should_retry(e, attempt):
                if e.is_transient:
                    logger.warning(
                        "Retry limit exceeded after {} attempts. Raising {}".format(attempt, e)
                    )
                raise
            delay = policy.get_delay(attempt)
            logger.info(
                "Attempt {} raised transient error {}. Sleeping for {:.2f}s and trying again".format(
                    attempt, e, delay
                )
            )
            attempt += 1
            await asyncio.sleep(delay)
