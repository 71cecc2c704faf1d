"""
Retry Utilities for hederakit.

Exponential backoff for transient mirror-node failures. The delay starts
at the base delay, is multiplied by the backoff factor after each failed
attempt and is capped at the maximum delay.
"""

from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass, field
from typing import (
    Awaitable,
    Callable,
    Optional,
    Tuple,
    Type,
    TypeVar,
)

from hederakit.utils.logging import get_logger

T = TypeVar("T")

_logger = get_logger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """
    Configuration for retry behavior.

    ``max_retries`` counts total attempts, so a policy of 3 performs the
    call at most three times.

    Example:
        ```python
        policy = RetryPolicy(
            max_retries=3,
            initial_delay_ms=500,
            retryable_errors=(QueryFailureError,),
            should_retry=lambda e: e.retryable,
        )
        ```
    """

    max_retries: int = 5
    """Maximum number of attempts."""

    initial_delay_ms: int = 2000
    """Delay in milliseconds before the second attempt."""

    max_delay_ms: int = 30000
    """Maximum delay in milliseconds (cap for exponential growth)."""

    backoff_factor: float = 2.0
    """Multiplier applied to the delay after every failed attempt."""

    jitter: bool = False
    """Whether to randomise delays (full jitter)."""

    retryable_errors: Tuple[Type[Exception], ...] = field(
        default_factory=lambda: (Exception,)
    )
    """Tuple of exception types that may trigger a retry."""

    should_retry: Optional[Callable[[Exception], bool]] = None
    """Optional predicate; a caught error is re-raised at once when it returns False."""

    def with_overrides(
        self,
        *,
        max_retries: Optional[int] = None,
        initial_delay_ms: Optional[int] = None,
        max_delay_ms: Optional[int] = None,
        backoff_factor: Optional[float] = None,
    ) -> "RetryPolicy":
        """Return a copy with the given fields replaced."""
        return RetryPolicy(
            max_retries=self.max_retries if max_retries is None else max_retries,
            initial_delay_ms=(
                self.initial_delay_ms if initial_delay_ms is None else initial_delay_ms
            ),
            max_delay_ms=self.max_delay_ms if max_delay_ms is None else max_delay_ms,
            backoff_factor=(
                self.backoff_factor if backoff_factor is None else backoff_factor
            ),
            jitter=self.jitter,
            retryable_errors=self.retryable_errors,
            should_retry=self.should_retry,
        )


DEFAULT_RETRY_POLICY = RetryPolicy()
"""Process-wide default used by clients that are not given their own policy."""


def calculate_delay(attempt: int, policy: RetryPolicy) -> float:
    """
    Calculate delay with exponential backoff and optional jitter.

    Args:
        attempt: Zero-based retry number (0 = delay before the second attempt)
        policy: Retry configuration

    Returns:
        Delay in seconds
    """
    delay_ms = policy.initial_delay_ms * (policy.backoff_factor ** attempt)
    delay_ms = min(delay_ms, policy.max_delay_ms)

    if policy.jitter:
        delay_ms = random.uniform(0, delay_ms)

    return delay_ms / 1000


async def retry_async(
    fn: Callable[[], Awaitable[T]],
    policy: Optional[RetryPolicy] = None,
    *,
    description: str = "operation",
) -> T:
    """
    Execute async function with retry logic.

    Args:
        fn: Async function to execute (no arguments)
        policy: Retry configuration (uses defaults if None)
        description: Label used in retry log lines

    Returns:
        Result of the function

    Raises:
        The first non-retryable error, or the last error once all
        attempts are exhausted.

    Example:
        ```python
        async def fetch_account():
            async with httpx.AsyncClient() as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.json()

        data = await retry_async(
            fetch_account,
            RetryPolicy(max_retries=3, retryable_errors=(httpx.HTTPError,)),
        )
        ```
    """
    policy = policy or DEFAULT_RETRY_POLICY
    attempts = max(1, policy.max_retries)
    last_error: Optional[Exception] = None

    for attempt in range(attempts):
        try:
            return await fn()
        except policy.retryable_errors as e:
            if policy.should_retry is not None and not policy.should_retry(e):
                raise
            last_error = e

            if attempt < attempts - 1:
                delay = calculate_delay(attempt, policy)
                _logger.warning(
                    f"Attempt {attempt + 1}/{attempts} failed for {description}: "
                    f"{e}. Retrying in {int(delay * 1000)}ms...",
                    extra={"attempt": attempt + 1, "delay_ms": int(delay * 1000)},
                )
                await asyncio.sleep(delay)

    _logger.error(
        f"Max retries ({attempts}) reached for {description}. Last error: {last_error}"
    )
    if last_error is not None:
        raise last_error

    raise RuntimeError("Retry exhausted without error")
