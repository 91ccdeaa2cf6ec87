"""Rate-limit aware wrapper around a Contentful entries client.

Contentful answers throttled calls with a reset window (seconds). Each call
is retried after sleeping exactly that window, for as long as the time spent
since the call began stays within the retry budget. There is no attempt
limit, no jitter and no backoff multiplier.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import TypeVar

from loguru import logger
from tenacity import AsyncRetrying, RetryCallState, RetryError, retry_if_exception

from src.core.config import settings
from src.core.infrastructure.logging import BusinessEvents
from src.modules.projects.domain.exceptions import (
    ContentfulHttpError,
    ContentfulRateLimitExhaustedError,
)
from src.modules.projects.domain.ports import ContentfulEntriesClient, ContentfulEntry

T = TypeVar("T")


def _is_rate_limited(exc: BaseException) -> bool:
    return isinstance(exc, ContentfulHttpError) and exc.is_rate_limited


def _wait_for_rate_limit_reset(retry_state: RetryCallState) -> float:
    """Sleep for whatever reset window the backend reported."""
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    if isinstance(exc, ContentfulHttpError):
        return float(max(exc.rate_limit_reset, 0))
    return 0.0


class RetryingContentfulClient:
    """ContentfulEntriesClient that absorbs recoverable rate limiting.

    Args:
        client: the wrapped client performing the real calls
        budget_sec: total time budget per call (defaults to
            ``CONTENTFUL_RETRY_BUDGET_SEC``, 5 minutes)
        clock: monotonic clock, seconds
        sleep: async sleep used between attempts; defaults to a sleep that
            :meth:`interrupt` can cut short
    """

    def __init__(
        self,
        client: ContentfulEntriesClient,
        *,
        budget_sec: float | None = None,
        clock: Callable[[], float] | None = None,
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ) -> None:
        self._client = client
        self._budget_sec = (
            settings.CONTENTFUL_RETRY_BUDGET_SEC if budget_sec is None else budget_sec
        )
        self._clock = clock or time.monotonic
        self._sleep = sleep or self._interruptible_sleep
        self._wake = asyncio.Event()

    async def fetch_all_entries(
        self, query: Mapping[str, str]
    ) -> Sequence[ContentfulEntry]:
        return await self._call(
            "fetch_all_entries", lambda: self._client.fetch_all_entries(query)
        )

    async def update(self, entry: ContentfulEntry) -> ContentfulEntry:
        return await self._call("update", lambda: self._client.update(entry))

    async def publish(self, entry: ContentfulEntry) -> ContentfulEntry:
        return await self._call("publish", lambda: self._client.publish(entry))

    def interrupt(self) -> None:
        """Wake any pending rate-limit sleep so the retry happens now.

        Must be called from the event loop thread.
        """
        self._wake.set()

    async def _call(self, operation: str, call: Callable[[], Awaitable[T]]) -> T:
        started = self._clock()

        def budget_exhausted(_retry_state: RetryCallState) -> bool:
            return self._clock() - started > self._budget_sec

        def log_backoff(retry_state: RetryCallState) -> None:
            reset_sec = _wait_for_rate_limit_reset(retry_state)
            elapsed_sec = self._clock() - started
            logger.warning(
                f"Contentful {operation} rate limited, "
                f"retrying in {reset_sec:.0f}s (attempt {retry_state.attempt_number})"
            )
            BusinessEvents.rate_limit_backoff(
                operation=operation,
                reset_sec=reset_sec,
                attempt=retry_state.attempt_number,
                elapsed_sec=elapsed_sec,
            )

        retrying = AsyncRetrying(
            retry=retry_if_exception(_is_rate_limited),
            stop=budget_exhausted,
            wait=_wait_for_rate_limit_reset,
            sleep=self._sleep,
            before_sleep=log_backoff,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    return await call()
        except RetryError as exc:
            elapsed_sec = self._clock() - started
            logger.error(
                f"Contentful {operation} gave up after {elapsed_sec:.1f}s of rate limiting"
            )
            raise ContentfulRateLimitExhaustedError(
                operation, elapsed_sec, self._budget_sec
            ) from exc.last_attempt.exception()

    async def _interruptible_sleep(self, seconds: float) -> None:
        # only a signal raised while this sleep is pending may end it early
        self._wake.clear()
        try:
            await asyncio.wait_for(self._wake.wait(), timeout=seconds)
        except TimeoutError:
            return
        self._wake.clear()
        logger.info("Rate-limit wait interrupted, retrying immediately")
