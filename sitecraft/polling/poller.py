"""
Generic Polling

Repeatedly fetch a value until a terminal predicate holds, the attempt budget
runs out, or the caller asks to stop.

Attempts are strictly sequential: attempt n+1 starts only after attempt n has
resolved and the interval has elapsed. No sleep follows the final attempt.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class PollConfig:
    """Interval and attempt budget for a polling sequence."""
    interval: float = 5.0
    max_attempts: int = 60

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.interval < 0:
            raise ValueError("interval must not be negative")

    @classmethod
    def from_settings(cls, settings) -> "PollConfig":
        return cls(interval=settings.POLL_INTERVAL, max_attempts=settings.POLL_MAX_ATTEMPTS)


class PollOutcome(Enum):
    TERMINAL = "terminal"     # predicate held for a fetched value
    TIMED_OUT = "timed_out"   # budget exhausted without a terminal value
    CANCELLED = "cancelled"   # caller stopped the sequence
    ABORTED = "aborted"       # a non-retryable fetch error ended the sequence


@dataclass
class PollResult(Generic[T]):
    outcome: PollOutcome
    value: Optional[T] = None
    attempts: int = 0
    last_error: Optional[BaseException] = None

    @property
    def is_terminal(self) -> bool:
        return self.outcome == PollOutcome.TERMINAL


def _always(_: BaseException) -> bool:
    return True


async def poll(
    fetch: Callable[[], Awaitable[T]],
    is_terminal: Callable[[T], bool],
    config: Optional[PollConfig] = None,
    on_update: Optional[Callable[[T], Any]] = None,
    should_continue: Optional[Callable[[], bool]] = None,
    is_retryable: Callable[[BaseException], bool] = _always,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> PollResult[T]:
    """
    Poll ``fetch`` until ``is_terminal`` holds for its result.

    Args:
        fetch: Zero-argument coroutine function returning the current value
        is_terminal: Predicate that ends polling when true
        config: Interval and attempt budget
        on_update: Called with every successfully fetched value
        should_continue: Checked before each attempt and before publishing;
            returning False stops the sequence with CANCELLED
        is_retryable: Decides whether a fetch exception consumes an attempt
            (True) or aborts the sequence (False)
        sleep: Awaitable sleep, injectable for tests

    Returns:
        PollResult with the outcome, the last fetched value and the attempt count
    """
    config = config or PollConfig()
    keep_going = should_continue or (lambda: True)

    latest: Optional[T] = None
    last_error: Optional[BaseException] = None

    for attempt in range(1, config.max_attempts + 1):
        if not keep_going():
            return PollResult(PollOutcome.CANCELLED, latest, attempt - 1, last_error)

        try:
            value = await fetch()
        except Exception as e:
            last_error = e
            if not is_retryable(e):
                logger.warning(f"Poll attempt {attempt}/{config.max_attempts} failed permanently: {e}")
                return PollResult(PollOutcome.ABORTED, latest, attempt, e)
            logger.warning(f"Poll attempt {attempt}/{config.max_attempts} failed: {e}")
        else:
            if not keep_going():
                return PollResult(PollOutcome.CANCELLED, latest, attempt, last_error)

            latest = value
            if on_update is not None:
                on_update(value)

            if is_terminal(value):
                logger.debug(f"Poll reached terminal value after {attempt} attempt(s)")
                return PollResult(PollOutcome.TERMINAL, value, attempt, last_error)

        if attempt < config.max_attempts:
            await sleep(config.interval)

    logger.info(f"Polling gave up after {config.max_attempts} attempts")
    return PollResult(PollOutcome.TIMED_OUT, latest, config.max_attempts, last_error)
