"""
Analysis Polling Controller

Polls one analysis until it reaches a terminal status, publishing every
fetched record to subscribers. Owned by a results session; disposing the owner
disposes the poller, after which nothing is published and no further attempt
is made.
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

import httpx

from sitecraft.client import SiteCraftAPIError
from sitecraft.models import Analysis
from .poller import PollConfig, PollOutcome, PollResult, poll

logger = logging.getLogger(__name__)


def is_transient_error(error: BaseException) -> bool:
    """Network, timeout, parse and 5xx failures; 4xx API errors are final."""
    if isinstance(error, SiteCraftAPIError):
        return error.is_retryable
    return isinstance(error, (httpx.HTTPError, ValueError))


class AnalysisPoller:
    """
    Poll an analysis by id.

    Usage:
        poller = AnalysisPoller(client, "a1b2c3")
        poller.subscribe(lambda analysis: print(analysis.status))
        result = await poller.run()
    """

    def __init__(
        self,
        client,
        analysis_id: str,
        config: Optional[PollConfig] = None,
        sleep: Callable[[float], Awaitable] = asyncio.sleep,
    ):
        if not analysis_id or not str(analysis_id).strip():
            raise ValueError("analysis_id must be a non-empty identifier")

        self.client = client
        self.analysis_id = str(analysis_id)
        self.config = config or PollConfig()
        self._sleep = sleep

        self.latest: Optional[Analysis] = None
        self.attempts = 0
        self.result: Optional[PollResult[Analysis]] = None

        self._listeners: List[Callable[[Analysis], None]] = []
        self._disposed = False
        self._started = False
        self._task: Optional[asyncio.Task] = None

    @property
    def disposed(self) -> bool:
        return self._disposed

    def subscribe(self, listener: Callable[[Analysis], None]):
        """Register a callback for every published record."""
        self._listeners.append(listener)

    async def _fetch(self) -> Analysis:
        self.attempts += 1
        logger.debug(f"Polling analysis {self.analysis_id} (attempt {self.attempts})")
        return await self.client.get_analysis(self.analysis_id)

    def _publish(self, analysis: Analysis):
        if self._disposed:
            return
        self.latest = analysis
        for listener in list(self._listeners):
            # A listener may dispose the poller
            if self._disposed:
                break
            listener(analysis)

    def _cancelled_result(self) -> PollResult[Analysis]:
        return PollResult(PollOutcome.CANCELLED, self.latest, self.attempts)

    async def run(self) -> PollResult[Analysis]:
        """Run the polling sequence to completion in the current task."""
        if self._started:
            raise RuntimeError(f"Poller for {self.analysis_id} already started")
        self._started = True

        if self._disposed:
            self.result = self._cancelled_result()
            return self.result

        try:
            result = await poll(
                self._fetch,
                lambda analysis: analysis.is_terminal,
                config=self.config,
                on_update=self._publish,
                should_continue=lambda: not self._disposed,
                is_retryable=is_transient_error,
                sleep=self._sleep,
            )
        except asyncio.CancelledError:
            if not self._disposed:
                raise
            result = self._cancelled_result()

        self.result = result
        if result.outcome == PollOutcome.TERMINAL:
            logger.info(
                f"Analysis {self.analysis_id} reached {result.value.status.value} "
                f"after {result.attempts} attempt(s)"
            )
        elif result.outcome == PollOutcome.TIMED_OUT:
            logger.warning(f"Analysis {self.analysis_id} not finished after {result.attempts} attempts")
        elif result.outcome == PollOutcome.ABORTED:
            logger.warning(f"Polling analysis {self.analysis_id} aborted: {result.last_error}")
        return result

    def start(self) -> asyncio.Task:
        """Run the sequence in a background task."""
        if self._task is None:
            self._task = asyncio.create_task(self.run())
        return self._task

    async def wait(self) -> PollResult[Analysis]:
        """Wait for a sequence started with start()."""
        if self._task is None:
            raise RuntimeError("Poller was not started")
        try:
            return await self._task
        except asyncio.CancelledError:
            if not (self._disposed and self._task.cancelled()):
                raise
            return self.result or self._cancelled_result()

    def dispose(self):
        """Stop polling. Safe to call more than once and from a listener."""
        if self._disposed:
            return
        self._disposed = True
        logger.debug(f"Disposing poller for {self.analysis_id} after {self.attempts} attempt(s)")
        if self._task is not None and not self._task.done() and asyncio.current_task() is not self._task:
            self._task.cancel()
