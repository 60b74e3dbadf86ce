"""
Results Session

The view-level controller for one results screen. It owns:
- one AnalysisPoller (when opened with an analysis id)
- the cached record, through ResultsCache
- the tier resolver for upgrade/download

Outcomes are kept apart:
- READY: a completed analysis or a report is available
- FAILED: the backend reported the analysis as failed (not an error)
- NOT_FOUND: nothing cached, cache malformed, polling timed out or the
  analysis could not be fetched

After dispose() nothing the session started may change its state.
"""

import asyncio
import logging
from enum import Enum
from pathlib import Path
from typing import Awaitable, Callable, Optional, Union

from sitecraft.client import SiteCraftAPIError
from sitecraft.models import Analysis, AnalysisStatus, Report
from sitecraft.persistence import ResultsCache, SessionStore
from sitecraft.polling import AnalysisPoller, PollConfig, PollOutcome
from sitecraft.reporter import Notifier, ReportTierResolver, TierView

logger = logging.getLogger(__name__)


NOT_FOUND_MESSAGE = "Results not found. Please try again."
ANALYSIS_FAILED_MESSAGE = "The analysis could not be completed. Please run a new scan."
SCAN_FAILED_MESSAGE = "Unable to analyze the website. Please check the URL and try again."


class ResultsStatus(Enum):
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"
    NOT_FOUND = "not_found"


class ResultsSession:
    """
    Usage:
        async with ResultsSession(client, MemorySessionStore()) as session:
            await session.open("a1b2c3")
            if session.status == ResultsStatus.READY:
                ...
    """

    def __init__(
        self,
        client,
        store: SessionStore,
        notifier: Optional[Notifier] = None,
        poll_config: Optional[PollConfig] = None,
        language: str = "en",
        sleep: Callable[[float], Awaitable] = asyncio.sleep,
    ):
        self.client = client
        self.cache = ResultsCache(store)
        self.notifier = notifier or Notifier()
        self.poll_config = poll_config or PollConfig()
        self.language = language
        self.resolver = ReportTierResolver(client, self.cache, self.notifier, language)
        self._sleep = sleep

        self.status = ResultsStatus.LOADING
        self.analysis: Optional[Analysis] = None
        self.report: Optional[Report] = None
        self.message: Optional[str] = None

        self._poller: Optional[AnalysisPoller] = None
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def result(self) -> Optional[Union[Report, Analysis]]:
        """The report, or else the ready analysis, that tier actions apply to."""
        if self.report is not None:
            return self.report
        if self.analysis is not None and self.status == ResultsStatus.READY:
            return self.analysis
        return None

    @property
    def view(self) -> Optional[TierView]:
        """Tiered view of the current result, if one is loaded."""
        result = self.result
        if result is None:
            return None
        return self.resolver.resolve(result)

    # ========================================================================
    # LOADING
    # ========================================================================

    async def open(self, analysis_id: Optional[str] = None) -> ResultsStatus:
        """Poll ``analysis_id`` or, without one, show the cached result."""
        if self._disposed:
            raise RuntimeError("Results session is disposed")
        self.status = ResultsStatus.LOADING
        if analysis_id:
            return await self._open_analysis(analysis_id)
        return await self._open_cached()

    def _on_update(self, analysis: Analysis):
        if self._disposed:
            return
        self.analysis = analysis

    async def _open_analysis(self, analysis_id: str) -> ResultsStatus:
        poller = AnalysisPoller(self.client, analysis_id, config=self.poll_config, sleep=self._sleep)
        poller.subscribe(self._on_update)
        self._poller = poller

        result = await poller.run()
        if self._disposed or result.outcome == PollOutcome.CANCELLED:
            return self.status

        if result.outcome == PollOutcome.TERMINAL:
            analysis = result.value
            if analysis.status == AnalysisStatus.FAILED:
                self._set(ResultsStatus.FAILED, ANALYSIS_FAILED_MESSAGE)
            else:
                await self.cache.save(analysis)
                self._set(ResultsStatus.READY)
            return self.status

        logger.info(f"Results for {analysis_id} unavailable ({result.outcome.value})")
        self._set(ResultsStatus.NOT_FOUND, NOT_FOUND_MESSAGE)
        return self.status

    async def _open_cached(self) -> ResultsStatus:
        cached = await self.cache.load()
        if self._disposed:
            return self.status

        if cached is None:
            self._set(ResultsStatus.NOT_FOUND, NOT_FOUND_MESSAGE)
        elif isinstance(cached, Report):
            self.report = cached
            self._set(ResultsStatus.READY)
        elif cached.status == AnalysisStatus.FAILED:
            self.analysis = cached
            self._set(ResultsStatus.FAILED, ANALYSIS_FAILED_MESSAGE)
        else:
            self.analysis = cached
            self._set(ResultsStatus.READY)
        return self.status

    def _set(self, status: ResultsStatus, message: Optional[str] = None):
        self.status = status
        self.message = message

    # ========================================================================
    # ACTIONS
    # ========================================================================

    async def start_new_scan(self, url: str, report_type: str = "overview") -> Optional[Report]:
        """Clear the cached result and scan ``url``."""
        if self._disposed:
            raise RuntimeError("Results session is disposed")

        await self.cache.clear()
        self.analysis = None
        self.report = None
        self._set(ResultsStatus.LOADING)

        try:
            report = await self.client.analyze_website(url, report_type=report_type, language=self.language)
        except SiteCraftAPIError as e:
            logger.warning(f"Scan of {url} failed: {e}")
            if not self._disposed:
                self.notifier.error(e.message or SCAN_FAILED_MESSAGE)
                self._set(ResultsStatus.NOT_FOUND, e.message or SCAN_FAILED_MESSAGE)
            return None

        if self._disposed:
            return report

        self.report = report
        await self.cache.save(report)
        self._set(ResultsStatus.READY)
        return report

    async def upgrade(self) -> bool:
        """Upgrade the current overview result. Returns True if the tier changed."""
        current = self.result
        if current is None:
            return False
        upgraded = await self.resolver.upgrade(current)
        if self._disposed or upgraded is current:
            return False
        self.report = upgraded
        return True

    async def download(self, destination: Union[str, Path]) -> Optional[Path]:
        current = self.result
        if current is None:
            return None
        return await self.resolver.download(current, destination)

    # ========================================================================
    # LIFECYCLE
    # ========================================================================

    def dispose(self):
        """Discard the session; stops polling and freezes state."""
        if self._disposed:
            return
        self._disposed = True
        if self._poller is not None:
            self._poller.dispose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.dispose()
