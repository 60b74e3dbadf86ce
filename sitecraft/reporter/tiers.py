"""
Report Tier Resolver

Decides what part of a result is visible and which action is offered:

- overview: scores, summary counts, recommendations and the issue preview.
  The full violation list stays hidden even when the payload carries it.
  Offered action: upgrade to the detailed report.
- detailed: everything, including the violation list.
  Offered action: PDF download.

Results are either reports from the accessibility endpoints or analyses
loaded by id; an analysis takes its tier from ``report_type``.

Upgrade and download never modify the result they are given. A failed action
leaves the caller's result as it was and posts an error notice.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from sitecraft.client import SiteCraftAPIError
from sitecraft.models import ISSUE_CATEGORIES, Analysis, IssuePreview, Report, ReportTier, ScoreSet
from sitecraft.persistence import ResultsCache
from sitecraft.scoring import ScoreCard, build_score_cards
from sitecraft.scoring.severity import SCORE_LABELS
from .notices import Notifier

logger = logging.getLogger(__name__)

Result = Union[Report, Analysis]

MSG_LOADING_DETAILED = "Loading detailed report..."
MSG_DETAILED_LOADED = "Detailed report loaded successfully!"
MSG_DETAILED_FAILED = "Failed to load detailed report"
MSG_DETAILED_NOT_SAVED = "Detailed report could not be saved for this session"
MSG_DOWNLOADING = "Downloading PDF report..."
MSG_DOWNLOADED = "PDF report downloaded"
MSG_DOWNLOAD_FAILED = "Failed to download PDF"
MSG_DOWNLOAD_DETAILED_ONLY = "PDF download is available in the detailed report"

# Offered on overview analyses, which carry no upgradeInfo of their own
OVERVIEW_UPGRADE_FEATURES = [
    "Complete accessibility violation breakdown",
    "Detailed structure analysis",
    "ARIA landmarks and roles analysis",
    "Form accessibility analysis",
    "Table accessibility analysis",
    "Keyboard navigation analysis",
    "PDF report generation",
    "Advanced color contrast analysis",
]


class ReportAction(Enum):
    UPGRADE = "upgrade"
    DOWNLOAD = "download"


@dataclass
class TierView:
    """The visible part of a report."""
    tier: ReportTier
    analysis_id: str
    scores: ScoreSet
    score_cards: List[ScoreCard]
    summary: Dict[str, Any]
    recommendations: List[Any]
    action: ReportAction
    violations: List[Dict[str, Any]] = field(default_factory=list)
    issue_preview: Optional[IssuePreview] = None
    upgrade_features: List[str] = field(default_factory=list)

    @property
    def visible_violation_count(self) -> int:
        return len(self.violations)


def tier_of(result: Result) -> ReportTier:
    if isinstance(result, Report):
        return result.report_type
    return ReportTier.DETAILED if result.is_detailed else ReportTier.OVERVIEW


def result_id(result: Result) -> str:
    if isinstance(result, Report):
        return result.analysis_id
    return result.id


def _analysis_violations(analysis: Analysis) -> List[Dict[str, Any]]:
    """Issue groups flattened into violation rows, most severe first per category."""
    return [
        {
            "id": group.id,
            "category": category,
            "impact": group.severity,
            "help": group.title,
            "count": group.count,
        }
        for category in ISSUE_CATEGORIES
        for group in analysis.sorted_groups(category)
    ]


def _analysis_preview(analysis: Analysis) -> IssuePreview:
    severities = [
        issue.get("severity")
        for issues in analysis.issues.values()
        for issue in issues
        if isinstance(issue, dict)
    ]
    categories = [
        SCORE_LABELS.get(category, category.title())
        for category in ISSUE_CATEGORIES
        if analysis.issues.get(category) or analysis.grouped_issues.get(category)
    ]
    return IssuePreview(
        has_violations=analysis.total_issues > 0,
        critical_issues=severities.count("critical"),
        serious_issues=severities.count("serious"),
        categories=categories,
    )


def _resolve_analysis(analysis: Analysis) -> TierView:
    tier = tier_of(analysis)
    view = TierView(
        tier=tier,
        analysis_id=analysis.id,
        scores=analysis.scores,
        score_cards=build_score_cards(analysis.scores),
        summary=dict(analysis.summary),
        recommendations=[],
        action=ReportAction.DOWNLOAD if tier == ReportTier.DETAILED else ReportAction.UPGRADE,
    )

    if tier == ReportTier.DETAILED:
        view.violations = _analysis_violations(analysis)
    else:
        view.issue_preview = _analysis_preview(analysis)
        view.upgrade_features = list(OVERVIEW_UPGRADE_FEATURES)

    return view


def resolve_tier(result: Result) -> TierView:
    """Pure mapping from a report or analysis to its visible view."""
    if isinstance(result, Analysis):
        return _resolve_analysis(result)

    report = result
    view = TierView(
        tier=report.report_type,
        analysis_id=report.analysis_id,
        scores=report.scores,
        score_cards=build_score_cards(report.scores),
        summary=dict(report.summary),
        recommendations=list(report.recommendations),
        action=ReportAction.DOWNLOAD if report.is_detailed else ReportAction.UPGRADE,
    )

    if report.is_detailed:
        view.violations = list(report.violations or [])
    else:
        view.issue_preview = report.issue_preview
        if report.upgrade_info and report.upgrade_info.available:
            view.upgrade_features = list(report.upgrade_info.features)

    return view


class ReportTierResolver:
    """
    Applies tier rules and performs the tier actions against the API.

    Usage:
        resolver = ReportTierResolver(client, cache=ResultsCache(store))
        view = resolver.resolve(report)
        report = await resolver.upgrade(report)
    """

    def __init__(
        self,
        client,
        cache: Optional[ResultsCache] = None,
        notifier: Optional[Notifier] = None,
        language: str = "en",
    ):
        self.client = client
        self.cache = cache
        self.notifier = notifier or Notifier()
        self.language = language

    def resolve(self, result: Result) -> TierView:
        return resolve_tier(result)

    async def upgrade(self, result: Result) -> Result:
        """
        Request the detailed report for an overview result.

        Returns:
            The detailed report on success (also written to the cache, replacing
            the previous record), otherwise the result that was passed in.
        """
        if tier_of(result) == ReportTier.DETAILED:
            return result

        analysis_id = result_id(result)
        self.notifier.info(MSG_LOADING_DETAILED)
        try:
            detailed = await self.client.get_detailed_report(analysis_id, language=self.language)
        except SiteCraftAPIError as e:
            logger.warning(f"Upgrade of {analysis_id} failed: {e}")
            self.notifier.error(e.message or MSG_DETAILED_FAILED)
            return result

        if detailed.analysis_id != analysis_id:
            logger.error(f"Detailed report for {analysis_id} came back as {detailed.analysis_id}")
            self.notifier.error(MSG_DETAILED_FAILED)
            return result

        if not detailed.is_detailed:
            logger.error(f"Detailed report request for {analysis_id} returned {detailed.report_type.value}")
            self.notifier.error(MSG_DETAILED_FAILED)
            return result

        saved = True
        if self.cache is not None:
            saved = await self.cache.save(detailed)

        self.notifier.success(MSG_DETAILED_LOADED)
        if not saved:
            self.notifier.error(MSG_DETAILED_NOT_SAVED)
        return detailed

    async def download(self, result: Result, destination: Union[str, Path]) -> Optional[Path]:
        """
        Download the PDF for a detailed result.

        Returns:
            Path of the written PDF, or None when the tier has no download or
            the request failed.
        """
        if tier_of(result) != ReportTier.DETAILED:
            self.notifier.info(MSG_DOWNLOAD_DETAILED_ONLY)
            return None

        analysis_id = result_id(result)
        self.notifier.info(MSG_DOWNLOADING)
        try:
            path = await self.client.download_pdf(analysis_id, destination, language=self.language)
        except (SiteCraftAPIError, OSError) as e:
            logger.warning(f"PDF download for {analysis_id} failed: {e}")
            message = e.message if isinstance(e, SiteCraftAPIError) else None
            self.notifier.error(message or MSG_DOWNLOAD_FAILED)
            return None

        self.notifier.success(MSG_DOWNLOADED)
        return path
