"""
Data models for analyses and reports.

Analyses are the canonical record; reports are the tiered view served by the
accessibility endpoints.
"""

from .analysis import (
    Analysis,
    AnalysisStatus,
    IssueGroup,
    ScoreSet,
    Screenshot,
    ISSUE_CATEGORIES,
    TERMINAL_STATUSES,
)
from .report import IssuePreview, Report, ReportTier, UpgradeInfo

__all__ = [
    "Analysis",
    "AnalysisStatus",
    "IssueGroup",
    "ScoreSet",
    "Screenshot",
    "ISSUE_CATEGORIES",
    "TERMINAL_STATUSES",
    "IssuePreview",
    "Report",
    "ReportTier",
    "UpgradeInfo",
]
