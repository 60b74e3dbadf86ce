"""
Report Tiers

Visibility rules for overview vs detailed reports, the upgrade/download
actions, user notices, and plain-text rendering.
"""

from .notices import Notice, NoticeLevel, Notifier
from .tiers import ReportAction, ReportTierResolver, TierView, resolve_tier
from .render import render_analysis, render_score_cards, render_tier_view

__all__ = [
    "Notice",
    "NoticeLevel",
    "Notifier",
    "ReportAction",
    "ReportTierResolver",
    "TierView",
    "resolve_tier",
    "render_analysis",
    "render_score_cards",
    "render_tier_view",
]
