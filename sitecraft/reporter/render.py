"""
Plain-text rendering of analyses and tiered reports for the terminal.
"""

from typing import List

from sitecraft.models import ISSUE_CATEGORIES, Analysis
from sitecraft.scoring import ScoreCard, build_score_cards
from .tiers import ReportAction, TierView


SEVERITY_MARKERS = {
    "good": "+",
    "warning": "!",
    "critical": "x",
}


def render_score_cards(cards: List[ScoreCard]) -> str:
    lines = []
    for card in cards:
        marker = SEVERITY_MARKERS[card.severity.value]
        lines.append(f"  [{marker}] {card.label:<14} {card.score:>5.0f}  {card.grade:<2}  ({card.severity.value})")
    return "\n".join(lines)


def render_analysis(analysis: Analysis, max_groups: int = 10) -> str:
    lines = [
        f"Analysis {analysis.id}",
        f"URL:    {analysis.url or 'Unknown Website'}",
        f"Status: {analysis.status.value}",
        "",
        "Scores:",
        render_score_cards(build_score_cards(analysis.scores)),
        "",
        f"Issues: {analysis.total_issues}",
    ]

    for category in ISSUE_CATEGORIES:
        groups = analysis.sorted_groups(category)
        if not groups:
            continue
        lines.append(f"  {category.title()} ({len(groups)} groups)")
        # Overview analyses show counts only
        if not analysis.is_detailed:
            continue
        for group in groups[:max_groups]:
            lines.append(f"    - [{group.severity or 'unknown'}] {group.title} x{group.count}")
        if len(groups) > max_groups:
            lines.append(f"    ... {len(groups) - max_groups} more")

    screenshots = [s.display_url for s in analysis.screenshots if s.display_url]
    if screenshots:
        lines.append("")
        lines.append("Screenshots:")
        lines.extend(f"  {url}" for url in screenshots)

    if not analysis.is_detailed:
        lines.append("\nUpgrade to the detailed report for the full issue list.")

    return "\n".join(lines)


def render_tier_view(view: TierView, max_violations: int = 20) -> str:
    lines = [
        f"Report {view.analysis_id} ({view.tier.value})",
        "",
        "Scores:",
        render_score_cards(view.score_cards),
    ]

    total = view.summary.get("totalViolations")
    if total is not None:
        lines.append(f"\nViolations: {total}")

    if view.violations:
        for violation in view.violations[:max_violations]:
            title = violation.get("help") or violation.get("description") or violation.get("id", "Unknown Issue")
            impact = violation.get("impact") or "unknown"
            lines.append(f"  - [{impact}] {title}")
        if len(view.violations) > max_violations:
            lines.append(f"  ... {len(view.violations) - max_violations} more")
    elif view.issue_preview and view.issue_preview.has_violations:
        preview = view.issue_preview
        lines.append(
            f"  {preview.critical_issues} critical and {preview.serious_issues} serious issues"
        )
        if preview.categories:
            lines.append(f"  Categories: {', '.join(preview.categories)}")

    if view.recommendations:
        lines.append(f"\nRecommendations: {len(view.recommendations)}")

    if view.action == ReportAction.UPGRADE:
        lines.append("\nUpgrade to the detailed report for the full violation list.")
        lines.extend(f"  * {feature}" for feature in view.upgrade_features)
    else:
        lines.append("\nPDF download available.")

    return "\n".join(lines)
