"""Score presentation: severity tiers, grades and score cards."""

from .severity import (
    GOOD_THRESHOLD,
    WARNING_THRESHOLD,
    SEVERITY_COLORS,
    ScoreCard,
    ScoreSeverity,
    build_score_cards,
    score_color,
    score_grade,
    score_severity,
)

__all__ = [
    "GOOD_THRESHOLD",
    "WARNING_THRESHOLD",
    "SEVERITY_COLORS",
    "ScoreCard",
    "ScoreSeverity",
    "build_score_cards",
    "score_color",
    "score_grade",
    "score_severity",
]
