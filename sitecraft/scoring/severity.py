"""
Score Presentation

Maps 0-100 scores to the severity tier used for colour-coding and to a
letter grade. Pure functions; every place that displays a score goes through
score_severity() so summary cards, compact rows and detail tabs agree.
"""

from dataclasses import dataclass
from enum import Enum
from numbers import Real
from typing import List, Optional

from sitecraft.models import ScoreSet


# ============================================================================
# THRESHOLDS
# ============================================================================

GOOD_THRESHOLD = 80
WARNING_THRESHOLD = 60

GRADE_THRESHOLDS = [
    (95, "A+"),
    (90, "A"),
    (85, "B+"),
    (80, "B"),
    (75, "C+"),
    (70, "C"),
    (65, "D+"),
    (60, "D"),
]

SCORE_LABELS = {
    "overall": "Overall",
    "accessibility": "Accessibility",
    "seo": "SEO",
    "performance": "Performance",
    "custom": "Custom Checks",
}


class ScoreSeverity(str, Enum):
    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"


SEVERITY_COLORS = {
    ScoreSeverity.GOOD: "#10b981",
    ScoreSeverity.WARNING: "#f59e0b",
    ScoreSeverity.CRITICAL: "#ef4444",
}


def _check_score(score) -> float:
    if isinstance(score, bool) or not isinstance(score, Real):
        raise ValueError(f"Score must be a number, got {score!r}")
    return float(score)


def score_severity(score: float) -> ScoreSeverity:
    """
    Severity tier for a score.

    >= 80 is good, 60-79 is warning, below 60 is critical.
    """
    value = _check_score(score)
    if value >= GOOD_THRESHOLD:
        return ScoreSeverity.GOOD
    if value >= WARNING_THRESHOLD:
        return ScoreSeverity.WARNING
    return ScoreSeverity.CRITICAL


def score_grade(score: float) -> str:
    value = _check_score(score)
    for threshold, grade in GRADE_THRESHOLDS:
        if value >= threshold:
            return grade
    return "F"


def score_color(score: float) -> str:
    return SEVERITY_COLORS[score_severity(score)]


@dataclass(frozen=True)
class ScoreCard:
    """One displayed score."""
    key: str
    label: str
    score: float
    severity: ScoreSeverity
    grade: str

    @property
    def color(self) -> str:
        return SEVERITY_COLORS[self.severity]


def build_score_cards(scores: Optional[ScoreSet]) -> List[ScoreCard]:
    """Score cards for every score present in the set, overall first."""
    if scores is None:
        return []
    return [
        ScoreCard(
            key=key,
            label=SCORE_LABELS.get(key, key.title()),
            score=value,
            severity=score_severity(value),
            grade=score_grade(value),
        )
        for key, value in scores.present().items()
    ]
