"""
Analysis Models

Wire models for analyses returned by GET /api/analysis/{id}.

The backend is not consistent about where it puts scores and the target URL,
so the Analysis model normalises the payload before validation:
- scores come from ``scores`` or, failing that, the flat ``*_score`` columns
- url comes from ``url`` or the nested ``websites.url``
- issue maps always carry the three categories
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator


ISSUE_CATEGORIES = ("accessibility", "seo", "performance")

# Higher sorts first when issue groups are ordered for display
SEVERITY_ORDER = {"critical": 4, "serious": 3, "moderate": 2, "minor": 1}


class AnalysisStatus(str, Enum):
    """Analysis lifecycle states as reported by the backend."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    COMPLETED_WITH_ERRORS = "completed_with_errors"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({
    AnalysisStatus.COMPLETED,
    AnalysisStatus.FAILED,
    AnalysisStatus.COMPLETED_WITH_ERRORS,
})


class ScoreSet(BaseModel):
    """
    Scores on a 0-100 scale.

    ``overall, accessibility, seo, performance`` is the canonical shape.
    Reports from the accessibility endpoints carry ``custom`` instead of
    ``seo``/``performance``; those are flagged as legacy.
    """
    overall: Optional[float] = Field(default=None, ge=0, le=100)
    accessibility: Optional[float] = Field(default=None, ge=0, le=100)
    seo: Optional[float] = Field(default=None, ge=0, le=100)
    performance: Optional[float] = Field(default=None, ge=0, le=100)
    custom: Optional[float] = Field(default=None, ge=0, le=100)

    class Config:
        extra = "ignore"

    @property
    def is_legacy(self) -> bool:
        return self.custom is not None and self.seo is None and self.performance is None

    def present(self) -> Dict[str, float]:
        """Scores that are set, in display order."""
        return {
            name: value
            for name, value in (
                ("overall", self.overall),
                ("accessibility", self.accessibility),
                ("seo", self.seo),
                ("performance", self.performance),
                ("custom", self.custom),
            )
            if value is not None
        }


class Screenshot(BaseModel):
    id: Optional[str] = None
    type: Optional[str] = None
    url: Optional[str] = None
    signed_url: Optional[str] = None
    storage_bucket: Optional[str] = None
    storage_path: Optional[str] = None

    class Config:
        extra = "allow"

    @property
    def display_url(self) -> Optional[str]:
        return self.signed_url or self.url


class IssueGroup(BaseModel):
    """Issues grouped by rule and severity."""
    id: str
    severity: Optional[str] = None
    message: Optional[str] = None
    description: Optional[str] = None
    rule: Optional[Dict[str, Any]] = None
    count: int = 0
    occurrences: List[Dict[str, Any]] = Field(default_factory=list)

    class Config:
        extra = "allow"

    @property
    def title(self) -> str:
        if self.rule and self.rule.get("name"):
            return self.rule["name"]
        return self.message or self.id


class Analysis(BaseModel):
    """A website analysis as seen by the client. Read-only."""
    id: str
    url: Optional[str] = None
    status: AnalysisStatus
    report_type: str = "overview"
    scores: ScoreSet = Field(default_factory=ScoreSet)
    screenshots: List[Screenshot] = Field(default_factory=list)
    issues: Dict[str, List[Dict[str, Any]]] = Field(default_factory=dict)
    grouped_issues: Dict[str, List[IssueGroup]] = Field(default_factory=dict, alias="groupedIssues")
    summary: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[str] = None
    completed_at: Optional[str] = None

    class Config:
        populate_by_name = True
        extra = "ignore"

    @model_validator(mode="before")
    @classmethod
    def _apply_fallbacks(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)

        if not data.get("scores"):
            data["scores"] = {
                "overall": data.get("overall_score") or 0,
                "accessibility": data.get("accessibility_score") or 0,
                "seo": data.get("seo_score") or 0,
                "performance": data.get("performance_score") or 0,
            }

        if not data.get("url"):
            websites = data.get("websites")
            if isinstance(websites, dict) and websites.get("url"):
                data["url"] = websites["url"]

        if not data.get("report_type"):
            data["report_type"] = data.get("reportType") or "overview"

        if "grouped_issues" in data:
            data.setdefault("groupedIssues", data.pop("grouped_issues"))

        for key in ("issues", "groupedIssues"):
            issues = dict(data.get(key) or {})
            for category in ISSUE_CATEGORIES:
                issues.setdefault(category, [])
            data[key] = issues

        if data.get("screenshots") is None:
            data["screenshots"] = []
        return data

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def is_detailed(self) -> bool:
        return self.report_type == "detailed"

    @property
    def total_issues(self) -> int:
        if "totalIssues" in self.summary:
            return int(self.summary["totalIssues"] or 0)
        return sum(len(items) for items in self.issues.values())

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")

    def sorted_groups(self, category: str) -> List[IssueGroup]:
        """Issue groups for a category, most severe first."""
        groups = self.grouped_issues.get(category, [])
        return sorted(groups, key=lambda g: SEVERITY_ORDER.get(g.severity or "", 0), reverse=True)
