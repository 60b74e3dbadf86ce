"""
Report Models

Reports returned by the accessibility endpoints (analyze, detailed).

An ``overview`` report carries scores, summary counts, recommendations and a
locked preview of the issues. A ``detailed`` report additionally carries the
full violation list. Field names on the wire are camelCase.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .analysis import ScoreSet


class ReportTier(str, Enum):
    OVERVIEW = "overview"
    DETAILED = "detailed"


class IssuePreview(BaseModel):
    """Category names and counts shown in place of the locked violation list."""
    has_violations: bool = Field(default=False, alias="hasViolations")
    critical_issues: int = Field(default=0, alias="criticalIssues")
    serious_issues: int = Field(default=0, alias="seriousIssues")
    categories: List[str] = Field(default_factory=list)

    class Config:
        populate_by_name = True
        extra = "allow"


class UpgradeInfo(BaseModel):
    available: bool = True
    features: List[str] = Field(default_factory=list)

    class Config:
        extra = "allow"


class Report(BaseModel):
    analysis_id: str = Field(alias="analysisId")
    url: Optional[str] = None
    timestamp: Optional[str] = None
    language: str = "en"
    report_type: ReportTier = Field(default=ReportTier.OVERVIEW, alias="reportType")
    scores: ScoreSet = Field(default_factory=ScoreSet)
    summary: Dict[str, Any] = Field(default_factory=dict)
    recommendations: List[Any] = Field(default_factory=list)
    violations: Optional[List[Dict[str, Any]]] = None
    issue_preview: Optional[IssuePreview] = Field(default=None, alias="issuePreview")
    upgrade_info: Optional[UpgradeInfo] = Field(default=None, alias="upgradeInfo")

    class Config:
        populate_by_name = True
        # Section payloads (structure, aria, forms, ...) are kept as-is
        extra = "allow"

    @property
    def is_detailed(self) -> bool:
        return self.report_type == ReportTier.DETAILED

    @property
    def total_violations(self) -> int:
        """Violation count from the summary, falling back to the list length."""
        total = self.summary.get("totalViolations")
        if total is not None:
            return int(total)
        return len(self.violations or [])

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)
