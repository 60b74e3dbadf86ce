"""
Tests for analysis and report models.
"""

import pytest
from pydantic import ValidationError

from sitecraft.models import (
    Analysis,
    AnalysisStatus,
    ISSUE_CATEGORIES,
    Report,
    ReportTier,
    ScoreSet,
    TERMINAL_STATUSES,
)


class TestAnalysisStatus:
    """Test analysis status handling."""

    def test_terminal_statuses(self):
        """completed, failed and completed_with_errors are terminal."""
        assert TERMINAL_STATUSES == {
            AnalysisStatus.COMPLETED,
            AnalysisStatus.FAILED,
            AnalysisStatus.COMPLETED_WITH_ERRORS,
        }

    @pytest.mark.parametrize("status,terminal", [
        ("pending", False),
        ("processing", False),
        ("completed", True),
        ("completed_with_errors", True),
        ("failed", True),
    ])
    def test_is_terminal(self, analysis_factory, status, terminal):
        """is_terminal follows the status."""
        assert analysis_factory(status).is_terminal is terminal

    def test_unknown_status_rejected(self, analysis_payload):
        """Unknown statuses fail validation."""
        analysis_payload["status"] = "queued"
        with pytest.raises(ValidationError):
            Analysis.model_validate(analysis_payload)

    def test_is_detailed(self, analysis_factory):
        """is_detailed follows the report type."""
        assert analysis_factory().is_detailed is False
        assert analysis_factory(report_type="detailed").is_detailed is True


class TestAnalysisFallbacks:
    """Test fallbacks for older analysis payloads."""

    def test_scores_from_flat_columns(self):
        """Flat score columns build a score set; nulls become zero."""
        analysis = Analysis.model_validate({
            "id": "an-1",
            "status": "completed",
            "overall_score": 55,
            "accessibility_score": 48,
            "seo_score": None,
        })

        assert analysis.scores.overall == 55
        assert analysis.scores.accessibility == 48
        assert analysis.scores.seo == 0
        assert analysis.scores.performance == 0
        assert not analysis.scores.is_legacy

    def test_scores_object_wins(self, analysis_payload):
        """The scores object takes precedence over flat columns."""
        analysis_payload["overall_score"] = 10
        analysis = Analysis.model_validate(analysis_payload)
        assert analysis.scores.overall == 72

    def test_url_from_website(self, analysis_payload):
        """The URL falls back to the linked website."""
        assert "url" not in analysis_payload
        assert Analysis.model_validate(analysis_payload).url == "https://example.com"

    def test_url_missing(self):
        """No URL source leaves url unset."""
        analysis = Analysis.model_validate({"id": "an-1", "status": "pending", "websites": None})
        assert analysis.url is None

    def test_issue_categories_always_present(self):
        """Every category has an issue list, even when empty."""
        analysis = Analysis.model_validate({"id": "an-1", "status": "pending", "issues": None})

        for category in ISSUE_CATEGORIES:
            assert analysis.issues[category] == []
            assert analysis.grouped_issues[category] == []

    def test_snake_case_grouped_issues(self, analysis_payload):
        """grouped_issues is accepted as an alias."""
        analysis_payload["grouped_issues"] = analysis_payload.pop("groupedIssues")
        analysis = Analysis.model_validate(analysis_payload)
        assert len(analysis.grouped_issues["accessibility"]) == 2

    def test_null_screenshots(self):
        """Null screenshots become an empty list."""
        analysis = Analysis.model_validate({"id": "an-1", "status": "pending", "screenshots": None})
        assert analysis.screenshots == []

    def test_screenshot_display_url(self, analysis_factory):
        """Screenshots expose a display URL."""
        shot = analysis_factory().screenshots[0]
        assert shot.display_url == "https://cdn.example.com/an-123/desktop.png"


class TestAnalysisIssues:
    """Test issue grouping and counting."""

    def test_sorted_groups_most_severe_first(self, analysis_factory):
        """Groups sort from most to least severe."""
        groups = analysis_factory().sorted_groups("accessibility")
        assert [g.severity for g in groups] == ["critical", "minor"]
        assert groups[0].title == "Elements must have sufficient color contrast"

    def test_group_title_falls_back_to_message(self, analysis_factory):
        """A group without a title uses its message."""
        group = analysis_factory().sorted_groups("seo")[0]
        assert group.title == "Missing meta description"

    def test_total_issues_from_summary(self, analysis_factory):
        """The summary total is used when present."""
        assert analysis_factory(summary={"totalIssues": 42}).total_issues == 42

    def test_total_issues_counted(self, analysis_factory):
        """Without a summary total, issues are counted."""
        assert analysis_factory(summary={}).total_issues == 3

    def test_wire_format_reloads(self, analysis_factory):
        """The wire format validates back to the same analysis."""
        analysis = analysis_factory()
        wire = analysis.to_wire()

        assert "groupedIssues" in wire
        assert Analysis.model_validate(wire) == analysis


class TestScoreSet:
    """Test score set validation."""

    def test_out_of_range_rejected(self):
        """Scores outside 0-100 fail validation."""
        with pytest.raises(ValidationError):
            ScoreSet(overall=101)
        with pytest.raises(ValidationError):
            ScoreSet(seo=-1)

    def test_legacy_shape(self):
        """A custom score marks the legacy shape."""
        assert ScoreSet(overall=70, accessibility=60, custom=80).is_legacy
        assert not ScoreSet(overall=70, accessibility=60, seo=80, performance=50).is_legacy

    def test_present_skips_missing(self):
        """present() omits unset scores."""
        assert ScoreSet(overall=70, custom=80).present() == {"overall": 70, "custom": 80}


class TestReport:
    """Test accessibility report parsing."""

    def test_overview_report(self, overview_report):
        """Overview reports carry a preview and upgrade info."""
        assert overview_report.report_type == ReportTier.OVERVIEW
        assert not overview_report.is_detailed
        assert overview_report.analysis_id == "an-123"
        assert overview_report.issue_preview.has_violations is True
        assert overview_report.issue_preview.critical_issues == 3
        assert overview_report.upgrade_info.features[0] == "Complete accessibility violation breakdown"
        assert overview_report.scores.is_legacy

    def test_detailed_report(self, detailed_report):
        """Detailed reports carry violations and no preview."""
        assert detailed_report.is_detailed
        assert len(detailed_report.violations) == 3
        assert detailed_report.issue_preview is None

    def test_report_type_defaults_to_overview(self):
        """A missing report type means overview."""
        report = Report.model_validate({"analysisId": "an-1"})
        assert report.report_type == ReportTier.OVERVIEW

    def test_unknown_report_type_rejected(self, overview_payload):
        """Unknown report types fail validation."""
        overview_payload["reportType"] = "premium"
        with pytest.raises(ValidationError):
            Report.model_validate(overview_payload)

    def test_total_violations(self, overview_report):
        """Totals come from the summary or the violation list."""
        assert overview_report.total_violations == 12
        assert Report.model_validate({"analysisId": "an-1", "violations": [{}, {}]}).total_violations == 2

    def test_section_payloads_kept(self, detailed_report):
        """Section payloads survive the wire format."""
        wire = detailed_report.to_wire()
        assert wire["structure"] == {"headings": 12}
        assert wire["reportType"] == "detailed"
        assert "issuePreview" not in wire
        assert Report.model_validate(wire) == detailed_report
