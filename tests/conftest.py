"""
Pytest Configuration and Shared Fixtures

Provides mock backend payloads, a mocked API client and an instant sleep for
polling tests.
"""

import copy
import pytest
from typing import Dict, Any, List
from unittest.mock import AsyncMock, MagicMock

from sitecraft.models import Analysis, Report
from sitecraft.persistence import MemorySessionStore
from sitecraft.reporter import Notifier


# ============================================================================
# Mock Payloads
# ============================================================================

ANALYSIS_PAYLOAD: Dict[str, Any] = {
    "id": "an-123",
    "status": "completed",
    "report_type": "overview",
    "websites": {"id": "web-1", "url": "https://example.com"},
    "scores": {
        "overall": 72,
        "accessibility": 65,
        "seo": 88,
        "performance": 63,
    },
    "screenshots": [
        {
            "id": "shot-1",
            "type": "desktop",
            "storage_bucket": "analysis-screenshots",
            "storage_path": "an-123/desktop.png",
            "signed_url": "https://cdn.example.com/an-123/desktop.png",
        },
    ],
    "issues": {
        "accessibility": [
            {"id": "iss-1", "severity": "critical", "message": "Low contrast text"},
            {"id": "iss-2", "severity": "minor", "message": "Image missing alt"},
        ],
        "seo": [
            {"id": "iss-3", "severity": "moderate", "message": "Missing meta description"},
        ],
        "performance": [],
    },
    "groupedIssues": {
        "accessibility": [
            {
                "id": "image-alt:minor",
                "severity": "minor",
                "message": "Image missing alt",
                "rule": {"rule_key": "image-alt", "name": "Images must have alternate text"},
                "count": 1,
                "occurrences": [{"location": "img.hero"}],
            },
            {
                "id": "color-contrast:critical",
                "severity": "critical",
                "message": "Low contrast text",
                "rule": {"rule_key": "color-contrast", "name": "Elements must have sufficient color contrast"},
                "count": 1,
                "occurrences": [{"location": "p.lead"}],
            },
        ],
        "seo": [
            {
                "id": "meta-description:moderate",
                "severity": "moderate",
                "message": "Missing meta description",
                "count": 1,
                "occurrences": [{"location": "head"}],
            },
        ],
        "performance": [],
    },
    "summary": {"totalIssues": 3, "criticalIssues": 1, "highIssues": 0},
}


OVERVIEW_PAYLOAD: Dict[str, Any] = {
    "analysisId": "an-123",
    "url": "https://example.com",
    "timestamp": "2025-01-15T10:30:00Z",
    "language": "en",
    "reportType": "overview",
    "scores": {"overall": 72, "accessibility": 65, "custom": 78},
    "summary": {"totalViolations": 12, "criticalViolations": 3},
    "recommendations": [
        {"priority": "high", "title": "Add alternative text to images"},
    ],
    # Backend occasionally leaks violations into overview payloads
    "violations": [
        {"id": "color-contrast", "impact": "serious", "help": "Elements must have sufficient color contrast"},
    ],
    "issuePreview": {
        "hasViolations": True,
        "criticalIssues": 3,
        "seriousIssues": 4,
        "categories": ["Images", "Color Contrast"],
    },
    "upgradeInfo": {
        "available": True,
        "features": [
            "Complete accessibility violation breakdown",
            "PDF report generation",
        ],
    },
}


DETAILED_VIOLATIONS: List[Dict[str, Any]] = [
    {"id": "color-contrast", "impact": "serious", "help": "Elements must have sufficient color contrast"},
    {"id": "image-alt", "impact": "critical", "help": "Images must have alternate text"},
    {"id": "label", "impact": "critical", "help": "Form elements must have labels"},
]


DETAILED_PAYLOAD: Dict[str, Any] = {
    "analysisId": "an-123",
    "url": "https://example.com",
    "timestamp": "2025-01-15T10:31:00Z",
    "language": "en",
    "reportType": "detailed",
    "scores": {"overall": 72, "accessibility": 65, "custom": 78},
    "summary": {"totalViolations": 12, "criticalViolations": 3},
    "recommendations": [
        {"priority": "high", "title": "Add alternative text to images"},
        {"priority": "medium", "title": "Label form fields"},
    ],
    "violations": DETAILED_VIOLATIONS,
    "structure": {"headings": 12},
}


# ============================================================================
# Payload Fixtures
# ============================================================================

@pytest.fixture
def analysis_factory():
    """Build Analysis records with a given status."""
    def _make(status: str = "completed", **overrides) -> Analysis:
        payload = copy.deepcopy(ANALYSIS_PAYLOAD)
        payload["status"] = status
        payload.update(overrides)
        return Analysis.model_validate(payload)
    return _make


@pytest.fixture
def analysis_payload() -> Dict[str, Any]:
    return copy.deepcopy(ANALYSIS_PAYLOAD)


@pytest.fixture
def overview_payload() -> Dict[str, Any]:
    return copy.deepcopy(OVERVIEW_PAYLOAD)


@pytest.fixture
def detailed_payload() -> Dict[str, Any]:
    return copy.deepcopy(DETAILED_PAYLOAD)


@pytest.fixture
def overview_report(overview_payload) -> Report:
    return Report.model_validate(overview_payload)


@pytest.fixture
def detailed_report(detailed_payload) -> Report:
    return Report.model_validate(detailed_payload)


# ============================================================================
# Collaborator Fixtures
# ============================================================================

@pytest.fixture
def mock_client():
    """API client with every backend call mocked."""
    client = MagicMock()
    client.get_analysis = AsyncMock()
    client.get_detailed_report = AsyncMock()
    client.download_pdf = AsyncMock()
    client.analyze_website = AsyncMock()
    client.delete_account = AsyncMock()
    return client


class FakeSleep:
    """Records requested delays and returns immediately."""

    def __init__(self):
        self.calls: List[float] = []

    async def __call__(self, seconds: float):
        self.calls.append(seconds)


@pytest.fixture
def fake_sleep() -> FakeSleep:
    return FakeSleep()


@pytest.fixture
def store() -> MemorySessionStore:
    return MemorySessionStore()


@pytest.fixture
def notifier() -> Notifier:
    return Notifier()
