"""Tests for refactor item generation."""

import uuid

import pytest

from codehealth.exceptions import AnalysisNotCompletedError
from codehealth.models.code_analysis import CodeAnalysis
from codehealth.services.refactor_service import RefactorService

FINDINGS = [
    {
        "id": "sec-env-exposed",
        "category": "security",
        "severity": "critical",
        "title": "Environment files committed to repository",
        "description": "Found committed environment files: .env.",
        "suggestion": "Remove .env files from the repository.",
        "file_path": ".env",
    },
    {
        "id": "doc-no-license",
        "category": "documentation",
        "severity": "info",
        "title": "No LICENSE file",
        "description": "The project does not include a LICENSE file.",
        "suggestion": "Add a license.",
    },
    {
        "id": "test-no-tests",
        "category": "testing",
        "severity": "warning",
        "title": "No test files found",
        "description": "Found 12 source files but no test files.",
        "suggestion": "Start adding tests.",
    },
]


def make_analysis(status="completed", findings=FINDINGS):
    return CodeAnalysis(
        id=uuid.uuid4(),
        service_id=uuid.uuid4(),
        user_id=uuid.uuid4(),
        repo_url="https://github.com/octo/app",
        repo_owner="octo",
        repo_name="app",
        status=status,
        findings=findings,
    )


class TestRefactorService:
    """Test backlog item drafts."""

    @pytest.fixture
    def service(self):
        return RefactorService()

    def test_one_item_per_finding(self, service):
        analysis = make_analysis()

        items = service.build_items(analysis)

        assert [item["rule_id"] for item in items] == [
            "sec-env-exposed",
            "doc-no-license",
            "test-no-tests",
        ]
        assert all(item["service_id"] == analysis.service_id for item in items)
        assert all(item["type"] == "refactor" for item in items)
        assert all(item["status"] == "backlog" for item in items)

    def test_priority_follows_severity(self, service):
        items = service.build_items(make_analysis())

        assert [item["priority"] for item in items] == ["high", "low", "medium"]

    def test_title_and_description(self, service):
        item = service.build_items(make_analysis())[0]

        assert item["title"] == "[Refactor] Environment files committed to repository"
        assert item["description"] == (
            "Found committed environment files: .env.\n"
            "**Category**: security\n"
            "**Suggestion**: Remove .env files from the repository.\n"
            "**File**: .env"
        )

    def test_description_without_file(self, service):
        item = service.build_items(make_analysis())[1]

        assert "**File**" not in item["description"]
        assert item["file_path"] is None

    def test_filter_by_rule_ids(self, service):
        items = service.build_items(make_analysis(), rule_ids=["test-no-tests", "unknown"])

        assert [item["rule_id"] for item in items] == ["test-no-tests"]

    def test_empty_selection(self, service):
        assert service.build_items(make_analysis(), rule_ids=[]) == []

    @pytest.mark.parametrize("status", ["running", "failed"])
    def test_requires_completed_analysis(self, service, status):
        with pytest.raises(AnalysisNotCompletedError):
            service.build_items(make_analysis(status=status, findings=None))
