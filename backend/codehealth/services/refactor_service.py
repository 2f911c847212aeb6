"""Refactor backlog item generation from analysis findings."""

from __future__ import annotations

from typing import Any

from codehealth.exceptions import AnalysisNotCompletedError
from codehealth.models.code_analysis import AnalysisStatus, CodeAnalysis

# Finding severity -> backlog item priority
SEVERITY_PRIORITY = {
    "critical": "high",
    "warning": "medium",
    "info": "low",
}


class RefactorService:
    """Turn stored findings into refactor item drafts."""

    def build_description(self, finding: dict[str, Any]) -> str:
        lines = [
            finding.get("description", ""),
            f"**Category**: {finding.get('category', '')}",
            f"**Suggestion**: {finding.get('suggestion', '')}",
        ]
        if finding.get("file_path"):
            lines.append(f"**File**: {finding['file_path']}")
        return "\n".join(line for line in lines if line)

    def build_item(self, analysis: CodeAnalysis, finding: dict[str, Any]) -> dict[str, Any]:
        return {
            "service_id": analysis.service_id,
            "title": f"[Refactor] {finding.get('title', '')}",
            "description": self.build_description(finding),
            "type": "refactor",
            "priority": SEVERITY_PRIORITY.get(finding.get("severity", ""), "low"),
            "status": "backlog",
            "rule_id": finding.get("id", ""),
            "file_path": finding.get("file_path"),
        }

    def build_items(
        self, analysis: CodeAnalysis, rule_ids: list[str] | None = None
    ) -> list[dict[str, Any]]:
        """Draft one item per selected finding, in finding order.

        Raises:
            AnalysisNotCompletedError: The analysis has not completed.
        """
        if analysis.status != AnalysisStatus.COMPLETED.value:
            raise AnalysisNotCompletedError("Refactor items require a completed analysis")

        selected = set(rule_ids) if rule_ids is not None else None
        return [
            self.build_item(analysis, finding)
            for finding in analysis.findings or []
            if selected is None or finding.get("id") in selected
        ]
