"""Scoring service for findings.

Aggregates findings into per-category and per-severity counts and a 0-100
health score.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Iterable

from codehealth.analyzers import Finding, Severity

# Points deducted from 100 per finding
SEVERITY_PENALTIES = {
    Severity.CRITICAL: 15,
    Severity.WARNING: 8,
    Severity.INFO: 3,
}

MAX_SCORE = 100


@dataclass(frozen=True)
class AnalysisSummary:
    """Summary of a finding collection."""

    total_findings: int
    by_category: dict[str, int] = field(default_factory=dict)
    by_severity: dict[str, int] = field(default_factory=dict)
    health_score: int = MAX_SCORE

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_findings": self.total_findings,
            "by_category": dict(self.by_category),
            "by_severity": dict(self.by_severity),
            "health_score": self.health_score,
        }


def health_score(findings: Iterable[Finding]) -> int:
    """Start at 100, deduct a fixed penalty per finding, clamp to [0, 100]."""
    penalty = sum(SEVERITY_PENALTIES[f.severity] for f in findings)
    return max(0, min(MAX_SCORE, MAX_SCORE - penalty))


def summarize(findings: Iterable[Finding]) -> AnalysisSummary:
    findings = list(findings)
    by_category = Counter(f.category.value for f in findings)
    by_severity = Counter(f.severity.value for f in findings)
    return AnalysisSummary(
        total_findings=len(findings),
        by_category=dict(sorted(by_category.items())),
        by_severity=dict(sorted(by_severity.items())),
        health_score=health_score(findings),
    )
