"""Pattern-based analyzer helpers."""

import re
from dataclasses import dataclass
from typing import Iterable

from codehealth.analyzers.base import Category, Finding, Severity


@dataclass(frozen=True)
class PatternRule:
    rule_id: str
    title: str
    description: str
    severity: Severity
    suggestion: str
    pattern: str
    flags: int = 0


def _line_for_offset(content: str, offset: int) -> int:
    return content.count("\n", 0, offset) + 1


def match_patterns(
    file_path: str,
    content: str,
    rules: Iterable[PatternRule],
    category: Category,
) -> list[Finding]:
    """Match rules against one file, emitting at most one finding per rule."""
    findings: list[Finding] = []
    for rule in rules:
        matches = list(re.finditer(rule.pattern, content, rule.flags))
        if not matches:
            continue
        first_line = _line_for_offset(content, matches[0].start())
        occurrences = f" ({len(matches)} occurrences)" if len(matches) > 1 else ""
        findings.append(
            Finding(
                rule_id=rule.rule_id,
                category=category,
                severity=rule.severity,
                title=rule.title,
                description=f"{rule.description} First match at line {first_line}{occurrences}.",
                suggestion=rule.suggestion,
                file_path=file_path,
            )
        )
    return findings
