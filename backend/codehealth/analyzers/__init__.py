"""Analyzer registry."""

from codehealth.analyzers.base import (
    Analyzer,
    Category,
    Finding,
    RepoInfo,
    Severity,
    SourceFile,
)
from codehealth.analyzers.code_patterns_analyzer import CodePatternsAnalyzer
from codehealth.analyzers.config_quality_analyzer import ConfigQualityAnalyzer
from codehealth.analyzers.dependency_analyzer import DependencyAnalyzer
from codehealth.analyzers.documentation_analyzer import DocumentationAnalyzer
from codehealth.analyzers.project_structure_analyzer import ProjectStructureAnalyzer
from codehealth.analyzers.security_analyzer import SecurityAnalyzer
from codehealth.analyzers.testing_analyzer import TestingAnalyzer


def build_default_analyzers() -> list[Analyzer]:
    """Default analyzers in their reporting order."""
    return [
        ProjectStructureAnalyzer(),
        DependencyAnalyzer(),
        ConfigQualityAnalyzer(),
        CodePatternsAnalyzer(),
        SecurityAnalyzer(),
        DocumentationAnalyzer(),
        TestingAnalyzer(),
    ]


__all__ = [
    "Analyzer",
    "Category",
    "Finding",
    "RepoInfo",
    "Severity",
    "SourceFile",
    "ProjectStructureAnalyzer",
    "DependencyAnalyzer",
    "ConfigQualityAnalyzer",
    "CodePatternsAnalyzer",
    "SecurityAnalyzer",
    "DocumentationAnalyzer",
    "TestingAnalyzer",
    "build_default_analyzers",
]
