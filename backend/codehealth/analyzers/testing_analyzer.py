"""Test suite and CI checks."""

import json
from typing import Sequence

from codehealth.analyzers.base import (
    JS_CONFIG_SUFFIXES,
    Analyzer,
    Category,
    Finding,
    RepoInfo,
    Severity,
    SourceFile,
)

JS_TEST_FRAMEWORKS = {
    "jest", "vitest", "mocha", "ava", "tape", "cypress", "playwright", "@playwright/test",
}
PYTHON_TEST_MARKERS = ("pytest", "nose2", "tox", "hypothesis")
PYTHON_MANIFESTS = {"pyproject.toml", "requirements.txt", "requirements-dev.txt", "setup.cfg", "Pipfile"}

CI_FILES = {
    ".gitlab-ci.yml", ".circleci/config.yml", "Jenkinsfile", ".travis.yml",
    "azure-pipelines.yml", "bitbucket-pipelines.yml",
}


def _is_test_file(path: str) -> bool:
    name = path.rsplit("/", 1)[-1]
    return (
        ".test." in path
        or ".spec." in path
        or "__tests__/" in path
        or "/test/" in path
        or path.startswith(("test/", "tests/"))
        or "/tests/" in path
        or (name.startswith("test_") and name.endswith(".py"))
        or name.endswith("_test.py")
    )


class TestingAnalyzer(Analyzer):
    __test__ = False

    name = "testing"
    category = Category.TESTING

    def __init__(self, source_file_threshold: int = 10, min_test_ratio: float = 0.1) -> None:
        self.source_file_threshold = source_file_threshold
        self.min_test_ratio = min_test_ratio

    def check_repository(
        self, repo_info: RepoInfo, files: Sequence[SourceFile]
    ) -> list[Finding]:
        findings: list[Finding] = []
        findings.extend(self._check_python_framework(files))

        if not any(f.path.startswith(".github/workflows/") or f.path in CI_FILES for f in files):
            findings.append(
                self.finding(
                    "test-no-ci",
                    Severity.INFO,
                    "No CI/CD configuration found",
                    "No continuous integration configuration was detected "
                    "(GitHub Actions, GitLab CI, etc.).",
                    "Add CI/CD configuration to automate testing and deployment.",
                )
            )

        source_files = [
            f for f in files
            if f.is_source
            and not f.path.endswith(JS_CONFIG_SUFFIXES)
            and not f.path.endswith(".d.ts")
        ]
        test_files = [f for f in source_files if _is_test_file(f.path)]
        non_test_files = [f for f in source_files if not _is_test_file(f.path)]

        if len(non_test_files) <= self.source_file_threshold:
            return findings

        if not test_files:
            findings.append(
                self.finding(
                    "test-no-tests",
                    Severity.WARNING,
                    "No test files found",
                    f"Found {len(non_test_files)} source files but no test files.",
                    "Start adding tests for critical business logic and utilities.",
                )
            )
        else:
            ratio = len(test_files) / len(non_test_files)
            if ratio < self.min_test_ratio:
                findings.append(
                    self.finding(
                        "test-low-ratio",
                        Severity.INFO,
                        "Low test coverage ratio",
                        f"Only {len(test_files)} test files for {len(non_test_files)} "
                        f"source files ({ratio * 100:.1f}% ratio).",
                        "Aim for better test coverage by adding tests for key modules.",
                    )
                )

        return findings

    def check_file(self, repo_info: RepoInfo, source_file: SourceFile) -> list[Finding]:
        if source_file.path != "package.json" or source_file.content is None:
            return []

        # Invalid JSON raises here and is reported by the dependency analyzer
        pkg = json.loads(source_file.content)
        all_deps = {**(pkg.get("dependencies") or {}), **(pkg.get("devDependencies") or {})}
        if JS_TEST_FRAMEWORKS & set(all_deps):
            return []
        return [
            self.finding(
                "test-no-framework",
                Severity.WARNING,
                "No test framework detected",
                "No testing framework (Jest, Vitest, Mocha, etc.) was found in dependencies.",
                "Add a test framework like Vitest or Jest to enable automated testing.",
                file_path=source_file.path,
            )
        ]

    def _check_python_framework(self, files: Sequence[SourceFile]) -> list[Finding]:
        manifests = [
            f for f in files if f.path in PYTHON_MANIFESTS and f.content is not None
        ]
        if not manifests:
            return []
        if any(marker in f.content for f in manifests for marker in PYTHON_TEST_MARKERS):
            return []
        if any(f.path.endswith(".py") and _is_test_file(f.path) for f in files):
            return []
        return [
            self.finding(
                "test-no-framework",
                Severity.WARNING,
                "No test framework detected",
                "No Python testing framework (pytest, nose2, tox) was found in the project manifests.",
                "Add pytest to the development dependencies to enable automated testing.",
                file_path=manifests[0].path,
            )
        ]
