"""Project layout checks."""

from typing import Sequence

from codehealth.analyzers.base import (
    Analyzer,
    Category,
    Finding,
    RepoInfo,
    Severity,
    SourceFile,
)

TEST_DIR_PREFIXES = ("test/", "tests/", "__tests__/", "spec/")
TEST_DIR_MARKERS = ("/test/", "/tests/", "/__tests__/")


def _looks_like_test(path: str) -> bool:
    name = path.rsplit("/", 1)[-1]
    return (
        path.startswith(TEST_DIR_PREFIXES)
        or any(marker in path for marker in TEST_DIR_MARKERS)
        or ".test." in path
        or ".spec." in path
        or (name.startswith("test_") and name.endswith(".py"))
        or name.endswith("_test.py")
    )


class ProjectStructureAnalyzer(Analyzer):
    name = "project_structure"
    category = Category.PROJECT_STRUCTURE

    def __init__(self, max_depth: int = 7, max_root_files: int = 15) -> None:
        self.max_depth = max_depth
        self.max_root_files = max_root_files

    def check_repository(
        self, repo_info: RepoInfo, files: Sequence[SourceFile]
    ) -> list[Finding]:
        findings: list[Finding] = []
        paths = [f.path for f in files]

        if not any(p.startswith("src/") for p in paths):
            findings.append(
                self.finding(
                    "ps-no-src",
                    Severity.WARNING,
                    "No src/ directory found",
                    "The project does not have a src/ directory. Organizing source code "
                    "in a dedicated directory improves maintainability.",
                    "Create a src/ directory and move source files into it.",
                )
            )

        if not any(_looks_like_test(p) for p in paths):
            findings.append(
                self.finding(
                    "ps-no-tests",
                    Severity.WARNING,
                    "No test directory or test files found",
                    "No test directory (test/, tests/, __tests__/) or test files "
                    "(.test.*, .spec.*, test_*.py) were found.",
                    "Add a test directory and start writing unit tests for critical functionality.",
                )
            )

        deep_files = [f.path for f in files if f.depth > self.max_depth]
        if deep_files:
            findings.append(
                self.finding(
                    "ps-deep-nesting",
                    Severity.INFO,
                    "Deeply nested directory structure",
                    f"{len(deep_files)} file(s) are nested more than {self.max_depth} levels deep, "
                    "which can make navigation difficult.",
                    "Consider flattening the directory structure to reduce nesting complexity.",
                    file_path=deep_files[0],
                )
            )

        root_files = [p for p in paths if "/" not in p]
        if len(root_files) > self.max_root_files:
            findings.append(
                self.finding(
                    "ps-too-many-root-files",
                    Severity.INFO,
                    "Too many files in root directory",
                    f"Found {len(root_files)} files in the root directory. "
                    "This can make the project harder to navigate.",
                    "Move configuration and utility files into appropriate subdirectories.",
                )
            )

        return findings
