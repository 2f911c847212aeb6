"""Base analyzer interfaces for repository health analysis."""

import logging
import posixpath
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    """Finding severity levels."""

    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


class Category(str, Enum):
    """Finding categories, one per analyzer."""

    PROJECT_STRUCTURE = "project-structure"
    DEPENDENCIES = "dependencies"
    CONFIG_QUALITY = "config-quality"
    CODE_PATTERNS = "code-patterns"
    SECURITY = "security"
    DOCUMENTATION = "documentation"
    TESTING = "testing"


SOURCE_EXTENSIONS = {".ts", ".tsx", ".js", ".jsx", ".py"}
JS_CONFIG_SUFFIXES = (".config.js", ".config.mjs", ".config.cjs", ".config.ts")


@dataclass(frozen=True)
class RepoInfo:
    """Repository metadata from the GitHub API."""

    owner: str
    repo: str
    default_branch: str = "main"
    description: str | None = None
    language: str | None = None
    size: int = 0
    stars: int = 0
    forks: int = 0
    open_issues: int = 0
    created_at: str | None = None
    updated_at: str | None = None
    topics: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class SourceFile:
    """A blob discovered in the repository tree.

    ``content`` is None when the file body was not fetched.
    """

    path: str
    size: int | None = None
    content: str | None = None

    @property
    def name(self) -> str:
        return posixpath.basename(self.path)

    @property
    def directory(self) -> str:
        return posixpath.dirname(self.path)

    @property
    def extension(self) -> str:
        return posixpath.splitext(self.name)[1].lower()

    @property
    def depth(self) -> int:
        return len(self.path.split("/"))

    @property
    def is_source(self) -> bool:
        return self.extension in SOURCE_EXTENSIONS and "node_modules" not in self.path


@dataclass(frozen=True)
class Finding:
    """A single issue reported by one analyzer."""

    rule_id: str
    category: Category
    severity: Severity
    title: str
    description: str
    suggestion: str
    file_path: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "category", Category(self.category))
        object.__setattr__(self, "severity", Severity(self.severity))
        if not self.suggestion or not self.suggestion.strip():
            raise ValueError(f"Finding {self.rule_id} must carry a suggestion")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.rule_id,
            "category": self.category.value,
            "severity": self.severity.value,
            "title": self.title,
            "description": self.description,
            "suggestion": self.suggestion,
        }
        if self.file_path:
            data["file_path"] = self.file_path
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Finding":
        return cls(
            rule_id=data["id"],
            category=data["category"],
            severity=data["severity"],
            title=data["title"],
            description=data.get("description", ""),
            suggestion=data["suggestion"],
            file_path=data.get("file_path"),
        )


class Analyzer:
    """Base class for analyzers.

    Subclasses override ``check_repository`` for checks over the whole file
    set and ``check_file`` for checks that read a single file. An error
    raised by ``check_file`` skips that file for this analyzer only.
    """

    name: str = "base"
    category: Category

    def analyze(self, repo_info: RepoInfo, files: Sequence[SourceFile]) -> list[Finding]:
        findings = list(self.check_repository(repo_info, files))
        for source_file in files:
            try:
                findings.extend(self.check_file(repo_info, source_file))
            except Exception as exc:
                logger.warning(
                    "Analyzer %s skipped %s: %s", self.name, source_file.path, exc
                )
        return findings

    def check_repository(
        self, repo_info: RepoInfo, files: Sequence[SourceFile]
    ) -> list[Finding]:
        return []

    def check_file(self, repo_info: RepoInfo, source_file: SourceFile) -> list[Finding]:
        return []

    def finding(
        self,
        rule_id: str,
        severity: Severity,
        title: str,
        description: str,
        suggestion: str,
        file_path: str | None = None,
    ) -> Finding:
        return Finding(
            rule_id=rule_id,
            category=self.category,
            severity=severity,
            title=title,
            description=description,
            suggestion=suggestion,
            file_path=file_path,
        )


def paths_of(files: Sequence[SourceFile]) -> set[str]:
    return {f.path for f in files}
