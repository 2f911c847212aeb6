"""Pytest configuration and fixtures."""

import os

# Settings are read at import time by several modules
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-that-is-long-enough-for-hs256")
os.environ.setdefault("APP_ENV", "test")

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from codehealth.analyzers import RepoInfo, SourceFile
from codehealth.exceptions import AnalysisNotFoundError
from codehealth.models.code_analysis import CodeAnalysis

SAMPLE_PACKAGE_JSON = """{
  "name": "sample-app",
  "scripts": {"dev": "next dev", "build": "next build", "test": "vitest"},
  "dependencies": {"next": "14.1.0", "react": "18.2.0"},
  "devDependencies": {"vitest": "1.2.0", "eslint": "8.56.0", "prettier": "3.2.0"}
}
"""

SAMPLE_TSCONFIG_STRICT = """{
  // project settings
  "compilerOptions": {"target": "es2022", "strict": true}
}
"""


def build_files(
    *paths: str,
    contents: dict[str, str] | None = None,
    sizes: dict[str, int] | None = None,
) -> list[SourceFile]:
    """Build SourceFiles from paths; content and size are looked up per path."""
    contents = contents or {}
    sizes = sizes or {}
    return [
        SourceFile(path=p, size=sizes.get(p, len(contents.get(p, ""))), content=contents.get(p))
        for p in paths
    ]


class FakeAnalysisStore:
    """In-memory analysis store."""

    def __init__(self):
        self.records: dict[uuid.UUID, CodeAnalysis] = {}
        self.updates: list[tuple[uuid.UUID, dict[str, Any]]] = []
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    async def insert(self, draft: dict[str, Any]) -> CodeAnalysis:
        now = self._tick()
        analysis = CodeAnalysis(id=uuid.uuid4(), created_at=now, updated_at=now, **draft)
        self.records[analysis.id] = analysis
        return analysis

    async def update(self, analysis_id: uuid.UUID, fields: dict[str, Any]) -> CodeAnalysis:
        analysis = self.records.get(analysis_id)
        if analysis is None:
            raise AnalysisNotFoundError(f"Analysis not found: {analysis_id}")
        self.updates.append((analysis_id, dict(fields)))
        for key, value in fields.items():
            setattr(analysis, key, value)
        analysis.updated_at = self._tick()
        return analysis

    async def delete(self, analysis_id: uuid.UUID) -> None:
        if self.records.pop(analysis_id, None) is None:
            raise AnalysisNotFoundError(f"Analysis not found: {analysis_id}")

    async def list_by_service(self, service_id: uuid.UUID) -> list[CodeAnalysis]:
        matching = [a for a in self.records.values() if a.service_id == service_id]
        return sorted(matching, key=lambda a: a.created_at, reverse=True)

    async def get_by_id(self, analysis_id: uuid.UUID) -> CodeAnalysis | None:
        return self.records.get(analysis_id)


@pytest.fixture
def repo_info():
    """Repository metadata for octo/app."""
    return RepoInfo(owner="octo", repo="app", default_branch="main", language="TypeScript")


@pytest.fixture
def store():
    return FakeAnalysisStore()


@pytest.fixture
def service_id():
    return uuid.uuid4()


@pytest.fixture
def user_id():
    return uuid.uuid4()


@pytest.fixture
def make_files():
    """Factory for SourceFile lists."""
    return build_files


@pytest.fixture
def package_json():
    """package.json with scripts, a lockfile-worthy dependency set and vitest."""
    return SAMPLE_PACKAGE_JSON


@pytest.fixture
def strict_tsconfig():
    return SAMPLE_TSCONFIG_STRICT
