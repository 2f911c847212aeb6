"""Code analysis schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class AnalyzeRepoRequest(BaseModel):
    """Request to analyze a GitHub repository for a service."""

    repo_url: str = Field(..., min_length=1)
    service_id: UUID


class FindingResponse(BaseModel):
    """A single rule finding."""

    id: str
    category: str
    severity: str
    title: str
    description: str
    suggestion: str
    file_path: str | None = None


class AnalysisSummaryResponse(BaseModel):
    """Aggregate counts and health score."""

    total_findings: int
    by_category: dict[str, int]
    by_severity: dict[str, int]
    health_score: int = Field(..., ge=0, le=100)


class CodeAnalysisResponse(BaseModel):
    """Code analysis record."""

    id: UUID
    service_id: UUID
    user_id: UUID
    repo_url: str
    repo_owner: str
    repo_name: str
    status: str
    findings: list[FindingResponse] | None = None
    summary: AnalysisSummaryResponse | None = None
    error_message: str | None = None
    analyzed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class CodeAnalysisListResponse(BaseModel):
    """Analyses for a service, newest first."""

    analyses: list[CodeAnalysisResponse]
    total: int


class QueuedAnalysisResponse(BaseModel):
    """Analysis accepted for background execution."""

    analysis: CodeAnalysisResponse
    task_id: str | None = None


class ErrorResponse(BaseModel):
    error: str
    analysis_id: UUID | None = None


class RefactorItemsRequest(BaseModel):
    """Select which findings become refactor items; all when omitted."""

    rule_ids: list[str] | None = None


class RefactorItemResponse(BaseModel):
    """A backlog item drafted from a finding."""

    service_id: UUID
    title: str
    description: str
    type: str = "refactor"
    priority: str
    status: str = "backlog"
    rule_id: str
    file_path: str | None = None


class RefactorItemsResponse(BaseModel):
    items: list[RefactorItemResponse]
    total: int
