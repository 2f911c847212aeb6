"""Code analysis record model."""

import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import JSON, CheckConstraint, DateTime, Index, String, Text, Uuid, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from codehealth.database import Base

JsonColumn = JSON().with_variant(JSONB(), "postgresql")


class AnalysisStatus(str, Enum):
    """Lifecycle of an analysis record."""

    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class CodeAnalysis(Base):
    """One analysis run of a GitHub repository for a service.

    findings and summary are set only once the run is completed.
    """

    __tablename__ = "code_analyses"
    __table_args__ = (
        CheckConstraint(
            "status IN ('running', 'completed', 'failed')", name="ck_code_analyses_status"
        ),
        Index("ix_code_analyses_service_created", "service_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    service_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False, index=True)

    # Repository
    repo_url: Mapped[str] = mapped_column(Text, nullable=False)
    repo_owner: Mapped[str] = mapped_column(String(255), nullable=False)
    repo_name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Outcome
    status: Mapped[str] = mapped_column(String(20), default=AnalysisStatus.RUNNING.value)
    findings: Mapped[list | None] = mapped_column(JsonColumn)
    summary: Mapped[dict | None] = mapped_column(JsonColumn)
    error_message: Mapped[str | None] = mapped_column(Text)
    analyzed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
