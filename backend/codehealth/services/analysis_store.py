"""Persistence for code analysis records."""

import logging
from typing import Any, Protocol
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from codehealth.exceptions import AnalysisNotFoundError, PersistenceError
from codehealth.models.code_analysis import CodeAnalysis

logger = logging.getLogger(__name__)


class AnalysisStore(Protocol):
    """Record storage used by the analysis orchestrator."""

    async def insert(self, draft: dict[str, Any]) -> CodeAnalysis: ...

    async def update(self, analysis_id: UUID, fields: dict[str, Any]) -> CodeAnalysis: ...

    async def delete(self, analysis_id: UUID) -> None: ...

    async def list_by_service(self, service_id: UUID) -> list[CodeAnalysis]: ...

    async def get_by_id(self, analysis_id: UUID) -> CodeAnalysis | None: ...


class SqlAlchemyAnalysisStore:
    """Analysis records in the relational database.

    When ``user_id`` is set every read and write is restricted to that user's
    records, so another user's analysis id behaves as missing.
    """

    def __init__(self, db: AsyncSession, user_id: UUID | None = None):
        self.db = db
        self.user_id = user_id

    def _scoped(self, query):
        if self.user_id is not None:
            query = query.where(CodeAnalysis.user_id == self.user_id)
        return query

    async def _commit(self, action: str) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error("Failed to %s code analysis: %s", action, exc)
            raise PersistenceError(f"Failed to {action} code analysis") from exc

    async def insert(self, draft: dict[str, Any]) -> CodeAnalysis:
        fields = dict(draft)
        if self.user_id is not None:
            fields["user_id"] = self.user_id
        analysis = CodeAnalysis(**fields)
        self.db.add(analysis)
        await self._commit("create")
        await self.db.refresh(analysis)
        return analysis

    async def update(self, analysis_id: UUID, fields: dict[str, Any]) -> CodeAnalysis:
        analysis = await self.get_by_id(analysis_id)
        if analysis is None:
            raise AnalysisNotFoundError(f"Analysis not found: {analysis_id}")
        for key, value in fields.items():
            setattr(analysis, key, value)
        await self._commit("update")
        await self.db.refresh(analysis)
        return analysis

    async def delete(self, analysis_id: UUID) -> None:
        analysis = await self.get_by_id(analysis_id)
        if analysis is None:
            raise AnalysisNotFoundError(f"Analysis not found: {analysis_id}")
        await self.db.delete(analysis)
        await self._commit("delete")

    async def list_by_service(self, service_id: UUID) -> list[CodeAnalysis]:
        query = self._scoped(
            select(CodeAnalysis)
            .where(CodeAnalysis.service_id == service_id)
            .order_by(CodeAnalysis.created_at.desc())
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_by_id(self, analysis_id: UUID) -> CodeAnalysis | None:
        query = self._scoped(select(CodeAnalysis).where(CodeAnalysis.id == analysis_id))
        result = await self.db.execute(query)
        return result.scalar_one_or_none()
