"""Background repository analysis task."""

import asyncio
import logging
from uuid import UUID

import httpx
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from codehealth.celery_app import celery_app
from codehealth.config import get_settings
from codehealth.exceptions import AnalysisFailedError
from codehealth.models.code_analysis import AnalysisStatus
from codehealth.services.analysis_service import AnalysisService
from codehealth.services.analysis_store import SqlAlchemyAnalysisStore
from codehealth.services.github_service import GitHubService

logger = logging.getLogger(__name__)
settings = get_settings()


def create_task_engine() -> AsyncEngine:
    # One engine per task run; pooled connections are bound to the run's event loop
    return create_async_engine(
        settings.database_url,
        pool_size=5,
        pool_pre_ping=True,
    )


async def analyze_repository_async(analysis_id: str, user_id: str) -> str:
    """Execute a queued analysis and return the record's final status."""
    engine = create_task_engine()
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    try:
        async with session_factory() as db, httpx.AsyncClient(
            timeout=settings.github_timeout_seconds
        ) as client:
            store = SqlAlchemyAnalysisStore(db, user_id=UUID(user_id))
            service = AnalysisService(
                store,
                GitHubService.from_settings(client, settings),
                timeout_seconds=settings.analysis_timeout_seconds,
            )

            analysis = await store.get_by_id(UUID(analysis_id))
            if analysis is None:
                logger.warning("Queued analysis %s no longer exists", analysis_id)
                return "missing"
            if analysis.status != AnalysisStatus.RUNNING.value:
                logger.info("Analysis %s is already %s", analysis_id, analysis.status)
                return analysis.status

            try:
                completed = await service.execute_analysis(analysis)
            except AnalysisFailedError as exc:
                logger.warning("Analysis %s failed: %s", exc.analysis_id, exc)
                return AnalysisStatus.FAILED.value
            return completed.status
    finally:
        await engine.dispose()


@celery_app.task(name="analyze_repository")
def analyze_repository(analysis_id: str, user_id: str) -> str:
    """Celery task entrypoint for queued analyses.

    Not retried: a failed run is already recorded on the analysis.
    """
    try:
        return asyncio.run(analyze_repository_async(analysis_id, user_id))
    except Exception as exc:
        logger.error("Analysis task for %s failed: %s", analysis_id, exc)
        raise
