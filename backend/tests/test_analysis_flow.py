"""Integration test for analyze -> persist -> query -> delete against PostgreSQL."""

import os
import uuid

import httpx
import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from codehealth.database import Base
from codehealth.exceptions import AnalysisFailedError
from codehealth.services.analysis_service import AnalysisService
from codehealth.services.analysis_store import SqlAlchemyAnalysisStore
from codehealth.services.github_service import GitHubService
from codehealth.services.refactor_service import RefactorService


def github_api(request: httpx.Request) -> httpx.Response:
    path = request.url.path
    if path == "/repos/local/sample":
        return httpx.Response(200, json={"default_branch": "main"})
    if path == "/repos/local/sample/git/trees/main":
        tree = [
            {"path": "app.py", "type": "blob", "size": 120},
            {"path": ".env", "type": "blob", "size": 40},
        ]
        return httpx.Response(200, json={"tree": tree})
    if path == "/repos/local/sample/contents/app.py":
        return httpx.Response(200, text="print('hi')\n")
    return httpx.Response(404, json={"message": "Not Found"})


@pytest.mark.asyncio
@pytest.mark.skipif(
    not os.getenv("RUN_INTEGRATION_TESTS"),
    reason="Set RUN_INTEGRATION_TESTS=1 to enable integration tests",
)
async def test_analysis_flow_persists_records():
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        pytest.skip("DATABASE_URL not set")

    schema_name = f"test_{uuid.uuid4().hex[:8]}"
    engine = create_async_engine(
        database_url,
        echo=False,
        connect_args={"server_settings": {"search_path": schema_name}},
    )

    async with engine.begin() as conn:
        await conn.execute(text(f"CREATE SCHEMA {schema_name}"))
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    user_id, other_user_id, service_id = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()

    try:
        async with session_factory() as db, httpx.AsyncClient(
            transport=httpx.MockTransport(github_api)
        ) as client:
            store = SqlAlchemyAnalysisStore(db, user_id=user_id)
            service = AnalysisService(store, GitHubService(client))

            completed = await service.run_analysis(
                "https://github.com/local/sample", service_id, user_id
            )
            assert completed.status == "completed"
            assert completed.analyzed_at is not None
            assert completed.created_at is not None
            assert "sec-env-exposed" in {f["id"] for f in completed.findings}
            assert completed.summary["total_findings"] == len(completed.findings)

            with pytest.raises(AnalysisFailedError) as exc_info:
                await service.run_analysis(
                    "https://github.com/local/missing", service_id, user_id
                )
            failed = await service.get_analysis(uuid.UUID(exc_info.value.analysis_id))
            assert failed.status == "failed"
            assert failed.findings is None

            analyses = await service.list_analyses(service_id)
            assert [a.id for a in analyses] == [failed.id, completed.id]

            items = RefactorService().build_items(completed)
            assert len(items) == len(completed.findings)

            other_store = SqlAlchemyAnalysisStore(db, user_id=other_user_id)
            assert await other_store.get_by_id(completed.id) is None
            assert await other_store.list_by_service(service_id) == []

            await service.delete_analysis(completed.id)
            assert await store.get_by_id(completed.id) is None
    finally:
        async with engine.begin() as conn:
            await conn.execute(text(f"DROP SCHEMA IF EXISTS {schema_name} CASCADE"))
        await engine.dispose()
