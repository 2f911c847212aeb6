"""Code analysis routes."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from codehealth.api.deps import AnalysisServiceDep, CurrentUser, get_current_user
from codehealth.schemas.code_analysis import (
    AnalyzeRepoRequest,
    CodeAnalysisListResponse,
    CodeAnalysisResponse,
    ErrorResponse,
    QueuedAnalysisResponse,
    RefactorItemResponse,
    RefactorItemsRequest,
    RefactorItemsResponse,
)
from codehealth.services.refactor_service import RefactorService
from codehealth.tasks.analyze_repo import analyze_repository

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_user)])

refactor_service = RefactorService()


@router.post(
    "/analyze-repo",
    response_model=CodeAnalysisResponse,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def analyze_repo(
    request: AnalyzeRepoRequest,
    user: CurrentUser,
    service: AnalysisServiceDep,
):
    """Analyze a public GitHub repository and return the completed record."""
    analysis = await service.run_analysis(request.repo_url, request.service_id, user.id)
    return CodeAnalysisResponse.model_validate(analysis)


@router.post(
    "/analyze-repo/queue",
    response_model=QueuedAnalysisResponse,
    status_code=status.HTTP_202_ACCEPTED,
    responses={400: {"model": ErrorResponse}},
)
async def queue_analyze_repo(
    request: AnalyzeRepoRequest,
    user: CurrentUser,
    service: AnalysisServiceDep,
):
    """Create a running analysis and hand it to a background worker."""
    analysis = await service.start_analysis(request.repo_url, request.service_id, user.id)
    task = analyze_repository.delay(str(analysis.id), str(user.id))
    logger.info("Queued analysis %s as task %s", analysis.id, task.id)
    return QueuedAnalysisResponse(
        analysis=CodeAnalysisResponse.model_validate(analysis),
        task_id=task.id,
    )


@router.get("/services/{service_id}/code-analyses", response_model=CodeAnalysisListResponse)
async def list_code_analyses(
    service_id: UUID,
    service: AnalysisServiceDep,
):
    """List a service's analyses, newest first."""
    analyses = await service.list_analyses(service_id)
    return CodeAnalysisListResponse(
        analyses=[CodeAnalysisResponse.model_validate(a) for a in analyses],
        total=len(analyses),
    )


@router.get(
    "/code-analyses/{analysis_id}",
    response_model=CodeAnalysisResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_code_analysis(
    analysis_id: UUID,
    service: AnalysisServiceDep,
):
    """Get an analysis by ID."""
    analysis = await service.get_analysis(analysis_id)
    return CodeAnalysisResponse.model_validate(analysis)


@router.delete(
    "/code-analyses/{analysis_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_code_analysis(
    analysis_id: UUID,
    service: AnalysisServiceDep,
):
    """Delete an analysis."""
    await service.delete_analysis(analysis_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/code-analyses/{analysis_id}/refactor-items",
    response_model=RefactorItemsResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_refactor_items(
    analysis_id: UUID,
    service: AnalysisServiceDep,
    request: RefactorItemsRequest | None = None,
):
    """Draft refactor backlog items from a completed analysis."""
    analysis = await service.get_analysis(analysis_id)
    rule_ids = request.rule_ids if request else None
    items = refactor_service.build_items(analysis, rule_ids)
    return RefactorItemsResponse(
        items=[RefactorItemResponse(**item) for item in items],
        total=len(items),
    )
