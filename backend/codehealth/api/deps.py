"""API dependencies for dependency injection."""

from dataclasses import dataclass
from typing import Annotated, AsyncIterator
from uuid import UUID

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from codehealth.config import get_settings
from codehealth.database import get_db
from codehealth.services.analysis_service import AnalysisService
from codehealth.services.analysis_store import SqlAlchemyAnalysisStore
from codehealth.services.auth_service import AuthService
from codehealth.services.github_service import GitHubService
from codehealth.services.rule_engine import RuleEngine

# Security scheme
security = HTTPBearer()

# Type aliases for cleaner signatures
DbSession = Annotated[AsyncSession, Depends(get_db)]


@dataclass(frozen=True)
class AuthenticatedUser:
    """Caller identity taken from the bearer token."""

    id: UUID


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
) -> AuthenticatedUser:
    """Get the current authenticated user from JWT token."""
    auth_service = AuthService()

    payload = auth_service.verify_jwt(credentials.credentials)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        user_id = UUID(str(payload.get("sub")))
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    return AuthenticatedUser(id=user_id)


CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]


async def get_analysis_store(user: CurrentUser, db: DbSession) -> SqlAlchemyAnalysisStore:
    return SqlAlchemyAnalysisStore(db, user_id=user.id)


async def get_github_service() -> AsyncIterator[GitHubService]:
    """Yield a GitHub client whose HTTP connection pool lives for one request."""
    settings = get_settings()
    async with httpx.AsyncClient(timeout=settings.github_timeout_seconds) as client:
        yield GitHubService.from_settings(client, settings)


async def get_analysis_service(
    store: Annotated[SqlAlchemyAnalysisStore, Depends(get_analysis_store)],
    github: Annotated[GitHubService, Depends(get_github_service)],
) -> AnalysisService:
    return AnalysisService(
        store,
        github,
        RuleEngine(),
        timeout_seconds=get_settings().analysis_timeout_seconds,
    )


AnalysisServiceDep = Annotated[AnalysisService, Depends(get_analysis_service)]
