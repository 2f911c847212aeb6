"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from codehealth.api.routes import code_analyses
from codehealth.config import configure_logging, get_settings
from codehealth.database import init_db
from codehealth.exceptions import (
    AnalysisFailedError,
    AnalysisNotCompletedError,
    AnalysisNotFoundError,
    InvalidUrlError,
    PersistenceError,
)

logger = logging.getLogger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    configure_logging(settings)
    await init_db()
    yield
    # Shutdown


app = FastAPI(
    title="CodeHealth API",
    description="Code-quality analysis for GitHub repositories",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    messages = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"] if part != "body")
        messages.append(f"{field}: {error['msg']}" if field else error["msg"])
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"error": "; ".join(messages) or "Invalid request body"},
    )


@app.exception_handler(InvalidUrlError)
async def invalid_url_handler(request: Request, exc: InvalidUrlError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(exc)})


@app.exception_handler(AnalysisNotFoundError)
async def not_found_handler(request: Request, exc: AnalysisNotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": "Analysis not found"})


@app.exception_handler(AnalysisNotCompletedError)
async def not_completed_handler(request: Request, exc: AnalysisNotCompletedError):
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"error": str(exc)})


@app.exception_handler(AnalysisFailedError)
async def analysis_failed_handler(request: Request, exc: AnalysisFailedError):
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": str(exc), "analysis_id": exc.analysis_id},
    )


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    logger.error("Persistence failure on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": str(exc)}
    )


# Include routers
app.include_router(code_analyses.router, prefix="/api", tags=["Code Analyses"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": "0.1.0"}
