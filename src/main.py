"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.api.v1.auth import router as auth_router
from src.api.v1.consultations import router as consultations_router
from src.config import settings
from src.consultations.dependencies import get_consultation_store
from src.database import dispose_engine
from src.errors import AppError, FieldError, PersistenceError, ValidationError
from src.redis_client import close_redis
from src.repositories.memory import InMemoryConsultationStore

structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        *(
            [structlog.dev.ConsoleRenderer()] if settings.environment == "development"
            else [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
        ),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        getattr(logging, settings.log_level.upper(), logging.INFO)
    ),
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    logger.info(
        "app_starting",
        environment=settings.environment,
        consultation_store=settings.consultation_store,
    )
    yield
    await close_redis()
    await dispose_engine()
    logger.info("app_shutting_down")


app = FastAPI(
    title="Interior Studio API",
    description="Consultation intake and admin workflow for an interior design studio",
    version="0.1.0",
    lifespan=lifespan,
)

if settings.consultation_store == "memory":
    _memory_store = InMemoryConsultationStore()
    app.dependency_overrides[get_consultation_store] = lambda: _memory_store

# Include routers
app.include_router(consultations_router)
app.include_router(auth_router)


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    """Store failures: full detail in the logs, a safe message for the caller."""
    logger.error(
        "persistence_error",
        method=request.method,
        path=request.url.path,
        details=exc.details,
        exc_info=exc.__cause__ or exc,
    )
    body = exc.to_dict()
    if not settings.is_production and exc.details:
        body["details"] = exc.details
    return JSONResponse(body, status_code=exc.status_code)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.info(
        "request_rejected",
        method=request.method,
        path=request.url.path,
        error=exc.error,
        status_code=exc.status_code,
    )
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render FastAPI's own body/query validation in the same shape as ours."""
    fields = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        fields.append(FieldError(".".join(loc) or "body", err.get("msg", "Invalid value")))
    return await app_error_handler(request, ValidationError(fields))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "unhandled_error",
        method=request.method,
        path=request.url.path,
        exc_info=exc,
    )
    body = {"error": "internal_error", "message": "An unexpected error occurred"}
    if not settings.is_production:
        body["details"] = str(exc)
    return JSONResponse(body, status_code=500)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Interior Studio API",
        "version": "0.1.0",
        "status": "running",
    }


@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok", "version": "0.1.0"}
