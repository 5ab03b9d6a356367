"""
Onboarding Identity Service

FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from onboarding.api.middleware.request_id import RequestIdMiddleware
from onboarding.api.v1 import router as api_v1_router
from onboarding.config import get_settings
from onboarding.database import close_db, init_db
from onboarding.kernel.errors import (
    Conflict,
    IdentityError,
    InvalidInput,
    NotFound,
    NotificationError,
    PersistenceError,
    Unauthorized,
)
from onboarding.logging_config import configure_logging, get_logger
from onboarding.schemas.common import HealthResponse

settings = get_settings()
logger = get_logger(__name__)

# Most specific class first
ERROR_STATUS = (
    (InvalidInput, status.HTTP_400_BAD_REQUEST),
    (Conflict, status.HTTP_400_BAD_REQUEST),
    (Unauthorized, status.HTTP_400_BAD_REQUEST),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (NotificationError, status.HTTP_502_BAD_GATEWAY),
    (PersistenceError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def status_for(exc: IdentityError) -> int:
    """HTTP status for a workflow error kind."""
    for error_type, status_code in ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan handler.

    Runs startup and shutdown tasks.
    """
    configure_logging(
        log_level=settings.log_level,
        environment=settings.environment,
        debug=settings.debug,
    )

    logger.info("Starting %s v%s", settings.project_name, settings.version)
    await init_db()
    logger.info("Database initialized")

    yield

    logger.info("Shutting down...")
    await close_db()
    logger.info("Database connections closed")


app = FastAPI(
    title=settings.project_name,
    description="""
    Account onboarding: registration with email verification, sign-in,
    activation and password recovery.
    """,
    version=settings.version,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# add_middleware stacks innermost-first: CORS is added last so it wraps every response
app.add_middleware(RequestIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(
    request: Request,
    status_code: int,
    content: dict,
    headers: Optional[dict] = None,
) -> JSONResponse:
    headers = dict(headers or {})
    req_id = getattr(request.state, "request_id", None)
    if req_id:
        headers["X-Request-ID"] = req_id
        if status_code >= 500:
            content["request_id"] = req_id
    return JSONResponse(status_code=status_code, content=content, headers=headers)


@app.exception_handler(IdentityError)
async def identity_error_handler(request: Request, exc: IdentityError):
    """Map workflow error kinds to transport status codes."""
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("%s: %s", type(exc).__name__, exc.message, exc_info=exc.__cause__)
    return _error_response(
        request,
        status_code,
        {"detail": exc.message, "code": exc.code},
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return _error_response(
        request,
        exc.status_code,
        {"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
):
    """Missing, empty or non-string fields are a bad request."""
    errors = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"] if loc != "body")
        errors.append({
            "field": field,
            "message": error["msg"],
            "type": error["type"],
        })
    return _error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        {"detail": "Validation error", "code": "invalid_request", "errors": errors},
    )


@app.exception_handler(Exception)
async def general_exception_handler(
    request: Request,
    exc: Exception,
):
    """Handle unexpected exceptions."""
    logger.exception("Unhandled exception: %s", exc)
    if settings.debug:
        content = {"detail": str(exc), "type": type(exc).__name__}
    else:
        content = {"detail": "Internal server error"}
    return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, content)


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Check application health."""
    return HealthResponse(status="ok", version=settings.version)


app.include_router(
    api_v1_router,
    prefix=settings.api_v1_prefix,
)


# Main entry point for development
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "onboarding.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
