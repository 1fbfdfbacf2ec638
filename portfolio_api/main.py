"""
Portfolio Community API

FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from portfolio_api.api.middleware import REQUEST_ID_HEADER, RequestIdMiddleware
from portfolio_api.api.routes import router as api_router
from portfolio_api.config import get_settings
from portfolio_api.database import close_db, init_db
from portfolio_api.errors import Internal, PortfolioError, Unauthenticated, ValidationError
from portfolio_api.logging_config import configure_logging, get_logger
from portfolio_api.schemas.common import HealthResponse

settings = get_settings()
logger = get_logger(__name__)


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
    Portfolio Community API

    Users publish projects, open forums, comment on both and like them.

    ## Features

    - **Accounts**: registration, login with bearer tokens, profile
    - **Projects**: tagged portfolio entries with repository and live links
    - **Forums**: discussion threads
    - **Comments**: attached to exactly one project or forum
    - **Likes**: one per user per item, toggled
    - **Search**: relevance-ranked over projects and forums
    """,
    version=settings.version,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# add_middleware stacks innermost-first, so CORS (added last) wraps everything
app.add_middleware(RequestIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=[REQUEST_ID_HEADER],
)


def _cors_headers(request: Request) -> dict:
    """CORS headers for responses built outside the middleware stack (unhandled 500s)."""
    origin = request.headers.get("origin") or ""
    if "*" in settings.cors_origins:
        allow_origin = "*"
    else:
        allow_origin = origin if origin in settings.cors_origins else settings.cors_origins[0]
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
        "Access-Control-Allow-Headers": "*",
    }


def _error_headers(request: Request) -> dict:
    headers = {}
    req_id = getattr(request.state, "request_id", None)
    if req_id:
        headers[REQUEST_ID_HEADER] = req_id
    return headers


@app.exception_handler(PortfolioError)
async def portfolio_error_handler(request: Request, exc: PortfolioError):
    """Map a domain error onto its HTTP status with a ``{detail, code}`` body."""
    headers = _error_headers(request)
    if isinstance(exc, Unauthenticated):
        headers["WWW-Authenticate"] = "Bearer"
    if exc.status_code >= 500:
        logger.error("Request failed: %s", exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Unmatched routes, disallowed methods and the like."""
    headers = _error_headers(request)
    if exc.headers:
        headers.update(exc.headers)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
):
    """Malformed body or query: 400 with one entry per offending field."""
    errors = []
    for error in exc.errors():
        # Drop the "body"/"query" prefix FastAPI puts on every location
        loc = [str(part) for part in error["loc"]]
        if len(loc) > 1 and loc[0] in ("body", "query", "path"):
            loc = loc[1:]
        errors.append({
            "field": ".".join(loc),
            "message": error["msg"],
            "type": error["type"],
        })
    error = ValidationError.for_fields(errors)
    return JSONResponse(
        status_code=error.status_code,
        content=error.to_dict(),
        headers=_error_headers(request),
    )


@app.exception_handler(Exception)
async def general_exception_handler(
    request: Request,
    exc: Exception,
):
    """Unexpected exceptions. CORS headers added so browsers do not hide the 500."""
    logger.exception("Unhandled exception: %s", exc)
    error = Internal(str(exc) if settings.debug else None)
    headers = _cors_headers(request)
    headers.update(_error_headers(request))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error.to_dict(),
        headers=headers,
    )


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Check application health."""
    return HealthResponse(status="ok", version=settings.version, database="connected")


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.project_name,
        "version": settings.version,
        "docs": "/docs" if settings.debug else "disabled",
        "api": settings.api_prefix,
    }


app.include_router(api_router, prefix=settings.api_prefix)


# Main entry point for development
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "portfolio_api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
