"""
NEST - Main Application.

FastAPI application with modular architecture and feature flags.
"""

import logging
import sys
import traceback
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from nest import __version__
from nest.config import get_settings
from nest.core.mock_client import MockClient
from nest.core.supabase_client import get_supabase_client
from nest.exceptions import NestException
from nest.schemas import ErrorDetail, ErrorResponse, HealthResponse

# Import module routers
from nest.api.routes.auth import router as auth_router
from nest.modules.trips import router as trips_router
from nest.modules.itinerary import router as itinerary_router
from nest.modules.collaborators import router as collaborators_router
from nest.modules.comments import router as comments_router

# Configure standard logging
logging.basicConfig(
    level=get_settings().app_log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger("nest")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings = get_settings()
    logger.info(
        f"Starting NEST API v{__version__} "
        f"[env={settings.app_env}] "
        f"[mock_mode={settings.supabase.mock_mode}] "
        f"[features={settings.features.to_dict()}]"
    )
    get_supabase_client()
    yield
    logger.info("Shutting down NEST API")


# Create FastAPI application
app = FastAPI(
    title="NEST API",
    description="Family trip planner: trips, day-by-day itineraries, collaborators and comments.",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Middleware
# =============================================================================


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests."""
    request_id = getattr(request.state, "request_id", "unknown")
    logger.info(f"[{request_id}] {request.method} {request.url.path}")

    response = await call_next(request)

    logger.info(f"[{request_id}] {request.method} {request.url.path} -> {response.status_code}")

    return response


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Add request ID to all requests."""
    request_id = request.headers.get("X-Request-ID") or str(uuid4())
    request.state.request_id = request_id

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id

    return response


# =============================================================================
# Exception Handlers
# =============================================================================


@app.exception_handler(NestException)
async def nest_exception_handler(request: Request, exc: NestException):
    """Handle NEST custom exceptions."""
    request_id = getattr(request.state, "request_id", None)

    logger.warning(f"NestException: {exc.code} - {exc.message}")

    body = ErrorResponse(
        error=ErrorDetail(
            code=exc.code,
            message=exc.message,
            details=exc.details,
            request_id=request_id,
        )
    )
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    request_id = getattr(request.state, "request_id", None)

    logger.error(f"Unhandled exception on {request.url.path}")
    logger.error(f"Exception type: {type(exc).__name__}")
    logger.error(f"Exception message: {str(exc)}")
    logger.error(f"Traceback:\n{traceback.format_exc()}")

    settings = get_settings()
    show_detail = settings.app_debug and not settings.is_production

    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": str(exc) if show_detail else "An unexpected error occurred",
                "request_id": request_id,
            }
        },
    )


# =============================================================================
# Health Check
# =============================================================================


@app.get("/health", response_model=HealthResponse, tags=["health"])
async def health_check():
    """Health check endpoint."""
    settings = get_settings()
    client = get_supabase_client()
    return HealthResponse(
        status="healthy",
        version=__version__,
        features=settings.features.to_dict(),
        app_env=settings.app_env,
        mock_mode=isinstance(client, MockClient),
        tables=client.store.table_names() if isinstance(client, MockClient) else [],
    )


# =============================================================================
# Register Module Routers
# =============================================================================

app.include_router(auth_router)
app.include_router(trips_router)
app.include_router(itinerary_router)
app.include_router(collaborators_router)
app.include_router(comments_router)


# =============================================================================
# Root Endpoint
# =============================================================================


@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint redirect to docs."""
    return {"message": "Welcome to NEST API", "docs": "/docs"}
