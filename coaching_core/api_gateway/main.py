"""
Main FastAPI Application

Coaching platform API gateway with:
- Institute provisioning and access-token resolution
- Batch and study material management
- Learner login and enrollment
- CORS configuration
- Health checks
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from structlog import get_logger

from ..batches.api_router import router as batch_router
from ..config import get_config
from ..enrollment.api_router import router as enrollment_router
from ..shared_services.database import connect, initialize_indexes
from ..shared_services.errors import InternalError, PlatformError
from ..shared_services.log_config import configure_logging
from ..tenant_management.api_router import router as institute_router

config = get_config()
configure_logging(config)
logger = get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    # Startup
    logger.info("starting_coaching_platform", environment=config.environment.value)

    app.state.mongo_client, app.state.platform_db = connect(config)

    # One-time schema initialisation before serving requests
    await initialize_indexes(app.state.platform_db)

    logger.info("platform_initialized")

    yield

    # Shutdown
    logger.info("shutting_down_platform")
    app.state.mongo_client.close()
    logger.info("platform_shutdown_complete")


# Create FastAPI application
app = FastAPI(
    title="Coaching Platform",
    description="Multi-tenant backend for coaching institutes, their batches and learners",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if not config.is_production else None,
    redoc_url="/redoc" if not config.is_production else None,
    openapi_url="/openapi.json" if not config.is_production else None,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.get_allowed_origins_list(),
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "x-api-key", "x-institute-id"],
)


# Health check endpoints
@app.get("/health", tags=["Platform"], summary="Health check")
async def health_check():
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "environment": config.environment.value,
        "version": "0.1.0",
    }


@app.get("/ping", tags=["Platform"], summary="Ping endpoint")
async def ping():
    """Simple ping endpoint."""
    return {"message": "pong"}


# Exception handlers
@app.exception_handler(PlatformError)
async def platform_error_handler(request: Request, exc: PlatformError):
    """Render domain errors with their own status and category."""
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "request_failed",
        path=request.url.path,
        category=exc.category,
        error=exc.message,
        **exc.context,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies as invalid input."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Invalid request",
            "category": "invalid_input",
            "details": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(Exception)
async def server_error_handler(request: Request, exc: Exception):
    """Catch-all for unclassified failures."""
    logger.error("internal_server_error", path=request.url.path, error=str(exc))
    error = InternalError("Internal server error")
    return JSONResponse(status_code=error.status_code, content=error.to_response())


# Include routers
app.include_router(institute_router)
app.include_router(batch_router)
app.include_router(enrollment_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "coaching_core.api_gateway.main:app",
        host=config.host,
        port=config.port,
        reload=config.is_local,
        log_level=config.log_level.lower(),
    )
