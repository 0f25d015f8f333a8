"""Main FastAPI application."""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator

from fastapi import Depends, FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from askboard.config import get_config
from askboard.core import AskBoardException, get_logger, setup_logging
from askboard.db import close_db, create_tables

from .dependencies import get_session

# Setup logging
setup_logging()
logger = get_logger(__name__)
settings = get_config()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    # Startup
    logger.info(
        "Starting AskBoard API",
        version=settings.app_version,
        environment=settings.environment,
    )

    if settings.auto_create_tables:
        await create_tables()
        logger.info("Database tables ready")

    yield

    # Shutdown
    logger.info("Shutting down AskBoard API")
    await close_db()


# Create FastAPI app
app = FastAPI(
    title="AskBoard API",
    description="Question-and-answer community platform",
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Import routers after app creation
from .routes import qa, users  # noqa: E402

# Add middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(
    GZipMiddleware,
    minimum_size=1000,
    compresslevel=6,
)


# Exception handlers
@app.exception_handler(AskBoardException)
async def askboard_exception_handler(request, exc: AskBoardException):
    """Handle AskBoard exceptions."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "AskBoard exception",
        error_code=exc.code,
        error_message=exc.message,
        details=exc.details,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request, exc: RequestValidationError):
    """Report malformed requests in the same shape as service validation errors."""
    return JSONResponse(
        status_code=400,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Invalid request",
            "details": {"errors": jsonable_encoder(exc.errors())},
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Handle general exceptions."""
    logger.exception("Unhandled exception", error=str(exc))
    return JSONResponse(
        status_code=500,
        content={
            "error": "INTERNAL_ERROR",
            "message": "An internal error occurred",
            "details": {} if get_config().is_production else {"error": str(exc)},
        },
    )


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "AskBoard API",
        "version": settings.app_version,
        "status": "running",
        "docs": "/docs",
    }


# Health check endpoint
@app.get("/health")
@app.get("/api/health")
async def health_check(session: AsyncSession = Depends(get_session)):
    """
    Health check endpoint.

    Returns system health status and a database round trip.
    """
    try:
        await session.execute(text("SELECT 1"))
        database = {"status": "healthy"}
    except SQLAlchemyError as e:
        logger.error("Database health check failed", error=str(e))
        database = {"status": "unhealthy"}
        if not get_config().is_production:
            database["error"] = str(e)

    return {
        "status": "healthy" if database["status"] == "healthy" else "degraded",
        "version": settings.app_version,
        "environment": settings.environment,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "dependencies": {"database": database},
    }


# Include routers
app.include_router(qa.router, prefix="/api", tags=["qa"])
app.include_router(users.router, prefix="/api", tags=["users"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "askboard.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )
