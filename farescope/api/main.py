"""
FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from farescope import __app_name__, __version__
from farescope.config import get_settings
from farescope.database import get_database, masked_database_url
from farescope.exceptions import DatabaseConnectionError

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Refuses to start when the database is unreachable.
    """
    # Startup
    logger.info(f"Starting {__app_name__} v{__version__}")
    logger.info(f"Environment: {settings.environment}")

    database = get_database()
    if not await database.check_connection():
        logger.error(
            f"Failed to connect to database {masked_database_url(database.database_url)}\n"
            "To fix: verify DATABASE_URL in .env and run 'farescope db init'"
        )
        raise DatabaseConnectionError(masked_database_url(database.database_url))

    logger.info(f"Serving {len(settings.experiments)} experiments")

    yield

    # Shutdown
    logger.info("Shutting down application")
    await database.dispose()
    logger.info("Application shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Airfare price collection results",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Configured via ALLOWED_ORIGINS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins_list(),
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=1000)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler for unhandled exceptions."""
    logger.error(
        f"Unhandled exception during {request.method} {request.url.path}: {exc}",
        exc_info=True,
    )

    if settings.debug:
        content = {
            "error": "Internal server error",
            "message": str(exc),
            "type": exc.__class__.__name__,
            "path": str(request.url.path),
            "method": request.method,
        }
    else:
        content = {
            "error": "Internal server error",
            "message": "An unexpected error occurred. Please check the logs.",
        }

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=content,
    )


@app.get("/", tags=["Root"])
async def root() -> Dict[str, Any]:
    """API root endpoint with version information."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "endpoints": {
            "results": "/results",
            "experiment": "/results/{name}",
            "health": "/health",
        },
        "docs": "/docs",
    }


# Import and include routers
from farescope.api.routes import health, results  # noqa: E402

app.include_router(health.router, tags=["Health"])
app.include_router(results.router, tags=["Results"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "farescope.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
