"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and configures uvicorn server.

Dependencies: fastapi, doc_ingest.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from doc_ingest.api.deps.dependencies import get_service_cache
from doc_ingest.configs import get_settings
from doc_ingest.core.exceptions import DocumentNotFoundError, VectorStoreError
from doc_ingest.observability import configure_logging

from .routers import documents_router, health_router, jobs_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events.
    """
    configure_logging(get_settings().log_level)

    # Startup
    logger.info("Pre-warming service cache...")
    cache = get_service_cache()
    await cache.vector_store.initialize()
    _ = cache.pipeline
    logger.info("Service cache pre-warmed")

    yield

    # Shutdown
    await cache.aclose()
    logger.info("Service cache cleared")


async def document_not_found_handler(request: Request, exc: DocumentNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": exc.message})


async def vector_store_error_handler(request: Request, exc: VectorStoreError) -> JSONResponse:
    logger.error(
        "Vector store operation failed",
        extra={"path": request.url.path, "details": exc.details},
    )
    return JSONResponse(status_code=500, content={"detail": exc.message, **exc.details})


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    app = FastAPI(
        title="Document Ingestion API",
        description="Document ingestion pipeline with vector similarity search",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(DocumentNotFoundError, document_not_found_handler)
    app.add_exception_handler(VectorStoreError, vector_store_error_handler)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(documents_router, prefix="/api/v1")
    app.include_router(jobs_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "doc_ingest.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
