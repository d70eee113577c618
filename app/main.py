"""
FHIR Query Gateway - Main application entry point.

Simplified REST endpoints over a remote FHIR server: patients, observations,
document references and diagnostic reports.
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config.logging import configure_logging, get_logger
from app.config.settings import get_settings
from app.middleware import RequestContextMiddleware
from app.routers import (
    diagnostic_reports_router,
    document_references_router,
    health_router,
    observations_router,
    patients_router,
)
from app.routers.health import SERVICE_VERSION
from app.services.fhir_client import get_query_executor
from app.services.normalizer import INTERNAL_LABEL

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown."""
    settings = get_settings()
    configure_logging(
        level=settings.log_level,
        json_format=settings.log_json,
        quiet_client=not settings.log_remote_exchanges,
    )
    logger.info("Starting FHIR Query Gateway", host=settings.host, port=settings.port)

    # Build the executor up front so a bad base URL fails at startup
    get_query_executor()

    yield

    logger.info("Shutting down FHIR Query Gateway")


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return a JSON 500 for anything that escaped the gateway pipeline."""
    logger.error(
        "Unhandled error",
        path=request.url.path,
        error=str(exc),
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={"error": INTERNAL_LABEL, "message": str(exc) or exc.__class__.__name__},
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="FHIR Query Gateway",
        description="Simplified REST API over a remote FHIR server",
        version=SERVICE_VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    origins = settings.cors_origins.split(",") if settings.cors_origins != "*" else ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)

    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(health_router)
    app.include_router(patients_router)
    app.include_router(observations_router)
    app.include_router(document_references_router)
    app.include_router(diagnostic_reports_router)

    return app


app = create_app()


def run():
    """Run the gateway with uvicorn."""
    settings = get_settings()
    configure_logging(
        level=settings.log_level,
        json_format=settings.log_json,
        quiet_client=not settings.log_remote_exchanges,
    )

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
