"""
Health check endpoints.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.config.settings import Settings, get_settings

SERVICE_NAME = "fhir-query-gateway"
SERVICE_VERSION = "0.1.0"

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str
    version: str
    fhir_server: str


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_settings)) -> HealthResponse:
    """
    Health check endpoint.

    Reports liveness only; the remote FHIR server is not contacted.
    """
    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        version=SERVICE_VERSION,
        fhir_server=settings.fhir_server_base_url,
    )
