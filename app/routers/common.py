"""
Shared plumbing for the clinical resource routers.
"""

from typing import Any

from fastapi import Depends
from fastapi.responses import JSONResponse, Response

from app.config.settings import Settings, get_settings
from app.models.envelopes import ErrorBody, GatewayResponse, SuccessEnvelope
from app.services.fhir_client import QueryExecutor, get_query_executor
from app.services.gateway import LoggingObserver, QueryGateway

JSON_MEDIA_TYPE = "application/json"


def get_gateway(
    executor: QueryExecutor = Depends(get_query_executor),
    settings: Settings = Depends(get_settings),
) -> QueryGateway:
    """Build the per-request gateway (FastAPI dependency)."""
    observers = [LoggingObserver()] if settings.log_remote_exchanges else []
    return QueryGateway(executor, observers=observers)


def to_response(envelope: GatewayResponse) -> Response:
    """Convert an envelope into the HTTP response sent to the caller."""
    if isinstance(envelope, SuccessEnvelope):
        return Response(
            content=envelope.content,
            status_code=envelope.status_code,
            media_type=JSON_MEDIA_TYPE,
        )
    return JSONResponse(status_code=envelope.status_code, content=envelope.to_body())


def read_responses(resource_label: str) -> dict[int | str, dict[str, Any]]:
    """OpenAPI responses for a read-by-id route."""
    return {
        200: {"description": f"{resource_label} found and returned successfully"},
        400: {"model": ErrorBody, "description": "Invalid identifier"},
        404: {"model": ErrorBody, "description": f"{resource_label} not found"},
        500: {"model": ErrorBody, "description": "Internal server error"},
        503: {"model": ErrorBody, "description": "FHIR server connection failed"},
    }


def search_responses(resource_label: str) -> dict[int | str, dict[str, Any]]:
    """OpenAPI responses for a search route."""
    return {
        200: {"description": f"{resource_label} search completed successfully"},
        400: {"model": ErrorBody, "description": "Invalid request parameter"},
        404: {"model": ErrorBody, "description": "Remote server reported not found"},
        500: {"model": ErrorBody, "description": "Internal server error"},
        503: {"model": ErrorBody, "description": "FHIR server connection failed"},
    }
