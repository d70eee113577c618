"""
DocumentReference endpoints.
"""

from fastapi import APIRouter, Depends, Path
from fastapi.responses import Response

from app.routers.common import get_gateway, read_responses, search_responses, to_response
from app.services.gateway import OPERATIONS, QueryGateway

router = APIRouter(prefix="/api/documentreferences", tags=["DocumentReferences"])


@router.get(
    "/patient/{patient_id}",
    summary=OPERATIONS["list-documentreferences-by-patient"].summary,
    responses=search_responses("DocumentReference"),
)
async def get_document_references_by_patient(
    patient_id: str = Path(description="Patient ID", examples=["123"]),
    gateway: QueryGateway = Depends(get_gateway),
) -> Response:
    """Retrieve all DocumentReference resources whose subject is the patient."""
    return to_response(await gateway.run("list-documentreferences-by-patient", patient_id))


@router.get(
    "/{document_reference_id}",
    summary=OPERATIONS["get-documentreference-by-id"].summary,
    responses=read_responses("DocumentReference"),
)
async def get_document_reference_by_id(
    document_reference_id: str = Path(description="DocumentReference ID", examples=["doc-1"]),
    gateway: QueryGateway = Depends(get_gateway),
) -> Response:
    return to_response(await gateway.run("get-documentreference-by-id", document_reference_id))
