"""
Patient endpoints.

- GET /api/patients/search?name= - Search patients by name
- GET /api/patients/{patient_id} - Read a patient
"""

from fastapi import APIRouter, Depends, Path, Query
from fastapi.responses import Response

from app.routers.common import get_gateway, read_responses, search_responses, to_response
from app.services.gateway import OPERATIONS, QueryGateway

router = APIRouter(prefix="/api/patients", tags=["Patients"])


@router.get(
    "/search",
    summary=OPERATIONS["search-patient-by-name"].summary,
    responses=search_responses("Patient"),
)
async def search_patients_by_name(
    name: str | None = Query(None, description="Patient name to search for", examples=["John Doe"]),
    gateway: QueryGateway = Depends(get_gateway),
) -> Response:
    """
    Search Patient resources matching a name.

    Matching follows FHIR string search rules (case-insensitive, prefix
    match on any name part). No matches is a 200 with an empty Bundle.
    """
    return to_response(await gateway.run("search-patient-by-name", name))


@router.get(
    "/{patient_id}",
    summary=OPERATIONS["get-patient-by-id"].summary,
    responses=read_responses("Patient"),
)
async def get_patient_by_id(
    patient_id: str = Path(description="Patient ID", examples=["123"]),
    gateway: QueryGateway = Depends(get_gateway),
) -> Response:
    """Retrieve a Patient resource by its logical ID."""
    return to_response(await gateway.run("get-patient-by-id", patient_id))
