"""
Observation endpoints.
"""

from fastapi import APIRouter, Depends, Path
from fastapi.responses import Response

from app.routers.common import get_gateway, read_responses, search_responses, to_response
from app.services.gateway import OPERATIONS, QueryGateway

router = APIRouter(prefix="/api/observations", tags=["Observations"])


@router.get(
    "/patient/{patient_id}",
    summary=OPERATIONS["list-observations-by-patient"].summary,
    responses=search_responses("Observation"),
)
async def get_observations_by_patient(
    patient_id: str = Path(description="Patient ID", examples=["123"]),
    gateway: QueryGateway = Depends(get_gateway),
) -> Response:
    """Retrieve all Observation resources whose subject is the patient."""
    return to_response(await gateway.run("list-observations-by-patient", patient_id))


@router.get(
    "/{observation_id}",
    summary=OPERATIONS["get-observation-by-id"].summary,
    responses=read_responses("Observation"),
)
async def get_observation_by_id(
    observation_id: str = Path(description="Observation ID", examples=["obs-1"]),
    gateway: QueryGateway = Depends(get_gateway),
) -> Response:
    return to_response(await gateway.run("get-observation-by-id", observation_id))
