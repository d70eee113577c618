"""
DiagnosticReport endpoints.
"""

from fastapi import APIRouter, Depends, Path
from fastapi.responses import Response

from app.routers.common import get_gateway, read_responses, search_responses, to_response
from app.services.gateway import OPERATIONS, QueryGateway

router = APIRouter(prefix="/api/diagnosticreports", tags=["DiagnosticReports"])


@router.get(
    "/patient/{patient_id}",
    summary=OPERATIONS["list-diagnosticreports-by-patient"].summary,
    responses=search_responses("DiagnosticReport"),
)
async def get_diagnostic_reports_by_patient(
    patient_id: str = Path(description="Patient ID", examples=["123"]),
    gateway: QueryGateway = Depends(get_gateway),
) -> Response:
    """Retrieve all DiagnosticReport resources whose subject is the patient."""
    return to_response(await gateway.run("list-diagnosticreports-by-patient", patient_id))


@router.get(
    "/{diagnostic_report_id}",
    summary=OPERATIONS["get-diagnosticreport-by-id"].summary,
    responses=read_responses("DiagnosticReport"),
)
async def get_diagnostic_report_by_id(
    diagnostic_report_id: str = Path(description="DiagnosticReport ID", examples=["report-1"]),
    gateway: QueryGateway = Depends(get_gateway),
) -> Response:
    return to_response(await gateway.run("get-diagnosticreport-by-id", diagnostic_report_id))
