"""
API routers for the FHIR query gateway.
"""

from app.routers.diagnostic_reports import router as diagnostic_reports_router
from app.routers.document_references import router as document_references_router
from app.routers.health import router as health_router
from app.routers.observations import router as observations_router
from app.routers.patients import router as patients_router

__all__ = [
    "health_router",
    "patients_router",
    "observations_router",
    "document_references_router",
    "diagnostic_reports_router",
]
