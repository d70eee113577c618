"""
Middleware for the FHIR query gateway.
"""

from app.middleware.request_context import REQUEST_ID_HEADER, RequestContextMiddleware

__all__ = [
    "RequestContextMiddleware",
    "REQUEST_ID_HEADER",
]
