"""Configuration modules for the FHIR query gateway."""

from app.config.logging import configure_logging, get_logger, get_request_id, set_request_id
from app.config.settings import Settings, get_settings, reset_settings

__all__ = [
    "Settings",
    "get_settings",
    "reset_settings",
    "configure_logging",
    "get_logger",
    "get_request_id",
    "set_request_id",
]
