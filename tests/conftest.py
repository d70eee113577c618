"""
Shared pytest fixtures for FHIR query gateway tests.
"""

import os
from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

# Set test environment variables before importing app modules
os.environ["FHIR_GATEWAY_FHIR_SERVER_BASE_URL"] = "http://fhir.test/fhir"
os.environ.setdefault("FHIR_GATEWAY_DEBUG", "true")
os.environ.setdefault("FHIR_GATEWAY_LOG_JSON", "false")

from app.models.query import Collection, ExecutionResult, Single  # noqa: E402


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset cached settings and executor between tests."""
    from app.config.settings import reset_settings
    from app.services.fhir_client import reset_query_executor

    reset_settings()
    reset_query_executor()
    yield
    reset_query_executor()
    reset_settings()


@pytest.fixture
def sample_patient() -> dict[str, Any]:
    """Sample FHIR Patient resource."""
    return {
        "resourceType": "Patient",
        "id": "123",
        "meta": {"versionId": "1", "lastUpdated": "2024-01-15T10:30:00Z"},
        "identifier": [{"system": "http://example.org/mrn", "value": "MRN-12345"}],
        "active": True,
        "name": [{"use": "official", "family": "Doe", "given": ["John"]}],
        "gender": "male",
        "birthDate": "1970-05-15",
    }


@pytest.fixture
def sample_observations() -> list[dict[str, Any]]:
    """Three Observations for patient 42, in server order."""
    return [
        {
            "resourceType": "Observation",
            "id": f"obs-{n}",
            "status": "final",
            "code": {"coding": [{"system": "http://loinc.org", "code": "8867-4"}]},
            "subject": {"reference": "Patient/42"},
            "valueQuantity": {"value": 70 + n, "unit": "beats/minute"},
        }
        for n in range(1, 4)
    ]


@pytest.fixture
def sample_search_bundle(sample_observations) -> dict[str, Any]:
    """Searchset Bundle as returned by the server: first page of five matches."""
    return {
        "resourceType": "Bundle",
        "id": "page-1",
        "type": "searchset",
        "total": 5,
        "link": [
            {"relation": "self", "url": "http://fhir.test/fhir/Observation?subject=Patient/42"},
            {"relation": "next", "url": "http://fhir.test/fhir?_getpages=abc&_getpagesoffset=3"},
        ],
        "entry": [
            {
                "fullUrl": f"http://fhir.test/fhir/Observation/{obs['id']}",
                "resource": obs,
                "search": {"mode": "match"},
            }
            for obs in sample_observations
        ],
    }


@pytest.fixture
def make_executor() -> Callable[[ExecutionResult], MagicMock]:
    """Build a mock query executor that returns a fixed result."""

    def _make(result: ExecutionResult) -> MagicMock:
        executor = MagicMock()
        executor.execute = AsyncMock(return_value=result)
        return executor

    return _make


@pytest.fixture
def patient_executor(make_executor, sample_patient) -> MagicMock:
    """Executor returning a single Patient."""
    return make_executor(Single(sample_patient))


@pytest.fixture
def observation_executor(make_executor, sample_observations) -> MagicMock:
    """Executor returning a partial page of Observations (total 5, 3 delivered)."""
    return make_executor(Collection(resources=tuple(sample_observations), total_count=5))


@pytest.fixture
def make_client() -> Callable[..., TestClient]:
    """Build a TestClient for the full app with the executor replaced."""
    from app.main import create_app
    from app.services.fhir_client import get_query_executor

    def _make(executor: MagicMock, raise_server_exceptions: bool = True) -> TestClient:
        app = create_app()
        app.dependency_overrides[get_query_executor] = lambda: executor
        return TestClient(app, raise_server_exceptions=raise_server_exceptions)

    return _make
