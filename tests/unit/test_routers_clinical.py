"""
Tests for the clinical resource endpoints.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.models.query import (
    ById,
    BySubjectReference,
    Collection,
    Failure,
    FailureReason,
    ResourceType,
    Single,
)

BY_PATIENT_PATHS = [
    ("/api/observations/patient/42", ResourceType.OBSERVATION),
    ("/api/documentreferences/patient/42", ResourceType.DOCUMENT_REFERENCE),
    ("/api/diagnosticreports/patient/42", ResourceType.DIAGNOSTIC_REPORT),
]

BY_ID_PATHS = [
    ("/api/patients/123", ResourceType.PATIENT, "patientId"),
    ("/api/observations/123", ResourceType.OBSERVATION, "observationId"),
    ("/api/documentreferences/123", ResourceType.DOCUMENT_REFERENCE, "documentReferenceId"),
    ("/api/diagnosticreports/123", ResourceType.DIAGNOSTIC_REPORT, "diagnosticReportId"),
]


class TestPatients:
    """Tests for /api/patients."""

    def test_get_patient_by_id(self, make_client, patient_executor, sample_patient):
        """Should return the encoded Patient with 200."""
        response = make_client(patient_executor).get("/api/patients/123")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        assert response.json() == sample_patient
        patient_executor.execute.assert_awaited_once_with(ById(ResourceType.PATIENT, "123"))

    def test_patient_not_found(self, make_client, make_executor):
        """Should return 404 with the flat error body."""
        executor = make_executor(Failure(FailureReason.NOT_FOUND, "HTTP 404 Not Found"))

        response = make_client(executor).get("/api/patients/999")

        assert response.status_code == 404
        assert response.json() == {
            "error": "Patient not found",
            "patientId": "999",
            "message": "HTTP 404 Not Found",
        }

    def test_search_by_name(self, make_client, make_executor, sample_patient):
        """Should return a pretty-printed Bundle of matches."""
        executor = make_executor(Collection(resources=(sample_patient,), total_count=1))

        response = make_client(executor).get("/api/patients/search", params={"name": "Doe"})

        assert response.status_code == 200
        assert response.text.startswith('{\n  "resourceType": "Bundle"')
        assert response.json()["entry"][0]["resource"]["id"] == "123"

    def test_search_no_matches(self, make_client, make_executor):
        """Should return an empty Bundle with 200."""
        executor = make_executor(Collection(resources=(), total_count=0))

        response = make_client(executor).get("/api/patients/search?name=Nobody")

        assert response.status_code == 200
        assert response.json()["total"] == 0

    @pytest.mark.parametrize("query", ["?name=", "?name=%20%20", ""])
    def test_search_blank_name(self, make_client, patient_executor, query):
        """Should return 400 without calling the FHIR server."""
        response = make_client(patient_executor).get(f"/api/patients/search{query}")

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Invalid request"
        assert "name" in body
        assert body["message"] == "name parameter is required"
        patient_executor.execute.assert_not_called()

    def test_search_route_not_shadowed(self, make_client, make_executor):
        """Should not treat 'search' as a patient id."""
        executor = make_executor(Collection(resources=(), total_count=0))

        make_client(executor).get("/api/patients/search?name=Doe")

        descriptor = executor.execute.await_args.args[0]
        assert not isinstance(descriptor, ById)

    def test_invalid_patient_id(self, make_client, patient_executor):
        """Should return 400 for a malformed identifier."""
        response = make_client(patient_executor).get("/api/patients/bad%20id")

        assert response.status_code == 400
        assert response.json()["patientId"] == "bad id"
        assert response.json()["message"].startswith("Invalid patientId 'bad id'")
        patient_executor.execute.assert_not_called()


class TestByPatient:
    """Tests for the /patient/{patient_id} list endpoints."""

    @pytest.mark.parametrize("path,resource_type", BY_PATIENT_PATHS)
    def test_partial_page(self, make_client, make_executor, sample_observations, path, resource_type):
        """Should report the server total with only the delivered entries."""
        executor = make_executor(Collection(resources=tuple(sample_observations), total_count=5))

        response = make_client(executor).get(path)

        assert response.status_code == 200
        bundle = response.json()
        assert bundle["total"] == 5
        assert [e["resource"]["id"] for e in bundle["entry"]] == ["obs-1", "obs-2", "obs-3"]
        executor.execute.assert_awaited_once_with(BySubjectReference(resource_type, "42"))

    @pytest.mark.parametrize("path,resource_type", BY_PATIENT_PATHS)
    def test_connection_failed(self, make_client, make_executor, path, resource_type):
        """Should return 503 when the FHIR server cannot be reached."""
        executor = make_executor(Failure(FailureReason.UNREACHABLE, "Connection refused"))

        response = make_client(executor).get(path)

        assert response.status_code == 503
        assert response.json() == {
            "error": "FHIR server connection failed",
            "patientId": "42",
            "message": "Connection refused",
        }

    @pytest.mark.parametrize("path,resource_type", BY_PATIENT_PATHS)
    def test_internal_error(self, make_client, make_executor, path, resource_type):
        """Should return 500 for anything else."""
        executor = make_executor(Failure(FailureReason.INVALID_RESPONSE, "Expected a Bundle"))

        response = make_client(executor).get(path)

        assert response.status_code == 500
        assert response.json()["error"] == "Internal server error"
        assert response.json()["patientId"] == "42"


class TestById:
    """Tests for the read-by-id endpoints."""

    @pytest.mark.parametrize("path,resource_type,context_key", BY_ID_PATHS)
    def test_read(self, make_client, make_executor, path, resource_type, context_key):
        """Should read the resource by id."""
        resource = {"resourceType": resource_type.value, "id": "123"}
        executor = make_executor(Single(resource))

        response = make_client(executor).get(path)

        assert response.status_code == 200
        assert response.json() == resource
        executor.execute.assert_awaited_once_with(ById(resource_type, "123"))

    @pytest.mark.parametrize("path,resource_type,context_key", BY_ID_PATHS)
    def test_not_found(self, make_client, make_executor, path, resource_type, context_key):
        """Should echo the identifier under its context key."""
        executor = make_executor(Failure(FailureReason.NOT_FOUND, "gone"))

        response = make_client(executor).get(path)

        assert response.status_code == 404
        assert response.json() == {
            "error": f"{resource_type.value} not found",
            context_key: "123",
            "message": "gone",
        }

    @pytest.mark.parametrize("path,resource_type,context_key", BY_ID_PATHS)
    def test_timeout(self, make_client, make_executor, path, resource_type, context_key):
        """Should return 503 on timeout."""
        executor = make_executor(Failure(FailureReason.TIMEOUT, "TimeoutError"))

        response = make_client(executor).get(path)

        assert response.status_code == 503


class TestUnhandledErrors:
    """Tests for errors that escape the pipeline."""

    def test_unexpected_exception_returns_json(self, make_client):
        """Should return a JSON 500 instead of a stack trace."""
        executor = MagicMock()
        executor.execute = AsyncMock(side_effect=RuntimeError("executor bug"))

        response = make_client(executor, raise_server_exceptions=False).get("/api/patients/123")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error", "message": "executor bug"}
