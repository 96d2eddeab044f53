"""
Test suite for the translation job procedures.

Tests cover:
- Job creation
- Job retrieval (found / not found)
- Partial updates from the processing pipeline
- Error responses
- Full upload-to-completion flows
"""

from datetime import datetime

import pytest

from app.core.exceptions import JobStoreError
from app.crud import translation_job as job_crud


def get_job(client, job_id):
    response = client.get("/rpc/getTranslationJob", params={"id": job_id})
    assert response.status_code == 200
    return response.json()


def update_job(client, job_id, **fields):
    response = client.post("/rpc/updateTranslationJob", json={"id": job_id, **fields})
    assert response.status_code == 200
    return response.json()


class TestJobCreation:
    """Tests for createTranslationJob"""

    def test_create_job_success(self, client, sample_job_data):
        response = client.post("/rpc/createTranslationJob", json=sample_job_data)

        assert response.status_code == 200
        data = response.json()
        assert data["id"] > 0
        assert data["original_file_path"] == sample_job_data["original_file_path"]
        assert data["target_language"] == "fr"
        assert data["status"] == "pending"
        assert data["created_at"] == data["updated_at"]

    @pytest.mark.parametrize("field", ["original_filename", "original_file_path"])
    def test_create_job_empty_field(self, client, sample_job_data, field):
        response = client.post("/rpc/createTranslationJob", json={**sample_job_data, field: ""})

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"
        assert client.get("/rpc/getTranslationJobs").json() == []

    @pytest.mark.parametrize("value", ["   ", "clip\u0000.mov"])
    def test_create_job_blank_or_control_characters(self, client, sample_job_data, value):
        response = client.post("/rpc/createTranslationJob", json={**sample_job_data, "original_filename": value})

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"
        assert client.get("/rpc/getTranslationJobs").json() == []

    def test_create_job_missing_language(self, client, sample_job_data):
        sample_job_data.pop("target_language")
        response = client.post("/rpc/createTranslationJob", json=sample_job_data)

        assert response.status_code == 422

    def test_create_job_database_error(self, client, sample_job_data, monkeypatch):
        def failing_create(db, job_data):
            raise JobStoreError("Failed to create translation job")

        monkeypatch.setattr(job_crud, "create", failing_create)

        response = client.post("/rpc/createTranslationJob", json=sample_job_data)

        assert response.status_code == 500
        assert response.json() == {"detail": "Failed to create translation job", "error": "database_error"}


class TestJobRetrieval:
    """Tests for getTranslationJob and getTranslationJobs"""

    def test_get_job_by_id(self, client, sample_job_data):
        job_id = client.post("/rpc/createTranslationJob", json=sample_job_data).json()["id"]

        data = get_job(client, job_id)

        assert data["id"] == job_id
        assert data["original_filename"] == "interview.mov"

    def test_get_nonexistent_job_returns_null(self, client):
        assert get_job(client, 99999) is None

    def test_get_out_of_range_id_returns_null(self, client, sample_job_data):
        client.post("/rpc/createTranslationJob", json=sample_job_data)

        assert get_job(client, 2 ** 70) is None
        assert get_job(client, -(2 ** 70)) is None

    def test_get_job_requires_integer_id(self, client):
        response = client.get("/rpc/getTranslationJob", params={"id": "abc"})

        assert response.status_code == 422

    def test_list_jobs_empty(self, client):
        response = client.get("/rpc/getTranslationJobs")

        assert response.status_code == 200
        assert response.json() == []

    def test_list_jobs_newest_first(self, client, sample_job_data):
        ids = []
        for i in range(3):
            job_data = {**sample_job_data, "original_filename": f"video{i}.mov"}
            ids.append(client.post("/rpc/createTranslationJob", json=job_data).json()["id"])

        data = client.get("/rpc/getTranslationJobs").json()

        assert [job["id"] for job in data] == list(reversed(ids))
        created = [datetime.fromisoformat(job["created_at"]) for job in data]
        assert created == sorted(created, reverse=True)


class TestJobUpdate:
    """Tests for updateTranslationJob"""

    def test_update_status(self, client, sample_job_data):
        job = client.post("/rpc/createTranslationJob", json=sample_job_data).json()

        data = update_job(client, job["id"], status="processing", detected_language="en")

        assert data["status"] == "processing"
        assert data["detected_language"] == "en"
        assert data["original_file_path"] == job["original_file_path"]

    def test_update_nonexistent_job_returns_null(self, client):
        assert update_job(client, 12345, status="completed") is None
        assert client.get("/rpc/getTranslationJobs").json() == []

    def test_update_out_of_range_id_returns_null(self, client, sample_job_data):
        job_id = client.post("/rpc/createTranslationJob", json=sample_job_data).json()["id"]

        assert update_job(client, 2 ** 70, status="completed") is None
        assert get_job(client, job_id)["status"] == "pending"

    def test_update_clears_with_explicit_null(self, client, sample_job_data):
        job_id = client.post("/rpc/createTranslationJob", json=sample_job_data).json()["id"]
        update_job(client, job_id, error_message="timeout", transcript="Bonjour")

        update_job(client, job_id, error_message=None)

        data = get_job(client, job_id)
        assert data["error_message"] is None
        assert data["transcript"] == "Bonjour"

    def test_update_rejects_null_status(self, client, sample_job_data):
        job_id = client.post("/rpc/createTranslationJob", json=sample_job_data).json()["id"]

        response = client.post("/rpc/updateTranslationJob", json={"id": job_id, "status": None})

        assert response.status_code == 422
        assert get_job(client, job_id)["status"] == "pending"

    def test_update_rejects_unknown_status(self, client, sample_job_data):
        job_id = client.post("/rpc/createTranslationJob", json=sample_job_data).json()["id"]

        response = client.post("/rpc/updateTranslationJob", json={"id": job_id, "status": "archived"})

        assert response.status_code == 422

    def test_update_rejects_immutable_fields(self, client, sample_job_data):
        job_id = client.post("/rpc/createTranslationJob", json=sample_job_data).json()["id"]

        response = client.post(
            "/rpc/updateTranslationJob", json={"id": job_id, "target_language": "de"}
        )

        assert response.status_code == 422
        assert get_job(client, job_id)["target_language"] == "fr"

    def test_update_requires_id(self, client):
        response = client.post("/rpc/updateTranslationJob", json={"status": "processing"})

        assert response.status_code == 422


class TestTranslationFlow:
    """End-to-end flows driven the way the pipeline and display client use the API"""

    def test_upload_process_complete(self, client, upload_payload):
        job = client.post("/rpc/uploadVideo", json=upload_payload).json()
        assert job["status"] == "pending"
        assert job["detected_language"] is None

        update_job(client, job["id"], status="processing")
        processing = get_job(client, job["id"])
        assert processing["status"] == "processing"
        assert datetime.fromisoformat(processing["updated_at"]) > datetime.fromisoformat(job["updated_at"])

        update_job(
            client,
            job["id"],
            status="completed",
            translated_file_path="/out/clip_es.mp4",
            transcript="Hi",
            translated_transcript="Hola"
        )
        completed = get_job(client, job["id"])
        assert completed["status"] == "completed"
        assert completed["translated_file_path"] == "/out/clip_es.mp4"
        assert completed["transcript"] == "Hi"
        assert completed["translated_transcript"] == "Hola"
        assert completed["created_at"] == job["created_at"]

    def test_pending_job_fails(self, client, upload_payload):
        job = client.post("/rpc/uploadVideo", json=upload_payload).json()

        data = update_job(client, job["id"], status="failed", error_message="unsupported codec")

        assert data["status"] == "failed"
        assert data["error_message"] == "unsupported codec"
        for field in ("detected_language", "translated_file_path", "transcript", "translated_transcript"):
            assert data[field] is None
