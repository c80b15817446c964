from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from medocr.main import app


@pytest.fixture()
def client():
    with TestClient(app) as c:
        yield c


def test_health(client: TestClient):
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "healthy"
    assert body["service"] == "medocr-pipeline"
    assert body["version"] == "0.1.0"
    assert "timestamp" in body
    assert resp.headers.get("X-Request-ID")


def test_request_id_is_echoed(client: TestClient):
    resp = client.get("/health", headers={"X-Request-ID": "abc123"})
    assert resp.headers["X-Request-ID"] == "abc123"


def test_ready_reports_adapters_and_vendors(client: TestClient):
    resp = client.get("/ready")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "healthy"
    assert body["adapters"]["orchestrator"] == "operational"
    assert body["vendors"]["ocr"] == {"status": "not_configured", "ready": False}
    assert body["vendors"]["structuring"]["status"] == "not_configured"


def test_api_listing(client: TestClient):
    resp = client.get("/api")
    assert resp.status_code == 200
    endpoints = resp.json()["endpoints"]
    assert endpoints["ocr"] == "/api/v1/ocr"
    assert endpoints["batch"] == "/api/v1/pipeline/batch"


def test_placeholder_routes(client: TestClient):
    resp = client.get("/api/v1/ocr")
    assert resp.status_code == 200
    assert resp.json() == {"message": "OCR endpoints coming soon", "path": "/api/v1/ocr"}

    resp = client.post("/api/v1/fhir/Patient/123")
    assert resp.status_code == 200
    assert resp.json()["path"] == "/api/v1/fhir/Patient/123"


def test_batch_endpoint(client: TestClient):
    payload = [
        {"taskId": "t1", "type": "ocr", "input": {"imagePath": "missing.png"}},
        {"taskId": "t2", "type": "translation", "input": {"text": "hello", "target": "ar"}},
        {"taskId": "t3", "type": "teleport"},
    ]
    resp = client.post("/api/v1/pipeline/batch", json=payload)
    assert resp.status_code == 200
    results = resp.json()
    assert [r["task_id"] for r in results] == ["t1", "t2", "t3"]
    assert results[0]["success"] is False
    assert results[0]["error"] == "Google Cloud Vision client not initialized"
    assert results[1]["output"] == {"task_type": "translation", "status": "not_implemented"}
    assert "Unknown task type" in results[2]["error"]
    assert all(r["processing_time"] >= 0 for r in results)


def test_batch_endpoint_malformed_type_fails_only_that_task(client: TestClient):
    payload = [
        {"taskId": "t1", "type": "fhir"},
        {"taskId": "t2", "type": None},
        {"taskId": "t3", "type": 7},
        {"taskId": "t4"},
    ]
    resp = client.post("/api/v1/pipeline/batch", json=payload)
    assert resp.status_code == 200
    results = resp.json()
    assert [r["task_id"] for r in results] == ["t1", "t2", "t3", "t4"]
    assert [r["success"] for r in results] == [True, False, False, False]
    assert results[1]["error"] == "Unknown task type: None"
    assert results[2]["error"] == "Unknown task type: 7"
    assert results[3]["error"] == "Unknown task type: None"


def test_batch_endpoint_rejects_non_list_payload(client: TestClient):
    resp = client.post("/api/v1/pipeline/batch", json={"taskId": "t1"})
    assert resp.status_code == 422
    assert resp.json()["detail"]["code"] == "INVALID_TASK_BATCH"


def test_batch_endpoint_accepts_empty_batch(client: TestClient):
    resp = client.post("/api/v1/pipeline/batch", json=[])
    assert resp.status_code == 200
    assert resp.json() == []


def test_batch_endpoint_unavailable_without_lifespan():
    # Without entering the context manager the lifespan never runs
    resp = TestClient(app).post("/api/v1/pipeline/batch", json=[{"taskId": "t", "type": "fhir"}])
    assert resp.status_code == 503
    assert resp.json()["detail"]["code"] == "ORCHESTRATOR_UNAVAILABLE"
