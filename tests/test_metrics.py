from __future__ import annotations

from fastapi.testclient import TestClient

from medocr.main import app


def test_metrics_endpoint_exposes_http_and_pipeline_series():
    with TestClient(app) as client:
        # Exercise a couple of endpoints first so labeled samples exist
        assert client.get("/health").status_code == 200
        assert client.get("/ready").status_code == 200
        batch = [{"taskId": "m1", "type": "fhir"}, {"taskId": "m2", "type": "nope"}]
        assert client.post("/api/v1/pipeline/batch", json=batch).status_code == 200

        resp = client.get("/metrics")

    assert resp.status_code == 200
    body = resp.text
    assert "http_requests_total" in body
    assert "/health" in body
    assert "/ready" in body
    assert 'pipeline_tasks_total{task_type="fhir",status="success"}' in body
    assert 'pipeline_tasks_total{task_type="unknown",status="failure"}' in body
    assert "pipeline_task_duration_seconds_bucket" in body
    assert "pipeline_batch_duration_seconds_count" in body


def test_unmatched_paths_share_a_single_endpoint_label():
    with TestClient(app) as client:
        assert client.get("/no-such-page-404").status_code == 404
        assert client.get("/wp-admin/also-missing").status_code == 404
        body = client.get("/metrics").text

    assert 'http_requests_total{endpoint="unmatched",method="GET",status="404"}' in body
    assert "/no-such-page-404" not in body
    assert "/wp-admin/also-missing" not in body
