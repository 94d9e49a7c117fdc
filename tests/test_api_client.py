"""
Тесты EnrichmentClient на подставном транспорте httpx
"""
import json
from concurrent.futures import ThreadPoolExecutor

import httpx
import pytest

from dashboard.api_client import (
    EnrichmentAPIError,
    EnrichmentClient,
    InvalidResponseError,
    NotFoundError,
    RateLimitError,
    ServerError,
    ServerUnavailableError,
    close_http_client,
)
from dashboard.api_client.http_pool import get_http_client
from enrich_core.validation import build_submission

BASE_URL = "http://enrichment.test"


def _client(handler, **kwargs):
    return EnrichmentClient(
        base_url=BASE_URL, transport=httpx.MockTransport(handler), **kwargs
    )


def _job_payload(**overrides):
    job = {
        "id": "job-123",
        "name": "Spring campaign",
        "email": "ops@example.com",
        "status": "running",
        "total_profiles": 100,
        "processed_profiles": 30,
        "selected_nodes": ["node-1", "node-2"],
        "created_at": "2024-03-01T10:00:00Z",
        "nodeProgress": [{"nodeId": "node-1", "completed": 15, "total": 50, "progress": 30}],
    }
    job.update(overrides)
    return job


def test_start_enrichment_sends_multipart(csv_file):
    """Тест: форма уходит multipart с csvFile и numberOfNodes строкой"""
    seen = {}

    def handler(request: httpx.Request):
        request.read()
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = request.content
        seen["content_type"] = request.headers["content-type"]
        return httpx.Response(
            200,
            json={
                "success": True,
                "data": {
                    "jobId": "job-123",
                    "message": "Enrichment started",
                    "totalProfiles": 2,
                    "estimatedCompletionMinutes": 1,
                    "requestsPerMinute": 150,
                    "batchDistribution": [
                        {"nodeId": "node-1", "profileCount": 1, "estimatedMinutes": 0.5}
                    ],
                    "status": "running",
                },
            },
        )

    submission = build_submission(csv_file, "Campaign", "ops@example.com", 3)
    result = _client(handler).start_enrichment(submission)

    assert result.job_id == "job-123"
    assert result.total_profiles == 2
    assert result.batch_distribution[0].node_id == "node-1"
    assert seen["method"] == "POST"
    assert seen["path"] == "/api/enrichment/start"
    assert seen["content_type"].startswith("multipart/form-data")
    body = seen["body"]
    assert b'name="csvFile"; filename="profiles.csv"' in body
    assert b'name="numberOfNodes"\r\n\r\n3' in body
    assert b'name="email"\r\n\r\nops@example.com' in body
    assert b"natgeo" in body


def test_start_enrichment_without_job_id(csv_file):
    def handler(request):
        return httpx.Response(200, json={"success": True, "data": {}})

    submission = build_submission(csv_file, "Campaign", "ops@example.com", 3)
    with pytest.raises(InvalidResponseError, match="Invalid response from server"):
        _client(handler).start_enrichment(submission)


def test_start_enrichment_server_error_text(csv_file):
    """Тест: текст ошибки бэкенда из тела ответа"""

    def handler(request):
        return httpx.Response(500, json={"error": "CSV has no username column"})

    submission = build_submission(csv_file, "Campaign", "ops@example.com", 3)
    with pytest.raises(ServerError) as exc:
        _client(handler).start_enrichment(submission)
    assert str(exc.value) == "CSV has no username column"
    assert exc.value.status_code == 500


def test_start_enrichment_network_error(csv_file):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    submission = build_submission(csv_file, "Campaign", "ops@example.com", 3)
    with pytest.raises(ServerUnavailableError):
        _client(handler).start_enrichment(submission)


def test_get_job_status():
    def handler(request):
        assert request.url.path == "/api/enrichment/job-123/status"
        return httpx.Response(200, json={"success": True, "data": _job_payload()})

    job = _client(handler).get_job_status("job-123")
    assert job.is_running
    assert job.processed_profiles == 30
    assert job.node_count == 2
    assert job.node_progress[0].node_id == "node-1"


def test_get_job_status_success_false():
    def handler(request):
        return httpx.Response(200, json={"success": False, "error": "Job not ready"})

    with pytest.raises(EnrichmentAPIError, match="Job not ready"):
        _client(handler).get_job_status("job-123")


def test_get_job_status_success_false_without_text():
    def handler(request):
        return httpx.Response(200, json={"success": False})

    with pytest.raises(EnrichmentAPIError, match="Failed to fetch job status"):
        _client(handler).get_job_status("job-123")


@pytest.mark.parametrize(
    "code,exc_class",
    [(404, NotFoundError), (429, RateLimitError), (503, ServerError)],
)
def test_status_codes_map_to_exceptions(code, exc_class):
    def handler(request):
        return httpx.Response(code, text="oops")

    with pytest.raises(exc_class) as exc:
        _client(handler).get_job_status("job-123")
    assert str(exc.value) == f"Request failed with status code {code}"


def test_malformed_job_payload():
    def handler(request):
        return httpx.Response(200, json={"success": True, "data": {"name": "no id"}})

    with pytest.raises(InvalidResponseError):
        _client(handler).get_job_status("job-123")


def test_non_json_body():
    def handler(request):
        return httpx.Response(200, text="<html>gateway</html>")

    with pytest.raises(InvalidResponseError):
        _client(handler).get_job_status("job-123")


def test_network_error_on_status():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ServerUnavailableError) as exc:
        _client(handler).get_job_status("job-123")
    assert "Network Error" in str(exc.value)


def test_retry_on_5xx(monkeypatch):
    """Тест: при max_retries > 1 ретраится 5xx"""
    monkeypatch.setattr("dashboard.api_client.client.time.sleep", lambda s: None)
    responses = [
        httpx.Response(502, json={"error": "bad gateway"}),
        httpx.Response(200, json={"success": True, "data": _job_payload()}),
    ]
    calls = []

    def handler(request):
        calls.append(request)
        return responses.pop(0)

    job = _client(handler, max_retries=2).get_job_status("job-123")
    assert job.id == "job-123"
    assert len(calls) == 2


def test_no_retry_on_4xx(monkeypatch):
    monkeypatch.setattr("dashboard.api_client.client.time.sleep", lambda s: None)
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(404, json={"error": "Job not found"})

    with pytest.raises(NotFoundError, match="Job not found"):
        _client(handler, max_retries=3).get_job_status("job-123")
    assert len(calls) == 1


def test_list_jobs():
    def handler(request):
        assert request.url.path == "/api/enrichment/jobs"
        return httpx.Response(
            200,
            json={
                "success": True,
                "jobs": [_job_payload(), _job_payload(id="job-456", status="completed")],
            },
        )

    jobs = _client(handler).list_jobs()
    assert [j.id for j in jobs] == ["job-123", "job-456"]
    assert jobs[1].is_completed


def test_list_jobs_empty():
    def handler(request):
        return httpx.Response(200, json={"success": True, "jobs": []})

    assert _client(handler).list_jobs() == []


def test_download_url():
    def handler(request):
        assert request.url.path == "/api/enrichment/job-123/download"
        return httpx.Response(
            200, json={"success": True, "csvUrl": "https://cdn.example.com/job-123.csv"}
        )

    assert _client(handler).get_download_url("job-123") == "https://cdn.example.com/job-123.csv"


def test_download_url_missing():
    def handler(request):
        return httpx.Response(200, json={"success": True})

    assert _client(handler).get_download_url("job-123") is None


def test_bulk_download_url():
    def handler(request):
        assert request.url.path == "/api/enrichment/download-all"
        return httpx.Response(200, content=json.dumps({"downloadUrl": "https://cdn/all.csv"}))

    assert _client(handler).get_bulk_download_url() == "https://cdn/all.csv"


def test_bulk_download_url_missing():
    def handler(request):
        return httpx.Response(200, json={})

    with pytest.raises(InvalidResponseError, match="Download URL not available"):
        _client(handler).get_bulk_download_url()


def test_pool_shared_between_threads():
    """Тест: одновременные первые обращения получают один и тот же клиент"""
    close_http_client()
    transport = httpx.MockTransport(lambda request: httpx.Response(200))
    with ThreadPoolExecutor(max_workers=8) as pool:
        clients = list(pool.map(lambda _: get_http_client(BASE_URL, 5.0, transport), range(32)))
    assert len({id(c) for c in clients}) == 1

    close_http_client()
    assert clients[0].is_closed
