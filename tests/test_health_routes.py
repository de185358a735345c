"""Tests for health and metrics endpoints."""

from fastapi.testclient import TestClient

from tests.fakes import FailingRedis, mention_payload


def test_basic_health(make_app):
    response = TestClient(make_app()).get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["service"] == "mention-service"


def test_detailed_health_reports_queue_depth(make_app, fake_redis):
    client = TestClient(make_app())
    client.post("/api/meta-webhook", json=mention_payload(("M1", "C1")))

    body = client.get("/health/detailed").json()

    assert body["status"] == "healthy"
    assert body["queue"] == {"key": "instagram:mentions", "length": 1}
    assert body["graph_api"]["credential_configured"] is True


def test_detailed_health_degrades_when_redis_is_down(make_app):
    client = TestClient(make_app(redis_client=FailingRedis()))

    body = client.get("/health/detailed").json()

    assert body["status"] == "degraded"
    assert body["redis"]["status"] == "unhealthy"
    assert "length" not in body["queue"]


def test_metrics_endpoint_exposes_pipeline_counters(make_app):
    client = TestClient(make_app())
    client.post("/api/meta-webhook", json=mention_payload(("M1", "C1")))

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "mention_service_jobs_enqueued_total 1.0" in response.text
    assert 'mention_service_webhook_requests_total{method="POST",outcome="acknowledged"} 1.0' in response.text


def test_metrics_endpoint_can_be_disabled(make_app):
    response = TestClient(make_app(METRICS_ENABLED=False)).get("/metrics")

    assert response.status_code == 404


def test_responses_carry_request_id(make_app):
    response = TestClient(make_app()).get("/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"
    assert "X-Process-Time" in response.headers


def test_lifespan_closes_clients(make_app, fake_redis):
    with TestClient(make_app()) as client:
        assert client.get("/health").status_code == 200

    assert fake_redis.closed is True
