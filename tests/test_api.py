import pytest
from fastapi.testclient import TestClient

from metrics_monitor.main import create_app


@pytest.fixture
def client(settings, fake_sampler):
    app = create_app(settings, sampler=fake_sampler)
    with TestClient(app) as test_client:
        yield test_client


def test_metrics_endpoint_returns_warm_up_samples(client, settings):
    response = client.get("/api/metrics")
    assert response.status_code == 200

    data = response.json()
    assert isinstance(data, list)
    assert len(data) == settings.warmup_samples

    expected_keys = {"captured_at", "display_time", "cpu_pct", "memory_pct", "disk_pct"}
    assert expected_keys.issubset(data[0].keys())
    for item in data:
        assert 0.0 <= item["cpu_pct"] <= 100.0
    assert data[0]["captured_at"] <= data[-1]["captured_at"]


def test_alerts_endpoint(settings, fake_sampler):
    fake_sampler.readings = [(20.0, 90.0, 50.0)]
    with TestClient(create_app(settings, sampler=fake_sampler)) as client:
        data = client.get("/api/alerts").json()

    assert len(data) == 1
    assert data[0]["id"] == 2
    assert data[0]["severity"] == "warning"
    assert "90.0" in data[0]["description"]


def test_services_endpoint(client):
    response = client.get("/api/services")
    assert response.status_code == 200

    names = {item["name"]: item for item in response.json()}
    assert {"System", "API Server", "Metrics"}.issubset(names)
    assert names["API Server"]["status"] == "healthy"
    assert names["Metrics"]["status"] == "healthy"


def test_system_info_endpoint(client):
    response = client.get("/api/system-info")
    assert response.status_code == 200
    assert response.json() == {
        "cpu": "Test CPU @ 3.00GHz",
        "memory": "16 GB",
        "os": "Linux 6.1.0",
    }


def test_system_info_failure_maps_to_503(client, fake_sampler):
    fake_sampler.fail_system_info = True

    response = client.get("/api/system-info")

    assert response.status_code == 503
    assert "Failed to get system info" in response.json()["detail"]


def test_health_endpoint(client):
    response = client.get("/health")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "OK"
    assert "timestamp" in data


def test_latest_report_is_404_before_any_report(client):
    response = client.get("/api/reports/latest")
    assert response.status_code == 404
    assert response.json()["detail"] == "No reports generated yet"
    assert client.get("/api/reports").json() == []


def test_generate_then_latest_returns_same_report(client, settings, tmp_path):
    generated = client.post("/api/reports/generate")
    assert generated.status_code == 200
    report = generated.json()
    assert report["data_point_count"] == settings.warmup_samples
    assert report["summary"][-1] == "NO ALERTS"

    latest = client.get("/api/reports/latest").json()
    assert latest["id"] == report["id"]

    history = client.get("/api/reports").json()
    assert [r["id"] for r in history] == [report["id"]]

    assert (tmp_path / "reports" / f"report_{report['id']}.json").exists()


def test_cors_allows_dashboard_origin(client):
    response = client.get("/api/metrics", headers={"Origin": "http://localhost:3000"})
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
