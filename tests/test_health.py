from metrics_monitor.models.services import ServiceState
from metrics_monitor.services import service_health
from metrics_monitor.services.host_monitor import make_sample
from metrics_monitor.services.metrics_buffer import MetricsBuffer
from metrics_monitor.services.service_health import ServiceHealthTracker


def _by_name(statuses):
    return {status.name: status for status in statuses}


def test_empty_buffer_reports_starting(monkeypatch):
    monkeypatch.setattr(service_health, "_count_active_interfaces", lambda: 2)

    statuses = _by_name(ServiceHealthTracker().check(MetricsBuffer(capacity=20)))

    assert statuses["System"].status is ServiceState.STARTING
    assert statuses["Metrics"].status is ServiceState.STARTING
    assert statuses["Metrics"].details == "0/20 samples buffered"
    assert statuses["API Server"].status is ServiceState.HEALTHY


def test_filled_buffer_reports_healthy(monkeypatch):
    monkeypatch.setattr(service_health, "_count_processes", lambda: 42)
    monkeypatch.setattr(service_health, "_count_active_interfaces", lambda: 3)
    buffer = MetricsBuffer(capacity=20)
    buffer.append(make_sample(10.0, 20.0, 30.0))

    statuses = _by_name(ServiceHealthTracker().check(buffer))

    assert statuses["System"].status is ServiceState.HEALTHY
    assert statuses["System"].details == "42 processes running"
    assert statuses["Metrics"].status is ServiceState.HEALTHY
    assert statuses["Metrics"].details == "1/20 samples buffered"
    assert statuses["Network"].details == "3 interfaces active"
    assert statuses["Network"].status is ServiceState.HEALTHY


def test_psutil_failures_never_raise(monkeypatch):
    """
    A failing process count keeps System healthy, a failing interface read
    marks Network unhealthy; neither propagates.
    """

    def broken():
        raise RuntimeError("psutil exploded")

    monkeypatch.setattr(service_health, "_count_processes", broken)
    monkeypatch.setattr(service_health, "_count_active_interfaces", broken)
    buffer = MetricsBuffer(capacity=5)
    buffer.append(make_sample(10.0, 20.0, 30.0))

    statuses = _by_name(ServiceHealthTracker().check(buffer))

    assert statuses["System"].status is ServiceState.HEALTHY
    assert statuses["Network"].status is ServiceState.UNHEALTHY
    assert "psutil exploded" in statuses["Network"].details


def test_no_active_interface_is_unhealthy(monkeypatch):
    monkeypatch.setattr(service_health, "_count_active_interfaces", lambda: 0)

    statuses = _by_name(ServiceHealthTracker().check(MetricsBuffer(capacity=5)))

    assert statuses["Network"].status is ServiceState.UNHEALTHY
