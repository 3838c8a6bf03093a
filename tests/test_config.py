import pytest
from pydantic import ValidationError

from metrics_monitor.config import Settings, get_settings


def test_settings_defaults():
    settings = Settings()
    assert settings.buffer_capacity == 20
    assert settings.report_history_limit == 24
    assert settings.sample_interval_seconds < settings.service_check_interval_seconds
    assert settings.service_check_interval_seconds < settings.report_interval_seconds
    assert settings.cors_origins == ["http://localhost:3000"]


def test_settings_from_env_parses_numbers(monkeypatch):
    monkeypatch.setenv("METRICS_BUFFER_CAPACITY", "30")
    monkeypatch.setenv("SAMPLE_INTERVAL_SECONDS", "2.5")
    monkeypatch.setenv("DISK_CACHE_TTL_SECONDS", "10")
    monkeypatch.setenv("DISK_PATH", "/data")

    settings = Settings.from_env()
    assert settings.buffer_capacity == 30
    assert settings.sample_interval_seconds == 2.5
    assert settings.disk_cache_ttl_seconds == 10.0
    assert settings.disk_path == "/data"


def test_cors_origins_from_env(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "http://a.local:3000, http://b.local,")
    settings = Settings.from_env()
    assert settings.cors_origins == ["http://a.local:3000", "http://b.local"]


def test_non_positive_capacity_is_rejected(monkeypatch):
    monkeypatch.setenv("METRICS_BUFFER_CAPACITY", "0")
    with pytest.raises(ValidationError):
        Settings.from_env()


def test_get_settings_is_cached(monkeypatch):
    monkeypatch.setenv("REPORTS_DIR", "/tmp/example-reports")
    get_settings.cache_clear()
    try:
        s1 = get_settings()
        s2 = get_settings()
        assert s1 is s2
        assert s1.reports_dir == "/tmp/example-reports"
    finally:
        get_settings.cache_clear()
