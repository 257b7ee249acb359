"""Tests for settings resolution."""

from engagement.config import DEFAULT_TEST_DATABASE_URL, get_settings


def test_test_environment_uses_test_database(monkeypatch):
    """ENV=test switches to the test database URL."""
    monkeypatch.setenv("ENV", "test")
    monkeypatch.delenv("TEST_DATABASE_URL", raising=False)
    settings = get_settings()
    assert settings.is_test
    assert settings.database_url == DEFAULT_TEST_DATABASE_URL


def test_analysis_defaults(monkeypatch):
    """Analysis settings have their defaults."""
    for key in (
        "ANALYSIS_MODEL",
        "ANALYSIS_TEMPERATURE",
        "LLM_TIMEOUT_SECONDS",
        "ANALYSIS_MESSAGE_INTERVAL",
    ):
        monkeypatch.delenv(key, raising=False)
    settings = get_settings()
    assert settings.analysis_model == "gpt-4o"
    assert settings.analysis_temperature == 0.3
    assert settings.llm_timeout_seconds == 12.0
    assert settings.analysis_message_interval == 5


def test_environment_overrides(monkeypatch):
    """Environment variables override the defaults."""
    monkeypatch.setenv("ANALYSIS_MESSAGE_INTERVAL", "3")
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db:5432/x")
    monkeypatch.setenv("ENV", "production")
    settings = get_settings()
    assert settings.analysis_message_interval == 3
    assert settings.is_production
    assert settings.database_url_obj.host == "db"
