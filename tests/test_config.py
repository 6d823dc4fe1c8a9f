"""Tests for application configuration."""

from freshplan.config import Settings, current_time


def test_settings_defaults(monkeypatch) -> None:
    monkeypatch.delenv("TIMEZONE", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    settings = Settings(
        supabase_url="https://example.supabase.co", supabase_service_key="key"
    )

    assert settings.timezone == "UTC"
    assert settings.log_level == "INFO"


def test_settings_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("SUPABASE_URL", "https://env.supabase.co")
    monkeypatch.setenv("SUPABASE_SERVICE_KEY", "env-key")
    monkeypatch.setenv("TIMEZONE", "Europe/Berlin")

    settings = Settings()

    assert settings.supabase_url == "https://env.supabase.co"
    assert settings.timezone == "Europe/Berlin"


def test_current_time_uses_timezone() -> None:
    now = current_time("America/New_York")

    assert now.tzinfo is not None
    assert str(now.tzinfo) == "America/New_York"
