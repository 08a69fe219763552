"""Settings — URL normalization and environment overrides."""

from taskhive.config import Settings


def test_postgres_url_rewritten_for_asyncpg():
    s = Settings(database_url="postgresql://u:p@db:5432/app")
    assert s.database_url == "postgresql+asyncpg://u:p@db:5432/app"


def test_sqlite_url_untouched():
    s = Settings(database_url="sqlite+aiosqlite:///:memory:")
    assert s.database_url == "sqlite+aiosqlite:///:memory:"


def test_identity_settings_from_env(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://project.example.co")
    monkeypatch.setenv("IDENTITY_MAX_RETRIES", "5")
    s = Settings()
    assert s.supabase_url == "https://project.example.co"
    assert s.identity_max_retries == 5
