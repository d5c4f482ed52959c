import pytest


class TestConfig:
    @pytest.fixture(autouse=True)
    def isolated_env(self, monkeypatch, tmp_path):
        for name in ("DATABASE_URL", "REPOSITORY_BACKEND", "ENVIRONMENT", "LOG_LEVEL",
                     "CORS_ORIGINS", "DEFAULT_PAGE_SIZE", "MAX_PAGE_SIZE", "RATE_LIMIT"):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.chdir(tmp_path)  # Use temp dir to avoid reading .env

    def test_config_uses_default_values(self):
        from src.infra.config import Settings
        settings = Settings()

        assert settings.database_url == "sqlite://data/users.db"
        assert settings.repository_backend == "tortoise"
        assert settings.environment == "development"
        assert settings.cors_origins == ["http://localhost:5173"]
        assert settings.default_page_size == 10
        assert settings.max_page_size == 20
        assert settings.rate_limit == "100/minute"
        assert settings.rate_limit_enabled is True

    def test_config_loads_from_env(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite://:memory:")
        monkeypatch.setenv("REPOSITORY_BACKEND", "MEMORY")
        monkeypatch.setenv("ENVIRONMENT", "test")
        monkeypatch.setenv("CORS_ORIGINS", '["http://localhost:3000"]')
        monkeypatch.setenv("MAX_PAGE_SIZE", "50")

        from src.infra.config import Settings
        settings = Settings()

        assert settings.database_url == "sqlite://:memory:"
        assert settings.repository_backend == "memory"
        assert settings.environment == "test"
        assert settings.cors_origins == ["http://localhost:3000"]
        assert settings.max_page_size == 50

    def test_config_loads_from_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("""
REPOSITORY_BACKEND=memory
ENVIRONMENT=production
""")

        from src.infra.config import Settings
        settings = Settings()

        assert settings.repository_backend == "memory"
        assert settings.environment == "production"

    def test_config_rejects_unknown_backend(self, monkeypatch):
        monkeypatch.setenv("REPOSITORY_BACKEND", "redis")

        from src.infra.config import Settings
        from pydantic import ValidationError
        with pytest.raises(ValidationError):
            Settings()

    def test_config_rejects_default_page_size_above_max(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_PAGE_SIZE", "30")

        from src.infra.config import Settings
        from pydantic import ValidationError
        with pytest.raises(ValidationError):
            Settings()

    def test_effective_log_level(self, monkeypatch):
        from src.infra.config import Settings

        assert Settings().effective_log_level == "DEBUG"
        assert Settings(environment="production").effective_log_level == "INFO"
        assert Settings(log_level="warning").effective_log_level == "WARNING"

    def test_get_settings_is_cached(self):
        from src.infra.config import get_settings
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()
