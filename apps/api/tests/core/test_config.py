"""
Tests for environment-driven settings.
"""

from classroom.core.config import Settings


class TestSettings:
    def test_postgres_urls_use_asyncpg(self):
        settings = Settings(database_url="postgresql://app:secret@db:5432/classroom")
        assert settings.database_url == "postgresql+asyncpg://app:secret@db:5432/classroom"

        settings = Settings(database_url="postgres://app:secret@db:5432/classroom")
        assert settings.database_url == "postgresql+asyncpg://app:secret@db:5432/classroom"

    def test_other_urls_unchanged(self):
        settings = Settings(database_url="sqlite+aiosqlite:///classroom.db")
        assert settings.database_url == "sqlite+aiosqlite:///classroom.db"

    def test_cors_origins_list(self):
        settings = Settings(cors_origins="http://localhost:5173, https://classroom.example.com,")
        assert settings.cors_origins_list == [
            "http://localhost:5173",
            "https://classroom.example.com",
        ]

    def test_environment_flags(self):
        settings = Settings(python_env="Production")
        assert settings.is_production
        assert not settings.is_test
        assert not settings.is_development
