"""
Tests for Application Settings
"""

from sqlalchemy.engine import make_url

from groupfinder.config import Settings


class TestDatabaseSettings:
    def test_default_url_uses_psycopg2_driver(self):
        url = make_url(Settings.model_fields["database_url"].default)

        assert url.get_backend_name() == "postgresql"
        assert url.get_driver_name() == "psycopg2"

    def test_database_url_from_environment(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite:///./groupfinder.db")

        assert Settings().database_url == "sqlite:///./groupfinder.db"
