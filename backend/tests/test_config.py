"""
Contacts API - Configuration Tests
====================================

What:  Settings parsing: store URL assembly, log level validation, CORS list.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from app.config import Settings


class TestSqlalchemyUrl:

    def test_database_url_wins(self):
        config = Settings(
            database_url="postgresql+asyncpg://u:p@db:5432/crm",
            db_host="ignored",
        )

        url = config.sqlalchemy_url

        assert url.host == "db"
        assert url.database == "crm"

    def test_built_from_parts(self):
        config = Settings(
            database_url=None,
            db_driver="postgresql+asyncpg",
            db_host="db.internal",
            db_port=6543,
            db_user="app",
            db_password="p@ss/word",
            db_name="contacts",
        )

        url = config.sqlalchemy_url

        assert url.drivername == "postgresql+asyncpg"
        assert url.host == "db.internal"
        assert url.port == 6543
        assert url.username == "app"
        assert url.password == "p@ss/word"
        assert url.database == "contacts"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.setenv("DB_HOST", "envhost")
        monkeypatch.setenv("PORT", "8080")

        config = Settings(_env_file=None)

        assert config.sqlalchemy_url.host == "envhost"
        assert config.port == 8080


class TestOtherSettings:

    def test_log_level_normalized(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level_rejected(self):
        with pytest.raises(PydanticValidationError):
            Settings(log_level="LOUD")

    def test_cors_origins_list(self):
        config = Settings(cors_origins="http://a.test, http://b.test,")

        assert config.cors_origins_list == ["http://a.test", "http://b.test"]

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("PORT", raising=False)

        config = Settings(_env_file=None)

        assert config.port == 3000
        assert config.cors_origins_list == ["*"]
