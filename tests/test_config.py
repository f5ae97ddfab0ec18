"""
Tests for Settings.from_env and logging setup.
"""

import logging

import pytest

from mintpool.config import DEFAULT_DATABASE_URL, Settings
from mintpool.errors import ValidationError
from mintpool.log import configure_logging


class TestSettings:
    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings.database_url == DEFAULT_DATABASE_URL
        assert settings.app_name == "mintpool"
        assert settings.port == 8000
        assert settings.log_level == "INFO"

    def test_explicit_values(self):
        settings = Settings.from_env(
            {
                "MINTPOOL_DATABASE_URL": "sqlite:///:memory:",
                "MINTPOOL_APP_NAME": "pool-a",
                "MINTPOOL_HOST": "127.0.0.1",
                "MINTPOOL_PORT": "7778",
                "MINTPOOL_LOG_LEVEL": "debug",
            }
        )
        assert settings.database_url == "sqlite:///:memory:"
        assert settings.app_name == "pool-a"
        assert settings.host == "127.0.0.1"
        assert settings.port == 7778
        assert settings.log_level == "DEBUG"

    def test_postgres_variables(self):
        env = {"POSTGRES_USER": "u", "POSTGRES_PASSWORD": "p", "POSTGRES_DB": "mints"}
        assert Settings.from_env(env).database_url == "postgresql://u:p@localhost/mints"
        env["POSTGRES_HOST"] = "postgres:5432"
        assert Settings.from_env(env).database_url == "postgresql://u:p@postgres:5432/mints"

    def test_explicit_url_wins_over_postgres_variables(self):
        env = {
            "MINTPOOL_DATABASE_URL": "sqlite:///x.db",
            "POSTGRES_USER": "u",
            "POSTGRES_PASSWORD": "p",
            "POSTGRES_DB": "mints",
        }
        assert Settings.from_env(env).database_url == "sqlite:///x.db"

    @pytest.mark.parametrize(
        "env", [{"MINTPOOL_PORT": "not-a-port"}, {"MINTPOOL_PORT": "0"}, {"MINTPOOL_LOG_LEVEL": "LOUD"}]
    )
    def test_invalid_values(self, env):
        with pytest.raises(ValidationError):
            Settings.from_env(env)

    def test_reads_process_environment(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("MINTPOOL_APP_NAME", "from-env")
        assert Settings.from_env().app_name == "from-env"


class TestLogging:
    def test_single_handler(self):
        logger = configure_logging(logging.DEBUG)
        configure_logging(logging.DEBUG)

        assert logger.name == "mintpool"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_accepts_level_names(self):
        assert configure_logging("WARNING").level == logging.WARNING
