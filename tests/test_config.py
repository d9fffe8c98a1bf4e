"""Tests for catalog configuration.

These tests demonstrate:
1. Default value behavior
2. Environment variable loading
3. Configuration validation
4. The connection string owned by configuration
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError
from sqlalchemy import insert, select

from library_catalog.config import CatalogConfig, get_config, reset_config
from library_catalog.database import DatabaseManager, books_table


class TestCatalogConfig:
    """Test catalog configuration behavior."""

    def test_default_configuration(self, clean_env):
        config = CatalogConfig(_env_file=None)

        assert config.server_name == "library-catalog"
        assert config.server_version == "0.1.0"
        assert config.database_path == Path("data/catalog.db").absolute()
        assert config.database_url is None
        assert config.strict_integrity is False
        assert config.echo_sql is False
        assert config.logfire_send is False

    def test_environment_variable_loading(self, clean_env):
        env_vars = {
            "LIBRARY_CATALOG_SERVER_NAME": "branch-catalog",
            "LIBRARY_CATALOG_STRICT_INTEGRITY": "true",
            "LIBRARY_CATALOG_DATABASE_URL": "sqlite:///:memory:",
            "LIBRARY_CATALOG_LOG_LEVEL": "DEBUG",
        }

        with patch.dict(os.environ, env_vars):
            config = CatalogConfig(_env_file=None)

        assert config.server_name == "branch-catalog"
        assert config.strict_integrity is True
        assert config.database_url == "sqlite:///:memory:"
        assert config.is_development is True

    def test_server_name_validation(self):
        with pytest.raises(ValidationError):
            CatalogConfig(server_name="Library Catalog")

        with pytest.raises(ValidationError, match="at least 3 characters"):
            CatalogConfig(server_name="lc")

    def test_log_level_validation(self):
        with pytest.raises(ValidationError):
            CatalogConfig(log_level="VERBOSE")

    def test_database_url_from_path(self, tmp_path):
        config = CatalogConfig(database_path=tmp_path / "catalog.db")

        assert config.get_database_url() == f"sqlite:///{tmp_path / 'catalog.db'}"

    def test_database_url_overrides_path(self, tmp_path):
        config = CatalogConfig(
            database_path=tmp_path / "catalog.db",
            database_url="postgresql://catalog@localhost/catalog",
        )

        assert config.get_database_url() == "postgresql://catalog@localhost/catalog"


class TestConfigSingleton:
    def test_get_config_is_cached(self):
        assert get_config() is get_config()

    def test_reset_config_reloads_environment(self, clean_env):
        first = get_config()

        with patch.dict(os.environ, {"LIBRARY_CATALOG_STRICT_INTEGRITY": "true"}):
            reset_config()
            second = get_config()

        assert first is not second
        assert second.strict_integrity is True


class TestDatabaseManagerConfig:
    def test_manager_uses_configured_url(self, clean_env, tmp_path):
        db_file = tmp_path / "nested" / "catalog.db"

        with patch.dict(os.environ, {"LIBRARY_CATALOG_DATABASE_PATH": str(db_file)}):
            reset_config()
            manager = DatabaseManager()

        assert manager.database_url == f"sqlite:///{db_file}"
        assert db_file.parent.is_dir()

    def test_in_memory_database_shares_one_connection(self):
        manager = DatabaseManager("sqlite:///:memory:")
        manager.init_database()

        with manager.scope() as scope:
            scope.execute(insert(books_table).values(title="Rayuela", author="Julio Cortázar"))
        with manager.scope() as scope:
            assert scope.execute(select(books_table.c.title)).scalar() == "Rayuela"

        assert manager.verify_connection() is True
        info = manager.connection_info()
        assert info["dialect"] == "sqlite"
        assert info["driver"] == "pysqlite"
        manager.close()

    def test_unreachable_database(self, tmp_path):
        manager = DatabaseManager(f"sqlite:///{tmp_path / 'missing' / 'catalog.db'}")

        assert manager.verify_connection() is False
