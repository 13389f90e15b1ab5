"""
Unit Tests for Configuration Management.

Tests run against the real project YAML files. Failure scenarios use
tmp_path to create controlled filesystems. Environment selectors are
set with monkeypatch.
"""

from pathlib import Path

import pytest

from modules.backend.core.config import (
    AppConfig,
    find_project_root,
    get_app_config,
    get_environment,
    get_server_address,
    get_settings,
    get_store_location,
    load_yaml_config,
)
from modules.backend.core.config_schema import (
    ApplicationSchema,
    ConcurrencySchema,
    DatabaseSchema,
    LoggingSchema,
    SecuritySchema,
)


def _make_project(root: Path, files: dict[str, str]) -> None:
    (root / ".project_root").touch()
    settings_dir = root / "config" / "settings"
    settings_dir.mkdir(parents=True)
    for name, body in files.items():
        (settings_dir / name).write_text(body)


class TestFindProjectRoot:
    """Tests for .project_root marker discovery."""

    def test_finds_root_from_project_directory(self):
        root = find_project_root()
        assert (root / ".project_root").exists()
        assert (root / "config" / "settings").is_dir()

    def test_raises_when_no_marker_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(RuntimeError, match="Project root not found"):
            find_project_root()


class TestAppConfig:
    """The shipped YAML files load and validate."""

    def test_all_sections_typed(self):
        config = get_app_config()

        assert isinstance(config.application, ApplicationSchema)
        assert isinstance(config.database, DatabaseSchema)
        assert isinstance(config.logging, LoggingSchema)
        assert isinstance(config.security, SecuritySchema)
        assert isinstance(config.concurrency, ConcurrencySchema)

    def test_shipped_values(self):
        config = get_app_config()

        assert config.database.production_path == "/app/data/proposals.db"
        assert config.database.development_path == "data/proposals.db"
        assert config.security.password_hashing.rounds == 10
        assert config.security.password_hashing.max_password_bytes == 72

    def test_cached(self):
        assert get_app_config() is get_app_config()

    def test_missing_file(self, tmp_path, monkeypatch):
        _make_project(tmp_path, {})
        monkeypatch.chdir(tmp_path)

        with pytest.raises(FileNotFoundError):
            load_yaml_config("application.yaml")

    def test_unknown_key_rejected(self, tmp_path, monkeypatch):
        _make_project(tmp_path, {
            "application.yaml": (
                "name: x\nversion: '1'\ndescription: d\nenvironment: development\n"
                "debug: false\napi_prefix: /api/v1\ndocs_enabled: false\n"
                "server: {host: 127.0.0.1, port: 8000}\ncors: {origins: []}\n"
                "surprise: true\n"
            ),
        })
        monkeypatch.chdir(tmp_path)

        with pytest.raises(ValueError, match="application.yaml"):
            AppConfig()


class TestSettings:
    """Secrets come from the environment."""

    def test_admin_key_from_environment(self, monkeypatch):
        monkeypatch.setenv("ADMIN_KEY", "from-the-environment")
        assert get_settings().admin_key == "from-the-environment"

    def test_skip_db_init_defaults_off(self, monkeypatch):
        monkeypatch.delenv("SKIP_DB_INIT", raising=False)
        assert get_settings().skip_db_init is False


class TestStoreLocation:
    """The store location follows the deployment mode."""

    def test_development_path_under_project_root(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "development")

        location = get_store_location()

        assert location == str(find_project_root() / "data" / "proposals.db")

    def test_production_path(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "production")
        monkeypatch.delenv("SKIP_DB_INIT", raising=False)

        assert get_store_location() == "/app/data/proposals.db"

    def test_production_build_uses_memory(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "production")
        monkeypatch.setenv("SKIP_DB_INIT", "1")

        assert get_store_location() == ":memory:"

    def test_skip_db_init_ignored_outside_production(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "development")
        monkeypatch.setenv("SKIP_DB_INIT", "1")

        assert get_store_location() != ":memory:"

    def test_environment_falls_back_to_yaml(self, monkeypatch):
        monkeypatch.delenv("APP_ENV", raising=False)
        assert get_environment() == get_app_config().application.environment


def test_server_address():
    assert get_server_address() == ("127.0.0.1", 8000)
