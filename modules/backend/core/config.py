"""
Configuration Management.

Loads secrets from config/.env and settings from config/settings/*.yaml.
Process environment variables override values from config/.env.

Secrets and deployment selectors (.env / environment):
    ADMIN_KEY      - Shared admin credential for authoring operations
    APP_ENV        - Overrides application.environment
    SKIP_DB_INIT   - In production, open an in-memory store (build-only runs)

Settings (YAML):
    application.yaml   - App identity, server, cors
    database.yaml      - Row store locations per deployment mode
    logging.yaml       - Logging configuration
    security.yaml      - Password hashing cost, secret validation
    concurrency.yaml   - Thread pool sizing
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from modules.backend.core.config_schema import (
    ApplicationSchema,
    ConcurrencySchema,
    DatabaseSchema,
    LoggingSchema,
    SecuritySchema,
)

IN_MEMORY_STORE = ":memory:"


def find_project_root() -> Path:
    """Find project root by looking for .project_root marker file."""
    current = Path.cwd()
    while current != current.parent:
        if (current / ".project_root").exists():
            return current
        current = current.parent
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file from config/settings/."""
    project_root = find_project_root()
    config_path = project_root / "config" / "settings" / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Secrets and deployment selectors loaded from config/.env."""

    admin_key: str
    app_env: str | None = None
    skip_db_init: bool = False

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def _load_validated(schema_cls: type, filename: str) -> Any:
    """Load YAML and validate against schema. Returns typed model instance."""
    raw = load_yaml_config(filename)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ValueError(
            f"Invalid configuration in {filename}:\n{e}"
        ) from e


class AppConfig:
    """
    Application configuration loaded from YAML files.

    Each YAML file is validated against its Pydantic schema at load time.
    Missing keys, wrong types, or unknown fields raise a clear error
    immediately instead of causing cryptic KeyErrors later.

    Properties return typed Pydantic model instances with attribute access.
    """

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._database = _load_validated(DatabaseSchema, "database.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")
        self._security = _load_validated(SecuritySchema, "security.yaml")
        self._concurrency = _load_validated(ConcurrencySchema, "concurrency.yaml")

    @property
    def application(self) -> ApplicationSchema:
        """Application settings."""
        return self._application

    @property
    def database(self) -> DatabaseSchema:
        """Row store settings."""
        return self._database

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging

    @property
    def security(self) -> SecuritySchema:
        """Security settings."""
        return self._security

    @property
    def concurrency(self) -> ConcurrencySchema:
        """Concurrency settings (thread pool)."""
        return self._concurrency


@lru_cache
def get_settings() -> Settings:
    """Get cached secrets instance. Resolves .env path from project root."""
    env_path = find_project_root() / "config" / ".env"
    return Settings(_env_file=str(env_path))


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


def get_environment() -> str:
    """Return the deployment environment, preferring APP_ENV over application.yaml."""
    return get_settings().app_env or get_app_config().application.environment


def get_store_location() -> str:
    """
    Resolve where the row store lives for the current deployment mode.

    Returns:
        ':memory:' for production build-only runs (SKIP_DB_INIT), the fixed
        production path in production, and the development path resolved
        against the project root otherwise.
    """
    db = get_app_config().database
    if get_environment() == "production":
        if get_settings().skip_db_init:
            return IN_MEMORY_STORE
        return db.production_path
    return str(find_project_root() / db.development_path)


def get_server_address() -> tuple[str, int]:
    """Get the server host and port from application.yaml."""
    server = get_app_config().application.server
    return server.host, server.port
