"""
Startup Security Validation.

Checks security invariants before the application accepts traffic. If any
check fails, the application refuses to start with a clear error message.

Called during FastAPI lifespan initialization.
"""

from modules.backend.core.config import AppConfig, Settings, get_app_config, get_environment, get_settings
from modules.backend.core.logging import get_logger
from modules.backend.core.security import BCRYPT_MAX_PASSWORD_BYTES

logger = get_logger(__name__)


class StartupSecurityError(RuntimeError):
    """Raised when a startup security check fails."""


def run_startup_checks(
    app_config: AppConfig | None = None,
    settings: Settings | None = None,
    environment: str | None = None,
) -> None:
    """
    Validate all security invariants at startup.

    Raises:
        StartupSecurityError: If any check fails
    """
    app_config = app_config or get_app_config()
    settings = settings or get_settings()
    environment = environment or get_environment()

    errors: list[str] = []

    _check_admin_key(settings, app_config, errors)
    _check_password_hashing(app_config, errors)
    if environment == "production":
        _check_production_safety(app_config, errors)

    if errors:
        for error in errors:
            logger.error("Startup security check failed", extra={"check": error})
        raise StartupSecurityError(
            f"Startup blocked: {len(errors)} security check(s) failed:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )

    logger.info("Startup security checks passed", extra={"environment": environment})


def _check_admin_key(settings: Settings, app_config: AppConfig, errors: list[str]) -> None:
    minimum = app_config.security.secrets_validation.admin_key_min_length
    if len(settings.admin_key) < minimum:
        errors.append(f"ADMIN_KEY is {len(settings.admin_key)} chars, minimum is {minimum}")


def _check_password_hashing(app_config: AppConfig, errors: list[str]) -> None:
    hashing = app_config.security.password_hashing
    if hashing.max_password_bytes > BCRYPT_MAX_PASSWORD_BYTES:
        errors.append(
            f"max_password_bytes is {hashing.max_password_bytes}, "
            f"bcrypt only uses the first {BCRYPT_MAX_PASSWORD_BYTES}"
        )


def _check_production_safety(app_config: AppConfig, errors: list[str]) -> None:
    app = app_config.application
    if app.debug:
        errors.append("debug is true in production environment")

    if app.docs_enabled:
        errors.append("docs_enabled is true in production environment")

    localhost_origins = [o for o in app.cors.origins if "localhost" in o]
    if localhost_origins:
        errors.append(f"CORS origins contain localhost in production: {localhost_origins}")
