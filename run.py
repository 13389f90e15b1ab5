#!/usr/bin/env python3
"""
Application Entry Script.

Main entry point for the proposal service. All functionality is accessible
through command-line options.

Usage:
    python run.py --help
    python run.py --action server --verbose
    python run.py --action init-db
    python run.py --action health --debug
    python run.py --action config
"""

import subprocess
import sys
from pathlib import Path

import click

# Ensure project root is in path for absolute imports
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from modules.backend.core.logging import get_logger, log_with_source, setup_logging

ACTIONS = ["server", "init-db", "health", "config", "info"]


def validate_project_root() -> Path:
    """Validate that we're running from the project root."""
    if not (PROJECT_ROOT / ".project_root").exists():
        click.echo(
            click.style("Error: .project_root not found. Run from project root.", fg="red"),
            err=True,
        )
        sys.exit(1)
    return PROJECT_ROOT


@click.command()
@click.option(
    "--action",
    type=click.Choice(ACTIONS),
    default="info",
    help="Action to perform.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output (INFO level logging).",
)
@click.option(
    "--debug", "-d",
    is_flag=True,
    help="Enable debug output (DEBUG level logging).",
)
@click.option(
    "--host",
    default=None,
    help="Server host (for server action).",
)
@click.option(
    "--port",
    default=None,
    type=int,
    help="Server port (for server action).",
)
@click.option(
    "--reload",
    is_flag=True,
    help="Enable auto-reload (for server action).",
)
def main(
    action: str,
    verbose: bool,
    debug: bool,
    host: str | None,
    port: int | None,
    reload: bool,
) -> None:
    """
    Proposal Service Entry Point.

    Run the server, create or migrate the row store, check health,
    or view configuration.

    Examples:

        # Start development server
        python run.py --action server --reload --verbose

        # Create the store and migrate legacy rows
        python run.py --action init-db

        # View loaded configuration
        python run.py --action config
    """
    validate_project_root()

    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    setup_logging(level=log_level, format_type="console")
    logger = get_logger(__name__)

    log_with_source(logger, "cli", "debug", "Starting application", action=action, log_level=log_level)

    if action == "server":
        run_server(logger, host, port, reload)
    elif action == "init-db":
        init_db(logger)
    elif action == "health":
        check_health(logger)
    elif action == "config":
        show_config(logger)
    elif action == "info":
        show_info(logger)


def run_server(logger, host: str | None, port: int | None, reload: bool) -> None:
    """Start the FastAPI server under uvicorn."""
    from modules.backend.core.config import get_server_address

    default_host, default_port = get_server_address()
    server_host = host or default_host
    server_port = port or default_port

    log_with_source(
        logger, "cli", "info", "Starting server",
        host=server_host, port=server_port, reload=reload,
    )

    cmd = [
        sys.executable, "-m", "uvicorn",
        "modules.backend.main:app",
        "--host", server_host,
        "--port", str(server_port),
    ]

    if reload:
        cmd.append("--reload")

    click.echo(f"Starting server at http://{server_host}:{server_port}")
    click.echo("Press Ctrl+C to stop\n")

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Server failed to start", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


def init_db(logger) -> None:
    """Open the row store once, creating the table and migrating legacy rows."""
    from modules.backend.core.config import get_store_location
    from modules.backend.core.database import close_store, get_store
    from modules.backend.core.exceptions import StoreError

    location = get_store_location()
    try:
        get_store()
    except StoreError as e:
        log_with_source(
            logger, "cli", "error", "Store initialization failed",
            location=location, error=e.message,
        )
        click.echo(click.style(f"Could not open store at {location}: {e.message}", fg="red"))
        sys.exit(1)
    finally:
        close_store()

    log_with_source(logger, "cli", "info", "Store ready", location=location)
    click.echo(click.style(f"Store ready at {location}", fg="green"))


def check_health(logger) -> None:
    """Check application health by loading configuration and opening the store."""
    click.echo("Checking application health...\n")

    checks = []

    try:
        from modules.backend.core.config import get_app_config
        app_name = get_app_config().application.name
        checks.append(("YAML configuration", True, f"App: {app_name}"))
        logger.debug("Configuration loaded", extra={"app_name": app_name})
    except Exception as e:
        checks.append(("YAML configuration", False, str(e)))
        logger.error("Configuration failed", extra={"error": str(e)})

    try:
        from modules.backend.core.config import get_environment
        environment = get_environment()
        checks.append(("Environment settings", True, f"Env: {environment}"))
        logger.debug("Settings loaded", extra={"env": environment})
    except Exception as e:
        checks.append(("Environment settings", False, str(e)))
        logger.warning("Environment settings not configured", extra={"error": str(e)})

    try:
        from modules.backend.core.startup_checks import run_startup_checks
        run_startup_checks()
        checks.append(("Startup security checks", True, None))
    except Exception as e:
        checks.append(("Startup security checks", False, str(e)))
        logger.error("Startup security checks failed", extra={"error": str(e)})

    try:
        from modules.backend.core.database import close_store, get_store
        get_store().ping()
        close_store()
        checks.append(("Row store", True, None))
        logger.debug("Row store answered")
    except Exception as e:
        checks.append(("Row store", False, str(e)))
        logger.error("Row store failed", extra={"error": str(e)})

    try:
        from modules.backend.main import app
        checks.append(("FastAPI application", True, f"Title: {app.title}"))
        logger.debug("FastAPI app loaded", extra={"title": app.title})
    except Exception as e:
        checks.append(("FastAPI application", False, str(e)))
        logger.error("FastAPI app failed", extra={"error": str(e)})

    click.echo("Health Check Results:")
    click.echo("-" * 50)

    all_passed = True
    for name, passed, detail in checks:
        status = click.style("✓ PASS", fg="green") if passed else click.style("✗ FAIL", fg="red")
        detail_str = f" ({detail})" if detail else ""
        click.echo(f"  {status}  {name}{detail_str}")
        if not passed:
            all_passed = False

    click.echo("-" * 50)

    if all_passed:
        click.echo(click.style("\nAll checks passed!", fg="green"))
    else:
        click.echo(click.style("\nSome checks failed. See details above.", fg="yellow"))
        click.echo("Note: ADMIN_KEY must be set in config/.env or the environment.")


def _echo_section(title: str, values: dict) -> None:
    click.echo(f"\n{title}:")
    click.echo("-" * 40)
    for key, value in values.items():
        if isinstance(value, dict):
            click.echo(f"  {key}:")
            for k, v in value.items():
                click.echo(f"    {k}: {v}")
        else:
            click.echo(f"  {key}: {value}")


def show_config(logger) -> None:
    """Display loaded configuration. Secrets are never printed."""
    click.echo("Application Configuration:")

    try:
        from modules.backend.core.config import get_app_config, get_store_location

        app_config = get_app_config()

        _echo_section("Application Settings (from YAML)", app_config.application.model_dump())
        _echo_section("Database Settings (from YAML)", app_config.database.model_dump())
        _echo_section("Logging Settings (from YAML)", app_config.logging.model_dump())
        _echo_section("Security Settings (from YAML)", app_config.security.model_dump())
        _echo_section("Concurrency Settings (from YAML)", app_config.concurrency.model_dump())

        click.echo(f"\nResolved store location: {get_store_location()}")

        logger.info("Configuration displayed successfully")

    except Exception as e:
        logger.error("Failed to load configuration", extra={"error": str(e)})
        click.echo(click.style(f"Error loading configuration: {e}", fg="red"))
        sys.exit(1)


def show_info(logger) -> None:
    """Display application information."""
    click.echo("Proposal Vault")
    click.echo("=" * 40)

    try:
        from modules.backend.core.config import get_app_config
        application = get_app_config().application
        click.echo(f"Name: {application.name}")
        click.echo(f"Version: {application.version}")
        click.echo(f"Description: {application.description}")
    except Exception:
        click.echo("Name: Proposal Vault")
        click.echo("Version: 0.1.0")

    click.echo()
    click.echo("Available Actions:")
    click.echo("  --action server   Start the development server")
    click.echo("  --action init-db  Create the store and migrate legacy rows")
    click.echo("  --action health   Check application health")
    click.echo("  --action config   Display configuration")
    click.echo("  --action info     Show this information")
    click.echo()
    click.echo("Logging Options:")
    click.echo("  --verbose, -v     Enable INFO level logging")
    click.echo("  --debug, -d       Enable DEBUG level logging")
    click.echo()
    click.echo("Examples:")
    click.echo("  python run.py --action server --reload --verbose")
    click.echo("  python run.py --action init-db")
    click.echo("  python run.py --action health --debug")

    logger.debug("Info displayed")


if __name__ == "__main__":
    main()
