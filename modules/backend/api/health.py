"""
Health Check Endpoints.

Endpoints:
- /health: Liveness check (process running)
- /health/ready: Readiness check (row store answers a query)
"""

from typing import Any

from fastapi import APIRouter, HTTPException

from modules.backend.core.concurrency import run_blocking
from modules.backend.core.dependencies import Store
from modules.backend.core.exceptions import StoreError
from modules.backend.core.logging import get_logger
from modules.backend.core.utils import utc_now

router = APIRouter()
logger = get_logger(__name__)


async def check_store(store) -> dict[str, Any]:
    """
    Check row store connectivity.

    Returns:
        Dict with status, latency, and optional error message
    """
    start = utc_now()
    try:
        await run_blocking(store.ping)
    except StoreError as e:
        logger.warning("Store health check failed", extra={"error": e.message})
        return {"status": "unhealthy", "error": e.message}

    latency_ms = int((utc_now() - start).total_seconds() * 1000)
    return {"status": "healthy", "latency_ms": latency_ms}


@router.get("/health")
async def health_check() -> dict[str, str]:
    """
    Liveness check.

    Returns 200 if the process is running. No dependency checks.
    """
    return {"status": "healthy"}


@router.get("/health/ready")
async def readiness_check(store: Store) -> dict[str, Any]:
    """
    Readiness check.

    Returns 200 if the row store answers, 503 otherwise.
    """
    checks = {"store": await check_store(store)}

    if checks["store"]["status"] != "healthy":
        logger.warning("Readiness check failed", extra={"checks": checks})
        raise HTTPException(
            status_code=503,
            detail={
                "status": "unhealthy",
                "checks": checks,
                "timestamp": utc_now().isoformat(),
            },
        )

    return {
        "status": "healthy",
        "checks": checks,
        "timestamp": utc_now().isoformat(),
    }
