"""
Concurrency Infrastructure.

Shared thread pool for blocking work: row store queries and bcrypt
hashing. The pool is created lazily on first access and shut down
during application shutdown.

The store and the hash functions are synchronous; request handlers
are async. Every blocking call goes through run_blocking() so a slow
bcrypt verification never stalls unrelated requests on the event loop.

Usage:
    from modules.backend.core.concurrency import run_blocking

    row = await run_blocking(store.get, "SELECT ...", {"id": proposal_id})
"""

import asyncio
import contextvars
import threading
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Any, Callable, TypeVar

from modules.backend.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

_io_pool: ThreadPoolExecutor | None = None
_io_pool_lock = threading.Lock()


class TracedThreadPoolExecutor(ThreadPoolExecutor):
    """ThreadPoolExecutor that propagates contextvars to worker threads.

    Standard ThreadPoolExecutor does not carry structlog context such as
    request_id into worker threads. This subclass copies the current
    context before dispatching.
    """

    def submit(self, fn, /, *args, **kwargs):
        ctx = contextvars.copy_context()
        return super().submit(ctx.run, fn, *args, **kwargs)


def get_io_pool() -> TracedThreadPoolExecutor:
    """Get the shared thread pool for blocking I/O operations.

    Creates the pool lazily on first call using config from concurrency.yaml.
    """
    global _io_pool
    if _io_pool is None:
        with _io_pool_lock:
            if _io_pool is None:
                from modules.backend.core.config import get_app_config
                max_workers = get_app_config().concurrency.thread_pool.max_workers
                _io_pool = TracedThreadPoolExecutor(max_workers=max_workers)
                logger.info("Thread pool created", extra={"max_workers": max_workers})
    return _io_pool


async def run_blocking(fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run a blocking callable on the shared I/O pool and await its result."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(get_io_pool(), partial(fn, *args, **kwargs))


async def shutdown_pools() -> None:
    """Shut down the I/O pool gracefully. Called during application shutdown.

    Pool shutdown is blocking, so it runs in a plain thread to avoid
    stalling the event loop.
    """
    global _io_pool

    if _io_pool is not None:
        await asyncio.to_thread(_io_pool.shutdown, wait=True)
        logger.info("Thread pool shut down")
        _io_pool = None
