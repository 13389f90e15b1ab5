"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Tests use real SQLite row stores: in-memory for speed, or a file under
tmp_path when a test needs to reopen the same database. bcrypt runs for
real at its lowest cost.
"""

import os
from collections.abc import Generator
from pathlib import Path

import pytest

# Settings require ADMIN_KEY; set it before anything loads config
TEST_ADMIN_KEY = "test-admin-key-0123456789"
os.environ.setdefault("ADMIN_KEY", TEST_ADMIN_KEY)

from modules.backend.core.config import get_app_config, get_settings  # noqa: E402
from modules.backend.core.database import RowStore  # noqa: E402

TEST_HASH_ROUNDS = 4


@pytest.fixture(autouse=True)
def _clear_config_caches() -> Generator[None, None, None]:
    """Each test sees configuration loaded from scratch."""
    get_settings.cache_clear()
    get_app_config.cache_clear()
    yield
    get_settings.cache_clear()
    get_app_config.cache_clear()


@pytest.fixture
def admin_key() -> str:
    return os.environ["ADMIN_KEY"]


@pytest.fixture
def store() -> Generator[RowStore, None, None]:
    """A fresh in-memory row store."""
    row_store = RowStore(":memory:")
    yield row_store
    row_store.close()


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    """Location for a file-backed store, in a directory that does not exist yet."""
    return tmp_path / "data" / "proposals.db"
