"""
Integration Test Fixtures.

Drives the real FastAPI app over httpx's ASGI transport. The row store,
admin secret and hash cost are swapped through dependency overrides so
no file on disk and no config/.env is needed.
"""

from collections.abc import AsyncGenerator, Generator
from typing import Any

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from modules.backend.core.database import RowStore
from modules.backend.core.dependencies import get_admin_secret, get_hash_rounds, get_row_store

INTEGRATION_ADMIN_KEY = "integration-admin-key-42"


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"X-Admin-Key": INTEGRATION_ADMIN_KEY}


@pytest.fixture
def app(store: RowStore) -> Generator[FastAPI, None, None]:
    """The application with store, admin secret and hash cost overridden."""
    from modules.backend.main import create_app

    application = create_app()
    application.dependency_overrides[get_row_store] = lambda: store
    application.dependency_overrides[get_admin_secret] = lambda: INTEGRATION_ADMIN_KEY
    application.dependency_overrides[get_hash_rounds] = lambda: 4
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Test client bound to an in-memory store.

    Usage:
        async def test_health_endpoint(client: AsyncClient):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client


@pytest.fixture
async def created_proposal(client: AsyncClient, admin_headers) -> str:
    """Id of the Redesign proposal, password p@ss."""
    response = await client.post(
        "/api/v1/proposals",
        json={
            "title": "Redesign",
            "markdown": "# Hi",
            "mockups": [{"title": "V1", "html": "<h1>Hi</h1>"}],
            "password": "p@ss",
        },
        headers=admin_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]["id"]


# =============================================================================
# API Response Assertion Helpers
# =============================================================================


class ApiAssertions:
    """Helper class for API response assertions."""

    @staticmethod
    def assert_success(response: Any, expected_status: int = 200) -> dict[str, Any]:
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is True, f"Response not successful: {data}"
        return data

    @staticmethod
    def assert_error(
        response: Any,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is False, f"Response should be error: {data}"
        assert data.get("error") is not None, f"Missing error details: {data}"

        if expected_code:
            actual_code = data["error"].get("code")
            assert actual_code == expected_code, (
                f"Expected error code {expected_code}, got {actual_code}"
            )

        return data


@pytest.fixture
def api() -> ApiAssertions:
    return ApiAssertions()
