"""
Unit Tests for Exception Handlers.

Tests the exception handler functions in isolation.
"""

import json
from unittest.mock import MagicMock

import pytest
from fastapi import Request
from fastapi.exceptions import RequestValidationError

from modules.backend.core.exception_handlers import (
    EXCEPTION_STATUS_MAP,
    _get_request_id,
    application_error_handler,
    status_for,
    unhandled_exception_handler,
    validation_error_handler,
)
from modules.backend.core.exceptions import (
    ApplicationError,
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    StoreError,
    ValidationError,
)


class TestExceptionStatusMapping:
    """Tests for exception to HTTP status code mapping."""

    @pytest.mark.parametrize(
        ("exc_type", "status"),
        [
            (ValidationError, 400),
            (AuthenticationError, 401),
            (AuthorizationError, 403),
            (NotFoundError, 404),
            (StoreError, 503),
        ],
    )
    def test_mapping(self, exc_type, status):
        assert EXCEPTION_STATUS_MAP[exc_type] == status

    def test_subclass_uses_parent_status(self):
        class MockupMissing(NotFoundError):
            pass

        assert status_for(MockupMissing("gone")) == 404

    def test_unmapped_error_is_500(self):
        assert status_for(ApplicationError("boom")) == 500


class TestGetRequestId:
    """Tests for request ID extraction."""

    def test_extracts_from_request_state(self):
        request = MagicMock(spec=Request)
        request.state.request_id = "state-123"
        request.headers = {}

        assert _get_request_id(request) == "state-123"

    def test_extracts_from_header(self):
        request = MagicMock(spec=Request)
        del request.state.request_id
        request.headers = {"x-request-id": "header-456"}

        assert _get_request_id(request) == "header-456"


class TestApplicationErrorHandler:
    """Tests for application_error_handler."""

    @pytest.fixture
    def mock_request(self):
        request = MagicMock(spec=Request)
        request.url.path = "/api/v1/proposals/abc"
        request.method = "GET"
        request.headers = {"x-request-id": "test-123"}
        del request.state.request_id
        return request

    async def test_not_found_returns_404(self, mock_request):
        response = await application_error_handler(mock_request, NotFoundError("Proposal not found"))

        assert response.status_code == 404
        body = json.loads(response.body)
        assert body["success"] is False
        assert body["data"] is None
        assert body["error"]["code"] == "RES_NOT_FOUND"
        assert body["error"]["message"] == "Proposal not found"
        assert body["metadata"]["request_id"] == "test-123"

    async def test_wrong_password_returns_403(self, mock_request):
        response = await application_error_handler(mock_request, AuthorizationError("Wrong password"))

        assert response.status_code == 403
        assert json.loads(response.body)["error"]["code"] == "AUTHZ_FORBIDDEN"

    async def test_bad_admin_key_returns_401(self, mock_request):
        response = await application_error_handler(mock_request, AuthenticationError())

        assert response.status_code == 401
        assert json.loads(response.body)["error"]["message"] == "Unauthorized"

    async def test_validation_includes_details(self, mock_request):
        exc = ValidationError("Each mockup must have a title and html content", details={"index": 2})

        response = await application_error_handler(mock_request, exc)

        assert response.status_code == 400
        error = json.loads(response.body)["error"]
        assert error["code"] == "VAL_VALIDATION_ERROR"
        assert error["details"] == {"index": 2}

    async def test_store_error_returns_503(self, mock_request):
        response = await application_error_handler(mock_request, StoreError())

        assert response.status_code == 503
        assert json.loads(response.body)["error"]["code"] == "SYS_STORE_UNAVAILABLE"


class TestValidationErrorHandler:
    """Tests for validation_error_handler."""

    @pytest.fixture
    def mock_request(self):
        request = MagicMock(spec=Request)
        request.url.path = "/api/v1/proposals"
        request.method = "POST"
        request.headers = {}
        del request.state.request_id
        return request

    async def test_returns_422_with_fields(self, mock_request):
        exc = MagicMock(spec=RequestValidationError)
        exc.errors.return_value = [
            {"loc": ("body", "title"), "msg": "Field required", "type": "missing"},
            {"loc": ("body", "mockups"), "msg": "Input should be a valid list", "type": "list_type"},
        ]

        response = await validation_error_handler(mock_request, exc)

        assert response.status_code == 422
        error = json.loads(response.body)["error"]
        assert error["code"] == "VAL_REQUEST_INVALID"
        fields = [e["field"] for e in error["details"]["validation_errors"]]
        assert fields == ["body.title", "body.mockups"]


class TestUnhandledExceptionHandler:
    """Tests for unhandled_exception_handler."""

    async def test_hides_internal_details(self):
        request = MagicMock(spec=Request)
        request.url.path = "/api/v1/proposals"
        request.method = "GET"
        request.headers = {}
        del request.state.request_id

        response = await unhandled_exception_handler(
            request, RuntimeError("sqlite:////app/data/proposals.db is locked")
        )

        assert response.status_code == 500
        body = response.body.decode()
        assert "proposals.db" not in body
        assert "SYS_INTERNAL_ERROR" in body
