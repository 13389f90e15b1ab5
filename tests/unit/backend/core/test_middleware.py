"""
Unit Tests for Request Context Middleware.

Tests the RequestContextMiddleware functionality including:
- Request ID generation and propagation
- Frontend extraction from X-Frontend-ID header
- Response timing headers
"""

from unittest.mock import MagicMock, patch

import pytest
from starlette.requests import Request
from starlette.responses import Response

from modules.backend.core.middleware import RequestContextMiddleware


@pytest.fixture
def middleware():
    return RequestContextMiddleware(MagicMock())


@pytest.fixture
def mock_request():
    request = MagicMock(spec=Request)
    request.headers = {}
    request.method = "GET"
    request.url = MagicMock()
    request.url.path = "/api/v1/mockups/abcd1234/0"
    request.client = MagicMock()
    request.client.host = "127.0.0.1"
    request.state = MagicMock()
    return request


class TestRequestContextMiddleware:
    """Tests for RequestContextMiddleware."""

    async def test_known_frontend_kept(self, middleware, mock_request):
        mock_request.headers = {"X-Frontend-ID": "web"}

        async def call_next(request):
            assert request.state.frontend == "web"
            return Response("OK")

        with patch("modules.backend.core.middleware.structlog.contextvars"):
            await middleware.dispatch(mock_request, call_next)

    async def test_unknown_frontend_normalized(self, middleware, mock_request):
        mock_request.headers = {"X-Frontend-ID": "smart-fridge"}

        async def call_next(request):
            assert request.state.frontend == "unknown"
            return Response("OK")

        with patch("modules.backend.core.middleware.structlog.contextvars"):
            await middleware.dispatch(mock_request, call_next)

    async def test_propagates_request_id(self, middleware, mock_request):
        mock_request.headers = {"X-Request-ID": "req-abc"}

        async def call_next(request):
            return Response("OK")

        with patch("modules.backend.core.middleware.structlog.contextvars"):
            response = await middleware.dispatch(mock_request, call_next)

        assert response.headers["X-Request-ID"] == "req-abc"
        assert response.headers["X-Response-Time"].endswith("ms")

    async def test_generates_request_id(self, middleware, mock_request):
        async def call_next(request):
            return Response("OK")

        with patch("modules.backend.core.middleware.structlog.contextvars"):
            response = await middleware.dispatch(mock_request, call_next)

        assert len(response.headers["X-Request-ID"]) == 36

    async def test_binds_path_not_query(self, middleware, mock_request):
        async def call_next(request):
            return Response("OK")

        with patch("modules.backend.core.middleware.structlog.contextvars") as ctx:
            await middleware.dispatch(mock_request, call_next)

        bound = ctx.bind_contextvars.call_args.kwargs
        assert bound["path"] == "/api/v1/mockups/abcd1234/0"
        assert bound["method"] == "GET"

    async def test_reraises_and_clears_context(self, middleware, mock_request):
        async def call_next(request):
            raise RuntimeError("boom")

        with patch("modules.backend.core.middleware.structlog.contextvars") as ctx:
            with pytest.raises(RuntimeError):
                await middleware.dispatch(mock_request, call_next)

        assert ctx.clear_contextvars.call_count == 2
