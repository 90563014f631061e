"""Unit tests for server.server module."""

import pytest
import structlog
from fastapi.testclient import TestClient

from server import server


@pytest.mark.unit
def test_cors_middleware_configured():
    """Test that CORS middleware is present in the server."""
    middleware_classes = [m.cls.__name__ for m in server.handler.user_middleware]
    assert "CORSMiddleware" in middleware_classes


@pytest.mark.unit
def test_notification_routes_included():
    """Test that the v1 notification routes are mounted."""
    route_paths = set(server.handler.openapi()["paths"])

    assert "/api/v1/notifications" in route_paths
    assert "/api/v1/notifications/read-all" in route_paths
    assert "/api/v1/notifications/{entry_id}" in route_paths
    assert "/api/v1/notifications/send" in route_paths
    assert "/api/v1/notifications/audience" in route_paths
    assert "/health" in route_paths


@pytest.mark.unit
def test_request_context_is_bound_during_request():
    """Test that the middleware binds correlation and account context."""
    seen = {}

    @server.handler.get("/__context_check")
    def context_check():
        seen.update(structlog.contextvars.get_contextvars())
        return {}

    try:
        client = TestClient(server.handler)
        client.get(
            "/__context_check",
            headers={"X-Correlation-ID": "req-1", "X-Account-Id": "acc-1"},
        )
    finally:
        server.handler.router.routes = [
            route
            for route in server.handler.router.routes
            if getattr(route, "path", None) != "/__context_check"
        ]

    assert seen["correlation_id"] == "req-1"
    assert seen["account_id"] == "acc-1"
    assert seen["request_path"] == "/__context_check"


@pytest.mark.unit
def test_unmapped_route_returns_404():
    """Test that the app returns 404 for unmapped routes."""
    response = TestClient(server.handler).get("/test-unmapped-route")

    assert response.status_code == 404
