from unittest.mock import Mock, patch

import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.testclient import TestClient
from slowapi.errors import RateLimitExceeded

from api.dependencies import rate_limits
from api.v1.router import router as v1_router
from infrastructure.services.providers import get_broadcast_service


def test_key_uses_account_header():
    mock_request = Mock(spec=Request)
    mock_request.headers = {"X-Account-Id": "acc-1"}

    assert rate_limits.account_key_func(mock_request) == "account:acc-1"


def test_key_falls_back_to_remote_address():
    mock_request = Mock(spec=Request)
    mock_request.headers = {"X-Account-Id": "  "}

    with patch(
        "api.dependencies.rate_limits.get_remote_address", return_value="192.168.1.1"
    ):
        result = rate_limits.account_key_func(mock_request)

    assert result == "192.168.1.1"


@pytest.mark.asyncio
async def test_rate_limit_handler():
    mock_request = Mock(spec=Request)
    mock_exception = Mock(spec=RateLimitExceeded)

    response = await rate_limits.rate_limit_handler(mock_request, mock_exception)

    assert isinstance(response, JSONResponse)
    assert response.status_code == 429
    assert response.body.decode("utf-8") == '{"message":"Rate limit exceeded"}'


def test_broadcast_limit_is_per_account(broadcast_service):
    """Ten broadcasts per minute per account; other accounts are unaffected."""
    app = FastAPI()
    rate_limits.setup_rate_limiter(app)
    app.include_router(v1_router)
    app.dependency_overrides[get_broadcast_service] = lambda: broadcast_service
    rate_limits.limiter.reset()
    client = TestClient(app)
    body = {"title_ar": "x", "body_ar": "y", "targets": [{"type": "all_in_org"}]}

    try:
        for _ in range(10):
            response = client.post(
                "/notifications/send", json=body, headers={"X-Account-Id": "a"}
            )
            assert response.status_code == 404

        response = client.post(
            "/notifications/send", json=body, headers={"X-Account-Id": "a"}
        )
        assert response.status_code == 429
        assert response.json() == {"message": "Rate limit exceeded"}

        response = client.post(
            "/notifications/send", json=body, headers={"X-Account-Id": "b"}
        )
        assert response.status_code == 404
    finally:
        rate_limits.limiter.reset()
