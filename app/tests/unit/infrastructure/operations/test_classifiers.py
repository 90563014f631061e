"""Unit tests for error classifiers.

Tests cover:
- Provider error text extraction from WhatsApp and SendGrid bodies
- HTTP response classification by status code
- Retry-After header extraction
- requests exception and SDK exception classification
"""

import pytest
import requests
from unittest.mock import Mock

from infrastructure.operations.classifiers import (
    classify_http_error,
    classify_http_response,
    extract_error_message,
)
from infrastructure.operations.status import OperationStatus


def make_response(status_code, body=None, headers=None):
    response = Mock()
    response.status_code = status_code
    response.headers = headers or {}
    if body is None:
        response.json = Mock(side_effect=ValueError("no json"))
    else:
        response.json = Mock(return_value=body)
    return response


@pytest.mark.unit
class TestExtractErrorMessage:
    """Tests for extract_error_message()."""

    def test_whatsapp_error_object(self):
        """Test the nested error.message shape."""
        body = {"error": {"message": "Invalid parameter", "code": 100}}

        assert extract_error_message(body) == "Invalid parameter"

    def test_legacy_errors_details(self):
        """Test the errors[].details shape."""
        body = {"errors": [{"code": 1008, "details": "Recipient is not a valid user"}]}

        assert extract_error_message(body) == "Recipient is not a valid user"

    def test_sendgrid_errors_joined(self):
        """Test multiple SendGrid errors are joined."""
        body = {"errors": [{"message": "bad from"}, {"message": "bad to"}]}

        assert extract_error_message(body) == "bad from; bad to"

    def test_unrecognised_body(self):
        """Test bodies without error text return None."""
        assert extract_error_message({"status": "nope"}) is None
        assert extract_error_message(["error"]) is None
        assert extract_error_message(None) is None


@pytest.mark.unit
class TestClassifyHttpResponse:
    """Tests for classify_http_response()."""

    def test_rate_limited_with_retry_after(self):
        """Test 429 with a Retry-After header."""
        result = classify_http_response(
            make_response(429, headers={"Retry-After": "120"})
        )

        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert result.error_code == "RATE_LIMITED"
        assert result.retry_after == 120

    def test_rate_limited_with_malformed_header(self):
        """Test 429 with an unparseable Retry-After uses the default."""
        result = classify_http_response(
            make_response(429, headers={"Retry-After": "soon"})
        )

        assert result.retry_after == 60

    @pytest.mark.parametrize("status_code", [401, 403])
    def test_unauthorized(self, status_code):
        """Test refused credentials."""
        result = classify_http_response(make_response(status_code))

        assert result.status == OperationStatus.UNAUTHORIZED
        assert result.message == f"HTTP {status_code}"

    def test_not_found(self):
        """Test 404 mapping."""
        assert classify_http_response(make_response(404)).status == (
            OperationStatus.NOT_FOUND
        )

    def test_server_error_is_transient(self):
        """Test 5xx mapping."""
        result = classify_http_response(make_response(503))

        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert result.error_code == "SERVER_ERROR"

    def test_client_error_uses_provider_text(self):
        """Test 400 carries the provider's message."""
        result = classify_http_response(
            make_response(400, body={"error": {"message": "Template not found"}})
        )

        assert result.status == OperationStatus.PERMANENT_ERROR
        assert result.error_code == "HTTP_400"
        assert result.message == "Template not found"


@pytest.mark.unit
class TestClassifyHttpError:
    """Tests for classify_http_error()."""

    def test_timeout(self):
        """Test requests timeouts are transient."""
        result = classify_http_error(requests.Timeout("read timed out"))

        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert result.error_code == "TIMEOUT"

    def test_connection_error(self):
        """Test connection failures are transient."""
        result = classify_http_error(requests.ConnectionError("refused"))

        assert result.error_code == "CONNECTION_ERROR"

    def test_other_request_exception(self):
        """Test generic requests errors."""
        result = classify_http_error(requests.RequestException("weird"))

        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert result.error_code == "REQUEST_ERROR"

    def test_sdk_error_with_status_code(self):
        """Test SDK exceptions carrying status_code and body."""
        exc = Exception("HTTP Error 400: Bad Request")
        exc.status_code = 400
        exc.body = b'{"errors": [{"message": "bad"}]}'

        result = classify_http_error(exc)

        assert result.status == OperationStatus.PERMANENT_ERROR
        assert result.error_code == "HTTP_400"
        assert "bad" in result.message

    def test_sdk_unauthorized(self):
        """Test SDK 401 maps to UNAUTHORIZED."""
        exc = Exception("Unauthorized")
        exc.status_code = 401
        exc.body = b""

        result = classify_http_error(exc)

        assert result.status == OperationStatus.UNAUTHORIZED
        assert result.message == "HTTP 401"

    def test_unknown_error(self):
        """Test anything else is permanent."""
        result = classify_http_error(ValueError("bad value"))

        assert result.status == OperationStatus.PERMANENT_ERROR
        assert result.error_code == "UNKNOWN_ERROR"
        assert "ValueError" in result.message
