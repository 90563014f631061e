"""Unit tests for OperationResult."""

import pytest

from infrastructure.operations import OperationResult, OperationStatus


@pytest.mark.unit
class TestOperationResult:
    def test_success(self):
        result = OperationResult.success(data={"message_id": "1"})

        assert result.is_success
        assert result.message == "ok"
        assert result.data == {"message_id": "1"}

    def test_transient_error(self):
        result = OperationResult.transient_error(
            "rate limited", error_code="RATE_LIMITED", retry_after=30
        )

        assert not result.is_success
        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert result.retry_after == 30

    def test_permanent_error(self):
        result = OperationResult.permanent_error("bad", error_code="HTTP_400")

        assert result.status == OperationStatus.PERMANENT_ERROR
        assert result.error_code == "HTTP_400"

    def test_sent_exposes_message_id(self):
        result = OperationResult.sent("wamid.1")

        assert result.is_success
        assert result.message_id == "wamid.1"

    def test_message_id_absent_without_dict_payload(self):
        assert OperationResult.success(data=["x"]).message_id is None
        assert OperationResult.permanent_error("bad").message_id is None
