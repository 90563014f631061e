"""Unit tests for WhatsAppChannel.

The client is mocked; HTTP behaviour lives in the integration client tests.
"""

from unittest.mock import MagicMock

import pytest

from infrastructure.notifications import (
    Channel,
    Locale,
    NotificationType,
    WhatsAppChannel,
)
from infrastructure.operations import OperationResult
from tests.factories.notifications import make_payload


@pytest.fixture
def client():
    client = MagicMock()
    client.is_configured = True
    client.send_template.return_value = OperationResult.success(
        data={"message_id": "wamid.1"}
    )
    return client


@pytest.mark.unit
class TestWhatsAppChannel:
    def test_sends_template_with_ordered_params(self, client):
        channel = WhatsAppChannel(client)
        payload = make_payload(
            notification_type=NotificationType.GATHERING_REMINDER,
            locale=Locale.EN,
            params={"location": "Hall B", "groupName": "Youth", "time": "07:00 PM"},
        )

        result = channel.send(payload)

        assert result.success
        assert result.message_id == "wamid.1"
        client.send_template.assert_called_once_with(
            to="96170123456",
            template_name="gathering_reminder",
            language_code="en",
            parameters=["Youth", "07:00 PM", "Hall B"],
        )

    def test_not_configured(self, client):
        client.is_configured = False

        result = WhatsAppChannel(client).send(make_payload())

        assert result.channel == Channel.BUSINESS_MESSAGE
        assert result.error == "WhatsApp API key not configured"
        client.send_template.assert_not_called()

    def test_missing_parameter_fails_without_sending(self, client):
        payload = make_payload(
            notification_type=NotificationType.GATHERING_REMINDER,
            params={"groupName": "Youth", "time": "07:00 PM"},
        )

        result = WhatsAppChannel(client).send(payload)

        assert result.error == "Missing template parameters: location"
        client.send_template.assert_not_called()

    def test_empty_parameter_is_sent_not_treated_as_missing(self, client):
        payload = make_payload(
            notification_type=NotificationType.GATHERING_REMINDER,
            params={"groupName": "Youth", "time": "07:00 PM", "location": ""},
        )

        result = WhatsAppChannel(client).send(payload)

        assert result.success
        assert client.send_template.call_args.kwargs["parameters"] == [
            "Youth",
            "07:00 PM",
            "",
        ]

    def test_missing_phone(self, client):
        result = WhatsAppChannel(client).send(make_payload(phone="  "))

        assert result.error == "No phone number"

    def test_missing_template(self, client):
        result = WhatsAppChannel(client).send(make_payload(with_template=False))

        assert not result.success
        client.send_template.assert_not_called()

    def test_provider_error_message_is_surfaced(self, client):
        client.send_template.return_value = OperationResult.permanent_error(
            "Template name does not exist", error_code="HTTP_400"
        )

        result = WhatsAppChannel(client).send(make_payload())

        assert result.error == "Template name does not exist"

    def test_client_exception_is_caught(self, client):
        client.send_template.side_effect = RuntimeError("boom")

        result = WhatsAppChannel(client).send(make_payload())

        assert result.error == "boom"
