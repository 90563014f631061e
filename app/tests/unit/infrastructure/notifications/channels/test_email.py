"""Unit tests for EmailChannel and the HTML wrapper."""

from unittest.mock import MagicMock

import pytest

from infrastructure.notifications import EmailChannel, Locale
from infrastructure.notifications.channels.email import build_html
from infrastructure.operations import OperationResult
from tests.factories.notifications import make_payload


@pytest.fixture
def client():
    client = MagicMock()
    client.is_configured = True
    client.send_html.return_value = OperationResult.success(
        data={"message_id": "sg-1"}
    )
    return client


@pytest.mark.unit
class TestBuildHtml:
    def test_arabic_is_right_to_left(self):
        html = build_html("مرحبا", Locale.AR)

        assert 'dir="rtl"' in html
        assert 'lang="ar"' in html
        assert "Noto Sans Arabic" in html

    def test_english_is_left_to_right(self):
        html = build_html("Hello", Locale.EN, brand_name="Grace Church")

        assert 'dir="ltr"' in html
        assert "Grace Church" in html

    def test_body_is_escaped_and_keeps_line_breaks(self):
        html = build_html("Line one\n<b>two</b>", Locale.EN)

        assert "white-space: pre-line" in html
        assert "&lt;b&gt;two&lt;/b&gt;" in html


@pytest.mark.unit
class TestEmailChannel:
    def test_sends_localized_subject(self, client):
        result = EmailChannel(client).send(make_payload(locale=Locale.EN))

        assert result.success
        assert result.message_id == "sg-1"
        kwargs = client.send_html.call_args.kwargs
        assert kwargs["recipient"] == "leader@example.com"
        assert kwargs["subject"] == "New visitor assigned: Karim Haddad"
        assert 'dir="ltr"' in kwargs["html_content"]

    def test_arabic_subject(self, client):
        EmailChannel(client).send(make_payload(locale=Locale.AR))

        assert client.send_html.call_args.kwargs["subject"] == (
            "زائر جديد مُسنَد إليك: Karim Haddad"
        )

    def test_not_configured(self, client):
        client.is_configured = False

        result = EmailChannel(client).send(make_payload())

        assert not result.success
        client.send_html.assert_not_called()

    def test_missing_email(self, client):
        result = EmailChannel(client).send(make_payload(email=None))

        assert result.error == "No email address"

    def test_provider_failure(self, client):
        client.send_html.return_value = OperationResult.permanent_error(
            "The from address does not match a verified Sender Identity"
        )

        result = EmailChannel(client).send(make_payload())

        assert result.error.startswith("The from address")
