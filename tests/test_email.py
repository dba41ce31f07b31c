"""
Tests for SMTP email delivery.
"""

import smtplib

import pytest

from affairs_digest.delivery import EmailDelivery


class FakeSMTP:
    """Records what EmailDelivery does with an SMTP connection."""

    def __init__(self, host, port, failures=()):
        self.host = host
        self.port = port
        self.failures = list(failures)
        self.tls = False
        self.login_args = None
        self.sent = []

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False

    def starttls(self):
        self.tls = True

    def login(self, user, password):
        self.login_args = (user, password)

    def send_message(self, msg, from_addr=None, to_addrs=None):
        if self.failures:
            raise self.failures.pop(0)
        self.sent.append((msg, from_addr, to_addrs))


@pytest.fixture
def smtp_factory():
    connections = []
    failures = []

    def factory(host, port):
        conn = FakeSMTP(host, port, failures[:1])
        del failures[:1]
        connections.append(conn)
        return conn

    factory.connections = connections
    factory.failures = failures
    return factory


def send(delivery, **kwargs):
    return delivery.send(
        subject="Current Affairs Digest - 19/10/2026",
        html_content="<html><body>digest</body></html>",
        text_content="raw digest text",
        **kwargs,
    )


class TestEmailDelivery:
    """Test EmailDelivery.send."""

    def test_sends_one_message_to_all_recipients(self, config, smtp_factory):
        result = send(EmailDelivery(config, smtp_factory=smtp_factory))

        assert result.success is True
        assert result.recipients == ["a@example.com", "b@example.com"]
        assert result.attempts == 1

        (conn,) = smtp_factory.connections
        assert (conn.host, conn.port) == ("smtp.gmail.com", 587)
        assert conn.tls is True
        assert conn.login_args == ("digest@example.com", "app-password")

        (msg, from_addr, to_addrs) = conn.sent[0]
        assert from_addr == "digest@example.com"
        assert to_addrs == ["a@example.com", "b@example.com"]
        assert msg["To"] == "a@example.com, b@example.com"
        assert msg["Subject"] == "Current Affairs Digest - 19/10/2026"

    def test_html_with_plain_text_fallback(self, config, smtp_factory):
        send(EmailDelivery(config, smtp_factory=smtp_factory))

        msg = smtp_factory.connections[0].sent[0][0]
        assert msg.get_content_type() == "multipart/alternative"

        plain, rich = msg.get_payload()
        assert plain.get_content_type() == "text/plain"
        assert plain.get_payload(decode=True).decode("utf-8") == "raw digest text"
        assert rich.get_content_type() == "text/html"
        assert "digest</body>" in rich.get_payload(decode=True).decode("utf-8")

    def test_duplicate_recipients_are_kept(self, config, smtp_factory):
        recipients = ["a@example.com", "a@example.com"]
        send(EmailDelivery(config, smtp_factory=smtp_factory), recipients=recipients)

        assert smtp_factory.connections[0].sent[0][2] == recipients

    def test_no_recipients_skips_connection(self, smtp_factory):
        from affairs_digest.config import Config

        config = Config(email={"sender": "digest@example.com"})
        result = send(EmailDelivery(config, smtp_factory=smtp_factory))

        assert result.success is False
        assert smtp_factory.connections == []

    def test_missing_sender_fails(self, config, smtp_factory):
        config.email.sender = None
        result = send(EmailDelivery(config, smtp_factory=smtp_factory))

        assert result.success is False
        assert smtp_factory.connections == []

    def test_authentication_failure_is_reported(self, config, smtp_factory):
        smtp_factory.failures.append(
            smtplib.SMTPAuthenticationError(535, b"Username and Password not accepted")
        )
        result = send(EmailDelivery(config, smtp_factory=smtp_factory))

        assert result.success is False
        assert "Username and Password not accepted" in result.error

    def test_connection_failure_is_reported(self, config):
        def refusing_factory(host, port):
            raise ConnectionRefusedError("connection refused")

        result = send(EmailDelivery(config, smtp_factory=refusing_factory))

        assert result.success is False
        assert "connection refused" in result.error

    def test_retries_disconnects_when_enabled(self, config, smtp_factory):
        config.smtp.max_attempts = 2
        smtp_factory.failures.append(smtplib.SMTPServerDisconnected("dropped"))

        result = send(EmailDelivery(config, smtp_factory=smtp_factory))

        assert result.success is True
        assert result.attempts == 2
        assert len(smtp_factory.connections) == 2

    def test_no_retry_by_default(self, config, smtp_factory):
        smtp_factory.failures.append(smtplib.SMTPServerDisconnected("dropped"))

        result = send(EmailDelivery(config, smtp_factory=smtp_factory))

        assert result.success is False
        assert result.attempts == 1

    def test_plain_relay_without_tls_or_login(self, config, smtp_factory):
        config.smtp.starttls = False
        config.smtp.password = None

        assert send(EmailDelivery(config, smtp_factory=smtp_factory)).success is True

        conn = smtp_factory.connections[0]
        assert conn.tls is False
        assert conn.login_args is None
