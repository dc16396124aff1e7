"""Tests for email alerts."""

import smtplib
from datetime import date
from unittest.mock import MagicMock, patch

import pytest

from sec_watcher.errors import NotificationError
from sec_watcher.models import FilingRecord
from sec_watcher.notifier import EmailNotifier, format_alert


@pytest.fixture
def record():
    """An 8-K filed by Apple on the filing day."""
    return FilingRecord(
        registrant_name="Apple Inc.",
        ticker="AAPL",
        cik="0000320193",
        accession_number="000119312524000123",
        filing_date=date(2024, 5, 2),
        form_type="8-K",
        document_link="https://www.sec.gov/Archives/edgar/data/0000320193/000119312524000123/ex99.htm",
    )


@pytest.fixture
def notifier():
    """Email notifier pointed at a fake SMTP host."""
    return EmailNotifier("me@example.com", "alerts@example.com", "app-password", host="smtp.test", port=465)


class TestFormatAlert:
    """Test the alert subject and body."""

    def test_format_alert(self, record):
        """Test the subject line and the five body lines."""
        subject, body = format_alert(record)
        assert subject == "AAPL | New SEC filing"
        assert body.splitlines() == [
            "Name: Apple Inc.",
            "Ticker: AAPL",
            "Filing Date: 2024-05-02",
            "Form: 8-K",
            "Link: https://www.sec.gov/Archives/edgar/data/0000320193/000119312524000123/ex99.htm",
        ]

    def test_build_message(self, notifier, record):
        """Test that the email carries sender, recipient, subject and body."""
        msg = notifier.build_message(record)
        assert msg["From"] == "alerts@example.com"
        assert msg["To"] == "me@example.com"
        assert msg["Subject"] == "AAPL | New SEC filing"
        assert "Form: 8-K" in msg.get_content()


class TestEmailNotifier:
    """Test EmailNotifier.notify()."""

    def test_notify_sends_over_ssl(self, notifier, record):
        """Test that the alert is sent after logging in over SMTP_SSL."""
        with patch("smtplib.SMTP_SSL") as mock_smtp_class:
            server = MagicMock()
            mock_smtp_class.return_value.__enter__.return_value = server

            notifier.notify(record)

            mock_smtp_class.assert_called_once_with("smtp.test", 465, timeout=30.0)
            server.login.assert_called_once_with("alerts@example.com", "app-password")
            sent = server.send_message.call_args.args[0]
            assert sent["Subject"] == "AAPL | New SEC filing"

    def test_smtp_failure_raises_notification_error(self, notifier, record):
        """Test that an SMTP error becomes a NotificationError."""
        with patch("smtplib.SMTP_SSL") as mock_smtp_class:
            server = MagicMock()
            server.login.side_effect = smtplib.SMTPAuthenticationError(535, b"bad credentials")
            mock_smtp_class.return_value.__enter__.return_value = server

            with pytest.raises(NotificationError, match="000119312524000123"):
                notifier.notify(record)

    def test_connection_failure_raises_notification_error(self, notifier, record):
        """Test that a refused connection becomes a NotificationError."""
        with patch("smtplib.SMTP_SSL", side_effect=ConnectionRefusedError("refused")):
            with pytest.raises(NotificationError):
                notifier.notify(record)
