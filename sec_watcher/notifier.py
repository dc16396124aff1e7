"""Alert delivery for newly detected filings."""

import logging
import smtplib
from email.message import EmailMessage
from typing import Protocol

from sec_watcher.errors import NotificationError
from sec_watcher.models import FilingRecord

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Delivers one alert per filing. Raises NotificationError on failure."""

    def notify(self, record: FilingRecord) -> None: ...


def format_alert(record: FilingRecord) -> tuple[str, str]:
    """Return the (subject, body) of the alert for ``record``."""
    subject = f"{record.ticker} | New SEC filing"
    lines = [
        f"Name: {record.registrant_name}",
        f"Ticker: {record.ticker}",
        f"Filing Date: {record.filing_date.isoformat()}",
        f"Form: {record.form_type}",
        f"Link: {record.document_link}",
    ]
    return subject, "\n".join(lines)


class EmailNotifier:
    """Send filing alerts by email over SMTP with SSL."""

    def __init__(
        self,
        recipient: str,
        sender: str,
        password: str,
        host: str = "smtp.gmail.com",
        port: int = 465,
        timeout: float = 30.0,
    ) -> None:
        self.recipient = recipient
        self.sender = sender
        self._password = password
        self.host = host
        self.port = port
        self.timeout = timeout

    def build_message(self, record: FilingRecord) -> EmailMessage:
        subject, body = format_alert(record)
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = self.recipient
        msg["Subject"] = subject
        msg.set_content(body)
        return msg

    def notify(self, record: FilingRecord) -> None:
        """
        Email an alert for ``record``.

        Raises:
            NotificationError: If the SMTP exchange fails
        """
        msg = self.build_message(record)
        try:
            with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout) as server:
                server.login(self.sender, self._password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationError(f"Failed to email alert for {record.accession_number}: {e}") from e

        logger.info("Alert emailed for %s %s (%s)", record.ticker, record.form_type, record.accession_number)
