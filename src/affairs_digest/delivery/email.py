"""Email delivery over SMTP."""

import logging
import smtplib
from dataclasses import dataclass, field
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formatdate
from typing import Callable, Optional

from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from affairs_digest.config import Config, get_config

logger = logging.getLogger(__name__)

# Connection-level failures worth another attempt when retries are enabled
TRANSIENT_ERRORS = (smtplib.SMTPServerDisconnected, smtplib.SMTPConnectError, ConnectionError)


@dataclass
class DeliveryResult:
    """Result of email delivery attempt."""

    success: bool
    recipients: list[str] = field(default_factory=list)
    error: Optional[str] = None
    attempts: int = 1


class EmailDelivery:
    """Email delivery service using an SMTP relay."""

    def __init__(
        self,
        config: Optional[Config] = None,
        smtp_factory: Callable[..., smtplib.SMTP] = smtplib.SMTP,
    ):
        self.config = config or get_config()
        self.smtp = self.config.smtp
        self.sender = self.config.email.sender
        self.smtp_factory = smtp_factory

    def build_message(
        self,
        recipients: list[str],
        subject: str,
        html_content: str,
        text_content: str,
    ) -> MIMEMultipart:
        """Build a multipart message with a plain-text fallback."""
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.sender or ""
        msg["To"] = ", ".join(recipients)
        msg["Date"] = formatdate(localtime=True)

        # Clients render the last alternative they support, so HTML goes last
        msg.attach(MIMEText(text_content, "plain", "utf-8"))
        msg.attach(MIMEText(html_content, "html", "utf-8"))
        return msg

    def _send_message(self, msg: MIMEMultipart, recipients: list[str]) -> None:
        username = self.smtp.username or self.sender

        logger.info(f"Connecting to {self.smtp.host}:{self.smtp.port}")
        with self.smtp_factory(self.smtp.host, self.smtp.port) as server:
            if self.smtp.starttls:
                server.starttls()
            if username and self.smtp.password:
                server.login(username, self.smtp.password)
            server.send_message(msg, from_addr=self.sender, to_addrs=recipients)

    def send(
        self,
        subject: str,
        html_content: str,
        text_content: str,
        recipients: Optional[list[str]] = None,
    ) -> DeliveryResult:
        """Send one message to all recipients.

        Args:
            subject: Email subject
            html_content: HTML body
            text_content: Plain text body
            recipients: Optional list of recipients (uses config if not provided)

        Returns:
            DeliveryResult with success status
        """
        if recipients is None:
            recipients = self.config.email.recipient_list

        if not recipients:
            logger.warning("No recipients configured for email delivery")
            return DeliveryResult(success=False, error="No recipients configured")

        if not self.sender:
            logger.error("Sender address not configured")
            return DeliveryResult(
                success=False, recipients=recipients, error="Sender address not configured"
            )

        msg = self.build_message(recipients, subject, html_content, text_content)
        retrying = Retrying(
            retry=retry_if_exception_type(TRANSIENT_ERRORS),
            stop=stop_after_attempt(max(1, self.smtp.max_attempts)),
            wait=wait_exponential(multiplier=1, min=1, max=4),
            reraise=True,
        )

        attempts = 0
        try:
            for attempt in retrying:
                with attempt:
                    attempts += 1
                    self._send_message(msg, recipients)

        except smtplib.SMTPAuthenticationError as e:
            logger.error(f"SMTP authentication failed for {self.sender}: {e}")
            return DeliveryResult(
                success=False, recipients=recipients, error=str(e), attempts=attempts
            )

        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {', '.join(recipients)}: {e}")
            return DeliveryResult(
                success=False, recipients=recipients, error=str(e), attempts=attempts
            )

        logger.info(f"Current affairs email sent successfully to {', '.join(recipients)}")
        return DeliveryResult(success=True, recipients=recipients, attempts=attempts)
