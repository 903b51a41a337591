"""Outbound email over SMTP."""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr

from authapi.config import Settings
from authapi.errors import DeliveryError

logger = logging.getLogger(__name__)


class EmailService:
    """Sends plain-text messages through the configured SMTP relay."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def build_message(self, to: str, subject: str, body: str) -> MIMEMultipart:
        message = MIMEMultipart()
        message["From"] = formataddr((self.settings.mail_from_name, self.settings.mail_from_email))
        message["To"] = to
        message["Subject"] = subject
        message.attach(MIMEText(body, "plain"))
        return message

    def send_email(self, to: str, subject: str, body: str) -> None:
        """
        Send a plain-text email.

        Raises DeliveryError if the relay refuses the message or cannot be reached.
        """
        message = self.build_message(to, subject, body)
        try:
            with smtplib.SMTP(self.settings.smtp_host, self.settings.smtp_port) as server:
                server.starttls()
                if self.settings.smtp_username and self.settings.smtp_password:
                    server.login(self.settings.smtp_username, self.settings.smtp_password)
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"SMTP error sending email to {to}: {e}")
            raise DeliveryError(f"Could not send email to {to}") from e

        logger.info(f"Email '{subject}' sent to {to}")
