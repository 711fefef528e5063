# notify.py
# Outbound mail: the notification sender used by reminders and password reset

import logging
import smtplib
import ssl
from email.message import EmailMessage
from typing import Optional

from config import SMTP_HOST, SMTP_PORT, EMAIL_USER, EMAIL_PASS
from exceptions import DispatchError

logger = logging.getLogger(__name__)


class SmtpSender:
    """Send plain-text mail over SMTPS (implicit TLS)."""

    def __init__(self, host: str = SMTP_HOST, port: int = SMTP_PORT,
                 user: str = EMAIL_USER, password: str = EMAIL_PASS,
                 sender: Optional[str] = None, timeout: float = 30.0):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.sender = sender or user
        self.timeout = timeout

    def build_message(self, recipient: str, subject: str, body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = recipient
        msg["Subject"] = subject
        msg.set_content(body)
        return msg

    def send(self, recipient: str, subject: str, body: str) -> None:
        """Deliver one message. Raises DispatchError on any transport failure."""
        msg = self.build_message(recipient, subject, body)
        try:
            context = ssl.create_default_context()
            with smtplib.SMTP_SSL(self.host, self.port, context=context, timeout=self.timeout) as smtp:
                if self.user:
                    smtp.login(self.user, self.password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise DispatchError(f"Could not send mail to {recipient}: {e}") from e
        logger.info(f"Mail sent to {recipient}: {subject}")
