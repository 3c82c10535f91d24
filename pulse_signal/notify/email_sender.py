"""
PULSE SIGNAL — Verification Email Sender
SMTP delivery run in a worker thread so the event loop keeps serving.
"""
import asyncio
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from pulse_signal.config.settings import get_settings, EmailSettings
from pulse_signal.errors import EmailDeliveryError
from pulse_signal.utils.logger import get_logger

logger = get_logger("email_sender")

SUBJECT = "Verify your email address"


class EmailSender:
    """Sends verification links over SMTP."""

    def __init__(self, settings: Optional[EmailSettings] = None):
        self.settings = settings or get_settings().email
        self._sent_count = 0
        self._failed_count = 0

    @property
    def sender(self) -> str:
        return self.settings.smtp_sender or self.settings.smtp_user

    def build_message(self, to_email: str, link: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = SUBJECT
        msg["From"] = self.sender
        msg["To"] = to_email

        text = (
            "Please verify your email address by opening the link below.\n"
            f"{link}\n\n"
            "The link expires in 15 minutes."
        )
        html = f"""
        <html>
        <body>
            <p>Please verify your email address by clicking the link below.</p>
            <p><a href="{link}">Verify email</a></p>
            <p>The link expires in 15 minutes.</p>
        </body>
        </html>
        """
        msg.attach(MIMEText(text, "plain"))
        msg.attach(MIMEText(html, "html"))
        return msg

    def _deliver(self, msg: MIMEMultipart) -> None:
        with smtplib.SMTP(self.settings.smtp_host, self.settings.smtp_port) as server:
            if self.settings.smtp_starttls:
                server.starttls()
            if self.settings.smtp_user:
                server.login(self.settings.smtp_user, self.settings.smtp_password)
            server.send_message(msg)

    async def send_verification(self, to_email: str, link: str) -> None:
        """Send the verification link; raises EmailDeliveryError on failure."""
        msg = self.build_message(to_email, link)
        try:
            await asyncio.to_thread(self._deliver, msg)
        except (smtplib.SMTPException, OSError) as e:
            self._failed_count += 1
            logger.error("verification_email_failed", to=to_email, error=str(e))
            raise EmailDeliveryError() from e

        self._sent_count += 1
        logger.info("verification_email_sent", to=to_email)

    @property
    def stats(self) -> dict:
        return {"sent": self._sent_count, "failed": self._failed_count}


# Singleton
_sender: Optional[EmailSender] = None


def get_email_sender() -> EmailSender:
    global _sender
    if _sender is None:
        _sender = EmailSender()
    return _sender
