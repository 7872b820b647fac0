import logging
import smtplib
from email.message import EmailMessage

from ..core.config import Settings

logger = logging.getLogger(__name__)


class NotificationService:
    """Sends appointment emails through the configured SMTP relay.

    Delivery is best-effort: failures are logged and never raised, so callers
    can schedule ``send_email`` as a background task after committing.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    def send_email(self, to: str, subject: str, body: str) -> bool:
        """Send a plain-text email. Returns True when the relay accepted it."""
        if not self.settings.SMTP_HOST:
            logger.info(f"SMTP not configured, skipping email to {to}: {subject}")
            return False

        message = EmailMessage()
        message["From"] = self.settings.mail_sender or "no-reply@localhost"
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)

        try:
            # One connection per message
            with smtplib.SMTP(self.settings.SMTP_HOST, self.settings.SMTP_PORT, timeout=10) as server:
                if self.settings.SMTP_USE_TLS:
                    server.starttls()
                if self.settings.SMTP_USER:
                    server.login(self.settings.SMTP_USER, self.settings.SMTP_PASSWORD or "")
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Error sending email to {to}: {e}")
            return False

        logger.info(f"Email sent to {to}: {subject}")
        return True

    def send_booking_confirmation(self, to: str, patient_name: str, time_slot: str) -> bool:
        return self.send_email(
            to,
            "Appointment Confirmation",
            f"Dear {patient_name}, your appointment is booked for {time_slot}.",
        )

    def send_cancellation_notice(self, to: str, time_slot: str) -> bool:
        return self.send_email(
            to,
            "Appointment Cancelled",
            f"Your appointment on {time_slot} was cancelled.",
        )
