"""SMTP mail transport.

Sends single plain-text messages through an authenticated SMTP relay with
aiosmtplib. The Lambda handlers are synchronous, so each send runs its own
event loop to completion.
"""

import asyncio
from email.mime.text import MIMEText

import aiosmtplib
import structlog

from reminderplus.models.smtp_config import SmtpConfig
from reminderplus.utils.exceptions import DeliveryError, describe_error

logger = structlog.get_logger()

TRANSPORT_ERRORS = (
    aiosmtplib.SMTPException,
    asyncio.TimeoutError,
    OSError,
    ValueError,
)


class SmtpMailer:
    """Sends email through the relay described by an SmtpConfig."""

    def __init__(self, config: SmtpConfig):
        """Initialize the mailer.

        Args:
            config: Resolved SMTP settings.
        """
        self.config = config

    def build_message(
        self,
        to: str,
        subject: str,
        body: str,
        from_email: str | None = None,
    ) -> MIMEText:
        """Build a plain-text message."""
        msg = MIMEText(body, "plain", "utf-8")
        msg["From"] = from_email or self.config.user
        msg["To"] = to
        msg["Subject"] = subject
        return msg

    def send(
        self,
        to: str,
        subject: str,
        body: str,
        from_email: str | None = None,
    ) -> None:
        """Send one email.

        Args:
            to: Recipient address.
            subject: Subject line.
            body: Plain text body.
            from_email: Sender address. Defaults to the SMTP login user.

        Raises:
            DeliveryError: If the relay could not be reached or refused the message.
        """
        msg = self.build_message(to, subject, body, from_email)

        logger.info(
            "Sending email via SMTP",
            host=self.config.host,
            port=self.config.port,
            secure=self.config.secure,
            to=to,
            subject=subject[:50] + "..." if len(subject) > 50 else subject,
        )

        try:
            asyncio.run(self._send(msg))
        except TRANSPORT_ERRORS as e:
            description = describe_error(e)
            logger.error(
                "SMTP send failed",
                host=self.config.host,
                to=to,
                error=description,
            )
            raise DeliveryError(description, original_error=e) from e

    async def _send(self, msg: MIMEText):
        """Open a session, authenticate and submit the message."""
        return await aiosmtplib.send(
            msg,
            hostname=self.config.host,
            port=self.config.port,
            username=self.config.user,
            password=self.config.password,
            use_tls=self.config.secure,
            timeout=self.config.timeout,
        )
