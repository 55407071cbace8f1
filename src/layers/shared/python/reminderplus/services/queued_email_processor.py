"""Queued email processor.

Delivers one record from the email_queue collection and writes its terminal
status back onto the same record. Every call performs exactly one write:

- missing recipient -> status=error, error="Missing 'to' field"
- incomplete SMTP settings -> status=error, error=<configuration error>
- send succeeded -> status=sent, sentAt
- send failed -> status=error, error=<failure description>

Failures are recorded on the record rather than raised, so the stream
event is never retried for them. There is no retry of a failed send; a new
record has to be queued instead. The write-back only applies while the record
is still pending, so a redelivered record cannot overwrite an earlier outcome.
"""

from typing import Any, Callable, Mapping, Protocol

import structlog

from reminderplus.models.base import utc_now_iso
from reminderplus.models.queued_email import (
    DEFAULT_BODY,
    DEFAULT_SUBJECT,
    MISSING_TO_ERROR,
    EmailStatus,
)
from reminderplus.models.smtp_config import SmtpConfig, load_smtp_config
from reminderplus.services.smtp_mailer import SmtpMailer
from reminderplus.utils.exceptions import (
    AlreadyTerminatedError,
    ConfigurationError,
    DeliveryError,
    ValidationError,
    describe_error,
)

logger = structlog.get_logger()


class RecordRef(Protocol):
    """Write-back handle for the record that triggered the invocation."""

    def update(self, fields: dict[str, Any]) -> None:
        ...


class Mailer(Protocol):
    def send(self, to: str, subject: str, body: str, from_email: str | None = None) -> None:
        ...


class QueuedEmailProcessor:
    """Sends a queued email and records the outcome on its record."""

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        mailer_factory: Callable[[SmtpConfig], Mailer] | None = None,
    ):
        """Initialize the processor.

        Args:
            environ: Source of SMTP_* settings, read on every call.
                Defaults to os.environ.
            mailer_factory: Builds a mailer from resolved settings.
                Defaults to SmtpMailer.
        """
        self.environ = environ
        self.mailer_factory = mailer_factory or SmtpMailer

    def process(self, data: dict[str, Any] | None, ref: RecordRef) -> EmailStatus | None:
        """Deliver one queued email and write back its status.

        Args:
            data: Field values of the created record.
            ref: Handle used for the single write-back.

        Returns:
            The terminal status written to the record, or None when the
            record had already been terminated by an earlier delivery.
        """
        data = data or {}
        subject = data.get("subject") or DEFAULT_SUBJECT
        body = data.get("body") or DEFAULT_BODY

        try:
            to = _require_recipient(data)
        except ValidationError as e:
            logger.warning("Queued email rejected", ref=repr(ref), error=e.message)
            return self._record_error(ref, e.message)

        try:
            config = load_smtp_config(self.environ)
        except ConfigurationError as e:
            logger.error(
                "SMTP configuration incomplete",
                ref=repr(ref),
                missing=e.missing,
                error=e.message,
            )
            return self._record_error(ref, describe_error(e))

        mailer = self.mailer_factory(config)

        try:
            mailer.send(to=to, subject=subject, body=body, from_email=config.user)
        except DeliveryError as e:
            logger.warning("Queued email delivery failed", ref=repr(ref), to=to, error=e.message)
            return self._record_error(ref, e.message)
        except Exception as e:
            logger.exception("Unexpected error sending queued email", ref=repr(ref), to=to)
            return self._record_error(ref, describe_error(e))

        now = utc_now_iso()
        written = self._write(ref, {
            "status": EmailStatus.SENT.value,
            "sentAt": now,
            "updatedAt": now,
        })
        if written is None:
            return None

        logger.info("Queued email sent", ref=repr(ref), to=to)

        return EmailStatus.SENT

    def _record_error(self, ref: RecordRef, message: str) -> EmailStatus | None:
        """Write the error status onto the record."""
        return self._write(ref, {
            "status": EmailStatus.ERROR.value,
            "error": message,
            "updatedAt": utc_now_iso(),
        })

    def _write(self, ref: RecordRef, fields: dict[str, Any]) -> EmailStatus | None:
        """Apply the write-back, or return None if another delivery already finished the record."""
        try:
            ref.update(fields)
        except AlreadyTerminatedError:
            logger.warning(
                "Queued email already terminated",
                ref=repr(ref),
                status=fields["status"],
            )
            return None
        return EmailStatus(fields["status"])


def _require_recipient(data: dict[str, Any]) -> str:
    """Return the record's recipient or raise ValidationError."""
    to = data.get("to")
    if not to:
        raise ValidationError(MISSING_TO_ERROR, field="to")
    return to
