"""Service classes for business logic."""

from reminderplus.services.queued_email_processor import QueuedEmailProcessor
from reminderplus.services.smtp_mailer import SmtpMailer

__all__ = [
    "QueuedEmailProcessor",
    "SmtpMailer",
]
