"""Pydantic models for Reminder Plus entities."""

from reminderplus.models.base import BaseModel, generate_ulid, utc_now, utc_now_iso
from reminderplus.models.queued_email import (
    DEFAULT_BODY,
    DEFAULT_SUBJECT,
    MISSING_TO_ERROR,
    EmailStatus,
    QueuedEmail,
)
from reminderplus.models.smtp_config import SmtpConfig, load_smtp_config
