"""Queued email model for the email_queue collection."""

from enum import Enum
from typing import Any, ClassVar

from pydantic import Field, model_validator

from reminderplus.models.base import BaseModel, utc_now_iso

DEFAULT_SUBJECT = "Reminder"
DEFAULT_BODY = ""
MISSING_TO_ERROR = "Missing 'to' field"


class EmailStatus(str, Enum):
    """Delivery status of a queued email."""

    PENDING = "pending"
    SENT = "sent"
    ERROR = "error"


class QueuedEmail(BaseModel):
    """One outbound email written by the mobile app, plus its delivery status.

    The app creates the record; the queue worker writes exactly one terminal
    status back onto it. Attribute names are camelCase because the app reads
    them directly.

    Key Pattern:
        PK: EMAIL_QUEUE#{id}
        SK: META
    """

    _pk_prefix: ClassVar[str] = "EMAIL_QUEUE#"
    _sk_prefix: ClassVar[str] = "META"

    to: str | None = Field(None, description="Recipient address")
    subject: str | None = Field(None, description="Subject line, defaults to 'Reminder' on send")
    body: str | None = Field(None, description="Plain text body, defaults to empty on send")
    # Plain str: the app may write statuses this worker does not know about
    status: str = Field(default=EmailStatus.PENDING.value, description="Delivery status")
    error: str | None = Field(None, description="Failure description when status is error")
    created_at: str = Field(default_factory=utc_now_iso, alias="createdAt")
    sent_at: str | None = Field(None, alias="sentAt")
    updated_at: str | None = Field(None, alias="updatedAt")

    @model_validator(mode="before")
    @classmethod
    def _id_from_key(cls, data: Any) -> Any:
        """Recover the document id from PK when the writer did not store it."""
        if isinstance(data, dict) and not data.get("id") and data.get("PK"):
            doc_id = cls.id_from_pk(data["PK"])
            if doc_id:
                data = {**data, "id": doc_id}
        return data

    @classmethod
    def id_from_pk(cls, pk: str) -> str | None:
        """Extract the document id from a partition key, or None for other items."""
        if not pk.startswith(cls._pk_prefix):
            return None
        return pk[len(cls._pk_prefix):] or None

    @classmethod
    def build_keys(cls, doc_id: str) -> dict[str, str]:
        """Build the primary key for a document id."""
        return {"PK": f"{cls._pk_prefix}{doc_id}", "SK": cls._sk_prefix}

    def get_pk(self) -> str:
        """Get partition key: EMAIL_QUEUE#{id}."""
        return f"{self._pk_prefix}{self.id}"

    def get_sk(self) -> str:
        """Get sort key: META."""
        return self._sk_prefix

    @property
    def is_terminal(self) -> bool:
        """Whether the worker has already written a final status."""
        return self.status in (EmailStatus.SENT.value, EmailStatus.ERROR.value)
