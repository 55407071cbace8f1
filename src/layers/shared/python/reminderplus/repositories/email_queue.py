"""Email queue repository for DynamoDB operations."""

from typing import Any

import structlog

from reminderplus.models.queued_email import EmailStatus, QueuedEmail
from reminderplus.repositories.base import BaseRepository
from reminderplus.utils.exceptions import AlreadyTerminatedError, ConflictError

logger = structlog.get_logger()


class EmailQueueRepository(BaseRepository[QueuedEmail]):
    """Repository for queued email records."""

    def __init__(self, table_name: str | None = None):
        """Initialize email queue repository."""
        super().__init__(QueuedEmail, table_name)

    def get(self, doc_id: str) -> QueuedEmail | None:
        """Get a queued email by document id.

        Args:
            doc_id: Document id.

        Returns:
            QueuedEmail or None if not found.
        """
        keys = QueuedEmail.build_keys(doc_id)
        return self.get_item(keys["PK"], keys["SK"])

    def enqueue(
        self,
        to: str,
        subject: str | None = None,
        body: str | None = None,
        doc_id: str | None = None,
    ) -> QueuedEmail:
        """Queue a new outbound email.

        The insert fires the stream event that the queue worker consumes.

        Args:
            to: Recipient address.
            subject: Optional subject.
            body: Optional plain text body.
            doc_id: Optional document id. A ULID is generated when omitted.

        Returns:
            The created QueuedEmail.

        Raises:
            ConflictError: If a record with this id already exists.
        """
        fields: dict[str, Any] = {"to": to, "subject": subject, "body": body}
        if doc_id:
            fields["id"] = doc_id

        email = self.create(QueuedEmail(**fields))

        logger.info("Email queued", doc_id=email.id, to=to)

        return email

    def update_fields(
        self,
        doc_id: str,
        fields: dict[str, Any],
        require_pending: bool = False,
    ) -> None:
        """Partially update a queued email.

        Args:
            doc_id: Document id.
            fields: Attributes to set, e.g. status, error, sentAt, updatedAt.
            require_pending: Only write while the record has no terminal status.

        Raises:
            NotFoundError: If the record does not exist.
            AlreadyTerminatedError: If require_pending is set and the record
                is already sent or errored.
        """
        keys = QueuedEmail.build_keys(doc_id)
        if not require_pending:
            self.update_attributes(keys["PK"], keys["SK"], fields, "QueuedEmail")
            return

        try:
            self.update_attributes(
                keys["PK"],
                keys["SK"],
                fields,
                "QueuedEmail",
                condition_expression=(
                    "attribute_not_exists(#status) OR (#status <> :sent AND #status <> :error)"
                ),
                condition_names={"#status": "status"},
                condition_values={
                    ":sent": EmailStatus.SENT.value,
                    ":error": EmailStatus.ERROR.value,
                },
            )
        except ConflictError:
            raise AlreadyTerminatedError(doc_id)

    def ref(self, doc_id: str) -> "QueuedEmailRef":
        """Get a write-back handle bound to one record."""
        return QueuedEmailRef(self, doc_id)


class QueuedEmailRef:
    """Handle that can update exactly one queued email record.

    Updates only apply while the record is still pending, so a redelivered
    stream record can never overwrite an earlier outcome.
    """

    def __init__(self, repo: EmailQueueRepository, doc_id: str):
        self.repo = repo
        self.doc_id = doc_id

    def update(self, fields: dict[str, Any]) -> None:
        """Apply a partial update to the bound record."""
        self.repo.update_fields(self.doc_id, fields, require_pending=True)

    def __repr__(self) -> str:
        return f"QueuedEmailRef(doc_id={self.doc_id!r})"
