"""Repository classes for DynamoDB data access."""

from reminderplus.repositories.base import BaseRepository
from reminderplus.repositories.email_queue import EmailQueueRepository, QueuedEmailRef

__all__ = [
    "BaseRepository",
    "EmailQueueRepository",
    "QueuedEmailRef",
]
