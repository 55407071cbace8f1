"""Email queue worker.

Handles DynamoDB stream events for the email_queue collection. Each newly
inserted QueuedEmail is sent once over SMTP and its status written back.
Updates and deletes are ignored so a record is never processed twice.
"""

from typing import Any

import structlog

from reminderplus.models.queued_email import EmailStatus, QueuedEmail
from reminderplus.repositories.email_queue import EmailQueueRepository
from reminderplus.services.queued_email_processor import QueuedEmailProcessor

logger = structlog.get_logger()


def handler(event: dict[str, Any], context: Any) -> dict:
    """Process DynamoDB stream events for queued emails.

    Delivery, validation and configuration failures are recorded on the
    record itself. Only unexpected failures (such as the write-back itself
    failing) are reported as batch item failures, and processing stops at
    the first of them.

    Args:
        event: DynamoDB stream event.
        context: Lambda context.

    Returns:
        Processing summary with batch item failures for partial retry.
    """
    records = event.get("Records", [])

    logger.info("Processing email queue stream", record_count=len(records))

    repo = EmailQueueRepository()
    processor = QueuedEmailProcessor()

    counts = {"processed": 0, "sent": 0, "failed": 0, "skipped": 0}
    batch_item_failures = []

    for index, record in enumerate(records):
        try:
            status = process_stream_record(record, processor, repo)
        except Exception as e:
            logger.exception(
                "Failed to process stream record",
                event_id=record.get("eventID"),
                error=str(e),
                unattempted=len(records) - index - 1,
            )
            sequence_number = record.get("dynamodb", {}).get("SequenceNumber")
            if sequence_number:
                batch_item_failures.append({"itemIdentifier": sequence_number})
            # The stream resumes from the first reported failure and redelivers
            # every later record, so nothing after it may be processed here.
            break

        if status is None:
            counts["skipped"] += 1
            continue

        counts["processed"] += 1
        if status == EmailStatus.SENT:
            counts["sent"] += 1
        else:
            counts["failed"] += 1

    logger.info("Email queue stream processed", **counts, errors=len(batch_item_failures))

    return {**counts, "batchItemFailures": batch_item_failures}


def process_stream_record(
    record: dict,
    processor: QueuedEmailProcessor,
    repo: EmailQueueRepository,
) -> EmailStatus | None:
    """Process a single DynamoDB stream record.

    Args:
        record: Stream record.
        processor: Processor that sends the email and writes back the status.
        repo: Repository used to build the record's write-back handle.

    Returns:
        Terminal status written, or None if the record was skipped.
    """
    if record.get("eventName") != "INSERT":
        return None

    new_image = record.get("dynamodb", {}).get("NewImage", {})
    if not new_image:
        return None

    data = _deserialize_image(new_image)

    doc_id = QueuedEmail.id_from_pk(data.get("PK", ""))
    if not doc_id:
        return None

    # Restored or copied items can arrive already terminated
    if data.get("status") in (EmailStatus.SENT.value, EmailStatus.ERROR.value):
        logger.info("Skipping terminated queued email", doc_id=doc_id, status=data["status"])
        return None

    logger.info("Processing queued email", doc_id=doc_id)

    return processor.process(data, repo.ref(doc_id))


def _deserialize_image(image: dict) -> dict:
    """Deserialize DynamoDB image to regular dict.

    Args:
        image: DynamoDB attribute value format.

    Returns:
        Regular Python dict.
    """
    from boto3.dynamodb.types import TypeDeserializer

    deserializer = TypeDeserializer()
    return {k: deserializer.deserialize(v) for k, v in image.items()}
