#!/usr/bin/env python3
"""Queue an email for the email queue worker.

Creating the record fires the stream event that sends it. Use this to
re-send a failed email: failed records are never retried, a new one has to
be queued.
"""

import argparse
import os
import sys

# Add the shared layer to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src", "layers", "shared", "python"))

from reminderplus.repositories.email_queue import EmailQueueRepository


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Queue an email")
    parser.add_argument("--to", help="Recipient address")
    parser.add_argument("--subject", help="Subject (worker defaults to 'Reminder')")
    parser.add_argument("--body", help="Plain text body")
    parser.add_argument("--requeue", metavar="DOC_ID", help="Copy to/subject/body from an existing record")
    parser.add_argument("--stage", default="dev", help="Deployment stage")
    parser.add_argument("--region", default="us-east-1", help="AWS region")
    args = parser.parse_args()

    os.environ.setdefault("AWS_DEFAULT_REGION", args.region)
    table_name = os.environ.get("TABLE_NAME") or f"reminderplus-{args.stage}"
    repo = EmailQueueRepository(table_name=table_name)

    to, subject, body = args.to, args.subject, args.body

    if args.requeue:
        original = repo.get(args.requeue)
        if not original:
            parser.error(f"No queued email with id '{args.requeue}' in {table_name}")
        print(f"Re-queueing {original.id} (status: {original.status}, error: {original.error})")
        to = to or original.to
        subject = subject or original.subject
        body = body or original.body

    if not to:
        parser.error("--to is required unless the re-queued record has a recipient")

    email = repo.enqueue(to=to, subject=subject, body=body)
    print(f"Queued email {email.id} to {to} in table {table_name}")


if __name__ == "__main__":
    main()
