"""Pytest configuration and fixtures."""

import os
import pytest
from unittest.mock import MagicMock

# Set environment variables before imports
os.environ["TABLE_NAME"] = "reminderplus-test"
os.environ["STAGE"] = "test"
os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"


@pytest.fixture
def aws_credentials():
    """Mock AWS credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


@pytest.fixture
def dynamodb_table(aws_credentials):
    """Create mocked DynamoDB table."""
    import boto3
    from moto import mock_aws

    with mock_aws():
        dynamodb = boto3.resource("dynamodb", region_name="us-east-1")

        table = dynamodb.create_table(
            TableName="reminderplus-test",
            KeySchema=[
                {"AttributeName": "PK", "KeyType": "HASH"},
                {"AttributeName": "SK", "KeyType": "RANGE"},
            ],
            AttributeDefinitions=[
                {"AttributeName": "PK", "AttributeType": "S"},
                {"AttributeName": "SK", "AttributeType": "S"},
            ],
            BillingMode="PAY_PER_REQUEST",
        )

        table.wait_until_exists()

        yield table


@pytest.fixture
def smtp_env():
    """Complete SMTP settings as the Lambda environment would provide them."""
    return {
        "SMTP_HOST": "smtp.example.com",
        "SMTP_USER": "reminders@example.com",
        "SMTP_PASS": "app-password",
    }


@pytest.fixture
def record_ref():
    """Write-back handle that records every update."""
    return MagicMock()


@pytest.fixture
def stream_event():
    """Create a DynamoDB stream event for email_queue items."""
    from boto3.dynamodb.types import TypeSerializer

    serializer = TypeSerializer()

    def _create_record(
        doc_id: str = "doc-1",
        fields: dict | None = None,
        event_name: str = "INSERT",
        sequence_number: str = "100",
        pk: str | None = None,
    ):
        item = {"PK": pk or f"EMAIL_QUEUE#{doc_id}", "SK": "META"}
        item.update(fields or {})
        return {
            "eventID": f"event-{sequence_number}",
            "eventName": event_name,
            "eventSource": "aws:dynamodb",
            "dynamodb": {
                "Keys": {
                    "PK": serializer.serialize(item["PK"]),
                    "SK": serializer.serialize("META"),
                },
                "NewImage": {k: serializer.serialize(v) for k, v in item.items()},
                "SequenceNumber": sequence_number,
                "StreamViewType": "NEW_IMAGE",
            },
        }

    def _create_event(*records):
        return {"Records": list(records)}

    _create_event.record = _create_record
    return _create_event


class LambdaContext:
    """Mock Lambda context."""

    def __init__(self):
        self.function_name = "test-function"
        self.memory_limit_in_mb = 128
        self.invoked_function_arn = "arn:aws:lambda:us-east-1:123456789:function:test"
        self.aws_request_id = "test-request-id"

    def get_remaining_time_in_millis(self):
        return 30000


@pytest.fixture
def lambda_context():
    """Create a mock Lambda context."""
    return LambdaContext()
