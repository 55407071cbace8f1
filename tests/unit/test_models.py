"""Tests for Pydantic models."""

from reminderplus.models.base import generate_ulid
from reminderplus.models.queued_email import EmailStatus, QueuedEmail


class TestBaseModel:
    """Tests for BaseModel."""

    def test_generate_ulid(self):
        """Test ULID generation."""
        ulid1 = generate_ulid()
        ulid2 = generate_ulid()

        assert len(ulid1) == 26
        assert ulid1 != ulid2


class TestQueuedEmail:
    """Tests for QueuedEmail model."""

    def test_creation_defaults(self):
        """Test a new record is pending with a generated id."""
        email = QueuedEmail(to="a@b.com")

        assert len(email.id) == 26
        assert email.status == EmailStatus.PENDING
        assert email.subject is None
        assert email.body is None
        assert email.created_at
        assert not email.is_terminal

    def test_keys(self):
        """Test key generation."""
        email = QueuedEmail(id="doc-1", to="a@b.com")

        assert email.get_pk() == "EMAIL_QUEUE#doc-1"
        assert email.get_sk() == "META"
        assert email.get_keys() == QueuedEmail.build_keys("doc-1")

    def test_serialization_uses_app_attribute_names(self):
        """Test timestamps are stored under camelCase names and None is dropped."""
        email = QueuedEmail(id="doc-1", to="a@b.com", createdAt="2026-01-01T00:00:00+00:00")

        db_item = email.to_dynamodb()

        assert db_item == {
            "id": "doc-1",
            "to": "a@b.com",
            "status": "pending",
            "createdAt": "2026-01-01T00:00:00+00:00",
        }

    def test_deserialization_from_stream_image(self):
        """Test a record written by the app without an id attribute."""
        item = {
            "PK": "EMAIL_QUEUE#doc-9",
            "SK": "META",
            "to": "a@b.com",
            "status": "sent",
            "sentAt": "2026-01-15T12:00:00+00:00",
            "updatedAt": "2026-01-15T12:00:00+00:00",
        }

        email = QueuedEmail.from_dynamodb(item)

        assert email.id == "doc-9"
        assert email.status == "sent"
        assert email.sent_at == "2026-01-15T12:00:00+00:00"
        assert email.is_terminal

    def test_error_status_is_terminal(self):
        email = QueuedEmail(to="a@b.com", status=EmailStatus.ERROR, error="Missing 'to' field")

        assert email.is_terminal

    def test_unknown_status_loads_and_is_not_terminal(self):
        """Test statuses written by other app versions do not break loading."""
        email = QueuedEmail.from_dynamodb({
            "PK": "EMAIL_QUEUE#doc-3",
            "SK": "META",
            "to": "a@b.com",
            "status": "queued",
        })

        assert email.status == "queued"
        assert not email.is_terminal

    def test_id_from_pk(self):
        assert QueuedEmail.id_from_pk("EMAIL_QUEUE#abc") == "abc"
        assert QueuedEmail.id_from_pk("EMAIL_QUEUE#") is None
        assert QueuedEmail.id_from_pk("REMINDER#abc") is None
