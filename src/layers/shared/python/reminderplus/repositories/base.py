"""Base repository class for DynamoDB operations."""

import os
from typing import Any, Generic, TypeVar

import boto3
import structlog
from botocore.exceptions import ClientError

from reminderplus.models.base import BaseModel
from reminderplus.utils.exceptions import ConflictError, NotFoundError

logger = structlog.get_logger()

T = TypeVar("T", bound=BaseModel)


class BaseRepository(Generic[T]):
    """Base repository for DynamoDB single-table design."""

    def __init__(
        self,
        model_class: type[T],
        table_name: str | None = None,
    ):
        """Initialize repository.

        Args:
            model_class: The Pydantic model class for this repository.
            table_name: DynamoDB table name. Defaults to TABLE_NAME env var.
        """
        self.model_class = model_class
        self.table_name = table_name or os.environ.get("TABLE_NAME", "reminderplus-dev")
        self._dynamodb = None
        self._table = None

    @property
    def dynamodb(self):
        """Get DynamoDB resource (lazy initialization)."""
        if self._dynamodb is None:
            self._dynamodb = boto3.resource("dynamodb")
        return self._dynamodb

    @property
    def table(self):
        """Get DynamoDB table (lazy initialization)."""
        if self._table is None:
            self._table = self.dynamodb.Table(self.table_name)
        return self._table

    def _build_key(self, pk: str, sk: str) -> dict[str, str]:
        """Build key dictionary for DynamoDB operations."""
        return {"PK": pk, "SK": sk}

    def get_item(self, pk: str, sk: str) -> T | None:
        """Get an item by its primary key.

        Args:
            pk: Partition key value.
            sk: Sort key value.

        Returns:
            Model instance or None if not found.
        """
        try:
            response = self.table.get_item(Key=self._build_key(pk, sk))
            item = response.get("Item")

            if not item:
                return None

            return self.model_class.from_dynamodb(item)

        except ClientError as e:
            logger.error("DynamoDB get_item failed", error=str(e), pk=pk, sk=sk)
            raise

    def create(self, item: T) -> T:
        """Create a new item (fails if exists).

        Args:
            item: Model instance to create.

        Returns:
            The created model instance.

        Raises:
            ConflictError: If item already exists.
        """
        db_item = item.to_dynamodb()
        db_item.update(item.get_keys())

        try:
            self.table.put_item(
                Item=db_item,
                ConditionExpression="attribute_not_exists(PK)",
            )
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                raise ConflictError("Item already exists")
            logger.error("DynamoDB put_item failed", error=str(e))
            raise

        logger.debug(
            "Item created",
            pk=db_item["PK"],
            sk=db_item["SK"],
            model=self.model_class.__name__,
        )

        return item

    def update_attributes(
        self,
        pk: str,
        sk: str,
        attributes: dict[str, Any],
        resource_type: str,
        condition_expression: str | None = None,
        condition_names: dict[str, str] | None = None,
        condition_values: dict[str, Any] | None = None,
    ) -> None:
        """Set the given attributes on an existing item, leaving the rest untouched.

        Args:
            pk: Partition key value.
            sk: Sort key value.
            attributes: Attribute name to new value.
            resource_type: Resource type name for error message.
            condition_expression: Optional extra condition, ANDed with item existence.
            condition_names: Expression attribute names used by the condition.
            condition_values: Expression attribute values used by the condition.

        Raises:
            NotFoundError: If the item does not exist.
            ConflictError: If the item exists but the extra condition failed.
        """
        if not attributes:
            return

        names = dict(condition_names or {})
        values = dict(condition_values or {})
        assignments = []
        for i, (name, value) in enumerate(attributes.items()):
            names[f"#a{i}"] = name
            values[f":v{i}"] = BaseModel._serialize_value(value)
            assignments.append(f"#a{i} = :v{i}")

        condition = "attribute_exists(PK)"
        if condition_expression:
            condition = f"{condition} AND ({condition_expression})"

        try:
            self.table.update_item(
                Key=self._build_key(pk, sk),
                UpdateExpression="SET " + ", ".join(assignments),
                ConditionExpression=condition,
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
            )
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                if condition_expression and self._exists(pk, sk):
                    raise ConflictError(f"{resource_type} is not in the expected state")
                resource_id = pk.split("#", 1)[-1] if "#" in pk else pk
                raise NotFoundError(resource_type, resource_id)
            logger.error("DynamoDB update_item failed", error=str(e), pk=pk, sk=sk)
            raise

        logger.debug("Item attributes updated", pk=pk, sk=sk, attributes=sorted(attributes))

    def _exists(self, pk: str, sk: str) -> bool:
        """Check whether an item exists without deserializing it."""
        response = self.table.get_item(Key=self._build_key(pk, sk), ProjectionExpression="PK")
        return "Item" in response
