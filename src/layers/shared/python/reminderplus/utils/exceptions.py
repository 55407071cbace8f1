"""Custom exception classes for Reminder Plus."""


class ReminderPlusError(Exception):
    """Base exception for all Reminder Plus errors."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict | None = None,
    ):
        """Initialize ReminderPlusError.

        Args:
            message: Human-readable error message.
            error_code: Machine-readable error code.
            details: Additional error details.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or "INTERNAL_ERROR"
        self.details = details or {}


class NotFoundError(ReminderPlusError):
    """Raised when a requested record is not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        message: str | None = None,
    ):
        """Initialize NotFoundError.

        Args:
            resource_type: Type of resource (e.g., "QueuedEmail").
            resource_id: ID of the resource that was not found.
            message: Optional custom message.
        """
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(
            message=message or f"{resource_type} with ID '{resource_id}' not found",
            error_code="NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class ValidationError(ReminderPlusError):
    """Raised when a queued record is missing a required field."""

    def __init__(self, message: str = "Validation failed", field: str | None = None):
        """Initialize ValidationError."""
        self.field = field
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details={"field": field} if field else None,
        )


class ConflictError(ReminderPlusError):
    """Raised when a record already exists or is no longer in the expected state."""

    def __init__(self, message: str = "Resource conflict"):
        """Initialize ConflictError."""
        super().__init__(message=message, error_code="CONFLICT")


class AlreadyTerminatedError(ConflictError):
    """Raised when a queued email already carries a terminal status."""

    def __init__(self, doc_id: str):
        """Initialize AlreadyTerminatedError."""
        self.doc_id = doc_id
        super().__init__(f"Queued email '{doc_id}' is no longer pending")


class ConfigurationError(ReminderPlusError):
    """Raised when delivery credentials are incomplete or malformed."""

    def __init__(self, message: str, missing: list[str] | None = None):
        """Initialize ConfigurationError.

        Args:
            message: Error message.
            missing: Names of the settings that were not provided.
        """
        self.missing = missing or []
        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details={"missing": self.missing} if self.missing else None,
        )


class DeliveryError(ReminderPlusError):
    """Raised when the mail transport fails to send a message."""

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize DeliveryError.

        Args:
            message: Human-readable description of the failure.
            original_error: The transport exception that caused the failure.
        """
        self.original_error = original_error
        super().__init__(
            message=message,
            error_code="DELIVERY_ERROR",
            details={
                "original_error": type(original_error).__name__,
            } if original_error else None,
        )


def describe_error(exc: BaseException) -> str:
    """Render an exception as '<Kind>: <message>'.

    Falls back to the bare class name when the exception carries no message.
    """
    kind = type(exc).__name__
    message = str(exc)
    if not message:
        return kind
    return f"{kind}: {message}"
