"""Utility functions and helpers."""

from reminderplus.utils.exceptions import (
    ReminderPlusError,
    NotFoundError,
    ValidationError,
    ConflictError,
    AlreadyTerminatedError,
    ConfigurationError,
    DeliveryError,
    describe_error,
)

__all__ = [
    # Exceptions
    "ReminderPlusError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "AlreadyTerminatedError",
    "ConfigurationError",
    "DeliveryError",
    # Helpers
    "describe_error",
]
