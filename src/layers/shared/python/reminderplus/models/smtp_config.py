"""SMTP delivery credentials resolved from deployment configuration."""

import math
import os
from typing import Mapping

from pydantic import BaseModel, Field, ValidationError

from reminderplus.utils.exceptions import ConfigurationError

DEFAULT_SMTP_PORT = 465
DEFAULT_SMTP_TIMEOUT = 60.0

MISSING_CONFIG_MESSAGE = (
    "Missing SMTP config. Set SMTP_HOST, SMTP_USER and SMTP_PASS environment variables"
)

# Required setting -> environment variable
REQUIRED_SETTINGS = {
    "host": "SMTP_HOST",
    "user": "SMTP_USER",
    "password": "SMTP_PASS",
}

# Model field -> environment variable, for error messages
SETTING_VARS = {
    **REQUIRED_SETTINGS,
    "port": "SMTP_PORT",
    "secure": "SMTP_SECURE",
    "timeout": "SMTP_TIMEOUT",
}


class SmtpConfig(BaseModel):
    """Credentials and connection settings for the SMTP relay.

    Not stored in DynamoDB - resolved from the Lambda environment on every
    invocation.
    """

    host: str = Field(..., min_length=1, description="SMTP relay hostname")
    port: int = Field(DEFAULT_SMTP_PORT, gt=0, le=65535, description="SMTP relay port")
    secure: bool = Field(True, description="Connect with implicit TLS")
    user: str = Field(..., min_length=1, description="Login user, also used as sender")
    password: str = Field(..., min_length=1, repr=False, description="Login password")
    timeout: float = Field(DEFAULT_SMTP_TIMEOUT, gt=0, description="Socket timeout in seconds")


def load_smtp_config(environ: Mapping[str, str] | None = None) -> SmtpConfig:
    """Resolve SMTP settings from an environment mapping.

    Args:
        environ: Settings source. Defaults to os.environ.

    Returns:
        Validated SmtpConfig.

    Raises:
        ConfigurationError: If host, user or password is missing, or port or
            timeout is not a valid positive number (port must be a whole
            number no greater than 65535).
    """
    env = os.environ if environ is None else environ

    values = {name: _read(env, var) for name, var in REQUIRED_SETTINGS.items()}
    missing = [REQUIRED_SETTINGS[name] for name, value in values.items() if not value]
    if missing:
        raise ConfigurationError(MISSING_CONFIG_MESSAGE, missing=missing)

    port = _read(env, "SMTP_PORT")
    secure = _read(env, "SMTP_SECURE")
    timeout = _read(env, "SMTP_TIMEOUT")

    try:
        return SmtpConfig(
            host=values["host"],
            port=_parse_number(port, "SMTP_PORT", integral=True) if port else DEFAULT_SMTP_PORT,
            # Only the literal "true" enables TLS once the flag is set at all
            secure=secure.lower() == "true" if secure else True,
            user=values["user"],
            password=values["password"],
            timeout=_parse_number(timeout, "SMTP_TIMEOUT") if timeout else DEFAULT_SMTP_TIMEOUT,
        )
    except ValidationError as e:
        fields = {str(err["loc"][0]) for err in e.errors() if err["loc"]}
        names = sorted(SETTING_VARS.get(field, field) for field in fields)
        raise ConfigurationError(f"Invalid SMTP config: {', '.join(names)} out of range")


def _read(env: Mapping[str, str], name: str) -> str:
    """Read a setting, treating blank values as unset."""
    return (env.get(name) or "").strip()


def _parse_number(value: str, name: str, integral: bool = False) -> float | int:
    """Parse a numeric setting or raise ConfigurationError.

    Integral settings accept any whole-number spelling, e.g. "465" or "465.0".
    """
    try:
        number = float(value)
    except ValueError:
        raise ConfigurationError(f"Invalid SMTP config: {name} must be numeric, got '{value}'")
    if not math.isfinite(number):
        raise ConfigurationError(f"Invalid SMTP config: {name} must be numeric, got '{value}'")
    if number <= 0:
        raise ConfigurationError(f"Invalid SMTP config: {name} must be positive, got '{value}'")
    if integral:
        if not number.is_integer():
            raise ConfigurationError(
                f"Invalid SMTP config: {name} must be a whole number, got '{value}'"
            )
        return int(number)
    return number
