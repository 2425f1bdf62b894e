"""Input validation shared by use cases. Failures raise domain ValidationError."""

import re
from datetime import date, datetime

from pydantic import ValidationError as PydanticValidationError

from stockroom.core.exceptions import ValidationError

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]{3,}$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PASSWORD_PATTERN = re.compile(r"^(?=.*[A-Za-z])(?=.*\d)(?=.*[@$!%*#?&])[A-Za-z\d@$!%*#?&]{8,}$")


def validation_error_from(error: PydanticValidationError) -> ValidationError:
    """Turn the first pydantic error into a domain ValidationError."""
    first = error.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ())) or "body"
    return ValidationError(
        field=field,
        message=first.get("msg", "invalid value"),
        value=first.get("input"),
    )


def validate_username(username: str) -> str:
    if not USERNAME_PATTERN.match(username or ""):
        raise ValidationError(
            "username",
            "Username must be at least 3 characters long and contain only "
            "letters, numbers, and underscores",
            username,
        )
    return username


def validate_email(email: str) -> str:
    email = (email or "").strip()
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("email", "Invalid email format", email)
    return email


def validate_password(password: str) -> str:
    # Never echo the password back in error details
    if not PASSWORD_PATTERN.match(password or ""):
        raise ValidationError(
            "password",
            "Password must be at least 8 characters long and contain at least "
            "one letter, one number, and one special character",
        )
    return password


def parse_date_bound(value: str | None, field: str) -> date | datetime | None:
    """
    Parse a date-range query parameter.

    ``YYYY-MM-DD`` stays a bare date so range helpers can widen it to the
    whole day; anything longer must be an ISO-8601 timestamp.
    """
    if value is None or not value.strip():
        return None
    value = value.strip()
    try:
        if len(value) == 10:
            return date.fromisoformat(value)
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise ValidationError(field, "Expected an ISO-8601 date or timestamp", value) from e
