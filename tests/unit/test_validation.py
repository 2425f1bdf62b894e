"""Tests for shared input validation helpers."""

from datetime import UTC, date, datetime

import pytest
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from stockroom.application.validation import (
    parse_date_bound,
    validate_email,
    validate_password,
    validate_username,
    validation_error_from,
)
from stockroom.core.exceptions import ValidationError


class TestParseDateBound:
    def test_bare_date_stays_a_date(self):
        assert parse_date_bound("2024-03-01", "start_date") == date(2024, 3, 1)

    def test_timestamp_with_z_suffix(self):
        parsed = parse_date_bound("2024-03-01T10:30:00Z", "end_date")
        assert parsed == datetime(2024, 3, 1, 10, 30, tzinfo=UTC)

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_is_none(self, value):
        assert parse_date_bound(value, "start_date") is None

    @pytest.mark.parametrize("value", ["yesterday", "2024-13-01", "01/03/2024"])
    def test_garbage_names_the_field(self, value):
        with pytest.raises(ValidationError) as exc_info:
            parse_date_bound(value, "start_date")
        assert exc_info.value.details["field"] == "start_date"
        assert isinstance(exc_info.value.__cause__, ValueError)


class TestValidators:
    def test_username(self):
        assert validate_username("alice_01") == "alice_01"
        with pytest.raises(ValidationError):
            validate_username("a-b")

    def test_email_is_stripped(self):
        assert validate_email("  bob@example.com ") == "bob@example.com"
        with pytest.raises(ValidationError):
            validate_email("bob@example")

    def test_password(self):
        assert validate_password("Secret12!") == "Secret12!"
        with pytest.raises(ValidationError) as exc_info:
            validate_password("secret")
        assert exc_info.value.details["value"] is None


class _Quantity(BaseModel):
    quantity: int


def test_validation_error_from_uses_first_error():
    with pytest.raises(PydanticValidationError) as exc_info:
        _Quantity(quantity="many")

    error = validation_error_from(exc_info.value)

    assert error.code == "VALIDATION_ERROR"
    assert error.details["field"] == "quantity"
    assert error.details["value"] == "many"
