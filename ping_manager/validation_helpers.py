"""Validation helpers for the Ping Manager bot."""

from __future__ import annotations

from typing import Any

import voluptuous as vol

from .const import (
    MAX_DURATION_SECONDS,
    MAX_INTERVAL_MINUTES,
    MAX_THRESHOLD,
    MSG_INVALID_NUMBER,
    MSG_OUT_OF_RANGE,
)
from .exceptions import ValidationError


def whole_number(value: Any) -> Any:
    """Reject booleans and floats with a fractional part."""
    if isinstance(value, bool):
        raise vol.Invalid("expected a number, got a boolean")
    if isinstance(value, float) and not value.is_integer():
        raise vol.Invalid(f"expected a whole number, got {value}")
    return value


def bounded_int(maximum: int) -> vol.All:
    """Return a validator for a whole number from 1 to ``maximum``."""
    return vol.All(whole_number, vol.Coerce(int), vol.Range(min=1, max=maximum))


# Stored values: a timedelta and asyncio.sleep must accept them.
INTERVAL_MINUTES = bounded_int(MAX_INTERVAL_MINUTES)
DURATION_SECONDS = bounded_int(MAX_DURATION_SECONDS)
THRESHOLD_MS = bounded_int(MAX_THRESHOLD)

OPERATOR_NUMBER_SCHEMA = vol.Schema(
    vol.All(vol.Coerce(str), vol.Strip, vol.Coerce(int), vol.Range(min=1))
)


def validate_operator_number(value: Any, maximum: int) -> int:
    """Parse operator-supplied text as a whole number from 1 to ``maximum``.

    Raises:
        ValidationError: If the text is not a positive whole number, or the
            number is above ``maximum``.
    """
    try:
        number = OPERATOR_NUMBER_SCHEMA(value)
    except vol.Invalid as err:
        raise ValidationError(MSG_INVALID_NUMBER) from err
    if number > maximum:
        raise ValidationError(MSG_OUT_OF_RANGE.format(maximum=maximum))
    return number


def validate_interval(value: Any) -> int:
    """Validate an interval in minutes."""
    return validate_operator_number(value, MAX_INTERVAL_MINUTES)


def validate_duration(value: Any) -> int:
    """Validate a hold duration in seconds."""
    return validate_operator_number(value, MAX_DURATION_SECONDS)


def validate_threshold(value: Any) -> int:
    """Validate a max ping threshold in ms."""
    return validate_operator_number(value, MAX_THRESHOLD)
