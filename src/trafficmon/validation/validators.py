"""
Validation functions for configuration values and query arguments.
"""

from datetime import date
from typing import Any, List, Optional, Sequence

from .exceptions import ValidationError


def validate_positive_integer(
    value: Any,
    min_value: int = 1,
    max_value: Optional[int] = None,
    field_name: str = "value"
) -> int:
    """
    Validate that a value is an integer within bounds.

    Args:
        value: Value to validate
        min_value: Minimum allowed value (inclusive)
        max_value: Maximum allowed value (inclusive), None for no limit
        field_name: Name of the field being validated

    Returns:
        Validated integer value

    Raises:
        ValidationError: If validation fails
    """
    if isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a valid integer, got {value}",
            field_name=field_name,
            value=value
        )
    try:
        int_value = int(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"{field_name} must be a valid integer, got {value}",
            field_name=field_name,
            value=value
        )
    if int_value < min_value:
        raise ValidationError(
            f"{field_name} must be >= {min_value}, got {int_value}",
            field_name=field_name,
            value=value
        )
    if max_value is not None and int_value > max_value:
        raise ValidationError(
            f"{field_name} must be <= {max_value}, got {int_value}",
            field_name=field_name,
            value=value
        )
    return int_value


def validate_positive_float(
    value: Any,
    min_value: float = 0.0,
    max_value: Optional[float] = None,
    field_name: str = "value"
) -> float:
    """
    Validate that a value is a number within bounds.

    Args:
        value: Value to validate
        min_value: Minimum allowed value (inclusive)
        max_value: Maximum allowed value (inclusive), None for no limit
        field_name: Name of the field being validated

    Returns:
        Validated float value

    Raises:
        ValidationError: If validation fails
    """
    if isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a valid number, got {value}",
            field_name=field_name,
            value=value
        )
    try:
        float_value = float(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"{field_name} must be a valid number, got {value}",
            field_name=field_name,
            value=value
        )
    if float_value < min_value:
        raise ValidationError(
            f"{field_name} must be >= {min_value}, got {float_value}",
            field_name=field_name,
            value=value
        )
    if max_value is not None and float_value > max_value:
        raise ValidationError(
            f"{field_name} must be <= {max_value}, got {float_value}",
            field_name=field_name,
            value=value
        )
    return float_value


def validate_enum_choice(
    value: Any,
    valid_choices: Sequence[str],
    field_name: str = "value",
) -> str:
    """
    Validate that a value is one of a fixed set of strings.

    Raises:
        ValidationError: If value is not one of valid_choices
    """
    if value not in valid_choices:
        raise ValidationError(
            f"{field_name} must be one of {list(valid_choices)}, got {value!r}",
            field_name=field_name,
            value=value
        )
    return value


def validate_string_list(value: Any, field_name: str = "value") -> List[str]:
    """Validate that a value is a list of strings (may be empty)."""
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValidationError(
            f"{field_name} must be a list of strings, got {value!r}",
            field_name=field_name,
            value=value
        )
    return list(value)


def validate_iso_week(iso_year: Any, iso_week: Any) -> date:
    """
    Validate an ISO-8601 year/week pair.

    Returns:
        The Monday that starts the week

    Raises:
        ValidationError: If the week does not exist in that ISO year
    """
    year = validate_positive_integer(iso_year, min_value=1, max_value=9999, field_name="iso_year")
    week = validate_positive_integer(iso_week, min_value=1, max_value=53, field_name="iso_week")
    try:
        return date.fromisocalendar(year, week, 1)
    except ValueError as e:
        raise ValidationError(
            f"ISO week {year}-W{week:02d} does not exist: {e}",
            field_name="iso_week",
            value=iso_week
        )


def validate_year_month(year: Any, month: Any) -> date:
    """
    Validate a calendar year/month pair.

    Returns:
        The first day of the month
    """
    y = validate_positive_integer(year, min_value=1, max_value=9999, field_name="year")
    m = validate_positive_integer(month, min_value=1, max_value=12, field_name="month")
    return date(y, m, 1)
