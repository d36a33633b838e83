"""
Validation functions for query inputs and configuration values.
"""

import re
from typing import Any, Iterable, List, Optional

from .exceptions import ValidationError

# Device indexes ("0"), UUIDs ("GPU-fd189414-...", "MIG-...") and PCI bus ids
# ("00000000:07:00.0") are all single tokens without commas or whitespace.
_SELECTOR_PATTERN = re.compile(r'^[^\s,]+$')


def validate_positive_float(
    value: Any,
    min_value: float = 0.0,
    max_value: Optional[float] = None,
    field_name: str = "value"
) -> float:
    """
    Validate that a value is a float within the given bounds.

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
    choices: List[str],
    field_name: str = "value",
    case_sensitive: bool = True
) -> str:
    """
    Validate that a value is one of the allowed choices.

    Returns:
        The matching choice, in the casing used by ``choices``.

    Raises:
        ValidationError: If value is not in choices
    """
    str_value = str(value)

    if case_sensitive:
        if str_value not in choices:
            raise ValidationError(
                f"{field_name} must be one of {choices}, got {value}",
                field_name=field_name,
                value=value
            )
        return str_value

    lower_choices = [choice.lower() for choice in choices]
    lower_value = str_value.lower()
    if lower_value not in lower_choices:
        raise ValidationError(
            f"{field_name} must be one of {choices}, got {value}",
            field_name=field_name,
            value=value
        )
    return choices[lower_choices.index(lower_value)]


def validate_executable_name(value: Any, field_name: str = "binary") -> str:
    """
    Validate an executable name or path.

    The name is not resolved here; a missing binary surfaces when the query
    actually runs.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(
            f"{field_name} must be a non-empty string",
            field_name=field_name,
            value=value
        )
    return value.strip()


def validate_device_selectors(
    selectors: Iterable[Any], field_name: str = "selectors"
) -> List[str]:
    """
    Validate device selectors (indexes or UUIDs) passed to ``-i``.

    Each selector must be a non-empty token with no commas or whitespace,
    since the selectors are joined with commas into a single argument.

    Returns:
        The selectors as a list of strings, in the given order.

    Raises:
        ValidationError: If any selector is malformed
    """
    validated = []
    for i, selector in enumerate(selectors):
        if isinstance(selector, bool) or not isinstance(selector, (str, int)):
            raise ValidationError(
                f"{field_name} item {i} must be a string or integer, got {selector!r}",
                field_name=field_name,
                value=selector
            )
        token = str(selector)
        if not _SELECTOR_PATTERN.match(token):
            raise ValidationError(
                f"{field_name} item {i} must be a non-empty token without commas "
                f"or whitespace, got {token!r}",
                field_name=field_name,
                value=selector
            )
        validated.append(token)
    return validated
