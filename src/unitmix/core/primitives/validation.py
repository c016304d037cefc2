# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Reusable argument checks shared by the building stores.

Each helper raises `ValidationError` naming the offending field, and is
called before a store builds its new snapshot.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Type

from .exceptions import ValidationError


def validate_non_negative(value: Any, field: str) -> float:
    """
    Validate that a money or count value is a finite number >= 0.

    Returns:
        The value as a float

    Raises:
        ValidationError: If the value is not a number or is negative
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError("must be a number", field=field, value=value)
    if value != value or value in (float("inf"), float("-inf")):
        raise ValidationError("must be finite", field=field, value=value)
    if value < 0:
        raise ValidationError("must be greater than or equal to 0", field=field, value=value)
    return float(value)


def validate_count(value: Any, field: str = "count", minimum: int = 0) -> int:
    """Validate an integer quantity against a lower bound."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("must be an integer", field=field, value=value)
    if value < minimum:
        raise ValidationError(
            f"must be greater than or equal to {minimum}", field=field, value=value
        )
    return value


def validate_range(
    value: Any, field: str, minimum: int, maximum: Optional[int] = None
) -> int:
    """Validate an integer lies within [minimum, maximum]."""
    validate_count(value, field=field, minimum=minimum)
    if maximum is not None and value > maximum:
        raise ValidationError(
            f"must be less than or equal to {maximum}", field=field, value=value
        )
    return value


def validate_unit_type(value: Any, field: str = "type") -> str:
    """Validate a unit-type code is a non-blank string."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("must be a non-empty string", field=field, value=value)
    return value


def validate_choice(value: Any, choices: Type[Enum], field: str) -> Enum:
    """Validate a value names a member of `choices`; returns the member."""
    try:
        return choices(value)
    except ValueError:
        allowed = [member.value for member in choices]
        raise ValidationError(
            f"must be one of {allowed}", field=field, value=value
        ) from None
