"""Validation helpers shared by the expense store and its collaborators."""

from __future__ import annotations

import math

from .exceptions import ValidationError


def parse_amount(raw: object, field: str = "amount") -> float:
    """Convert raw input to a finite float strictly greater than zero."""
    if raw is None or isinstance(raw, bool):
        raise ValidationError(f"{field} must be a numeric value")
    try:
        amount = float(str(raw).strip())
    except ValueError as exc:
        raise ValidationError(f"{field} must be a numeric value") from exc

    if not math.isfinite(amount):
        raise ValidationError(f"{field} must be a finite number")
    if amount <= 0:
        raise ValidationError(f"{field} must be greater than zero")
    return amount


def validate_category(value: object, field: str = "category") -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    trimmed = value.strip()
    if not trimmed:
        raise ValidationError(f"{field} cannot be empty")
    return trimmed
