from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ..core.exceptions import ValidationError
from .money import to_money


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required", field=field_name)
    return value.strip()


def require_id(value: Any, field_name: str) -> int:
    try:
        result = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer", field=field_name)
    if result <= 0:
        raise ValidationError(f"{field_name} must be positive", field=field_name)
    return result


def to_decimal(value: Any, field_name: str) -> Decimal:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number", field=field_name)
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a number", field=field_name)
    if not result.is_finite():
        raise ValidationError(f"{field_name} must be a number", field=field_name)
    return result


def require_positive_amount(value: Any, field_name: str = "amount") -> Decimal:
    """Money amount rounded to cents; anything that rounds to 0.00 is rejected."""
    amount = to_money(to_decimal(value, field_name))
    if amount <= 0:
        raise ValidationError(f"{field_name} must be greater than zero", field=field_name)
    return amount


def require_non_negative_amount(value: Any, field_name: str) -> Decimal:
    amount = to_decimal(value, field_name)
    if amount < 0:
        raise ValidationError(f"{field_name} cannot be negative", field=field_name)
    return amount


def require_non_negative_int(value: Optional[int], field_name: str) -> Optional[int]:
    if value is None:
        return None
    try:
        result = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer", field=field_name)
    if result < 0:
        raise ValidationError(f"{field_name} cannot be negative", field=field_name)
    return result


def require_date_range(start: date, end: date) -> None:
    if end < start:
        raise ValidationError("Period end cannot be before period start", field="pay_period_end")
