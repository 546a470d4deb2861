"""
Input validation utilities
"""
from decimal import Decimal, InvalidOperation
from typing import Optional

from backend.services.errors import ValidationError
from backend.utils.helpers import Number, QUANTITY_SCALE, to_decimal

# Largest magnitude every amount column can hold
MAX_AMOUNT = Decimal(10) ** 10


def validate_name(name: Optional[str], field: str = "name") -> str:
    """Strip a master-data name and require it to be non-empty"""
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError(f"{field} is required")
    return cleaned


def _finite_decimal(value: Number, field: str, scale: int) -> Decimal:
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"{field} must be a number")
    if not number.is_finite():
        raise ValidationError(f"{field} must be a finite number")
    if abs(number) >= MAX_AMOUNT:
        raise ValidationError(f"{field} is out of range")
    return to_decimal(number, scale)


def validate_positive_quantity(
    quantity: Optional[Number], field: str = "quantity", scale: int = QUANTITY_SCALE
) -> Decimal:
    """Validate quantity is present, finite and greater than zero at stored precision"""
    if quantity is None:
        raise ValidationError(f"{field} is required")
    number = _finite_decimal(quantity, field, scale)
    if number <= 0:
        raise ValidationError(f"{field} must be greater than zero")
    return number


def validate_non_negative(value: Optional[Number], field: str, scale: int = QUANTITY_SCALE) -> Decimal:
    """Validate an amount is finite and not negative; None counts as zero"""
    if value is None:
        return to_decimal(0, scale)
    number = _finite_decimal(value, field, scale)
    if number < 0:
        raise ValidationError(f"{field} cannot be negative")
    return number


def validate_reason(reason: Optional[str]) -> str:
    """Rejections always carry a non-empty reason"""
    cleaned = (reason or "").strip()
    if not cleaned:
        raise ValidationError("A rejection reason is required")
    return cleaned
