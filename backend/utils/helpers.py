"""
General helper utilities
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

from backend.config import get_settings

settings = get_settings()

# Stored precision of stock quantities and of money amounts
QUANTITY_SCALE = 3
MONEY_SCALE = 2

Number = Union[int, float, str, Decimal]


def to_decimal(value: Number, scale: int = QUANTITY_SCALE) -> Decimal:
    """Exact decimal rounded half-up to `scale` places; floats go through their shortest repr"""
    return Decimal(str(value)).quantize(Decimal(1).scaleb(-scale), rounding=ROUND_HALF_UP)


def format_quantity(quantity: Number) -> str:
    """15.000 -> '15', 0.250 -> '0.25'"""
    return f"{Decimal(str(quantity)).normalize():f}"


def format_currency(amount: Number) -> str:
    """Format amount as Indian Rupees"""
    return f"₹{Decimal(str(amount)):,.2f}"


def reference_code(prefix: str, entity_id: Optional[int]) -> str:
    """Human-readable reference such as PO-00012"""
    if entity_id is None:
        return f"{prefix}-NEW"
    return f"{prefix}-{entity_id:05d}"


def normalize_name(name: Optional[str]) -> str:
    """Normalize a master-data name for case-insensitive matching"""
    return (name or "").strip().lower()


def line_total(
    quantity: Number,
    rate: Number,
    discount: Optional[Number] = None,
    gst: Optional[Number] = None,
    freight: Optional[Number] = None,
) -> Decimal:
    """quantity * rate, less discount %, plus GST % (18 when unset), plus flat freight"""
    if gst is None:
        gst = settings.DEFAULT_GST
    hundred = Decimal(100)
    base = Decimal(str(quantity)) * Decimal(str(rate)) * (1 - Decimal(str(discount or 0)) / hundred)
    total = base * (1 + Decimal(str(gst)) / hundred) + Decimal(str(freight or 0))
    return to_decimal(total, MONEY_SCALE)
