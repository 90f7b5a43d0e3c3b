# common/numbers.py

"""
Decimal normalizers shared by the ledger services.

HARD RULES:
- Quantities are Decimal with 3 places (fractional units allowed: kg, litres).
- Unit costs carry 4 places; money totals (payables, order totals) carry 2.
- total_cost on a movement is quantity * unit_cost quantized to COST_PLACES.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from common.exceptions import LedgerValidationError

QTY_PLACES = Decimal("0.001")
COST_PLACES = Decimal("0.0001")
TWOPLACES = Decimal("0.01")

ZERO = Decimal("0")


def _to_decimal(value, *, field_name: str) -> Decimal:
    if value is None or value == "" or value == "null":
        raise LedgerValidationError(f"{field_name} is required")
    if isinstance(value, bool):
        raise LedgerValidationError(f"{field_name} must be a number")
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise LedgerValidationError(f"{field_name} must be a valid decimal") from exc


def to_quantity(value, *, field_name: str = "quantity") -> Decimal:
    return _to_decimal(value, field_name=field_name).quantize(
        QTY_PLACES, rounding=ROUND_HALF_UP
    )


def to_cost(value, *, field_name: str = "unit_cost") -> Decimal:
    return _to_decimal(value, field_name=field_name).quantize(
        COST_PLACES, rounding=ROUND_HALF_UP
    )


def money(value) -> Decimal:
    return Decimal(str(value or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def line_cost(quantity: Decimal, unit_cost: Decimal) -> Decimal:
    """quantity x unit_cost at cost precision (movement total_cost)."""
    return (Decimal(quantity) * Decimal(unit_cost)).quantize(
        COST_PLACES, rounding=ROUND_HALF_UP
    )
