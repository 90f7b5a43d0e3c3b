# common/exceptions.py

"""
LEDGER DOMAIN ERRORS

Centralized error taxonomy for every ledger service.

- LedgerValidationError: client errors (bad input / invalid state).
  The operation is rolled back completely.
- LedgerNotFoundError: entity missing or outside the caller's tenant.
- LedgerIntegrityError: programming errors (e.g. a ledger primitive invoked
  outside its unit of work).

Every error carries a stable `code` for programmatic handling (API bodies).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any


class LedgerError(Exception):
    """Base exception for all ledger service failures."""

    code = "LEDGER_ERROR"

    def __init__(self, message: str = "", **data: Any):
        self.message = message or self.__class__.__doc__ or self.code
        self.data = data
        super().__init__(self.message)

    def as_dict(self) -> dict[str, Any]:
        return {
            "detail": self.message,
            "code": self.code,
            "data": {
                k: str(v) if isinstance(v, Decimal) else v
                for k, v in self.data.items()
            },
        }


class LedgerValidationError(LedgerError, ValueError):
    """Operation rejected; nothing was persisted."""

    code = "VALIDATION_ERROR"

    @classmethod
    def from_model_error(cls, exc) -> "LedgerValidationError":
        """Wrap a django ValidationError raised by a model's full_clean()."""
        try:
            errors = exc.message_dict
        except AttributeError:
            errors = {"__all__": list(exc.messages)}

        detail = "; ".join(
            f"{field}: {message}" if field != "__all__" else message
            for field, messages in errors.items()
            for message in messages
        )
        return cls(detail or "Invalid data", errors=errors)


class LedgerNotFoundError(LedgerError, LookupError):
    """Entity not found (or not visible to this tenant)."""

    code = "NOT_FOUND"


class LedgerIntegrityError(LedgerError):
    """Ledger primitive used incorrectly."""

    code = "INTEGRITY_ERROR"


class InvalidQuantityError(LedgerValidationError):
    """Quantity must be greater than zero."""

    code = "INVALID_QUANTITY"


class InsufficientStockError(LedgerValidationError):
    """Requested quantity exceeds available stock."""

    code = "INSUFFICIENT_STOCK"

    @property
    def requested(self) -> Decimal:
        return self.data.get("requested", Decimal("0"))

    @property
    def available(self) -> Decimal:
        return self.data.get("available", Decimal("0"))


class DuplicateBatchNumberError(LedgerValidationError):
    """Batch number already exists for this tenant."""

    code = "DUPLICATE_BATCH_NUMBER"


class SameWarehouseTransferError(LedgerValidationError):
    """Origin and destination warehouses must be different."""

    code = "SAME_WAREHOUSE"


class ProductNotOnOrderError(LedgerValidationError):
    """Product is not a line item of the purchase order."""

    code = "PRODUCT_NOT_ON_ORDER"


class InvalidStateError(LedgerValidationError):
    """Entity is not in a state that allows this operation."""

    code = "INVALID_STATE"


class NoActiveProductsError(LedgerValidationError):
    """There are no active products to audit."""

    code = "NO_ACTIVE_PRODUCTS"


class PaymentExceedsBalanceError(LedgerValidationError):
    """Payment amount exceeds the outstanding balance."""

    code = "PAYMENT_EXCEEDS_BALANCE"
