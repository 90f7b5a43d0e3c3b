"""
Ledger configuration.

Usage in settings.py:
    LEDGER = {
        "DEFAULT_PAYMENT_TERM_DAYS": 30,
        "DUE_SOON_DAYS": 7,
        "EXPIRING_DAYS_AHEAD": 30,
        "EXPIRY_WARNING_DAYS": 7,
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class LedgerSettings:
    """Ledger configuration settings."""

    # Due date offset for payables when the order has no payment term
    DEFAULT_PAYMENT_TERM_DAYS: int = 30

    # Payables due within this window are DUE_SOON
    DUE_SOON_DAYS: int = 7

    # Default look-ahead for the expiring batches report
    EXPIRING_DAYS_AHEAD: int = 30

    # Batches expiring within this window are WARNING (<= 0 days is CRITICAL)
    EXPIRY_WARNING_DAYS: int = 7


def get_ledger_settings() -> LedgerSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "LEDGER", {})
    return LedgerSettings(**{
        k: v for k, v in user_settings.items()
        if k in LedgerSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_ledger_settings(), name)


ledger_settings = _LazySettings()
