# inventory/services/queries.py

"""
Read-only stock queries (tenant-scoped).
"""

from __future__ import annotations

import logging
from datetime import timedelta
from decimal import Decimal

from django.db.models import Sum
from django.utils import timezone

from common.conf import ledger_settings
from common.numbers import ZERO
from common.tenancy import tenant_id_of
from inventory.models import Batch, Movement

logger = logging.getLogger(__name__)


EXPIRY_CRITICAL = "CRITICAL"
EXPIRY_WARNING = "WARNING"
EXPIRY_UPCOMING = "UPCOMING"


def available_batches(tenant, *, product, warehouse):
    return Batch.objects.filter(
        tenant_id=tenant_id_of(tenant),
        product=product,
        warehouse=warehouse,
        is_exhausted=False,
        quantity_current__gt=0,
    ).order_by("received_at", "created_at", "id")


def warehouse_stock(tenant, *, product, warehouse) -> Decimal:
    """Sum of non-exhausted batch quantities."""
    total = available_batches(tenant, product=product, warehouse=warehouse).aggregate(
        total=Sum("quantity_current")
    )["total"]
    return total if total is not None else ZERO


def product_stock(tenant, *, product, warehouse) -> dict:
    batches = list(available_batches(tenant, product=product, warehouse=warehouse))
    total = sum((b.quantity_current for b in batches), ZERO)

    return {
        "product_id": str(product.id),
        "warehouse_id": str(warehouse.id),
        "total_stock": str(total),
        "batches": [
            {
                "id": str(b.id),
                "batch_number": b.batch_number,
                "quantity": str(b.quantity_current),
                "unit_cost": str(b.unit_cost),
                "received_at": b.received_at.isoformat(),
                "expires_at": b.expires_at.isoformat() if b.expires_at else None,
            }
            for b in batches
        ],
    }


def classify_expiry(days_until_expiry: int) -> str:
    if days_until_expiry <= 0:
        return EXPIRY_CRITICAL
    if days_until_expiry <= ledger_settings.EXPIRY_WARNING_DAYS:
        return EXPIRY_WARNING
    return EXPIRY_UPCOMING


def expiring_batches(tenant, *, days_ahead: int | None = None, today=None) -> dict:
    today = today or timezone.localdate()
    if days_ahead is None:
        days_ahead = ledger_settings.EXPIRING_DAYS_AHEAD
    deadline = today + timedelta(days=int(days_ahead))

    qs = (
        Batch.objects.select_related("product", "warehouse")
        .filter(
            tenant_id=tenant_id_of(tenant),
            expires_at__isnull=False,
            expires_at__lte=deadline,
            is_exhausted=False,
            quantity_current__gt=0,
        )
        .order_by("expires_at", "received_at")
    )

    rows = []
    for b in qs:
        days = (b.expires_at - today).days
        rows.append(
            {
                "id": str(b.id),
                "batch_number": b.batch_number,
                "product_id": str(b.product_id),
                "product_name": b.product.name,
                "product_sku": b.product.sku,
                "warehouse_id": str(b.warehouse_id),
                "warehouse_name": b.warehouse.name,
                "quantity_current": str(b.quantity_current),
                "expires_at": b.expires_at.isoformat(),
                "days_until_expiry": days,
                "status": classify_expiry(days),
            }
        )

    logger.info(
        "Expiring batches computed",
        extra={"tenant_id": str(tenant_id_of(tenant)), "days_ahead": days_ahead, "count": len(rows)},
    )

    return {"count": len(rows), "batches": rows}


def movements_for_tenant(tenant):
    return (
        Movement.objects.select_related(
            "product", "batch", "origin_warehouse", "destination_warehouse", "performed_by"
        )
        .filter(tenant_id=tenant_id_of(tenant))
        .order_by("-created_at", "-id")
    )
