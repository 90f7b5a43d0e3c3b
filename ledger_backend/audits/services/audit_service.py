# audits/services/audit_service.py

"""
======================================================
PATH: audits/services/audit_service.py
======================================================
AUDIT RECONCILIATION ENGINE

create_audit()       snapshot every active product's warehouse stock
update_audit_item()  record a physical count (PENDING -> IN_PROGRESS)
close_audit()        post AUDIT movements for every counted, non-zero variance
cancel_audit()       PENDING / IN_PROGRESS -> CANCELLED

Close rules:
- Surplus  : ONE new batch AUDIT-<code>-<sku> (metadata.audit_id) + AUDIT/IN movement
- Deficit  : FIFO consumption with allow_shortfall=True; an unabsorbed
             remainder is logged as a warning and stored on the item
             (unadjusted_quantity). The audit still closes.
- Valuation: latest unit cost of the product in the tenant (newest batch with
             stock); 0 when there is none (logged as a warning).
- Uncounted items are skipped and stay is_adjusted=False.
"""

from __future__ import annotations

import logging
import time
import uuid
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from audits.models import InventoryAudit, InventoryAuditItem
from catalog.models import Product, Warehouse
from common.exceptions import InvalidStateError, LedgerNotFoundError, LedgerValidationError, NoActiveProductsError
from common.numbers import ZERO, line_cost, to_quantity
from common.tenancy import get_for_tenant, tenant_id_of
from inventory.models import Batch, Movement
from inventory.services.fifo import consume_fifo
from inventory.services.intake import receive_inbound
from inventory.services.queries import warehouse_stock
from inventory.services.unit_of_work import ledger_transaction

logger = logging.getLogger(__name__)


def generate_audit_code(tenant) -> str:
    code = f"AUD-{int(time.time() * 1000)}"
    if InventoryAudit.objects.filter(tenant_id=tenant_id_of(tenant), code=code).exists():
        code = f"{code}-{uuid.uuid4().hex[:4].upper()}"
    return code


def get_audit(tenant, audit_id, *, lock: bool = False) -> InventoryAudit:
    qs = InventoryAudit.objects.select_related("warehouse")
    if lock:
        qs = qs.select_for_update(of=("self",))
    return get_for_tenant(InventoryAudit, tenant, audit_id, label="Audit", queryset=qs)


def list_audits(tenant, *, warehouse=None, status: str | None = None):
    qs = InventoryAudit.objects.select_related("warehouse").filter(tenant_id=tenant_id_of(tenant))
    if warehouse is not None:
        qs = qs.filter(warehouse_id=getattr(warehouse, "id", warehouse))
    if status:
        qs = qs.filter(status=status)
    return qs.order_by("-created_at")


def _require_open(audit: InventoryAudit, action: str) -> None:
    if not audit.is_open:
        raise InvalidStateError(
            f"Cannot {action} a {audit.status} audit", status=audit.status
        )


# ============================================================
# CREATE
# ============================================================

@transaction.atomic
def create_audit(tenant, *, warehouse, name: str = "", scheduled_at=None, notes: str = "") -> InventoryAudit:
    warehouse = get_for_tenant(Warehouse, tenant, warehouse)

    products = list(
        Product.objects.filter(tenant_id=tenant_id_of(tenant), is_active=True).order_by("name")
    )
    if not products:
        raise NoActiveProductsError("There are no active products to audit")

    audit = InventoryAudit.objects.create(
        tenant_id=tenant_id_of(tenant),
        warehouse=warehouse,
        code=generate_audit_code(tenant),
        name=name or "",
        scheduled_at=scheduled_at,
        status=InventoryAudit.Status.PENDING,
        notes=notes or "",
    )

    InventoryAuditItem.objects.bulk_create(
        [
            InventoryAuditItem(
                audit=audit,
                product=product,
                system_stock=warehouse_stock(tenant, product=product, warehouse=warehouse),
            )
            for product in products
        ]
    )

    logger.info(
        "Audit created",
        extra={
            "tenant_id": str(audit.tenant_id),
            "audit_id": str(audit.id),
            "code": audit.code,
            "warehouse_id": str(warehouse.id),
            "items": len(products),
        },
    )
    return audit


# ============================================================
# COUNT
# ============================================================

@transaction.atomic
def update_audit_item(tenant, audit_id, item_id, *, counted_quantity, notes: str | None = None) -> InventoryAuditItem:
    audit = get_audit(tenant, audit_id, lock=True)
    if audit.status in (InventoryAudit.Status.COMPLETED, InventoryAudit.Status.CANCELLED):
        raise InvalidStateError(
            f"Cannot modify a {audit.status} audit", status=audit.status
        )

    item = audit.items.select_related("product").filter(id=item_id).first()
    if item is None:
        raise LedgerNotFoundError("Audit item not found", id=str(item_id))

    counted = to_quantity(counted_quantity, field_name="counted_quantity")
    if counted < ZERO:
        raise LedgerValidationError("counted_quantity cannot be negative", counted_quantity=counted)

    if audit.status == InventoryAudit.Status.PENDING:
        audit.status = InventoryAudit.Status.IN_PROGRESS
        audit.started_at = timezone.now()
        audit.save(update_fields=["status", "started_at", "updated_at"])

    item.counted_stock = counted
    item.variance = counted - item.system_stock
    if notes is not None:
        item.notes = notes
    item.save(update_fields=["counted_stock", "variance", "notes", "updated_at"])

    logger.info(
        "Audit item counted",
        extra={
            "audit_id": str(audit.id),
            "item_id": str(item.id),
            "counted": str(counted),
            "variance": str(item.variance),
        },
    )
    return item


# ============================================================
# CLOSE
# ============================================================

def latest_unit_cost(ctx, *, product) -> Decimal | None:
    """Cost of the newest batch of `product` (any warehouse) that still has stock."""
    batch = (
        Batch.objects.using(ctx.using)
        .filter(tenant_id=ctx.tenant_id, product=product, quantity_current__gt=0)
        .order_by("-received_at", "-created_at")
        .first()
    )
    return batch.unit_cost if batch is not None else None


def surplus_batch_number(audit: InventoryAudit, product) -> str:
    """
    AUDIT-<code>-<sku>, bounded to the batch number column.

    Over-long SKUs are cut and suffixed with the product id so two products
    sharing a long prefix still get distinct numbers.
    """
    limit = Batch._meta.get_field("batch_number").max_length
    number = f"AUDIT-{audit.code}-{product.sku}"
    if len(number) <= limit:
        return number

    suffix = f"-{product.id.hex[:8].upper()}"
    return number[: limit - len(suffix)] + suffix


def _post_surplus(ctx, audit: InventoryAudit, item: InventoryAuditItem, unit_cost: Decimal) -> None:
    receive_inbound(
        ctx,
        product=item.product,
        warehouse=audit.warehouse,
        quantity=item.variance,
        unit_cost=unit_cost,
        batch_number=surplus_batch_number(audit, item.product),
        movement_type=Movement.MovementType.AUDIT,
        reference_type=Movement.ReferenceType.AUDIT,
        reference_id=audit.id,
        notes=f"Surplus adjustment from audit {audit.code}",
        metadata={"audit_id": str(audit.id)},
    )


def _post_deficit(ctx, audit: InventoryAudit, item: InventoryAuditItem) -> Decimal:
    consumption = consume_fifo(
        ctx,
        product=item.product,
        warehouse=audit.warehouse,
        quantity=-item.variance,
        movement_type=Movement.MovementType.AUDIT,
        reference_type=Movement.ReferenceType.AUDIT,
        reference_id=audit.id,
        notes=f"Deficit adjustment from audit {audit.code}",
        allow_shortfall=True,
    )
    return consumption.shortfall


def close_audit(tenant, audit_id, user) -> InventoryAudit:
    with ledger_transaction(tenant, user) as ctx:
        audit = get_audit(tenant, audit_id, lock=True)
        _require_open(audit, "close")

        total_variance = ZERO
        variance_cost = ZERO

        items = audit.items.select_for_update(of=("self",)).select_related("product").order_by("product__name")
        for item in items:
            if not item.is_counted:
                continue

            variance = item.variance or ZERO
            if variance == ZERO:
                continue

            unit_cost = latest_unit_cost(ctx, product=item.product)
            if unit_cost is None:
                logger.warning(
                    "Audit valuation fell back to zero cost",
                    extra={"audit_id": str(audit.id), "product_id": str(item.product_id)},
                )
                unit_cost = ZERO

            item_variance_cost = line_cost(variance, unit_cost)

            if variance > ZERO:
                _post_surplus(ctx, audit, item, unit_cost)
            else:
                shortfall = _post_deficit(ctx, audit, item)
                if shortfall > ZERO:
                    logger.warning(
                        "Audit deficit could not be fully adjusted",
                        extra={
                            "audit_id": str(audit.id),
                            "code": audit.code,
                            "product_id": str(item.product_id),
                            "unadjusted": str(shortfall),
                        },
                    )
                    item.unadjusted_quantity = shortfall
                    note = f"Deficit not fully adjusted: {shortfall} units had no stock to consume."
                    item.notes = f"{item.notes}\n{note}".strip() if item.notes else note

            item.is_adjusted = True
            item.variance_cost = item_variance_cost
            item.save(update_fields=["is_adjusted", "variance_cost", "unadjusted_quantity", "notes", "updated_at"])

            total_variance += variance
            variance_cost += item_variance_cost

        audit.status = InventoryAudit.Status.COMPLETED
        audit.completed_at = timezone.now()
        audit.closed_by = user
        audit.total_variance = total_variance
        audit.variance_cost = variance_cost
        audit.save()

    logger.info(
        "Audit closed",
        extra={
            "tenant_id": str(audit.tenant_id),
            "audit_id": str(audit.id),
            "code": audit.code,
            "total_variance": str(total_variance),
            "variance_cost": str(variance_cost),
        },
    )
    return audit


@transaction.atomic
def cancel_audit(tenant, audit_id) -> InventoryAudit:
    audit = get_audit(tenant, audit_id, lock=True)
    _require_open(audit, "cancel")

    audit.status = InventoryAudit.Status.CANCELLED
    audit.cancelled_at = timezone.now()
    audit.save(update_fields=["status", "cancelled_at", "updated_at"])

    logger.info(
        "Audit cancelled",
        extra={"audit_id": str(audit.id), "code": audit.code},
    )
    return audit
