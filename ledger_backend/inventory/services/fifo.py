# inventory/services/fifo.py

"""
FIFO STOCK ENGINE

Purpose:
- Consume stock oldest-first (received_at, then created_at, then id).
- One OUT-direction Movement per batch touched, valued at that batch's cost.
- Outbound registration (sale / consumption / adjustment) on top of the engine.

Concurrency:
- Candidate batches are locked with SELECT ... FOR UPDATE before availability
  is computed. Two concurrent consumers of the same product+warehouse serialize
  on the lock; the second sees the first one's decrements.

HARD RULES:
- quantity must be > 0
- strict mode (default): insufficient stock raises BEFORE any write
- allow_shortfall=True consumes what exists and reports the gap
  (used only by the audit deficit path)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal

from django.core.exceptions import ValidationError

from catalog.models import Product, Warehouse
from common.exceptions import InsufficientStockError, InvalidQuantityError, LedgerValidationError
from common.numbers import ZERO, line_cost, to_quantity
from common.tenancy import get_for_tenant
from inventory.models import Batch, Movement

from .unit_of_work import LedgerContext, ledger_transaction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConsumptionRecord:
    batch_id: object
    batch_number: str
    quantity: Decimal
    stock_before: Decimal
    stock_after: Decimal
    unit_cost: Decimal
    total_cost: Decimal
    movement_id: object

    def as_dict(self) -> dict:
        return {
            "batch_id": str(self.batch_id),
            "batch_number": self.batch_number,
            "quantity": str(self.quantity),
            "stock_before": str(self.stock_before),
            "stock_after": str(self.stock_after),
            "unit_cost": str(self.unit_cost),
            "total_cost": str(self.total_cost),
            "movement_id": str(self.movement_id),
        }


@dataclass
class FifoConsumption:
    requested: Decimal
    records: list[ConsumptionRecord] = field(default_factory=list)
    movements: list[Movement] = field(default_factory=list)

    @property
    def total_quantity(self) -> Decimal:
        return sum((r.quantity for r in self.records), ZERO)

    @property
    def total_cost(self) -> Decimal:
        return sum((r.total_cost for r in self.records), ZERO)

    @property
    def shortfall(self) -> Decimal:
        return self.requested - self.total_quantity

    @property
    def batches_affected(self) -> int:
        return len(self.records)


def _locked_candidates(ctx: LedgerContext, *, product, warehouse) -> list[Batch]:
    """
    Canonical batch query for consumption (tenant + product + warehouse),
    oldest first, locked for the rest of the unit of work.
    """
    return list(
        Batch.objects.using(ctx.using)
        .select_for_update()
        .filter(
            tenant_id=ctx.tenant_id,
            product=product,
            warehouse=warehouse,
            is_exhausted=False,
            quantity_current__gt=0,
        )
        .order_by("received_at", "created_at", "id")
    )


# ============================================================
# FIFO CONSUMPTION
# ============================================================

def consume_fifo(
    ctx: LedgerContext,
    *,
    product,
    warehouse,
    quantity,
    movement_type=Movement.MovementType.OUT,
    reference_type: str = "",
    reference_id=None,
    destination_warehouse=None,
    destination_type: str | None = None,
    destination_ref: str | None = None,
    notes: str = "",
    allow_shortfall: bool = False,
) -> FifoConsumption:
    """
    Consume `quantity` of `product` at `warehouse` oldest-batch-first.

    Returns a FifoConsumption whose records are in consumption order.
    """
    ctx.require_atomic()

    if Movement.Direction.OUT not in Movement.allowed_directions(movement_type):
        raise LedgerValidationError(
            f"{movement_type} movements cannot consume stock", movement_type=movement_type
        )

    qty = to_quantity(quantity)
    if qty <= ZERO:
        raise InvalidQuantityError("quantity must be greater than zero", quantity=qty)

    batches = _locked_candidates(ctx, product=product, warehouse=warehouse)
    total_available = sum((b.quantity_current for b in batches), ZERO)

    if total_available < qty and not allow_shortfall:
        raise InsufficientStockError(
            f"Insufficient stock for {getattr(product, 'name', 'product')}. "
            f"Requested: {qty}, Available: {total_available}",
            requested=qty,
            available=total_available,
        )

    result = FifoConsumption(requested=qty)
    remaining = qty

    for batch in batches:
        if remaining <= ZERO:
            break

        before = batch.quantity_current
        consumed = min(remaining, before)
        after = before - consumed

        batch.quantity_current = after
        batch.save(using=ctx.using, update_fields=["quantity_current"])

        movement = Movement(
            tenant_id=ctx.tenant_id,
            movement_type=movement_type,
            direction=Movement.Direction.OUT,
            product=product,
            batch=batch,
            quantity=consumed,
            stock_before=before,
            stock_after=after,
            unit_cost=batch.unit_cost,
            total_cost=line_cost(consumed, batch.unit_cost),
            origin_warehouse=warehouse,
            destination_warehouse=destination_warehouse,
            destination_type=destination_type or "",
            destination_ref=destination_ref or "",
            reference_type=reference_type or "",
            reference_id=str(reference_id) if reference_id else "",
            performed_by=ctx.user,
            notes=notes or "",
        )
        try:
            movement.save(using=ctx.using)
        except ValidationError as exc:
            raise LedgerValidationError.from_model_error(exc) from exc

        result.movements.append(movement)
        result.records.append(
            ConsumptionRecord(
                batch_id=batch.id,
                batch_number=batch.batch_number,
                quantity=consumed,
                stock_before=before,
                stock_after=after,
                unit_cost=batch.unit_cost,
                total_cost=movement.total_cost,
                movement_id=movement.id,
            )
        )

        remaining -= consumed

    logger.info(
        "FIFO consumption",
        extra={
            "tenant_id": str(ctx.tenant_id),
            "product_id": str(product.id),
            "warehouse_id": str(warehouse.id),
            "movement_type": str(movement_type),
            "requested": str(qty),
            "consumed": str(result.total_quantity),
            "batches": result.batches_affected,
        },
    )

    return result


# ============================================================
# OUTBOUND REGISTRATION
# ============================================================

class OutboundReason:
    SALE = "SALE"
    CONSUME = "CONSUME"
    TRANSFER = "TRANSFER"
    ADJUSTMENT = "ADJUSTMENT"
    OTHER = "OTHER"

    CHOICES = [
        (SALE, "Sale"),
        (CONSUME, "Internal Consumption"),
        (TRANSFER, "Transfer"),
        (ADJUSTMENT, "Adjustment"),
        (OTHER, "Other"),
    ]


# Exhaustive: every OutboundReason must appear here.
REASON_TO_MOVEMENT = {
    OutboundReason.SALE: Movement.MovementType.SALE,
    OutboundReason.CONSUME: Movement.MovementType.CONSUME,
    OutboundReason.TRANSFER: Movement.MovementType.TRANSFER,
    OutboundReason.ADJUSTMENT: Movement.MovementType.AUDIT,
    OutboundReason.OTHER: Movement.MovementType.OUT,
}

REASON_TO_REFERENCE = {
    OutboundReason.SALE: Movement.ReferenceType.SALE,
    OutboundReason.CONSUME: Movement.ReferenceType.CONSUME,
    OutboundReason.TRANSFER: Movement.ReferenceType.TRANSFER,
    OutboundReason.ADJUSTMENT: Movement.ReferenceType.ADJUSTMENT,
    OutboundReason.OTHER: Movement.ReferenceType.MANUAL,
}


def movement_type_for_reason(reason: str):
    try:
        return REASON_TO_MOVEMENT[reason]
    except KeyError:
        raise LedgerValidationError(f"Unknown outbound reason: {reason}", reason=reason)


def register_outbound(
    tenant,
    user,
    *,
    product,
    warehouse,
    quantity,
    reason: str,
    destination_type: str | None = None,
    destination_ref: str | None = None,
    reference_id=None,
    notes: str = "",
) -> dict:
    """
    Register an outbound movement (sale, consumption, adjustment, ...).

    Strict FIFO: insufficient stock rejects the whole request.
    """
    movement_type = movement_type_for_reason(reason)

    with ledger_transaction(tenant, user) as ctx:
        product = get_for_tenant(Product, tenant, product)
        warehouse = get_for_tenant(Warehouse, tenant, warehouse)

        consumption = consume_fifo(
            ctx,
            product=product,
            warehouse=warehouse,
            quantity=quantity,
            movement_type=movement_type,
            reference_type=REASON_TO_REFERENCE[reason],
            reference_id=reference_id,
            destination_type=destination_type,
            destination_ref=destination_ref,
            notes=notes,
        )

    logger.info(
        "Outbound registered",
        extra={
            "tenant_id": str(ctx.tenant_id),
            "product_id": str(product.id),
            "reason": reason,
            "quantity": str(consumption.total_quantity),
        },
    )

    return {
        "product_id": str(product.id),
        "warehouse_id": str(warehouse.id),
        "movement_type": str(movement_type),
        "total_quantity": str(consumption.total_quantity),
        "total_cost": str(consumption.total_cost),
        "batches_affected": consumption.batches_affected,
        "movements": [r.as_dict() for r in consumption.records],
    }
