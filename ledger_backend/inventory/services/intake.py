# inventory/services/intake.py

"""
======================================================
PATH: inventory/services/intake.py
======================================================
INBOUND RECEIVER

Purpose:
- Canonical stock intake: create ONE Batch + ONE IN-direction Movement.
- register_inbound(): API-facing wrapper that resolves tenant-scoped ids and,
  when requested, creates an account payable for quantity * unit_cost.

Rules:
- quantity > 0, unit_cost >= 0
- batch_number is unique per tenant (generated as B-<timestamp>-<RANDOM> when absent)
- Movement: stock_before = 0, stock_after = quantity (batch-scoped)
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from catalog.models import Product, Supplier, Warehouse
from common.exceptions import DuplicateBatchNumberError, InvalidQuantityError, LedgerValidationError
from common.numbers import ZERO, line_cost, to_cost, to_quantity
from common.tenancy import get_for_tenant
from inventory.models import Batch, Movement
from payables.services.payable_service import create_payable as create_account_payable

from .unit_of_work import LedgerContext, ledger_transaction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InboundReceipt:
    batch: Batch
    movement: Movement


def generate_batch_number() -> str:
    return f"B-{int(time.time() * 1000)}-{uuid.uuid4().hex[:4].upper()}"


def batch_number_exists(ctx: LedgerContext, batch_number: str) -> bool:
    return (
        Batch.objects.using(ctx.using)
        .filter(tenant_id=ctx.tenant_id, batch_number=batch_number)
        .exists()
    )


def receive_inbound(
    ctx: LedgerContext,
    *,
    product,
    warehouse,
    quantity,
    unit_cost,
    batch_number: str | None = None,
    expires_at=None,
    supplier=None,
    received_at=None,
    movement_type=Movement.MovementType.IN,
    reference_type: str = "",
    reference_id=None,
    origin_warehouse=None,
    notes: str = "",
    metadata: dict | None = None,
) -> InboundReceipt:
    """
    Create a batch and its opening IN-direction movement.

    No other writes happen here; callers (goods receipt, transfers, audits)
    compose this inside their own unit of work.
    """
    ctx.require_atomic()

    if Movement.Direction.IN not in Movement.allowed_directions(movement_type):
        raise LedgerValidationError(
            f"{movement_type} movements cannot receive stock", movement_type=movement_type
        )

    qty = to_quantity(quantity)
    if qty <= ZERO:
        raise InvalidQuantityError("quantity must be greater than zero", quantity=qty)

    cost = to_cost(unit_cost)
    if cost < ZERO:
        raise LedgerValidationError("unit_cost cannot be negative", unit_cost=cost)

    bn = (batch_number or "").strip() or generate_batch_number()
    if batch_number_exists(ctx, bn):
        raise DuplicateBatchNumberError(
            f"A batch with number {bn} already exists", batch_number=bn
        )

    batch = Batch(
        tenant_id=ctx.tenant_id,
        product=product,
        warehouse=warehouse,
        supplier=supplier,
        batch_number=bn,
        quantity_initial=qty,
        quantity_current=qty,
        unit_cost=cost,
        received_at=received_at or timezone.now(),
        expires_at=expires_at,
        metadata=metadata or {},
    )
    try:
        with transaction.atomic(using=ctx.using):
            batch.save(using=ctx.using)
    except ValidationError as exc:
        if batch_number_exists(ctx, bn):
            raise DuplicateBatchNumberError(
                f"A batch with number {bn} already exists", batch_number=bn
            ) from exc
        raise LedgerValidationError.from_model_error(exc) from exc
    except IntegrityError as exc:
        # concurrent insert of the same number won the unique constraint
        raise DuplicateBatchNumberError(
            f"A batch with number {bn} already exists", batch_number=bn
        ) from exc

    movement = Movement(
        tenant_id=ctx.tenant_id,
        movement_type=movement_type,
        direction=Movement.Direction.IN,
        product=product,
        batch=batch,
        quantity=qty,
        stock_before=ZERO,
        stock_after=qty,
        unit_cost=cost,
        total_cost=line_cost(qty, cost),
        origin_warehouse=origin_warehouse,
        destination_warehouse=warehouse,
        reference_type=reference_type or "",
        reference_id=str(reference_id) if reference_id else "",
        performed_by=ctx.user,
        notes=notes or "",
    )
    try:
        movement.save(using=ctx.using)
    except ValidationError as exc:
        raise LedgerValidationError.from_model_error(exc) from exc

    logger.info(
        "Inbound received",
        extra={
            "tenant_id": str(ctx.tenant_id),
            "batch_id": str(batch.id),
            "batch_number": bn,
            "product_id": str(product.id),
            "warehouse_id": str(warehouse.id),
            "quantity": str(qty),
            "movement_type": str(movement_type),
        },
    )

    return InboundReceipt(batch=batch, movement=movement)


def register_inbound(
    tenant,
    user,
    *,
    product,
    warehouse,
    quantity,
    unit_cost,
    batch_number: str | None = None,
    expires_at=None,
    supplier=None,
    notes: str = "",
    create_payable: bool = False,
    invoice_number: str | None = None,
    payment_term_days: int | None = None,
    issue_date=None,
) -> dict:
    """
    Direct stock entry (no purchase order).

    Creates Batch + Movement and, when create_payable is set and a supplier is
    given, one AccountPayable for quantity * unit_cost. All-or-nothing.
    """
    with ledger_transaction(tenant, user) as ctx:
        product = get_for_tenant(Product, tenant, product)
        warehouse = get_for_tenant(Warehouse, tenant, warehouse)
        if supplier is not None:
            supplier = get_for_tenant(Supplier, tenant, supplier)

        receipt = receive_inbound(
            ctx,
            product=product,
            warehouse=warehouse,
            quantity=quantity,
            unit_cost=unit_cost,
            batch_number=batch_number,
            expires_at=expires_at,
            supplier=supplier,
            reference_type=Movement.ReferenceType.MANUAL,
            notes=notes,
        )

        payable = None
        if create_payable and supplier is not None:
            payable = create_account_payable(
                ctx,
                supplier=supplier,
                amount=receipt.movement.total_cost,
                invoice_number=invoice_number,
                issue_date=issue_date,
                payment_term_days=payment_term_days,
                notes=f"Generated from inbound: {notes}" if notes else "Generated from manual inbound",
            )

    batch = receipt.batch
    return {
        "batch": {
            "id": str(batch.id),
            "batch_number": batch.batch_number,
            "quantity": str(batch.quantity_initial),
            "unit_cost": str(batch.unit_cost),
            "expires_at": batch.expires_at.isoformat() if batch.expires_at else None,
        },
        "movement": {
            "id": str(receipt.movement.id),
            "movement_type": receipt.movement.movement_type,
            "quantity": str(receipt.movement.quantity),
            "total_cost": str(receipt.movement.total_cost),
        },
        "payable": (
            {
                "id": str(payable.id),
                "total_amount": str(payable.total_amount),
                "due_date": payable.due_date.isoformat(),
                "status": payable.status,
            }
            if payable is not None
            else None
        ),
    }
