# purchases/services/receiving_service.py


"""
======================================================
PATH: purchases/services/receiving_service.py
======================================================
GOODS RECEIPT SERVICE

Receive goods against a PurchaseOrder atomically:

Canonical flow:
1) Lock order
2) Validate status (ORDERED / PARTIAL) + every line's product is on the order
   (all checks happen BEFORE any write)
3) Per line: inbound receiver (Batch + IN movement, reference PURCHASE_ORDER)
   and quantity_received accumulation
4) Derive order status (RECEIVED / PARTIAL / unchanged)
5) Create ONE AccountPayable for the receipt total
   (sum of qty * unit_cost * (1 + order line tax_rate))

Everything runs inside one ledger_transaction; any failure rolls back
batches, movements, order lines and the payable together.
"""

from __future__ import annotations

import logging
import uuid
from decimal import Decimal

from django.utils import timezone

from catalog.models import Product, Warehouse
from common.conf import ledger_settings
from common.exceptions import (
    InvalidQuantityError,
    InvalidStateError,
    LedgerValidationError,
    ProductNotOnOrderError,
)
from common.numbers import ZERO, money, to_cost, to_quantity
from common.tenancy import get_for_tenant
from inventory.models import Movement
from inventory.services.intake import receive_inbound
from inventory.services.unit_of_work import ledger_transaction
from payables.services.payable_service import create_payable
from purchases.models import PurchaseOrder
from purchases.services.order_service import get_order

logger = logging.getLogger(__name__)


def receipt_batch_number(order_number: str, index: int) -> str:
    return f"{order_number}-B{index + 1:02d}-{uuid.uuid4().hex[:6].upper()}"


def _product_key(value) -> str:
    return str(getattr(value, "id", value))


def receive_goods(
    tenant,
    user,
    order_id,
    *,
    warehouse,
    lines,
    invoice_number: str | None = None,
    notes: str = "",
) -> dict:
    """
    lines: iterable of dicts
        {"product": <Product|id>, "quantity": ..., "unit_cost": ...,
         "batch_number": optional, "expires_at": optional}
    """
    lines = list(lines or [])
    if not lines:
        raise LedgerValidationError("At least one line is required")

    with ledger_transaction(tenant, user) as ctx:
        order = get_order(tenant, order_id, lock=True)

        if order.status not in PurchaseOrder.RECEIVABLE_STATUSES:
            raise InvalidStateError(
                f"Goods can only be received for ORDERED or PARTIAL orders. Current status: {order.status}",
                status=order.status,
            )

        warehouse = get_for_tenant(Warehouse, tenant, warehouse)

        items_by_product = {
            str(item.product_id): item
            for item in order.items.select_for_update(of=("self",)).select_related("product")
        }

        # Validate every line before the first write
        prepared = []
        for line in lines:
            key = _product_key(line.get("product") or line.get("product_id"))
            item = items_by_product.get(key)
            if item is None:
                raise ProductNotOnOrderError(
                    f"Product {key} is not on purchase order {order.order_number}",
                    product_id=key,
                    order_id=str(order.id),
                )
            qty = to_quantity(line.get("quantity"))
            if qty <= ZERO:
                raise InvalidQuantityError("quantity must be greater than zero", product_id=key)
            prepared.append((line, item, qty, to_cost(line.get("unit_cost"))))

        movement_ids = []
        batch_ids = []
        receipt_total = ZERO

        for index, (line, item, qty, unit_cost) in enumerate(prepared):
            product: Product = item.product

            receipt = receive_inbound(
                ctx,
                product=product,
                warehouse=warehouse,
                quantity=qty,
                unit_cost=unit_cost,
                batch_number=(line.get("batch_number") or "").strip()
                or receipt_batch_number(order.order_number, index),
                expires_at=line.get("expires_at"),
                supplier=order.supplier,
                reference_type=Movement.ReferenceType.PURCHASE_ORDER,
                reference_id=order.id,
                notes=notes or f"Receipt of order {order.order_number}",
            )
            batch_ids.append(str(receipt.batch.id))
            movement_ids.append(str(receipt.movement.id))

            item.quantity_received = item.quantity_received + qty
            item.save(update_fields=["quantity_received"])

            line_subtotal = qty * unit_cost
            receipt_total += line_subtotal + line_subtotal * Decimal(item.tax_rate or 0)

        items = list(items_by_product.values())
        if all(i.is_fully_received for i in items):
            order.status = PurchaseOrder.Status.RECEIVED
            order.received_at = timezone.now()
        elif any(i.quantity_received > ZERO for i in items):
            order.status = PurchaseOrder.Status.PARTIAL
        order.save(update_fields=["status", "received_at", "updated_at"])

        payable = create_payable(
            ctx,
            supplier=order.supplier,
            purchase_order=order,
            amount=money(receipt_total),
            invoice_number=invoice_number,
            currency=order.currency,
            # 0 is treated like an unset term
            payment_term_days=order.payment_term_days or ledger_settings.DEFAULT_PAYMENT_TERM_DAYS,
            notes=f"Generated from order {order.order_number}",
        )

    logger.info(
        "Goods received",
        extra={
            "tenant_id": str(ctx.tenant_id),
            "order_id": str(order.id),
            "order_number": order.order_number,
            "status": order.status,
            "batches_created": len(batch_ids),
            "payable_id": str(payable.id),
        },
    )

    return {
        "order": {
            "id": str(order.id),
            "order_number": order.order_number,
            "status": order.status,
        },
        "batches_created": len(batch_ids),
        "movements_created": len(movement_ids),
        "batch_ids": batch_ids,
        "movement_ids": movement_ids,
        "payable": {
            "id": str(payable.id),
            "total_amount": str(payable.total_amount),
            "due_date": payable.due_date.isoformat(),
            "status": payable.status,
        },
    }
