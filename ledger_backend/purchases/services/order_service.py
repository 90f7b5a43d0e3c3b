# purchases/services/order_service.py

"""
======================================================
PATH: purchases/services/order_service.py
======================================================
PURCHASE ORDER LIFECYCLE

- create_purchase_order(): DRAFT header (order number generated when absent)
- add_order_item() / remove_order_item(): DRAFT only, one line per product
- recalculate_order_totals(): subtotal / tax / total from lines
- send_purchase_order(): DRAFT with >= 1 line -> ORDERED
- cancel_purchase_order(): any state before RECEIVED -> CANCELLED
"""

from __future__ import annotations

import logging
import time
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from catalog.models import Product, Supplier
from common.exceptions import InvalidQuantityError, InvalidStateError, LedgerNotFoundError, LedgerValidationError
from common.numbers import ZERO, money, to_cost, to_quantity
from common.tenancy import get_for_tenant, tenant_id_of
from purchases.models import PurchaseOrder, PurchaseOrderItem

logger = logging.getLogger(__name__)


def generate_order_number() -> str:
    year = timezone.now().year
    suffix = str(int(time.time() * 1000))[-6:]
    return f"PO-{year}-{suffix}"


def get_order(tenant, order_id, *, lock: bool = False) -> PurchaseOrder:
    qs = PurchaseOrder.objects.select_related("supplier")
    if lock:
        qs = qs.select_for_update(of=("self",))
    return get_for_tenant(PurchaseOrder, tenant, order_id, label="Purchase order", queryset=qs)


def _require_draft(order: PurchaseOrder, action: str) -> None:
    if order.status != PurchaseOrder.Status.DRAFT:
        raise InvalidStateError(
            f"Only DRAFT orders can {action}. Current status: {order.status}",
            status=order.status,
        )


@transaction.atomic
def create_purchase_order(
    tenant,
    *,
    supplier,
    order_number: str | None = None,
    expected_at=None,
    payment_term_days: int | None = None,
    currency: str = "USD",
    notes: str = "",
) -> PurchaseOrder:
    supplier = get_for_tenant(Supplier, tenant, supplier)

    number = (order_number or "").strip() or generate_order_number()
    if PurchaseOrder.objects.filter(tenant_id=tenant_id_of(tenant), order_number=number).exists():
        raise LedgerValidationError(
            f"An order with number {number} already exists", order_number=number
        )

    order = PurchaseOrder.objects.create(
        tenant_id=tenant_id_of(tenant),
        supplier=supplier,
        order_number=number,
        status=PurchaseOrder.Status.DRAFT,
        expected_at=expected_at,
        payment_term_days=payment_term_days,
        currency=currency or "USD",
        notes=notes or "",
    )

    logger.info(
        "Purchase order created",
        extra={"tenant_id": str(order.tenant_id), "order_id": str(order.id), "order_number": number},
    )
    return order


def recalculate_order_totals(order: PurchaseOrder) -> PurchaseOrder:
    subtotal = ZERO
    tax = ZERO
    for item in order.items.all():
        subtotal += item.line_subtotal
        tax += item.line_tax

    order.subtotal = money(subtotal)
    order.tax_amount = money(tax)
    order.total = money(subtotal + tax)
    order.save(update_fields=["subtotal", "tax_amount", "total", "updated_at"])
    return order


@transaction.atomic
def add_order_item(
    tenant,
    order_id,
    *,
    product,
    quantity_ordered,
    unit_price,
    discount=None,
    tax_rate=None,
    notes: str = "",
) -> PurchaseOrderItem:
    order = get_order(tenant, order_id, lock=True)
    _require_draft(order, "be modified")

    product = get_for_tenant(Product, tenant, product)

    if order.items.filter(product=product).exists():
        raise LedgerValidationError(
            "This product is already on the order. Modify the existing line instead.",
            product_id=str(product.id),
        )

    qty = to_quantity(quantity_ordered, field_name="quantity_ordered")
    if qty <= ZERO:
        raise InvalidQuantityError("quantity_ordered must be greater than zero", quantity=qty)

    price = to_cost(unit_price, field_name="unit_price")
    disc = to_cost(discount or 0, field_name="discount")
    rate = Decimal(str(tax_rate or 0)).quantize(Decimal("0.0001"))

    if price < ZERO or disc < ZERO or rate < ZERO:
        raise LedgerValidationError("unit_price, discount and tax_rate cannot be negative")

    item = PurchaseOrderItem.objects.create(
        order=order,
        product=product,
        quantity_ordered=qty,
        unit_price=price,
        discount=disc,
        tax_rate=rate,
        notes=notes or "",
    )
    recalculate_order_totals(order)

    logger.info(
        "Purchase order item added",
        extra={"order_id": str(order.id), "item_id": str(item.id), "product_id": str(product.id)},
    )
    return item


@transaction.atomic
def remove_order_item(tenant, order_id, item_id) -> dict:
    order = get_order(tenant, order_id, lock=True)
    _require_draft(order, "be modified")

    item = order.items.filter(id=item_id).first()
    if item is None:
        raise LedgerNotFoundError("Order item not found", id=str(item_id))

    item.delete()
    recalculate_order_totals(order)

    logger.info(
        "Purchase order item removed",
        extra={"order_id": str(order.id), "item_id": str(item_id)},
    )
    return {"deleted": True}


@transaction.atomic
def send_purchase_order(tenant, order_id) -> PurchaseOrder:
    order = get_order(tenant, order_id, lock=True)
    _require_draft(order, "be sent")

    if not order.items.exists():
        raise InvalidStateError("An order without items cannot be sent", status=order.status)

    order.status = PurchaseOrder.Status.ORDERED
    order.ordered_at = timezone.now()
    order.save(update_fields=["status", "ordered_at", "updated_at"])

    logger.info(
        "Purchase order sent",
        extra={"order_id": str(order.id), "order_number": order.order_number},
    )
    return order


@transaction.atomic
def cancel_purchase_order(tenant, order_id) -> PurchaseOrder:
    order = get_order(tenant, order_id, lock=True)

    if order.status in (PurchaseOrder.Status.RECEIVED, PurchaseOrder.Status.CANCELLED):
        raise InvalidStateError(
            f"A {order.status} order cannot be cancelled", status=order.status
        )

    order.status = PurchaseOrder.Status.CANCELLED
    order.save(update_fields=["status", "updated_at"])

    logger.info(
        "Purchase order cancelled",
        extra={"order_id": str(order.id), "order_number": order.order_number},
    )
    return order
