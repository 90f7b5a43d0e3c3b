# purchases/models.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from catalog.models import Product, Supplier, Tenant
from common.numbers import money


class PurchaseOrder(models.Model):
    """
    Purchase order header.

    Lifecycle (services only):
        DRAFT -> ORDERED -> PARTIAL -> RECEIVED
        DRAFT / ORDERED / PARTIAL -> CANCELLED

    Receiving is performed by purchases.services.receiving_service:
    - creates Batch + IN movement per received line
    - accumulates quantity_received
    - creates ONE AccountPayable per receipt
    """

    class Status(models.TextChoices):
        DRAFT = "DRAFT", "Draft"
        ORDERED = "ORDERED", "Ordered"
        PARTIAL = "PARTIAL", "Partially Received"
        RECEIVED = "RECEIVED", "Received"
        CANCELLED = "CANCELLED", "Cancelled"

    RECEIVABLE_STATUSES = (Status.ORDERED, Status.PARTIAL)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    tenant = models.ForeignKey(
        Tenant,
        on_delete=models.PROTECT,
        related_name="purchase_orders",
    )

    supplier = models.ForeignKey(
        Supplier,
        on_delete=models.PROTECT,
        related_name="purchase_orders",
    )

    order_number = models.CharField(max_length=64)

    status = models.CharField(
        max_length=10, choices=Status.choices, default=Status.DRAFT
    )

    expected_at = models.DateField(null=True, blank=True)
    ordered_at = models.DateTimeField(null=True, blank=True)
    received_at = models.DateTimeField(null=True, blank=True)

    # NULL or 0 falls back to LEDGER["DEFAULT_PAYMENT_TERM_DAYS"] at receipt time
    payment_term_days = models.PositiveIntegerField(null=True, blank=True)

    # Informational only (no conversion)
    currency = models.CharField(max_length=3, default="USD")

    subtotal = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    tax_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    total = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    notes = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["tenant", "order_number"],
                name="uniq_order_number_per_tenant",
            ),
            models.CheckConstraint(
                condition=models.Q(subtotal__gte=Decimal("0.00")),
                name="purchase_order_subtotal_nonnegative",
            ),
            models.CheckConstraint(
                condition=models.Q(total__gte=Decimal("0.00")),
                name="purchase_order_total_nonnegative",
            ),
        ]
        indexes = [
            models.Index(fields=["tenant", "status"], name="po_tenant_status_idx"),
            models.Index(fields=["supplier", "created_at"], name="po_supplier_created_idx"),
        ]

    def clean(self):
        if not (self.order_number or "").strip():
            raise ValidationError({"order_number": "order_number is required"})

        if self.supplier_id and self.tenant_id and self.supplier.tenant_id != self.tenant_id:
            raise ValidationError({"supplier": "supplier must belong to the order tenant"})

        if self.status == self.Status.RECEIVED and not self.received_at:
            raise ValidationError(
                {"received_at": "received_at is required when status is RECEIVED"}
            )

    def save(self, *args, **kwargs):
        if self.order_number is not None:
            self.order_number = self.order_number.strip()

        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.order_number} ({self.status})"


class PurchaseOrderItem(models.Model):
    """
    Purchase order line. One line per product per order.

    line_total = quantity_ordered * (unit_price - discount) * (1 + tax_rate)
    quantity_received only ever accumulates.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(
        PurchaseOrder,
        on_delete=models.CASCADE,
        related_name="items",
    )
    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name="purchase_order_items",
    )

    quantity_ordered = models.DecimalField(max_digits=14, decimal_places=3)
    quantity_received = models.DecimalField(
        max_digits=14, decimal_places=3, default=Decimal("0")
    )

    unit_price = models.DecimalField(max_digits=14, decimal_places=4)
    # Per-unit discount
    discount = models.DecimalField(
        max_digits=14, decimal_places=4, default=Decimal("0")
    )
    # Fraction, e.g. 0.19
    tax_rate = models.DecimalField(
        max_digits=5, decimal_places=4, default=Decimal("0")
    )

    line_total = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    notes = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["order", "product"],
                name="uniq_order_product",
            ),
            models.CheckConstraint(
                condition=models.Q(quantity_ordered__gt=0),
                name="purchase_order_item_quantity_gt_zero",
            ),
            models.CheckConstraint(
                condition=models.Q(quantity_received__gte=0),
                name="purchase_order_item_received_nonnegative",
            ),
            models.CheckConstraint(
                condition=models.Q(unit_price__gte=Decimal("0")),
                name="purchase_order_item_unit_price_nonnegative",
            ),
        ]

    def clean(self):
        if self.discount is not None and self.unit_price is not None and self.discount > self.unit_price:
            raise ValidationError({"discount": "discount cannot exceed unit_price"})

        if self.tax_rate is not None and (self.tax_rate < 0 or self.tax_rate > 1):
            raise ValidationError({"tax_rate": "tax_rate must be a fraction between 0 and 1"})

    @property
    def line_subtotal(self) -> Decimal:
        return Decimal(self.quantity_ordered) * (Decimal(self.unit_price) - Decimal(self.discount or 0))

    @property
    def line_tax(self) -> Decimal:
        return self.line_subtotal * Decimal(self.tax_rate or 0)

    @property
    def quantity_pending(self) -> Decimal:
        pending = Decimal(self.quantity_ordered) - Decimal(self.quantity_received or 0)
        return pending if pending > 0 else Decimal("0")

    @property
    def is_fully_received(self) -> bool:
        return Decimal(self.quantity_received or 0) >= Decimal(self.quantity_ordered)

    def save(self, *args, **kwargs):
        if not self._state.adding:
            original = PurchaseOrderItem.objects.only("quantity_received").get(pk=self.pk)
            if self.quantity_received < original.quantity_received:
                raise ValidationError(
                    {"quantity_received": "quantity_received can only increase"}
                )

        self.line_total = money(self.line_subtotal + self.line_tax)
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        product_name = getattr(self.product, "name", "Product")
        return f"{product_name} x {self.quantity_ordered}"
