# inventory/models/movement.py

"""
CANONICAL INVENTORY LEDGER

Immutable inventory ledger entry. One row per batch touched.

GUARANTEES:
- Append-only (no updates, no deletes)
- quantity is a positive magnitude; direction carries the sign
- movement_type / direction compatibility checked against TYPE_DIRECTIONS
- stock_after = stock_before + signed_quantity (batch-scoped)
- total_cost = quantity * unit_cost (cost precision)
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from catalog.models import Product, Tenant, Warehouse
from common.numbers import line_cost

from .batch import Batch


class Movement(models.Model):
    class MovementType(models.TextChoices):
        IN = "IN", "Stock In"
        OUT = "OUT", "Stock Out"
        TRANSFER = "TRANSFER", "Transfer"
        AUDIT = "AUDIT", "Audit Adjustment"
        SALE = "SALE", "Sale"
        CONSUME = "CONSUME", "Internal Consumption"

    class Direction(models.TextChoices):
        IN = "IN", "In"
        OUT = "OUT", "Out"

    class ReferenceType(models.TextChoices):
        PURCHASE_ORDER = "PURCHASE_ORDER", "Purchase Order"
        MOVEMENT = "MOVEMENT", "Movement"
        AUDIT = "AUDIT", "Inventory Audit"
        SALE = "SALE", "Sale"
        CONSUME = "CONSUME", "Consumption"
        TRANSFER = "TRANSFER", "Transfer"
        ADJUSTMENT = "ADJUSTMENT", "Adjustment"
        MANUAL = "MANUAL", "Manual"

    # Exhaustive: every MovementType must appear here.
    TYPE_DIRECTIONS = {
        MovementType.IN: frozenset({Direction.IN}),
        MovementType.OUT: frozenset({Direction.OUT}),
        MovementType.SALE: frozenset({Direction.OUT}),
        MovementType.CONSUME: frozenset({Direction.OUT}),
        MovementType.TRANSFER: frozenset({Direction.IN, Direction.OUT}),
        MovementType.AUDIT: frozenset({Direction.IN, Direction.OUT}),
    }

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    tenant = models.ForeignKey(
        Tenant, on_delete=models.PROTECT, related_name="movements"
    )

    movement_type = models.CharField(max_length=10, choices=MovementType.choices)
    direction = models.CharField(max_length=3, choices=Direction.choices)

    product = models.ForeignKey(
        Product, on_delete=models.PROTECT, related_name="movements"
    )
    batch = models.ForeignKey(
        Batch, on_delete=models.PROTECT, related_name="movements"
    )

    quantity = models.DecimalField(max_digits=14, decimal_places=3)
    stock_before = models.DecimalField(max_digits=14, decimal_places=3)
    stock_after = models.DecimalField(max_digits=14, decimal_places=3)

    unit_cost = models.DecimalField(max_digits=14, decimal_places=4)
    total_cost = models.DecimalField(max_digits=18, decimal_places=4)

    origin_warehouse = models.ForeignKey(
        Warehouse,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="outgoing_movements",
    )
    destination_warehouse = models.ForeignKey(
        Warehouse,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="incoming_movements",
    )

    # Outbound destination outside the warehouse network (customer, room, ...)
    destination_type = models.CharField(max_length=50, blank=True, default="")
    destination_ref = models.CharField(max_length=255, blank=True, default="")

    reference_type = models.CharField(
        max_length=20, choices=ReferenceType.choices, blank=True, default=""
    )
    reference_id = models.CharField(max_length=64, blank=True, default="")

    performed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="inventory_movements",
    )

    notes = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["tenant", "created_at"], name="movement_tenant_created_idx"),
            models.Index(fields=["tenant", "movement_type"], name="movement_tenant_type_idx"),
            models.Index(fields=["product", "created_at"], name="movement_product_created_idx"),
            models.Index(fields=["batch", "created_at"], name="movement_batch_created_idx"),
            models.Index(fields=["reference_type", "reference_id"], name="movement_reference_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name="chk_movement_quantity_gt_zero",
            ),
        ]

    # -------------------------------------------------
    # DERIVED
    # -------------------------------------------------

    @property
    def signed_quantity(self) -> Decimal:
        if self.direction == self.Direction.IN:
            return self.quantity
        if self.direction == self.Direction.OUT:
            return -self.quantity
        raise ValidationError(f"Unknown movement direction: {self.direction}")

    @classmethod
    def allowed_directions(cls, movement_type) -> frozenset:
        try:
            return cls.TYPE_DIRECTIONS[movement_type]
        except KeyError:
            raise ValidationError(f"Unknown movement type: {movement_type}")

    # -------------------------------------------------
    # VALIDATION
    # -------------------------------------------------

    def clean(self):
        if self.quantity is None or self.quantity <= 0:
            raise ValidationError("quantity must be greater than zero")

        if self.direction not in self.allowed_directions(self.movement_type):
            raise ValidationError(
                f"{self.movement_type} does not allow direction={self.direction}"
            )

        if self.stock_after != self.stock_before + self.signed_quantity:
            raise ValidationError("stock_after must equal stock_before + signed quantity")

        if self.stock_after < 0:
            raise ValidationError("stock_after cannot be negative")

        if self.total_cost != line_cost(self.quantity, self.unit_cost):
            raise ValidationError("total_cost must equal quantity * unit_cost")

        if self.batch_id:
            batch_vals = (
                Batch.objects.filter(id=self.batch_id)
                .values("product_id", "tenant_id")
                .first()
            )
            if batch_vals and batch_vals["product_id"] != self.product_id:
                raise ValidationError("Batch does not belong to product")
            if batch_vals and batch_vals["tenant_id"] != self.tenant_id:
                raise ValidationError("Batch does not belong to tenant")

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Movement records are immutable")

        if self.total_cost is None and self.quantity is not None and self.unit_cost is not None:
            self.total_cost = line_cost(self.quantity, self.unit_cost)

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Movement records are immutable and cannot be deleted")

    def __str__(self):
        product_name = getattr(self.product, "name", "Product")
        return f"{product_name} | {self.movement_type}/{self.direction} | {self.quantity}"
