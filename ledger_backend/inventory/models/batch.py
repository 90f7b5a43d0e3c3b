# inventory/models/batch.py

"""
BATCH (LOT-BASED INVENTORY)

Represents ONE cost-bearing lot of a product at a warehouse.

CANONICAL MODEL:
- quantity_initial and unit_cost are immutable after creation
- quantity_current is mutated ONLY via inventory services and never increases
- is_exhausted is ALWAYS derived (quantity_current == 0), never user-controlled
- batch_number is unique within a tenant
- Non-deletable once referenced by a Movement (audit safety)
"""

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q
from django.utils import timezone

from catalog.models import Product, Supplier, Tenant, Warehouse


class Batch(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    tenant = models.ForeignKey(
        Tenant,
        on_delete=models.PROTECT,
        related_name="batches",
    )

    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name="batches",
    )

    warehouse = models.ForeignKey(
        Warehouse,
        on_delete=models.PROTECT,
        related_name="batches",
    )

    supplier = models.ForeignKey(
        Supplier,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="batches",
    )

    batch_number = models.CharField(
        max_length=128,
        help_text="Lot reference (unique per tenant)",
    )

    quantity_initial = models.DecimalField(
        max_digits=14,
        decimal_places=3,
        help_text="Quantity at creation (immutable)",
    )

    quantity_current = models.DecimalField(
        max_digits=14,
        decimal_places=3,
        help_text="Remaining quantity (service-managed only)",
    )

    unit_cost = models.DecimalField(
        max_digits=14,
        decimal_places=4,
        help_text="Unit cost of this lot (immutable)",
    )

    received_at = models.DateTimeField(default=timezone.now)
    expires_at = models.DateField(null=True, blank=True)

    # Derived: only the ledger services write it
    is_exhausted = models.BooleanField(default=False)

    # Free-form provenance (audit-surplus lots carry {"audit_id": ...})
    metadata = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["received_at", "created_at", "id"]
        indexes = [
            models.Index(
                fields=["tenant", "product", "warehouse", "is_exhausted"],
                name="batch_fifo_lookup_idx",
            ),
            models.Index(fields=["tenant", "expires_at"], name="batch_tenant_expiry_idx"),
            models.Index(fields=["received_at"], name="batch_received_at_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["tenant", "batch_number"],
                name="uniq_batch_number_per_tenant",
            ),
            models.CheckConstraint(
                condition=Q(quantity_initial__gt=0),
                name="chk_batch_qty_initial_gt_zero",
            ),
            models.CheckConstraint(
                condition=Q(quantity_current__gte=0),
                name="chk_batch_qty_current_gte_zero",
            ),
            models.CheckConstraint(
                condition=Q(quantity_current__lte=F("quantity_initial")),
                name="chk_batch_current_lte_initial",
            ),
            models.CheckConstraint(
                condition=Q(unit_cost__gte=0),
                name="chk_batch_unit_cost_gte_zero",
            ),
        ]

    # -------------------------------------------------
    # VALIDATION
    # -------------------------------------------------

    def clean(self):
        if self.quantity_initial is None or self.quantity_initial <= 0:
            raise ValidationError(
                {"quantity_initial": "quantity_initial must be greater than zero"}
            )

        if self.quantity_current is None or self.quantity_current < 0:
            raise ValidationError(
                {"quantity_current": "quantity_current cannot be negative"}
            )

        if self.quantity_current > self.quantity_initial:
            raise ValidationError(
                {"quantity_current": "quantity_current cannot exceed quantity_initial"}
            )

        if self.unit_cost is None or self.unit_cost < Decimal("0"):
            raise ValidationError({"unit_cost": "unit_cost cannot be negative"})

        if not (self.batch_number or "").strip():
            raise ValidationError({"batch_number": "batch_number is required"})

        if self.product_id and self.tenant_id:
            if self.product.tenant_id != self.tenant_id:
                raise ValidationError({"product": "Batch.product must belong to Batch.tenant"})

        if self.warehouse_id and self.tenant_id:
            if self.warehouse.tenant_id != self.tenant_id:
                raise ValidationError({"warehouse": "Batch.warehouse must belong to Batch.tenant"})

    # -------------------------------------------------
    # IMMUTABILITY + DERIVED STATE
    # -------------------------------------------------

    def save(self, *args, **kwargs):
        if not self._state.adding:
            original = Batch.objects.only(
                "quantity_initial", "quantity_current", "unit_cost"
            ).get(pk=self.pk)

            if self.quantity_initial != original.quantity_initial:
                raise ValidationError({"quantity_initial": "quantity_initial is immutable"})

            if self.unit_cost != original.unit_cost:
                raise ValidationError({"unit_cost": "unit_cost is immutable"})

            if self.quantity_current > original.quantity_current:
                raise ValidationError(
                    {"quantity_current": "quantity_current can only decrease"}
                )

        # is_exhausted is ALWAYS derived
        self.is_exhausted = (self.quantity_current or 0) == 0

        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "is_exhausted" not in update_fields:
            kwargs["update_fields"] = list(update_fields) + ["is_exhausted"]

        self.full_clean()
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        """
        Audit safety: once a batch has movements, it must never be deleted.
        """
        from inventory.models.movement import Movement

        if Movement.objects.filter(batch=self).exists():
            raise ValidationError("Cannot delete Batch: it has Movement audit history.")
        return super().delete(*args, **kwargs)

    # -------------------------------------------------
    # READ-ONLY HELPERS
    # -------------------------------------------------

    @property
    def remaining_value(self) -> Decimal:
        return (self.quantity_current or Decimal("0")) * (self.unit_cost or Decimal("0"))

    def __str__(self):
        product_name = getattr(self.product, "name", "Product")
        warehouse_name = getattr(self.warehouse, "name", "Warehouse")
        return f"{warehouse_name} | {product_name} | Batch {self.batch_number}"
