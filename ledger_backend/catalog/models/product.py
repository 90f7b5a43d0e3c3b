# catalog/models/product.py

import uuid

from django.core.exceptions import ValidationError
from django.db import models

from .tenant import Tenant


class Product(models.Model):
    """
    Represents a stock-keeping product.

    STOCK MODEL (IMPORTANT):
    - Product itself does NOT store stock
    - Stock lives in inventory.Batch
    - Stock at a warehouse = sum of quantity_current of non-exhausted batches
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    tenant = models.ForeignKey(
        Tenant,
        on_delete=models.PROTECT,
        related_name="products",
    )

    sku = models.CharField(max_length=128, db_index=True)
    name = models.CharField(max_length=255, db_index=True)

    unit_of_measure = models.CharField(max_length=20, default="unit")

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(
                fields=["tenant", "sku"],
                name="uniq_product_sku_per_tenant",
            ),
        ]
        indexes = [
            models.Index(fields=["tenant", "is_active"], name="product_tenant_active_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.sku})"

    def clean(self):
        if not (self.sku or "").strip():
            raise ValidationError({"sku": "sku is required"})

    def save(self, *args, **kwargs):
        if self.sku is not None:
            self.sku = self.sku.strip()
        self.full_clean()
        return super().save(*args, **kwargs)
