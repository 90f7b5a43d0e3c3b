# payables/models.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from catalog.models import Supplier, Tenant
from common.numbers import money


class AccountPayable(models.Model):
    """
    Amount owed to a supplier.

    Created by services only (goods receipt, inbound with payable).
    paid_amount / balance_amount move exclusively through register_payment().

    Invariant: paid_amount + balance_amount == total_amount.
    """

    class Status(models.TextChoices):
        CURRENT = "CURRENT", "Current"
        DUE_SOON = "DUE_SOON", "Due Soon"
        OVERDUE = "OVERDUE", "Overdue"
        PAID = "PAID", "Paid"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    tenant = models.ForeignKey(
        Tenant,
        on_delete=models.PROTECT,
        related_name="payables",
    )

    supplier = models.ForeignKey(
        Supplier,
        on_delete=models.PROTECT,
        related_name="payables",
    )

    purchase_order = models.ForeignKey(
        "purchases.PurchaseOrder",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="payables",
    )

    invoice_number = models.CharField(max_length=64, blank=True, default="")
    currency = models.CharField(max_length=3, default="USD")

    total_amount = models.DecimalField(max_digits=14, decimal_places=2)
    paid_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    balance_amount = models.DecimalField(max_digits=14, decimal_places=2)

    issue_date = models.DateField(default=timezone.localdate)
    due_date = models.DateField()

    status = models.CharField(
        max_length=10, choices=Status.choices, default=Status.CURRENT
    )
    paid_at = models.DateTimeField(null=True, blank=True)

    notes = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["due_date", "created_at"]
        indexes = [
            models.Index(fields=["tenant", "status"], name="payable_tenant_status_idx"),
            models.Index(fields=["tenant", "due_date"], name="payable_tenant_due_idx"),
            models.Index(fields=["supplier", "created_at"], name="payable_supplier_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_amount__gte=Decimal("0.00")),
                name="payable_total_nonnegative",
            ),
            models.CheckConstraint(
                condition=models.Q(paid_amount__gte=Decimal("0.00")),
                name="payable_paid_nonnegative",
            ),
            models.CheckConstraint(
                condition=models.Q(balance_amount__gte=Decimal("0.00")),
                name="payable_balance_nonnegative",
            ),
        ]

    def clean(self):
        if money(self.paid_amount) + money(self.balance_amount) != money(self.total_amount):
            raise ValidationError("paid_amount + balance_amount must equal total_amount")

        if self.due_date and self.issue_date and self.due_date < self.issue_date:
            raise ValidationError({"due_date": "due_date cannot be before issue_date"})

        if self.status == self.Status.PAID and not self.paid_at:
            raise ValidationError({"paid_at": "paid_at is required when status is PAID"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        ref = self.invoice_number or str(self.id)[:8]
        return f"{ref} | {self.status} | {self.balance_amount}"


class PaymentRecord(models.Model):
    """
    One payment against a payable. Append-only.
    """

    class Method(models.TextChoices):
        CASH = "CASH", "Cash"
        BANK = "BANK", "Bank Deposit"
        TRANSFER = "TRANSFER", "Transfer"
        CARD = "CARD", "Card"
        CHECK = "CHECK", "Check"
        OTHER = "OTHER", "Other"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    payable = models.ForeignKey(
        AccountPayable,
        on_delete=models.PROTECT,
        related_name="payments",
    )

    amount = models.DecimalField(max_digits=14, decimal_places=2)
    currency = models.CharField(max_length=3, default="USD")
    payment_method = models.CharField(max_length=10, choices=Method.choices)
    reference = models.CharField(max_length=100, blank=True, default="")
    paid_at = models.DateTimeField(default=timezone.now)
    notes = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-paid_at", "-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=Decimal("0.00")),
                name="payment_amount_gt_zero",
            ),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("PaymentRecord rows are immutable")
        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("PaymentRecord rows are immutable and cannot be deleted")

    def __str__(self):
        return f"{self.payable_id} | {self.amount} | {self.payment_method}"
