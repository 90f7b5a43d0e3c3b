# inventory/admin.py

"""
Admin is read-only for the ledger.

Batches and movements are only ever written by the inventory services so the
journal stays consistent with batch balances.
"""

from django.contrib import admin

from inventory.models import Batch, Movement


class ReadOnlyLedgerAdmin(admin.ModelAdmin):
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Batch)
class BatchAdmin(ReadOnlyLedgerAdmin):
    list_display = (
        "batch_number",
        "product",
        "warehouse",
        "quantity_initial",
        "quantity_current",
        "unit_cost",
        "received_at",
        "expires_at",
        "is_exhausted",
    )
    list_filter = ("tenant", "warehouse", "is_exhausted")
    search_fields = ("batch_number", "product__name", "product__sku")
    ordering = ("received_at",)


@admin.register(Movement)
class MovementAdmin(ReadOnlyLedgerAdmin):
    list_display = (
        "created_at",
        "movement_type",
        "direction",
        "product",
        "batch",
        "quantity",
        "stock_after",
        "total_cost",
        "reference_type",
        "reference_id",
    )
    list_filter = ("tenant", "movement_type", "direction", "reference_type")
    search_fields = ("reference_id", "notes", "product__name", "batch__batch_number")
    ordering = ("-created_at",)
