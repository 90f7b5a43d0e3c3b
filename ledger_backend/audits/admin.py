# audits/admin.py

from django.contrib import admin

from audits.models import InventoryAudit, InventoryAuditItem


class InventoryAuditItemInline(admin.TabularInline):
    model = InventoryAuditItem
    extra = 0
    can_delete = False
    readonly_fields = (
        "product",
        "system_stock",
        "counted_stock",
        "variance",
        "variance_cost",
        "is_adjusted",
        "unadjusted_quantity",
    )


@admin.register(InventoryAudit)
class InventoryAuditAdmin(admin.ModelAdmin):
    list_display = ("code", "warehouse", "status", "total_variance", "variance_cost", "created_at")
    list_filter = ("tenant", "status", "warehouse")
    search_fields = ("code", "name")
    readonly_fields = (
        "status",
        "started_at",
        "completed_at",
        "cancelled_at",
        "closed_by",
        "total_variance",
        "variance_cost",
        "created_at",
        "updated_at",
    )
    inlines = [InventoryAuditItemInline]
