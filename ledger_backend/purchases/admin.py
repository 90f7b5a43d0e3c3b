# purchases/admin.py

from django.contrib import admin

from purchases.models import PurchaseOrder, PurchaseOrderItem


class PurchaseOrderItemInline(admin.TabularInline):
    model = PurchaseOrderItem
    extra = 0
    readonly_fields = ("quantity_received", "line_total")


@admin.register(PurchaseOrder)
class PurchaseOrderAdmin(admin.ModelAdmin):
    list_display = ("order_number", "supplier", "status", "total", "expected_at", "created_at")
    list_filter = ("tenant", "status")
    search_fields = ("order_number", "supplier__name")
    readonly_fields = ("subtotal", "tax_amount", "total", "ordered_at", "received_at", "created_at", "updated_at")
    inlines = [PurchaseOrderItemInline]
