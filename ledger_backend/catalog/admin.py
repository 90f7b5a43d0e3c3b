# catalog/admin.py

from django.contrib import admin

from catalog.models import Product, Supplier, Tenant, Warehouse


@admin.register(Tenant)
class TenantAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("name", "slug")
    filter_horizontal = ("members",)


@admin.register(Warehouse)
class WarehouseAdmin(admin.ModelAdmin):
    list_display = ("name", "code", "tenant", "is_active", "created_at")
    list_filter = ("tenant", "is_active")
    search_fields = ("name", "code")
    readonly_fields = ("created_at", "updated_at")


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("sku", "name", "tenant", "unit_of_measure", "is_active", "created_at")
    list_filter = ("tenant", "is_active")
    search_fields = ("sku", "name")
    ordering = ("name",)
    readonly_fields = ("created_at", "updated_at")


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ("name", "tenant", "email", "phone", "is_active")
    list_filter = ("tenant", "is_active")
    search_fields = ("name", "tax_id", "email")
