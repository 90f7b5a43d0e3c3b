# payables/admin.py

from django.contrib import admin

from payables.models import AccountPayable, PaymentRecord


class PaymentRecordInline(admin.TabularInline):
    model = PaymentRecord
    extra = 0
    can_delete = False
    readonly_fields = ("amount", "currency", "payment_method", "reference", "paid_at", "notes", "created_at")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(AccountPayable)
class AccountPayableAdmin(admin.ModelAdmin):
    list_display = (
        "supplier",
        "invoice_number",
        "total_amount",
        "paid_amount",
        "balance_amount",
        "due_date",
        "status",
    )
    list_filter = ("tenant", "status")
    search_fields = ("invoice_number", "supplier__name")
    readonly_fields = ("paid_amount", "balance_amount", "paid_at", "created_at", "updated_at")
    inlines = [PaymentRecordInline]
