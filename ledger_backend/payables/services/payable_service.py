# payables/services/payable_service.py

"""
======================================================
PATH: payables/services/payable_service.py
======================================================
ACCOUNTS PAYABLE (CREATION + STATUS)

- create_payable(): called inside a ledger unit of work (goods receipt,
  inbound with payable). Never opens its own transaction.
- derive_payable_status(): pure function of (payable, today).
- refresh_payable_statuses(): daily job (management command).
- payables_summary(): count + outstanding balance per status.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, Sum
from django.utils import timezone

from common.conf import ledger_settings
from common.exceptions import LedgerValidationError
from common.numbers import money
from common.tenancy import tenant_id_of
from payables.models import AccountPayable

logger = logging.getLogger(__name__)


def due_date_for(issue_date: date, payment_term_days: int | None) -> date:
    days = payment_term_days if payment_term_days is not None else ledger_settings.DEFAULT_PAYMENT_TERM_DAYS
    return issue_date + timedelta(days=int(days))


def derive_payable_status(payable: AccountPayable, today: date | None = None) -> str:
    today = today or timezone.localdate()

    if payable.status == AccountPayable.Status.PAID or money(payable.balance_amount) <= Decimal("0.00"):
        return AccountPayable.Status.PAID

    if payable.due_date < today:
        return AccountPayable.Status.OVERDUE

    if payable.due_date <= today + timedelta(days=ledger_settings.DUE_SOON_DAYS):
        return AccountPayable.Status.DUE_SOON

    return AccountPayable.Status.CURRENT


def create_payable(
    ctx,
    *,
    supplier,
    amount,
    purchase_order=None,
    invoice_number: str | None = None,
    currency: str = "USD",
    issue_date: date | None = None,
    payment_term_days: int | None = None,
    notes: str = "",
) -> AccountPayable:
    ctx.require_atomic()

    total = money(amount)
    if total < Decimal("0.00"):
        raise LedgerValidationError("payable amount cannot be negative", amount=total)

    issued = issue_date or timezone.localdate()
    payable = AccountPayable(
        tenant_id=ctx.tenant_id,
        supplier=supplier,
        purchase_order=purchase_order,
        invoice_number=(invoice_number or "").strip(),
        currency=currency or "USD",
        total_amount=total,
        paid_amount=Decimal("0.00"),
        balance_amount=total,
        issue_date=issued,
        due_date=due_date_for(issued, payment_term_days),
        notes=notes or "",
    )
    payable.status = derive_payable_status(payable, timezone.localdate())
    if payable.status == AccountPayable.Status.PAID:
        # zero-amount receipt
        payable.paid_at = timezone.now()
    try:
        payable.save(using=ctx.using)
    except ValidationError as exc:
        raise LedgerValidationError.from_model_error(exc) from exc

    logger.info(
        "Payable created",
        extra={
            "tenant_id": str(ctx.tenant_id),
            "payable_id": str(payable.id),
            "supplier_id": str(supplier.id),
            "amount": str(total),
            "due_date": str(payable.due_date),
        },
    )
    return payable


@transaction.atomic
def refresh_payable_statuses(tenant=None, today: date | None = None) -> dict:
    """
    Re-derive status for every open payable (optionally one tenant).
    Intended to run daily.
    """
    today = today or timezone.localdate()

    qs = AccountPayable.objects.select_for_update().exclude(status=AccountPayable.Status.PAID)
    if tenant is not None:
        qs = qs.filter(tenant_id=tenant_id_of(tenant))

    counts = {
        AccountPayable.Status.CURRENT: 0,
        AccountPayable.Status.DUE_SOON: 0,
        AccountPayable.Status.OVERDUE: 0,
    }

    for payable in qs:
        new_status = derive_payable_status(payable, today)
        if new_status == payable.status or new_status == AccountPayable.Status.PAID:
            continue
        payable.status = new_status
        payable.save(update_fields=["status", "updated_at"])
        counts[new_status] += 1

    result = {
        "overdue_updated": counts[AccountPayable.Status.OVERDUE],
        "due_soon_updated": counts[AccountPayable.Status.DUE_SOON],
        "current_updated": counts[AccountPayable.Status.CURRENT],
    }

    logger.info(
        "Payable statuses refreshed",
        extra={"tenant_id": str(tenant_id_of(tenant)) if tenant else None, **result},
    )
    return result


def payables_summary(tenant) -> dict:
    rows = (
        AccountPayable.objects.filter(tenant_id=tenant_id_of(tenant))
        .values("status")
        .annotate(count=Count("id"), total=Sum("balance_amount"))
    )
    by_status = {r["status"]: r for r in rows}

    summary = {}
    for status in AccountPayable.Status.values:
        row = by_status.get(status)
        summary[status.lower()] = {
            "count": int(row["count"]) if row else 0,
            "total": str(money(row["total"]) if row else Decimal("0.00")),
        }
    return summary
