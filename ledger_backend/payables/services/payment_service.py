# payables/services/payment_service.py

from decimal import Decimal
import logging

from django.db import transaction
from django.utils import timezone

from common.exceptions import InvalidStateError, LedgerValidationError, PaymentExceedsBalanceError
from common.numbers import money
from common.tenancy import get_for_tenant
from payables.models import AccountPayable, PaymentRecord


logger = logging.getLogger(__name__)


@transaction.atomic
def register_payment(
    tenant,
    payable_id,
    *,
    amount,
    payment_method: str,
    reference: str = "",
    paid_at=None,
    notes: str = "",
):
    """
    REGISTER A PAYMENT (partial or full, atomic)

    - Payable is locked for the duration of the payment.
    - Reaching a zero balance marks the payable PAID.
    """

    logger.info(
        "Registering payment",
        extra={
            "payable_id": str(payable_id),
            "amount": str(amount),
            "payment_method": payment_method,
        },
    )

    payable = get_for_tenant(
        AccountPayable,
        tenant,
        payable_id,
        label="Account payable",
        queryset=AccountPayable.objects.select_for_update(),
    )

    if payable.status == AccountPayable.Status.PAID:
        logger.error(
            "Payment rejected: payable already paid",
            extra={"payable_id": str(payable.id)},
        )
        raise InvalidStateError("This payable is already paid", status=payable.status)

    if payment_method not in PaymentRecord.Method.values:
        raise LedgerValidationError(
            f"Invalid payment_method. Use one of {', '.join(PaymentRecord.Method.values)}",
            payment_method=payment_method,
        )

    amt = money(amount)
    if amt <= Decimal("0.00"):
        raise LedgerValidationError("Amount must be > 0", amount=amt)

    if amt > payable.balance_amount:
        logger.error(
            "Payment rejected: amount exceeds balance",
            extra={"payable_id": str(payable.id), "amount": str(amt), "balance": str(payable.balance_amount)},
        )
        raise PaymentExceedsBalanceError(
            f"Payment amount ({amt}) exceeds outstanding balance ({payable.balance_amount})",
            amount=amt,
            balance=payable.balance_amount,
        )

    payment = PaymentRecord.objects.create(
        payable=payable,
        amount=amt,
        currency=payable.currency,
        payment_method=payment_method,
        reference=reference or "",
        paid_at=paid_at or timezone.now(),
        notes=notes or "",
    )

    payable.paid_amount = money(payable.paid_amount + amt)
    payable.balance_amount = money(payable.balance_amount - amt)
    if payable.balance_amount <= Decimal("0.00"):
        payable.status = AccountPayable.Status.PAID
        payable.paid_at = timezone.now()
    payable.save()

    logger.info(
        "Payment registered",
        extra={
            "payable_id": str(payable.id),
            "payment_id": str(payment.id),
            "balance": str(payable.balance_amount),
            "status": payable.status,
        },
    )

    return {
        "payment_id": str(payment.id),
        "payable_id": str(payable.id),
        "amount": str(payment.amount),
        "payment_method": payment.payment_method,
        "paid_amount": str(payable.paid_amount),
        "balance_amount": str(payable.balance_amount),
        "status": payable.status,
    }
