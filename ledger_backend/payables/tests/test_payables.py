# payables/tests/test_payables.py

from datetime import date, timedelta
from decimal import Decimal
from io import StringIO

from django.core.exceptions import ValidationError
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase
from django.utils import timezone

from common.exceptions import InvalidStateError, LedgerValidationError, PaymentExceedsBalanceError
from common.tests.fixtures import LedgerFixturesMixin
from inventory.services.unit_of_work import ledger_transaction
from payables.models import AccountPayable, PaymentRecord
from payables.services.payable_service import (
    create_payable,
    derive_payable_status,
    payables_summary,
    refresh_payable_statuses,
)
from payables.services.payment_service import register_payment


class PayableTestMixin(LedgerFixturesMixin):
    def make_payable(self, amount, *, issue_date=None, payment_term_days=30):
        with ledger_transaction(self.tenant, self.user) as ctx:
            return create_payable(
                ctx,
                supplier=self.supplier,
                amount=amount,
                issue_date=issue_date,
                payment_term_days=payment_term_days,
            )


class PayableStatusTests(PayableTestMixin, TestCase):
    def test_status_derivation(self):
        today = date(2026, 3, 1)
        payable = AccountPayable(
            total_amount=Decimal("10.00"),
            paid_amount=Decimal("0.00"),
            balance_amount=Decimal("10.00"),
            due_date=today + timedelta(days=30),
            status=AccountPayable.Status.CURRENT,
        )
        self.assertEqual(derive_payable_status(payable, today), AccountPayable.Status.CURRENT)

        payable.due_date = today + timedelta(days=7)
        self.assertEqual(derive_payable_status(payable, today), AccountPayable.Status.DUE_SOON)

        payable.due_date = today
        self.assertEqual(derive_payable_status(payable, today), AccountPayable.Status.DUE_SOON)

        payable.due_date = today - timedelta(days=1)
        self.assertEqual(derive_payable_status(payable, today), AccountPayable.Status.OVERDUE)

        payable.balance_amount = Decimal("0.00")
        self.assertEqual(derive_payable_status(payable, today), AccountPayable.Status.PAID)

    def _age(self, payable, due_date, *, term_days=30):
        # move the whole invoice back in time; due_date may not precede issue_date
        AccountPayable.objects.filter(id=payable.id).update(
            issue_date=due_date - timedelta(days=term_days),
            due_date=due_date,
        )

    def test_refresh_updates_open_payables(self):
        today = timezone.localdate()
        overdue = self.make_payable(100)
        due_soon = self.make_payable(50)
        current = self.make_payable(25)
        self._age(overdue, today - timedelta(days=10))
        self._age(due_soon, today + timedelta(days=5))

        result = refresh_payable_statuses(self.tenant, today=today)

        self.assertEqual(result["overdue_updated"], 1)
        self.assertEqual(result["due_soon_updated"], 1)
        self.assertEqual(result["current_updated"], 0)

        overdue.refresh_from_db()
        due_soon.refresh_from_db()
        current.refresh_from_db()
        self.assertEqual(overdue.status, AccountPayable.Status.OVERDUE)
        self.assertEqual(due_soon.status, AccountPayable.Status.DUE_SOON)
        self.assertEqual(current.status, AccountPayable.Status.CURRENT)

    def test_refresh_leaves_paid_payables_alone(self):
        payable = self.make_payable(10, issue_date=timezone.localdate() - timedelta(days=60))
        register_payment(self.tenant, payable.id, amount=10, payment_method="CASH")

        result = refresh_payable_statuses(self.tenant)

        payable.refresh_from_db()
        self.assertEqual(payable.status, AccountPayable.Status.PAID)
        self.assertEqual(sum(result.values()), 0)

    def test_summary(self):
        self.make_payable("100.00")
        self.make_payable("50.50")
        paid = self.make_payable("10.00")
        register_payment(self.tenant, paid.id, amount=10, payment_method="BANK")

        summary = payables_summary(self.tenant)

        self.assertEqual(summary["current"], {"count": 2, "total": "150.50"})
        self.assertEqual(summary["paid"]["count"], 1)
        self.assertEqual(summary["overdue"], {"count": 0, "total": "0.00"})

    def test_refresh_command(self):
        payable = self.make_payable(100)
        self._age(payable, timezone.localdate() - timedelta(days=1))

        out = StringIO()
        call_command("refresh_payable_statuses", "--tenant", self.tenant.slug, stdout=out)

        payable.refresh_from_db()
        self.assertEqual(payable.status, AccountPayable.Status.OVERDUE)
        self.assertIn("Overdue:  1", out.getvalue())

    def test_refresh_command_rejects_unknown_tenant(self):
        with self.assertRaises(CommandError):
            call_command("refresh_payable_statuses", "--tenant", "nope", stdout=StringIO())


class PaymentTests(PayableTestMixin, TestCase):
    """
    Supplier payments.

    GUARANTEES:
    - paid + balance == total after every payment
    - A zero balance marks the payable PAID
    - Overpayment and payments on PAID payables are rejected
    """

    def setUp(self):
        super().setUp()
        self.payable = self.make_payable("100.00")

    def test_partial_then_full_payment(self):
        first = register_payment(self.tenant, self.payable.id, amount="40.00", payment_method="CASH")
        self.assertEqual(first["balance_amount"], "60.00")
        self.assertEqual(first["status"], AccountPayable.Status.CURRENT)

        second = register_payment(
            self.tenant, self.payable.id, amount="60.00", payment_method="TRANSFER", reference="TRX-1"
        )
        self.assertEqual(second["status"], AccountPayable.Status.PAID)

        self.payable.refresh_from_db()
        self.assertEqual(self.payable.paid_amount, Decimal("100.00"))
        self.assertEqual(self.payable.balance_amount, Decimal("0.00"))
        self.assertIsNotNone(self.payable.paid_at)
        self.assertEqual(PaymentRecord.objects.filter(payable=self.payable).count(), 2)

    def test_overpayment_is_rejected(self):
        with self.assertRaises(PaymentExceedsBalanceError):
            register_payment(self.tenant, self.payable.id, amount="100.01", payment_method="CASH")

        self.payable.refresh_from_db()
        self.assertEqual(self.payable.balance_amount, Decimal("100.00"))
        self.assertFalse(PaymentRecord.objects.exists())

    def test_paid_payable_rejects_payments(self):
        register_payment(self.tenant, self.payable.id, amount=100, payment_method="CASH")
        with self.assertRaises(InvalidStateError):
            register_payment(self.tenant, self.payable.id, amount=1, payment_method="CASH")

    def test_invalid_method_is_rejected(self):
        with self.assertRaises(LedgerValidationError):
            register_payment(self.tenant, self.payable.id, amount=1, payment_method="BITCOIN")

    def test_non_positive_amount_is_rejected(self):
        with self.assertRaises(LedgerValidationError):
            register_payment(self.tenant, self.payable.id, amount=0, payment_method="CASH")

    def test_payment_records_are_immutable(self):
        register_payment(self.tenant, self.payable.id, amount=10, payment_method="CASH")
        record = PaymentRecord.objects.get()
        with self.assertRaises(ValidationError):
            record.delete()
