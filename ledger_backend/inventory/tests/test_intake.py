# inventory/tests/test_intake.py

from datetime import date, timedelta
from decimal import Decimal
from unittest import mock

from django.test import TestCase
from django.utils import timezone

from common.exceptions import (
    DuplicateBatchNumberError,
    InvalidQuantityError,
    LedgerNotFoundError,
    LedgerValidationError,
)
from common.tests.fixtures import LedgerFixturesMixin
from inventory.models import Batch, Movement
from inventory.services.intake import register_inbound
from payables.models import AccountPayable


class InboundReceiverTests(LedgerFixturesMixin, TestCase):
    """
    Direct stock entry.

    GUARANTEES:
    - One batch + one IN movement per receipt
    - Batch numbers are unique per tenant
    - Optional payable is created in the same unit of work
    """

    def test_receipt_creates_batch_and_movement(self):
        expires = date.today() + timedelta(days=180)
        result = register_inbound(
            self.tenant,
            self.user,
            product=self.product.id,
            warehouse=self.main.id,
            quantity="12.5",
            unit_cost="4.20",
            batch_number="LOT-001",
            expires_at=expires,
            supplier=self.supplier.id,
        )

        batch = Batch.objects.get(id=result["batch"]["id"])
        self.assertEqual(batch.batch_number, "LOT-001")
        self.assertEqual(batch.quantity_initial, Decimal("12.5"))
        self.assertEqual(batch.quantity_current, Decimal("12.5"))
        self.assertEqual(batch.supplier, self.supplier)
        self.assertEqual(batch.expires_at, expires)

        movement = Movement.objects.get(id=result["movement"]["id"])
        self.assertEqual(movement.movement_type, Movement.MovementType.IN)
        self.assertEqual(movement.reference_type, Movement.ReferenceType.MANUAL)
        self.assertEqual(movement.total_cost, Decimal("52.5"))
        self.assertIsNone(result["payable"])
        self.assertFalse(AccountPayable.objects.exists())

    def test_batch_number_is_generated_when_missing(self):
        result = register_inbound(
            self.tenant,
            self.user,
            product=self.product,
            warehouse=self.main,
            quantity=5,
            unit_cost=1,
        )
        self.assertTrue(result["batch"]["batch_number"].startswith("B-"))

    def test_duplicate_batch_number_is_rejected(self):
        self.receive(5, "1.00", batch_number="DUP-1")

        with self.assertRaises(DuplicateBatchNumberError):
            register_inbound(
                self.tenant,
                self.user,
                product=self.other_product,
                warehouse=self.branch,
                quantity=5,
                unit_cost=1,
                batch_number="DUP-1",
            )
        self.assertEqual(Batch.objects.filter(batch_number="DUP-1").count(), 1)

    def test_duplicate_lost_to_concurrent_insert_is_reported_as_duplicate(self):
        self.receive(5, "1.00", batch_number="RACE-1")

        # both the pre-check and model validation miss the row a concurrent
        # transaction committed; the database constraint still catches it
        with (
            mock.patch("inventory.services.intake.batch_number_exists", return_value=False),
            mock.patch.object(Batch, "validate_constraints"),
            self.assertRaises(DuplicateBatchNumberError),
        ):
            register_inbound(
                self.tenant,
                self.user,
                product=self.product,
                warehouse=self.main,
                quantity=5,
                unit_cost=1,
                batch_number="RACE-1",
            )

        self.assertEqual(Batch.objects.filter(batch_number="RACE-1").count(), 1)

    def test_overlong_batch_number_is_a_validation_error(self):
        with self.assertRaises(LedgerValidationError) as cm:
            register_inbound(
                self.tenant,
                self.user,
                product=self.product,
                warehouse=self.main,
                quantity=5,
                unit_cost=1,
                batch_number="X" * 200,
            )

        self.assertIn("batch_number", cm.exception.data["errors"])
        self.assertFalse(Batch.objects.exists())
        self.assertFalse(Movement.objects.exists())

    def test_same_batch_number_allowed_in_other_tenant(self):
        self.receive(5, "1.00", batch_number="SHARED-1")
        other_tenant, other_warehouse, other_product = self.make_other_tenant()

        register_inbound(
            other_tenant,
            self.user,
            product=other_product,
            warehouse=other_warehouse,
            quantity=5,
            unit_cost=1,
            batch_number="SHARED-1",
        )
        self.assertEqual(Batch.objects.filter(batch_number="SHARED-1").count(), 2)

    def test_non_positive_quantity_is_rejected(self):
        with self.assertRaises(InvalidQuantityError):
            register_inbound(
                self.tenant,
                self.user,
                product=self.product,
                warehouse=self.main,
                quantity=0,
                unit_cost=1,
            )
        self.assertFalse(Batch.objects.exists())

    def test_warehouse_of_other_tenant_is_not_found(self):
        _, other_warehouse, _ = self.make_other_tenant()
        with self.assertRaises(LedgerNotFoundError):
            register_inbound(
                self.tenant,
                self.user,
                product=self.product,
                warehouse=other_warehouse.id,
                quantity=1,
                unit_cost=1,
            )

    def test_receipt_with_payable(self):
        result = register_inbound(
            self.tenant,
            self.user,
            product=self.product,
            warehouse=self.main,
            quantity=10,
            unit_cost="2.505",
            supplier=self.supplier,
            create_payable=True,
            invoice_number="INV-9",
            payment_term_days=15,
        )

        payable = AccountPayable.objects.get(id=result["payable"]["id"])
        self.assertEqual(payable.supplier, self.supplier)
        self.assertEqual(payable.total_amount, Decimal("25.05"))
        self.assertEqual(payable.balance_amount, Decimal("25.05"))
        self.assertEqual(payable.invoice_number, "INV-9")
        self.assertEqual(payable.due_date, timezone.localdate() + timedelta(days=15))
        self.assertEqual(payable.status, AccountPayable.Status.CURRENT)
        self.assertIsNone(payable.purchase_order)

    def test_unknown_supplier_writes_nothing(self):
        with self.assertRaises(LedgerNotFoundError):
            register_inbound(
                self.tenant,
                self.user,
                product=self.product,
                warehouse=self.main,
                quantity=10,
                unit_cost=1,
                supplier="00000000-0000-0000-0000-000000000000",
                create_payable=True,
            )
        self.assertFalse(Batch.objects.exists())
        self.assertFalse(AccountPayable.objects.exists())
