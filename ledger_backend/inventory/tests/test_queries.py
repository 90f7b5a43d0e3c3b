# inventory/tests/test_queries.py

from datetime import timedelta
from decimal import Decimal

from django.test import TestCase, override_settings
from django.utils import timezone

from common.tests.fixtures import LedgerFixturesMixin
from inventory.services.queries import (
    EXPIRY_CRITICAL,
    EXPIRY_UPCOMING,
    EXPIRY_WARNING,
    classify_expiry,
    expiring_batches,
    product_stock,
)


class StockQueryTests(LedgerFixturesMixin, TestCase):
    def test_product_stock_lists_available_batches_oldest_first(self):
        self.receive(10, "5.00", days_ago=2, batch_number="B1")
        self.receive(4, "8.00", days_ago=1, batch_number="B2")
        self.receive(7, "1.00", warehouse=self.branch, batch_number="BR-1")

        stock = product_stock(self.tenant, product=self.product, warehouse=self.main)

        self.assertEqual(Decimal(stock["total_stock"]), Decimal("14"))
        self.assertEqual([b["batch_number"] for b in stock["batches"]], ["B1", "B2"])

    def test_product_stock_is_zero_without_batches(self):
        stock = product_stock(self.tenant, product=self.product, warehouse=self.main)
        self.assertEqual(Decimal(stock["total_stock"]), Decimal("0"))
        self.assertEqual(stock["batches"], [])


class ExpiringBatchesTests(LedgerFixturesMixin, TestCase):
    def test_classification(self):
        self.assertEqual(classify_expiry(-3), EXPIRY_CRITICAL)
        self.assertEqual(classify_expiry(0), EXPIRY_CRITICAL)
        self.assertEqual(classify_expiry(5), EXPIRY_WARNING)
        self.assertEqual(classify_expiry(20), EXPIRY_UPCOMING)

    def test_expiring_batches_within_window(self):
        today = timezone.localdate()
        self.receive(1, 1, batch_number="EXP-PAST", expires_at=today - timedelta(days=1))
        self.receive(1, 1, batch_number="EXP-SOON", expires_at=today + timedelta(days=3))
        self.receive(1, 1, batch_number="EXP-LATER", expires_at=today + timedelta(days=20))
        self.receive(1, 1, batch_number="EXP-FAR", expires_at=today + timedelta(days=90))
        self.receive(1, 1, batch_number="NO-EXPIRY")

        result = expiring_batches(self.tenant, days_ahead=30, today=today)

        self.assertEqual(result["count"], 3)
        rows = {r["batch_number"]: r for r in result["batches"]}
        self.assertEqual(rows["EXP-PAST"]["status"], EXPIRY_CRITICAL)
        self.assertEqual(rows["EXP-SOON"]["status"], EXPIRY_WARNING)
        self.assertEqual(rows["EXP-LATER"]["status"], EXPIRY_UPCOMING)
        self.assertEqual(result["batches"][0]["batch_number"], "EXP-PAST")

    @override_settings(LEDGER={"EXPIRING_DAYS_AHEAD": 5})
    def test_default_window_comes_from_settings(self):
        today = timezone.localdate()
        self.receive(1, 1, batch_number="EXP-SOON", expires_at=today + timedelta(days=3))
        self.receive(1, 1, batch_number="EXP-LATER", expires_at=today + timedelta(days=20))

        result = expiring_batches(self.tenant, today=today)

        self.assertEqual([r["batch_number"] for r in result["batches"]], ["EXP-SOON"])
