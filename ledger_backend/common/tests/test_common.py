# common/tests/test_common.py

import importlib
import os
from decimal import Decimal
from io import StringIO
from unittest import mock

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.management import call_command
from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from catalog.models import Product
from common.api import ledger_error_response
from common.conf import ledger_settings
from common.exceptions import InsufficientStockError, LedgerNotFoundError, LedgerValidationError
from common.numbers import line_cost, money, to_cost, to_quantity
from common.tenancy import get_for_tenant
from common.tests.fixtures import LedgerFixturesMixin


class NumbersTests(SimpleTestCase):
    def test_quantity_and_cost_precision(self):
        self.assertEqual(to_quantity("1.23456"), Decimal("1.235"))
        self.assertEqual(to_cost("2.00005"), Decimal("2.0001"))
        self.assertEqual(money("10.005"), Decimal("10.01"))
        self.assertEqual(line_cost(Decimal("3"), Decimal("1.3333")), Decimal("3.9999"))

    def test_rejects_non_numbers(self):
        for bad in (None, "", "abc", True):
            with self.assertRaises(LedgerValidationError):
                to_quantity(bad)


class ErrorPayloadTests(SimpleTestCase):
    def test_as_dict_stringifies_decimals(self):
        exc = InsufficientStockError("Not enough stock", requested=Decimal("5"), available=Decimal("2"))

        self.assertEqual(exc.requested, Decimal("5"))
        self.assertEqual(exc.available, Decimal("2"))
        self.assertEqual(
            exc.as_dict(),
            {
                "detail": "Not enough stock",
                "code": "INSUFFICIENT_STOCK",
                "data": {"requested": "5", "available": "2"},
            },
        )


class LedgerSettingsTests(SimpleTestCase):
    @override_settings(LEDGER={"DUE_SOON_DAYS": 3, "UNKNOWN": 1})
    def test_reads_overrides_and_ignores_unknown_keys(self):
        self.assertEqual(ledger_settings.DUE_SOON_DAYS, 3)
        self.assertEqual(ledger_settings.DEFAULT_PAYMENT_TERM_DAYS, 30)


class TenancyTests(LedgerFixturesMixin, TestCase):
    def test_resolves_by_id_and_instance(self):
        self.assertEqual(get_for_tenant(Product, self.tenant, self.product.id), self.product)
        self.assertEqual(get_for_tenant(Product, self.tenant, str(self.product.id)), self.product)
        self.assertIs(get_for_tenant(Product, self.tenant, self.product), self.product)

    def test_other_tenant_rows_look_missing(self):
        _, _, foreign = self.make_other_tenant()

        for ref in (foreign, foreign.id, "not-a-uuid", None):
            with self.assertRaises(LedgerNotFoundError):
                get_for_tenant(Product, self.tenant, ref)


class PublicEndpointTests(APITestCase):
    def test_health_and_root_are_public(self):
        res = self.client.get(reverse("health-check"))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data, {"status": "ok", "db": "ok"})

        res = self.client.get(reverse("api-root"))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertIn("inventory", res.data["modules"])


class ErrorResponseTests(SimpleTestCase):
    def test_model_validation_error_is_a_400(self):
        res = ledger_error_response(
            DjangoValidationError({"batch_number": ["Ensure this value has at most 128 characters."]})
        )

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["code"], "VALIDATION_ERROR")
        self.assertIn("batch_number", res.data["detail"])
        self.assertEqual(
            res.data["data"]["errors"],
            {"batch_number": ["Ensure this value has at most 128 characters."]},
        )

    def test_not_found_is_a_404(self):
        res = ledger_error_response(LedgerNotFoundError("Product not found"))
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(res.data["code"], "NOT_FOUND")


class MigrationsTests(TestCase):
    def test_models_match_committed_migrations(self):
        out = StringIO()
        try:
            call_command("makemigrations", "--check", "--dry-run", stdout=out, stderr=out)
        except SystemExit:
            self.fail(f"Models have changes without a migration:\n{out.getvalue()}")


class DevSettingsTests(SimpleTestCase):
    def test_ledger_loggers_follow_log_level(self):
        from backend.settings import base

        with mock.patch.dict(os.environ, {"LOG_LEVEL": "warning"}):
            dev = importlib.reload(importlib.import_module("backend.settings.dev"))

        self.assertTrue(dev.DEBUG)
        self.assertIn(
            "rest_framework.renderers.BrowsableAPIRenderer",
            dev.REST_FRAMEWORK["DEFAULT_RENDERER_CLASSES"],
        )
        for name in dev.LEDGER_LOGGERS:
            self.assertEqual(dev.LOGGING["loggers"][name]["level"], "WARNING")
            self.assertIsNot(dev.LOGGING["loggers"][name], base.LOGGING["loggers"][name])
        self.assertEqual(dev.LOGGING["loggers"]["django"]["level"], "INFO")
