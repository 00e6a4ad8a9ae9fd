"""Tests for invoice payment totals and the buyer update endpoint."""

import json
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import SimpleTestCase, TestCase

from billing.models import Invoice, Payment
from billing.serializers import ValidationError, validate_buyer_update
from billing.services import compute_paid_total, is_fully_paid


class PaidTotalTests(TestCase):
    def test_sums_payments(self):
        invoice = Invoice.objects.create(total_amount=Decimal("75000"))
        Payment.objects.create(invoice=invoice, amount=Decimal("50000"))
        Payment.objects.create(invoice=invoice, amount=Decimal("25000"), method="CARD")
        self.assertEqual(compute_paid_total(invoice), Decimal("75000"))
        self.assertTrue(is_fully_paid(invoice))

    def test_no_payments(self):
        invoice = Invoice.objects.create(total_amount=Decimal("1000"))
        self.assertEqual(compute_paid_total(invoice), Decimal("0"))
        self.assertFalse(is_fully_paid(invoice))

    def test_final_amount_overrides_total(self):
        invoice = Invoice.objects.create(total_amount=Decimal("1000"), final_amount=Decimal("800"))
        Payment.objects.create(invoice=invoice, amount=Decimal("800"))
        self.assertEqual(invoice.billed_amount, Decimal("800"))
        self.assertTrue(is_fully_paid(invoice))


class BuyerValidationTests(SimpleTestCase):
    def test_b2c_clears_tin(self):
        self.assertEqual(
            validate_buyer_update({"buyerType": "B2C", "buyerTin": "12345678901"}),
            {"buyer_type": "B2C", "buyer_tin": None},
        )

    def test_b2b_requires_valid_tin(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_buyer_update({"buyerType": "B2B"})
        self.assertEqual(ctx.exception.field, "buyerTin")
        with self.assertRaises(ValidationError):
            validate_buyer_update({"buyerType": "B2B", "buyerTin": "123"})
        self.assertEqual(
            validate_buyer_update({"buyer_type": "B2B", "buyer_tin": " 12345678901234 "}),
            {"buyer_type": "B2B", "buyer_tin": "12345678901234"},
        )

    def test_unknown_type(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_buyer_update({"buyerType": "B2G"})
        self.assertEqual(ctx.exception.field, "buyerType")


class BuyerUpdateApiTests(TestCase):
    def setUp(self):
        user = get_user_model().objects.create_user(username="staff", password="pw", is_staff=True)
        self.client.force_login(user)
        self.invoice = Invoice.objects.create(total_amount=Decimal("1000"))

    def _patch(self, invoice_id, body):
        return self.client.patch(
            f"/api/invoices/{invoice_id}/buyer/",
            data=json.dumps(body),
            content_type="application/json",
        )

    def test_set_b2b(self):
        response = self._patch(self.invoice.pk, {"buyerType": "B2B", "buyerTin": "12345678901"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"id": self.invoice.pk, "buyerType": "B2B", "buyerTin": "12345678901"})
        self.invoice.refresh_from_db()
        self.assertEqual(self.invoice.buyer_tin, "12345678901")

    def test_invalid_tin_is_400(self):
        response = self._patch(self.invoice.pk, {"buyerType": "B2B", "buyerTin": "12"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["field"], "buyerTin")

    def test_unknown_invoice_is_404(self):
        response = self._patch(999999, {"buyerType": "B2C"})
        self.assertEqual(response.status_code, 404)
