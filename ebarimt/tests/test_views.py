"""Tests for eBarimt JSON API endpoints."""

import json
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings

from ebarimt.models import OperatorMerchantRequest
from ebarimt.services.posapi_client import PosApiError
from ebarimt.services.receipt_service import IssueResult, PreconditionError

DDTD = "1" * 33


class EbarimtApiTestCase(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(username="staff", password="pw", is_staff=True)
        self.client.force_login(self.user)


class IssueRefundApiTests(EbarimtApiTestCase):
    @patch("ebarimt.views.issue_ebarimt_for_invoice")
    def test_issue_success(self, mock_issue):
        mock_issue.return_value = IssueResult(success=True, ddtd=DDTD, receipt_for_display={"id": DDTD, "lottery": "WIN1"})
        response = self.client.post("/api/ebarimt/invoices/42/issue/")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["ddtd"], DDTD)
        self.assertEqual(body["receiptForDisplay"]["lottery"], "WIN1")
        mock_issue.assert_called_once_with(42, user_id=self.user.pk)

    @patch("ebarimt.views.issue_ebarimt_for_invoice")
    def test_issue_failure_is_502(self, mock_issue):
        mock_issue.return_value = IssueResult(success=False, error_message="timed out")
        response = self.client.post("/api/ebarimt/invoices/42/issue/")
        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json()["error"], "timed out")

    @patch("ebarimt.views.issue_ebarimt_for_invoice", side_effect=PreconditionError("Invoice #42 is not fully paid"))
    def test_issue_precondition_is_400(self, mock_issue):
        response = self.client.post("/api/ebarimt/invoices/42/issue/")
        self.assertEqual(response.status_code, 400)
        self.assertIn("not fully paid", response.json()["error"])

    def test_issue_requires_post(self):
        response = self.client.get("/api/ebarimt/invoices/42/issue/")
        self.assertEqual(response.status_code, 405)

    def test_issue_requires_staff(self):
        self.client.logout()
        response = self.client.post("/api/ebarimt/invoices/42/issue/")
        self.assertEqual(response.status_code, 302)

    @patch("ebarimt.views.refund_ebarimt_by_invoice", return_value={"success": True})
    def test_refund_success(self, mock_refund):
        response = self.client.post("/api/ebarimt/invoices/42/refund/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"success": True})

    @patch("ebarimt.views.refund_ebarimt_by_invoice", side_effect=PreconditionError("Only SUCCESS receipts can be refunded (invoice #42 is FAILED)"))
    def test_refund_precondition_is_400(self, mock_refund):
        response = self.client.post("/api/ebarimt/invoices/42/refund/")
        self.assertEqual(response.status_code, 400)
        self.assertIn("FAILED", response.json()["error"])

    @patch("ebarimt.views.refund_ebarimt_by_invoice", side_effect=PosApiError("failed (500)", status_code=500))
    def test_refund_posapi_error_is_502(self, mock_refund):
        response = self.client.post("/api/ebarimt/invoices/42/refund/")
        self.assertEqual(response.status_code, 502)


@patch("ebarimt.views.PosApiClient")
class PosapiPassthroughApiTests(EbarimtApiTestCase):
    def test_info(self, mock_client_cls):
        mock_client_cls.return_value.get_info.return_value = {"posNo": "POS-1", "lastSentDate": "2024-06-01"}
        response = self.client.get("/api/ebarimt/posapi/info/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["posNo"], "POS-1")

    def test_info_error_is_502(self, mock_client_cls):
        mock_client_cls.return_value.get_info.side_effect = PosApiError("connection refused")
        response = self.client.get("/api/ebarimt/posapi/info/")
        self.assertEqual(response.status_code, 502)

    def test_send(self, mock_client_cls):
        mock_client_cls.return_value.send_to_unified_system.return_value = {"sent": 3}
        response = self.client.post("/api/ebarimt/posapi/send/")
        self.assertEqual(response.json(), {"sent": 3})

    def test_bank_accounts_requires_tin(self, mock_client_cls):
        response = self.client.get("/api/ebarimt/bank-accounts/")
        self.assertEqual(response.status_code, 400)
        mock_client_cls.return_value.get_bank_accounts.assert_not_called()

    def test_bank_accounts(self, mock_client_cls):
        mock_client_cls.return_value.get_bank_accounts.return_value = [{"bankName": "Khan"}]
        response = self.client.get("/api/ebarimt/bank-accounts/", {"tin": "12345678901"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [{"bankName": "Khan"}])
        mock_client_cls.return_value.get_bank_accounts.assert_called_once_with("12345678901")


@override_settings(POSAPI_OPERATOR_TOKEN="tok", POSAPI_OPERATOR_API_KEY="key")
@patch("ebarimt.views.PosApiClient")
class OperatorMerchantApiTests(EbarimtApiTestCase):
    def _post(self, body):
        return self.client.post(
            "/api/ebarimt/operator/merchant-request/",
            data=json.dumps(body),
            content_type="application/json",
        )

    def test_create_stays_pending(self, mock_client_cls):
        mock_client_cls.return_value.send_operator_merchant_request.return_value = {"status": "OK"}
        response = self._post({"posNo": "POS-1", "merchantTin": "12345678901"})

        self.assertEqual(response.status_code, 200)
        body = response.json()
        record = OperatorMerchantRequest.objects.get(pk=body["requestId"])
        self.assertEqual(record.status, OperatorMerchantRequest.STATUS_PENDING)
        self.assertEqual(record.raw_request, {"posNo": "POS-1", "merchantTin": "12345678901"})
        self.assertEqual(record.raw_response, {"status": "OK"})

    def test_create_failure_marks_failed(self, mock_client_cls):
        mock_client_cls.return_value.send_operator_merchant_request.side_effect = PosApiError(
            "OperatorMerchant API failed (401)", status_code=401, response_data={"message": "bad token"}
        )
        response = self._post({"posNo": "POS-1", "merchantTin": "12345678901"})

        self.assertEqual(response.status_code, 502)
        record = OperatorMerchantRequest.objects.get(pk=response.json()["requestId"])
        self.assertEqual(record.status, OperatorMerchantRequest.STATUS_FAILED)
        self.assertEqual(record.raw_response, {"message": "bad token"})

    def test_create_requires_fields(self, mock_client_cls):
        response = self._post({"posNo": "POS-1"})
        self.assertEqual(response.status_code, 400)
        self.assertFalse(OperatorMerchantRequest.objects.exists())

    @override_settings(POSAPI_OPERATOR_TOKEN="")
    def test_create_requires_credentials(self, mock_client_cls):
        response = self._post({"posNo": "POS-1", "merchantTin": "12345678901"})
        self.assertEqual(response.status_code, 500)
        self.assertFalse(OperatorMerchantRequest.objects.exists())

    def test_approve_and_detail(self, mock_client_cls):
        from django.utils import timezone

        record = OperatorMerchantRequest.objects.create(
            pos_no="POS-1", merchant_tin="12345678901", raw_request={}, requested_at=timezone.now()
        )
        response = self.client.post(f"/api/ebarimt/operator/merchant-request/{record.pk}/approve/")
        self.assertEqual(response.json()["status"], "APPROVED")

        response = self.client.get(f"/api/ebarimt/operator/merchant-request/{record.pk}/")
        body = response.json()
        self.assertEqual(body["status"], "APPROVED")
        self.assertIsNotNone(body["decidedAt"])

    def test_unknown_request_is_404(self, mock_client_cls):
        self.assertEqual(self.client.get("/api/ebarimt/operator/merchant-request/999/").status_code, 404)
        self.assertEqual(self.client.post("/api/ebarimt/operator/merchant-request/999/approve/").status_code, 404)


class TokenApiTests(TestCase):
    def test_staff_token_authenticates_api(self):
        get_user_model().objects.create_user(username="staff", password="pw", is_staff=True)
        response = self.client.post("/api/token/", {"username": "staff", "password": "pw"})
        self.assertEqual(response.status_code, 200)
        access = response.json()["access"]

        with patch("ebarimt.views.refund_ebarimt_by_invoice", return_value={"success": True}):
            response = self.client.post(
                "/api/ebarimt/invoices/1/refund/",
                HTTP_AUTHORIZATION=f"Bearer {access}",
            )
        self.assertEqual(response.status_code, 200)

    def test_non_staff_token_refused(self):
        get_user_model().objects.create_user(username="clerk", password="pw")
        response = self.client.post("/api/token/", {"username": "clerk", "password": "pw"})
        self.assertEqual(response.status_code, 401)
