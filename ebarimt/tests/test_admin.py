"""Tests for eBarimt admin actions and permissions."""

from django.contrib.admin.sites import AdminSite
from django.contrib.auth import get_user_model
from django.test import RequestFactory, TestCase
from django.utils import timezone

from ebarimt.admin import EBarimtReceiptAdmin, OperatorMerchantRequestAdmin
from ebarimt.models import EBarimtReceipt, OperatorMerchantRequest


class OperatorMerchantRequestAdminTests(TestCase):
    def setUp(self):
        self.admin = OperatorMerchantRequestAdmin(OperatorMerchantRequest, AdminSite())
        self.request = RequestFactory().post("/admin/")
        self.request.user = get_user_model().objects.create_superuser(username="root", password="pw")
        self.admin.message_user = lambda *args, **kwargs: None

    def test_approve_selected_only_touches_pending(self):
        pending = OperatorMerchantRequest.objects.create(
            pos_no="POS-1", merchant_tin="12345678901", raw_request={}, requested_at=timezone.now()
        )
        failed = OperatorMerchantRequest.objects.create(
            pos_no="POS-2", merchant_tin="12345678901", raw_request={}, requested_at=timezone.now(),
            status=OperatorMerchantRequest.STATUS_FAILED,
        )
        self.admin.approve_selected(self.request, OperatorMerchantRequest.objects.all())

        pending.refresh_from_db()
        failed.refresh_from_db()
        self.assertEqual(pending.status, OperatorMerchantRequest.STATUS_APPROVED)
        self.assertIsNotNone(pending.decided_at)
        self.assertEqual(failed.status, OperatorMerchantRequest.STATUS_FAILED)
        self.assertIsNone(failed.decided_at)


class EBarimtReceiptAdminTests(TestCase):
    def test_receipts_cannot_be_added_or_deleted(self):
        admin = EBarimtReceiptAdmin(EBarimtReceipt, AdminSite())
        request = RequestFactory().get("/admin/")
        self.assertFalse(admin.has_add_permission(request))
        self.assertFalse(admin.has_delete_permission(request))
