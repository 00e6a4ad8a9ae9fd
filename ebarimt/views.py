"""eBarimt JSON API endpoints. Staff only. Responses never include operator credentials."""

import json
import logging

from django.contrib.admin.views.decorators import staff_member_required
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from ebarimt.models import OperatorMerchantRequest
from ebarimt.services.config import PosApiConfig
from ebarimt.services.posapi_client import PosApiClient, PosApiError
from ebarimt.services.receipt_service import (
    PreconditionError,
    issue_ebarimt_for_invoice,
    refund_ebarimt_by_invoice,
)
from ebarimt.utils import scrub_response

logger = logging.getLogger("ebarimt")

ISSUE_FAILED_MESSAGE = "eBarimt гаргахад алдаа гарлаа"


def _user_id(request):
    user = getattr(request, "user", None)
    return user.pk if user is not None and user.is_authenticated else None


def _posapi_client() -> PosApiClient:
    return PosApiClient(PosApiConfig.from_settings())


@csrf_exempt
@staff_member_required
@require_POST
def api_issue_ebarimt(request, invoice_id):
    """POST /api/ebarimt/invoices/<id>/issue/ - Issue or retry eBarimt for a paid invoice."""
    try:
        result = issue_ebarimt_for_invoice(invoice_id, user_id=_user_id(request))
    except PreconditionError as e:
        return JsonResponse({"error": str(e)}, status=400)
    if not result.success:
        return JsonResponse({"error": result.error_message or ISSUE_FAILED_MESSAGE}, status=502)
    return JsonResponse({
        "success": True,
        "ddtd": result.ddtd,
        "receiptForDisplay": result.receipt_for_display or None,
    })


@csrf_exempt
@staff_member_required
@require_POST
def api_refund_ebarimt(request, invoice_id):
    """POST /api/ebarimt/invoices/<id>/refund/ - Cancel the issued eBarimt."""
    try:
        result = refund_ebarimt_by_invoice(invoice_id, user_id=_user_id(request))
    except PreconditionError as e:
        return JsonResponse({"error": str(e)}, status=400)
    except PosApiError as e:
        return JsonResponse({"error": str(e)}, status=502)
    return JsonResponse(result)


@staff_member_required
@require_GET
def api_posapi_info(request):
    """GET /api/ebarimt/posapi/info/"""
    try:
        data = _posapi_client().get_info()
    except PosApiError as e:
        return JsonResponse({"error": str(e)}, status=502)
    return JsonResponse(scrub_response(data), safe=False)


@csrf_exempt
@staff_member_required
@require_POST
def api_posapi_send(request):
    """POST /api/ebarimt/posapi/send/ - Push stored receipts to the unified system."""
    try:
        data = _posapi_client().send_to_unified_system()
    except PosApiError as e:
        return JsonResponse({"error": str(e)}, status=502)
    return JsonResponse(scrub_response(data), safe=False)


@staff_member_required
@require_GET
def api_bank_accounts(request):
    """GET /api/ebarimt/bank-accounts/?tin=..."""
    tin = (request.GET.get("tin") or "").strip()
    if not tin:
        return JsonResponse({"error": "tin query parameter is required"}, status=400)
    try:
        data = _posapi_client().get_bank_accounts(tin)
    except PosApiError as e:
        return JsonResponse({"error": str(e)}, status=502)
    return JsonResponse(data, safe=False)


@csrf_exempt
@staff_member_required
@require_POST
def api_operator_merchant_request(request):
    """
    POST /api/ebarimt/operator/merchant-request/
    Body: {"posNo": "...", "merchantTin": "..."}. Success leaves the record PENDING
    (approval is a manual admin action); a failed call marks it FAILED and returns 502.
    """
    try:
        body = json.loads(request.body or "{}")
    except json.JSONDecodeError:
        return JsonResponse({"error": "Invalid JSON"}, status=400)
    pos_no = str(body.get("posNo") or "").strip()
    merchant_tin = str(body.get("merchantTin") or "").strip()
    if not pos_no or not merchant_tin:
        return JsonResponse({"error": "posNo and merchantTin are required"}, status=400)

    config = PosApiConfig.from_settings()
    if not config.operator_token or not config.operator_api_key:
        return JsonResponse(
            {"error": "POSAPI_OPERATOR_TOKEN and POSAPI_OPERATOR_API_KEY must be configured"},
            status=500,
        )

    payload = {"posNo": pos_no, "merchantTin": merchant_tin}
    record = OperatorMerchantRequest.objects.create(
        pos_no=pos_no,
        merchant_tin=merchant_tin,
        status=OperatorMerchantRequest.STATUS_PENDING,
        raw_request=payload,
        requested_at=timezone.now(),
    )

    try:
        response = PosApiClient(config).send_operator_merchant_request(payload)
    except PosApiError as e:
        record.status = OperatorMerchantRequest.STATUS_FAILED
        record.error_message = str(e)
        record.raw_response = e.response_data
        record.save(update_fields=["status", "error_message", "raw_response"])
        logger.warning("Operator merchant request %s failed: %s", record.pk, e)
        return JsonResponse({"error": str(e), "requestId": record.pk}, status=502)

    record.raw_response = response
    record.save(update_fields=["raw_response"])
    return JsonResponse({"success": True, "requestId": record.pk, "status": record.status})


@csrf_exempt
@staff_member_required
@require_POST
def api_operator_merchant_approve(request, pk):
    """POST /api/ebarimt/operator/merchant-request/<id>/approve/"""
    record = OperatorMerchantRequest.objects.filter(pk=pk).first()
    if not record:
        return JsonResponse({"error": "Request not found"}, status=404)
    record.status = OperatorMerchantRequest.STATUS_APPROVED
    record.decided_at = timezone.now()
    record.save(update_fields=["status", "decided_at"])
    return JsonResponse({"success": True, "id": record.pk, "status": record.status})


@staff_member_required
@require_GET
def api_operator_merchant_detail(request, pk):
    """GET /api/ebarimt/operator/merchant-request/<id>/"""
    record = OperatorMerchantRequest.objects.filter(pk=pk).first()
    if not record:
        return JsonResponse({"error": "Request not found"}, status=404)
    return JsonResponse(record.as_dict())
