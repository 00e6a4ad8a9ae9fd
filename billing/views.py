"""Invoice buyer API views."""

import json

from django.contrib.admin.views.decorators import staff_member_required
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from .models import Invoice
from .serializers import ValidationError, validate_buyer_update
from .services import update_buyer


@csrf_exempt
@staff_member_required
@require_http_methods(["PATCH"])
def invoice_buyer_update_api(request, invoice_id):
    """PATCH /api/invoices/<id>/buyer/ - Set buyer type (B2C/B2B) and TIN before eBarimt issuance."""
    try:
        body = json.loads(request.body or "{}")
    except json.JSONDecodeError:
        return JsonResponse({"error": "Invalid JSON"}, status=400)
    try:
        validated = validate_buyer_update(body)
    except ValidationError as e:
        return JsonResponse({"error": e.message, "field": e.field}, status=400)
    invoice = Invoice.objects.filter(pk=invoice_id).first()
    if not invoice:
        return JsonResponse({"error": "Invoice not found"}, status=404)
    invoice = update_buyer(invoice, validated)
    return JsonResponse({
        "id": invoice.pk,
        "buyerType": invoice.buyer_type,
        "buyerTin": invoice.buyer_tin,
    })
