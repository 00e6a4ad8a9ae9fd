from django.contrib import admin
from django.utils import timezone

from .models import EBarimtReceipt, OperatorMerchantRequest, PosApiLog


class ReadOnlyAdmin(admin.ModelAdmin):
    """Rows are written by the service layer only."""

    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

    def has_add_permission(self, request):
        return False


@admin.register(EBarimtReceipt)
class EBarimtReceiptAdmin(ReadOnlyAdmin):
    list_display = ("invoice", "status", "total_amount", "ddtd", "printed_at_text", "attempt_no", "updated_at")
    list_filter = ("status",)
    search_fields = ("ddtd", "invoice__id", "bill_id_suffix")

    def has_delete_permission(self, request, obj=None):
        """Fiscal receipts are never deleted."""
        return False


@admin.register(PosApiLog)
class PosApiLogAdmin(ReadOnlyAdmin):
    list_display = ("endpoint", "method", "status_code", "created_at")
    list_filter = ("method", "status_code")
    search_fields = ("endpoint", "error_message")


@admin.register(OperatorMerchantRequest)
class OperatorMerchantRequestAdmin(ReadOnlyAdmin):
    list_display = ("merchant_tin", "pos_no", "status", "requested_at", "decided_at")
    list_filter = ("status",)
    actions = ["approve_selected"]

    @admin.action(description="Approve selected requests")
    def approve_selected(self, request, queryset):
        updated = queryset.filter(status=OperatorMerchantRequest.STATUS_PENDING).update(
            status=OperatorMerchantRequest.STATUS_APPROVED,
            decided_at=timezone.now(),
        )
        self.message_user(request, f"{updated} request(s) approved.")
