from django.conf import settings
from django.db import models


class EBarimtReceipt(models.Model):
    """
    Fiscal receipt issued through POSAPI for one invoice (1:1, upserted by invoice).
    Merchant/terminal fields are a snapshot of configuration at issuance time.
    Raw request/response fields are stored only after scrubbing (see ebarimt.utils.scrub_response).
    """

    STATUS_PENDING = "PENDING"
    STATUS_SUCCESS = "SUCCESS"
    STATUS_FAILED = "FAILED"
    STATUS_CANCELED = "CANCELED"
    STATUSES = (
        (STATUS_PENDING, "Pending"),
        (STATUS_SUCCESS, "Success"),
        (STATUS_FAILED, "Failed"),
        (STATUS_CANCELED, "Canceled"),
    )

    invoice = models.OneToOneField(
        "billing.Invoice",
        on_delete=models.PROTECT,
        related_name="ebarimt_receipt",
    )
    status = models.CharField(max_length=10, choices=STATUSES, default=STATUS_PENDING, db_index=True)
    total_amount = models.BigIntegerField()
    merchant_tin = models.CharField(max_length=14)
    pos_no = models.CharField(max_length=50)
    branch_no = models.CharField(max_length=50)
    district_code = models.CharField(max_length=10)
    bill_id_suffix = models.CharField(max_length=8, blank=True)
    ddtd = models.CharField(max_length=33, null=True, blank=True, unique=True)
    printed_at = models.DateTimeField(null=True, blank=True)
    printed_at_text = models.CharField(max_length=19, null=True, blank=True)
    error_message = models.TextField(null=True, blank=True)
    issue_raw_request = models.JSONField(null=True, blank=True)
    issue_raw_response = models.JSONField(null=True, blank=True)
    cancel_raw_request = models.JSONField(null=True, blank=True)
    cancel_raw_response = models.JSONField(null=True, blank=True)
    attempt_no = models.PositiveIntegerField(default=0)
    sent_at = models.DateTimeField(null=True, blank=True)
    confirmed_at = models.DateTimeField(null=True, blank=True)
    canceled_at = models.DateTimeField(null=True, blank=True)
    issued_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="+",
    )
    canceled_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="+",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "eBarimt Receipt"
        verbose_name_plural = "eBarimt Receipts"
        ordering = ["-created_at"]

    def __str__(self):
        return f"eBarimt for invoice #{self.invoice_id} ({self.status})"

    @property
    def is_refundable(self) -> bool:
        return self.status == self.STATUS_SUCCESS and bool(self.ddtd) and bool(self.printed_at_text)


class PosApiLog(models.Model):
    """One row per POSAPI round trip. Payloads are scrubbed and masked before insert."""

    endpoint = models.CharField(max_length=255)
    method = models.CharField(max_length=10)
    request_payload = models.JSONField(null=True, blank=True)
    response_payload = models.JSONField(null=True, blank=True)
    status_code = models.IntegerField(null=True, blank=True)
    error_message = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "POSAPI Log"
        verbose_name_plural = "POSAPI Logs"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.method} {self.endpoint} -> {self.status_code or self.error_message or 'unknown'}"


class OperatorMerchantRequest(models.Model):
    """Request to register a POS under an operator merchant. Approval is a manual admin action."""

    STATUS_PENDING = "PENDING"
    STATUS_APPROVED = "APPROVED"
    STATUS_FAILED = "FAILED"
    STATUSES = (
        (STATUS_PENDING, "Pending"),
        (STATUS_APPROVED, "Approved"),
        (STATUS_FAILED, "Failed"),
    )

    pos_no = models.CharField(max_length=50)
    merchant_tin = models.CharField(max_length=14)
    status = models.CharField(max_length=10, choices=STATUSES, default=STATUS_PENDING)
    raw_request = models.JSONField(default=dict)
    raw_response = models.JSONField(null=True, blank=True)
    error_message = models.TextField(null=True, blank=True)
    requested_at = models.DateTimeField()
    decided_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = "Operator Merchant Request"
        verbose_name_plural = "Operator Merchant Requests"
        ordering = ["-requested_at"]

    def __str__(self):
        return f"Operator merchant {self.merchant_tin}/{self.pos_no} ({self.status})"

    def as_dict(self) -> dict:
        return {
            "id": self.pk,
            "posNo": self.pos_no,
            "merchantTin": self.merchant_tin,
            "status": self.status,
            "rawRequest": self.raw_request,
            "rawResponse": self.raw_response,
            "errorMessage": self.error_message,
            "requestedAt": self.requested_at.isoformat() if self.requested_at else None,
            "decidedAt": self.decided_at.isoformat() if self.decided_at else None,
        }
