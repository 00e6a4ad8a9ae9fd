"""
eBarimt receipt lifecycle: issue and refund (cancel) for one invoice.

- One EBarimtReceipt row per invoice, upserted PENDING before the remote call
- Each issue attempt bumps attempt_no; the final write is a compare-and-swap on
  (attempt_no, PENDING) so a late failure cannot overwrite a newer attempt
- A success is never dropped; if the row already holds a ddtd the stored one wins
- Issue never raises on POSAPI failure, it persists FAILED and returns a failure result
- Refund records the error on the row and re-raises
- lottery/qrData/qrDate are scrubbed before anything is stored
"""

import logging
from dataclasses import dataclass

from django.db import DatabaseError, transaction
from django.utils import timezone

from billing.models import Invoice
from billing.services import compute_paid_total
from ebarimt.models import EBarimtReceipt
from ebarimt.services.config import PosApiConfig
from ebarimt.services.payload_builder import InvoiceSnapshot, build_payload
from ebarimt.services.posapi_client import PosApiClient, PosApiError
from ebarimt.utils import safe_json_dumps, scrub_response
from ebarimt.validators import format_posapi_date, is_valid_ddtd, normalize_printed_at_text, parse_posapi_date

logger = logging.getLogger("ebarimt")

# Response interpretation outcomes
OUTCOME_SUCCESS = "SUCCESS"
# No status field at all: older POSAPI builds omit it on success. Kept as a compatibility shim.
OUTCOME_SUCCESS_STATUS_ABSENT = "SUCCESS_STATUS_ABSENT"
OUTCOME_REJECTED = "REJECTED"
OUTCOME_EMPTY = "EMPTY"
SUCCESS_OUTCOMES = (OUTCOME_SUCCESS, OUTCOME_SUCCESS_STATUS_ABSENT)

# Highest priority first
DDTD_ALIASES = ("id", "ddtd", "billId")
PRINTED_AT_ALIASES = ("date", "printedAt")

STUB_DDTD_LENGTH = 33


class PreconditionError(Exception):
    """Issue/refund refused before any receipt state change or remote call."""


@dataclass
class IssueResult:
    success: bool
    ddtd: str | None = None
    error_message: str | None = None
    receipt_for_display: dict | None = None

    @classmethod
    def from_receipt(cls, receipt: EBarimtReceipt) -> "IssueResult":
        """Result for an already issued receipt. receipt_for_display is the stored, scrubbed response (no lottery or QR data)."""
        return cls(success=True, ddtd=receipt.ddtd, receipt_for_display=receipt.issue_raw_response)

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "ddtd": self.ddtd,
            "errorMessage": self.error_message,
            "receiptForDisplay": self.receipt_for_display,
        }


def first_present(data, aliases):
    """Value of the first alias key present with a non-empty value, in alias order."""
    if not isinstance(data, dict):
        return None
    for key in aliases:
        value = data.get(key)
        if value is not None and value != "":
            return value
    return None


def interpret_response(data) -> str:
    """
    Classify a POSAPI response body:
      None                      -> EMPTY
      status == "SUCCESS"       -> SUCCESS
      status missing or empty   -> SUCCESS_STATUS_ABSENT
      any other status          -> REJECTED
    """
    if data is None:
        return OUTCOME_EMPTY
    status = data.get("status") if isinstance(data, dict) else None
    if status is None or status == "":
        return OUTCOME_SUCCESS_STATUS_ABSENT
    if status == "SUCCESS":
        return OUTCOME_SUCCESS
    return OUTCOME_REJECTED


def rejection_message(data, action: str = "receipt") -> str:
    if isinstance(data, dict):
        message = data.get("message")
        if message:
            return f"POSAPI rejected {action} ({data.get('status')}): {message}"
        return f"POSAPI rejected {action} ({data.get('status')})"
    return "POSAPI returned an empty response"


class EBarimtService:
    """Issue and refund eBarimt receipts for invoices."""

    def __init__(self, config: PosApiConfig, client: PosApiClient | None = None):
        self.config = config
        self.client = client or PosApiClient(config)

    # -- issue ---------------------------------------------------------------

    def _check_issue_preconditions(self, invoice: Invoice, snapshot: InvoiceSnapshot) -> None:
        paid = compute_paid_total(invoice)
        billed = invoice.billed_amount
        if paid < billed:
            raise PreconditionError(
                f"Invoice #{invoice.pk} is not fully paid (paid {paid}, billed {billed})"
            )
        if snapshot.is_b2b and not snapshot.buyer_tin:
            raise PreconditionError(f"Invoice #{invoice.pk} is B2B but has no buyer TIN")
        missing = self.config.missing_merchant_settings()
        if missing:
            raise PreconditionError(f"POSAPI configuration incomplete: {', '.join(missing)} not set")

    def _start_attempt(self, invoice: Invoice, snapshot: InvoiceSnapshot, payload: dict, user_id) -> EBarimtReceipt:
        """Upsert the receipt row as PENDING and bump attempt_no. Returns the locked-and-saved row."""
        now = timezone.now()
        with transaction.atomic():
            receipt, _ = EBarimtReceipt.objects.select_for_update().get_or_create(
                invoice=invoice,
                defaults={
                    "total_amount": snapshot.amount,
                    "merchant_tin": self.config.merchant_tin,
                    "pos_no": self.config.pos_no,
                    "branch_no": self.config.branch_no,
                    "district_code": self.config.district_code,
                },
            )
            if receipt.status == EBarimtReceipt.STATUS_SUCCESS:
                return receipt
            if receipt.status == EBarimtReceipt.STATUS_CANCELED:
                raise PreconditionError(f"eBarimt for invoice #{invoice.pk} is CANCELED and cannot be re-issued")

            receipt.status = EBarimtReceipt.STATUS_PENDING
            receipt.total_amount = snapshot.amount
            receipt.merchant_tin = self.config.merchant_tin
            receipt.pos_no = self.config.pos_no
            receipt.branch_no = self.config.branch_no
            receipt.district_code = self.config.district_code
            receipt.bill_id_suffix = payload["billIdSuffix"]
            receipt.error_message = None
            receipt.issue_raw_request = scrub_response(payload)
            receipt.issue_raw_response = None
            receipt.sent_at = now
            receipt.attempt_no += 1
            receipt.issued_by_id = user_id
            receipt.save()
        return receipt

    def _stub_response(self, invoice_id) -> dict:
        return {
            "id": str(invoice_id).zfill(STUB_DDTD_LENGTH),
            "date": format_posapi_date(timezone.now()),
            "status": "SUCCESS",
            "stub": True,
        }

    def _record_failure(self, receipt: EBarimtReceipt, attempt_no: int, message: str, response=None) -> IssueResult:
        updated = EBarimtReceipt.objects.filter(
            pk=receipt.pk,
            attempt_no=attempt_no,
            status=EBarimtReceipt.STATUS_PENDING,
        ).update(
            status=EBarimtReceipt.STATUS_FAILED,
            error_message=message,
            issue_raw_response=scrub_response(response),
            updated_at=timezone.now(),
        )
        if not updated:
            logger.info(
                "eBarimt failure for invoice #%s attempt %s dropped: a newer attempt owns the receipt",
                receipt.invoice_id, attempt_no,
                extra={"invoice_id": receipt.invoice_id},
            )
        else:
            logger.warning(
                "eBarimt issue failed for invoice #%s: %s",
                receipt.invoice_id, message,
                extra={"invoice_id": receipt.invoice_id},
            )
        return IssueResult(success=False, error_message=message)

    def _record_success(self, receipt: EBarimtReceipt, attempt_no: int, ddtd: str, printed_at_text: str, response: dict) -> IssueResult:
        now = timezone.now()
        try:
            printed_at = parse_posapi_date(printed_at_text)
        except ValueError:
            printed_at = now
            printed_at_text = format_posapi_date(now)
        fields = {
            "status": EBarimtReceipt.STATUS_SUCCESS,
            "ddtd": ddtd,
            "printed_at": printed_at,
            "printed_at_text": printed_at_text,
            "issue_raw_response": scrub_response(response),
            "error_message": None,
            "confirmed_at": now,
            "updated_at": now,
        }
        try:
            with transaction.atomic():
                updated = EBarimtReceipt.objects.filter(
                    pk=receipt.pk,
                    attempt_no=attempt_no,
                    status=EBarimtReceipt.STATUS_PENDING,
                ).update(**fields)
                if not updated:
                    current = EBarimtReceipt.objects.select_for_update().get(pk=receipt.pk)
                    if current.status in (EBarimtReceipt.STATUS_SUCCESS, EBarimtReceipt.STATUS_CANCELED):
                        if current.ddtd != ddtd:
                            logger.error(
                                "eBarimt for invoice #%s already holds ddtd %s; remote also issued %s",
                                receipt.invoice_id, current.ddtd, ddtd,
                                extra={"invoice_id": receipt.invoice_id},
                            )
                        return IssueResult.from_receipt(current)
                    EBarimtReceipt.objects.filter(pk=receipt.pk).update(**fields)
        except DatabaseError as e:
            # remote receipt exists; keep its id on the row so it can be canceled by hand
            return self._record_failure(
                receipt, attempt_no,
                f"POSAPI issued ddtd {ddtd} but it could not be stored: {e}",
                response,
            )

        logger.info(
            "eBarimt issued for invoice #%s: ddtd=%s",
            receipt.invoice_id, ddtd,
            extra={"invoice_id": receipt.invoice_id, "ddtd": ddtd, "attempt_no": attempt_no},
        )
        return IssueResult(success=True, ddtd=ddtd, receipt_for_display=response)

    def issue(self, invoice_id, user_id=None) -> IssueResult:
        """
        Issue an eBarimt receipt for a fully paid invoice.
        Raises PreconditionError before any state change; POSAPI failures are
        persisted as FAILED and returned, never raised.
        """
        invoice = Invoice.objects.filter(pk=invoice_id).first()
        if invoice is None:
            raise PreconditionError(f"Invoice #{invoice_id} not found")

        existing = EBarimtReceipt.objects.filter(invoice=invoice).first()
        if existing is not None:
            if existing.status == EBarimtReceipt.STATUS_SUCCESS:
                return IssueResult.from_receipt(existing)
            if existing.status == EBarimtReceipt.STATUS_CANCELED:
                raise PreconditionError(f"eBarimt for invoice #{invoice_id} is CANCELED and cannot be re-issued")

        snapshot = InvoiceSnapshot.from_invoice(invoice)
        self._check_issue_preconditions(invoice, snapshot)

        payload = build_payload(snapshot, self.config)
        receipt = self._start_attempt(invoice, snapshot, payload, user_id)
        if receipt.status == EBarimtReceipt.STATUS_SUCCESS:
            return IssueResult.from_receipt(receipt)
        attempt_no = receipt.attempt_no

        if self.config.skip:
            logger.info("EBARIMT_SKIP set: stubbing eBarimt for invoice #%s", invoice_id, extra={"invoice_id": invoice_id})
            response = self._stub_response(invoice_id)
        else:
            try:
                response = self.client.issue_receipt(payload)
            except PosApiError as e:
                return self._record_failure(receipt, attempt_no, str(e), e.response_data)

        logger.debug("POSAPI issue response for invoice #%s: %s", invoice_id, safe_json_dumps(response))
        outcome = interpret_response(response)
        if outcome not in SUCCESS_OUTCOMES:
            return self._record_failure(receipt, attempt_no, rejection_message(response), response)
        if outcome == OUTCOME_SUCCESS_STATUS_ABSENT:
            logger.info("POSAPI response for invoice #%s has no status; treating as success", invoice_id)

        ddtd = first_present(response, DDTD_ALIASES)
        if ddtd is None:
            return self._record_failure(receipt, attempt_no, "POSAPI response has no receipt id", response)
        ddtd = str(ddtd)
        if not is_valid_ddtd(ddtd):
            logger.warning("POSAPI receipt id for invoice #%s is not 33 digits: %s", invoice_id, ddtd, extra={"invoice_id": invoice_id})

        printed_at_text = normalize_printed_at_text(first_present(response, PRINTED_AT_ALIASES))
        if printed_at_text is None:
            printed_at_text = format_posapi_date(timezone.now())

        return self._record_success(receipt, attempt_no, ddtd, printed_at_text, response)

    # -- refund --------------------------------------------------------------

    def _record_cancel_failure(self, receipt: EBarimtReceipt, cancel_request: dict, message: str, response=None) -> None:
        EBarimtReceipt.objects.filter(pk=receipt.pk).update(
            error_message=message,
            cancel_raw_request=scrub_response(cancel_request),
            cancel_raw_response=scrub_response(response),
            updated_at=timezone.now(),
        )
        logger.error(
            "eBarimt refund failed for invoice #%s: %s",
            receipt.invoice_id, message,
            extra={"invoice_id": receipt.invoice_id},
        )

    def refund(self, invoice_id, user_id=None) -> dict:
        """
        Cancel the SUCCESS receipt of an invoice.
        Raises PreconditionError if there is nothing refundable, PosApiError if POSAPI fails.
        """
        receipt = EBarimtReceipt.objects.filter(invoice_id=invoice_id).first()
        if receipt is None:
            raise PreconditionError(f"No eBarimt receipt for invoice #{invoice_id}")
        if receipt.status != EBarimtReceipt.STATUS_SUCCESS:
            raise PreconditionError(
                f"Only SUCCESS receipts can be refunded (invoice #{invoice_id} is {receipt.status})"
            )
        if not receipt.ddtd or not receipt.printed_at_text:
            raise PreconditionError(f"eBarimt for invoice #{invoice_id} has no ddtd or printed date")

        cancel_request = {"id": receipt.ddtd, "date": receipt.printed_at_text}
        if self.config.skip:
            logger.info("EBARIMT_SKIP set: stubbing refund for invoice #%s", invoice_id, extra={"invoice_id": invoice_id})
            response = {"status": "SUCCESS", "stub": True}
        else:
            try:
                response = self.client.cancel_receipt(receipt.ddtd, receipt.printed_at_text)
            except PosApiError as e:
                self._record_cancel_failure(receipt, cancel_request, str(e), e.response_data)
                raise
            if interpret_response(response) == OUTCOME_REJECTED:
                message = rejection_message(response, action="cancel")
                self._record_cancel_failure(receipt, cancel_request, message, response)
                raise PosApiError(message, response_data=response)

        now = timezone.now()
        updated = EBarimtReceipt.objects.filter(
            pk=receipt.pk,
            status=EBarimtReceipt.STATUS_SUCCESS,
        ).update(
            status=EBarimtReceipt.STATUS_CANCELED,
            canceled_at=now,
            canceled_by_id=user_id,
            error_message=None,
            cancel_raw_request=scrub_response(cancel_request),
            cancel_raw_response=scrub_response(response),
            updated_at=now,
        )
        if not updated:
            logger.warning("eBarimt for invoice #%s was canceled concurrently", invoice_id, extra={"invoice_id": invoice_id})
        else:
            logger.info("eBarimt canceled for invoice #%s: ddtd=%s", invoice_id, receipt.ddtd, extra={"invoice_id": invoice_id})
        return {"success": True}


def issue_ebarimt_for_invoice(invoice_id, user_id=None) -> IssueResult:
    return EBarimtService(PosApiConfig.from_settings()).issue(invoice_id, user_id=user_id)


def refund_ebarimt_by_invoice(invoice_id, user_id=None) -> dict:
    return EBarimtService(PosApiConfig.from_settings()).refund(invoice_id, user_id=user_id)
