"""
POSAPI 3.0 receipt payload builder.
Fixed tax policy: VAT-free, no city tax, one synthetic line item, one cash payment.
Amounts are integral MNT (Decimal, ROUND_HALF_UP).
"""

import hashlib
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP

from django.utils import timezone

from ebarimt.services.config import PosApiConfig

BUYER_B2B = "B2B"
BUYER_B2C = "B2C"
RECEIPT_TYPE_B2B = "B2B_RECEIPT"
RECEIPT_TYPE_B2C = "B2C_RECEIPT"
TAX_TYPE_VAT_FREE = "VAT_FREE"

ITEM_NAME = "Эмнэлгийн үйлчилгээний төлбөр"
ITEM_CLASSIFICATION_CODE = "8620000"
ITEM_BAR_CODE = "8620000"
ITEM_BAR_CODE_TYPE = "UNDEFINED"
ITEM_MEASURE_UNIT = "ш"

PAYMENT_CODE_CASH = "CASH"
PAYMENT_STATUS_PAID = "PAID"

SUFFIX_MODULUS = 100_000_000


def to_mnt(value) -> int:
    """Round a money amount to whole MNT, half up."""
    return int(Decimal(str(value or 0)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def generate_bill_id_suffix(day: date | datetime, invoice_id) -> str:
    """
    8-digit suffix, stable for one invoice on one calendar day.
    SHA-256 of "YYYYMMDD-<invoice_id>", first 8 hex digits mod 10^8, zero padded.
    """
    if isinstance(day, datetime) and timezone.is_aware(day):
        day = timezone.localtime(day)
    seed = f"{day.strftime('%Y%m%d')}-{invoice_id}"
    digest = hashlib.sha256(seed.encode("utf-8")).hexdigest()
    return str(int(digest[:8], 16) % SUFFIX_MODULUS).zfill(8)


@dataclass(frozen=True)
class InvoiceSnapshot:
    invoice_id: int
    amount: int
    buyer_type: str = BUYER_B2C
    buyer_tin: str | None = None

    @classmethod
    def from_invoice(cls, invoice) -> "InvoiceSnapshot":
        return cls(
            invoice_id=invoice.pk,
            amount=to_mnt(invoice.billed_amount),
            buyer_type=invoice.buyer_type or BUYER_B2C,
            buyer_tin=invoice.buyer_tin or None,
        )

    @property
    def is_b2b(self) -> bool:
        return self.buyer_type == BUYER_B2B


def build_item(amount: int) -> dict:
    return {
        "name": ITEM_NAME,
        "barCode": ITEM_BAR_CODE,
        "barCodeType": ITEM_BAR_CODE_TYPE,
        "classificationCode": ITEM_CLASSIFICATION_CODE,
        "taxProductCode": None,
        "measureUnit": ITEM_MEASURE_UNIT,
        "qty": 1,
        "unitPrice": amount,
        "totalAmount": amount,
        "totalVAT": 0,
        "totalCityTax": 0,
    }


def build_payload(invoice: InvoiceSnapshot, config: PosApiConfig, today: date | datetime | None = None) -> dict:
    """
    Build the POST /rest/receipt body for one invoice.
    B2B invoices carry customerTin; B2C payloads omit the key entirely.
    """
    today = today or timezone.now()
    amount = invoice.amount

    payload = {
        "totalAmount": amount,
        "totalVAT": 0,
        "totalCityTax": 0,
        "districtCode": config.district_code,
        "merchantTin": config.merchant_tin,
        "posNo": config.pos_no,
        "branchNo": config.branch_no,
        "consumerNo": config.consumer_no or "",
        "type": RECEIPT_TYPE_B2B if invoice.is_b2b else RECEIPT_TYPE_B2C,
        "billIdSuffix": generate_bill_id_suffix(today, invoice.invoice_id),
        "receipts": [
            {
                "totalAmount": amount,
                "totalVAT": 0,
                "totalCityTax": 0,
                "taxType": TAX_TYPE_VAT_FREE,
                "merchantTin": config.merchant_tin,
                "items": [build_item(amount)],
            }
        ],
        "payments": [
            {
                "code": PAYMENT_CODE_CASH,
                "status": PAYMENT_STATUS_PAID,
                "paidAmount": amount,
            }
        ],
    }
    if invoice.is_b2b:
        payload["customerTin"] = invoice.buyer_tin
    return payload
