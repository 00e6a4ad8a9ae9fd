"""
Invoice/payment read helpers used by the eBarimt core.
The eBarimt app only reads from this store; settlement writes happen elsewhere.
"""

from decimal import Decimal

from django.db.models import Sum

from .models import Invoice


def compute_paid_total(invoice: Invoice) -> Decimal:
    """Sum of recorded payments for the invoice."""
    total = invoice.payments.aggregate(total=Sum("amount"))["total"]
    return total if total is not None else Decimal("0")


def is_fully_paid(invoice: Invoice) -> bool:
    """True when payments cover the billed (final) amount."""
    return compute_paid_total(invoice) >= invoice.billed_amount


def update_buyer(invoice: Invoice, validated: dict) -> Invoice:
    """Persist buyer classification. B2C clears any stored TIN."""
    invoice.buyer_type = validated["buyer_type"]
    invoice.buyer_tin = validated["buyer_tin"] if validated["buyer_type"] == "B2B" else None
    invoice.save(update_fields=["buyer_type", "buyer_tin"])
    return invoice
