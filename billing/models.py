from decimal import Decimal

from django.db import models


class Invoice(models.Model):
    """Clinic invoice. Amounts are whole tugriks; final_amount is discount-adjusted upstream."""

    BUYER_TYPES = (
        ("B2C", "Individual"),
        ("B2B", "Organization"),
    )

    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0"))
    final_amount = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    buyer_type = models.CharField(max_length=3, choices=BUYER_TYPES, default="B2C")
    buyer_tin = models.CharField(max_length=14, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Invoice"
        verbose_name_plural = "Invoices"

    def __str__(self):
        return f"Invoice #{self.pk}"

    @property
    def billed_amount(self) -> Decimal:
        """Amount the patient owes: final_amount when set, else the legacy total."""
        if self.final_amount is not None:
            return self.final_amount
        return self.total_amount or Decimal("0")


class Payment(models.Model):
    """Payment captured against an invoice."""

    invoice = models.ForeignKey(Invoice, on_delete=models.CASCADE, related_name="payments")
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    method = models.CharField(max_length=30, default="CASH")
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Payment"
        verbose_name_plural = "Payments"

    def __str__(self):
        return f"{self.method} {self.amount} (invoice #{self.invoice_id})"
