from django.db import models
from .account import Account
from .base import PaymentRecord, TaxedDocument
from .devotee import Devotee


# ---------- Invoice (Accounts Receivable document) ----------
class Invoice(TaxedDocument):
    # INV-YYYY-NNNN
    invoice_number = models.CharField(max_length=32, unique=True)
    invoice_date = models.DateField()
    devotee = models.ForeignKey(
        Devotee,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="invoices",
    )
    # Credit side of the posting; empty means the default income account
    income_account = models.ForeignKey(
        Account,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="+",
    )

    class Meta:
        db_table = "invoices"
        ordering = ("-invoice_date", "-id")
        indexes = [
            models.Index(fields=["payment_status"], name="invoice_status_idx"),
            models.Index(fields=["invoice_date"], name="invoice_date_idx"),
        ]

    def __str__(self):
        return f"Invoice: {self.invoice_number or self.pk}"


class InvoicePayment(PaymentRecord):
    invoice = models.ForeignKey(
        Invoice, on_delete=models.PROTECT, related_name="payments"
    )

    class Meta(PaymentRecord.Meta):
        db_table = "invoice_payments"

    def __str__(self):
        return f"{self.invoice.invoice_number} ← {self.amount}"
