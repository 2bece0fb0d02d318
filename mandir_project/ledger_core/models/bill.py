from django.db import models
from .account import Account
from .base import PaymentRecord, TaxedDocument
from .vendor import Vendor


# ---------- Bill (Accounts Payable document) ----------
class Bill(TaxedDocument):
    # BILL-YYYY-NNNN
    bill_number = models.CharField(max_length=32, unique=True)
    bill_date = models.DateField()
    vendor = models.ForeignKey(
        Vendor,
        null=True,
        blank=True,
        # prevent deleting a vendor who has a bill
        on_delete=models.PROTECT,
        related_name="bills",
    )
    # Debit side of the posting; empty means the default expense account
    expense_account = models.ForeignKey(
        Account,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="+",
    )

    class Meta:
        db_table = "bills"
        ordering = ("-bill_date", "-id")
        indexes = [
            models.Index(fields=["payment_status"], name="bill_status_idx"),
            models.Index(fields=["bill_date"], name="bill_date_idx"),
        ]

    def __str__(self):
        return f"Bill: {self.bill_number or self.pk}"


class BillPayment(PaymentRecord):
    bill = models.ForeignKey(
        Bill, on_delete=models.PROTECT, related_name="payments"
    )

    class Meta(PaymentRecord.Meta):
        db_table = "bill_payments"

    def __str__(self):
        return f"{self.bill.bill_number} ← {self.amount}"
