from django.core.exceptions import ValidationError
from django.db import models
from .account import Account
from .banking import BankAccount
from .base import PAYMENT_MODES, TaxedDocument
from .vendor import Vendor


# ---------- Expense (spent directly, no bill) ----------
class Expense(TaxedDocument):
    # EXP-YYYY-NNNN
    expense_number = models.CharField(max_length=32, unique=True)
    expense_date = models.DateField()
    expense_category = models.ForeignKey(
        Account, on_delete=models.PROTECT, related_name="+"
    )
    vendor = models.ForeignKey(
        Vendor,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="expenses",
    )
    payment_mode = models.CharField(
        max_length=20, choices=PAYMENT_MODES, blank=True, default=""
    )
    bank_account = models.ForeignKey(
        BankAccount,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="+",
    )
    reference_number = models.CharField(max_length=100, blank=True, default="")

    class Meta:
        db_table = "expenses"
        ordering = ("-expense_date", "-id")

    def __str__(self):
        return f"Expense: {self.expense_number or self.pk}"

    def clean(self):
        super().clean()
        if self.expense_category_id and self.expense_category.ac_type != "expense":
            raise ValidationError("expense_category must be an expense account.")
        # expenses are settled in full or not at all
        if self.payment_status == "partial":
            raise ValidationError("An expense cannot be partially paid.")
