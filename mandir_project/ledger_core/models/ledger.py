from decimal import Decimal
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from ..managers import LedgerRowQuerySet
from .account import Account
from .period import Period

REFERENCE_TYPES = [
    ("Bill", "Bill"),
    ("Bill Payment", "Bill Payment"),
    ("Invoice", "Invoice"),
    ("Invoice Payment", "Invoice Payment"),
    ("Expense", "Expense"),
    ("Journal", "Journal"),
]


class LedgerRow(models.Model):
    """
    One general-ledger line. Append-only: written by
    services.posting.post_ledger_lines, never edited or deleted.
    Corrections go through an offsetting journal entry.
    """

    transaction_date = models.DateField()
    account = models.ForeignKey(
        Account, on_delete=models.PROTECT, related_name="ledger_rows"
    )
    reference_type = models.CharField(max_length=20, choices=REFERENCE_TYPES)
    reference_id = models.BigIntegerField()
    description = models.TextField(blank=True, default="")
    debit_amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )
    credit_amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )
    # account.current_balance right after this row was applied
    balance = models.DecimalField(max_digits=18, decimal_places=2)

    gst_applicable = models.BooleanField(default=False)
    gst_rate = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal("0.00")
    )
    gst_amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )

    period = models.ForeignKey(Period, on_delete=models.PROTECT, related_name="ledger_rows")
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="+",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    objects = LedgerRowQuerySet.as_manager()

    class Meta:
        db_table = "general_ledger"
        ordering = ("transaction_date", "id")
        indexes = [
            models.Index(fields=["account", "transaction_date"], name="gl_account_date_idx"),
            models.Index(fields=["reference_type", "reference_id"], name="gl_reference_idx"),
            models.Index(fields=["period"], name="gl_period_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(debit_amount__gt=0, credit_amount=0)
                    | models.Q(debit_amount=0, credit_amount__gt=0)
                ),
                name="ck_gl_one_side",
            )
        ]

    def __str__(self):
        side = f"Dr {self.debit_amount}" if self.debit_amount else f"Cr {self.credit_amount}"
        return f"{self.transaction_date} {self.account.code} {side}"

    def clean(self):
        if (self.debit_amount > 0) == (self.credit_amount > 0):
            raise ValidationError(
                "A ledger row carries exactly one of debit or credit."
            )
        if self.debit_amount < 0 or self.credit_amount < 0:
            raise ValidationError("Ledger amounts cannot be negative.")

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValidationError("Ledger rows are immutable.")
        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Ledger rows cannot be deleted.")
