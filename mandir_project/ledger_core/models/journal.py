from decimal import Decimal
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from .account import Account
from .period import Period

JOURNAL_STATUS = [
    ("posted", "Posted"),  # entries are posted on creation, no draft state
]


# ---------- Journal (Header) & JournalEntryLine ----------
class JournalEntry(models.Model):  # One manual accounting transaction
    # JRNL-YYYY-NNNN
    entry_number = models.CharField(max_length=32, unique=True)
    entry_date = models.DateField()
    description = models.TextField(blank=True, default="")
    period = models.ForeignKey(
        Period,
        null=True,
        blank=True,
        on_delete=models.PROTECT,  # Prevent breaking historical ledger
    )
    status = models.CharField(max_length=10, choices=JOURNAL_STATUS, default="posted")
    posted_at = models.DateTimeField(null=True, blank=True)
    posted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="+",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="+",
    )
    # Set on the mirror entry made by journal.create_offsetting_entry
    offsets = models.ForeignKey(
        "self",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="offset_entries",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "journal_entries"
        ordering = ("-entry_date", "-id")
        indexes = [
            models.Index(fields=["entry_date"], name="je_entry_date_idx"),
        ]
        verbose_name_plural = "journal entries"

    def __str__(self):
        return f"{self.entry_number} {self.entry_date} [{self.status}]"

    # Aggregate all debit and credit amounts across entry’s lines
    def compute_totals(self):
        aggs = self.lines.aggregate(
            total_debit=models.Sum("debit_amount"),
            total_credit=models.Sum("credit_amount"),
        )
        return (
            aggs["total_debit"] or Decimal("0.00"),
            aggs["total_credit"] or Decimal("0.00"),
        )

    def is_balanced(self):
        debit, credit = self.compute_totals()
        return debit == credit


class JournalEntryLine(models.Model):
    entry = models.ForeignKey(
        JournalEntry, on_delete=models.CASCADE, related_name="lines"
    )
    line_number = models.PositiveIntegerField()
    account = models.ForeignKey(Account, on_delete=models.PROTECT)
    description = models.CharField(max_length=255, blank=True, default="")
    debit_amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )
    credit_amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )

    class Meta:
        db_table = "journal_entry_lines"
        ordering = ("entry", "line_number")
        constraints = [
            models.UniqueConstraint(
                fields=["entry", "line_number"], name="uq_jel_entry_line"
            )
        ]

    def __str__(self):
        return f"{self.entry_id}#{self.line_number} {self.account.code}"

    def clean(self):
        # exactly one side carries the amount
        if (self.debit_amount > 0) == (self.credit_amount > 0):
            raise ValidationError(
                "Each line must have either a debit or a credit amount, not both."
            )
        if self.debit_amount < 0 or self.credit_amount < 0:
            raise ValidationError("Line amounts cannot be negative.")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
