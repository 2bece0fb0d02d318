import re
from decimal import Decimal
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from .account import Account

FINANCIAL_YEAR_RE = re.compile(r"^(\d{4})-(\d{4})$")


class Budget(models.Model):
    # "2025-2026" runs 1 April 2025 to 31 March 2026
    financial_year = models.CharField(max_length=9)
    account = models.ForeignKey(Account, on_delete=models.PROTECT, related_name="budgets")
    budgeted_amount = models.DecimalField(
        max_digits=18,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(0)],
    )
    # Cached by services.reports.refresh_budget
    actual_amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "budgets"
        ordering = ("financial_year", "account__code")
        constraints = [
            models.UniqueConstraint(
                fields=["financial_year", "account"], name="uq_budget_year_account"
            )
        ]

    def __str__(self):
        return f"{self.financial_year} {self.account.code}"

    def clean(self):
        m = FINANCIAL_YEAR_RE.match(self.financial_year or "")
        if not m or int(m.group(2)) != int(m.group(1)) + 1:
            raise ValidationError("financial_year must look like 2025-2026")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
