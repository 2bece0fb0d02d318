import re
from decimal import Decimal
from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from .budget import FINANCIAL_YEAR_RE

GST_RETURN_TYPES = [
    ("GSTR-1", "GSTR-1"),  # outward supplies, monthly
    ("GSTR-3B", "GSTR-3B"),  # summary return, monthly
    ("GSTR-9", "GSTR-9"),  # annual return
]
ANNUAL_RETURN_TYPES = ("GSTR-9",)

GST_RETURN_STATUS = [
    ("draft", "Draft"),
    ("filed", "Filed"),
]

# "2025-06" for monthly returns, "2025-2026" for the annual one
MONTHLY_PERIOD_RE = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")


def _amount():
    return models.DecimalField(
        max_digits=18,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(0)],
    )


class GSTReturn(models.Model):
    """
    A GST return for one period and return type.
    total_tax_amount and status are derived on save:
    - total = CGST + SGST + IGST
    - a filing date makes the return "filed"; filed returns are final
    """

    return_period = models.CharField(max_length=9)
    return_type = models.CharField(max_length=10, choices=GST_RETURN_TYPES, default="GSTR-3B")
    filing_date = models.DateField(null=True, blank=True)

    taxable_value = _amount()
    cgst_amount = _amount()
    sgst_amount = _amount()
    igst_amount = _amount()
    total_tax_amount = _amount()

    status = models.CharField(max_length=10, choices=GST_RETURN_STATUS, default="draft")
    remarks = models.TextField(blank=True, default="")

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="+",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "gst_returns"
        ordering = ("-return_period", "return_type")
        constraints = [
            # one return of each type per period
            models.UniqueConstraint(
                fields=["return_period", "return_type"], name="uq_gst_return_period_type"
            ),
        ]

    def __str__(self):
        return f"{self.return_type} {self.return_period} ({self.get_status_display()})"

    def clean(self):
        if self.return_type in ANNUAL_RETURN_TYPES:
            if not FINANCIAL_YEAR_RE.match(self.return_period or ""):
                raise ValidationError(
                    f"{self.return_type} period must be a financial year like 2025-2026."
                )
        elif not MONTHLY_PERIOD_RE.match(self.return_period or ""):
            raise ValidationError(
                f"{self.return_type} period must be a month like 2025-06."
            )

    def save(self, *args, **kwargs):
        self.total_tax_amount = (
            (self.cgst_amount or 0) + (self.sgst_amount or 0) + (self.igst_amount or 0)
        )
        self.status = "filed" if self.filing_date else "draft"
        self.full_clean()
        return super().save(*args, **kwargs)
