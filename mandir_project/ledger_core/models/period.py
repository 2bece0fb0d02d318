from django.core.exceptions import ValidationError  # Built-in way to raise validation errors
from django.db import models
from ..managers import PeriodQuerySet

PERIOD_STATUS = [
    ("open", "Open"),  # postings allowed
    ("closed", "Closed"),  # books finalized
]


# ---------- Period (financial period) ----------
class Period(models.Model):  # Time bucket every ledger row is attributed to

    # Human-readable label for the period
    name = models.CharField(max_length=50, unique=True)  # Example: "FY 2025-26"

    # Exact date range of the period
    start_date = models.DateField()
    end_date = models.DateField()

    status = models.CharField(max_length=10, choices=PERIOD_STATUS, default="open")
    """
        When status="closed":
            No new postings allowed.
            Prevents backdating transactions into finalized reports.
    """

    created_at = models.DateTimeField(auto_now_add=True)

    objects = PeriodQuerySet.as_manager()

    class Meta:
        db_table = "financial_periods"
        indexes = [
            models.Index(fields=["status", "start_date"], name="period_status_start_idx"),
        ]
        ordering = ("start_date",)

    def __str__(self):
        return f"{self.name} [{self.status}]"  # Example: "FY 2025-26 [open]"

    @property
    def is_open(self):
        return self.status == "open"

    def contains(self, date):
        return self.start_date <= date <= self.end_date

    def clean(self):
        if self.start_date and self.end_date and self.start_date >= self.end_date:
            raise ValidationError("start_date must be before end_date")

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
