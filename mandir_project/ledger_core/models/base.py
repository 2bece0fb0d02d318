from decimal import Decimal
from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

PAYMENT_STATUS = [
    ("unpaid", "Unpaid"),
    ("partial", "Partial"),
    ("paid", "Paid"),
]

PAYMENT_MODES = [
    ("cash", "Cash"),
    ("cheque", "Cheque"),
    ("online_transfer", "Online Transfer"),
    ("upi", "UPI"),
    ("card", "Card"),
    ("dd", "Demand Draft"),
]


def money_field(**kwargs):
    kwargs.setdefault("default", Decimal("0.00"))
    return models.DecimalField(max_digits=18, decimal_places=2, **kwargs)


class TaxedDocument(models.Model):
    """
    Shared header for bills, invoices and expenses.

    total = subtotal + gst_amount, where gst_amount is
    subtotal * gst_rate / 100 rounded half-up to paise
    (see services.posting.compute_gst).
    """

    due_date = models.DateField(null=True, blank=True)
    subtotal = money_field(validators=[MinValueValidator(0)])
    gst_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    gst_amount = money_field()
    total = money_field()
    paid_amount = money_field()
    payment_status = models.CharField(
        max_length=10, choices=PAYMENT_STATUS, default="unpaid"
    )
    period = models.ForeignKey(
        "ledger_core.Period",
        null=True,
        blank=True,
        on_delete=models.PROTECT,  # keep historical documents attributable
        related_name="+",
    )
    description = models.TextField(blank=True, default="")
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="+",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True

    @property
    def outstanding(self):
        return max(self.total - self.paid_amount, Decimal("0.00"))

    def clean(self):
        if self.subtotal + self.gst_amount != self.total:
            raise ValidationError("total must equal subtotal + gst_amount")
        if self.paid_amount < 0:
            raise ValidationError("paid_amount cannot be negative")
        # the document can never be paid beyond its total
        if self.paid_amount > self.total:
            raise ValidationError("paid_amount cannot exceed total")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)


class PaymentRecord(models.Model):
    """Shared fields of a payment applied against a bill or invoice."""

    payment_date = models.DateField()
    amount = money_field(validators=[MinValueValidator(Decimal("0.01"))])
    payment_mode = models.CharField(max_length=20, choices=PAYMENT_MODES)
    bank_account = models.ForeignKey(
        "ledger_core.BankAccount",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="+",
    )
    reference_number = models.CharField(max_length=100, blank=True, default="")
    description = models.TextField(blank=True, default="")
    period = models.ForeignKey(
        "ledger_core.Period",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="+",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="+",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True
        ordering = ("payment_date", "id")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
