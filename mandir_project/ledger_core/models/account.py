from decimal import Decimal
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from ..managers import AccountManager

# Choice Lists
AC_TYPES = [
    # Used in Account model to classify general ledger accounts
    ("asset", "Asset"),
    ("liability", "Liability"),
    ("equity", "Equity"),
    ("income", "Income"),
    ("expense", "Expense"),
]

# Assets/Expenses grow on the debit side,
# Liabilities/Equity/Income grow on the credit side
DEBIT_NORMAL_TYPES = ("asset", "expense")


class Account(models.Model):
    """
    Chart of Accounts node.
    - code is unique and sortable ("1000", "1200", "2000" ...)
    - ac_type: determines reporting -BS vs P&L and the sign of postings
    - current_balance: running balance maintained by every ledger posting,
      recomputable from general_ledger (see services.reconciliation)
    """

    code = models.CharField(max_length=32, unique=True)
    name = models.CharField(max_length=200)  # "Cash on Hand", "Accounts Payable"
    ac_type = models.CharField(max_length=10, choices=AC_TYPES)

    # Optional hierarchy:
    # (e.g. 5000 Temple Expenses → 5200 General Expenses)
    parent = models.ForeignKey(
        "self",
        null=True,
        blank=True,
        on_delete=models.PROTECT,  # you can’t delete a parent if children exist
        related_name="children",
    )

    is_gst_applicable = models.BooleanField(default=False)
    gst_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )

    opening_balance = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )
    # Only posting code writes this (under a row lock)
    current_balance = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )

    description = models.TextField(blank=True, default="")
    # “soft deactivate” accounts (hide in lists, stop new postings)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = AccountManager()

    class Meta:
        db_table = "chart_of_accounts"
        ordering = ("code",)
        indexes = [
            models.Index(fields=["ac_type"], name="coa_ac_type_idx"),
            models.Index(fields=["parent"], name="coa_parent_idx"),
        ]

    def __str__(self):
        return f"{self.code} – {self.name}"  # Example: "1000 – Cash on Hand"

    @property
    def normal_balance(self):
        return "debit" if self.ac_type in DEBIT_NORMAL_TYPES else "credit"

    def signed_delta(self, debit, credit):
        """Change to current_balance caused by a debit/credit pair."""
        debit = Decimal(debit or 0)
        credit = Decimal(credit or 0)
        if self.normal_balance == "debit":
            return debit - credit
        return credit - debit

    def clean(self):
        if self.parent_id and self.pk and self.parent_id == self.pk:
            raise ValidationError("An account cannot be its own parent.")
        if not self.is_gst_applicable and self.gst_rate:
            raise ValidationError("GST rate requires is_gst_applicable.")

    def save(self, *args, **kwargs):
        if not self.pk:
            # a new account starts at its opening balance
            self.current_balance = self.opening_balance
            self.full_clean()
            return super().save(*args, **kwargs)

        old = Account.objects.filter(pk=self.pk).first()
        if old is None:
            self.full_clean()
            return super().save(*args, **kwargs)

        # current_balance belongs to the posting code: never write back
        # a copy that may have been loaded before the latest posting
        self.current_balance = old.current_balance
        opening_changed = old.opening_balance != self.opening_balance

        # If account was active before, but now being set to inactive
        if old.is_active and not self.is_active:
            from .ledger import LedgerRow

            # balances still carried by the ledger cannot be hidden
            if LedgerRow.objects.filter(account=self).exists() and old.current_balance:
                raise ValidationError(
                    "Cannot disable an account with a non-zero ledger balance."
                )
        if opening_changed:
            from .ledger import LedgerRow

            if LedgerRow.objects.filter(account=self).exists():
                raise ValidationError(
                    "Opening balance is frozen once the account has ledger rows."
                )
            self.current_balance = self.opening_balance
        self.full_clean()

        if not opening_changed and not kwargs.get("update_fields"):
            kwargs["update_fields"] = [
                f.name
                for f in self._meta.concrete_fields
                if not f.primary_key and f.name != "current_balance"
            ]
        return super().save(*args, **kwargs)
