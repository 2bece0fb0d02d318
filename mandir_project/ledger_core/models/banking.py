from decimal import Decimal
from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from ..managers import ActiveManager
from .account import Account

BANK_ACCOUNT_TYPES = [
    ("savings", "Savings"),
    ("current", "Current"),
    ("fixed_deposit", "Fixed Deposit"),
]


# ---------- BankAccount ----------
class BankAccount(models.Model):
    account_name = models.CharField(max_length=200)
    bank_name = models.CharField(max_length=200)
    account_number = models.CharField(max_length=34, unique=True)
    ifsc_code = models.CharField(max_length=11, blank=True, default="")
    branch = models.CharField(max_length=200, blank=True, default="")
    account_type = models.CharField(
        max_length=20, choices=BANK_ACCOUNT_TYPES, default="savings"
    )
    opening_balance = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )
    # The chart-of-accounts asset this bank posts to.
    # Left empty, payments through this bank hit the cash account.
    ledger_account = models.ForeignKey(
        Account,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="bank_accounts",
    )
    # For reconciliation workflows
    last_reconciled_at = models.DateField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = ActiveManager()

    class Meta:
        db_table = "bank_accounts"
        ordering = ("bank_name", "account_name")

    def __str__(self):
        # show only the last digits of the account number
        return f"{self.bank_name} – {self.account_name} (…{self.account_number[-4:]})"

    def clean(self):
        if self.ledger_account_id and self.ledger_account.ac_type != "asset":
            raise ValidationError("Bank ledger account must be an asset account.")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)


BANK_TX_TYPES = [
    # as printed on the bank statement
    ("credit", "Credit (deposit)"),
    ("debit", "Debit (withdrawal)"),
]


# ---------- BankTransaction ----------
class BankTransaction(models.Model):
    """
    One bank statement line. Entered from the statement, then marked
    reconciled once it has been matched to the bank's ledger rows
    (see services.banking.reconcile_bank_transactions).
    """

    # prevent BankAccount deletion if transactions exist
    bank_account = models.ForeignKey(
        BankAccount, on_delete=models.PROTECT, related_name="transactions"
    )
    transaction_date = models.DateField()
    transaction_type = models.CharField(max_length=10, choices=BANK_TX_TYPES)
    # always positive, the direction comes from transaction_type
    amount = models.DecimalField(
        max_digits=18,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    reference_number = models.CharField(max_length=100, blank=True, default="")
    description = models.TextField(blank=True, default="")

    is_reconciled = models.BooleanField(default=False)
    reconciled_at = models.DateTimeField(null=True, blank=True)
    reconciled_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="+",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "bank_transactions"
        ordering = ("-transaction_date", "-id")
        indexes = [
            models.Index(
                fields=["bank_account", "is_reconciled"], name="bank_tx_reconciled_idx"
            ),
            models.Index(fields=["transaction_date"], name="bank_tx_date_idx"),
        ]

    def __str__(self):
        return f"{self.transaction_date} {self.get_transaction_type_display()} {self.amount}"

    @property
    def signed_amount(self):
        """Deposits raise the bank balance, withdrawals lower it."""
        return self.amount if self.transaction_type == "credit" else -self.amount

    def clean(self):
        if self.is_reconciled and not self.reconciled_at:
            raise ValidationError("A reconciled transaction needs reconciled_at.")
        if not self.is_reconciled and self.reconciled_at:
            raise ValidationError("Only reconciled transactions carry reconciled_at.")

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
