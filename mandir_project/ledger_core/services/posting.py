import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction

from ..exceptions import AccountNotConfiguredError, UnbalancedJournalError
from ..models import Account, LedgerRow
from .periods import PeriodService

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")
CENT = Decimal("0.01")


def _decimal(value, label="Amount") -> Decimal:
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"{label} must be a number, got {value!r}")
    # NaN and Infinity parse but can never be posted
    if not number.is_finite():
        raise ValidationError(f"{label} must be a finite number, got {value!r}")
    return number


def to_money(value, label="Amount") -> Decimal:
    """Coerce to a 2-place Decimal (half-up), accepting str/int/Decimal."""
    if value is None or value == "":
        return ZERO
    try:
        return _decimal(value, label).quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # more digits than the decimal context can hold
        raise ValidationError(f"{label} {value!r} is out of range")


def compute_gst(subtotal, rate):
    """
    Return (gst_amount, total) for a subtotal and a percentage rate.
    e.g. compute_gst(1000, 18) -> (Decimal("180.00"), Decimal("1180.00"))
    """
    subtotal = to_money(subtotal, "Subtotal")
    rate = _decimal(rate or 0, "GST rate")
    if subtotal < 0:
        raise ValidationError("Subtotal cannot be negative")
    if rate < 0 or rate > 100:
        raise ValidationError("GST rate must be between 0 and 100")
    gst_amount = (subtotal * rate / Decimal("100")).quantize(CENT, rounding=ROUND_HALF_UP)
    return gst_amount, subtotal + gst_amount


def signed_delta(account, debit, credit) -> Decimal:
    # Debit-normal (asset/expense): +debit -credit
    # Credit-normal (liability/income/equity): +credit -debit
    return account.signed_delta(to_money(debit), to_money(credit))


@dataclass
class PostingLine:
    """One leg of a posting before it becomes a LedgerRow."""

    account: Account
    debit: Decimal = ZERO
    credit: Decimal = ZERO
    description: str = ""
    gst_applicable: bool = False
    gst_rate: Decimal = ZERO
    gst_amount: Decimal = ZERO

    def __post_init__(self):
        self.debit = to_money(self.debit)
        self.credit = to_money(self.credit)
        self.gst_rate = Decimal(str(self.gst_rate or 0))
        self.gst_amount = to_money(self.gst_amount)


# ----------------------------
# Well-known accounts
# ----------------------------
def default_account(role):
    """
    Resolve a role from settings.LEDGER_DEFAULT_ACCOUNTS
    ("cash", "accounts_payable", ...) to its Account row.
    """
    code = settings.LEDGER_DEFAULT_ACCOUNTS.get(role)
    if not code:
        raise AccountNotConfiguredError(f"No account code configured for role {role!r}")
    try:
        return Account.objects.by_code(code)
    except Account.DoesNotExist:
        raise AccountNotConfiguredError(
            f"Account {code} ({role}) is missing from the chart of accounts"
        )


def bank_ledger_account(bank_account=None):
    """Ledger account money moves through: the bank's mapping, else cash."""
    if bank_account is not None and bank_account.ledger_account_id:
        return bank_account.ledger_account
    return default_account("cash")


# ----------------------------
# Core posting procedure
# ----------------------------
def _validate_lines(lines):
    if not lines:
        raise ValidationError("A posting needs at least one ledger line")
    for line in lines:
        if line.debit < 0 or line.credit < 0:
            raise ValidationError("Ledger amounts cannot be negative")
        # exactly one side per line
        if (line.debit > 0) == (line.credit > 0):
            raise ValidationError(
                f"Line for account {line.account.code} must have exactly one of debit or credit"
            )
    total_debit = sum((line.debit for line in lines), ZERO)
    total_credit = sum((line.credit for line in lines), ZERO)
    if total_debit != total_credit:
        raise UnbalancedJournalError(
            f"Posting not balanced: debits={total_debit}, credits={total_credit}"
        )
    return total_debit


def post_ledger_lines(
    lines,
    *,
    transaction_date,
    reference_type,
    reference_id,
    period=None,
    user=None,
):
    """
    Append balanced ledger rows and move account balances, atomically.

    - period defaults to PeriodService.current(); a closed period is rejected
    - accounts are locked (select_for_update) in primary-key order so two
      postings over the same accounts queue instead of deadlocking
    - each row records the account balance right after it was applied
    Returns the created LedgerRows in input order.
    """
    lines = list(lines)
    try:
        amount = _validate_lines(lines)
    except (ValidationError, UnbalancedJournalError) as e:
        logger.warning("Rejected %s #%s posting: %s", reference_type, reference_id, e)
        raise

    with transaction.atomic():
        period = PeriodService.current() if period is None else PeriodService.ensure_open(period)

        account_ids = sorted({line.account.pk for line in lines})
        locked = {
            acct.pk: acct
            for acct in Account.objects.select_for_update().filter(pk__in=account_ids).order_by("pk")
        }
        inactive = [acct.code for acct in locked.values() if not acct.is_active]
        if inactive:
            raise ValidationError(f"Cannot post to inactive account(s): {', '.join(inactive)}")

        rows = []
        for line in lines:
            acct = locked[line.account.pk]
            acct.current_balance += acct.signed_delta(line.debit, line.credit)
            row = LedgerRow(
                transaction_date=transaction_date,
                account=acct,
                reference_type=reference_type,
                reference_id=reference_id,
                description=line.description,
                debit_amount=line.debit,
                credit_amount=line.credit,
                balance=acct.current_balance,
                gst_applicable=line.gst_applicable,
                gst_rate=line.gst_rate,
                gst_amount=line.gst_amount,
                period=period,
                created_by=user if getattr(user, "is_authenticated", False) else None,
            )
            row.save()
            rows.append(row)

        for acct in locked.values():
            # write the value read under the lock, never a stale copy
            Account.objects.filter(pk=acct.pk).update(current_balance=acct.current_balance)

    logger.info(
        "Posted %s #%s: %d ledger rows, amount %s, period %s",
        reference_type,
        reference_id,
        len(rows),
        amount,
        period.name,
    )
    return rows


def post_paired_ledger_entries(
    debit_account,
    credit_account,
    amount,
    *,
    transaction_date,
    reference_type,
    reference_id,
    description="",
    period=None,
    user=None,
    gst_rate=ZERO,
    gst_amount=ZERO,
    gst_on="debit",
):
    """Two-leg posting: Dr debit_account / Cr credit_account for amount."""
    amount = to_money(amount)
    if amount <= 0:
        raise ValidationError("Posting amount must be positive")
    gst = {
        "gst_applicable": to_money(gst_amount) > 0,
        "gst_rate": gst_rate,
        "gst_amount": gst_amount,
    }
    lines = [
        PostingLine(
            account=debit_account,
            debit=amount,
            description=description,
            **(gst if gst_on == "debit" else {}),
        ),
        PostingLine(
            account=credit_account,
            credit=amount,
            description=description,
            **(gst if gst_on == "credit" else {}),
        ),
    ]
    return post_ledger_lines(
        lines,
        transaction_date=transaction_date,
        reference_type=reference_type,
        reference_id=reference_id,
        period=period,
        user=user,
    )


# ----------------------------
# Posting rules per document type
# ----------------------------
def _describe(label, number, description):
    text = f"{label} {number}"
    return f"{text} - {description}" if description else text


def bill_lines(bill):
    # Dr expense (the bill's, else default) / Cr Accounts Payable, full total
    expense = bill.expense_account or default_account("default_expense")
    payable = default_account("accounts_payable")
    desc = _describe("Bill", bill.bill_number, bill.description)
    return [
        PostingLine(
            account=expense,
            debit=bill.total,
            description=desc,
            gst_applicable=bill.gst_amount > 0,
            gst_rate=bill.gst_rate,
            gst_amount=bill.gst_amount,
        ),
        PostingLine(account=payable, credit=bill.total, description=desc),
    ]


def invoice_lines(invoice):
    # Dr Accounts Receivable / Cr income (the invoice's, else default)
    receivable = default_account("accounts_receivable")
    income = invoice.income_account or default_account("default_income")
    desc = _describe("Invoice", invoice.invoice_number, invoice.description)
    return [
        PostingLine(account=receivable, debit=invoice.total, description=desc),
        PostingLine(
            account=income,
            credit=invoice.total,
            description=desc,
            gst_applicable=invoice.gst_amount > 0,
            gst_rate=invoice.gst_rate,
            gst_amount=invoice.gst_amount,
        ),
    ]


def expense_lines(expense):
    # Only paid expenses reach the ledger: Dr category / Cr bank or cash
    if expense.payment_status != "paid":
        raise ValidationError("Only paid expenses are posted to the ledger")
    desc = _describe("Expense", expense.expense_number, expense.description)
    return [
        PostingLine(
            account=expense.expense_category,
            debit=expense.total,
            description=desc,
            gst_applicable=expense.gst_amount > 0,
            gst_rate=expense.gst_rate,
            gst_amount=expense.gst_amount,
        ),
        PostingLine(
            account=bank_ledger_account(expense.bank_account),
            credit=expense.total,
            description=desc,
        ),
    ]


def bill_payment_lines(payment):
    desc = _describe("Payment for bill", payment.bill.bill_number, payment.description)
    return [
        PostingLine(account=default_account("accounts_payable"), debit=payment.amount, description=desc),
        PostingLine(account=bank_ledger_account(payment.bank_account), credit=payment.amount, description=desc),
    ]


def invoice_payment_lines(payment):
    desc = _describe("Receipt for invoice", payment.invoice.invoice_number, payment.description)
    return [
        PostingLine(account=bank_ledger_account(payment.bank_account), debit=payment.amount, description=desc),
        PostingLine(account=default_account("accounts_receivable"), credit=payment.amount, description=desc),
    ]


def journal_lines(entry):
    # one ledger row per journal line, in line order
    return [
        PostingLine(
            account=line.account,
            debit=line.debit_amount,
            credit=line.credit_amount,
            description=line.description or entry.description,
        )
        for line in entry.lines.select_related("account").order_by("line_number")
    ]


# reference_type -> (rule, date attribute on the source object)
POSTING_RULES = {
    "Bill": (bill_lines, "bill_date"),
    "Invoice": (invoice_lines, "invoice_date"),
    "Expense": (expense_lines, "expense_date"),
    "Bill Payment": (bill_payment_lines, "payment_date"),
    "Invoice Payment": (invoice_payment_lines, "payment_date"),
    "Journal": (journal_lines, "entry_date"),
}


def post_document(reference_type, source, user=None):
    """Apply the posting rule for reference_type to a saved source object."""
    try:
        rule, date_attr = POSTING_RULES[reference_type]
    except KeyError:
        raise ValueError(f"No posting rule for {reference_type!r}")
    return post_ledger_lines(
        rule(source),
        transaction_date=getattr(source, date_attr),
        reference_type=reference_type,
        reference_id=source.pk,
        period=source.period,
        user=user,
    )
