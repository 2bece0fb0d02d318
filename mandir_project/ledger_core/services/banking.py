import logging

from django.core.exceptions import ValidationError
from django.db import models, transaction
from django.utils import timezone

from ..models import BankAccount, BankTransaction, LedgerRow
from .audit_helper import log_action
from .posting import ZERO, bank_ledger_account

logger = logging.getLogger(__name__)


def unreconciled_transactions(bank_account):
    return BankTransaction.objects.filter(
        bank_account=bank_account, is_reconciled=False
    ).order_by("transaction_date", "id")


def bank_ledger_rows(bank_account, start=None, end=None):
    """Ledger rows on the account this bank posts through."""
    return (
        LedgerRow.objects.for_account(bank_ledger_account(bank_account))
        .between(start, end)
        .order_by("transaction_date", "id")
    )


def _statement_net(transactions):
    return sum((tx.signed_amount for tx in transactions), ZERO)


def _ledger_net(rows):
    # money into the bank is a debit on its asset account
    return sum((row.debit_amount - row.credit_amount for row in rows), ZERO)


@transaction.atomic
def reconcile_bank_transactions(bank_account, transaction_ids, ledger_row_ids=None, user=None):
    """
    Mark statement lines of one bank account as reconciled.

    When ledger_row_ids are given they must sit on the bank's ledger
    account, and the net of the selected statement lines must equal the
    net of the selected rows. Returns the reconciled transactions.
    """
    transaction_ids = set(transaction_ids or ())
    if not transaction_ids:
        raise ValidationError("Select at least one bank transaction to reconcile")

    bank_account = BankAccount.objects.select_for_update().get(pk=bank_account.pk)
    # lock the statement lines so a line cannot be reconciled twice
    txs = list(
        BankTransaction.objects.select_for_update()
        .filter(pk__in=transaction_ids, bank_account=bank_account)
        .order_by("pk")
    )
    if len(txs) != len(transaction_ids):
        missing = sorted(transaction_ids - {tx.pk for tx in txs})
        raise ValidationError(
            f"Transactions {missing} do not belong to {bank_account.account_name}"
        )
    done = [tx.pk for tx in txs if tx.is_reconciled]
    if done:
        raise ValidationError(f"Transactions {done} are already reconciled")

    matched = []
    if ledger_row_ids:
        ledger_account = bank_ledger_account(bank_account)
        rows = list(LedgerRow.objects.filter(pk__in=set(ledger_row_ids)))
        if len(rows) != len(set(ledger_row_ids)):
            raise ValidationError("Unknown ledger row selected")
        foreign = [row.pk for row in rows if row.account_id != ledger_account.pk]
        if foreign:
            raise ValidationError(
                f"Ledger rows {foreign} are not on account {ledger_account.code}"
            )
        statement, ledger = _statement_net(txs), _ledger_net(rows)
        if statement != ledger:
            logger.warning(
                "Bank reconciliation mismatch on %s: statement %s, ledger %s",
                bank_account.account_number,
                statement,
                ledger,
            )
            raise ValidationError(
                f"Selected statement lines ({statement}) do not match "
                f"the selected ledger rows ({ledger})"
            )
        matched = [row.pk for row in rows]

    actor = user if getattr(user, "is_authenticated", False) else None
    now = timezone.now()
    for tx in txs:
        tx.is_reconciled = True
        tx.reconciled_at = now
        tx.reconciled_by = actor
        tx.save(update_fields=["is_reconciled", "reconciled_at", "reconciled_by"])

    bank_account.last_reconciled_at = timezone.localdate()
    bank_account.save(update_fields=["last_reconciled_at"])

    log_action(
        action="bank.reconciled",
        instance=bank_account,
        user=actor,
        changes={
            "transactions": [tx.pk for tx in txs],
            "ledger_rows": matched,
            "net": str(_statement_net(txs)),
        },
    )
    logger.info(
        "Reconciled %d transaction(s) on bank account %s",
        len(txs),
        bank_account.account_number,
    )
    return txs


def bank_reconciliation_summary(bank_account, as_of=None):
    """
    Statement balance (opening + statement lines) against the book
    balance on the bank's ledger account, with what is still open.
    """
    statement_qs = BankTransaction.objects.filter(bank_account=bank_account)
    if as_of is not None:
        statement_qs = statement_qs.filter(transaction_date__lte=as_of)
    statement_balance = bank_account.opening_balance + _statement_net(statement_qs)

    ledger_account = bank_ledger_account(bank_account)
    agg = LedgerRow.objects.for_account(ledger_account).between(None, as_of).aggregate(
        debit=models.Sum("debit_amount"),
        credit=models.Sum("credit_amount"),
    )
    book_balance = ledger_account.opening_balance + ledger_account.signed_delta(
        agg["debit"] or 0, agg["credit"] or 0
    )

    open_lines = statement_qs.filter(is_reconciled=False)
    return {
        "bank_account": bank_account.account_number,
        "ledger_account": ledger_account.code,
        "statement_balance": statement_balance,
        "book_balance": book_balance,
        "difference": statement_balance - book_balance,
        "unreconciled_count": open_lines.count(),
        "unreconciled_net": _statement_net(open_lines),
    }
