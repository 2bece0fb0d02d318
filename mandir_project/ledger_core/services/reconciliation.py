import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db import models, transaction

from ..models import Account, LedgerRow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BalanceDrift:
    account_code: str
    stored: Decimal
    expected: Decimal

    @property
    def difference(self):
        return self.stored - self.expected


def expected_balance(account):
    """
    Balance implied by the ledger: opening balance plus every posted
    row, signed by the account's normal side.
    """
    # To prevent 'or' from being applied inside aggregate() accidentally
    # Compute agg with Sum(...) first
    agg = LedgerRow.objects.for_account(account).aggregate(
        debit=models.Sum("debit_amount"),
        credit=models.Sum("credit_amount"),
    )
    # If nothing was posted, Django returns None → so fallback to 0
    return account.opening_balance + account.signed_delta(agg["debit"] or 0, agg["credit"] or 0)


def reconcile_account(account, fix=False):
    """
    Compare current_balance with the ledger. Returns a BalanceDrift when
    they disagree (after correcting the stored value if fix=True), else None.
    """
    with transaction.atomic():
        # same lock posting takes, so no row lands between read and fix
        account = Account.objects.select_for_update().get(pk=account.pk)
        expected = expected_balance(account)
        if account.current_balance == expected:
            return None

        drift = BalanceDrift(account.code, account.current_balance, expected)
        logger.warning(
            "Balance drift on %s: stored %s, ledger %s",
            drift.account_code,
            drift.stored,
            drift.expected,
        )
        if fix:
            Account.objects.filter(pk=account.pk).update(current_balance=expected)
            logger.info("Reset %s current_balance to %s", account.code, expected)
        return drift


def reconcile_all(fix=False):
    drifts = []
    for account in Account.objects.order_by("pk"):
        drift = reconcile_account(account, fix=fix)
        if drift is not None:
            drifts.append(drift)
    return drifts
