import datetime
import logging
from decimal import ROUND_HALF_UP, Decimal

from django.core.exceptions import ValidationError
from django.db import models

from ..models import Account, Budget, LedgerRow
from ..models.budget import FINANCIAL_YEAR_RE
from .posting import ZERO, default_account

logger = logging.getLogger(__name__)


def _sums(qs):
    agg = qs.aggregate(
        debit=models.Sum("debit_amount"),
        credit=models.Sum("credit_amount"),
    )
    return agg["debit"] or ZERO, agg["credit"] or ZERO


# ----------------------------
# Budgets
# ----------------------------
def financial_year_bounds(financial_year):
    """ "2025-2026" -> (2025-04-01, 2026-03-31) """
    m = FINANCIAL_YEAR_RE.match(financial_year or "")
    if not m:
        raise ValidationError(f"Invalid financial year {financial_year!r}")
    start_year = int(m.group(1))
    return datetime.date(start_year, 4, 1), datetime.date(start_year + 1, 3, 31)


def budget_actual(account, financial_year):
    # income is measured by what was credited, expense by what was debited
    start, end = financial_year_bounds(financial_year)
    debit, credit = _sums(LedgerRow.objects.for_account(account).between(start, end))
    if account.ac_type == "income":
        return credit
    if account.ac_type == "expense":
        return debit
    return ZERO


def refresh_budget(budget):
    budget.actual_amount = budget_actual(budget.account, budget.financial_year)
    budget.save(update_fields=["actual_amount", "updated_at"])
    return budget


def budget_variance(budget):
    """Return (variance, percent) where variance = budgeted - actual."""
    variance = budget.budgeted_amount - budget.actual_amount
    if not budget.budgeted_amount:
        return variance, ZERO
    percent = (variance / budget.budgeted_amount * 100).quantize(
        Decimal("0.01"), rounding=ROUND_HALF_UP
    )
    return variance, percent


def refresh_budgets(financial_year=None):
    qs = Budget.objects.select_related("account")
    if financial_year:
        qs = qs.filter(financial_year=financial_year)
    budgets = [refresh_budget(b) for b in qs]
    logger.info("Refreshed actuals for %d budgets", len(budgets))
    return budgets


# ----------------------------
# Financial statements
# ----------------------------
def trial_balance():
    """
    Active accounts with their current balance placed in the column of
    their normal side. Balanced books give total_debit == total_credit.
    """
    rows = []
    total_debit = total_credit = ZERO
    for account in Account.objects.active().order_by("code"):
        balance = account.current_balance
        if account.normal_balance == "debit":
            debit, credit = balance, ZERO
        else:
            debit, credit = ZERO, balance
        total_debit += debit
        total_credit += credit
        rows.append(
            {
                "code": account.code,
                "name": account.name,
                "ac_type": account.ac_type,
                "debit": debit,
                "credit": credit,
            }
        )
    return {"rows": rows, "total_debit": total_debit, "total_credit": total_credit}


def profit_and_loss(start=None, end=None):
    income = []
    expense = []
    for account in Account.objects.filter(ac_type__in=("income", "expense")).order_by("code"):
        debit, credit = _sums(LedgerRow.objects.for_account(account).between(start, end))
        if account.ac_type == "income":
            income.append({"code": account.code, "name": account.name, "amount": credit})
        else:
            expense.append({"code": account.code, "name": account.name, "amount": debit})
    total_income = sum((r["amount"] for r in income), ZERO)
    total_expense = sum((r["amount"] for r in expense), ZERO)
    return {
        "income": income,
        "expense": expense,
        "total_income": total_income,
        "total_expense": total_expense,
        "net": total_income - total_expense,
    }


def balance_sheet():
    totals = {"asset": ZERO, "liability": ZERO, "equity": ZERO}
    for account in Account.objects.active().filter(ac_type__in=tuple(totals)):
        totals[account.ac_type] += account.current_balance
    return {
        "total_assets": totals["asset"],
        "total_liabilities": totals["liability"],
        "total_equity": totals["equity"],
    }


def gst_summary(start=None, end=None, side=None):
    """
    GST-bearing ledger rows grouped by rate, tax split into CGST/SGST halves.
    side="output" keeps tax charged on income (credit rows),
    side="input" keeps tax paid on expenses (debit rows).
    """
    grouped = {}
    qs = LedgerRow.objects.filter(gst_applicable=True).between(start, end)
    if side == "output":
        qs = qs.filter(credit_amount__gt=0)
    elif side == "input":
        qs = qs.filter(debit_amount__gt=0)
    elif side is not None:
        raise ValueError(f"Unknown GST side {side!r}")
    for row in qs:
        bucket = grouped.setdefault(
            row.gst_rate,
            {"rate": row.gst_rate, "taxable_value": ZERO, "total_tax": ZERO},
        )
        bucket["taxable_value"] += row.debit_amount + row.credit_amount - row.gst_amount
        bucket["total_tax"] += row.gst_amount

    rates = []
    for rate in sorted(grouped):
        bucket = grouped[rate]
        half = (bucket["total_tax"] / 2).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        bucket["cgst"] = half
        bucket["sgst"] = bucket["total_tax"] - half
        rates.append(bucket)
    return {
        "rates": rates,
        "total_taxable": sum((b["taxable_value"] for b in rates), ZERO),
        "total_tax": sum((b["total_tax"] for b in rates), ZERO),
        "total_cgst": sum((b["cgst"] for b in rates), ZERO),
        "total_sgst": sum((b["sgst"] for b in rates), ZERO),
    }


def cash_flow(start=None, end=None, account=None):
    account = account or default_account("cash")
    inflow, outflow = _sums(LedgerRow.objects.for_account(account).between(start, end))
    return {
        "account": account.code,
        "inflow": inflow,
        "outflow": outflow,
        "net": inflow - outflow,
    }


def account_ledger(account, start=None, end=None):
    return (
        LedgerRow.objects.for_account(account)
        .between(start, end)
        .select_related("period")
        .order_by("transaction_date", "id")
    )
