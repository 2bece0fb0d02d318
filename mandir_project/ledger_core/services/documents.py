import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from ..models import Bill, Expense, Invoice
from .audit_helper import log_action
from .numbering import next_document_number
from .periods import PeriodService
from .posting import ZERO, compute_gst, post_document

logger = logging.getLogger(__name__)


def _actor(user):
    return user if getattr(user, "is_authenticated", False) else None


def _totals_snapshot(doc, number):
    return {
        "number": number,
        "subtotal": str(doc.subtotal),
        "gst_rate": str(doc.gst_rate),
        "gst_amount": str(doc.gst_amount),
        "total": str(doc.total),
    }


# ----------------------------
# Bills (payables)
# ----------------------------
@transaction.atomic
def create_bill(
    subtotal,
    gst_rate,
    bill_date,
    vendor=None,
    due_date=None,
    description="",
    expense_account=None,
    user=None,
):
    """
    Record a vendor bill and post it:
      Debit:  expense account (bill's, else default) = total
      Credit: Accounts Payable                       = total
    """
    period = PeriodService.current()
    gst_amount, total = compute_gst(subtotal, gst_rate)
    bill = Bill.objects.create(
        bill_number=next_document_number("BILL", bill_date.year),
        bill_date=bill_date,
        due_date=due_date,
        vendor=vendor,
        expense_account=expense_account,
        subtotal=total - gst_amount,
        gst_rate=gst_rate,
        gst_amount=gst_amount,
        total=total,
        paid_amount=ZERO,
        payment_status="unpaid",
        period=period,
        description=description,
        created_by=_actor(user),
    )
    post_document("Bill", bill, user=user)
    log_action(
        action="bill.created",
        instance=bill,
        user=_actor(user),
        changes=_totals_snapshot(bill, bill.bill_number),
    )
    return bill


# ----------------------------
# Invoices (receivables)
# ----------------------------
@transaction.atomic
def create_invoice(
    subtotal,
    gst_rate,
    invoice_date,
    devotee=None,
    due_date=None,
    description="",
    income_account=None,
    user=None,
):
    """
    Record an invoice and post it:
      Debit:  Accounts Receivable                   = total
      Credit: income account (invoice's, else default) = total
    """
    period = PeriodService.current()
    gst_amount, total = compute_gst(subtotal, gst_rate)
    invoice = Invoice.objects.create(
        invoice_number=next_document_number("INV", invoice_date.year),
        invoice_date=invoice_date,
        due_date=due_date,
        devotee=devotee,
        income_account=income_account,
        subtotal=total - gst_amount,
        gst_rate=gst_rate,
        gst_amount=gst_amount,
        total=total,
        paid_amount=ZERO,
        payment_status="unpaid",
        period=period,
        description=description,
        created_by=_actor(user),
    )
    post_document("Invoice", invoice, user=user)
    log_action(
        action="invoice.created",
        instance=invoice,
        user=_actor(user),
        changes=_totals_snapshot(invoice, invoice.invoice_number),
    )
    return invoice


# ----------------------------
# Expenses (spent directly)
# ----------------------------
@transaction.atomic
def create_expense(
    amount,
    gst_rate,
    expense_date,
    expense_category,
    payment_status="unpaid",
    payment_mode="",
    bank_account=None,
    vendor=None,
    reference_number="",
    description="",
    user=None,
):
    """
    Record an expense. A paid expense is posted straight away
    (Dr category / Cr bank or cash); an unpaid one waits for pay_expense().
    """
    if payment_status not in ("unpaid", "paid"):
        raise ValidationError("An expense is either unpaid or paid")
    if payment_status == "paid" and not payment_mode:
        raise ValidationError("payment_mode is required for a paid expense")

    period = PeriodService.current()
    gst_amount, total = compute_gst(amount, gst_rate)
    expense = Expense.objects.create(
        expense_number=next_document_number("EXP", expense_date.year),
        expense_date=expense_date,
        expense_category=expense_category,
        vendor=vendor,
        subtotal=total - gst_amount,
        gst_rate=gst_rate,
        gst_amount=gst_amount,
        total=total,
        paid_amount=total if payment_status == "paid" else ZERO,
        payment_status=payment_status,
        payment_mode=payment_mode or "",
        bank_account=bank_account,
        reference_number=reference_number,
        period=period,
        description=description,
        created_by=_actor(user),
    )
    if expense.payment_status == "paid":
        post_document("Expense", expense, user=user)
    else:
        logger.info("Recorded unpaid expense %s; not posted", expense.expense_number)
    log_action(
        action="expense.created",
        instance=expense,
        user=_actor(user),
        changes=_totals_snapshot(expense, expense.expense_number)
        | {"payment_status": expense.payment_status},
    )
    return expense


@transaction.atomic
def pay_expense(expense, payment_mode, bank_account=None, reference_number="", user=None):
    """Settle an unpaid expense in full and post it."""
    expense = Expense.objects.select_for_update().get(pk=expense.pk)
    if expense.payment_status == "paid":
        raise ValidationError(f"Expense {expense.expense_number} is already paid")
    if not payment_mode:
        raise ValidationError("payment_mode is required")

    expense.payment_status = "paid"
    expense.paid_amount = expense.total
    expense.payment_mode = payment_mode
    expense.bank_account = bank_account
    if reference_number:
        expense.reference_number = reference_number
    # post into the current period, not the one the expense was recorded in
    expense.period = PeriodService.current()
    expense.save()

    post_document("Expense", expense, user=user)
    log_action(
        action="expense.paid",
        instance=expense,
        user=_actor(user),
        changes={"amount": str(expense.total), "payment_mode": payment_mode},
    )
    return expense
