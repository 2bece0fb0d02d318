import json
import logging
from decimal import Decimal, InvalidOperation
from functools import wraps

from django.core.exceptions import ValidationError
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.utils.dateparse import parse_date
from django.views.decorators.http import require_GET, require_POST

from .exceptions import UnbalancedJournalError
from .models import Account, BankAccount, Bill, Devotee, Invoice, Vendor
from .services.banking import (bank_reconciliation_summary,
                               reconcile_bank_transactions)
from .services.documents import create_bill, create_expense, create_invoice
from .services.gst import prepare_gst_return
from .services.journal import create_journal_entry
from .services.payments import record_bill_payment, record_invoice_payment
from .services.reconciliation import reconcile_all
from .services.reports import trial_balance

logger = logging.getLogger(__name__)


def _error_message(e):
    if isinstance(e, ValidationError):
        return "; ".join(e.messages)
    return str(e)


def json_api(view):
    """Business-rule failures become 400 {"ok": false, "error": ...}."""

    @wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except (ValidationError, UnbalancedJournalError) as e:
            return JsonResponse({"ok": False, "error": _error_message(e)}, status=400)

    return wrapper


# ----------------------------
# Request parsing helpers
# ----------------------------
def _body(request):
    try:
        data = json.loads(request.body or b"{}")
    except ValueError:
        raise ValidationError("Request body must be valid JSON")
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _decimal(data, key, default=None):
    value = data.get(key, default)
    if value is None:
        raise ValidationError(f"{key} is required")
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"{key} must be a number")
    if not number.is_finite():
        raise ValidationError(f"{key} must be a finite number")
    return number


def _date(data, key, required=True):
    raw = data.get(key)
    if not raw:
        if required:
            raise ValidationError(f"{key} is required")
        return None
    try:
        value = parse_date(raw)
    except (TypeError, ValueError):
        value = None
    if value is None:
        raise ValidationError(f"{key} must be a date (YYYY-MM-DD)")
    return value


def _optional(model, pk):
    # unknown ids are a 404, absent ones are None
    return get_object_or_404(model, pk=pk) if pk else None


def _account_by_code(code):
    return get_object_or_404(Account, code=code) if code else None


def _document_json(doc, number):
    return {
        "ok": True,
        "id": doc.pk,
        "number": number,
        "subtotal": doc.subtotal,
        "gst_amount": doc.gst_amount,
        "total": doc.total,
        "paid_amount": doc.paid_amount,
        "payment_status": doc.payment_status,
    }


# ----------------------------
# Documents
# ----------------------------
@require_POST
@json_api
def create_bill_view(request):
    data = _body(request)
    bill = create_bill(
        subtotal=_decimal(data, "subtotal"),
        gst_rate=_decimal(data, "gst_rate", 0),
        bill_date=_date(data, "bill_date"),
        vendor=_optional(Vendor, data.get("vendor_id")),
        due_date=_date(data, "due_date", required=False),
        description=data.get("description", ""),
        expense_account=_account_by_code(data.get("expense_account")),
        user=request.user,
    )
    return JsonResponse(_document_json(bill, bill.bill_number), status=201)


@require_POST
@json_api
def bill_payment_view(request, bill_id):
    bill = get_object_or_404(Bill, pk=bill_id)
    data = _body(request)
    payment = record_bill_payment(
        bill,
        amount=_decimal(data, "amount"),
        payment_date=_date(data, "payment_date"),
        payment_mode=data.get("payment_mode", ""),
        bank_account=_optional(BankAccount, data.get("bank_account_id")),
        reference_number=data.get("reference_number", ""),
        description=data.get("description", ""),
        user=request.user,
    )
    bill.refresh_from_db()
    return JsonResponse(
        {"ok": True, "payment_id": payment.pk} | _document_json(bill, bill.bill_number),
        status=201,
    )


@require_POST
@json_api
def create_invoice_view(request):
    data = _body(request)
    invoice = create_invoice(
        subtotal=_decimal(data, "subtotal"),
        gst_rate=_decimal(data, "gst_rate", 0),
        invoice_date=_date(data, "invoice_date"),
        devotee=_optional(Devotee, data.get("devotee_id")),
        due_date=_date(data, "due_date", required=False),
        description=data.get("description", ""),
        income_account=_account_by_code(data.get("income_account")),
        user=request.user,
    )
    return JsonResponse(_document_json(invoice, invoice.invoice_number), status=201)


@require_POST
@json_api
def invoice_payment_view(request, invoice_id):
    invoice = get_object_or_404(Invoice, pk=invoice_id)
    data = _body(request)
    payment = record_invoice_payment(
        invoice,
        amount=_decimal(data, "amount"),
        payment_date=_date(data, "payment_date"),
        payment_mode=data.get("payment_mode", ""),
        bank_account=_optional(BankAccount, data.get("bank_account_id")),
        reference_number=data.get("reference_number", ""),
        description=data.get("description", ""),
        user=request.user,
    )
    invoice.refresh_from_db()
    return JsonResponse(
        {"ok": True, "payment_id": payment.pk} | _document_json(invoice, invoice.invoice_number),
        status=201,
    )


@require_POST
@json_api
def create_expense_view(request):
    data = _body(request)
    category = _account_by_code(data.get("expense_category"))
    if category is None:
        raise ValidationError("expense_category is required")
    expense = create_expense(
        amount=_decimal(data, "amount"),
        gst_rate=_decimal(data, "gst_rate", 0),
        expense_date=_date(data, "expense_date"),
        expense_category=category,
        payment_status=data.get("payment_status", "unpaid"),
        payment_mode=data.get("payment_mode", ""),
        bank_account=_optional(BankAccount, data.get("bank_account_id")),
        vendor=_optional(Vendor, data.get("vendor_id")),
        reference_number=data.get("reference_number", ""),
        description=data.get("description", ""),
        user=request.user,
    )
    return JsonResponse(_document_json(expense, expense.expense_number), status=201)


@require_POST
@json_api
def create_journal_entry_view(request):
    data = _body(request)
    lines = data.get("lines")
    if not isinstance(lines, list):
        raise ValidationError("lines must be a list")
    # lines reference accounts by chart code
    parsed = [
        {
            "account": get_object_or_404(Account, code=line.get("account")),
            "debit_amount": line.get("debit_amount", 0),
            "credit_amount": line.get("credit_amount", 0),
            "description": line.get("description", ""),
        }
        for line in lines
        if isinstance(line, dict)
    ]
    if len(parsed) != len(lines):
        raise ValidationError("each line must be a JSON object")
    entry = create_journal_entry(
        entry_date=_date(data, "entry_date"),
        lines=parsed,
        description=data.get("description", ""),
        user=request.user,
    )
    return JsonResponse(
        {"ok": True, "id": entry.pk, "entry_number": entry.entry_number, "status": entry.status},
        status=201,
    )


# ----------------------------
# Reports / maintenance
# ----------------------------
@require_GET
def trial_balance_view(request):
    return JsonResponse({"ok": True} | trial_balance())


@require_POST
@json_api
def reconcile_view(request):
    data = _body(request)
    drifts = reconcile_all(fix=bool(data.get("fix", False)))
    return JsonResponse(
        {
            "ok": True,
            "drifts": [
                {"account": d.account_code, "stored": d.stored, "expected": d.expected}
                for d in drifts
            ],
        }
    )


# ----------------------------
# Bank reconciliation / GST returns
# ----------------------------
def _id_list(data, key):
    ids = data.get(key) or []
    if not isinstance(ids, list) or not all(isinstance(i, int) for i in ids):
        raise ValidationError(f"{key} must be a list of ids")
    return ids


@require_POST
@json_api
def bank_reconcile_view(request, bank_account_id):
    bank_account = get_object_or_404(BankAccount, pk=bank_account_id)
    data = _body(request)
    txs = reconcile_bank_transactions(
        bank_account,
        _id_list(data, "transaction_ids"),
        ledger_row_ids=_id_list(data, "ledger_row_ids"),
        user=request.user,
    )
    summary = bank_reconciliation_summary(bank_account)
    return JsonResponse(
        {"ok": True, "reconciled": [tx.pk for tx in txs]} | summary
    )


@require_POST
@json_api
def gst_return_view(request):
    data = _body(request)
    gst_return = prepare_gst_return(
        return_period=data.get("return_period", ""),
        return_type=data.get("return_type", "GSTR-3B"),
        igst_amount=_decimal(data, "igst_amount", 0),
        filing_date=_date(data, "filing_date", required=False),
        remarks=data.get("remarks", ""),
        user=request.user,
    )
    return JsonResponse(
        {
            "ok": True,
            "id": gst_return.pk,
            "return_period": gst_return.return_period,
            "return_type": gst_return.return_type,
            "taxable_value": gst_return.taxable_value,
            "cgst_amount": gst_return.cgst_amount,
            "sgst_amount": gst_return.sgst_amount,
            "igst_amount": gst_return.igst_amount,
            "total_tax_amount": gst_return.total_tax_amount,
            "status": gst_return.status,
        },
        status=201,
    )
