import datetime
import json
from decimal import Decimal

import pytest
from django.contrib.auth.models import AnonymousUser
from django.http import Http404

from ..models import BankAccount, BankTransaction, Bill, JournalEntry, LedgerRow
from ..views import (bank_reconcile_view, bill_payment_view, create_bill_view,
                     create_invoice_view, create_journal_entry_view,
                     gst_return_view, reconcile_view, trial_balance_view)
from .books import make_chart, make_period


def post_json(rf, view, data, user, **kwargs):
    request = rf.post("/", data=json.dumps(data), content_type="application/json")
    request.user = user
    response = view(request, **kwargs)
    return response.status_code, json.loads(response.content)


@pytest.fixture
def books(db):
    make_period()
    return make_chart()


@pytest.mark.django_db
def test_create_bill_and_pay_it(rf, books, django_user_model):
    user = django_user_model.objects.create_user(username="treasurer", password="pw")

    status, body = post_json(
        rf, create_bill_view, {"subtotal": "1000", "gst_rate": "18", "bill_date": "2025-06-01"}, user
    )
    assert status == 201
    assert body["number"] == "BILL-2025-0001"
    assert body["total"] == "1180.00"
    assert Bill.objects.get(pk=body["id"]).created_by == user

    status, body = post_json(
        rf,
        bill_payment_view,
        {"amount": "1180", "payment_date": "2025-06-10", "payment_mode": "cheque"},
        user,
        bill_id=body["id"],
    )
    assert status == 201
    assert body["payment_status"] == "paid"


@pytest.mark.django_db
def test_overpayment_is_a_400(rf, books):
    _, bill = post_json(
        rf, create_bill_view, {"subtotal": "100", "bill_date": "2025-06-01"}, AnonymousUser()
    )
    status, body = post_json(
        rf,
        bill_payment_view,
        {"amount": "500", "payment_date": "2025-06-10", "payment_mode": "cash"},
        AnonymousUser(),
        bill_id=bill["id"],
    )
    assert status == 400
    assert body["ok"] is False
    assert "exceeds outstanding" in body["error"]


@pytest.mark.django_db
def test_unknown_bill_is_a_404(rf, books):
    with pytest.raises(Http404):
        post_json(
            rf,
            bill_payment_view,
            {"amount": "1", "payment_date": "2025-06-10", "payment_mode": "cash"},
            AnonymousUser(),
            bill_id=999,
        )


@pytest.mark.django_db
def test_bad_input_is_a_400(rf, books):
    status, body = post_json(rf, create_bill_view, {"subtotal": "abc", "bill_date": "2025-06-01"}, AnonymousUser())
    assert status == 400
    assert "subtotal" in body["error"]

    status, _ = post_json(rf, create_bill_view, {"subtotal": "10"}, AnonymousUser())
    assert status == 400



@pytest.mark.django_db
@pytest.mark.parametrize("subtotal", ["NaN", "Infinity", "-Infinity", "1e40"])
def test_non_finite_or_huge_subtotal_is_a_400(rf, books, subtotal):
    status, body = post_json(
        rf, create_bill_view, {"subtotal": subtotal, "bill_date": "2025-06-01"}, AnonymousUser()
    )
    assert status == 400
    assert body["ok"] is False
    assert Bill.objects.count() == 0


@pytest.mark.django_db
@pytest.mark.parametrize("amount", ["abc", "NaN", "Infinity"])
def test_bad_journal_amount_is_a_400(rf, books, amount):
    data = {
        "entry_date": "2025-09-01",
        "lines": [
            {"account": "1000", "debit_amount": amount},
            {"account": "4300", "credit_amount": "500"},
        ],
    }
    status, body = post_json(rf, create_journal_entry_view, data, AnonymousUser())
    assert status == 400
    assert "number" in body["error"]
    assert JournalEntry.objects.count() == 0
    assert LedgerRow.objects.count() == 0


@pytest.mark.django_db
def test_non_finite_payment_amount_is_a_400(rf, books):
    _, bill = post_json(
        rf, create_bill_view, {"subtotal": "100", "bill_date": "2025-06-01"}, AnonymousUser()
    )
    status, body = post_json(
        rf,
        bill_payment_view,
        {"amount": "NaN", "payment_date": "2025-06-10", "payment_mode": "cash"},
        AnonymousUser(),
        bill_id=bill["id"],
    )
    assert status == 400
    assert "finite" in body["error"]


@pytest.mark.django_db
def test_journal_entry_endpoint(rf, books):
    good = {
        "entry_date": "2025-09-01",
        "description": "Annadanam donation",
        "lines": [
            {"account": "1000", "debit_amount": "500"},
            {"account": "4300", "credit_amount": "500"},
        ],
    }
    status, body = post_json(rf, create_journal_entry_view, good, AnonymousUser())
    assert status == 201
    assert body["entry_number"] == "JRNL-2025-0001"
    assert body["status"] == "posted"

    unbalanced = dict(good, lines=[
        {"account": "1000", "debit_amount": "500"},
        {"account": "4300", "credit_amount": "400"},
    ])
    status, body = post_json(rf, create_journal_entry_view, unbalanced, AnonymousUser())
    assert status == 400
    assert "not balanced" in body["error"]
    assert JournalEntry.objects.count() == 1
    assert LedgerRow.objects.filter(reference_type="Journal").count() == 2


@pytest.mark.django_db
def test_trial_balance_and_reconcile(rf, books):
    post_json(rf, create_bill_view, {"subtotal": "1000", "gst_rate": "18", "bill_date": "2025-06-01"}, AnonymousUser())

    request = rf.get("/")
    request.user = AnonymousUser()
    body = json.loads(trial_balance_view(request).content)
    assert Decimal(body["total_debit"]) == Decimal(body["total_credit"]) == Decimal("1180.00")

    status, body = post_json(rf, reconcile_view, {}, AnonymousUser())
    assert status == 200
    assert body["drifts"] == []


@pytest.mark.django_db
def test_bank_reconcile_endpoint(rf, books):
    bank = BankAccount.objects.create(
        account_name="Temple Current", bank_name="Canara Bank", account_number="4455"
    )
    _, bill = post_json(
        rf, create_bill_view, {"subtotal": "250", "bill_date": "2025-06-01"}, AnonymousUser()
    )
    post_json(
        rf,
        bill_payment_view,
        {"amount": "250", "payment_date": "2025-06-10", "payment_mode": "cheque", "bank_account_id": bank.pk},
        AnonymousUser(),
        bill_id=bill["id"],
    )
    line = BankTransaction.objects.create(
        bank_account=bank,
        transaction_date=datetime.date(2025, 6, 12),
        transaction_type="debit",
        amount=Decimal("250.00"),
    )
    row = LedgerRow.objects.get(reference_type="Bill Payment", credit_amount=Decimal("250.00"))

    status, body = post_json(
        rf,
        bank_reconcile_view,
        {"transaction_ids": [line.pk], "ledger_row_ids": [row.pk]},
        AnonymousUser(),
        bank_account_id=bank.pk,
    )
    assert status == 200
    assert body["reconciled"] == [line.pk]
    assert body["unreconciled_count"] == 0
    # no ledger account mapped: the bank posts through cash
    assert body["ledger_account"] == "1000"

    status, body = post_json(
        rf, bank_reconcile_view, {"transaction_ids": "all"}, AnonymousUser(), bank_account_id=bank.pk
    )
    assert status == 400


@pytest.mark.django_db
def test_gst_return_endpoint(rf, books):
    post_json(
        rf,
        create_invoice_view,
        {"subtotal": "1000", "gst_rate": "18", "invoice_date": "2025-07-01"},
        AnonymousUser(),
    )
    status, body = post_json(
        rf, gst_return_view, {"return_period": "2025-07", "return_type": "GSTR-3B"}, AnonymousUser()
    )
    assert status == 201
    assert body["taxable_value"] == "1000.00"
    assert body["total_tax_amount"] == "180.00"
    assert body["status"] == "draft"

    status, body = post_json(
        rf, gst_return_view, {"return_period": "July", "return_type": "GSTR-3B"}, AnonymousUser()
    )
    assert status == 400
