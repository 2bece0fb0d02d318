import datetime
from decimal import Decimal
from django.core.exceptions import ValidationError
from django.db import transaction
from django.test import TestCase
from ..exceptions import NoOpenPeriodError, UnbalancedJournalError
from ..models import Account, LedgerRow
from ..services.documents import create_bill, create_invoice
from ..services.posting import (PostingLine, compute_gst, post_ledger_lines,
                                post_paired_ledger_entries, signed_delta,
                                to_money)
from .books import make_chart, make_period


class ComputeGstTests(TestCase):
    def test_eighteen_percent_on_thousand(self):
        self.assertEqual(compute_gst(1000, 18), (Decimal("180.00"), Decimal("1180.00")))

    def test_rounds_half_up_to_paise(self):
        # 0.05 * 50% = 0.025 -> 0.03
        self.assertEqual(compute_gst("0.05", 50), (Decimal("0.03"), Decimal("0.08")))
        self.assertEqual(compute_gst("99.99", 18), (Decimal("18.00"), Decimal("117.99")))

    def test_zero_rate(self):
        self.assertEqual(compute_gst("250.50", 0), (Decimal("0.00"), Decimal("250.50")))

    def test_rate_out_of_range_rejected(self):
        with self.assertRaises(ValidationError):
            compute_gst(100, 101)

    def test_non_numeric_input_rejected(self):
        for bad in ("abc", "NaN", "-Infinity"):
            with self.assertRaises(ValidationError):
                compute_gst(bad, 18)
            with self.assertRaises(ValidationError):
                compute_gst(100, bad)


class ToMoneyTests(TestCase):
    def test_blank_is_zero(self):
        self.assertEqual(to_money(""), Decimal("0.00"))
        self.assertEqual(to_money(None), Decimal("0.00"))

    def test_garbage_and_non_finite_values_rejected(self):
        for bad in ("abc", "1,000", "NaN", "sNaN", "Infinity", [1]):
            with self.assertRaises(ValidationError):
                to_money(bad)

    def test_too_many_digits_rejected(self):
        with self.assertRaises(ValidationError):
            to_money("1e40")


class SignConventionTests(TestCase):
    def test_signed_delta_depends_on_normal_side(self):
        asset = Account(code="1", name="A", ac_type="asset")
        liability = Account(code="2", name="L", ac_type="liability")
        self.assertEqual(signed_delta(asset, 200, 0), Decimal("200.00"))
        self.assertEqual(signed_delta(liability, 200, 0), Decimal("-200.00"))
        self.assertEqual(signed_delta(liability, 0, 50), Decimal("50.00"))

    def test_debit_moves_asset_up_and_liability_down(self):
        self.period = make_period()
        asset = Account.objects.create(code="1500", name="Deposits", ac_type="asset", opening_balance=Decimal("1000"))
        liability = Account.objects.create(code="2500", name="Loan", ac_type="liability", opening_balance=Decimal("1000"))
        equity = Account.objects.create(code="3000", name="General Fund", ac_type="equity")

        post_paired_ledger_entries(
            asset, equity, Decimal("200"),
            transaction_date=datetime.date(2025, 5, 1), reference_type="Journal", reference_id=1,
        )
        post_paired_ledger_entries(
            liability, equity, Decimal("200"),
            transaction_date=datetime.date(2025, 5, 1), reference_type="Journal", reference_id=2,
        )
        asset.refresh_from_db()
        liability.refresh_from_db()
        self.assertEqual(asset.current_balance, Decimal("1200.00"))
        self.assertEqual(liability.current_balance, Decimal("800.00"))


class PostLedgerLinesTests(TestCase):
    def setUp(self):
        self.period = make_period()
        self.accounts = make_chart()
        self.cash = self.accounts["1000"]
        self.income = self.accounts["4300"]
        self.date = datetime.date(2025, 6, 1)

    def post(self, lines, **kwargs):
        kwargs.setdefault("transaction_date", self.date)
        kwargs.setdefault("reference_type", "Journal")
        kwargs.setdefault("reference_id", 1)
        return post_ledger_lines(lines, **kwargs)

    def test_rows_written_in_order_with_balance_snapshot(self):
        rows = self.post([
            PostingLine(self.cash, debit=Decimal("300")),
            PostingLine(self.cash, debit=Decimal("200")),
            PostingLine(self.income, credit=Decimal("500")),
        ])
        self.assertEqual([r.balance for r in rows], [Decimal("300.00"), Decimal("500.00"), Decimal("500.00")])
        self.assertTrue(all(r.period == self.period for r in rows))
        self.cash.refresh_from_db()
        self.assertEqual(self.cash.current_balance, Decimal("500.00"))

    def test_unbalanced_lines_rejected_without_writing(self):
        with self.assertRaises(UnbalancedJournalError):
            self.post([
                PostingLine(self.cash, debit=Decimal("500")),
                PostingLine(self.income, credit=Decimal("400")),
            ])
        self.assertEqual(LedgerRow.objects.count(), 0)
        self.cash.refresh_from_db()
        self.assertEqual(self.cash.current_balance, Decimal("0.00"))

    def test_line_with_both_sides_rejected(self):
        with self.assertRaises(ValidationError):
            self.post([
                PostingLine(self.cash, debit=Decimal("10"), credit=Decimal("10")),
                PostingLine(self.income, credit=Decimal("0")),
            ])

    def test_empty_posting_rejected(self):
        with self.assertRaises(ValidationError):
            self.post([])

    def test_inactive_account_rejected(self):
        Account.objects.filter(pk=self.income.pk).update(is_active=False)
        with self.assertRaises(ValidationError):
            self.post([
                PostingLine(self.cash, debit=Decimal("10")),
                PostingLine(self.income, credit=Decimal("10")),
            ])
        self.assertEqual(LedgerRow.objects.count(), 0)

    def test_closed_period_rejected(self):
        self.period.status = "closed"
        self.period.save()
        with self.assertRaises(NoOpenPeriodError):
            self.post(
                [PostingLine(self.cash, debit=Decimal("10")), PostingLine(self.income, credit=Decimal("10"))],
                period=self.period,
            )

    def test_ledger_rows_are_immutable(self):
        rows = self.post([
            PostingLine(self.cash, debit=Decimal("10")),
            PostingLine(self.income, credit=Decimal("10")),
        ])
        row = rows[0]
        row.debit_amount = Decimal("99")
        with self.assertRaises(ValidationError):
            row.save()
        with self.assertRaises(ValidationError):
            row.delete()
        # bulk delete raises inside Django's own atomic block
        with self.assertRaises(ValidationError), transaction.atomic():
            LedgerRow.objects.filter(pk=row.pk).delete()
        self.assertEqual(LedgerRow.objects.count(), 2)


class DocumentPostingRuleTests(TestCase):
    def setUp(self):
        make_period()
        self.accounts = make_chart()

    def test_bill_of_thousand_at_eighteen_percent(self):
        bill = create_bill(Decimal("1000"), Decimal("18"), datetime.date(2025, 6, 1))

        self.assertEqual(bill.gst_amount, Decimal("180.00"))
        self.assertEqual(bill.total, Decimal("1180.00"))
        self.assertEqual(bill.payment_status, "unpaid")

        rows = LedgerRow.objects.for_reference("Bill", bill.pk).order_by("id")
        debit, credit = list(rows)
        self.assertEqual((debit.account.code, debit.debit_amount), ("5200", Decimal("1180.00")))
        self.assertEqual((credit.account.code, credit.credit_amount), ("2000", Decimal("1180.00")))
        # GST is reported once, on the expense leg
        self.assertTrue(debit.gst_applicable)
        self.assertEqual(debit.gst_amount, Decimal("180.00"))
        self.assertFalse(credit.gst_applicable)

        self.accounts["5200"].refresh_from_db()
        self.accounts["2000"].refresh_from_db()
        self.assertEqual(self.accounts["5200"].current_balance, Decimal("1180.00"))
        self.assertEqual(self.accounts["2000"].current_balance, Decimal("1180.00"))

    def test_bill_uses_its_own_expense_account(self):
        puja = Account.objects.create(code="5300", name="Puja Supplies", ac_type="expense")
        bill = create_bill(Decimal("100"), 0, datetime.date(2025, 6, 1), expense_account=puja)
        codes = set(LedgerRow.objects.for_reference("Bill", bill.pk).values_list("account__code", flat=True))
        self.assertEqual(codes, {"5300", "2000"})

    def test_invoice_debits_receivable_and_credits_income(self):
        invoice = create_invoice(Decimal("500"), Decimal("5"), datetime.date(2025, 7, 1))
        rows = {r.account.code: r for r in LedgerRow.objects.for_reference("Invoice", invoice.pk)}
        self.assertEqual(rows["1200"].debit_amount, Decimal("525.00"))
        self.assertEqual(rows["4300"].credit_amount, Decimal("525.00"))
        self.assertEqual(rows["4300"].gst_amount, Decimal("25.00"))
