import datetime
from decimal import Decimal
from django.core.exceptions import ValidationError
from django.test import TestCase
from ..exceptions import OverpaymentError
from ..models import Account, BankAccount, BillPayment, LedgerRow
from ..services.documents import create_bill, create_invoice
from ..services.payments import (payment_status_for, record_bill_payment,
                                 record_invoice_payment)
from .books import make_chart, make_period


class PaymentStatusTests(TestCase):
    def test_status_from_paid_and_total(self):
        total = Decimal("1180.00")
        self.assertEqual(payment_status_for(Decimal("0"), total), "unpaid")
        self.assertEqual(payment_status_for(Decimal("0.01"), total), "partial")
        self.assertEqual(payment_status_for(Decimal("1179.99"), total), "partial")
        self.assertEqual(payment_status_for(total, total), "paid")
        self.assertEqual(payment_status_for(Decimal("2000"), total), "paid")


class BillPaymentTests(TestCase):
    def setUp(self):
        make_period()
        self.accounts = make_chart()
        self.bill = create_bill(Decimal("1000"), Decimal("18"), datetime.date(2025, 6, 1))
        self.date = datetime.date(2025, 6, 15)

    def pay(self, amount, **kwargs):
        return record_bill_payment(self.bill, Decimal(amount), self.date, "cash", **kwargs)

    def test_partial_then_full_payment(self):
        self.pay("500")
        self.bill.refresh_from_db()
        self.assertEqual(self.bill.paid_amount, Decimal("500.00"))
        self.assertEqual(self.bill.payment_status, "partial")

        self.pay("680")
        self.bill.refresh_from_db()
        self.assertEqual(self.bill.payment_status, "paid")
        self.assertEqual(self.bill.outstanding, Decimal("0.00"))

        ap = Account.objects.get(code="2000")
        cash = Account.objects.get(code="1000")
        self.assertEqual(ap.current_balance, Decimal("0.00"))
        self.assertEqual(cash.current_balance, Decimal("-1180.00"))

    def test_payment_posts_ap_debit_and_bank_credit(self):
        payment = self.pay("300")
        rows = {r.account.code: r for r in LedgerRow.objects.for_reference("Bill Payment", payment.pk)}
        self.assertEqual(rows["2000"].debit_amount, Decimal("300.00"))
        self.assertEqual(rows["1000"].credit_amount, Decimal("300.00"))

    def test_mapped_bank_account_is_credited(self):
        sbi = Account.objects.create(code="1010", name="SBI Current", ac_type="asset")
        bank = BankAccount.objects.create(
            account_name="Temple Current", bank_name="SBI", account_number="000123456789", ledger_account=sbi
        )
        payment = self.pay("100", bank_account=bank)
        codes = set(LedgerRow.objects.for_reference("Bill Payment", payment.pk).values_list("account__code", flat=True))
        self.assertEqual(codes, {"2000", "1010"})

    def test_overpayment_rejected_and_nothing_written(self):
        self.pay("1000")
        with self.assertRaises(OverpaymentError):
            self.pay("180.01")
        self.bill.refresh_from_db()
        self.assertEqual(self.bill.paid_amount, Decimal("1000.00"))
        self.assertEqual(self.bill.payment_status, "partial")
        self.assertEqual(BillPayment.objects.filter(bill=self.bill).count(), 1)

    def test_paid_bill_accepts_no_more_payments(self):
        self.pay("1180")
        with self.assertRaises(OverpaymentError):
            self.pay("1")

    def test_non_positive_amount_rejected(self):
        with self.assertRaises(ValidationError):
            self.pay("0")
        with self.assertRaises(ValidationError):
            self.pay("-5")


class InvoicePaymentTests(TestCase):
    def setUp(self):
        make_period()
        make_chart()
        self.invoice = create_invoice(Decimal("2000"), 0, datetime.date(2025, 8, 1))

    def test_receipt_debits_cash_and_credits_receivable(self):
        payment = record_invoice_payment(self.invoice, Decimal("1500"), datetime.date(2025, 8, 5), "upi")
        rows = {r.account.code: r for r in LedgerRow.objects.for_reference("Invoice Payment", payment.pk)}
        self.assertEqual(rows["1000"].debit_amount, Decimal("1500.00"))
        self.assertEqual(rows["1200"].credit_amount, Decimal("1500.00"))

        self.invoice.refresh_from_db()
        self.assertEqual(self.invoice.payment_status, "partial")
        self.assertEqual(Account.objects.get(code="1200").current_balance, Decimal("500.00"))
        self.assertEqual(Account.objects.get(code="1000").current_balance, Decimal("1500.00"))

    def test_overpayment_rejected(self):
        with self.assertRaises(OverpaymentError):
            record_invoice_payment(self.invoice, Decimal("2000.01"), datetime.date(2025, 8, 5), "cash")
        self.assertFalse(LedgerRow.objects.filter(reference_type="Invoice Payment").exists())
