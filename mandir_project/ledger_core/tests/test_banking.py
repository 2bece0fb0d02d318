import datetime
from decimal import Decimal
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import transaction
from django.test import TestCase
from django.utils import timezone
from ..models import Account, AuditLog, BankAccount, BankTransaction
from ..services.banking import (bank_ledger_rows, bank_reconciliation_summary,
                                reconcile_bank_transactions,
                                unreconciled_transactions)
from ..services.documents import create_bill, create_invoice
from ..services.payments import record_bill_payment, record_invoice_payment
from .books import make_chart, make_period


class BankReconciliationTests(TestCase):
    def setUp(self):
        make_period()
        self.accounts = make_chart()
        self.user = get_user_model().objects.create_user(username="treasurer", password="pw")
        self.sb_ledger = Account.objects.create(code="1100", name="SBI Savings", ac_type="asset")
        self.bank = BankAccount.objects.create(
            account_name="Temple Savings",
            bank_name="State Bank of India",
            account_number="000111222333",
            ledger_account=self.sb_ledger,
        )

        # Dr bank 300 (receipt), Cr bank 100 (payment)
        invoice = create_invoice(Decimal("300"), 0, datetime.date(2025, 6, 1))
        record_invoice_payment(
            invoice, Decimal("300"), datetime.date(2025, 6, 5), "online_transfer", bank_account=self.bank
        )
        bill = create_bill(Decimal("100"), 0, datetime.date(2025, 6, 2))
        record_bill_payment(bill, Decimal("100"), datetime.date(2025, 6, 6), "cheque", bank_account=self.bank)

        self.deposit = BankTransaction.objects.create(
            bank_account=self.bank,
            transaction_date=datetime.date(2025, 6, 5),
            transaction_type="credit",
            amount=Decimal("300.00"),
            reference_number="NEFT-1",
        )
        self.cheque = BankTransaction.objects.create(
            bank_account=self.bank,
            transaction_date=datetime.date(2025, 6, 7),
            transaction_type="debit",
            amount=Decimal("100.00"),
            reference_number="CHQ-7",
        )

    def test_bank_rows_are_on_the_mapped_ledger_account(self):
        rows = list(bank_ledger_rows(self.bank))
        self.assertEqual([(r.debit_amount, r.credit_amount) for r in rows], [
            (Decimal("300.00"), Decimal("0.00")),
            (Decimal("0.00"), Decimal("100.00")),
        ])

    def test_matching_lines_are_reconciled(self):
        rows = [r.pk for r in bank_ledger_rows(self.bank)]
        reconciled = reconcile_bank_transactions(
            self.bank, [self.deposit.pk, self.cheque.pk], ledger_row_ids=rows, user=self.user
        )
        self.assertEqual(len(reconciled), 2)

        self.deposit.refresh_from_db()
        self.assertTrue(self.deposit.is_reconciled)
        self.assertIsNotNone(self.deposit.reconciled_at)
        self.assertEqual(self.deposit.reconciled_by, self.user)
        self.bank.refresh_from_db()
        self.assertEqual(self.bank.last_reconciled_at, timezone.localdate())
        self.assertFalse(unreconciled_transactions(self.bank).exists())

        log = AuditLog.objects.get(action="bank.reconciled")
        self.assertEqual(log.changes["ledger_rows"], rows)
        self.assertEqual(log.changes["net"], "200.00")

    def test_lines_can_be_marked_without_ledger_rows(self):
        reconcile_bank_transactions(self.bank, [self.cheque.pk])
        self.assertEqual(list(unreconciled_transactions(self.bank)), [self.deposit])

    def test_mismatched_totals_rejected(self):
        rows = [r.pk for r in bank_ledger_rows(self.bank)]
        with self.assertRaises(ValidationError):
            reconcile_bank_transactions(self.bank, [self.deposit.pk], ledger_row_ids=rows)
        self.deposit.refresh_from_db()
        self.assertFalse(self.deposit.is_reconciled)

    def test_rows_from_another_account_rejected(self):
        receivable_row = self.accounts["1200"].ledger_rows.first()
        with self.assertRaises(ValidationError):
            reconcile_bank_transactions(self.bank, [self.deposit.pk], ledger_row_ids=[receivable_row.pk])

    def test_line_cannot_be_reconciled_twice(self):
        reconcile_bank_transactions(self.bank, [self.deposit.pk])
        with self.assertRaises(ValidationError):
            reconcile_bank_transactions(self.bank, [self.deposit.pk])

    def test_line_of_another_bank_rejected(self):
        other = BankAccount.objects.create(
            account_name="Hundi Collections", bank_name="Canara Bank", account_number="999888"
        )
        with self.assertRaises(ValidationError):
            reconcile_bank_transactions(other, [self.deposit.pk])

    def test_empty_selection_rejected(self):
        with self.assertRaises(ValidationError):
            reconcile_bank_transactions(self.bank, [])

    def test_summary_compares_statement_with_books(self):
        summary = bank_reconciliation_summary(self.bank)
        self.assertEqual(summary["statement_balance"], Decimal("200.00"))
        self.assertEqual(summary["book_balance"], Decimal("200.00"))
        self.assertEqual(summary["difference"], Decimal("0.00"))
        self.assertEqual(summary["unreconciled_count"], 2)
        self.assertEqual(summary["unreconciled_net"], Decimal("200.00"))

        # the cheque has not cleared by 6 June
        early = bank_reconciliation_summary(self.bank, as_of=datetime.date(2025, 6, 6))
        self.assertEqual(early["statement_balance"], Decimal("300.00"))
        self.assertEqual(early["book_balance"], Decimal("200.00"))
        self.assertEqual(early["difference"], Decimal("100.00"))

    def test_reconciled_line_cannot_be_deleted(self):
        reconcile_bank_transactions(self.bank, [self.deposit.pk])
        self.deposit.refresh_from_db()
        with self.assertRaises(ValidationError):
            with transaction.atomic():
                self.deposit.delete()
        self.assertTrue(BankTransaction.objects.filter(pk=self.deposit.pk).exists())

    def test_statement_line_amount_must_be_positive(self):
        with self.assertRaises(ValidationError):
            BankTransaction.objects.create(
                bank_account=self.bank,
                transaction_date=datetime.date(2025, 6, 8),
                transaction_type="credit",
                amount=Decimal("0.00"),
            )
