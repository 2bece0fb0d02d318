import datetime
from decimal import Decimal
from django.core.exceptions import ValidationError
from django.test import TestCase
from ..exceptions import UnbalancedJournalError
from ..models import Account, JournalEntry, JournalEntryLine, LedgerRow
from ..services.journal import (create_journal_entry, create_offsetting_entry,
                                validate_journal_lines)
from .books import make_chart, make_period


class JournalEntryTests(TestCase):
    def setUp(self):
        self.period = make_period()
        self.accounts = make_chart()
        self.cash = self.accounts["1000"]
        self.income = self.accounts["4300"]
        self.date = datetime.date(2025, 9, 1)

    def line(self, account, debit=0, credit=0, description=""):
        return {"account": account, "debit_amount": debit, "credit_amount": credit, "description": description}

    """ Balanced entry """
    def test_balanced_entry_posts_successfully(self):
        entry = create_journal_entry(
            self.date,
            [self.line(self.cash, debit=500), self.line(self.income, credit=500)],
            description="Hundi collection",
        )
        self.assertEqual(entry.status, "posted")
        self.assertEqual(entry.entry_number, "JRNL-2025-0001")
        self.assertIsNotNone(entry.posted_at)
        self.assertEqual(entry.period, self.period)
        self.assertTrue(entry.is_balanced())
        self.assertEqual(
            list(entry.lines.values_list("line_number", flat=True)), [1, 2]
        )
        self.assertEqual(LedgerRow.objects.for_reference("Journal", entry.pk).count(), 2)

        self.cash.refresh_from_db()
        self.income.refresh_from_db()
        self.assertEqual(self.cash.current_balance, Decimal("500.00"))
        self.assertEqual(self.income.current_balance, Decimal("500.00"))

    def test_two_debits_rejected(self):
        with self.assertRaises(UnbalancedJournalError):
            create_journal_entry(self.date, [self.line(self.cash, debit=500), self.line(self.income, debit=300)])

    def test_unequal_sides_rejected(self):
        with self.assertRaises(UnbalancedJournalError) as cm:
            create_journal_entry(self.date, [self.line(self.cash, debit=500), self.line(self.income, credit=400)])
        self.assertIn("Journal not balanced", str(cm.exception))

    def test_single_line_rejected(self):
        with self.assertRaises(ValidationError):
            validate_journal_lines([self.line(self.cash, debit=500)])

    def test_line_with_both_sides_rejected(self):
        with self.assertRaises(ValidationError):
            validate_journal_lines([
                self.line(self.cash, debit=100, credit=100),
                self.line(self.income, credit=0),
            ])

    def test_accounts_can_be_given_by_pk(self):
        cleaned = validate_journal_lines([
            {"account_id": self.cash.pk, "debit_amount": "10.50"},
            {"account_id": self.income.pk, "credit_amount": "10.50"},
        ])
        self.assertEqual(cleaned[0]["account"], self.cash)
        self.assertEqual(cleaned[0]["debit_amount"], Decimal("10.50"))

    def test_rejection_leaves_no_trace(self):
        # a posting-time failure undoes the header, lines and number
        Account.objects.filter(pk=self.income.pk).update(is_active=False)
        with self.assertRaises(ValidationError):
            create_journal_entry(self.date, [self.line(self.cash, debit=500), self.line(self.income, credit=500)])

        self.assertEqual(JournalEntry.objects.count(), 0)
        self.assertEqual(JournalEntryLine.objects.count(), 0)
        self.assertEqual(LedgerRow.objects.count(), 0)
        Account.objects.filter(pk=self.income.pk).update(is_active=True)
        entry = create_journal_entry(self.date, [self.line(self.cash, debit=1), self.line(self.income, credit=1)])
        self.assertEqual(entry.entry_number, "JRNL-2025-0001")

    def test_offsetting_entry_reverses_balances(self):
        entry = create_journal_entry(self.date, [self.line(self.cash, debit=750), self.line(self.income, credit=750)])
        offset = create_offsetting_entry(entry, entry_date=datetime.date(2025, 9, 2))

        self.assertEqual(offset.offsets, entry)
        self.assertEqual(offset.entry_number, "JRNL-2025-0002")
        first = offset.lines.get(line_number=1)
        self.assertEqual((first.account, first.credit_amount), (self.cash, Decimal("750.00")))

        self.cash.refresh_from_db()
        self.income.refresh_from_db()
        self.assertEqual(self.cash.current_balance, Decimal("0.00"))
        self.assertEqual(self.income.current_balance, Decimal("0.00"))

        with self.assertRaises(ValidationError):
            create_offsetting_entry(entry)
