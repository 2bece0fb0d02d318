import datetime
from io import StringIO
from django.core.management import call_command
from django.test import TestCase
from ..models import Account, Period


class ManagementCommandTests(TestCase):
    def test_seed_chart_of_accounts_is_idempotent(self):
        out = StringIO()
        call_command("seed_chart_of_accounts", "--with-groups", stdout=out)
        call_command("seed_chart_of_accounts", stdout=out)

        for code in ("1000", "1200", "2000", "4300", "5200"):
            self.assertTrue(Account.objects.filter(code=code).exists(), code)
        self.assertEqual(Account.objects.get(code="5200").parent.code, "5000")
        self.assertEqual(Account.objects.get(code="2000").ac_type, "liability")
        self.assertIn("(0 created)", out.getvalue())

    def test_open_period(self):
        call_command("open_period", "--name", "FY 2025-26", "--start", "2025-04-01", stdout=StringIO())
        period = Period.objects.get(name="FY 2025-26")
        self.assertEqual(period.end_date, datetime.date(2026, 3, 31))
        self.assertEqual(period.status, "open")

        out = StringIO()
        call_command("open_period", "--name", "FY 2025-26", stdout=out)
        self.assertIn("already exists", out.getvalue())
