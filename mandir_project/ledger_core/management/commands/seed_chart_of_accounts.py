from decimal import Decimal

from django.conf import settings
from django.core.management.base import BaseCommand
from django.db import transaction

from ledger_core.models import Account

# (role in LEDGER_DEFAULT_ACCOUNTS, name, ac_type); parents seeded first
PARENT_ACCOUNTS = [
    ("1", "Assets", "asset"),
    ("2", "Liabilities", "liability"),
    ("3", "Equity", "equity"),
    ("4", "Income", "income"),
    ("5", "Expenses", "expense"),
]

DEFAULT_ACCOUNTS = [
    ("cash", "Cash on Hand", "asset"),
    ("accounts_receivable", "Accounts Receivable", "asset"),
    ("accounts_payable", "Accounts Payable", "liability"),
    ("default_income", "Other Income", "income"),
    ("default_expense", "General Expenses", "expense"),
]


class Command(BaseCommand):
    help = "Create the well-known accounts the posting rules rely on (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--with-groups",
            action="store_true",
            help="Also create 1000/2000/... group accounts and hang the defaults under them.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        codes = settings.LEDGER_DEFAULT_ACCOUNTS
        parents = {}
        if options["with_groups"]:
            for digit, name, ac_type in PARENT_ACCOUNTS:
                code = f"{digit}000"
                # a default role may already own the round code (e.g. cash "1000")
                if code in codes.values():
                    continue
                parent, _ = Account.objects.get_or_create(
                    code=code, defaults={"name": name, "ac_type": ac_type}
                )
                parents[ac_type] = parent

        created = 0
        for role, name, ac_type in DEFAULT_ACCOUNTS:
            account, was_created = Account.objects.get_or_create(
                code=codes[role],
                defaults={
                    "name": name,
                    "ac_type": ac_type,
                    "parent": parents.get(ac_type),
                    "opening_balance": Decimal("0.00"),
                },
            )
            if was_created:
                created += 1
                self.stdout.write(f"  + {account}")
            elif account.ac_type != ac_type:
                self.stdout.write(
                    self.style.WARNING(f"  ! {account} is {account.ac_type}, expected {ac_type}")
                )

        self.stdout.write(self.style.SUCCESS(f"Chart of accounts ready ({created} created)."))
