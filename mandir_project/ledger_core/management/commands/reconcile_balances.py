from django.core.management.base import BaseCommand

from ledger_core.services.reconciliation import reconcile_all


class Command(BaseCommand):
    help = "Compare every account's current_balance with the general ledger."

    def add_arguments(self, parser):
        parser.add_argument(
            "--fix",
            action="store_true",
            help="Reset drifted balances to the ledger-derived value.",
        )

    def handle(self, *args, **options):
        drifts = reconcile_all(fix=options["fix"])
        if not drifts:
            self.stdout.write(self.style.SUCCESS("All account balances match the ledger."))
            return
        for d in drifts:
            self.stdout.write(
                self.style.WARNING(
                    f"{d.account_code}: stored {d.stored}, ledger {d.expected} "
                    f"(difference {d.difference})"
                )
            )
        verb = "Fixed" if options["fix"] else "Found"
        self.stdout.write(f"{verb} {len(drifts)} drifted account(s).")
