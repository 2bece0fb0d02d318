import datetime

from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError

from ledger_core.models import Period


class Command(BaseCommand):
    help = "Open a financial period, by default the April-March year containing today."

    def add_arguments(self, parser):
        parser.add_argument("--name", help='Period name (default: "FY 2025-26")')
        parser.add_argument("--start", type=datetime.date.fromisoformat, help="YYYY-MM-DD")
        parser.add_argument("--end", type=datetime.date.fromisoformat, help="YYYY-MM-DD")

    def handle(self, *args, **options):
        today = datetime.date.today()
        # Indian financial year: 1 April to 31 March
        first_year = today.year if today.month >= 4 else today.year - 1
        start = options["start"] or datetime.date(first_year, 4, 1)
        end = options["end"] or datetime.date(start.year + 1, 3, 31)
        name = options["name"] or f"FY {start.year}-{str(start.year + 1)[-2:]}"

        try:
            period, created = Period.objects.get_or_create(
                name=name, defaults={"start_date": start, "end_date": end}
            )
        except ValidationError as e:
            raise CommandError("; ".join(e.messages))

        if not created:
            self.stdout.write(self.style.WARNING(f"Period {period} already exists."))
            return
        self.stdout.write(self.style.SUCCESS(f"Opened {period} ({start} to {end})."))
