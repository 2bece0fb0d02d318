import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from ..exceptions import NoOpenPeriodError
from ..models.period import Period

logger = logging.getLogger(__name__)


class PeriodService:
    """
    Which financial period a posting lands in.

    Postings are attributed to the most recent open period
    (latest start_date). Closing a period stops new postings into it.
    """

    @staticmethod
    def current():
        period = Period.objects.open().order_by("-start_date").first()
        if period is None:
            raise NoOpenPeriodError("No open financial period. Open a period before posting.")
        return period

    @staticmethod
    def for_date(date):
        # the open period whose range covers the posting date
        period = Period.objects.open().containing(date).order_by("-start_date").first()
        if period is None:
            raise NoOpenPeriodError(f"No open financial period for {date}")
        return period

    @staticmethod
    def ensure_open(period):
        """Reject postings into a closed period."""
        if period is None or not period.is_open:
            raise NoOpenPeriodError(f"Financial period {period} is closed")
        return period

    @staticmethod
    @transaction.atomic
    def close(period, user=None):
        period = Period.objects.select_for_update().get(pk=period.pk)
        if not period.is_open:
            raise ValidationError(f"Period {period.name} is already closed")
        period.status = "closed"
        period.save(update_fields=["status"])
        logger.info("Closed financial period %s", period.name)

        from .audit_helper import log_action

        log_action(action="period.closed", instance=period, user=user)
        return period

    @staticmethod
    @transaction.atomic
    def reopen(period, user=None):
        period = Period.objects.select_for_update().get(pk=period.pk)
        if period.is_open:
            raise ValidationError(f"Period {period.name} is already open")
        period.status = "open"
        period.save(update_fields=["status"])
        logger.warning("Reopened financial period %s", period.name)

        from .audit_helper import log_action

        log_action(action="period.reopened", instance=period, user=user)
        return period
