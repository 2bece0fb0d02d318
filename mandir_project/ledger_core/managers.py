from django.db import models


# -----------------------------------------
# Shared query helpers for ledger models
# -----------------------------------------
class ActiveQuerySet(models.QuerySet):
    def active(self):
        # only fetch records that have not been soft-deactivated
        return self.filter(is_active=True)


class ActiveManager(models.Manager):
    def get_queryset(self):
        return ActiveQuerySet(self.model, using=self._db)

    def active(self):
        return self.get_queryset().active()


class AccountManager(ActiveManager):
    def by_code(self, code):
        # point lookup on the well-known chart-of-accounts code
        return self.get_queryset().get(code=code)


class PeriodQuerySet(models.QuerySet):
    def open(self):
        return self.filter(status="open")

    def containing(self, date):
        return self.filter(start_date__lte=date, end_date__gte=date)


class LedgerRowQuerySet(models.QuerySet):
    def for_account(self, account):
        return self.filter(account=account)

    def between(self, start=None, end=None):
        qs = self
        if start:
            qs = qs.filter(transaction_date__gte=start)
        if end:
            qs = qs.filter(transaction_date__lte=end)
        return qs

    def for_reference(self, reference_type, reference_id):
        # all legs written by one posting action
        return self.filter(reference_type=reference_type, reference_id=reference_id)
