import logging

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task  # register this function as a Celery task
def reconcile_all_balances(fix=False):
    # import lazily to avoid circular imports at module import time
    from .services.reconciliation import reconcile_all

    drifts = reconcile_all(fix=fix)
    logger.info("Reconciled balances: %d account(s) drifted (fix=%s)", len(drifts), fix)
    # celery results must be JSON-serializable
    return [
        {"account": d.account_code, "stored": str(d.stored), "expected": str(d.expected)}
        for d in drifts
    ]


@shared_task
def refresh_budget_actuals(financial_year=None):
    from .services.reports import refresh_budgets

    return len(refresh_budgets(financial_year))
