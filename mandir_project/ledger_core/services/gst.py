import calendar
import datetime
import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from ..models import GSTReturn
from ..models.gst import ANNUAL_RETURN_TYPES, MONTHLY_PERIOD_RE
from .audit_helper import log_action
from .posting import to_money
from .reports import financial_year_bounds, gst_summary

logger = logging.getLogger(__name__)


def return_period_bounds(return_type, return_period):
    """
    "2025-06" -> (2025-06-01, 2025-06-30) for monthly returns,
    "2025-2026" -> the financial year for GSTR-9.
    """
    if return_type in ANNUAL_RETURN_TYPES:
        return financial_year_bounds(return_period)
    m = MONTHLY_PERIOD_RE.match(return_period or "")
    if not m:
        raise ValidationError(f"Invalid return period {return_period!r}, expected YYYY-MM")
    year, month = int(m.group(1)), int(m.group(2))
    last_day = calendar.monthrange(year, month)[1]
    return datetime.date(year, month, 1), datetime.date(year, month, last_day)


@transaction.atomic
def prepare_gst_return(
    return_period,
    return_type="GSTR-3B",
    igst_amount=0,
    filing_date=None,
    remarks="",
    user=None,
):
    """
    Create or refresh the return for (return_period, return_type) from
    the output tax in the ledger. A filed return is never overwritten.
    """
    start, end = return_period_bounds(return_type, return_period)
    summary = gst_summary(start, end, side="output")

    gst_return = (
        GSTReturn.objects.select_for_update()
        .filter(return_period=return_period, return_type=return_type)
        .first()
    )
    if gst_return is not None and gst_return.status == "filed":
        raise ValidationError(f"{gst_return} has been filed and cannot be changed")

    actor = user if getattr(user, "is_authenticated", False) else None
    created = gst_return is None
    if created:
        gst_return = GSTReturn(
            return_period=return_period, return_type=return_type, created_by=actor
        )
    gst_return.taxable_value = summary["total_taxable"]
    gst_return.cgst_amount = summary["total_cgst"]
    gst_return.sgst_amount = summary["total_sgst"]
    # inter-state supplies are not split in the ledger; IGST is entered by hand
    gst_return.igst_amount = to_money(igst_amount, "IGST amount")
    gst_return.filing_date = filing_date
    gst_return.remarks = remarks or ""
    gst_return.save()

    log_action(
        action="gst_return.prepared" if created else "gst_return.refreshed",
        instance=gst_return,
        user=actor,
        changes={
            "return": f"{return_type} {return_period}",
            "taxable_value": str(gst_return.taxable_value),
            "total_tax_amount": str(gst_return.total_tax_amount),
            "status": gst_return.status,
        },
    )
    logger.info(
        "%s %s %s: taxable %s, tax %s",
        "Prepared" if created else "Refreshed",
        return_type,
        return_period,
        gst_return.taxable_value,
        gst_return.total_tax_amount,
    )
    return gst_return


@transaction.atomic
def file_gst_return(gst_return, filing_date, user=None):
    gst_return = GSTReturn.objects.select_for_update().get(pk=gst_return.pk)
    if gst_return.status == "filed":
        raise ValidationError(f"{gst_return} is already filed")
    if filing_date is None:
        raise ValidationError("Filing date is required")
    gst_return.filing_date = filing_date
    gst_return.save()
    log_action(
        action="gst_return.filed",
        instance=gst_return,
        user=user,
        changes={"filing_date": filing_date.isoformat()},
    )
    logger.info("Filed %s on %s", gst_return, filing_date)
    return gst_return
