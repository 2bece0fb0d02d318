import logging
import re

from django.db import IntegrityError, transaction
from django.utils import timezone

from ..models import (Bill, DocumentSequence, Expense, Invoice, JournalEntry,
                      Vendor)

logger = logging.getLogger(__name__)

# kind -> (model, code field) used to seed a new counter from existing data.
# ORD has no table in the ledger; its counter starts at zero.
NUMBERED_KINDS = {
    "BILL": (Bill, "bill_number"),
    "INV": (Invoice, "invoice_number"),
    "EXP": (Expense, "expense_number"),
    "JRNL": (JournalEntry, "entry_number"),
    "VND": (Vendor, "vendor_code"),
    "ORD": (None, None),
}

_TRAILING_INT = re.compile(r"(\d+)$")


def _last_existing_value(kind, prefix):
    model, field = NUMBERED_KINDS[kind]
    if model is None:
        return 0
    last_code = (
        model.objects.filter(**{f"{field}__startswith": prefix})
        .order_by(f"-{field}")
        .values_list(field, flat=True)
        .first()
    )
    if not last_code:
        return 0
    m = _TRAILING_INT.search(last_code)
    return int(m.group(1)) if m else 0


def format_document_number(kind, year, value):
    return f"{kind}-{year}-{value:04d}"


def next_document_number(kind, year=None):
    """
    Next number in the {KIND}-{YYYY}-{NNNN} series, e.g. BILL-2025-0001.

    Call inside the transaction that inserts the document: the counter row
    stays locked until that transaction ends, so concurrent submissions
    queue here and never receive the same number.
    """
    if kind not in NUMBERED_KINDS:
        raise ValueError(f"Unknown document kind {kind!r}")
    year = year or timezone.localdate().year
    prefix = f"{kind}-{year}-"

    with transaction.atomic():
        seq = DocumentSequence.objects.select_for_update().filter(prefix=prefix).first()
        if seq is None:
            # First use of this prefix: seed from the highest existing code
            seed = _last_existing_value(kind, prefix)
            try:
                with transaction.atomic():
                    seq = DocumentSequence.objects.create(prefix=prefix, last_value=seed)
            except IntegrityError:
                # another transaction created the counter first
                pass
            seq = DocumentSequence.objects.select_for_update().get(prefix=prefix)

        seq.last_value += 1
        seq.save(update_fields=["last_value"])

    number = format_document_number(kind, year, seq.last_value)
    logger.debug("Issued document number %s", number)
    return number
