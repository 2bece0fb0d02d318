import logging
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from ..exceptions import UnbalancedJournalError
from ..models import Account, JournalEntry, JournalEntryLine
from .audit_helper import log_action
from .numbering import next_document_number
from .periods import PeriodService
from .posting import ZERO, post_document, to_money

logger = logging.getLogger(__name__)

BALANCE_TOLERANCE = Decimal("0.01")


def _resolve_account(value):
    if isinstance(value, Account):
        return value
    try:
        return Account.objects.get(pk=value)
    except (Account.DoesNotExist, ValueError, TypeError):
        raise ValidationError(f"Unknown account {value!r}")


def validate_journal_lines(lines):
    """
    Check a manual entry before anything is written.

    Each line is a dict with "account" (Account or pk; "account_id" also
    accepted), "debit_amount", "credit_amount" and an optional "description".
    Returns normalized line dicts with Account instances and Decimal amounts.
    """
    if len(lines) < 2:
        raise ValidationError("A journal entry needs at least two lines")

    cleaned = []
    for i, line in enumerate(lines, start=1):
        debit = to_money(line.get("debit_amount"))
        credit = to_money(line.get("credit_amount"))
        if debit < 0 or credit < 0:
            raise ValidationError(f"Line {i}: amounts cannot be negative")
        if (debit > 0) == (credit > 0):
            raise ValidationError(
                f"Line {i}: enter either a debit or a credit amount, not both"
            )
        account = _resolve_account(line.get("account", line.get("account_id")))
        cleaned.append(
            {
                "account": account,
                "debit_amount": debit,
                "credit_amount": credit,
                "description": line.get("description") or "",
            }
        )

    total_debit = sum((c["debit_amount"] for c in cleaned), ZERO)
    total_credit = sum((c["credit_amount"] for c in cleaned), ZERO)
    if abs(total_debit - total_credit) >= BALANCE_TOLERANCE:
        raise UnbalancedJournalError(
            f"Journal not balanced: debits={total_debit}, credits={total_credit}"
        )
    return cleaned


@transaction.atomic
def create_journal_entry(entry_date, lines, description="", user=None, offsets=None):
    """
    Number, save and post a manual journal entry in one transaction.
    Entries are posted on creation; there is no draft state.
    """
    try:
        cleaned = validate_journal_lines(lines)
    except (ValidationError, UnbalancedJournalError) as e:
        logger.warning("Rejected journal entry dated %s: %s", entry_date, e)
        raise

    period = PeriodService.current()
    user = user if getattr(user, "is_authenticated", False) else None

    entry = JournalEntry.objects.create(
        entry_number=next_document_number("JRNL", entry_date.year),
        entry_date=entry_date,
        description=description,
        period=period,
        status="posted",
        posted_at=timezone.now(),
        posted_by=user,
        created_by=user,
        offsets=offsets,
    )
    for number, line in enumerate(cleaned, start=1):
        JournalEntryLine.objects.create(entry=entry, line_number=number, **line)

    post_document("Journal", entry, user=user)
    log_action(
        action="journal.posted",
        instance=entry,
        user=user,
        changes={
            "entry_number": entry.entry_number,
            "lines": [
                {
                    "account": line["account"].code,
                    "debit": str(line["debit_amount"]),
                    "credit": str(line["credit_amount"]),
                }
                for line in cleaned
            ],
        },
    )
    return entry


@transaction.atomic
def create_offsetting_entry(entry, entry_date=None, user=None):
    """
    Post the mirror image of a posted entry (debits and credits swapped).
    Posted rows are never edited; this is how a wrong entry is undone.
    """
    # lock the original so two offsets of it queue on this row
    entry = JournalEntry.objects.select_for_update().get(pk=entry.pk)
    if entry.offset_entries.exists():
        raise ValidationError(f"{entry.entry_number} has already been offset")
    lines = [
        {
            "account": line.account,
            "debit_amount": line.credit_amount,
            "credit_amount": line.debit_amount,
            "description": line.description,
        }
        for line in entry.lines.select_related("account").order_by("line_number")
    ]
    return create_journal_entry(
        entry_date or timezone.localdate(),
        lines,
        description=f"Offset of {entry.entry_number}",
        user=user,
        offsets=entry,
    )
