import logging
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import transaction

from ..exceptions import OverpaymentError
from ..models import Bill, BillPayment, Invoice, InvoicePayment
from .audit_helper import log_action
from .periods import PeriodService
from .posting import post_document, to_money

logger = logging.getLogger(__name__)


def payment_status_for(paid, total):
    """paid >= total -> "paid"; paid > 0 -> "partial"; else "unpaid"."""
    paid = Decimal(paid or 0)
    total = Decimal(total or 0)
    if paid >= total:
        return "paid"
    if paid > 0:
        return "partial"
    return "unpaid"


def _apply_payment(
    document,
    amount,
    *,
    payment_model,
    parent_field,
    reference_type,
    number,
    payment_date,
    payment_mode,
    bank_account,
    reference_number,
    description,
    user,
):
    amount = to_money(amount)
    if amount <= 0:
        raise ValidationError("Payment amount must be greater than zero")
    # Validate outstanding
    if amount > document.outstanding:
        logger.warning(
            "Rejected %s of %s on %s: outstanding is %s",
            reference_type,
            amount,
            number,
            document.outstanding,
        )
        raise OverpaymentError(
            f"Payment {amount} exceeds outstanding amount {document.outstanding} on {number}"
        )

    actor = user if getattr(user, "is_authenticated", False) else None
    payment = payment_model.objects.create(
        **{parent_field: document},
        payment_date=payment_date,
        amount=amount,
        payment_mode=payment_mode,
        bank_account=bank_account,
        reference_number=reference_number,
        description=description,
        period=PeriodService.current(),
        created_by=actor,
    )

    # Update document paid amount / status
    document.paid_amount += amount
    document.payment_status = payment_status_for(document.paid_amount, document.total)
    document.save(update_fields=["paid_amount", "payment_status"])

    post_document(reference_type, payment, user=user)
    log_action(
        action=f"{parent_field}.payment_recorded",
        instance=payment,
        user=actor,
        changes={
            "document": number,
            "amount": str(amount),
            "paid_amount": str(document.paid_amount),
            "payment_status": document.payment_status,
        },
    )
    return payment


@transaction.atomic
def record_bill_payment(
    bill,
    amount,
    payment_date,
    payment_mode,
    bank_account=None,
    reference_number="",
    description="",
    user=None,
):
    """
    Pay (part of) a bill: Dr Accounts Payable / Cr bank or cash.
    The bill row is locked so two payments cannot both pass the
    outstanding check.
    """
    bill = Bill.objects.select_for_update().get(pk=bill.pk)
    return _apply_payment(
        bill,
        amount,
        payment_model=BillPayment,
        parent_field="bill",
        reference_type="Bill Payment",
        number=bill.bill_number,
        payment_date=payment_date,
        payment_mode=payment_mode,
        bank_account=bank_account,
        reference_number=reference_number,
        description=description,
        user=user,
    )


@transaction.atomic
def record_invoice_payment(
    invoice,
    amount,
    payment_date,
    payment_mode,
    bank_account=None,
    reference_number="",
    description="",
    user=None,
):
    """Receive (part of) an invoice: Dr bank or cash / Cr Accounts Receivable."""
    invoice = Invoice.objects.select_for_update().get(pk=invoice.pk)
    return _apply_payment(
        invoice,
        amount,
        payment_model=InvoicePayment,
        parent_field="invoice",
        reference_type="Invoice Payment",
        number=invoice.invoice_number,
        payment_date=payment_date,
        payment_mode=payment_mode,
        bank_account=bank_account,
        reference_number=reference_number,
        description=description,
        user=user,
    )
