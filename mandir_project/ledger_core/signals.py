from django.core.exceptions import ValidationError
from django.db.models.signals import pre_delete
from django.dispatch import receiver

from .models import (Account, BankTransaction, Bill, BillPayment, Expense,
                     GSTReturn, Invoice, InvoicePayment, JournalEntry,
                     LedgerRow, Period)

"""Block deletion if account has ever been posted to."""


@receiver(pre_delete, sender=Account)
def prevent_delete_account_with_ledger_rows(sender, instance, **kwargs):
    if LedgerRow.objects.filter(account=instance).exists():
        raise ValidationError("Cannot delete an account with ledger rows. Deactivate it instead.")


"""Block deletion if period has ledger rows."""


@receiver(pre_delete, sender=Period)
def prevent_delete_period_with_ledger_rows(sender, instance, **kwargs):
    if LedgerRow.objects.filter(period=instance).exists():
        raise ValidationError("Cannot delete a period with ledger rows.")


""" Posted documents stay: their ledger rows reference them by id. """


@receiver(pre_delete, sender=Bill)
@receiver(pre_delete, sender=Invoice)
@receiver(pre_delete, sender=Expense)
@receiver(pre_delete, sender=BillPayment)
@receiver(pre_delete, sender=InvoicePayment)
@receiver(pre_delete, sender=JournalEntry)
def prevent_delete_posted_document(sender, instance, **kwargs):
    reference_type = {
        Bill: "Bill",
        Invoice: "Invoice",
        Expense: "Expense",
        BillPayment: "Bill Payment",
        InvoicePayment: "Invoice Payment",
        JournalEntry: "Journal",
    }[sender]
    if LedgerRow.objects.for_reference(reference_type, instance.pk).exists():
        raise ValidationError(
            f"Cannot delete a posted {sender._meta.verbose_name}. Post an offsetting entry instead."
        )


# QuerySet.delete() skips LedgerRow.delete(), the signal still fires
@receiver(pre_delete, sender=LedgerRow)
def prevent_delete_ledger_row(sender, instance, **kwargs):
    raise ValidationError("Ledger rows cannot be deleted.")


""" Reconciled statement lines and filed returns are records of what happened. """


@receiver(pre_delete, sender=BankTransaction)
def prevent_delete_reconciled_transaction(sender, instance, **kwargs):
    if instance.is_reconciled:
        raise ValidationError("Cannot delete a reconciled bank transaction.")


@receiver(pre_delete, sender=GSTReturn)
def prevent_delete_filed_return(sender, instance, **kwargs):
    if instance.status == "filed":
        raise ValidationError("Cannot delete a filed GST return.")
