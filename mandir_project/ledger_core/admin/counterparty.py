from django.contrib import admin

from ..models import BankAccount, BankTransaction, Devotee, Vendor
from .actions import reconcile_statement_lines


@admin.register(Vendor)
class VendorAdmin(admin.ModelAdmin):
    list_display = ("vendor_code", "name", "gstin", "phone", "is_active")
    list_filter = ("is_active",)
    search_fields = ("vendor_code", "name", "gstin")
    # assigned on first save
    readonly_fields = ("vendor_code",)


@admin.register(Devotee)
class DevoteeAdmin(admin.ModelAdmin):
    list_display = ("name", "email", "phone", "is_active")
    search_fields = ("name", "email", "phone")


@admin.register(BankAccount)
class BankAccountAdmin(admin.ModelAdmin):
    list_display = (
        "account_name",
        "bank_name",
        "account_number",
        "account_type",
        "ledger_account",
        "last_reconciled_at",
        "is_active",
    )
    list_filter = ("account_type", "is_active")
    search_fields = ("account_name", "bank_name", "account_number", "ifsc_code")
    autocomplete_fields = ("ledger_account",)


@admin.register(BankTransaction)
class BankTransactionAdmin(admin.ModelAdmin):
    # statement lines are keyed in here; reconciling goes through the action
    list_display = (
        "transaction_date",
        "bank_account",
        "transaction_type",
        "amount",
        "reference_number",
        "is_reconciled",
    )
    list_filter = ("is_reconciled", "transaction_type", "bank_account")
    search_fields = ("reference_number", "description")
    date_hierarchy = "transaction_date"
    readonly_fields = ("is_reconciled", "reconciled_at", "reconciled_by", "created_at")
    actions = [reconcile_statement_lines]

    def has_delete_permission(self, request, obj=None):
        # reconciled lines stay
        if obj is not None and obj.is_reconciled:
            return False
        return super().has_delete_permission(request, obj)
