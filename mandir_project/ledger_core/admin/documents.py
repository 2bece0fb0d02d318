from django.contrib import admin

from ..models import (Bill, BillPayment, Expense, GSTReturn, Invoice,
                      InvoicePayment)
from .actions import refresh_gst_returns
from .readonly import ReadOnlyAdmin, ReadOnlyInline

"""
Documents are created through the services (and the JSON API) so every
insert is posted to the ledger. The admin only shows them.
"""


class BillPaymentInline(ReadOnlyInline):
    model = BillPayment
    fields = ("payment_date", "amount", "payment_mode", "bank_account", "reference_number")


class InvoicePaymentInline(ReadOnlyInline):
    model = InvoicePayment
    fields = ("payment_date", "amount", "payment_mode", "bank_account", "reference_number")


@admin.register(Bill)
class BillAdmin(ReadOnlyAdmin):
    list_display = ("bill_number", "bill_date", "vendor", "total", "paid_amount", "payment_status")
    list_filter = ("payment_status", "period")
    search_fields = ("bill_number", "vendor__name", "description")
    date_hierarchy = "bill_date"
    inlines = [BillPaymentInline]

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("vendor", "period")


@admin.register(Invoice)
class InvoiceAdmin(ReadOnlyAdmin):
    list_display = (
        "invoice_number",
        "invoice_date",
        "devotee",
        "total",
        "paid_amount",
        "payment_status",
    )
    list_filter = ("payment_status", "period")
    search_fields = ("invoice_number", "devotee__name", "description")
    date_hierarchy = "invoice_date"
    inlines = [InvoicePaymentInline]

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("devotee", "period")


@admin.register(Expense)
class ExpenseAdmin(ReadOnlyAdmin):
    list_display = (
        "expense_number",
        "expense_date",
        "expense_category",
        "total",
        "payment_status",
        "payment_mode",
    )
    list_filter = ("payment_status", "payment_mode", "period")
    search_fields = ("expense_number", "description", "reference_number")
    date_hierarchy = "expense_date"


@admin.register(BillPayment)
class BillPaymentAdmin(ReadOnlyAdmin):
    list_display = ("bill", "payment_date", "amount", "payment_mode", "bank_account")
    list_filter = ("payment_mode",)


@admin.register(InvoicePayment)
class InvoicePaymentAdmin(ReadOnlyAdmin):
    list_display = ("invoice", "payment_date", "amount", "payment_mode", "bank_account")
    list_filter = ("payment_mode",)


@admin.register(GSTReturn)
class GSTReturnAdmin(ReadOnlyAdmin):
    # prepared and filed through services.gst
    list_display = (
        "return_period",
        "return_type",
        "taxable_value",
        "cgst_amount",
        "sgst_amount",
        "igst_amount",
        "total_tax_amount",
        "status",
        "filing_date",
    )
    list_filter = ("return_type", "status")
    search_fields = ("return_period", "remarks")
    actions = [refresh_gst_returns]
