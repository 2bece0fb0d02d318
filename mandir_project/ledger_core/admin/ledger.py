from django.contrib import admin

from ..models import AuditLog, LedgerRow
from .readonly import ReadOnlyAdmin


@admin.register(LedgerRow)
class LedgerRowAdmin(ReadOnlyAdmin):
    list_display = (
        "transaction_date",
        "account",
        "reference_type",
        "reference_id",
        "debit_amount",
        "credit_amount",
        "balance",
        "gst_amount",
        "period",
    )
    list_filter = ("reference_type", "period", "gst_applicable")
    search_fields = ("account__code", "account__name", "description")
    date_hierarchy = "transaction_date"

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("account", "period")


@admin.register(AuditLog)
class AuditLogAdmin(ReadOnlyAdmin):
    list_display = ("created_at", "user", "action", "object_type", "object_id")
    list_filter = ("action", "object_type")
    search_fields = ("object_id", "action")
