from decimal import Decimal
from django.contrib import admin
from django.utils.html import format_html

from ..models import JournalEntry, JournalEntryLine
from .readonly import ReadOnlyAdmin, ReadOnlyInline


class JournalEntryLineInline(ReadOnlyInline):
    model = JournalEntryLine
    fields = ("line_number", "account", "description", "debit_amount", "credit_amount")
    ordering = ("line_number",)


# Register `JournalEntry` model
@admin.register(JournalEntry)
class JournalEntryAdmin(ReadOnlyAdmin):
    list_display = (
        "entry_number",
        "entry_date",
        "status",
        "period",
        "posted_by",
        "offsets",
        "balanced",
    )
    list_filter = ("status", "period")
    search_fields = ("entry_number", "description")
    date_hierarchy = "entry_date"
    inlines = [JournalEntryLineInline]

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("period", "posted_by", "offsets")

    """ Computed column for balance check """
    def balanced(self, obj):
        d, c = obj.compute_totals()
        # format: bold debits / small credits
        return format_html(
            "<b>{}</b> / <small>{}</small>",
            d or Decimal("0.00"),
            c or Decimal("0.00")
        )

    balanced.short_description = "Debits / Credits"
