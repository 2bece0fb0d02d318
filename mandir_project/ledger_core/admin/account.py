from django.contrib import admin

from ..models import Account, Budget, Period
from ..services.reports import budget_variance
from .actions import (close_periods, reconcile_selected_accounts,
                      refresh_budget_actuals, reopen_periods)


# Register `Account` model
@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    # show key accounting fields
    list_display = (
        "code",
        "name",
        "ac_type",
        "normal_balance",
        "parent",
        "gst_rate",
        "current_balance",
        "is_active",
    )
    list_filter = ("ac_type", "is_active", "is_gst_applicable")
    search_fields = ("code", "name")
    ordering = ("code",)
    # balance moves only through postings
    readonly_fields = ("current_balance", "created_at")
    actions = [reconcile_selected_accounts]
    fieldsets = (
        (None, {"fields": ("code", "name", "ac_type", "parent", "description", "is_active")}),
        ("GST", {"fields": ("is_gst_applicable", "gst_rate")}),
        ("Balances", {"fields": ("opening_balance", "current_balance", "created_at")}),
    )

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("parent")


@admin.register(Period)
class PeriodAdmin(admin.ModelAdmin):
    list_display = ("name", "start_date", "end_date", "status")
    list_filter = ("status",)
    ordering = ("-start_date",)
    # status changes go through the actions so they are audited
    readonly_fields = ("status",)
    actions = [close_periods, reopen_periods]


@admin.register(Budget)
class BudgetAdmin(admin.ModelAdmin):
    list_display = (
        "financial_year",
        "account",
        "budgeted_amount",
        "actual_amount",
        "variance",
    )
    list_filter = ("financial_year", "account__ac_type")
    search_fields = ("account__code", "account__name")
    readonly_fields = ("actual_amount",)
    actions = [refresh_budget_actuals]

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("account")

    @admin.display(description="Variance (%)")
    def variance(self, obj):
        amount, percent = budget_variance(obj)
        return f"{amount} ({percent}%)"
