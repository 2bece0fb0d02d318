from django.contrib import admin, messages
from django.core.exceptions import ValidationError

from ..services.banking import reconcile_bank_transactions
from ..services.gst import prepare_gst_return
from ..services.periods import PeriodService
from ..services.reconciliation import reconcile_account
from ..services.reports import refresh_budget

# ---------- Admin actions ----------


@admin.action(description="Close selected periods")
def close_periods(modeladmin, request, queryset):
    for period in queryset:
        try:
            PeriodService.close(period, user=request.user)
            modeladmin.message_user(request, f"Closed {period.name}")
        except ValidationError as e:
            modeladmin.message_user(
                request, f"{period}: {'; '.join(e.messages)}", level=messages.ERROR)


@admin.action(description="Reopen selected periods")
def reopen_periods(modeladmin, request, queryset):
    for period in queryset:
        try:
            PeriodService.reopen(period, user=request.user)
            modeladmin.message_user(request, f"Reopened {period.name}")
        except ValidationError as e:
            modeladmin.message_user(
                request, f"{period}: {'; '.join(e.messages)}", level=messages.ERROR)


@admin.action(description="Refresh actual amounts from the ledger")
def refresh_budget_actuals(modeladmin, request, queryset):
    count = 0
    for budget in queryset.select_related("account"):
        refresh_budget(budget)
        count += 1
    modeladmin.message_user(request, f"Refreshed {count} budget(s)")


@admin.action(description="Check balances against the ledger")
def reconcile_selected_accounts(modeladmin, request, queryset):
    drifted = 0
    for account in queryset:
        drift = reconcile_account(account)
        if drift is not None:
            drifted += 1
            modeladmin.message_user(
                request,
                f"{drift.account_code}: stored {drift.stored}, ledger says {drift.expected}",
                level=messages.WARNING,
            )
    if not drifted:
        modeladmin.message_user(request, "All selected balances match the ledger.")


@admin.action(description="Mark selected statement lines reconciled")
def reconcile_statement_lines(modeladmin, request, queryset):
    # one reconciliation per bank account
    by_bank = {}
    for tx in queryset.select_related("bank_account"):
        by_bank.setdefault(tx.bank_account, []).append(tx.pk)
    for bank_account, ids in by_bank.items():
        try:
            reconcile_bank_transactions(bank_account, ids, user=request.user)
            modeladmin.message_user(
                request, f"{bank_account.account_name}: reconciled {len(ids)} line(s)")
        except ValidationError as e:
            modeladmin.message_user(
                request, f"{bank_account}: {'; '.join(e.messages)}", level=messages.ERROR)


@admin.action(description="Refresh selected returns from the ledger")
def refresh_gst_returns(modeladmin, request, queryset):
    for gst_return in queryset:
        try:
            prepare_gst_return(
                gst_return.return_period,
                gst_return.return_type,
                igst_amount=gst_return.igst_amount,
                remarks=gst_return.remarks,
                user=request.user,
            )
            modeladmin.message_user(request, f"Refreshed {gst_return.return_type} {gst_return.return_period}")
        except ValidationError as e:
            modeladmin.message_user(
                request, f"{gst_return}: {'; '.join(e.messages)}", level=messages.ERROR)
