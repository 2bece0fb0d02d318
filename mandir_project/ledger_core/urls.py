from django.urls import path

from . import views

app_name = "ledger_core"

urlpatterns = [
    path("bills/", views.create_bill_view, name="create-bill"),
    path("bills/<int:bill_id>/payments/", views.bill_payment_view, name="bill-payment"),
    path("invoices/", views.create_invoice_view, name="create-invoice"),
    path(
        "invoices/<int:invoice_id>/payments/",
        views.invoice_payment_view,
        name="invoice-payment",
    ),
    path("expenses/", views.create_expense_view, name="create-expense"),
    path("journal-entries/", views.create_journal_entry_view, name="create-journal-entry"),
    path("reports/trial-balance/", views.trial_balance_view, name="trial-balance"),
    path("reconcile/", views.reconcile_view, name="reconcile"),
    path(
        "bank-accounts/<int:bank_account_id>/reconcile/",
        views.bank_reconcile_view,
        name="bank-reconcile",
    ),
    path("gst-returns/", views.gst_return_view, name="gst-return"),
]
