from .account import AccountAdmin, BudgetAdmin, PeriodAdmin
from .actions import (close_periods, reconcile_selected_accounts,
                      reconcile_statement_lines, refresh_budget_actuals,
                      refresh_gst_returns, reopen_periods)
from .counterparty import (BankAccountAdmin, BankTransactionAdmin,
                           DevoteeAdmin, VendorAdmin)
from .documents import (BillAdmin, BillPaymentAdmin, ExpenseAdmin,
                        GSTReturnAdmin, InvoiceAdmin, InvoicePaymentAdmin)
from .journal import JournalEntryAdmin, JournalEntryLineInline
from .ledger import AuditLogAdmin, LedgerRowAdmin
from .readonly import ReadOnlyAdmin, ReadOnlyInline
