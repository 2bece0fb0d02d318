from .account import AC_TYPES, DEBIT_NORMAL_TYPES, Account
from .auditlog import AuditLog
from .banking import BANK_ACCOUNT_TYPES, BANK_TX_TYPES, BankAccount, BankTransaction
from .base import PAYMENT_MODES, PAYMENT_STATUS
from .bill import Bill, BillPayment
from .budget import Budget
from .devotee import Devotee
from .expense import Expense
from .gst import GST_RETURN_STATUS, GST_RETURN_TYPES, GSTReturn
from .invoice import Invoice, InvoicePayment
from .journal import JournalEntry, JournalEntryLine
from .ledger import REFERENCE_TYPES, LedgerRow
from .period import Period
from .sequence import DocumentSequence
from .vendor import Vendor
