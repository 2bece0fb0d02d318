from django.core.exceptions import ValidationError


class UnbalancedJournalError(Exception):
    """Raised when a set of ledger lines fails the double-entry balance check."""
    pass


class NoOpenPeriodError(ValidationError):
    """Raised when a posting needs an open financial period and none is available."""
    pass


class OverpaymentError(ValidationError):
    """Raised when a payment exceeds the outstanding amount of its document."""
    pass


class AccountNotConfiguredError(ValidationError):
    """Raised when a well-known chart-of-accounts code cannot be resolved."""
    pass
