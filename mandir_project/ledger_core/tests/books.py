import datetime
from decimal import Decimal

from ..models import Account, Period

FY_START = datetime.date(2025, 4, 1)
FY_END = datetime.date(2026, 3, 31)


def make_period(name="FY 2025-26", start=FY_START, end=FY_END, status="open"):
    return Period.objects.create(name=name, start_date=start, end_date=end, status=status)


def make_chart(opening=None):
    """
    The well-known accounts the posting rules use (default settings codes).
    `opening` maps code -> opening balance.
    """
    opening = opening or {}
    chart = [
        ("1000", "Cash on Hand", "asset"),
        ("1200", "Accounts Receivable", "asset"),
        ("2000", "Accounts Payable", "liability"),
        ("4300", "Other Income", "income"),
        ("5200", "General Expenses", "expense"),
    ]
    return {
        code: Account.objects.create(
            code=code,
            name=name,
            ac_type=ac_type,
            opening_balance=Decimal(opening.get(code, "0.00")),
        )
        for code, name, ac_type in chart
    }
