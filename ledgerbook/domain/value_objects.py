"""
Domain Layer - value objects and vocabularies for double-entry bookkeeping.
"""

from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum

ZERO = Decimal("0")
BALANCE_TOLERANCE = Decimal("0.01")


class LedgerType:
    """Ledger type vocabulary of the chart of accounts.

    Ledger types are free text in storage; these constants name the
    ones the engine knows how to classify.
    """
    # Assets
    ASSET = "Asset"
    FIXED_ASSETS = "Fixed Assets"
    MOVABLE_ASSETS = "Movable Assets"
    IMMOVABLE_ASSETS = "Immovable Assets"
    OTHER_ASSETS = "Other Assets"
    OTHER_RECEIVABLE = "Other Receivable"
    CASH = "Cash"
    BANK = "Bank"
    SUNDRY_DEBTORS = "Sundry Debtors"
    CUSTOMER = "Customer"
    PARTY = "Party"
    # Liabilities
    LIABILITY = "Liability"
    OTHER_PAYABLE = "Other Payable"
    OTHER_LIABILITIES = "Other Liabilities"
    DEPOSIT = "Deposit A/c"
    CONTINGENCY_FUND = "Contingency Fund"
    EDUCATION_FUND = "Education Fund"
    SUNDRY_CREDITORS = "Sundry Creditors"
    ACCOUNTS_DUE_TO = "Accounts Due To (Sundry Creditors)"
    # Capital
    CAPITAL = "Capital"
    SHARE_CAPITAL = "Share Capital"
    # Income
    INCOME = "Income"
    SALES = "Sales A/c"
    TRADE_INCOME = "Trade Income"
    MISC_INCOME = "Miscellaneous Income"
    OTHER_REVENUE = "Other Revenue"
    GRANTS_AND_AID = "Grants & Aid"
    SUBSIDIES = "Subsidies"
    # Expenses
    EXPENSE = "Expense"
    PURCHASES = "Purchases A/c"
    TRADE_EXPENSES = "Trade Expenses"
    ESTABLISHMENT_CHARGES = "Establishment Charges"
    MISC_EXPENSES = "Miscellaneous Expenses"
    # Investments and special
    INVESTMENT = "Investment A/c"
    OTHER_INVESTMENT = "Other Investment"
    GOVERNMENT_SECURITIES = "Government Securities"
    PROFIT_AND_LOSS = "Profit & Loss A/c"


class LedgerCategory(str, Enum):
    """Report grouping of ledger types."""
    ASSETS = "ASSETS"
    LIABILITIES = "LIABILITIES"
    CAPITAL = "CAPITAL"
    INCOME = "INCOME"
    EXPENSES = "EXPENSES"
    OTHER = "OTHER"


class BalanceType(str, Enum):
    DR = "Dr"
    CR = "Cr"


class LedgerStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class VoucherType(str, Enum):
    RECEIPT = "Receipt"
    PAYMENT = "Payment"
    JOURNAL = "Journal"


class ReferenceType(str, Enum):
    SALES = "Sales"
    PURCHASE = "Purchase"
    PAYMENT = "Payment"
    MANUAL = "Manual"


class StockTransactionType(str, Enum):
    STOCK_IN = "Stock In"
    STOCK_OUT = "Stock Out"


class StockReferenceType(str, Enum):
    PURCHASE = "Purchase"
    SALE = "Sale"
    OPENING = "Opening"
    ADJUSTMENT = "Adjustment"
    RETURN = "Return"


class InvoiceDirection(str, Enum):
    OUTWARD = "OUTWARD"  # sales, reported in GSTR-1
    INWARD = "INWARD"    # purchases, reported in GSTR-2


class SupplyKind(str, Enum):
    GOODS = "GOODS"
    SERVICES = "SERVICES"


@dataclass(frozen=True, slots=True)
class DateRange:
    """Closed reporting period: both ends inclusive.

    end_date carries the last instant of its day (23:59:59.999).
    """
    start_date: datetime
    end_date: datetime

    @classmethod
    def for_days(cls, first: date, last: date) -> "DateRange":
        return cls(
            start_date=datetime.combine(first, time.min),
            end_date=datetime.combine(last, time(23, 59, 59, 999000)),
        )

    @property
    def first_day(self) -> date:
        return self.start_date.date()

    @property
    def last_day(self) -> date:
        return self.end_date.date()

    def contains(self, day: date) -> bool:
        if isinstance(day, datetime):
            return self.start_date <= day <= self.end_date
        return self.first_day <= day <= self.last_day
