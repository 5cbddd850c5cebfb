"""
Balance Classifier - ledger type to balance nature and report category.

Pure lookups over immutable tables; no I/O.
"""

from decimal import Decimal
from types import MappingProxyType

from .value_objects import BalanceType, LedgerCategory, LedgerType

DEBIT_NATURE_TYPES: frozenset[str] = frozenset({
    LedgerType.ASSET,
    LedgerType.FIXED_ASSETS,
    LedgerType.MOVABLE_ASSETS,
    LedgerType.IMMOVABLE_ASSETS,
    LedgerType.OTHER_ASSETS,
    LedgerType.EXPENSE,
    LedgerType.PURCHASES,
    LedgerType.TRADE_EXPENSES,
    LedgerType.ESTABLISHMENT_CHARGES,
    LedgerType.MISC_EXPENSES,
    LedgerType.CASH,
    LedgerType.BANK,
    LedgerType.OTHER_RECEIVABLE,
    LedgerType.SUNDRY_DEBTORS,
    LedgerType.CUSTOMER,
    LedgerType.PARTY,
})

CATEGORY_BY_TYPE: MappingProxyType = MappingProxyType({
    LedgerType.ASSET: LedgerCategory.ASSETS,
    LedgerType.FIXED_ASSETS: LedgerCategory.ASSETS,
    LedgerType.MOVABLE_ASSETS: LedgerCategory.ASSETS,
    LedgerType.IMMOVABLE_ASSETS: LedgerCategory.ASSETS,
    LedgerType.OTHER_ASSETS: LedgerCategory.ASSETS,
    LedgerType.OTHER_RECEIVABLE: LedgerCategory.ASSETS,
    LedgerType.CASH: LedgerCategory.ASSETS,
    LedgerType.BANK: LedgerCategory.ASSETS,
    LedgerType.SUNDRY_DEBTORS: LedgerCategory.ASSETS,
    LedgerType.CUSTOMER: LedgerCategory.ASSETS,

    LedgerType.LIABILITY: LedgerCategory.LIABILITIES,
    LedgerType.OTHER_PAYABLE: LedgerCategory.LIABILITIES,
    LedgerType.OTHER_LIABILITIES: LedgerCategory.LIABILITIES,
    LedgerType.DEPOSIT: LedgerCategory.LIABILITIES,
    LedgerType.CONTINGENCY_FUND: LedgerCategory.LIABILITIES,
    LedgerType.EDUCATION_FUND: LedgerCategory.LIABILITIES,
    LedgerType.ACCOUNTS_DUE_TO: LedgerCategory.LIABILITIES,
    LedgerType.SUNDRY_CREDITORS: LedgerCategory.LIABILITIES,

    LedgerType.CAPITAL: LedgerCategory.CAPITAL,
    LedgerType.SHARE_CAPITAL: LedgerCategory.CAPITAL,

    LedgerType.INCOME: LedgerCategory.INCOME,
    LedgerType.SALES: LedgerCategory.INCOME,
    LedgerType.TRADE_INCOME: LedgerCategory.INCOME,
    LedgerType.MISC_INCOME: LedgerCategory.INCOME,
    LedgerType.OTHER_REVENUE: LedgerCategory.INCOME,
    LedgerType.GRANTS_AND_AID: LedgerCategory.INCOME,
    LedgerType.SUBSIDIES: LedgerCategory.INCOME,

    LedgerType.EXPENSE: LedgerCategory.EXPENSES,
    LedgerType.PURCHASES: LedgerCategory.EXPENSES,
    LedgerType.TRADE_EXPENSES: LedgerCategory.EXPENSES,
    LedgerType.ESTABLISHMENT_CHARGES: LedgerCategory.EXPENSES,
    LedgerType.MISC_EXPENSES: LedgerCategory.EXPENSES,
})


class BalanceClassifier:
    """
    Classifies ledger types.

    Types outside DEBIT_NATURE_TYPES get `unknown_debit_nature`; only
    types that are neither in the debit set nor in the category table
    count as unknown, so every mapped credit-side type stays credit.
    """

    def __init__(self, unknown_debit_nature: bool = False):
        self.unknown_debit_nature = unknown_debit_nature

    def is_debit_nature(self, ledger_type: str | None) -> bool:
        if ledger_type in DEBIT_NATURE_TYPES:
            return True
        if ledger_type in CATEGORY_BY_TYPE:
            return False
        return self.unknown_debit_nature

    def get_category(self, ledger_type: str | None) -> LedgerCategory:
        return CATEGORY_BY_TYPE.get(ledger_type, LedgerCategory.OTHER)


DEFAULT_CLASSIFIER = BalanceClassifier()


def is_debit_nature(ledger_type: str | None) -> bool:
    return DEFAULT_CLASSIFIER.is_debit_nature(ledger_type)


def get_category(ledger_type: str | None) -> LedgerCategory:
    return DEFAULT_CLASSIFIER.get_category(ledger_type)


def balance_type(balance: Decimal, debit_nature: bool) -> str:
    """Dr/Cr label for a signed balance in the ledger's nature.

    A zero balance is always 'Dr', whatever the nature.
    """
    if balance == 0:
        return BalanceType.DR.value
    if debit_nature:
        return BalanceType.DR.value if balance >= 0 else BalanceType.CR.value
    return BalanceType.CR.value if balance >= 0 else BalanceType.DR.value
