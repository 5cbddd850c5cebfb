"""
Unit tests - ledger type classification and Dr/Cr labels.
"""

from decimal import Decimal

import pytest

from ledgerbook.domain.classifier import (
    CATEGORY_BY_TYPE,
    DEBIT_NATURE_TYPES,
    BalanceClassifier,
    balance_type,
    get_category,
    is_debit_nature,
)
from ledgerbook.domain.value_objects import LedgerCategory, LedgerType


class TestDebitNature:

    @pytest.mark.parametrize("ledger_type", sorted(DEBIT_NATURE_TYPES))
    def test_debit_side_types(self, ledger_type):
        assert is_debit_nature(ledger_type) is True

    @pytest.mark.parametrize("ledger_type", [
        LedgerType.SALES,
        LedgerType.CAPITAL,
        LedgerType.SUNDRY_CREDITORS,
        LedgerType.INCOME,
        LedgerType.DEPOSIT,
    ])
    def test_credit_side_types(self, ledger_type):
        assert is_debit_nature(ledger_type) is False

    def test_unknown_type_defaults_to_credit(self):
        assert is_debit_nature("Suspense A/c") is False
        assert is_debit_nature(None) is False

    def test_unknown_nature_is_configurable(self):
        classifier = BalanceClassifier(unknown_debit_nature=True)
        assert classifier.is_debit_nature("Suspense A/c") is True
        # mapped credit-side types stay credit
        assert classifier.is_debit_nature(LedgerType.SALES) is False
        assert classifier.is_debit_nature(LedgerType.CASH) is True


class TestCategory:

    def test_known_types(self):
        assert get_category(LedgerType.CASH) == LedgerCategory.ASSETS
        assert get_category(LedgerType.SUNDRY_CREDITORS) == LedgerCategory.LIABILITIES
        assert get_category(LedgerType.SHARE_CAPITAL) == LedgerCategory.CAPITAL
        assert get_category(LedgerType.SALES) == LedgerCategory.INCOME
        assert get_category(LedgerType.PURCHASES) == LedgerCategory.EXPENSES

    def test_unmapped_types_are_other(self):
        assert get_category(LedgerType.INVESTMENT) == LedgerCategory.OTHER
        assert get_category("Anything") == LedgerCategory.OTHER

    def test_every_debit_type_except_party_is_categorized(self):
        assert DEBIT_NATURE_TYPES - set(CATEGORY_BY_TYPE) == {LedgerType.PARTY}


class TestBalanceType:

    def test_debit_nature(self):
        assert balance_type(Decimal("100"), True) == "Dr"
        assert balance_type(Decimal("-100"), True) == "Cr"

    def test_credit_nature(self):
        assert balance_type(Decimal("100"), False) == "Cr"
        assert balance_type(Decimal("-100"), False) == "Dr"

    @pytest.mark.parametrize("debit_nature", [True, False])
    def test_zero_is_always_dr(self, debit_nature):
        assert balance_type(Decimal("0"), debit_nature) == "Dr"
