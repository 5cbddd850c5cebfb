"""
Unit tests - cash book, general ledger, party statement, ledger abstract,
trial balance and day book.
"""

import json
from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from ledgerbook.application.reports.ledger_reports import LedgerReportService
from ledgerbook.core.exceptions import NotFoundError
from ledgerbook.domain.value_objects import DateRange, LedgerType


@pytest.fixture
def reports(trading_books) -> LedgerReportService:
    return LedgerReportService(trading_books.balance_service())


class TestCashBook:

    def test_transactions_and_balances(self, reports, april):
        book = reports.cash_book(april)

        assert book["ledger"]["name"] == "Cash"
        assert book["openingBalance"] == Decimal("1000")
        assert book["closingBalance"] == Decimal("1300")
        assert book["closingBalanceType"] == "Dr"
        assert [t["particulars"] for t in book["transactions"]] == ["From Sales", "To Purchases"]
        assert [t["balance"] for t in book["transactions"]] == [Decimal("1500"), Decimal("1300")]
        assert book["summary"] == {
            "totalReceipts": Decimal("500"),
            "totalPayments": Decimal("200"),
            "netChange": Decimal("300"),
        }

    def test_multi_entry_voucher_reads_various(self, trading_books, reports, april):
        bank = trading_books.ledger("Bank", LedgerType.BANK)
        trading_books.post("V3", date(2024, 4, 9), [
            (trading_books.purchases, "300", "0"),
            (trading_books.cash, "0", "100"),
            (bank, "0", "200"),
        ])
        book = reports.cash_book(april)
        assert book["transactions"][-1]["particulars"] == "To Various"

    def test_missing_cash_ledger(self, books, april):
        with pytest.raises(NotFoundError):
            LedgerReportService(books.balance_service()).cash_book(april)

    def test_inactive_cash_ledger_is_not_used(self, books, april):
        books.ledger("Old Cash", LedgerType.CASH, status="Inactive")
        with pytest.raises(NotFoundError):
            LedgerReportService(books.balance_service()).cash_book(april)


class TestGeneralLedger:

    def test_sales_ledger(self, trading_books, reports, april):
        gl = reports.general_ledger(trading_books.sales.id, april)

        assert gl["transactions"][0]["particulars"] == "Cash"
        assert gl["transactions"][0]["credit"] == Decimal("500")
        assert gl["closingBalance"] == Decimal("500")
        assert gl["closingBalanceType"] == "Cr"
        assert gl["summary"]["difference"] == Decimal("-500")

    def test_unknown_ledger(self, reports, april):
        with pytest.raises(NotFoundError):
            reports.general_ledger(uuid4(), april)


class TestPartyStatement:

    def test_particulars_are_narrations(self, trading_books, reports, april):
        statement = reports.party_statement(trading_books.cash.id, april)

        assert [t["particulars"] for t in statement["transactions"]] == ["Cash sale", "Cash purchase"]
        assert statement["transactions"][0]["debitAmount"] == Decimal("500")
        assert statement["summary"]["closingBalance"] == Decimal("1300")
        assert statement["summary"]["openingBalanceType"] == "Dr"

    def test_unknown_ledger(self, reports, april):
        with pytest.raises(NotFoundError):
            reports.party_statement(uuid4(), april)


class TestLedgerAbstract:

    def test_includes_idle_ledgers(self, reports, april):
        abstract = reports.ledger_abstract(april)
        names = [row["ledgerName"] for row in abstract["abstract"]]

        assert names == ["Capital", "Cash", "Purchases", "Rent Expense", "Sales"]
        rent = abstract["abstract"][3]
        assert rent["closingDebit"] == Decimal("250")
        assert rent["totalDebits"] == Decimal("0")

    def test_closing_columns_balance(self, reports, april):
        summary = reports.ledger_abstract(april)["summary"]
        assert summary["totalOpeningDebit"] == summary["totalOpeningCredit"] == Decimal("1250")
        assert summary["totalClosingDebit"] == summary["totalClosingCredit"] == Decimal("1750")
        assert summary["totalLedgers"] == 5

    def test_sections_in_category_order(self, reports, april):
        sections = reports.ledger_abstract(april)["sections"]
        assert [s["category"] for s in sections] == ["ASSETS", "CAPITAL", "INCOME", "EXPENSES"]
        expenses = sections[-1]
        assert expenses["groupTotal"]["totalClosingDebit"] == Decimal("450")

    def test_filter_by_type(self, reports, april):
        abstract = reports.ledger_abstract(april, LedgerType.SALES)
        assert [row["ledgerName"] for row in abstract["abstract"]] == ["Sales"]


class TestTrialBalance:

    def test_ledgers_without_period_activity_are_excluded(self, reports, april):
        tb = reports.trial_balance(april)
        names = [row["ledgerName"] for row in tb["rows"]]

        assert "Rent Expense" not in names
        assert "Capital" not in names
        assert names == ["Cash", "Purchases", "Sales"]
        assert tb["summary"]["excludedLedgers"] == 2

    def test_columns(self, reports, april):
        rows = {row["ledgerName"]: row for row in reports.trial_balance(april)["rows"]}
        assert rows["Cash"]["openingDebit"] == Decimal("1000")
        assert rows["Cash"]["periodDebit"] == Decimal("500")
        assert rows["Cash"]["periodCredit"] == Decimal("200")
        assert rows["Cash"]["closingDebit"] == Decimal("1300")
        assert rows["Sales"]["closingCredit"] == Decimal("500")

    def test_balanced_when_every_ledger_moves(self, books, april):
        cash = books.ledger("Cash", LedgerType.CASH)
        sales = books.ledger("Sales", LedgerType.SALES)
        rent = books.ledger("Rent", LedgerType.EXPENSE)
        books.post("V1", date(2024, 4, 1), [(cash, "900", "0"), (sales, "0", "900")])
        books.post("V2", date(2024, 4, 2), [(rent, "400", "0"), (cash, "0", "400")])

        tb = LedgerReportService(books.balance_service()).trial_balance(april)

        assert tb["summary"]["isBalanced"] is True
        assert tb["summary"]["difference"] == Decimal("0")
        assert tb["grandTotal"]["periodDebit"] == tb["grandTotal"]["periodCredit"] == Decimal("1300")
        assert tb["grandTotal"]["closingDebit"] == Decimal("900")

    def test_empty_period(self, reports):
        tb = reports.trial_balance(DateRange.for_days(date(2025, 1, 1), date(2025, 1, 31)))
        assert tb["rows"] == []
        assert tb["summary"]["isBalanced"] is True


class TestDayBook:

    def test_sides(self, reports, april):
        day_book = reports.day_book(april)

        payment = [(r["ledgerName"], r["amount"]) for r in day_book["paymentSide"]]
        receipt = [(r["ledgerName"], r["amount"]) for r in day_book["receiptSide"]]
        assert payment == [("Cash", Decimal("500")), ("Purchases", Decimal("200"))]
        assert receipt == [("Sales", Decimal("500")), ("Cash", Decimal("200"))]

    def test_summary(self, reports, april):
        summary = reports.day_book(april)["summary"]
        assert summary["openingBalance"] == Decimal("1000")
        assert summary["closingBalance"] == Decimal("1300")
        assert summary["totalReceipts"] == summary["totalPayments"] == Decimal("700")
        assert summary["cashReceipts"] == Decimal("500")
        assert summary["cashPayments"] == Decimal("200")


class TestRepeatedReports:

    @pytest.mark.parametrize("report", ["cash_book", "ledger_abstract", "trial_balance", "day_book"])
    def test_same_output_on_every_call(self, reports, april, report):
        first = getattr(reports, report)(april)
        second = getattr(reports, report)(april)

        assert repr(first) == repr(second)
        assert json.dumps(first, default=str) == json.dumps(second, default=str)
