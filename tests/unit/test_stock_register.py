"""
Unit tests - stock register by day, month and range.
"""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from ledgerbook.application.reports.stock_register import StockRegisterService, movement_column
from ledgerbook.core.exceptions import InvalidInputError, NotFoundError
from ledgerbook.domain.entities import Item, StockTransaction
from ledgerbook.domain.value_objects import DateRange


@pytest.fixture
def register(item_repo, stock_repo) -> StockRegisterService:
    return StockRegisterService(item_repo, stock_repo)


@pytest.fixture
def item_x(item_repo, stock_repo) -> Item:
    item = item_repo.add(Item(
        item_code="X", item_name="Item X", unit="Nos",
        opening_balance=Decimal("10"), purchase_rate=Decimal("4"),
    ))
    # mirrors opening_balance; must never be counted again
    stock_repo.add(StockTransaction(item.id, "Stock In", Decimal("10"), "Opening", date(2024, 4, 1)))
    stock_repo.add(StockTransaction(item.id, "Stock In", Decimal("5"), "Purchase", date(2024, 4, 1)))
    stock_repo.add(StockTransaction(item.id, "Stock Out", Decimal("3"), "Sale", date(2024, 4, 2)))
    return item


class TestMovementColumn:

    @pytest.mark.parametrize("txn_type, reference, column", [
        ("Stock In", "Purchase", "purchase"),
        ("Stock In", "Adjustment", "purchase"),
        ("Stock In", "Return", "salesReturn"),
        ("Stock Out", "Sale", "sales"),
        ("Stock Out", "Return", "purchaseReturn"),
    ])
    def test_columns(self, txn_type, reference, column):
        txn = StockTransaction(uuid4(), txn_type, Decimal("1"), reference, date(2024, 4, 1))
        assert movement_column(txn) == column


class TestDayMode:

    def test_closing_carries_to_next_day(self, register, item_x, april):
        rows = register.register(april, "day")["rows"]

        assert [r["date"] for r in rows] == [date(2024, 4, 1), date(2024, 4, 2)]
        first, second = rows
        assert (first["ob"], first["purchase"], first["total"], first["closingStock"]) == (
            Decimal("10"), Decimal("5"), Decimal("15"), Decimal("15")
        )
        assert (second["ob"], second["sales"], second["closingStock"]) == (
            Decimal("15"), Decimal("3"), Decimal("12")
        )
        assert second["stockValue"] == Decimal("48")

    def test_opening_from_earlier_movements(self, register, item_x):
        later = DateRange.for_days(date(2024, 4, 2), date(2024, 4, 30))
        rows = register.register(later, "day")["rows"]
        assert len(rows) == 1
        assert rows[0]["ob"] == Decimal("15")
        assert rows[0]["closingStock"] == Decimal("12")

    def test_free_quantity_counts_on_receipt(self, register, item_x, stock_repo, april):
        stock_repo.add(StockTransaction(
            item_x.id, "Stock In", Decimal("4"), "Purchase", date(2024, 4, 3), free_qty=Decimal("1"),
        ))
        rows = register.register(april, "day")["rows"]
        assert rows[-1]["purchase"] == Decimal("5")
        assert rows[-1]["closingStock"] == Decimal("17")

    def test_returns(self, register, item_x, stock_repo, april):
        stock_repo.add(StockTransaction(item_x.id, "Stock In", Decimal("2"), "Return", date(2024, 4, 4)))
        stock_repo.add(StockTransaction(item_x.id, "Stock Out", Decimal("1"), "Return", date(2024, 4, 4)))
        row = register.register(april, "day")["rows"][-1]
        assert row["salesReturn"] == Decimal("2")
        assert row["purchaseReturn"] == Decimal("1")
        assert row["closingStock"] == Decimal("13")


class TestOtherModes:

    def test_month_mode(self, register, item_x, stock_repo):
        stock_repo.add(StockTransaction(item_x.id, "Stock Out", Decimal("2"), "Sale", date(2024, 5, 6)))
        two_months = DateRange.for_days(date(2024, 4, 1), date(2024, 5, 31))

        rows = register.register(two_months, "month")["rows"]

        assert [r["month"] for r in rows] == ["2024-04", "2024-05"]
        assert rows[0]["closingStock"] == Decimal("12")
        assert rows[1]["ob"] == Decimal("12")
        assert rows[1]["closingStock"] == Decimal("10")

    def test_range_mode_lists_idle_items(self, register, item_x, item_repo, april):
        item_repo.add(Item(item_code="Y", item_name="Item Y", unit="Kg", opening_balance=Decimal("7")))

        result = register.register(april, "range")

        assert [r["itemName"] for r in result["rows"]] == ["Item X", "Item Y"]
        idle = result["rows"][1]
        assert idle["ob"] == idle["closingStock"] == Decimal("7")
        assert idle["fromDate"] == date(2024, 4, 1)
        assert result["grandTotal"]["closingStock"] == Decimal("19")

    @pytest.mark.parametrize("mode, key, first", [
        ("day", "date", date(2024, 4, 1)),
        ("month", "month", "2024-04"),
    ])
    def test_idle_item_carried_in_grouped_modes(self, register, item_x, item_repo, april, mode, key, first):
        idle = item_repo.add(Item(item_code="Y", item_name="Item Y", unit="Kg", opening_balance=Decimal("7")))

        result = register.register(april, mode)

        idle_rows = [r for r in result["rows"] if r["itemId"] == idle.id]
        assert len(idle_rows) == 1
        assert idle_rows[0][key] == first
        assert idle_rows[0]["ob"] == idle_rows[0]["closingStock"] == Decimal("7")

    def test_idle_item_reaches_grand_total(self, register, item_repo, stock_repo, april):
        moved = item_repo.add(Item(item_code="X", item_name="Item X", unit="Nos", opening_balance=Decimal("10")))
        item_repo.add(Item(item_code="Y", item_name="Item Y", unit="Kg", opening_balance=Decimal("7")))
        stock_repo.add(StockTransaction(moved.id, "Stock In", Decimal("5"), "Purchase", date(2024, 4, 3)))

        by_day = register.register(april, "day")["grandTotal"]["closingStock"]
        by_range = register.register(april, "range")["grandTotal"]["closingStock"]

        assert by_day == by_range == Decimal("22")

    def test_single_item(self, register, item_x, item_repo, april):
        item_repo.add(Item(item_code="Y", item_name="Item Y", unit="Kg"))
        rows = register.register(april, "range", item_x.id)["rows"]
        assert [r["itemId"] for r in rows] == [item_x.id]

    def test_unknown_item(self, register, april):
        with pytest.raises(NotFoundError):
            register.register(april, "day", uuid4())

    def test_unknown_mode(self, register, april):
        with pytest.raises(InvalidInputError):
            register.register(april, "week")
