"""
Stock register - quantity movements per item, folded like a ledger.

`Opening` reference transactions mirror Item.opening_balance and are
never counted a second time.
"""

import logging
from collections.abc import Callable
from datetime import date
from decimal import Decimal
from uuid import UUID

from ledgerbook.core.exceptions import InvalidInputError, NotFoundError
from ledgerbook.domain.entities import Item, StockTransaction
from ledgerbook.domain.services import IItemRepository, IStockTransactionRepository
from ledgerbook.domain.value_objects import ZERO, DateRange, LedgerStatus, StockReferenceType

from .common import period, totals

logger = logging.getLogger(__name__)

DAY = "day"
MONTH = "month"
RANGE = "range"
MODES = (DAY, MONTH, RANGE)

COLUMNS = (
    "ob",
    "purchase",
    "salesReturn",
    "total",
    "sales",
    "purchaseReturn",
    "closingStock",
    "stockValue",
)


def movement_column(txn: StockTransaction) -> str:
    is_return = txn.reference_type == StockReferenceType.RETURN.value
    if txn.is_stock_in:
        return "salesReturn" if is_return else "purchase"
    return "purchaseReturn" if is_return else "sales"


def stock_row(item: Item, opening: Decimal, transactions: list[StockTransaction]) -> dict:
    """One register row: opening carried in, movements, closing carried out."""
    moved = {"purchase": ZERO, "salesReturn": ZERO, "sales": ZERO, "purchaseReturn": ZERO}
    for txn in transactions:
        moved[movement_column(txn)] += txn.effective_quantity

    in_hand = opening + moved["purchase"] + moved["salesReturn"]
    closing = in_hand - moved["sales"] - moved["purchaseReturn"]
    return {
        "itemId": item.id,
        "itemName": item.item_name,
        "unit": item.unit,
        "ob": opening,
        "purchase": moved["purchase"],
        "salesReturn": moved["salesReturn"],
        "total": in_hand,
        "sales": moved["sales"],
        "purchaseReturn": moved["purchaseReturn"],
        "closingStock": closing,
        "stockValue": closing * (item.purchase_rate or ZERO),
    }


class StockRegisterService:

    def __init__(self, item_repo: IItemRepository, stock_repo: IStockTransactionRepository):
        self.item_repo = item_repo
        self.stock_repo = stock_repo

    def _items(self, item_id: UUID | None) -> list[Item]:
        if item_id is None:
            return self.item_repo.list_items(status=LedgerStatus.ACTIVE.value)
        item = self.item_repo.get_by_id(item_id)
        if item is None:
            raise NotFoundError("Item", item_id)
        return [item]

    def opening_quantities(self, items: list[Item], cutoff: date) -> dict[UUID, Decimal]:
        """Quantity in hand before `cutoff`, per item."""
        openings = {item.id: item.opening_balance or ZERO for item in items}
        if not items:
            return openings
        earlier = self.stock_repo.list_transactions(item_ids=list(openings), before=cutoff)
        for txn in earlier:
            if txn.item_id in openings and not txn.is_opening:
                openings[txn.item_id] += txn.signed_quantity
        return openings

    def register(self, date_range: DateRange, mode: str = DAY, item_id: UUID | None = None) -> dict:
        if mode not in MODES:
            raise InvalidInputError(
                f"Unknown stock register mode: {mode}. Expected one of {', '.join(MODES)}"
            )

        items = self._items(item_id)
        openings = self.opening_quantities(items, date_range.first_day)

        by_item: dict[UUID, list[StockTransaction]] = {item.id: [] for item in items}
        if items:
            in_range = self.stock_repo.list_transactions(item_ids=list(by_item), date_range=date_range)
            for txn in in_range:
                if txn.item_id in by_item and not txn.is_opening:
                    by_item[txn.item_id].append(txn)

        if mode == RANGE:
            rows = [
                {
                    **stock_row(item, openings[item.id], by_item[item.id]),
                    "fromDate": date_range.first_day,
                    "toDate": date_range.last_day,
                }
                for item in sorted(items, key=lambda i: i.item_name)
            ]
        else:
            key_of = self._day_key if mode == DAY else self._month_key
            label = "date" if mode == DAY else "month"
            first_key = key_of(date_range.first_day)
            rows = []
            for item in items:
                rows.extend(self._grouped_rows(
                    item, openings[item.id], by_item[item.id], key_of, label, first_key,
                ))
            rows.sort(key=lambda row: (row[label], row["itemName"]))

        logger.info("Stock register (%s): %d items, %d rows", mode, len(items), len(rows))
        return {
            **period(date_range),
            "mode": mode,
            "rows": rows,
            "grandTotal": totals(rows, COLUMNS),
        }

    @staticmethod
    def _day_key(day: date):
        return day

    @staticmethod
    def _month_key(day: date):
        return f"{day.year:04d}-{day.month:02d}"

    @staticmethod
    def _grouped_rows(
        item: Item,
        opening: Decimal,
        transactions: list[StockTransaction],
        key_of: Callable,
        label: str,
        first_key,
    ) -> list[dict]:
        """Rows for the periods in which the item moved; each closing
        becomes the next period's opening.

        An item with no movement in the range gets a single row in the
        first period, so its stock in hand still reaches the grand total.
        """
        groups: dict = {}
        for txn in sorted(transactions, key=lambda t: t.date):
            groups.setdefault(key_of(txn.date), []).append(txn)
        if not groups:
            groups[first_key] = []

        rows = []
        carried = opening
        for key, group in groups.items():
            row = stock_row(item, carried, group)
            row[label] = key
            rows.append(row)
            carried = row["closingStock"]
        return rows
