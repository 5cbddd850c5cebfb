"""
Pytest configuration and fixtures.

Report services run against in-memory stores implementing the domain
repository interfaces; the API tests use SQLite instead.
"""

from collections.abc import Iterable
from datetime import date
from decimal import Decimal
from uuid import UUID

import pytest

from ledgerbook.domain.entities import (
    Invoice,
    InvoiceLine,
    Item,
    Ledger,
    StockTransaction,
    Voucher,
    VoucherEntry,
)
from ledgerbook.domain.services import (
    BalanceService,
    IInvoiceRepository,
    IItemRepository,
    ILedgerRepository,
    IStockTransactionRepository,
    IVoucherRepository,
    order_vouchers,
)
from ledgerbook.domain.value_objects import DateRange, LedgerType


class InMemoryLedgerRepository(ILedgerRepository):

    def __init__(self):
        self.ledgers: dict[UUID, Ledger] = {}

    def add(self, ledger: Ledger) -> Ledger:
        self.ledgers[ledger.id] = ledger
        return ledger

    def get_by_id(self, ledger_id):
        return self.ledgers.get(ledger_id)

    def list_ledgers(self, ledger_types=None, status=None):
        types = set(ledger_types) if ledger_types is not None else None
        rows = [
            l for l in self.ledgers.values()
            if (types is None or l.ledger_type in types) and (status is None or l.status == status)
        ]
        return sorted(rows, key=lambda l: l.name)


class InMemoryVoucherRepository(IVoucherRepository):

    def __init__(self, ledger_repo: InMemoryLedgerRepository):
        self.ledger_repo = ledger_repo
        self.vouchers: list[Voucher] = []
        self.calls = 0

    def add(self, voucher: Voucher) -> Voucher:
        self.vouchers.append(voucher)
        return voucher

    def list_vouchers(self, date_range=None, ledger_ids=None, before=None):
        self.calls += 1
        wanted = set(ledger_ids) if ledger_ids is not None else None
        rows = []
        for voucher in self.vouchers:
            if date_range is not None and not date_range.contains(voucher.voucher_date):
                continue
            if before is not None and voucher.voucher_date >= before:
                continue
            if wanted is not None and not voucher.touches(wanted):
                continue
            rows.append(voucher)
        return order_vouchers(rows)


class InMemoryItemRepository(IItemRepository):

    def __init__(self):
        self.items: dict[UUID, Item] = {}

    def add(self, item: Item) -> Item:
        self.items[item.id] = item
        return item

    def get_by_id(self, item_id):
        return self.items.get(item_id)

    def list_items(self, status=None):
        rows = [i for i in self.items.values() if status is None or i.status == status]
        return sorted(rows, key=lambda i: i.item_name)


class InMemoryStockTransactionRepository(IStockTransactionRepository):

    def __init__(self):
        self.transactions: list[StockTransaction] = []

    def add(self, txn: StockTransaction) -> StockTransaction:
        self.transactions.append(txn)
        return txn

    def list_transactions(self, item_ids=None, date_range=None, before=None):
        wanted = set(item_ids) if item_ids is not None else None
        rows = [
            t for t in self.transactions
            if (wanted is None or t.item_id in wanted)
            and (date_range is None or date_range.contains(t.date))
            and (before is None or t.date < before)
        ]
        return sorted(rows, key=lambda t: t.date)


class InMemoryInvoiceRepository(IInvoiceRepository):

    def __init__(self):
        self.invoices: list[Invoice] = []

    def add(self, invoice: Invoice) -> Invoice:
        self.invoices.append(invoice)
        return invoice

    def list_invoices(self, direction, date_range=None):
        rows = [
            i for i in self.invoices
            if i.direction == direction and (date_range is None or date_range.contains(i.invoice_date))
        ]
        return sorted(rows, key=lambda i: (i.invoice_date, i.invoice_number))


class Books:
    """A chart of accounts plus a voucher journal, built up per test."""

    def __init__(self):
        self.ledger_repo = InMemoryLedgerRepository()
        self.voucher_repo = InMemoryVoucherRepository(self.ledger_repo)

    def ledger(self, name: str, ledger_type: str, opening="0", status: str = "Active") -> Ledger:
        return self.ledger_repo.add(Ledger(
            name=name,
            ledger_type=ledger_type,
            opening_balance=Decimal(opening),
            status=status,
        ))

    def post(
        self,
        number: str,
        day: date,
        lines: Iterable[tuple[Ledger, str, str]],
        voucher_type: str = "Journal",
        narration: str | None = None,
        reference_type: str = "Manual",
    ) -> Voucher:
        """Post a voucher from (ledger, debit, credit) lines."""
        entries = [
            VoucherEntry(
                ledger_id=ledger.id,
                ledger_name=ledger.name,
                debit_amount=Decimal(debit),
                credit_amount=Decimal(credit),
                ledger_type=ledger.ledger_type,
            )
            for ledger, debit, credit in lines
        ]
        return self.voucher_repo.add(Voucher(
            voucher_number=number,
            voucher_type=voucher_type,
            voucher_date=day,
            narration=narration,
            entries=entries,
            reference_type=reference_type,
        ))

    def balance_service(self, **kwargs) -> BalanceService:
        return BalanceService(self.ledger_repo, self.voucher_repo, **kwargs)


@pytest.fixture
def books() -> Books:
    return Books()


@pytest.fixture
def april() -> DateRange:
    return DateRange.for_days(date(2024, 4, 1), date(2024, 4, 30))


@pytest.fixture
def trading_books(books: Books) -> Books:
    """
    Cash 1000 Dr, a cash sale on 1 April and a cash purchase on 5 April.
    Rent Expense carries an opening balance but never moves.
    """
    cash = books.ledger("Cash", LedgerType.CASH, "1000")
    sales = books.ledger("Sales", LedgerType.SALES)
    purchases = books.ledger("Purchases", LedgerType.PURCHASES)
    capital = books.ledger("Capital", LedgerType.CAPITAL, "1250")
    books.ledger("Rent Expense", LedgerType.EXPENSE, "250")

    books.post("V1", date(2024, 4, 1), [(cash, "500", "0"), (sales, "0", "500")],
               voucher_type="Receipt", narration="Cash sale")
    books.post("V2", date(2024, 4, 5), [(purchases, "200", "0"), (cash, "0", "200")],
               voucher_type="Payment", narration="Cash purchase")
    books.cash, books.sales, books.purchases, books.capital = cash, sales, purchases, capital
    return books


@pytest.fixture
def item_repo() -> InMemoryItemRepository:
    return InMemoryItemRepository()


@pytest.fixture
def stock_repo() -> InMemoryStockTransactionRepository:
    return InMemoryStockTransactionRepository()


@pytest.fixture
def invoice_repo() -> InMemoryInvoiceRepository:
    return InMemoryInvoiceRepository()


def make_invoice(
    number: str,
    day: date,
    direction: str = "OUTWARD",
    taxable="1000",
    cgst="0",
    sgst="0",
    igst="0",
    rate="18",
    **kwargs,
) -> Invoice:
    kwargs.setdefault("party_name", "Party")
    return Invoice(
        invoice_number=number,
        invoice_date=day,
        direction=direction,
        lines=[InvoiceLine(
            taxable_value=Decimal(taxable),
            gst_percent=Decimal(rate),
            cgst=Decimal(cgst),
            sgst=Decimal(sgst),
            igst=Decimal(igst),
        )],
        **kwargs,
    )


@pytest.fixture
def invoice_factory():
    return make_invoice
