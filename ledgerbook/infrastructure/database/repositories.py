"""
Infrastructure - SQL implementations of the domain store interfaces.

Rows are mapped to domain entities; entries and lines are loaded with one
query per call and grouped in memory, never one query per voucher.
"""

from collections import defaultdict
from collections.abc import Iterable
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from ledgerbook.domain import entities
from ledgerbook.domain.services import (
    IInvoiceRepository,
    IItemRepository,
    ILedgerRepository,
    IStockTransactionRepository,
    IVoucherRepository,
)
from ledgerbook.domain.value_objects import ZERO, DateRange

from .models import Invoice, InvoiceLine, Item, Ledger, StockTransaction, Voucher, VoucherEntry


def _dec(value) -> Decimal:
    if value is None:
        return ZERO
    return value if isinstance(value, Decimal) else Decimal(str(value))


def to_ledger(row: Ledger) -> entities.Ledger:
    return entities.Ledger(
        id=row.id,
        name=row.name,
        ledger_type=row.ledger_type,
        opening_balance=_dec(row.opening_balance),
        status=row.status,
        parent_group=row.parent_group,
    )


def to_item(row: Item) -> entities.Item:
    return entities.Item(
        id=row.id,
        item_code=row.item_code,
        item_name=row.item_name,
        unit=row.unit,
        category=row.category,
        opening_balance=_dec(row.opening_balance),
        current_balance=_dec(row.current_balance),
        purchase_rate=_dec(row.purchase_rate),
        sales_rate=_dec(row.sales_rate),
        gst_percent=_dec(row.gst_percent),
        hsn_code=row.hsn_code,
        status=row.status,
    )


def to_stock_transaction(row: StockTransaction) -> entities.StockTransaction:
    return entities.StockTransaction(
        id=row.id,
        item_id=row.item_id,
        transaction_type=row.transaction_type,
        reference_type=row.reference_type,
        date=row.transaction_date,
        quantity=_dec(row.quantity),
        free_qty=_dec(row.free_qty),
        rate=_dec(row.rate),
        invoice_number=row.invoice_number,
        notes=row.notes,
    )


class SqlLedgerRepository(ILedgerRepository):

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, ledger_id: UUID) -> entities.Ledger | None:
        row = self.db.get(Ledger, ledger_id)
        return to_ledger(row) if row else None

    def list_ledgers(
        self,
        ledger_types: Iterable[str] | None = None,
        status: str | None = None,
    ) -> list[entities.Ledger]:
        query = self.db.query(Ledger)
        if ledger_types is not None:
            query = query.filter(Ledger.ledger_type.in_(list(ledger_types)))
        if status:
            query = query.filter(Ledger.status == status)
        rows = query.order_by(Ledger.name, Ledger.created_at).all()
        return [to_ledger(row) for row in rows]


class SqlVoucherRepository(IVoucherRepository):

    def __init__(self, db: Session):
        self.db = db

    def list_vouchers(
        self,
        date_range: DateRange | None = None,
        ledger_ids: Iterable[UUID] | None = None,
        before: date | None = None,
    ) -> list[entities.Voucher]:
        query = self.db.query(Voucher)
        if date_range is not None:
            query = query.filter(
                Voucher.voucher_date >= date_range.first_day,
                Voucher.voucher_date <= date_range.last_day,
            )
        if before is not None:
            query = query.filter(Voucher.voucher_date < before)
        if ledger_ids is not None:
            ids = list(ledger_ids)
            if not ids:
                return []
            touching = select(VoucherEntry.voucher_id).where(VoucherEntry.ledger_id.in_(ids))
            query = query.filter(Voucher.id.in_(touching))

        rows = query.order_by(Voucher.voucher_date, Voucher.voucher_number, Voucher.created_at).all()
        entries = self._entries_by_voucher([row.id for row in rows])
        return [self._to_voucher(row, entries.get(row.id, [])) for row in rows]

    def _entries_by_voucher(self, voucher_ids: list[UUID]) -> dict[UUID, list[entities.VoucherEntry]]:
        grouped: dict[UUID, list[entities.VoucherEntry]] = defaultdict(list)
        if not voucher_ids:
            return grouped
        rows = (
            self.db.query(VoucherEntry, Ledger.ledger_type)
            .outerjoin(Ledger, Ledger.id == VoucherEntry.ledger_id)
            .filter(VoucherEntry.voucher_id.in_(voucher_ids))
            .order_by(VoucherEntry.voucher_id, VoucherEntry.line_number)
            .all()
        )
        for entry, ledger_type in rows:
            grouped[entry.voucher_id].append(entities.VoucherEntry(
                ledger_id=entry.ledger_id,
                ledger_name=entry.ledger_name,
                debit_amount=_dec(entry.debit_amount),
                credit_amount=_dec(entry.credit_amount),
                narration=entry.narration,
                ledger_type=ledger_type,
            ))
        return grouped

    @staticmethod
    def _to_voucher(row: Voucher, entries: list[entities.VoucherEntry]) -> entities.Voucher:
        return entities.Voucher(
            id=row.id,
            voucher_number=row.voucher_number,
            voucher_type=row.voucher_type,
            voucher_date=row.voucher_date,
            narration=row.narration,
            reference_type=row.reference_type,
            total_debit=_dec(row.total_debit),
            total_credit=_dec(row.total_credit),
            entries=entries,
        )


class SqlItemRepository(IItemRepository):

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, item_id: UUID) -> entities.Item | None:
        row = self.db.get(Item, item_id)
        return to_item(row) if row else None

    def list_items(self, status: str | None = None) -> list[entities.Item]:
        query = self.db.query(Item)
        if status:
            query = query.filter(Item.status == status)
        return [to_item(row) for row in query.order_by(Item.item_name).all()]


class SqlStockTransactionRepository(IStockTransactionRepository):

    def __init__(self, db: Session):
        self.db = db

    def list_transactions(
        self,
        item_ids: Iterable[UUID] | None = None,
        date_range: DateRange | None = None,
        before: date | None = None,
    ) -> list[entities.StockTransaction]:
        query = self.db.query(StockTransaction)
        if item_ids is not None:
            ids = list(item_ids)
            if not ids:
                return []
            query = query.filter(StockTransaction.item_id.in_(ids))
        if date_range is not None:
            query = query.filter(
                StockTransaction.transaction_date >= date_range.first_day,
                StockTransaction.transaction_date <= date_range.last_day,
            )
        if before is not None:
            query = query.filter(StockTransaction.transaction_date < before)
        rows = query.order_by(StockTransaction.transaction_date, StockTransaction.created_at).all()
        return [to_stock_transaction(row) for row in rows]


class SqlInvoiceRepository(IInvoiceRepository):

    def __init__(self, db: Session):
        self.db = db

    def list_invoices(
        self,
        direction: str,
        date_range: DateRange | None = None,
    ) -> list[entities.Invoice]:
        query = self.db.query(Invoice).filter(Invoice.direction == direction)
        if date_range is not None:
            query = query.filter(
                Invoice.invoice_date >= date_range.first_day,
                Invoice.invoice_date <= date_range.last_day,
            )
        rows = query.order_by(Invoice.invoice_date, Invoice.invoice_number).all()

        lines: dict[UUID, list[entities.InvoiceLine]] = defaultdict(list)
        if rows:
            line_rows = (
                self.db.query(InvoiceLine)
                .filter(InvoiceLine.invoice_id.in_([row.id for row in rows]))
                .order_by(InvoiceLine.invoice_id, InvoiceLine.line_number)
                .all()
            )
            for line in line_rows:
                lines[line.invoice_id].append(entities.InvoiceLine(
                    taxable_value=_dec(line.taxable_value),
                    gst_percent=_dec(line.gst_percent),
                    cgst=_dec(line.cgst),
                    sgst=_dec(line.sgst),
                    igst=_dec(line.igst),
                    hsn_code=line.hsn_code,
                    description=line.description,
                ))

        return [
            entities.Invoice(
                id=row.id,
                invoice_number=row.invoice_number,
                invoice_date=row.invoice_date,
                direction=row.direction,
                party_name=row.party_name,
                invoice_type=row.invoice_type,
                party_gstin=row.party_gstin,
                place_of_supply=row.place_of_supply,
                supply_kind=row.supply_kind,
                is_import=row.is_import,
                itc_eligible=row.itc_eligible,
                itc_reason=row.itc_reason,
                lines=lines.get(row.id, []),
            )
            for row in rows
        ]
