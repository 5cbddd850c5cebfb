"""
Domain Entities - ledgers, vouchers, stock and GST invoices.
"""

import uuid
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from ledgerbook.core.exceptions import DataIntegrityError

from .value_objects import (
    BALANCE_TOLERANCE,
    ZERO,
    InvoiceDirection,
    LedgerStatus,
    ReferenceType,
    StockReferenceType,
    StockTransactionType,
    SupplyKind,
)


@dataclass
class Ledger:
    """
    Entity - an account in the chart of accounts.
    opening_balance is the signed baseline in the ledger's own nature,
    set once at creation.
    """
    name: str
    ledger_type: str
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    opening_balance: Decimal = ZERO
    status: str = LedgerStatus.ACTIVE.value
    parent_group: str | None = None


@dataclass
class VoucherEntry:
    """One debit or credit line of a voucher."""
    ledger_id: uuid.UUID
    ledger_name: str
    debit_amount: Decimal = ZERO
    credit_amount: Decimal = ZERO
    narration: str | None = None
    ledger_type: str | None = None

    @property
    def net_change(self) -> Decimal:
        return self.debit_amount - self.credit_amount


@dataclass
class Voucher:
    """
    Entity - balanced double-entry record (Receipt, Payment or Journal).
    Append-only: the engine never mutates a voucher.
    """
    voucher_number: str
    voucher_type: str
    voucher_date: date
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    narration: str | None = None
    entries: list[VoucherEntry] = field(default_factory=list)
    total_debit: Decimal | None = None
    total_credit: Decimal | None = None
    reference_type: str = ReferenceType.MANUAL.value

    def __post_init__(self) -> None:
        if self.total_debit is None:
            self.total_debit = sum((e.debit_amount for e in self.entries), ZERO)
        if self.total_credit is None:
            self.total_credit = sum((e.credit_amount for e in self.entries), ZERO)

    def is_balanced(self) -> bool:
        try:
            self.validate()
        except DataIntegrityError:
            return False
        return True

    def validate(self) -> "Voucher":
        """Check the double-entry invariants, raising DataIntegrityError."""
        entry_debit = sum((e.debit_amount for e in self.entries), ZERO)
        entry_credit = sum((e.credit_amount for e in self.entries), ZERO)

        for entry in self.entries:
            if entry.debit_amount < 0 or entry.credit_amount < 0:
                raise DataIntegrityError(
                    f"Voucher {self.voucher_number}: negative amount on {entry.ledger_name}",
                    self.voucher_number,
                )
            if (entry.debit_amount > 0) == (entry.credit_amount > 0):
                raise DataIntegrityError(
                    f"Voucher {self.voucher_number}: entry for {entry.ledger_name} "
                    f"must carry exactly one of debit or credit",
                    self.voucher_number,
                )

        if abs(self.total_debit - self.total_credit) > BALANCE_TOLERANCE:
            raise DataIntegrityError(
                f"Voucher {self.voucher_number} is not balanced: "
                f"total debit {self.total_debit} != total credit {self.total_credit}",
                self.voucher_number,
            )
        if (
            abs(entry_debit - self.total_debit) > BALANCE_TOLERANCE
            or abs(entry_credit - self.total_credit) > BALANCE_TOLERANCE
        ):
            raise DataIntegrityError(
                f"Voucher {self.voucher_number}: entry totals "
                f"({entry_debit}/{entry_credit}) disagree with voucher totals "
                f"({self.total_debit}/{self.total_credit})",
                self.voucher_number,
            )
        return self

    def touches(self, ledger_ids: set[uuid.UUID]) -> bool:
        return any(e.ledger_id in ledger_ids for e in self.entries)


@dataclass
class Item:
    """Entity - stock item; opening_balance is the quantity baseline."""
    item_code: str
    item_name: str
    unit: str
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    category: str | None = None
    opening_balance: Decimal = ZERO
    current_balance: Decimal = ZERO
    purchase_rate: Decimal = ZERO
    sales_rate: Decimal = ZERO
    gst_percent: Decimal = ZERO
    hsn_code: str | None = None
    status: str = LedgerStatus.ACTIVE.value


@dataclass
class StockTransaction:
    """Quantity movement of one item; the stock analogue of VoucherEntry."""
    item_id: uuid.UUID
    transaction_type: str
    quantity: Decimal
    reference_type: str
    date: date
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    free_qty: Decimal = ZERO
    rate: Decimal = ZERO
    invoice_number: str | None = None
    notes: str | None = None

    @property
    def is_stock_in(self) -> bool:
        return self.transaction_type == StockTransactionType.STOCK_IN.value

    @property
    def is_opening(self) -> bool:
        return self.reference_type == StockReferenceType.OPENING.value

    @property
    def effective_quantity(self) -> Decimal:
        """Quantity moved; free quantity only counts on receipt."""
        if self.is_stock_in:
            return self.quantity + (self.free_qty or ZERO)
        return self.quantity

    @property
    def signed_quantity(self) -> Decimal:
        return self.effective_quantity if self.is_stock_in else -self.effective_quantity


@dataclass
class InvoiceLine:
    taxable_value: Decimal
    gst_percent: Decimal = ZERO
    cgst: Decimal = ZERO
    sgst: Decimal = ZERO
    igst: Decimal = ZERO
    hsn_code: str | None = None
    description: str | None = None

    @property
    def total_tax(self) -> Decimal:
        return self.cgst + self.sgst + self.igst


@dataclass
class Invoice:
    """
    Entity - GST invoice, outward (sale) or inward (purchase).
    """
    invoice_number: str
    invoice_date: date
    direction: str
    party_name: str
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    invoice_type: str = "Sale"
    party_gstin: str | None = None
    place_of_supply: str | None = None
    supply_kind: str = SupplyKind.GOODS.value
    is_import: bool = False
    itc_eligible: bool = True
    itc_reason: str | None = None
    lines: list[InvoiceLine] = field(default_factory=list)

    @property
    def is_outward(self) -> bool:
        return self.direction == InvoiceDirection.OUTWARD.value

    @property
    def is_registered(self) -> bool:
        return bool(self.party_gstin and self.party_gstin.strip())

    @property
    def taxable_value(self) -> Decimal:
        return sum((line.taxable_value for line in self.lines), ZERO)

    @property
    def cgst(self) -> Decimal:
        return sum((line.cgst for line in self.lines), ZERO)

    @property
    def sgst(self) -> Decimal:
        return sum((line.sgst for line in self.lines), ZERO)

    @property
    def igst(self) -> Decimal:
        return sum((line.igst for line in self.lines), ZERO)

    @property
    def total_tax(self) -> Decimal:
        return self.cgst + self.sgst + self.igst

    @property
    def invoice_value(self) -> Decimal:
        return self.taxable_value + self.total_tax

    @property
    def is_inter_state(self) -> bool:
        return self.igst > 0
