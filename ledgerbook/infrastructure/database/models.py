"""
Infrastructure - SQLModel database models.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import UUID, uuid4

from sqlmodel import Field, Relationship, SQLModel


def utc_now() -> datetime:
    """Timezone-aware timestamp for audit columns."""
    return datetime.now(timezone.utc)


class Ledger(SQLModel, table=True):
    """Chart-of-accounts ledger."""

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(index=True)
    ledger_type: str = Field(index=True)
    opening_balance: Decimal = Field(default=Decimal("0"), max_digits=18, decimal_places=2)
    status: str = Field(default="Active", index=True)
    parent_group: str | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class Voucher(SQLModel, table=True):
    """Balanced double-entry voucher (Receipt, Payment, Journal)."""

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    voucher_number: str = Field(unique=True, index=True)
    voucher_type: str
    voucher_date: date = Field(index=True)
    narration: str | None = None
    reference_type: str = "Manual"
    total_debit: Decimal = Field(default=Decimal("0"), max_digits=18, decimal_places=2)
    total_credit: Decimal = Field(default=Decimal("0"), max_digits=18, decimal_places=2)
    created_at: datetime = Field(default_factory=utc_now)

    entries: list["VoucherEntry"] = Relationship(
        back_populates="voucher",
        sa_relationship_kwargs={"order_by": "VoucherEntry.line_number"},
    )


class VoucherEntry(SQLModel, table=True):
    """One debit or credit line of a voucher."""

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    voucher_id: UUID = Field(foreign_key="voucher.id", index=True)
    line_number: int
    ledger_id: UUID = Field(foreign_key="ledger.id", index=True)
    ledger_name: str
    debit_amount: Decimal = Field(default=Decimal("0"), max_digits=18, decimal_places=2)
    credit_amount: Decimal = Field(default=Decimal("0"), max_digits=18, decimal_places=2)
    narration: str | None = None

    voucher: "Voucher" = Relationship(back_populates="entries")


class Item(SQLModel, table=True):
    """Stock item."""

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    item_code: str = Field(unique=True, index=True)
    item_name: str = Field(index=True)
    unit: str = "Nos"
    category: str | None = None
    opening_balance: Decimal = Field(default=Decimal("0"), max_digits=18, decimal_places=3)
    current_balance: Decimal = Field(default=Decimal("0"), max_digits=18, decimal_places=3)
    purchase_rate: Decimal = Field(default=Decimal("0"), max_digits=18, decimal_places=2)
    sales_rate: Decimal = Field(default=Decimal("0"), max_digits=18, decimal_places=2)
    gst_percent: Decimal = Field(default=Decimal("0"), max_digits=5, decimal_places=2)
    hsn_code: str | None = None
    status: str = Field(default="Active", index=True)
    created_at: datetime = Field(default_factory=utc_now)


class StockTransaction(SQLModel, table=True):
    """Quantity movement of one item."""

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    item_id: UUID = Field(foreign_key="item.id", index=True)
    transaction_type: str  # Stock In, Stock Out
    reference_type: str  # Purchase, Sale, Opening, Adjustment, Return
    transaction_date: date = Field(index=True)
    quantity: Decimal = Field(max_digits=18, decimal_places=3)
    free_qty: Decimal = Field(default=Decimal("0"), max_digits=18, decimal_places=3)
    rate: Decimal = Field(default=Decimal("0"), max_digits=18, decimal_places=2)
    invoice_number: str | None = None
    notes: str | None = None
    created_at: datetime = Field(default_factory=utc_now)


class Invoice(SQLModel, table=True):
    """GST invoice header."""

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    invoice_number: str = Field(index=True)
    invoice_date: date = Field(index=True)
    direction: str = Field(index=True)  # OUTWARD, INWARD
    invoice_type: str = "Sale"
    party_name: str
    party_gstin: str | None = None
    place_of_supply: str | None = None
    supply_kind: str = "GOODS"
    is_import: bool = False
    itc_eligible: bool = True
    itc_reason: str | None = None
    created_at: datetime = Field(default_factory=utc_now)

    lines: list["InvoiceLine"] = Relationship(
        back_populates="invoice",
        sa_relationship_kwargs={"order_by": "InvoiceLine.line_number"},
    )


class InvoiceLine(SQLModel, table=True):
    """Invoice line with its GST split."""

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    invoice_id: UUID = Field(foreign_key="invoice.id", index=True)
    line_number: int
    taxable_value: Decimal = Field(max_digits=18, decimal_places=2)
    gst_percent: Decimal = Field(default=Decimal("0"), max_digits=5, decimal_places=2)
    cgst: Decimal = Field(default=Decimal("0"), max_digits=18, decimal_places=2)
    sgst: Decimal = Field(default=Decimal("0"), max_digits=18, decimal_places=2)
    igst: Decimal = Field(default=Decimal("0"), max_digits=18, decimal_places=2)
    hsn_code: str | None = None
    description: str | None = None

    invoice: "Invoice" = Relationship(back_populates="lines")
