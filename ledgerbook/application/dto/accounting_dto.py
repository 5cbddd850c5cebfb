"""
API DTOs - Data Transfer Objects for API requests/responses.
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class LedgerCreateDTO(BaseModel):
    """DTO - Create ledger."""
    name: str = Field(..., min_length=1, max_length=200, description="Ledger name")
    ledger_type: str = Field(..., description="Ledger type, e.g. Cash, Bank, Sales A/c")
    opening_balance: Decimal = Field(Decimal("0"), description="Signed baseline in the ledger's nature")
    status: str = Field("Active", description="Active or Inactive")
    parent_group: str | None = Field(None, description="Parent group")


class LedgerResponseDTO(BaseModel):
    """DTO - Ledger."""
    id: UUID
    name: str
    ledger_type: str
    opening_balance: Decimal
    status: str
    parent_group: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class VoucherEntryCreateDTO(BaseModel):
    """DTO - One debit or credit line."""
    ledger_id: UUID = Field(..., description="Ledger posted to")
    debit_amount: Decimal = Field(Decimal("0"), ge=0, description="Debit amount")
    credit_amount: Decimal = Field(Decimal("0"), ge=0, description="Credit amount")
    narration: str | None = Field(None, description="Entry narration")


class VoucherCreateDTO(BaseModel):
    """DTO - Create voucher."""
    voucher_type: str = Field(..., description="Receipt, Payment or Journal")
    voucher_date: date = Field(..., description="Voucher date")
    voucher_number: str | None = Field(None, description="Generated when omitted")
    narration: str | None = Field(None, max_length=500, description="Voucher narration")
    reference_type: str = Field("Manual", description="Sales, Purchase, Payment or Manual")
    entries: list[VoucherEntryCreateDTO] = Field(..., min_length=2, description="Voucher lines")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "voucher_type": "Receipt",
            "voucher_date": "2024-04-01",
            "narration": "Cash sale",
            "entries": [
                {"ledger_id": "00000000-0000-0000-0000-000000000001", "debit_amount": 500},
                {"ledger_id": "00000000-0000-0000-0000-000000000002", "credit_amount": 500},
            ]
        }
    })


class VoucherEntryResponseDTO(BaseModel):
    ledger_id: UUID
    ledger_name: str
    debit_amount: Decimal
    credit_amount: Decimal
    narration: str | None

    model_config = ConfigDict(from_attributes=True)


class VoucherResponseDTO(BaseModel):
    """DTO - Voucher with its entries."""
    id: UUID
    voucher_number: str
    voucher_type: str
    voucher_date: date
    narration: str | None
    reference_type: str
    total_debit: Decimal
    total_credit: Decimal
    entries: list[VoucherEntryResponseDTO]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ItemCreateDTO(BaseModel):
    """DTO - Create stock item."""
    item_code: str = Field(..., min_length=1, description="Item code")
    item_name: str = Field(..., min_length=1, description="Item name")
    unit: str = Field("Nos", description="Unit of measure")
    category: str | None = None
    opening_balance: Decimal = Field(Decimal("0"), ge=0, description="Opening quantity")
    purchase_rate: Decimal = Field(Decimal("0"), ge=0)
    sales_rate: Decimal = Field(Decimal("0"), ge=0)
    gst_percent: Decimal = Field(Decimal("0"), ge=0, le=100)
    hsn_code: str | None = None


class ItemResponseDTO(BaseModel):
    """DTO - Stock item."""
    id: UUID
    item_code: str
    item_name: str
    unit: str
    category: str | None
    opening_balance: Decimal
    current_balance: Decimal
    purchase_rate: Decimal
    sales_rate: Decimal
    gst_percent: Decimal
    hsn_code: str | None
    status: str

    model_config = ConfigDict(from_attributes=True)


class StockTransactionCreateDTO(BaseModel):
    """DTO - Record a stock movement."""
    item_id: UUID
    transaction_type: str = Field(..., description="Stock In or Stock Out")
    reference_type: str = Field(..., description="Purchase, Sale, Adjustment or Return")
    transaction_date: date
    quantity: Decimal = Field(..., gt=0)
    free_qty: Decimal = Field(Decimal("0"), ge=0)
    rate: Decimal = Field(Decimal("0"), ge=0)
    invoice_number: str | None = None
    notes: str | None = None


class StockTransactionResponseDTO(BaseModel):
    id: UUID
    item_id: UUID
    transaction_type: str
    reference_type: str
    transaction_date: date
    quantity: Decimal
    free_qty: Decimal
    rate: Decimal
    invoice_number: str | None
    notes: str | None

    model_config = ConfigDict(from_attributes=True)


class InvoiceLineCreateDTO(BaseModel):
    """DTO - Invoice line with its GST split."""
    taxable_value: Decimal = Field(..., ge=0)
    gst_percent: Decimal = Field(Decimal("0"), ge=0, le=100)
    cgst: Decimal = Field(Decimal("0"), ge=0)
    sgst: Decimal = Field(Decimal("0"), ge=0)
    igst: Decimal = Field(Decimal("0"), ge=0)
    hsn_code: str | None = None
    description: str | None = None


class InvoiceCreateDTO(BaseModel):
    """DTO - GST invoice, outward (sale) or inward (purchase)."""
    invoice_number: str
    invoice_date: date
    direction: str = Field(..., description="OUTWARD or INWARD")
    invoice_type: str = Field("Sale", description="Sale, Sale Return, Purchase or Purchase Return")
    party_name: str
    party_gstin: str | None = Field(None, max_length=15)
    place_of_supply: str | None = None
    supply_kind: str = Field("GOODS", description="GOODS or SERVICES")
    is_import: bool = False
    itc_eligible: bool = True
    itc_reason: str | None = None
    lines: list[InvoiceLineCreateDTO] = Field(..., min_length=1)


class InvoiceLineResponseDTO(BaseModel):
    taxable_value: Decimal
    gst_percent: Decimal
    cgst: Decimal
    sgst: Decimal
    igst: Decimal
    hsn_code: str | None
    description: str | None

    model_config = ConfigDict(from_attributes=True)


class InvoiceResponseDTO(BaseModel):
    """DTO - GST invoice."""
    id: UUID
    invoice_number: str
    invoice_date: date
    direction: str
    invoice_type: str
    party_name: str
    party_gstin: str | None
    place_of_supply: str | None
    supply_kind: str
    is_import: bool
    itc_eligible: bool
    itc_reason: str | None
    lines: list[InvoiceLineResponseDTO]

    model_config = ConfigDict(from_attributes=True)
