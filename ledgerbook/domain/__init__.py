"""Domain layer - Pure Python business logic."""

from ledgerbook.domain.classifier import BalanceClassifier, balance_type, get_category, is_debit_nature
from ledgerbook.domain.dates import financial_years, resolve_date_range
from ledgerbook.domain.entities import Invoice, InvoiceLine, Item, Ledger, StockTransaction, Voucher, VoucherEntry
from ledgerbook.domain.services import (
    BalanceService,
    IInvoiceRepository,
    IItemRepository,
    ILedgerRepository,
    IStockTransactionRepository,
    IVoucherRepository,
    LedgerActivity,
)
from ledgerbook.domain.value_objects import (
    BalanceType,
    DateRange,
    LedgerCategory,
    LedgerType,
    VoucherType,
)
