"""Infrastructure layer."""

from ledgerbook.infrastructure.database import SessionLocal, get_db, init_db
from ledgerbook.infrastructure.database.models import (
    Invoice,
    InvoiceLine,
    Item,
    Ledger,
    StockTransaction,
    Voucher,
    VoucherEntry,
)
